"""Search query API: query models, result tables and the search endpoint."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from sprest.models import TypedKeyValue
from sprest.utils import (
    RequestConfig,
    Transport,
    _dumps,
    normalize_odata_item,
    patch_config_headers,
    trim_multiline,
)

_REQUEST_TYPE = "Microsoft.Office.Server.Search.REST.SearchRequest"

_SEARCH_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json;odata=verbose;charset=utf-8",
}


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _key_values(value: Any) -> list[TypedKeyValue]:
    if not isinstance(value, list):
        return []
    return [TypedKeyValue.from_dict(item) for item in value if isinstance(item, Mapping)]


def _json_value(value: Any) -> Any:
    """Convert a query value to its JSON form."""
    as_json = getattr(value, "_as_json", None)
    if as_json is not None:
        return as_json()
    if isinstance(value, list):
        return [_json_value(item) for item in value]
    return value


@dataclass
class SearchSort:
    """Sort property; direction is 0 ascending, 1 descending, 2 FQL formula."""

    property: str = ""
    direction: int = 0

    def _as_json(self) -> dict[str, Any]:
        return {"Property": self.property, "Direction": self.direction}


@dataclass
class SearchPropertyValue:
    """Value of a search query property."""

    str_val: str = ""
    bool_val: bool = False
    int_val: int = 0
    str_array: list[str] | None = None
    query_property_value_type_index: int = 0

    def _as_json(self) -> dict[str, Any]:
        return {
            "StrVal": self.str_val,
            "BoolVal": self.bool_val,
            "IntVal": self.int_val,
            "StrArray": None if self.str_array is None else list(self.str_array),
            "QueryPropertyValueTypeIndex": self.query_property_value_type_index,
        }


@dataclass
class SearchProperty:
    """Named property used to configure a search query."""

    name: str = ""
    value: SearchPropertyValue = field(default_factory=SearchPropertyValue)

    def _as_json(self) -> dict[str, Any]:
        return {"Name": self.name, "Value": self.value._as_json()}


@dataclass
class SearchReorderingRule:
    """Rule that boosts or demotes results matching a condition."""

    match_value: str = ""
    boost: int = 0
    match_type: int = 0

    def _as_json(self) -> dict[str, Any]:
        return {"MatchValue": self.match_value, "Boost": self.boost, "MatchType": self.match_type}


def _q(key: str, default: Any = None) -> Any:
    return field(default=default, metadata={"json": key})


@dataclass
class SearchQuery:
    """Search request parameters; list fields left as ``None`` are not sent."""

    query_text: str = _q("Querytext", "")
    query_template: str = _q("QueryTemplate", "")
    enable_interleaving: bool = _q("EnableInterleaving", False)
    enable_stemming: bool = _q("EnableStemming", False)
    trim_duplicates: bool = _q("TrimDuplicates", False)
    enable_nicknames: bool = _q("EnableNicknames", False)
    enable_fql: bool = _q("EnableFQL", False)
    enable_phonetic: bool = _q("EnablePhonetic", False)
    bypass_result_types: bool = _q("BypassResultTypes", False)
    process_best_bets: bool = _q("ProcessBestBets", False)
    enable_query_rules: bool = _q("EnableQueryRules", False)
    enable_sorting: bool = _q("EnableSorting", False)
    generate_block_rank_log: bool = _q("GenerateBlockRankLog", False)
    source_id: str = _q("SourceId", "")
    ranking_model_id: str = _q("RankingModelId", "")
    start_row: int = _q("StartRow", 0)
    row_limit: int = _q("RowLimit", 0)
    rows_per_page: int = _q("RowsPerPage", 0)
    select_properties: list[str] | None = _q("SelectProperties")
    culture: int = _q("Culture", 0)
    refinement_filters: list[str] | None = _q("RefinementFilters")
    refiners: str = _q("Refiners", "")
    hidden_constraints: str = _q("HiddenConstraints", "")
    timeout: int = _q("Timeout", 0)
    hit_highlighted_properties: list[str] | None = _q("HitHighlightedProperties")
    client_type: str = _q("ClientType", "")
    personalization_data: str = _q("PersonalizationData", "")
    results_url: str = _q("ResultsUrl", "")
    query_tag: str = _q("QueryTag", "")
    process_personal_favorites: bool = _q("ProcessPersonalFavorites", False)
    query_template_properties_url: str = _q("QueryTemplatePropertiesUrl", "")
    hit_highlighted_multivalue_property_limit: int = _q(
        "HitHighlightedMultivaluePropertyLimit", 0
    )
    enable_ordering_hit_highlighted_property: bool = _q(
        "EnableOrderingHitHighlightedProperty", False
    )
    collapse_specification: str = _q("CollapseSpecification", "")
    ui_language: int = _q("UIlanguage", 0)
    desired_snippet_length: int = _q("DesiredSnippetLength", 0)
    max_snippet_length: int = _q("MaxSnippetLength", 0)
    summary_length: int = _q("SummaryLength", 0)
    sort_list: list[SearchSort] | None = _q("SortList")
    properties: list[SearchProperty] | None = _q("Properties")
    reordering_rules: list[SearchReorderingRule] | None = _q("ReorderingRules")

    def to_request(self) -> dict[str, Any]:
        """Verbose OData request object: empty values dropped, lists wrapped in ``results``."""
        request: dict[str, Any] = {"__metadata": {"type": _REQUEST_TYPE}}
        for spec in fields(self):
            key = spec.metadata["json"]
            value = getattr(self, spec.name)
            if value is None:
                continue
            if isinstance(value, list):
                request[key] = {"results": _json_value(value)}
            elif isinstance(value, bool):
                request[key] = value
            elif isinstance(value, (int, float)):
                if value != 0:
                    request[key] = value
            elif isinstance(value, str):
                if value:
                    request[key] = value
            else:
                request[key] = _json_value(value)
        return request


def _rows(value: Any) -> list[list[TypedKeyValue]] | None:
    if not isinstance(value, Mapping):
        return None
    rows = value.get("Rows")
    if not isinstance(rows, list):
        return []
    return [_key_values(row.get("Cells")) if isinstance(row, Mapping) else [] for row in rows]


def _refiners(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    result = []
    for refiner in value:
        if not isinstance(refiner, Mapping):
            continue
        entries = refiner.get("Entries")
        result.append(
            {
                "Name": _as_str(refiner.get("Name")),
                "Entries": [
                    {
                        name: _as_str(entry.get(name))
                        for name in (
                            "RefinementCount",
                            "RefinementName",
                            "RefinementToken",
                            "RefinementValue",
                        )
                    }
                    for entry in (entries if isinstance(entries, list) else [])
                    if isinstance(entry, Mapping)
                ],
            }
        )
    return result


@dataclass
class ResultTable:
    """One table of search results; ``rows`` is ``None`` when the table is absent."""

    group_template_id: str = ""
    item_template_id: str = ""
    result_title: str = ""
    result_title_url: str = ""
    row_count: int = 0
    table_type: str = ""
    total_rows: int = 0
    total_rows_including_duplicates: int = 0
    properties: list[TypedKeyValue] = field(default_factory=list)
    rows: list[list[TypedKeyValue]] | None = None
    refiners: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResultTable:
        """Build from a JSON mapping."""
        return cls(
            group_template_id=_as_str(data.get("GroupTemplateId")),
            item_template_id=_as_str(data.get("ItemTemplateId")),
            result_title=_as_str(data.get("ResultTitle")),
            result_title_url=_as_str(data.get("ResultTitleUrl")),
            row_count=_as_int(data.get("RowCount")),
            table_type=_as_str(data.get("TableType")),
            total_rows=_as_int(data.get("TotalRows")),
            total_rows_including_duplicates=_as_int(data.get("TotalRowsIncludingDuplicates")),
            properties=_key_values(data.get("Properties")),
            rows=_rows(data.get("Table")),
            refiners=_refiners(data.get("Refiners")),
        )


def _table(value: Any) -> ResultTable | None:
    return ResultTable.from_dict(value) if isinstance(value, Mapping) else None


@dataclass
class ResultTableCollection:
    """Result tables of one query."""

    query_errors: dict[str, Any] | None = None
    query_id: str = ""
    query_rule_id: str = ""
    custom_results: ResultTable | None = None
    refinement_results: ResultTable | None = None
    relevant_results: ResultTable | None = None
    special_term_results: ResultTable | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResultTableCollection:
        """Build from a JSON mapping."""
        errors = data.get("QueryErrors")
        return cls(
            query_errors=dict(errors) if isinstance(errors, Mapping) else None,
            query_id=_as_str(data.get("QueryId")),
            query_rule_id=_as_str(data.get("QueryRuleId")),
            custom_results=_table(data.get("CustomResults")),
            refinement_results=_table(data.get("RefinementResults")),
            relevant_results=_table(data.get("RelevantResults")),
            special_term_results=_table(data.get("SpecialTermResults")),
        )


def _collection(value: Any) -> ResultTableCollection | None:
    return ResultTableCollection.from_dict(value) if isinstance(value, Mapping) else None


@dataclass
class SearchResults:
    """Search response body."""

    elapsed_time: int = 0
    primary_query_result: ResultTableCollection | None = None
    properties: list[TypedKeyValue] = field(default_factory=list)
    secondary_query_results: list[ResultTableCollection | None] = field(default_factory=list)
    spelling_suggestion: str = ""
    triggered_rules: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchResults:
        """Build from a JSON mapping."""
        secondary = data.get("SecondaryQueryResults")
        rules = data.get("TriggeredRules")
        return cls(
            elapsed_time=_as_int(data.get("ElapsedTime")),
            primary_query_result=_collection(data.get("PrimaryQueryResult")),
            properties=_key_values(data.get("Properties")),
            secondary_query_results=[
                _collection(item) for item in (secondary if isinstance(secondary, list) else [])
            ],
            spelling_suggestion=_as_str(data.get("SpellingSuggestion")),
            triggered_rules=list(rules) if isinstance(rules, list) else [],
        )


class SearchResponse(bytes):
    """Raw search response body with typed accessors."""

    def data(self) -> SearchResults:
        """Typed results; an unreadable body gives empty results."""
        try:
            parsed = json.loads(normalize_odata_item(bytes(self)))
        except ValueError:
            return SearchResults()
        if not isinstance(parsed, Mapping):
            return SearchResults()
        return SearchResults.from_dict(parsed)

    def normalized(self) -> bytes:
        """Body with the verbose OData wrapper removed."""
        return normalize_odata_item(bytes(self))

    def results(self) -> list[dict[str, str]]:
        """Relevant result rows as key-to-value mappings."""
        primary = self.data().primary_query_result
        relevant = primary.relevant_results if primary is not None else None
        if relevant is None or relevant.rows is None:
            raise ValueError("search response has no relevant results table")
        return [{cell.key: cell.value for cell in row} for row in relevant.rows]


class Search:
    """Search API endpoint."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config

    def get_query(self, query: SearchQuery) -> SearchResponse:
        """Run a query via GET, sorted by the first entry of ``sort_list``."""
        if not query.sort_list:
            raise ValueError("GET search query requires at least one sort property")
        first = query.sort_list[0]
        sort_list = f"{first.property}:{first.direction}"
        endpoint = (
            f"{self.endpoint}/query?querytext='{query.query_text}'"
            f"&sortlist='{sort_list}'&enabledsorting=true&rowlimit={query.row_limit}"
        )
        config = patch_config_headers(self.config, _SEARCH_HEADERS)
        return SearchResponse(self.transport.get(endpoint, config))

    def post_query(self, query: SearchQuery) -> SearchResponse:
        """Run a query via POST."""
        endpoint = f"{self.endpoint}/PostQuery"
        request = _dumps(query.to_request()).decode("utf-8")
        body = trim_multiline('{ "request": ' + request + "}").encode("utf-8")
        config = patch_config_headers(self.config, _SEARCH_HEADERS)
        return SearchResponse(self.transport.post(endpoint, body, config))