import json

import pytest

from sprest.search import (
    Search,
    SearchProperty,
    SearchPropertyValue,
    SearchQuery,
    SearchResponse,
    SearchSort,
)
from sprest.utils import RequestConfig

ENDPOINT = "https://contoso/_api/Search"


class FakeTransport:
    def __init__(self, response=b"{}"):
        self.response = response
        self.calls = []

    def get(self, url, config=None):
        self.calls.append(("GET", url, None, config))
        return self.response

    def post(self, url, body=None, config=None):
        self.calls.append(("POST", url, body, config))
        return self.response


ROW_CELLS = [
    {"Key": "Title", "Value": "Doc", "ValueType": "Edm.String"},
    {"Key": "Path", "Value": "https://contoso/doc", "ValueType": "Edm.String"},
]

MINIMAL = json.dumps(
    {"PrimaryQueryResult": {"RelevantResults": {"RowCount": 1, "Table": {"Rows": [{"Cells": ROW_CELLS}]}}}}
).encode()

VERBOSE = json.dumps(
    {
        "d": {
            "PrimaryQueryResult": {
                "RelevantResults": {
                    "RowCount": 1,
                    "Table": {"Rows": {"results": [{"Cells": {"results": ROW_CELLS}}]}},
                }
            }
        }
    }
).encode()


def test_to_request_drops_empty_values_and_adds_metadata():
    request = SearchQuery(query_text="*", row_limit=10).to_request()
    assert request["__metadata"] == {"type": "Microsoft.Office.Server.Search.REST.SearchRequest"}
    assert request["Querytext"] == "*"
    assert request["RowLimit"] == 10
    assert "StartRow" not in request
    assert "QueryTemplate" not in request
    assert "SelectProperties" not in request
    assert request["EnableStemming"] is False


def test_to_request_wraps_lists_in_results():
    query = SearchQuery(
        query_text="*",
        select_properties=["Title", "Path"],
        sort_list=[SearchSort(property="Title", direction=1)],
        properties=[SearchProperty(name="x", value=SearchPropertyValue(str_val="v"))],
        refinement_filters=[],
    )
    request = query.to_request()
    assert request["SelectProperties"] == {"results": ["Title", "Path"]}
    assert request["SortList"] == {"results": [{"Property": "Title", "Direction": 1}]}
    assert request["Properties"]["results"][0]["Name"] == "x"
    assert request["Properties"]["results"][0]["Value"]["StrVal"] == "v"
    assert request["RefinementFilters"] == {"results": []}


def test_post_query_sends_request_body():
    transport = FakeTransport(MINIMAL)
    search = Search(transport, ENDPOINT, None)
    response = search.post_query(SearchQuery(query_text="*", row_limit=10))
    method, url, body, config = transport.calls[0]
    assert method == "POST"
    assert url == ENDPOINT + "/PostQuery"
    assert body.startswith(b'{ "request": ')
    payload = json.loads(body)
    assert payload["request"]["Querytext"] == "*"
    assert payload["request"]["RowLimit"] == 10
    assert config.headers["Accept"] == "application/json"
    assert config.headers["Content-Type"] == "application/json;odata=verbose;charset=utf-8"
    assert bytes(response) == MINIMAL


def test_post_query_keeps_custom_headers():
    transport = FakeTransport()
    config = RequestConfig(headers={"X-Custom": "1", "Accept": "application/xml"})
    Search(transport, ENDPOINT, config).post_query(SearchQuery(query_text="*"))
    sent = transport.calls[0][3]
    assert sent.headers["X-Custom"] == "1"
    assert sent.headers["Accept"] == "application/json"
    assert config.headers["Accept"] == "application/xml"


def test_get_query_builds_url():
    transport = FakeTransport()
    query = SearchQuery(query_text="*", row_limit=10, sort_list=[SearchSort("Title", 1)])
    Search(transport, ENDPOINT, None).get_query(query)
    method, url, _, _ = transport.calls[0]
    assert method == "GET"
    assert url == ENDPOINT + "/query?querytext='*'&sortlist='Title:1'&enabledsorting=true&rowlimit=10"


def test_get_query_requires_sort_list():
    with pytest.raises(ValueError):
        Search(FakeTransport(), ENDPOINT, None).get_query(SearchQuery(query_text="*"))
    assert FakeTransport().calls == []


def test_results_from_minimal_payload():
    rows = SearchResponse(MINIMAL).results()
    assert rows == [{cell["Key"]: cell["Value"] for cell in ROW_CELLS}]


def test_results_match_between_verbose_and_minimal():
    assert SearchResponse(VERBOSE).results() == SearchResponse(MINIMAL).results()


def test_data_typed_fields():
    data = SearchResponse(MINIMAL).data()
    relevant = data.primary_query_result.relevant_results
    assert relevant.row_count == 1
    assert relevant.rows[0][0].key == "Title"
    assert relevant.rows[0][0].value_type == "Edm.String"


def test_normalized_unwraps_verbose_and_keeps_minimal():
    assert SearchResponse(MINIMAL).normalized() == MINIMAL
    normalized = json.loads(SearchResponse(VERBOSE).normalized())
    assert "d" not in normalized
    assert normalized["PrimaryQueryResult"]["RelevantResults"]["Table"]["Rows"][0]["Cells"] == ROW_CELLS


def test_data_of_invalid_payload_is_empty():
    data = SearchResponse(b"not json").data()
    assert data.primary_query_result is None
    assert data.elapsed_time == 0


def test_results_without_relevant_table_raise():
    with pytest.raises(ValueError):
        SearchResponse(b"{}").results()
    with pytest.raises(ValueError):
        SearchResponse(b'{"PrimaryQueryResult": {"RelevantResults": {}}}').results()