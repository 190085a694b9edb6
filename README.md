# sprest

A fluent client layer for the SharePoint REST API. It builds endpoints,
OData query strings and JSON payloads, sends them through a transport, and
turns the responses into Python objects. It also has helpers for reading
CSOM responses of the managed metadata (taxonomy) service.

It has no runtime dependencies and needs Python 3.10 or later.

## Transport

Every API object sends its requests through a *transport*: an object with
the methods of `sprest.utils.Transport`:

- `get(url, config)`
- `post(url, body, config)`
- `update(url, body, config)` – a POST with `X-HTTP-Method: MERGE` and
  `IF-MATCH: *`
- `delete(url, config)` – a POST with `X-HTTP-Method: DELETE` and
  `IF-MATCH: *`

Each returns the raw response body as bytes.

`sprest.utils.Transport` itself sends requests with `urllib`. It adds
verbose OData `Accept` and `Content-Type` headers, then the headers given to
its constructor, then those of the request's `RequestConfig`. Its default
timeout is 30 seconds, and a `RequestConfig.timeout` overrides it. An HTTP
error status is raised as `RuntimeError` with the status code, the reason
and the response body. It does no authentication. Pass the authentication
headers (for example `{"Authorization": "Bearer token"}`) to its
constructor, or give it your own `urllib.request.OpenerDirector`. You can
also use any other object with the same four methods.

## Entry point

```python
from sprest.client import SharePoint
from sprest.utils import Transport

transport = Transport(headers={"Authorization": "Bearer token"})
sp = SharePoint(transport, "https://example.com/sites/site", None)

sp.to_url()          # "https://example.com/sites/site"
sp.site()            # sprest.site.Site
sp.search()          # sprest.search.Search
sp.profiles()        # sprest.profiles.Profiles
sp.utility()         # sprest.utility.Utility
sp.metadata()        # bytes of the $metadata document
```

Every API object takes an optional `sprest.utils.RequestConfig`, which
holds extra headers and an optional timeout for the requests it sends.

## Queryable objects

`Site`, `User`, `Users`, `Lists` and `RecycleBin` have chainable OData
modifiers: `select`, `expand`, `filter`, `top` and `order_by`. Each class
has only the modifiers that suit it. `to_url()` shows the URL that will be
requested, and `get()` fetches it:

```python
owner = sp.site().owner()              # sprest.users.User
resp = owner.select("Id,Title").get()  # sprest.users.UserResponse (bytes)
info = resp.data()                     # sprest.models.UserInfo
body = resp.normalized()               # verbose {"d": ...} unwrapped
```

Responses are `bytes` subclasses with `data()` and `normalized()`. For
collections (`UsersResponse`, `RecycleBinResponse`, `ListsResponse`),
`data()` gives one entry per item.

The modifiers can also be used on their own:

```python
from sprest.odata import ODataMods, to_url

mods = ODataMods().add_select("Select").add_expand("Expand").add_top(5)
to_url("https://example.com/_api/Web", mods)
# "https://example.com/_api/Web?%24expand=Expand&%24select=Select&%24top=5"
```

## Payload helpers

`sprest.utils` has the functions that handle the OData payload formats:

- `normalize_odata_item` and `normalize_odata_collection` unwrap verbose
  (`{"d": ...}`, `{"d": {"results": [...]}}`) and minimal
  (`{"value": [...]}`) responses into the same shape. They also flatten
  multi-lookup `{"results": [...]}` wrappers.
- `split_odata_collection` and `get_odata_collection_next_page_url` give
  the separate items of a collection and the link to its next page.
- `extract_entity_uri` reads `__metadata.id` or `odata.id`.
- `patch_metadata_type` and `patch_metadata_type_cb` add a
  `__metadata.type` to a payload that does not have one.
- `fix_dates_in_response` adds a `Z` zone to dates that have no zone.
- `trim_multiline`, `get_prior_endpoint`, `get_include_endpoint`,
  `get_include_endpoints`, `get_relative_url`, `check_get_relative_url`
  and `patch_config_headers` help to build endpoints, bodies and configs.

Typed models of the responses are in `sprest.models`: `SiteInfo`,
`UserInfo`, `RoleDefInfo`, `RecycleBinItemInfo`, `SubscriptionInfo`,
`TypedKeyValue`, `StringValue` and `DecodedURL`. Each has a `from_dict`
method.

## Permissions

```python
from sprest.permissions import BasePermissions, PermissionKind, has_permissions

perms = BasePermissions.from_dict({"High": "432", "Low": "1011030767"})
has_permissions(perms, PermissionKind.EDIT_LIST_ITEMS)   # True
```

`sprest.roles.Roles` breaks, resets and checks role inheritance, and adds
or removes role assignments. `sprest.roles.RoleDefinitions` looks up role
definitions by ID, by name or by `RoleTypeKind`, and lists them all.

## Search

```python
from sprest.search import SearchQuery

resp = sp.search().post_query(SearchQuery(query_text="*", row_limit=10))
rows = resp.results()   # list of {managed property: value} dicts
```

`post_query` leaves out empty values and wraps lists in `results`.
`get_query` needs at least one entry in `sort_list`, and raises
`ValueError` when there is none. `results()` raises `ValueError` when the
response has no relevant results table.

## Other APIs

- `sprest.lists.Lists`: query the lists of a web and create lists with
  `add`. `BaseTemplate` defaults to 100, and `AllowContentTypes` and
  `ContentTypesEnabled` default to false.
- `sprest.recycle_bin.RecycleBin` and `RecycleBinItem`: query recycled
  items and restore them.
- `sprest.subscriptions.Subscriptions` and `Subscription`: add, read,
  update and delete list webhook subscriptions. Expiration times are
  `datetime` values.
- `sprest.profiles.Profiles`: read user profiles and profile properties,
  set single- and multi-valued properties, and hide follow suggestions.
- `sprest.utility.Utility`: send e-mail described by `EmailProps`.
- `sprest.taxonomy`: `append_taxonomy_prop` and `trim_taxonomy_guid`, and
  `parse_csom_response`, `csom_child_items` and `csom_child_items_in_prop`
  for reading CSOM responses. `process_csom_query` calls a process-query
  function that you supply. It retries term save conflicts up to five
  times. Errors in a response raise `TaxonomyError`.

## What it does not do

- It does not authenticate. Authentication headers must come from you.
- It has no web object, and no objects for a single list, its items,
  fields, folders or files. `Lists` gives only the collection and `add`.
- It does not build CSOM request packages, and it does not send them to
  the process-query endpoint. The taxonomy module only reads the responses
  and retries through the function you give it. There are no objects for
  term stores, groups, sets or terms.
- It has no command-line tool.