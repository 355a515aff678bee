import httpx
import pytest

from pocketnavi.providers.predicates import AllOf, AnyOf, Contains, Equals, In
from pocketnavi.providers.rest import (
    RestRecordStore,
    escape_like,
    parse_content_range,
    predicate_to_params,
    quote_value,
)
from pocketnavi.providers.store import OrderBy, StoreError, StoreTimeoutError, StoreTransportError

pytestmark = pytest.mark.anyio


def _store(handler) -> RestRecordStore:
    return RestRecordStore("https://example.supabase.co", "anon-key", transport=httpx.MockTransport(handler))


def test_quote_value_only_quotes_reserved():
    assert quote_value("教会") == "教会"
    assert quote_value("St. Mary's") == '"St. Mary\'s"'
    assert quote_value('a"b') == '"a\\"b"'
    assert quote_value(12) == "12"


def test_predicate_to_params():
    assert predicate_to_params(Contains("title", "教会")) == [("title", "ilike.*教会*")]
    assert predicate_to_params(In("building_id", (1, 2))) == [("building_id", "in.(1,2)")]
    assert predicate_to_params(
        AnyOf((Contains("title", "Osaka"), Contains("titleEn", "Kita, Osaka")))
    ) == [("or", '(title.ilike.*Osaka*,titleEn.ilike."*Kita, Osaka*")')]
    assert predicate_to_params(
        AllOf((Equals("slug", "a"), AnyOf((Equals("x", 1), AllOf((Equals("y", 2), Equals("z", 3)))))))
    ) == [("slug", "eq.a"), ("or", "(x.eq.1,and(y.eq.2,z.eq.3))")]


def test_like_wildcards_in_user_text_are_literal():
    assert escape_like("100%_off") == "100\\%\\_off"
    assert escape_like("C:\\path") == "C:\\\\path"
    # PostgREST turns * into %, so the closest literal form is a one-character wildcard
    assert escape_like("a*b") == "a_b"
    assert predicate_to_params(Contains("title", "100%_")) == [("title", "ilike.*100\\%\\_*")]
    assert predicate_to_params(AnyOf((Contains("title", "50%"),))) == [("or", r'(title.ilike."*50\\%*")')]
    assert predicate_to_params(AnyOf((Contains("title", "a\\b"),))) == [("or", r'(title.ilike."*a\\\\b*")')]


@pytest.mark.parametrize(
    "header, expected",
    [("0-9/57", 57), ("*/0", 0), ("0-9/*", None), (None, None), ("garbage", None)],
)
def test_parse_content_range(header, expected):
    assert parse_content_range(header) == expected


async def test_query_builds_postgrest_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["headers"] = request.headers
        return httpx.Response(
            200,
            json=[{"building_id": 1, "title": "光の教会"}],
            headers={"Content-Range": "0-0/42"},
        )

    store = _store(handler)
    page = await store.query(
        "buildings_table_2",
        AnyOf((Contains("title", "教会"), Contains("titleEn", "church"))),
        ("building_id", "title"),
        limit=10,
        offset=20,
        order_by=(OrderBy("building_id"),),
        timeout=1.0,
    )
    await store.aclose()

    assert page.rows == [{"building_id": 1, "title": "光の教会"}]
    assert page.total == 42
    url = seen["url"]
    assert url.path == "/rest/v1/buildings_table_2"
    assert url.params["select"] == "building_id,title"
    assert url.params["or"] == "(title.ilike.*教会*,titleEn.ilike.*church*)"
    assert url.params["order"] == "building_id.asc"
    assert url.params["limit"] == "10"
    assert url.params["offset"] == "20"
    assert seen["headers"]["apikey"] == "anon-key"
    assert seen["headers"]["authorization"] == "Bearer anon-key"
    assert seen["headers"]["prefer"] == "count=exact"


async def test_total_is_estimated_without_content_range():
    rows = [{"building_id": i} for i in range(5)]
    store = _store(lambda request: httpx.Response(200, json=rows))
    full = await store.query("buildings_table_2", None, ("building_id",), limit=5, offset=10, timeout=1.0)
    assert full.total == 16
    partial = await store.query("buildings_table_2", None, ("building_id",), limit=10, offset=10, timeout=1.0)
    assert partial.total == 15
    await store.aclose()


async def test_non_success_status_is_transport_error():
    store = _store(lambda request: httpx.Response(500, json={"message": "boom"}))
    with pytest.raises(StoreTransportError):
        await store.query("buildings_table_2", None, ("building_id",), timeout=1.0)


async def test_undecodable_payload_is_transport_error():
    store = _store(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    with pytest.raises(StoreTransportError):
        await store.query("buildings_table_2", None, ("building_id",), timeout=1.0)


async def test_unexpected_shape_is_transport_error():
    store = _store(lambda request: httpx.Response(200, json={"rows": []}))
    with pytest.raises(StoreTransportError):
        await store.query("buildings_table_2", None, ("building_id",), timeout=1.0)


async def test_timeout_is_store_timeout_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(StoreTimeoutError):
        await _store(handler).query("buildings_table_2", None, ("building_id",), timeout=1.0)


async def test_connection_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(StoreTransportError) as exc:
        await _store(handler).query("buildings_table_2", None, ("building_id",), timeout=1.0)
    assert not isinstance(exc.value, StoreTimeoutError)


async def test_ranked_search_is_unsupported():
    store = _store(lambda request: httpx.Response(200, json=[]))
    assert store.supports_ranked_search is False
    with pytest.raises(StoreError):
        await store.search("church", 10, 0, timeout=1.0)


@pytest.mark.parametrize("payload", [[{"slug": "no-id"}], [["building_id", 1]], [None]])
async def test_rows_without_selected_columns_are_transport_error(payload):
    store = _store(lambda request: httpx.Response(200, json=payload))
    with pytest.raises(StoreTransportError):
        await store.query("buildings_table_2", None, ("building_id", "slug"), timeout=1.0)
    await store.aclose()


async def test_null_columns_are_accepted():
    store = _store(lambda request: httpx.Response(200, json=[{"building_id": 1, "slug": None}]))
    page = await store.query("buildings_table_2", None, ("building_id", "slug"), timeout=1.0)
    assert page.rows == [{"building_id": 1, "slug": None}]
    await store.aclose()
