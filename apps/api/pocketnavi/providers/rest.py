from typing import Any, Sequence

import httpx

from .predicates import AllOf, AnyOf, Contains, Equals, In, Predicate
from .store import (
    OrderBy,
    QueryPage,
    RankedPage,
    RecordStore,
    StoreError,
    StoreTimeoutError,
    StoreTransportError,
)

# Characters with meaning inside PostgREST logic trees; values containing them must be double-quoted
_RESERVED = set(',.:()"\\')


def quote_value(value: Any) -> str:
    s = str(value)
    if not any(ch in _RESERVED for ch in s):
        return s
    escaped = s.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def escape_like(value: str) -> str:
    """Make user text literal inside an ilike pattern.

    Backslash escapes `%`, `_` and itself. PostgREST turns every `*` into `%` before Postgres
    sees the pattern, so a literal `*` can only be approximated by the single-character wildcard.
    """
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return escaped.replace("*", "_")


def _like_pattern(value: str) -> str:
    return f"*{escape_like(value)}*"


def _inner(predicate: Predicate) -> str:
    """Render a predicate as an element of an or=(...) / and=(...) tree."""
    if isinstance(predicate, Contains):
        return f"{predicate.field}.ilike.{quote_value(_like_pattern(predicate.value))}"
    if isinstance(predicate, Equals):
        return f"{predicate.field}.eq.{quote_value(predicate.value)}"
    if isinstance(predicate, In):
        return f"{predicate.field}.in.({','.join(quote_value(v) for v in predicate.values)})"
    if isinstance(predicate, AnyOf):
        return f"or({','.join(_inner(p) for p in predicate.predicates)})"
    if isinstance(predicate, AllOf):
        return f"and({','.join(_inner(p) for p in predicate.predicates)})"
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def predicate_to_params(predicate: Predicate | None) -> list[tuple[str, str]]:
    """Translate a predicate to PostgREST query parameters (top-level params are ANDed)."""
    if predicate is None:
        return []
    if isinstance(predicate, Contains):
        return [(predicate.field, f"ilike.{_like_pattern(predicate.value)}")]
    if isinstance(predicate, Equals):
        return [(predicate.field, f"eq.{predicate.value}")]
    if isinstance(predicate, In):
        return [(predicate.field, f"in.({','.join(quote_value(v) for v in predicate.values)})")]
    if isinstance(predicate, AnyOf):
        return [("or", f"({','.join(_inner(p) for p in predicate.predicates)})")]
    if isinstance(predicate, AllOf):
        params: list[tuple[str, str]] = []
        for p in predicate.predicates:
            params.extend(predicate_to_params(p))
        return params
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def parse_content_range(header: str | None) -> int | None:
    """'0-9/57' -> 57, '*/0' -> 0, '0-9/*' or missing -> None."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        return None
    return int(total)


class RestRecordStore(RecordStore):
    """Filterable HTTP data API (PostgREST / Supabase REST). No native rank."""

    name = "rest"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        if not self.base_url.endswith("/rest/v1"):
            self.base_url = f"{self.base_url}/rest/v1"
        self.api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            transport=transport,
        )

    @property
    def supports_ranked_search(self) -> bool:
        return False

    async def search(self, query_text: str, limit: int, offset: int, *, timeout: float) -> RankedPage:
        raise StoreError("Ranked full-text search is not available on the data API.")

    async def query(
        self,
        table: str,
        predicate: Predicate | None,
        fields: Sequence[str],
        *,
        limit: int | None = None,
        offset: int = 0,
        order_by: Sequence[OrderBy] = (),
        timeout: float,
    ) -> QueryPage:
        params: list[tuple[str, str]] = [("select", ",".join(fields))]
        params.extend(predicate_to_params(predicate))
        if order_by:
            params.append(("order", ",".join(f"{o.field}.{'desc' if o.descending else 'asc'}" for o in order_by)))
        headers = {}
        if limit is not None:
            params.append(("limit", str(limit)))
            headers["Prefer"] = "count=exact"
        if offset:
            params.append(("offset", str(offset)))
        try:
            r = await self._client.get(f"/{table}", params=params, headers=headers, timeout=timeout)
            r.raise_for_status()
            try:
                data = r.json()
            except ValueError as e:
                raise StoreTransportError(f"Data API returned an undecodable payload for {table}.") from e
        except httpx.TimeoutException as e:
            raise StoreTimeoutError(f"Data API request to {table} timed out after {timeout}s.") from e
        except httpx.HTTPStatusError as e:
            raise StoreTransportError(
                f"Data API returned {e.response.status_code} for {table}."
            ) from e
        except httpx.RequestError as e:
            raise StoreTransportError(
                f"Data API unavailable (connection error) for {table}: {e}"
            ) from e
        if not isinstance(data, list):
            raise StoreTransportError(f"Data API returned unexpected response format for {table}.")
        # PostgREST returns every selected column (null when empty); anything else is malformed
        if any(not isinstance(row, dict) or any(f not in row for f in fields) for row in data):
            raise StoreTransportError(f"Data API returned rows without the selected columns for {table}.")
        rows = list(data)
        total = parse_content_range(r.headers.get("Content-Range"))
        if total is None and limit is not None:
            # No count available: estimate, signalling a further page when this one is full
            total = len(rows) + offset + (1 if len(rows) == limit else 0)
        return QueryPage(rows=rows, total=total)

    async def aclose(self) -> None:
        await self._client.aclose()
