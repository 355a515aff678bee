"""Architect credits for a page of buildings.

building -> building_architects (group) -> architect_compositions (members, order_index)
-> individual_architects. Three batched hops per page, never one call per building.
"""

import logging
from collections import defaultdict
from typing import Iterable

from pocketnavi.core.constants import (
    ARCHITECT_COMPOSITIONS_TABLE,
    ARCHITECT_CREDIT_COLUMNS,
    BUILDING_ARCHITECTS_TABLE,
    INDIVIDUAL_ARCHITECTS_TABLE,
)
from pocketnavi.domain import ArchitectCredit
from pocketnavi.providers.predicates import in_
from pocketnavi.providers.store import OrderBy, RecordStore, StoreError
from pocketnavi.serializers import row_to_credit

from .base import Deadline

logger = logging.getLogger(__name__)

_LINK_ORDER = (OrderBy("building_id"), OrderBy("architect_id"))
_COMPOSITION_ORDER = (OrderBy("architect_id"), OrderBy("order_index"))


def _unique(values: Iterable) -> list:
    seen: set[str] = set()
    out = []
    for v in values:
        if v is None or str(v) in seen:
            continue
        seen.add(str(v))
        out.append(v)
    return out


class RelationResolver:
    def __init__(self, store: RecordStore, timeout: float):
        self.store = store
        self.timeout = timeout

    async def resolve(
        self, building_ids: Iterable[int | str], deadline: Deadline | None = None
    ) -> dict[str, list[ArchitectCredit]]:
        """Credits keyed by str(building_id), in group-credit order then order_index.

        Buildings with no credits (or when a hop fails) map to []. With a deadline, every hop
        is capped by the time left in it.
        """
        ids = _unique(building_ids)
        out: dict[str, list[ArchitectCredit]] = {str(i): [] for i in ids}
        if not ids:
            return out
        try:
            return await self._resolve(ids, out, deadline)
        except StoreError as e:
            logger.warning("Architect resolution failed for %s buildings: %s", len(ids), e)
            return {k: [] for k in out}

    async def _resolve(
        self, ids: list, out: dict[str, list[ArchitectCredit]], deadline: Deadline | None
    ) -> dict[str, list[ArchitectCredit]]:
        def _timeout() -> float:
            return deadline.cap(self.timeout) if deadline is not None else self.timeout

        links = await self.store.query(
            BUILDING_ARCHITECTS_TABLE,
            in_("building_id", ids),
            ("building_id", "architect_id"),
            order_by=_LINK_ORDER,
            timeout=_timeout(),
        )
        groups_by_building: dict[str, list] = defaultdict(list)
        for row in links.rows:
            groups_by_building[str(row.get("building_id"))].append(row.get("architect_id"))
        group_ids = _unique(g for groups in groups_by_building.values() for g in groups)
        if not group_ids:
            return out

        compositions = await self.store.query(
            ARCHITECT_COMPOSITIONS_TABLE,
            in_("architect_id", group_ids),
            ("architect_id", "individual_architect_id", "order_index"),
            order_by=_COMPOSITION_ORDER,
            timeout=_timeout(),
        )
        members: dict[str, list[tuple[int, int | str]]] = defaultdict(list)
        for row in compositions.rows:
            members[str(row.get("architect_id"))].append(
                (int(row.get("order_index") or 0), row.get("individual_architect_id"))
            )
        individual_ids = _unique(i for ms in members.values() for _, i in ms)
        if not individual_ids:
            return out

        individuals = await self.store.query(
            INDIVIDUAL_ARCHITECTS_TABLE,
            in_("individual_architect_id", individual_ids),
            ARCHITECT_CREDIT_COLUMNS,
            timeout=_timeout(),
        )
        credits = {str(r.get("individual_architect_id")): row_to_credit(r) for r in individuals.rows}

        for building_key in out:
            for group_id in groups_by_building.get(building_key, []):
                for _, individual_id in sorted(members.get(str(group_id), []), key=lambda m: m[0]):
                    credit = credits.get(str(individual_id))
                    if credit is not None:
                        out[building_key].append(credit)
        return out
