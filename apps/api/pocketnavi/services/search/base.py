"""Types shared across the search pipeline: candidates, match pages and the request deadline."""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Literal, Sequence

from pocketnavi.domain import Building

MatchPath = Literal["fulltext", "predicate", "fallback", "empty"]

# Smallest timeout handed to a store call once the deadline is nearly spent
_MIN_CALL_TIMEOUT = 0.05


@dataclass(frozen=True)
class Candidate:
    """A matched building and the store rank, when the store produced one."""
    building: Building
    rank: float | None = None

    @property
    def building_id(self) -> int | str:
        return self.building.building_id


@dataclass
class MatchPage:
    candidates: list[Candidate] = field(default_factory=list)
    total: int = 0
    ranked: bool = False
    path: MatchPath = "empty"

    @classmethod
    def empty(cls) -> "MatchPage":
        return cls()


class Deadline:
    """Wall-clock budget shared by every store call made for one search request."""

    def __init__(self, seconds: float, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.expires_at = clock() + max(0.0, seconds)

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def cap(self, timeout: float) -> float:
        """Per-call timeout bounded by what is left of the budget."""
        return max(_MIN_CALL_TIMEOUT, min(timeout, self.remaining()))


class DeadlineExceeded(asyncio.TimeoutError):
    """Outcome recorded for a call cancelled because the request deadline passed."""


async def gather_within(
    calls: Sequence[Callable[[], Awaitable[Any]]],
    *,
    semaphore: asyncio.Semaphore,
    deadline: Deadline,
) -> list[Any]:
    """Run calls concurrently (bounded by `semaphore`) until `deadline`.

    Returns one outcome per call, in call order: the call's result, the exception it raised,
    or DeadlineExceeded for calls cancelled at the deadline.
    """
    if not calls:
        return []

    async def _bounded(call: Callable[[], Awaitable[Any]]) -> Any:
        async with semaphore:
            return await call()

    tasks = [asyncio.create_task(_bounded(c)) for c in calls]
    _done, pending = await asyncio.wait(tasks, timeout=deadline.remaining())
    for t in pending:
        t.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    outcomes: list[Any] = []
    for t in tasks:
        if t in pending or t.cancelled():
            outcomes.append(DeadlineExceeded("cancelled at request deadline"))
        elif t.exception() is not None:
            outcomes.append(t.exception())
        else:
            outcomes.append(t.result())
    return outcomes
