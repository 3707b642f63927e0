"""Concurrent reserve() calls against one in-memory pool.

The store yields between the read and the CAS write, so these runs
interleave the way concurrent requests do against PostgreSQL.
"""

import asyncio
import random
from unittest.mock import AsyncMock

from src.sf_common.errors import SharesUnavailableError, TransientConflictError
from src.sf_ledger.application.service import ShareLedger
from tests.unit.factories import InMemoryShareStore, make_project


async def _reserve_all(
    ledger: ShareLedger, project_id: str, requests: list[int]
) -> list[object]:
    return await asyncio.gather(
        *(ledger.reserve(AsyncMock(), project_id, n, buyer_id=f"b{i}") for i, n in enumerate(requests)),
        return_exceptions=True,
    )


class TestNoOversell:
    async def test_two_and_three_racing_for_last_two(self, store: InMemoryShareStore) -> None:
        store.add(make_project("PRJ-1", available=10, sold=8))
        ledger = ShareLedger(repo=store, max_attempts=10)

        results = await _reserve_all(ledger, "PRJ-1", [2, 3])

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        assert len(successes) == 1
        assert successes[0].reserved_shares == 2
        assert len(failures) == 1
        assert isinstance(failures[0], SharesUnavailableError)
        assert store.sold("PRJ-1") == 10
        assert store.projects["PRJ-1"].status == "funded"

    async def test_invariant_holds_under_many_buyers(self, store: InMemoryShareStore) -> None:
        store.add(make_project("PRJ-1", available=50))
        ledger = ShareLedger(repo=store, max_attempts=100)
        rng = random.Random(42)
        requests = [rng.randint(1, 5) for _ in range(60)]

        results = await _reserve_all(ledger, "PRJ-1", requests)

        reserved = sum(r.reserved_shares for r in results if not isinstance(r, Exception))
        assert store.sold("PRJ-1") <= 50
        assert store.sold("PRJ-1") == reserved
        assert sum(r.shares for r in store.reservations) == reserved
        for r in results:
            if isinstance(r, Exception):
                assert isinstance(r, (SharesUnavailableError, TransientConflictError))
        # Interleaving actually happened
        assert store.cas_conflicts > 0

    async def test_sold_after_values_are_a_total_order(self, store: InMemoryShareStore) -> None:
        store.add(make_project("PRJ-1", available=1000))
        ledger = ShareLedger(repo=store, max_attempts=100)

        await _reserve_all(ledger, "PRJ-1", [1] * 40)

        after = sorted(r.sold_shares_after for r in store.reservations)
        assert after == list(range(1, len(after) + 1))

    async def test_low_attempt_limit_surfaces_transient_conflict(
        self, store: InMemoryShareStore
    ) -> None:
        store.add(make_project("PRJ-1", available=1000))
        ledger = ShareLedger(repo=store, max_attempts=1)

        results = await _reserve_all(ledger, "PRJ-1", [1] * 10)

        conflicts = [r for r in results if isinstance(r, TransientConflictError)]
        successes = [r for r in results if not isinstance(r, Exception)]
        assert conflicts
        assert store.sold("PRJ-1") == len(successes)


class TestIndependentProjects:
    async def test_projects_do_not_contend(self, store: InMemoryShareStore) -> None:
        store.add(make_project("PRJ-A", available=10))
        store.add(make_project("PRJ-B", available=10))
        ledger = ShareLedger(repo=store, max_attempts=1)

        results = await asyncio.gather(
            ledger.reserve(AsyncMock(), "PRJ-A", 4),
            ledger.reserve(AsyncMock(), "PRJ-B", 6),
        )

        assert [r.sold_shares for r in results] == [4, 6]
        assert store.cas_conflicts == 0
