"""Unit tests for ShareLedgerRepository using MagicMock AsyncSession."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError

from src.sf_ledger.domain.models import ShareReservation
from src.sf_ledger.infrastructure.persistence import (
    ShareLedgerRepository,
    is_transient_db_error,
)


def _state_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "PRJ-1")
    row.sold_shares = kwargs.get("sold_shares", 10)
    row.available_shares = kwargs.get("available_shares", 100)
    row.price_per_share = kwargs.get("price_per_share", 1000)
    row.version = kwargs.get("version", 3)
    return row


def _reservation_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "rsv_1")
    row.project_id = "PRJ-1"
    row.buyer_id = kwargs.get("buyer_id", "buyer-1")
    row.shares = 4
    row.price_per_share = 1000
    row.sold_shares_after = 14
    row.created_at = datetime.now(UTC)
    return row


def _result(fetchone=None, fetchall=None):
    result_mock = MagicMock()
    result_mock.fetchone.return_value = fetchone
    result_mock.fetchall.return_value = fetchall or []
    return result_mock


@pytest.fixture
def db():
    return MagicMock()


class TestGetShareState:
    async def test_found(self, db):
        db.execute = AsyncMock(return_value=_result(fetchone=_state_row()))

        state = await ShareLedgerRepository().get_share_state(db, "PRJ-1")

        assert state is not None
        assert state.remaining_shares == 90
        assert state.version == 3

    async def test_missing(self, db):
        db.execute = AsyncMock(return_value=_result())

        assert await ShareLedgerRepository().get_share_state(db, "PRJ-X") is None


class TestCompareAndSetSold:
    async def test_applied(self, db):
        db.execute = AsyncMock(
            return_value=_result(fetchone=_state_row(sold_shares=14, version=4))
        )

        state = await ShareLedgerRepository().compare_and_set_sold(db, "PRJ-1", 3, 14)

        assert state is not None
        assert state.sold_shares == 14
        params = db.execute.call_args.args[1]
        assert params == {"project_id": "PRJ-1", "expected_version": 3, "new_sold": 14}

    async def test_version_moved_returns_none(self, db):
        db.execute = AsyncMock(return_value=_result())

        assert await ShareLedgerRepository().compare_and_set_sold(db, "PRJ-1", 3, 14) is None

    def test_update_guards_version_and_bound(self):
        from src.sf_ledger.infrastructure.persistence import _CAS_SOLD_SHARES_SQL

        sql = str(_CAS_SOLD_SHARES_SQL)
        assert "version = :expected_version" in sql
        assert ":new_sold <= available_shares" in sql
        assert "RETURNING" in sql


class TestReservations:
    async def test_insert_binds_all_columns(self, db):
        db.execute = AsyncMock()
        reservation = ShareReservation(
            id="rsv_1",
            project_id="PRJ-1",
            buyer_id="buyer-1",
            shares=4,
            price_per_share=1000,
            sold_shares_after=14,
            created_at=datetime.now(UTC),
        )

        await ShareLedgerRepository().insert_reservation(db, reservation)

        params = db.execute.call_args.args[1]
        assert params["id"] == "rsv_1"
        assert params["price_per_share"] == 1000
        assert params["sold_shares_after"] == 14

    async def test_get(self, db):
        db.execute = AsyncMock(return_value=_result(fetchone=_reservation_row()))

        reservation = await ShareLedgerRepository().get_reservation(db, "rsv_1")

        assert reservation is not None
        assert reservation.shares == 4

    async def test_list_unrecorded(self, db):
        rows = [_reservation_row(id=f"rsv_{i}") for i in range(2)]
        db.execute = AsyncMock(return_value=_result(fetchall=rows))

        reservations = await ShareLedgerRepository().list_unrecorded_reservations(db, 50)

        assert [r.id for r in reservations] == ["rsv_0", "rsv_1"]
        assert db.execute.call_args.args[1] == {"limit": 50}


class TestIsTransientDbError:
    @staticmethod
    def _error(exc_type, sqlstate):
        orig = Exception("driver")
        orig.sqlstate = sqlstate
        return exc_type("stmt", {}, orig)

    @pytest.mark.parametrize("sqlstate", ["40001", "40P01", "55P03"])
    def test_transient(self, sqlstate):
        assert is_transient_db_error(self._error(DBAPIError, sqlstate))

    def test_check_violation_is_not_transient(self):
        assert not is_transient_db_error(self._error(IntegrityError, "23514"))

    def test_non_db_error(self):
        assert not is_transient_db_error(RuntimeError("boom"))
