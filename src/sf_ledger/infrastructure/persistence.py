"""ShareLedgerRepository - concrete implementation of ShareLedgerRepositoryProtocol.

The sold_shares increment is a compare-and-swap on projects.version:
UPDATE ... WHERE version = :expected_version AND :new_sold <= available_shares.
0 rows means another reservation committed first (or the bound would break).
A CHECK constraint (sold_shares <= available_shares) backs the invariant in DDL.

Transaction ownership: ShareLedger (application layer) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_ledger.domain.models import ShareReservation, ShareState

# SQLSTATEs that mean "lost a race, safe to retry with fresh state"
_TRANSIENT_SQLSTATES = frozenset({
    "40001",  # serialization_failure
    "40P01",  # deadlock_detected
    "55P03",  # lock_not_available
})

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_SHARE_STATE_SQL = text("""
    SELECT id, sold_shares, available_shares, price_per_share, version
    FROM projects
    WHERE id = :project_id
""")

_CAS_SOLD_SHARES_SQL = text("""
    UPDATE projects
    SET sold_shares = :new_sold,
        status = CASE
            WHEN status = 'active' AND :new_sold >= available_shares THEN 'funded'
            ELSE status
        END,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :project_id
      AND version = :expected_version
      AND :new_sold <= available_shares
    RETURNING id, sold_shares, available_shares, price_per_share, version
""")

_INSERT_RESERVATION_SQL = text("""
    INSERT INTO share_reservations
        (id, project_id, buyer_id, shares, price_per_share, sold_shares_after, created_at)
    VALUES
        (:id, :project_id, :buyer_id, :shares, :price_per_share, :sold_shares_after, :created_at)
""")

_RESERVATION_COLUMNS = """
    r.id, r.project_id, r.buyer_id, r.shares, r.price_per_share,
    r.sold_shares_after, r.created_at
"""

_GET_RESERVATION_SQL = text(f"""
    SELECT {_RESERVATION_COLUMNS}
    FROM share_reservations r
    WHERE r.id = :reservation_id
""")

_LIST_UNRECORDED_SQL = text(f"""
    SELECT {_RESERVATION_COLUMNS}
    FROM share_reservations r
    LEFT JOIN investments i ON i.reservation_id = r.id
    WHERE i.id IS NULL
    ORDER BY r.created_at ASC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_state(row: object) -> ShareState:
    return ShareState(
        project_id=row.id,  # type: ignore[attr-defined]
        sold_shares=row.sold_shares,  # type: ignore[attr-defined]
        available_shares=row.available_shares,  # type: ignore[attr-defined]
        price_per_share=row.price_per_share,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
    )


def _row_to_reservation(row: object) -> ShareReservation:
    return ShareReservation(
        id=row.id,  # type: ignore[attr-defined]
        project_id=row.project_id,  # type: ignore[attr-defined]
        buyer_id=row.buyer_id,  # type: ignore[attr-defined]
        shares=row.shares,  # type: ignore[attr-defined]
        price_per_share=row.price_per_share,  # type: ignore[attr-defined]
        sold_shares_after=row.sold_shares_after,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def is_transient_db_error(exc: BaseException) -> bool:
    """True for driver errors that signal a lost race rather than a bug."""
    if not isinstance(exc, DBAPIError):
        return False
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return sqlstate in _TRANSIENT_SQLSTATES


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ShareLedgerRepository:
    """Concrete repository - the only code that writes projects.sold_shares."""

    async def get_share_state(
        self, db: AsyncSession, project_id: str
    ) -> ShareState | None:
        result = await db.execute(_GET_SHARE_STATE_SQL, {"project_id": project_id})
        row = result.fetchone()
        return _row_to_state(row) if row else None

    async def compare_and_set_sold(
        self,
        db: AsyncSession,
        project_id: str,
        expected_version: int,
        new_sold_shares: int,
    ) -> ShareState | None:
        result = await db.execute(
            _CAS_SOLD_SHARES_SQL,
            {
                "project_id": project_id,
                "expected_version": expected_version,
                "new_sold": new_sold_shares,
            },
        )
        row = result.fetchone()
        return _row_to_state(row) if row else None

    async def insert_reservation(
        self, db: AsyncSession, reservation: ShareReservation
    ) -> None:
        await db.execute(
            _INSERT_RESERVATION_SQL,
            {
                "id": reservation.id,
                "project_id": reservation.project_id,
                "buyer_id": reservation.buyer_id,
                "shares": reservation.shares,
                "price_per_share": reservation.price_per_share,
                "sold_shares_after": reservation.sold_shares_after,
                "created_at": reservation.created_at,
            },
        )

    async def get_reservation(
        self, db: AsyncSession, reservation_id: str
    ) -> ShareReservation | None:
        result = await db.execute(_GET_RESERVATION_SQL, {"reservation_id": reservation_id})
        row = result.fetchone()
        return _row_to_reservation(row) if row else None

    async def list_unrecorded_reservations(
        self, db: AsyncSession, limit: int
    ) -> list[ShareReservation]:
        result = await db.execute(_LIST_UNRECORDED_SQL, {"limit": limit})
        return [_row_to_reservation(row) for row in result.fetchall()]
