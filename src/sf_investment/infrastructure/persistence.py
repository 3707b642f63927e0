"""InvestmentRepository - concrete implementation of InvestmentRepositoryProtocol.

Insert-only. reservation_id is UNIQUE, so one reservation can never produce
two investment rows, whether from a retry or from reconciliation.

Transaction ownership: the CALLER commits.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_investment.domain.models import Investment, PortfolioEntry

_INSERT_INVESTMENT_SQL = text("""
    INSERT INTO investments
        (id, project_id, buyer_id, reservation_id,
         shares_purchased, amount_invested, payment_status, created_at)
    VALUES
        (:id, :project_id, :buyer_id, :reservation_id,
         :shares_purchased, :amount_invested, :payment_status, :created_at)
""")

_INVESTMENT_COLUMNS = """
    i.id, i.project_id, i.buyer_id, i.reservation_id,
    i.shares_purchased, i.amount_invested, i.payment_status, i.created_at
"""

_GET_BY_RESERVATION_SQL = text(f"""
    SELECT {_INVESTMENT_COLUMNS}
    FROM investments i
    WHERE i.reservation_id = :reservation_id
""")

_LIST_BY_BUYER_SQL = text(f"""
    SELECT {_INVESTMENT_COLUMNS},
           p.title AS project_title,
           p.expected_roi_bps
    FROM investments i
    JOIN projects p ON p.id = i.project_id
    WHERE i.buyer_id = :buyer_id
    ORDER BY i.created_at DESC, i.id DESC
""")


def _row_to_investment(row: object) -> Investment:
    return Investment(
        id=row.id,  # type: ignore[attr-defined]
        project_id=row.project_id,  # type: ignore[attr-defined]
        buyer_id=row.buyer_id,  # type: ignore[attr-defined]
        reservation_id=row.reservation_id,  # type: ignore[attr-defined]
        shares_purchased=row.shares_purchased,  # type: ignore[attr-defined]
        amount_invested=row.amount_invested,  # type: ignore[attr-defined]
        payment_status=row.payment_status,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class InvestmentRepository:
    async def insert_investment(self, db: AsyncSession, investment: Investment) -> None:
        await db.execute(
            _INSERT_INVESTMENT_SQL,
            {
                "id": investment.id,
                "project_id": investment.project_id,
                "buyer_id": investment.buyer_id,
                "reservation_id": investment.reservation_id,
                "shares_purchased": investment.shares_purchased,
                "amount_invested": investment.amount_invested,
                "payment_status": investment.payment_status,
                "created_at": investment.created_at,
            },
        )

    async def get_by_reservation_id(
        self, db: AsyncSession, reservation_id: str
    ) -> Investment | None:
        result = await db.execute(_GET_BY_RESERVATION_SQL, {"reservation_id": reservation_id})
        row = result.fetchone()
        return _row_to_investment(row) if row else None

    async def list_by_buyer(
        self, db: AsyncSession, buyer_id: str
    ) -> list[PortfolioEntry]:
        result = await db.execute(_LIST_BY_BUYER_SQL, {"buyer_id": buyer_id})
        return [
            PortfolioEntry(
                investment=_row_to_investment(row),
                project_title=row.project_title,
                expected_roi_bps=row.expected_roi_bps,
            )
            for row in result.fetchall()
        ]
