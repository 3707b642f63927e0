# src/sf_admin/application/service.py
"""Reconciliation service for PartialFailure outcomes.

A PartialFailure leaves a share_reservations row with no matching investment.
Operators list those, check the share invariants, and repair a reservation by
writing its missing investment from the price captured at reservation time.
Nothing here calls ShareLedger.reserve or touches sold_shares.
"""
import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_common.datetime_utils import utc_now
from src.sf_common.enums import PaymentStatus
from src.sf_common.errors import (
    ReservationAlreadyRecordedError,
    ReservationNotFoundError,
    ValidationError,
)
from src.sf_common.id_generator import new_investment_id
from src.sf_common.money import share_amount
from src.sf_investment.application.schemas import InvestmentResponse
from src.sf_investment.domain.models import Investment
from src.sf_investment.domain.repository import InvestmentRepositoryProtocol
from src.sf_investment.infrastructure.persistence import InvestmentRepository
from src.sf_ledger.domain.repository import ShareLedgerRepositoryProtocol
from src.sf_ledger.infrastructure.persistence import ShareLedgerRepository

logger = logging.getLogger(__name__)

_SHARE_TOTALS_SQL = text("""
    SELECT p.id,
           p.sold_shares,
           p.available_shares,
           COALESCE(SUM(r.shares), 0) AS reserved_total
    FROM projects p
    LEFT JOIN share_reservations r ON r.project_id = p.id
    GROUP BY p.id, p.sold_shares, p.available_shares
    ORDER BY p.id
""")


class ReconciliationService:
    def __init__(
        self,
        ledger_repo: ShareLedgerRepositoryProtocol | None = None,
        investment_repo: InvestmentRepositoryProtocol | None = None,
    ) -> None:
        self._ledger_repo: ShareLedgerRepositoryProtocol = ledger_repo or ShareLedgerRepository()
        self._investments: InvestmentRepositoryProtocol = (
            investment_repo or InvestmentRepository()
        )

    async def list_unrecorded_reservations(
        self, db: AsyncSession, limit: int = 100
    ) -> list[dict[str, Any]]:
        reservations = await self._ledger_repo.list_unrecorded_reservations(db, limit)
        return [
            {
                "reservation_id": r.id,
                "project_id": r.project_id,
                "buyer_id": r.buyer_id,
                "shares": r.shares,
                "price_per_share": r.price_per_share,
                "amount": share_amount(r.shares, r.price_per_share),
                "created_at": r.created_at.isoformat(),
            }
            for r in reservations
        ]

    async def verify_share_invariants(self, db: AsyncSession) -> dict[str, object]:
        """Per project: 0 <= sold <= available and sold == journalled total."""
        violations: list[str] = []
        rows = (await db.execute(_SHARE_TOTALS_SQL)).fetchall()
        for row in rows:
            if not (0 <= row.sold_shares <= row.available_shares):
                violations.append(
                    f"{row.id}: sold_shares={row.sold_shares} outside [0, {row.available_shares}]"
                )
            if row.sold_shares != int(row.reserved_total):
                violations.append(
                    f"{row.id}: sold_shares={row.sold_shares} != "
                    f"journalled reservations={int(row.reserved_total)}"
                )
        for v in violations:
            logger.error("share invariant violated: %s", v)
        return {"ok": len(violations) == 0, "projects_checked": len(rows), "violations": violations}

    async def repair_reservation(
        self, db: AsyncSession, reservation_id: str
    ) -> InvestmentResponse:
        reservation = await self._ledger_repo.get_reservation(db, reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)
        existing = await self._investments.get_by_reservation_id(db, reservation_id)
        if existing is not None:
            raise ReservationAlreadyRecordedError(reservation_id, existing.id)
        if reservation.buyer_id is None:
            raise ValidationError(
                f"Reservation {reservation_id} has no buyer; cannot build an investment"
            )

        investment = Investment(
            id=new_investment_id(),
            project_id=reservation.project_id,
            buyer_id=reservation.buyer_id,
            reservation_id=reservation.id,
            shares_purchased=reservation.shares,
            amount_invested=share_amount(reservation.shares, reservation.price_per_share),
            payment_status=PaymentStatus.COMPLETED.value,
            created_at=utc_now(),
        )
        try:
            await self._investments.insert_investment(db, investment)
            await db.commit()
        except IntegrityError:
            # Another repair (or the detached purchase write) got there first
            await db.rollback()
            winner = await self._investments.get_by_reservation_id(db, reservation_id)
            raise ReservationAlreadyRecordedError(
                reservation_id, winner.id if winner else "unknown"
            ) from None
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "reconciled reservation %s as investment %s", reservation_id, investment.id
        )
        return InvestmentResponse.from_domain(investment)
