"""ShareLedger - single owner of projects.sold_shares.

reserve() is serializable per project via optimistic compare-and-swap:
each attempt re-reads (sold, available, version) inside a fresh transaction,
checks capacity against that fresh state, and writes only if the version
is unchanged. A lost race rolls back and re-reads; nothing is ever written
from a stale value. Different projects never contend.

Each reserve() call owns its transaction: success commits exactly one
sold_shares increment plus its journal row; every failure rolls back.
"""

import logging

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sf_common.datetime_utils import utc_now
from src.sf_common.errors import (
    InternalError,
    ProjectNotFoundError,
    SharesUnavailableError,
    TransientConflictError,
    ValidationError,
)
from src.sf_common.id_generator import new_reservation_id
from src.sf_ledger.domain.models import ReservationResult, ShareReservation, ShareState
from src.sf_ledger.domain.repository import ShareLedgerRepositoryProtocol
from src.sf_ledger.infrastructure.persistence import (
    ShareLedgerRepository,
    is_transient_db_error,
)

logger = logging.getLogger(__name__)


class ShareLedger:
    def __init__(
        self,
        repo: ShareLedgerRepositoryProtocol | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._repo: ShareLedgerRepositoryProtocol = repo or ShareLedgerRepository()
        self._max_attempts = (
            settings.LEDGER_CAS_MAX_ATTEMPTS if max_attempts is None else max_attempts
        )
        if self._max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self._max_attempts}")

    async def reserve(
        self,
        db: AsyncSession,
        project_id: str,
        requested_shares: int,
        *,
        buyer_id: str | None = None,
    ) -> ReservationResult:
        """Atomically add requested_shares to the project's sold count.

        Raises:
            ValidationError: requested_shares < 1 (no I/O performed).
            ProjectNotFoundError: no such project.
            SharesUnavailableError: not enough shares left; carries `available`.
            TransientConflictError: CAS retries exhausted or the database
                reported a serialization/deadlock failure. Retryable.
            InternalError: any other database failure; the transaction was
                rolled back, so nothing was reserved.
        """
        if requested_shares < 1:
            raise ValidationError(f"Share count must be at least 1, got {requested_shares}")

        for attempt in range(1, self._max_attempts + 1):
            try:
                result = await self._try_reserve(db, project_id, requested_shares, buyer_id)
                if result is not None:
                    await db.commit()
            except Exception as exc:
                await db.rollback()
                if is_transient_db_error(exc):
                    logger.warning(
                        "reserve %s: database conflict on attempt %d: %s",
                        project_id, attempt, exc,
                    )
                    raise TransientConflictError(project_id, attempt) from exc
                if isinstance(exc, DBAPIError):
                    logger.error(
                        "reserve %s: database error on attempt %d, rolled back: %s",
                        project_id, attempt, exc,
                    )
                    raise InternalError(f"Reservation failed for {project_id}") from exc
                raise

            if result is not None:
                logger.info(
                    "reserved %d share(s) of %s (sold=%d/%d) reservation=%s",
                    requested_shares,
                    project_id,
                    result.sold_shares,
                    result.available_shares,
                    result.reservation_id,
                )
                return result

            # Version moved under us: end this transaction so the next read is fresh
            await db.rollback()
            logger.warning(
                "reserve %s: CAS conflict on attempt %d/%d",
                project_id, attempt, self._max_attempts,
            )

        raise TransientConflictError(project_id, self._max_attempts)

    async def snapshot(self, db: AsyncSession, project_id: str) -> ShareState | None:
        """Non-authoritative read for display; may be stale immediately."""
        return await self._repo.get_share_state(db, project_id)

    async def _try_reserve(
        self,
        db: AsyncSession,
        project_id: str,
        requested_shares: int,
        buyer_id: str | None,
    ) -> ReservationResult | None:
        state = await self._repo.get_share_state(db, project_id)
        if state is None:
            raise ProjectNotFoundError(project_id)

        if state.sold_shares + requested_shares > state.available_shares:
            logger.warning(
                "reserve %s: requested %d, only %d left",
                project_id, requested_shares, state.remaining_shares,
            )
            raise SharesUnavailableError(project_id, requested_shares, state.remaining_shares)

        updated = await self._repo.compare_and_set_sold(
            db, project_id, state.version, state.sold_shares + requested_shares
        )
        if updated is None:
            return None

        reservation = ShareReservation(
            id=new_reservation_id(),
            project_id=project_id,
            buyer_id=buyer_id,
            shares=requested_shares,
            price_per_share=updated.price_per_share,
            sold_shares_after=updated.sold_shares,
            created_at=utc_now(),
        )
        await self._repo.insert_reservation(db, reservation)
        return ReservationResult(
            reservation_id=reservation.id,
            project_id=project_id,
            buyer_id=buyer_id,
            reserved_shares=requested_shares,
            sold_shares=updated.sold_shares,
            available_shares=updated.available_shares,
            price_per_share=updated.price_per_share,
            created_at=reservation.created_at,
        )


_ledger: ShareLedger | None = None


def get_share_ledger() -> ShareLedger:
    global _ledger  # noqa: PLW0603
    if _ledger is None:
        _ledger = ShareLedger()
    return _ledger
