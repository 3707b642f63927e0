"""InvestmentService - turns a purchase intent into a reservation plus a record.

Flow per attempt (see PurchaseState):
  Validating   pure checks, one project snapshot read; ledger untouched
  Reserving    ShareLedger.reserve, TransientConflict retried with backoff
  Recording    investment insert in its own session, shielded from caller
               cancellation because the shares are already committed
  Completed    best-effort buyer notification

A failed record write after a committed reservation is a PartialFailure:
reported, logged, left for reconciliation. reserve() is never re-run for it.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sf_common.database import async_session_factory
from src.sf_common.datetime_utils import utc_now
from src.sf_common.enums import PaymentStatus, PurchaseState
from src.sf_common.errors import (
    AppError,
    InternalError,
    PartialFailureError,
    ProjectNotFoundError,
    TransientConflictError,
    ValidationError,
)
from src.sf_common.id_generator import new_investment_id
from src.sf_common.money import minor_to_display, share_amount
from src.sf_investment.application.schemas import (
    InvestmentResponse,
    PortfolioItem,
    PortfolioResponse,
    ReturnsEstimateResponse,
)
from src.sf_investment.domain.models import Investment, PurchaseAttempt
from src.sf_investment.domain.repository import InvestmentRepositoryProtocol
from src.sf_investment.domain.returns import project_returns
from src.sf_investment.domain.rules import (
    check_project_open,
    check_purchase_amount,
    check_share_count,
)
from src.sf_investment.infrastructure.persistence import InvestmentRepository
from src.sf_ledger.application.service import ShareLedger, get_share_ledger
from src.sf_ledger.domain.models import ReservationResult
from src.sf_notification.dispatcher import (
    NotificationDispatcher,
    get_notification_dispatcher,
)
from src.sf_project.domain.models import Project
from src.sf_project.domain.repository import ProjectRepositoryProtocol
from src.sf_project.infrastructure.persistence import ProjectRepository

logger = logging.getLogger(__name__)

MAX_PROJECTION_YEARS = 50


class InvestmentService:
    def __init__(
        self,
        ledger: ShareLedger | None = None,
        repo: InvestmentRepositoryProtocol | None = None,
        project_repo: ProjectRepositoryProtocol | None = None,
        notifier: NotificationDispatcher | None = None,
        session_factory: Callable[[], Any] | None = None,
        max_retries: int | None = None,
        retry_backoff_ms: int | None = None,
    ) -> None:
        self._ledger = ledger or get_share_ledger()
        self._repo: InvestmentRepositoryProtocol = repo or InvestmentRepository()
        self._projects: ProjectRepositoryProtocol = project_repo or ProjectRepository()
        self._notifier = notifier or get_notification_dispatcher()
        self._session_factory = session_factory or async_session_factory
        self._max_retries = (
            settings.PURCHASE_MAX_RETRIES if max_retries is None else max_retries
        )
        self._backoff_ms = (
            settings.PURCHASE_RETRY_BACKOFF_MS if retry_backoff_ms is None else retry_backoff_ms
        )

    # ------------------------------------------------------------------
    # Purchase
    # ------------------------------------------------------------------

    async def purchase(
        self, db: AsyncSession, buyer_id: str, project_id: str, shares: int
    ) -> InvestmentResponse:
        attempt = PurchaseAttempt(buyer_id=buyer_id, project_id=project_id, shares=shares)

        attempt.advance(PurchaseState.VALIDATING)
        try:
            project = await self._validate(db, project_id, shares)
        except AppError as exc:
            attempt.reject(exc.message)
            raise

        attempt.advance(PurchaseState.RESERVING)
        try:
            reservation = await self._reserve_with_retry(db, buyer_id, project_id, shares)
        except AppError as exc:
            attempt.reject(exc.message)
            raise
        attempt.advance(PurchaseState.RESERVED)

        investment = Investment(
            id=new_investment_id(),
            project_id=project_id,
            buyer_id=buyer_id,
            reservation_id=reservation.reservation_id,
            shares_purchased=reservation.reserved_shares,
            amount_invested=share_amount(
                reservation.reserved_shares, reservation.price_per_share
            ),
            payment_status=PaymentStatus.COMPLETED.value,
            created_at=utc_now(),
        )

        attempt.advance(PurchaseState.RECORDING)
        investment = await self._record_after_reservation(attempt, project, investment)
        attempt.advance(PurchaseState.COMPLETED)
        logger.info(
            "purchase completed: buyer=%s project=%s shares=%d amount=%d investment=%s",
            buyer_id, project_id, investment.shares_purchased,
            investment.amount_invested, investment.id,
        )

        self._notify_buyer(project, investment)
        projection = project_returns(investment.amount_invested, project.expected_roi_bps)
        return InvestmentResponse.from_domain(investment, projection)

    async def _validate(self, db: AsyncSession, project_id: str, shares: int) -> Project:
        # Share count first: a bad count is rejected without any I/O
        check_share_count(shares)
        try:
            project = await self._projects.get_project_by_id(db, project_id)
        except DBAPIError as exc:
            logger.error("purchase %s: project lookup failed: %s", project_id, exc)
            raise InternalError(f"Could not load project {project_id}") from exc
        if project is None:
            raise ProjectNotFoundError(project_id)
        check_purchase_amount(shares, project.price_per_share)
        check_project_open(project)
        return project

    async def _reserve_with_retry(
        self, db: AsyncSession, buyer_id: str, project_id: str, shares: int
    ) -> ReservationResult:
        retries = 0
        while True:
            try:
                return await self._ledger.reserve(db, project_id, shares, buyer_id=buyer_id)
            except TransientConflictError:
                if retries >= self._max_retries:
                    logger.warning(
                        "purchase %s: giving up after %d retries", project_id, retries
                    )
                    raise
                retries += 1
                logger.warning(
                    "purchase %s: transient conflict, retry %d/%d",
                    project_id, retries, self._max_retries,
                )
                await asyncio.sleep(self._backoff_ms * retries / 1000)

    async def _record_after_reservation(
        self, attempt: PurchaseAttempt, project: Project, investment: Investment
    ) -> Investment:
        write = asyncio.ensure_future(self._write_investment(investment))
        try:
            return await asyncio.shield(write)
        except asyncio.CancelledError:
            # Caller went away; the write keeps running and reports its own outcome
            logger.warning(
                "purchase abandoned after reservation %s; investment write continues",
                investment.reservation_id,
            )
            write.add_done_callback(self._detached_write_done(project, investment))
            raise
        except Exception as exc:
            attempt.advance(PurchaseState.PARTIAL_FAILURE, str(exc))
            logger.error(
                "PARTIAL FAILURE: reservation=%s project=%s buyer=%s shares=%d "
                "committed but investment record not saved: %s",
                investment.reservation_id,
                investment.project_id,
                investment.buyer_id,
                investment.shares_purchased,
                exc,
            )
            raise PartialFailureError(
                investment.reservation_id, investment.project_id, investment.shares_purchased
            ) from exc

    async def _write_investment(self, investment: Investment) -> Investment:
        """Insert the record; returns whichever row now holds the reservation.

        reservation_id is UNIQUE, so a conflict means reconciliation already
        recorded this reservation. That row is the purchase's record.
        """
        async with self._session_factory() as session:
            try:
                await self._repo.insert_investment(session, investment)
                await session.commit()
            except IntegrityError:
                await session.rollback()
                existing = await self._repo.get_by_reservation_id(
                    session, investment.reservation_id
                )
                if existing is None:
                    raise
                logger.info(
                    "reservation %s already recorded as %s",
                    investment.reservation_id, existing.id,
                )
                return existing
            except Exception:
                await session.rollback()
                raise
        return investment

    def _detached_write_done(
        self, project: Project, investment: Investment
    ) -> Callable[["asyncio.Future[Investment]"], None]:
        def _done(fut: "asyncio.Future[Investment]") -> None:
            if fut.cancelled():
                logger.error(
                    "PARTIAL FAILURE: investment write for reservation %s was cancelled",
                    investment.reservation_id,
                )
                return
            exc = fut.exception()
            if exc is not None:
                logger.error(
                    "PARTIAL FAILURE: reservation=%s project=%s buyer=%s shares=%d "
                    "committed but detached investment write failed: %s",
                    investment.reservation_id,
                    investment.project_id,
                    investment.buyer_id,
                    investment.shares_purchased,
                    exc,
                )
                return
            recorded = fut.result()
            logger.info("detached investment write completed: %s", recorded.id)
            self._notify_buyer(project, recorded)

        return _done

    def _notify_buyer(self, project: Project, investment: Investment) -> None:
        message = (
            f"You have successfully invested {minor_to_display(investment.amount_invested)} "
            f"in {project.title}"
        )
        try:
            self._notifier.dispatch(investment.buyer_id, message)
        except Exception:
            logger.exception("could not dispatch notification for %s", investment.id)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    async def list_investments(self, db: AsyncSession, buyer_id: str) -> PortfolioResponse:
        entries = await self._repo.list_by_buyer(db, buyer_id)
        items: list[PortfolioItem] = []
        total_invested = 0
        total_shares = 0
        projected_yearly = 0
        for entry in entries:
            inv = entry.investment
            projection = project_returns(inv.amount_invested, entry.expected_roi_bps)
            base = InvestmentResponse.from_domain(inv, projection)
            items.append(PortfolioItem(**base.model_dump(), project_title=entry.project_title))
            total_invested += inv.amount_invested
            total_shares += inv.shares_purchased
            projected_yearly += projection.yearly_returns
        return PortfolioResponse(
            items=items,
            total_invested=total_invested,
            total_invested_display=minor_to_display(total_invested),
            total_shares=total_shares,
            projected_yearly_returns=projected_yearly,
            projected_yearly_returns_display=minor_to_display(projected_yearly),
        )

    async def estimate_returns(
        self, db: AsyncSession, project_id: str, shares: int, years: int
    ) -> ReturnsEstimateResponse:
        check_share_count(shares)
        if not (1 <= years <= MAX_PROJECTION_YEARS):
            raise ValidationError(f"years must be in [1, {MAX_PROJECTION_YEARS}], got {years}")
        project = await self._projects.get_project_by_id(db, project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        principal = share_amount(shares, project.price_per_share)
        projection = project_returns(principal, project.expected_roi_bps, years)
        return ReturnsEstimateResponse.from_projection(project_id, shares, projection)
