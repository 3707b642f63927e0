"""Domain models for sf_investment - pure dataclasses, no SQLAlchemy dependency."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from src.sf_common.enums import PaymentStatus, PurchaseState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Investment:
    """Created once per successful reservation; never mutated afterwards."""

    id: str
    project_id: str
    buyer_id: str
    reservation_id: str
    shares_purchased: int
    amount_invested: int          # paise, frozen at purchase time
    created_at: datetime
    payment_status: str = PaymentStatus.COMPLETED.value


@dataclass(frozen=True)
class PortfolioEntry:
    investment: Investment
    project_title: str
    expected_roi_bps: int


@dataclass(frozen=True)
class ReturnsProjection:
    principal: int
    expected_roi_bps: int
    years: int
    monthly_returns: int
    yearly_returns: int
    total_returns: int


# Allowed forward moves; anything else is a programming error
_TRANSITIONS: dict[PurchaseState, frozenset[PurchaseState]] = {
    PurchaseState.REQUESTED: frozenset({PurchaseState.VALIDATING}),
    PurchaseState.VALIDATING: frozenset({PurchaseState.RESERVING, PurchaseState.REJECTED}),
    PurchaseState.RESERVING: frozenset({PurchaseState.RESERVED, PurchaseState.REJECTED}),
    PurchaseState.RESERVED: frozenset({PurchaseState.RECORDING}),
    PurchaseState.RECORDING: frozenset(
        {PurchaseState.COMPLETED, PurchaseState.PARTIAL_FAILURE}
    ),
}


@dataclass
class PurchaseAttempt:
    """State tracker for one purchase; logs every transition."""

    buyer_id: str
    project_id: str
    shares: int
    state: PurchaseState = PurchaseState.REQUESTED
    reason: str | None = None
    history: list[PurchaseState] = field(default_factory=lambda: [PurchaseState.REQUESTED])

    def advance(self, target: PurchaseState, reason: str | None = None) -> None:
        allowed = _TRANSITIONS.get(self.state, frozenset())
        if target not in allowed:
            raise RuntimeError(f"Illegal purchase transition {self.state} -> {target}")
        self.state = target
        self.reason = reason
        self.history.append(target)
        logger.debug(
            "purchase buyer=%s project=%s shares=%d -> %s%s",
            self.buyer_id,
            self.project_id,
            self.shares,
            target.value,
            f" ({reason})" if reason else "",
        )

    def reject(self, reason: str) -> None:
        self.advance(PurchaseState.REJECTED, reason)
