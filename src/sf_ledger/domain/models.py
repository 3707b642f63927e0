"""Domain models for sf_ledger - pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ShareState:
    """Point-in-time view of one project's share pool."""

    project_id: str
    sold_shares: int
    available_shares: int
    price_per_share: int   # paise
    version: int           # bumped on every sold_shares change

    @property
    def remaining_shares(self) -> int:
        return max(self.available_shares - self.sold_shares, 0)


@dataclass(frozen=True)
class ShareReservation:
    """Append-only journal row written in the same transaction as the increment."""

    id: str
    project_id: str
    buyer_id: str | None
    shares: int
    price_per_share: int       # captured atomically with the increment
    sold_shares_after: int
    created_at: datetime


@dataclass(frozen=True)
class ReservationResult:
    reservation_id: str
    project_id: str
    buyer_id: str | None
    reserved_shares: int
    sold_shares: int           # value after this reservation
    available_shares: int
    price_per_share: int
    created_at: datetime

    @property
    def remaining_shares(self) -> int:
        return self.available_shares - self.sold_shares
