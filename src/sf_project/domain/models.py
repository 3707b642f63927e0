"""Domain models for sf_project - pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.sf_common.enums import ProjectStatus


@dataclass
class Project:
    id: str
    title: str
    location: str
    capacity_kw: int
    price_per_share: int        # paise
    available_shares: int       # pool size, fixed at creation
    sold_shares: int            # owned by ShareLedger; snapshot when read here
    expected_roi_bps: int
    status: str                 # stored ProjectStatus value
    version: int
    description: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def remaining_shares(self) -> int:
        return max(self.available_shares - self.sold_shares, 0)

    @property
    def effective_status(self) -> str:
        if self.status == ProjectStatus.INACTIVE:
            return ProjectStatus.INACTIVE.value
        if self.sold_shares >= self.available_shares:
            return ProjectStatus.FUNDED.value
        return str(self.status)

    @property
    def funding_progress_bps(self) -> int:
        if self.available_shares <= 0:
            return 0
        return self.sold_shares * 10_000 // self.available_shares

    @property
    def total_cost(self) -> int:
        return self.available_shares * self.price_per_share
