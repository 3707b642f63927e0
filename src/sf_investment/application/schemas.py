"""Pydantic schemas for sf_investment API."""

from pydantic import BaseModel, Field

from src.sf_common.money import bps_to_percent_display, minor_to_display
from src.sf_investment.domain.models import Investment, ReturnsProjection

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PurchaseRequest(BaseModel):
    project_id: str = Field(..., min_length=1, max_length=64)
    # Range is enforced by the service so that every rejection is a typed
    # ValidationError rather than a framework 422
    shares: int = Field(..., description="Number of shares to buy (>= 1)")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ReturnsEstimateResponse(BaseModel):
    project_id: str
    shares: int
    principal: int
    principal_display: str
    expected_roi_bps: int
    expected_roi_display: str
    years: int
    monthly_returns: int
    monthly_returns_display: str
    yearly_returns: int
    yearly_returns_display: str
    total_returns: int
    total_returns_display: str

    @classmethod
    def from_projection(
        cls, project_id: str, shares: int, p: ReturnsProjection
    ) -> "ReturnsEstimateResponse":
        return cls(
            project_id=project_id,
            shares=shares,
            principal=p.principal,
            principal_display=minor_to_display(p.principal),
            expected_roi_bps=p.expected_roi_bps,
            expected_roi_display=bps_to_percent_display(p.expected_roi_bps),
            years=p.years,
            monthly_returns=p.monthly_returns,
            monthly_returns_display=minor_to_display(p.monthly_returns),
            yearly_returns=p.yearly_returns,
            yearly_returns_display=minor_to_display(p.yearly_returns),
            total_returns=p.total_returns,
            total_returns_display=minor_to_display(p.total_returns),
        )


class InvestmentResponse(BaseModel):
    id: str
    project_id: str
    buyer_id: str
    reservation_id: str
    shares_purchased: int
    amount_invested: int
    amount_invested_display: str
    payment_status: str
    created_at: str
    projected_monthly_returns: int | None = None
    projected_yearly_returns: int | None = None

    @classmethod
    def from_domain(
        cls, inv: Investment, projection: ReturnsProjection | None = None
    ) -> "InvestmentResponse":
        return cls(
            id=inv.id,
            project_id=inv.project_id,
            buyer_id=inv.buyer_id,
            reservation_id=inv.reservation_id,
            shares_purchased=inv.shares_purchased,
            amount_invested=inv.amount_invested,
            amount_invested_display=minor_to_display(inv.amount_invested),
            payment_status=inv.payment_status,
            created_at=inv.created_at.isoformat(),
            projected_monthly_returns=projection.monthly_returns if projection else None,
            projected_yearly_returns=projection.yearly_returns if projection else None,
        )


class PortfolioItem(InvestmentResponse):
    project_title: str


class PortfolioResponse(BaseModel):
    items: list[PortfolioItem]
    total_invested: int
    total_invested_display: str
    total_shares: int
    projected_yearly_returns: int
    projected_yearly_returns_display: str
