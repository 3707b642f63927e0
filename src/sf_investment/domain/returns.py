"""Return projection from a project's expected annual ROI.

Informational only: simple (non-compounding) interest, integer paise,
floored so a projection never overstates.
"""

from src.sf_common.money import apply_bps
from src.sf_investment.domain.models import ReturnsProjection


def project_returns(principal: int, expected_roi_bps: int, years: int = 1) -> ReturnsProjection:
    if principal < 0:
        raise ValueError(f"principal must be non-negative, got {principal}")
    if expected_roi_bps < 0:
        raise ValueError(f"expected_roi_bps must be non-negative, got {expected_roi_bps}")
    if years < 1:
        raise ValueError(f"years must be at least 1, got {years}")

    yearly = apply_bps(principal, expected_roi_bps)
    return ReturnsProjection(
        principal=principal,
        expected_roi_bps=expected_roi_bps,
        years=years,
        monthly_returns=yearly // 12,
        yearly_returns=yearly,
        total_returns=yearly * years,
    )
