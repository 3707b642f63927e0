"""Pre-reservation purchase rules.

Pure functions over values already in hand; none of them touch the ledger.
Each raises a ValidationError subclass on rejection.
"""

from config.settings import settings
from src.sf_common.enums import ProjectStatus
from src.sf_common.errors import ProjectNotActiveError, ValidationError
from src.sf_common.money import share_amount
from src.sf_project.domain.models import Project


def check_share_count(shares: int, max_shares: int | None = None) -> None:
    """Raise ValidationError unless shares is in [1, MAX_SHARES_PER_PURCHASE]."""
    limit = settings.MAX_SHARES_PER_PURCHASE if max_shares is None else max_shares
    if shares < 1:
        raise ValidationError(f"Share count must be at least 1, got {shares}")
    if shares > limit:
        raise ValidationError(f"Share count {shares} exceeds per-purchase limit {limit}")


def check_purchase_amount(shares: int, price_per_share: int) -> None:
    """A purchase must cost at least one share's price."""
    if price_per_share <= 0 or share_amount(shares, price_per_share) < price_per_share:
        raise ValidationError(
            f"Purchase amount for {shares} share(s) at {price_per_share} is below one share"
        )


def check_project_open(project: Project) -> None:
    """Inactive or already-funded projects reject purchases, whatever the UI showed."""
    status = project.effective_status
    if status != ProjectStatus.ACTIVE.value:
        raise ProjectNotActiveError(project.id, status)
