"""Integer money arithmetic for share pricing.

All prices and amounts are int minor units (paise). No float, no Decimal.
Expected ROI is int basis points: 1200 bps = 12.00 % per year.
"""

BPS_DENOMINATOR = 10_000


def share_amount(shares: int, price_per_share: int) -> int:
    """Total cost of `shares` at `price_per_share`; exact for int inputs."""
    return shares * price_per_share


def apply_bps(amount: int, bps: int) -> int:
    """amount * bps / 10000, floored (projections never overstate)."""
    return (amount * bps) // BPS_DENOMINATOR


def minor_to_display(amount: int, symbol: str = "₹") -> str:
    """Format minor units: 500000 -> '₹5,000.00', -1250 -> '-₹12.50'."""
    if amount < 0:
        return f"-{minor_to_display(-amount, symbol)}"
    return f"{symbol}{amount // 100:,}.{amount % 100:02d}"


def bps_to_percent_display(bps: int) -> str:
    """1250 -> '12.50%'."""
    return f"{bps // 100}.{bps % 100:02d}%"
