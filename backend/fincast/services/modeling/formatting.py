"""
formatting.py — Display Formatting Helpers

Every helper renders `placeholder` ("N/A" by default) for None, NaN or
infinite values so non-finite numbers never reach the presentation layer.
"""

import math
from typing import Optional

PLACEHOLDER = "N/A"


def is_displayable(value: Optional[float]) -> bool:
    if value is None:
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def format_currency(value: Optional[float], decimals: int = 0, placeholder: str = PLACEHOLDER) -> str:
    """
    1234.5 → "$1,235"; -500 → "-$500"
    """
    if not is_displayable(value):
        return placeholder
    amount = float(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.{decimals}f}"


def format_days(value: Optional[float], placeholder: str = PLACEHOLDER) -> str:
    """45.04 → "45.0 days" """
    if not is_displayable(value):
        return placeholder
    return f"{float(value):.1f} days"


def format_percent(
    value: Optional[float],
    decimals: int = 1,
    ratio: bool = False,
    placeholder: str = PLACEHOLDER,
) -> str:
    """
    Values are percentages (12.5 → "12.5%") unless ratio=True (0.125 → "12.5%").
    """
    if not is_displayable(value):
        return placeholder
    pct = float(value) * 100 if ratio else float(value)
    return f"{pct:.{decimals}f}%"


def format_multiple(value: Optional[float], decimals: int = 2, placeholder: str = PLACEHOLDER) -> str:
    """2.5 → "2.50x" """
    if not is_displayable(value):
        return placeholder
    return f"{float(value):.{decimals}f}x"
