"""
Price, volume and time formatting.

Every function here is total: non-finite numbers and unconvertible
timestamps produce literal placeholders instead of raising.
"""

import logging
import math
from datetime import datetime

from candledash.core.models import Currency

logger = logging.getLogger(__name__)

INVALID = "Invalid"
INVALID_TIME = "Invalid Time"

# Magnitude suffixes for the USD style, largest first
_USD_SUFFIXES = (
    (1_000_000_000.0, "B"),
    (1_000_000.0, "M"),
    (1_000.0, "K"),
)


def format_usd(price: float) -> str:
    """
    Format a USD-style amount.

    Examples:
        0        -> "$0.00"
        0.05     -> "$0.0500"
        999.5    -> "$999.50"
        1234.5   -> "$1.23K"
        1e6      -> "$1.00M"
        -1234.5  -> "$-1.23K"
        NaN/inf  -> "Invalid"
    """
    if not math.isfinite(price):
        return INVALID

    if price == 0:
        return "$0.00"

    abs_price = abs(price)
    sign = "-" if price < 0 else ""

    for threshold, suffix in _USD_SUFFIXES:
        if abs_price >= threshold:
            return f"${sign}{abs_price / threshold:.2f}{suffix}"

    if abs_price >= 0.10:
        # 999.995 rounds up to 1,000.00, hence the grouping
        return f"${sign}{abs_price:,.2f}"

    return f"${sign}{abs_price:.4f}"


def format_idr(price: float) -> str:
    """
    Format an IDR-style amount: whole units, '.' thousands separator.

    Examples:
        1729998000.0 -> "1.729.998.000"
        0.0          -> "0"
        -1234.5      -> "-1.235"
    """
    if not math.isfinite(price):
        return INVALID

    # Half away from zero; round() would round half to even
    rounded = int(math.copysign(math.floor(abs(price) + 0.5), price))
    return f"{rounded:,}".replace(",", ".")


def format_price(price: float, currency: Currency) -> str:
    """Format a price with the convention of its display currency."""
    if currency is Currency.IDR:
        return format_idr(price)
    return format_usd(price)


def format_change(delta: float, currency: Currency) -> str:
    """
    Format the last tick-to-tick change for the markets list.

    Returns an empty string when there is no change.
    """
    if not math.isfinite(delta):
        return f"({INVALID})"
    if delta == 0:
        return ""
    if currency is Currency.IDR:
        return f"({delta:.0f})"
    return f"({delta:.2f})"


def format_volume(volume: float) -> str:
    """Whole-number volume label for the volume axis."""
    if not math.isfinite(volume):
        return INVALID
    return f"{volume:.0f}"


def format_time(timestamp: int) -> str:
    """
    Format an epoch timestamp as local HH:MM.

    Timestamps outside the platform's representable range yield
    "Invalid Time" and a logged warning.
    """
    try:
        return datetime.fromtimestamp(timestamp).strftime("%H:%M")
    except (OverflowError, OSError, ValueError, TypeError):
        logger.warning(f"Invalid timestamp {timestamp!r}")
        return INVALID_TIME
