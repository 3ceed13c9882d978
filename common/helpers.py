"""
ParuShop - Shared Helpers
==========================
Pure utility functions with NO database or module dependencies.
"""

import re
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def to_decimal(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal (via str, so 19.99 stays 19.99)."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"Not a number: {value!r}")


def to_money(value) -> float:
    """Decimal amount -> float for JSON output, rounded to cents."""
    return float(round(to_decimal(value), 2))


# ==========================================
# Durations ("15m", "1d", "7d", "3600")
# ==========================================

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_duration(value) -> timedelta:
    """
    Parse an expiry string into a timedelta.
    Bare numbers are seconds; suffixes s/m/h/d/w are supported.
    """
    if isinstance(value, timedelta):
        return value
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. 15m, 1d, 3600)")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def normalize_email(email: Optional[str]) -> str:
    """Emails are stored trimmed and lowercase."""
    return (email or "").strip().lower()


def get_real_ip(request) -> str:
    """Extract real client IP from request (handles X-Forwarded-For proxy header)."""
    x_forwarded = request.headers.get("X-Forwarded-For")
    if x_forwarded:
        return x_forwarded.split(",")[0].strip()
    return request.client.host if request.client else "-"
