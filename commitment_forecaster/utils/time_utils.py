"""
Calendar helpers for month-granular consumption series.

Key concepts:
  - Contract months: elapsed time since commitment start is counted in
    30-day months (``DAYS_PER_MONTH``), the same convention used for
    ``days_to_commitment`` in velocity analysis.
  - Month labels: every consumption point is keyed by a ``YYYY-MM`` string.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

DAYS_PER_MONTH = 30


def add_months(anchor: date, months: int) -> date:
    """Return ``anchor`` shifted by ``months`` calendar months.

    The day is clamped to the last day of the target month, so
    ``add_months(date(2024, 1, 31), 1)`` is ``date(2024, 2, 29)``.
    """
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    month = month_index % 12 + 1
    day = min(anchor.day, _days_in_month(year, month))
    return date(year, month, day)


def month_label(anchor: date, offset: int = 0) -> str:
    """Return the ``YYYY-MM`` label of ``anchor`` shifted by ``offset`` months."""
    shifted = add_months(anchor, offset)
    return f"{shifted.year:04d}-{shifted.month:02d}"


def months_between(start: date, as_of: date) -> int:
    """Whole contract months from ``start`` to ``as_of``, floored at 0.

    Args:
        start: Commitment start date.
        as_of: Reference date (usually today).

    Returns:
        ``max(0, (as_of - start).days // DAYS_PER_MONTH)``
    """
    return max(0, (as_of - start).days // DAYS_PER_MONTH)


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(tz=timezone.utc)


def utc_today() -> date:
    """Return today's date in UTC."""
    return utcnow().date()


def _days_in_month(year: int, month: int) -> int:
    if month == 12:
        return 31
    return (date(year, month + 1, 1) - date(year, month, 1)).days
