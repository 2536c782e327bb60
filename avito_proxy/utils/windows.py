from __future__ import annotations
"""
Centralized period logic for the stats series.
Maps each daily row onto a day, ISO-week or month bucket and sums the counters.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from avito_proxy.models import CanonicalRow, SeriesBucket
from avito_proxy.config.defaults import DEFAULT_PERIOD
from avito_proxy.utils.logs import log_event

SUMMED_FIELDS = ("views", "clicks", "contacts", "calls", "sales")


class Period(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def normalize_period(value: Optional[str]) -> Period:
    """Map a grouping parameter onto a Period; anything unrecognized means day."""
    try:
        return Period((value or DEFAULT_PERIOD).strip().lower())
    except ValueError:
        return Period.DAY


def parse_row_date(value: str) -> date:
    """Parse an ISO calendar date, ignoring any time part (2024-01-01T00:00:00)."""
    return date.fromisoformat(str(value)[:10])


def bucket_key(row_date: date, period: Period | str) -> str:
    """
    Bucket key for a date:
    - day:   the date itself
    - week:  Monday of its ISO week
    - month: first day of its month
    """
    period = normalize_period(period)

    if period is Period.WEEK:
        monday = row_date - timedelta(days=row_date.weekday())  # Monday=0 .. Sunday=6
        return monday.isoformat()
    if period is Period.MONTH:
        return row_date.replace(day=1).isoformat()
    return row_date.isoformat()


def aggregate_by_period(rows: Iterable[CanonicalRow], period: Period | str = DEFAULT_PERIOD) -> List[SeriesBucket]:
    """
    Sum views, clicks, contacts, calls and sales per bucket.

    Unobserved (None) values are summed as 0, so a bucket cannot tell
    "no clicks" apart from "clicks unknown".
    Rows whose date cannot be parsed are dropped.
    Buckets are returned in ascending key order.
    """
    period = normalize_period(period)
    buckets: Dict[str, SeriesBucket] = {}

    for row in rows:
        try:
            row_date = parse_row_date(row.date)
        except ValueError:
            log_event("STATS", f"Skipping row with unreadable date: {row.date!r}", "WARNING")
            continue

        key = bucket_key(row_date, period)
        acc = buckets.get(key)
        if acc is None:
            acc = SeriesBucket(date=key)
            buckets[key] = acc

        for field in SUMMED_FIELDS:
            setattr(acc, field, getattr(acc, field) + (getattr(row, field) or 0))

    return [buckets[key] for key in sorted(buckets)]
