from __future__ import annotations
"""
Avito Response Adapters

Turns the item-stats and call-stats payloads into canonical rows.

The upstream schema is undocumented and shifts between API versions, so
every logical field is resolved from an ordered list of candidate keys.
A missing field degrades to its default instead of raising; if a shape
changes, /debug/items and /debug/calls show the raw payload to fix the mapping.
"""

from typing import Any, Dict, List, Optional, Sequence

from avito_proxy.models import CanonicalRow, CallPair
from avito_proxy.config.defaults import (
    DATE_KEYS,
    ITEM_RECORD_LIST_KEYS,
    ITEM_SERIES_KEYS,
    VIEWS_KEYS,
    CONTACTS_KEYS,
    CALL_RECORD_LIST_KEYS,
    CALLS_KEYS,
)


def first_defined(record: Dict[str, Any], keys: Sequence[str], default: Any = None) -> Any:
    """
    Return the value of the first key that is present and not None.
    Zero and empty values count as defined.
    """
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def first_truthy(record: Dict[str, Any], keys: Sequence[str]) -> Any:
    """Return the first non-empty value among keys, or None."""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None


def _as_count(value: Any) -> int:
    """Coerce an upstream counter to int; anything unreadable counts as 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _extract_date(entry: Dict[str, Any]) -> Optional[str]:
    date = first_truthy(entry, DATE_KEYS)
    return str(date) if date else None


def _record_list(payload: Dict[str, Any], key: str) -> List[Any]:
    value = payload.get(key)
    return value if isinstance(value, list) else []


def adapt_item_stats(payload: Any) -> List[CanonicalRow]:
    """
    Flatten an item-stats response into one CanonicalRow per daily entry.

    Item records are collected from both `result` and `data`. Each record
    keeps its daily series under the first non-empty of `stats`, `dates`,
    `statistics`. Entries without a date are skipped. Clicks are not
    reported by this endpoint and stay None.
    """
    if not isinstance(payload, dict):
        return []

    records: List[Any] = []
    for key in ITEM_RECORD_LIST_KEYS:
        records.extend(_record_list(payload, key))

    rows: List[CanonicalRow] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        series = first_truthy(record, ITEM_SERIES_KEYS) or []
        if not isinstance(series, list):
            continue

        for entry in series:
            if not isinstance(entry, dict):
                continue
            date = _extract_date(entry)
            if not date:
                continue
            rows.append(CanonicalRow(
                date=date,
                views=_as_count(first_defined(entry, VIEWS_KEYS, 0)),
                clicks=None,
                contacts=_as_count(first_defined(entry, CONTACTS_KEYS, 0)),
                calls=0,
                sales=0,
            ))
    return rows


def adapt_call_stats(payload: Any) -> List[CallPair]:
    """
    Extract (date, calls) pairs from a call-stats response.
    Only the first non-empty of `result` / `data` is read.
    """
    if not isinstance(payload, dict):
        return []

    records = first_truthy(payload, CALL_RECORD_LIST_KEYS) or []
    if not isinstance(records, list):
        return []

    pairs: List[CallPair] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        date = _extract_date(record)
        if not date:
            continue
        pairs.append(CallPair(date=date, calls=_as_count(first_defined(record, CALLS_KEYS, 0))))
    return pairs
