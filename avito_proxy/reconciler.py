from __future__ import annotations
"""
Merges item statistics with call statistics on the date key.
"""

from dataclasses import replace
from typing import Dict, Iterable, List

from avito_proxy.models import CanonicalRow, CallPair


def merge_call_stats(item_rows: Iterable[CanonicalRow], call_pairs: Iterable[CallPair]) -> List[CanonicalRow]:
    """
    Add call counts onto item rows by date.

    - Duplicate dates in item_rows: the later row replaces the earlier one.
    - A call date with no item row produces a row holding only calls.
    - Several call records for the same date are summed.

    Returns rows sorted ascending by date. Inputs are left untouched.
    """
    by_date: Dict[str, CanonicalRow] = {}
    for row in item_rows:
        by_date[row.date] = replace(row)

    for pair in call_pairs:
        row = by_date.get(pair.date)
        if row is None:
            row = CanonicalRow(date=pair.date)
            by_date[pair.date] = row
        row.calls = (row.calls or 0) + (pair.calls or 0)

    return sorted(by_date.values(), key=lambda r: r.date)
