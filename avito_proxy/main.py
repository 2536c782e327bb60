from __future__ import annotations
"""
Avito Stats - Request Orchestration

One /stats request runs these steps in order:
  1. token (cached)            - AuthError aborts
  2. item stats                - UpstreamItemsError aborts
  3. call stats (best effort)  - failure falls back to item rows only
  4. period aggregation
Upstream calls are sequential; item stats finish before call stats start.
"""

from typing import Any, Dict, Optional

from avito_proxy.adapters import adapt_item_stats, adapt_call_stats
from avito_proxy.avito_client import AvitoClient, parse_item_id
from avito_proxy.reconciler import merge_call_stats
from avito_proxy.utils.windows import aggregate_by_period, normalize_period
from avito_proxy.utils.logs import log_event


class StatsOrchestrator:
    """Builds the dashboard series for one item"""

    def __init__(self, client: AvitoClient):
        self.client = client

    def build_stats(
        self,
        item_id: Any,
        date_from: Optional[str],
        date_to: Optional[str],
        grouping: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Fetch, reconcile and aggregate statistics for one item.

        Args:
            item_id: Avito item id (integer-like)
            date_from: first day, YYYY-MM-DD
            date_to: last day, YYYY-MM-DD
            grouping: day, week or month; anything else groups by day

        Returns:
            {"itemId": item_id, "series": [bucket dicts]}
        """
        parse_item_id(item_id)
        period = normalize_period(grouping)
        log_event("STATS", f"Building {period.value} series for item {item_id} ({date_from} to {date_to})", "PROGRESS")

        # 1) One token for both upstream calls; AuthError aborts
        token = self.client.token_cache.get_token()

        # 2) Item stats; failure is fatal
        item_payload = self.client.fetch_item_stats(item_id, date_from, date_to, token=token)
        rows = adapt_item_stats(item_payload)
        log_event("STATS", f"Item stats adapted into {len(rows)} daily rows")

        # 3) Call stats; a failure leaves the item rows as they are
        calls_result = self.client.fetch_call_stats(date_from, date_to, token=token)
        if calls_result.ok:
            call_pairs = adapt_call_stats(calls_result.payload)
            rows = merge_call_stats(rows, call_pairs)
            log_event("STATS", f"Merged {len(call_pairs)} call records")
        else:
            log_event("STATS", f"Call stats unavailable, using item stats only: {calls_result.error}", "WARNING")

        # 4) Aggregate
        series = aggregate_by_period(rows, period)
        log_event("STATS", f"Item {item_id}: {len(series)} {period.value} buckets", "SUCCESS")

        return {"itemId": item_id, "series": [bucket.to_dict() for bucket in series]}

    def fetch_raw_items(self, item_id: Any, date_from: Optional[str], date_to: Optional[str]) -> Any:
        """Upstream item-stats JSON, unmodified."""
        return self.client.item_stats_raw(item_id, date_from, date_to)

    def fetch_raw_calls(self, date_from: Optional[str], date_to: Optional[str]) -> Any:
        """Upstream call-stats JSON, unmodified."""
        return self.client.call_stats_raw(date_from, date_to)
