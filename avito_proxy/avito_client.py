from __future__ import annotations
"""
Avito API Client
Authenticated calls to the item-stats and call-stats endpoints
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

import requests

from avito_proxy.settings import Settings
from avito_proxy.auth_handler import TokenCache
from avito_proxy.errors import AuthError, StatsError, UpstreamItemsError, UpstreamCallsError, InvalidRequestError
from avito_proxy.utils.logs import log_event


@dataclass
class CallStatsResult:
    """Outcome of the best-effort call-stats fetch."""
    payload: Optional[Any] = None
    error: Optional[StatsError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_item_id(item_id: Any) -> int:
    """Avito expects numeric item ids in item_ids."""
    try:
        return int(str(item_id).strip())
    except (TypeError, ValueError):
        raise InvalidRequestError(f"itemId must be an integer, got {item_id!r}")


class AvitoClient:
    """Client for the Avito statistics endpoints of a single account"""

    def __init__(self, settings: Settings, token_cache: TokenCache, session: Optional[requests.Session] = None):
        self.settings = settings
        self.token_cache = token_cache
        self.session = session or token_cache.session

    # ============================================================
    # LOW-LEVEL
    # ============================================================

    def _request(
        self,
        url: str,
        body: Dict[str, Any],
        error_cls: Type[StatsError],
        label: str,
        token: Optional[str] = None,
        check_status: bool = True,
    ) -> Any:
        """
        POST a JSON body with a bearer token and decode the JSON reply.

        A token passed in is used as is; otherwise one comes from the token cache
        and AuthError propagates from there. Transport failures, non-JSON bodies
        and, with check_status, non-success statuses raise error_cls.
        """
        if token is None:
            token = self.token_cache.get_token()

        try:
            response = self.session.post(
                url,
                json=body,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise error_cls(f"{label} request failed: {e}") from e

        if check_status and not response.ok:
            raise error_cls(f"{label} error {response.status_code}: {response.text}")

        try:
            return response.json()
        except ValueError as e:
            raise error_cls(f"{label} response is not JSON: {e}") from e

    @staticmethod
    def items_body(item_id: Any, date_from: Optional[str], date_to: Optional[str]) -> Dict[str, Any]:
        return {
            "date_from": date_from,
            "date_to": date_to,
            "item_ids": [parse_item_id(item_id)],
        }

    @staticmethod
    def calls_body(date_from: Optional[str], date_to: Optional[str]) -> Dict[str, Any]:
        return {"date_from": date_from, "date_to": date_to}

    # ============================================================
    # ITEM STATS
    # ============================================================

    def item_stats_raw(self, item_id: Any, date_from: Optional[str], date_to: Optional[str]) -> Any:
        """Item-stats JSON exactly as Avito returned it, whatever the status code."""
        body = self.items_body(item_id, date_from, date_to)
        return self._request(self.settings.ITEMS_STATS_URL, body, UpstreamItemsError, "Item stats", check_status=False)

    def fetch_item_stats(
        self,
        item_id: Any,
        date_from: Optional[str],
        date_to: Optional[str],
        token: Optional[str] = None,
    ) -> Any:
        """
        Fetch item statistics for one item.

        Raises:
            AuthError: no token was given and none could be obtained.
            UpstreamItemsError: network failure, non-success status or a non-JSON body.
        """
        body = self.items_body(item_id, date_from, date_to)
        try:
            payload = self._request(self.settings.ITEMS_STATS_URL, body, UpstreamItemsError, "Item stats", token=token)
        except UpstreamItemsError as e:
            log_event("AVITO", f"Item {item_id}: {e}", "ERROR")
            raise

        log_event("AVITO", f"Fetched item stats for item {item_id} ({date_from} to {date_to})")
        return payload

    # ============================================================
    # CALL STATS
    # ============================================================

    def call_stats_raw(self, date_from: Optional[str], date_to: Optional[str]) -> Any:
        """Call-stats JSON exactly as Avito returned it, whatever the status code."""
        body = self.calls_body(date_from, date_to)
        return self._request(self.settings.CALLS_STATS_URL, body, UpstreamCallsError, "Call stats", check_status=False)

    def fetch_call_stats(
        self,
        date_from: Optional[str],
        date_to: Optional[str],
        token: Optional[str] = None,
    ) -> CallStatsResult:
        """
        Best-effort fetch of account call statistics.
        Every failure, a failed token exchange included, comes back in the result instead of raising.
        """
        body = self.calls_body(date_from, date_to)
        try:
            payload = self._request(self.settings.CALLS_STATS_URL, body, UpstreamCallsError, "Call stats", token=token)
        except (AuthError, UpstreamCallsError) as e:
            return CallStatsResult(error=e)

        log_event("AVITO", f"Fetched call stats ({date_from} to {date_to})")
        return CallStatsResult(payload=payload)
