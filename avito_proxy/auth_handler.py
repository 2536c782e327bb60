from __future__ import annotations
import time
from typing import Callable, Optional

import requests

from avito_proxy.settings import Settings
from avito_proxy.auth.token_model import AvitoAccessToken
from avito_proxy.config.defaults import DEFAULT_TOKEN_TTL_SECONDS
from avito_proxy.errors import AuthError
from avito_proxy.utils.logs import log_event, mask_token


class TokenCache:
    """
    Holds the single Avito bearer token for the process and refreshes it
    through the client-credentials grant when it is missing or stale.

    Created once at application startup and passed to whoever needs a token.
    Refreshes are not serialized: two requests hitting an expired token may
    both exchange credentials, which is harmless because the grant is idempotent.
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.session = session or requests.Session()
        self.clock = clock
        self.credential: Optional[AvitoAccessToken] = None

    def get_token(self) -> str:
        """
        Return a usable bearer token, exchanging credentials only when needed.

        Raises:
            AuthError: the exchange failed or returned a malformed body.
        """
        now = self.clock()
        if self.credential is not None and self.credential.is_fresh(now):
            return self.credential.access_token

        self.credential = self._exchange_credentials()
        return self.credential.access_token

    def invalidate(self) -> None:
        """Forget the cached token so the next call performs a fresh exchange."""
        self.credential = None

    def _exchange_credentials(self) -> AvitoAccessToken:
        log_event("AUTH", "Token missing or stale, requesting a new one...", "PROGRESS")

        try:
            response = self.session.post(
                self.settings.TOKEN_URL,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.settings.AVITO_CLIENT_ID,
                    "client_secret": self.settings.AVITO_CLIENT_SECRET,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            log_event("AUTH", f"Token request failed: {e}", "ERROR")
            raise AuthError(f"OAuth request failed: {e}") from e

        if not response.ok:
            log_event("AUTH", f"Token endpoint returned {response.status_code}", "ERROR")
            raise AuthError(f"OAuth error {response.status_code}: {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            raise AuthError(f"OAuth response is not JSON: {e}") from e

        access_token = body.get("access_token") if isinstance(body, dict) else None
        if not access_token:
            raise AuthError("OAuth response has no access_token")

        try:
            expires_in = int(body.get("expires_in") or DEFAULT_TOKEN_TTL_SECONDS)
        except (TypeError, ValueError):
            expires_in = DEFAULT_TOKEN_TTL_SECONDS

        # Stamp expiry from the clock after the exchange completes
        issued_at = int(self.clock())
        credential = AvitoAccessToken(access_token=access_token, expires_at=issued_at + expires_in)

        log_event(
            "AUTH",
            f"Token refreshed ({mask_token(access_token)}), valid for {expires_in}s",
            "SUCCESS"
        )
        return credential
