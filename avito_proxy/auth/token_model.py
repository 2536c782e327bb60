from dataclasses import dataclass

from avito_proxy.config.defaults import TOKEN_REFRESH_MARGIN_SECONDS


@dataclass
class AvitoAccessToken:
    """
    Canonical bearer credential for the Avito API.
    expires_at is absolute epoch seconds, computed when the token was issued.
    """
    access_token: str
    expires_at: int

    def is_fresh(self, now: float, margin: int = TOKEN_REFRESH_MARGIN_SECONDS) -> bool:
        """True while the token can still be used with the safety margin applied"""
        return bool(self.access_token) and now < self.expires_at - margin

