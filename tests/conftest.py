import os

# avito_proxy.settings builds Settings() at import time and the credentials are required
os.environ.setdefault("AVITO_USER_ID", "100500")
os.environ.setdefault("AVITO_CLIENT_ID", "test-client-id")
os.environ.setdefault("AVITO_CLIENT_SECRET", "test-client-secret")

import pytest
import requests

from avito_proxy.settings import Settings
from avito_proxy.auth_handler import TokenCache
from avito_proxy.avito_client import AvitoClient
from avito_proxy.main import StatsOrchestrator

from fakes import FakeClock, FakeSession


@pytest.fixture
def test_settings():
    return Settings(
        AVITO_USER_ID="100500",
        AVITO_CLIENT_ID="client-id",
        AVITO_CLIENT_SECRET="client-secret",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def build_orchestrator(test_settings, clock):
    """Factory: orchestrator wired to a FakeSession."""
    def _build(session: FakeSession) -> StatsOrchestrator:
        token_cache = TokenCache(test_settings, session=session, clock=clock)
        client = AvitoClient(test_settings, token_cache, session=session)
        return StatsOrchestrator(client)
    return _build


@pytest.fixture
def network_error():
    return requests.ConnectionError("connection refused")
