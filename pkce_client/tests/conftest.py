"""
Pytest fixtures for pkce_client. Each test gets its own app with a fresh store and tracker.
"""
import pytest
from fastapi.testclient import TestClient

from pkce_client.config import ClientConfig
from pkce_client.exchange import TokenExchanger
from pkce_client.flow_store import CorrelationStore
from pkce_client.main import create_app
from pkce_client.token_state import RequestStateTracker


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockResponse:
    """Stand-in for httpx.Response with just what the exchanger reads."""

    def __init__(self, status_code: int, body=None, text: str | None = None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ("" if body is None else str(body))

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


@pytest.fixture
def config():
    return ClientConfig(
        client_id="client1",
        client_secret="",
        redirect_uri="http://localhost:4000/airtable-oauth",
        scope="data.records:read",
        provider_url="https://provider.example",
    )


@pytest.fixture
def confidential_config(config):
    return ClientConfig(
        client_id=config.client_id,
        client_secret="s3cret",
        redirect_uri=config.redirect_uri,
        scope=config.scope,
        provider_url=config.provider_url,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return CorrelationStore(ttl=600, clock=clock)


@pytest.fixture
def tracker():
    return RequestStateTracker()


@pytest.fixture
def exchanger(config, tracker):
    return TokenExchanger(config, tracker)


@pytest.fixture
def app(config, store, tracker):
    return create_app(config, store=store, tracker=tracker)


@pytest.fixture
def client(app):
    return TestClient(app)
