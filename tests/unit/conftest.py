"""
Unit test conftest.py - Component-specific fixtures.

This module provides fixtures specific to unit testing:
- A stub callback endpoint running on a background thread
- Configuration contexts backed by in-memory stores
- Mocks only where a real collaborator cannot be used
"""

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import Mock

import pytest
import requests

from onboarding_core.constants import CredentialKind
from onboarding_core.dispatcher import CallbackDispatcher
from onboarding_core.schemas import CredentialCreate
from onboarding_core.services import OnboardingConfiguration
from onboarding_core.stores import InMemoryConfigurationStore, InMemoryCredentialStore

# ==================== STUB CALLBACK ENDPOINT ====================


class StubCallbackServer:
    """
    Records every POST it receives.

    The response status is taken from the path: /ok answers 200, /status/<code>
    answers <code>, anything else 404.
    """

    def __init__(self):
        self.requests = []
        recorded = self.requests

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length else b""
                recorded.append({"path": self.path, "headers": dict(self.headers), "body": body})

                if self.path == "/ok":
                    status = 200
                elif self.path.startswith("/status/"):
                    status = int(self.path.rsplit("/", 1)[-1])
                else:
                    status = 404
                self.send_response(status)
                self.send_header("Content-Length", "0")
                self.end_headers()

            def log_message(self, format, *args):
                pass

        self.httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)

    @property
    def base_url(self) -> str:
        host, port = self.httpd.server_address[:2]
        return f"http://{host}:{port}"

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def start(self):
        self.thread.start()

    def stop(self):
        self.httpd.shutdown()
        self.httpd.server_close()
        self.thread.join(timeout=5)


@pytest.fixture
def stub_server():
    """Stub callback endpoint for the duration of one test."""
    server = StubCallbackServer()
    server.start()
    yield server
    server.stop()


# ==================== SERVICE FIXTURES ====================


@pytest.fixture
def http_session():
    """Session that ignores proxy settings from the environment."""
    session = requests.Session()
    session.trust_env = False
    yield session
    session.close()


@pytest.fixture
def dispatcher(http_session):
    """Dispatcher with a short timeout talking to local endpoints directly."""
    return CallbackDispatcher(timeout=5, session=http_session)


@pytest.fixture
def configuration_store():
    return InMemoryConfigurationStore()


@pytest.fixture
def credential_store():
    """Credential store holding one string secret and one username/password pair."""
    store = InMemoryCredentialStore()
    store.store(
        CredentialCreate(id="deploy-token", secret="s3cr3t-token", description="Deploy token")
    )
    store.store(
        CredentialCreate(
            id="db-login",
            kind=CredentialKind.USERNAME_PASSWORD,
            username="dbuser",
            secret="dbpass",
            description="Database login",
        )
    )
    return store


@pytest.fixture
def onboarding_configuration(configuration_store, credential_store, dispatcher):
    """Opened configuration context that mints fresh ids on every resubmission."""
    configuration = OnboardingConfiguration(
        configuration_store,
        credential_store=credential_store,
        dispatcher=dispatcher,
        preserve_ids=False,
    )
    configuration.open()
    yield configuration
    configuration.close()


# ==================== MOCK FIXTURES (ONLY WHEN NECESSARY) ====================


@pytest.fixture
def mock_http_client():
    """
    Mock HTTP session for testing transport behaviour
    without a listening endpoint.
    """
    mock_client = Mock()
    mock_response = Mock()
    mock_response.status_code = 200
    mock_client.post.return_value = mock_response
    return mock_client
