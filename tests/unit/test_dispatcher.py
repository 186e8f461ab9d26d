"""
Unit tests for the callback dispatcher.

Real HTTP round trips go to a stub endpoint on a background thread;
transport failures are simulated with a mocked session.
"""

import base64

import pytest
import requests
from pydantic import SecretStr

from onboarding_core.constants import CallbackErrorKind, CredentialKind, Messages
from onboarding_core.dispatcher import CallbackDispatcher, basic_auth_header
from onboarding_core.schemas import ResolvedCredential


def _decode_basic(header: str) -> str:
    scheme, encoded = header.split(" ", 1)
    assert scheme == "Basic"
    return base64.b64decode(encoded).decode("utf-8")


class TestBasicAuthHeader:
    def test_encodes_username_and_password(self):
        assert basic_auth_header("user", "pass") == "Basic dXNlcjpwYXNz"

    def test_utf8_password(self):
        assert _decode_basic(basic_auth_header("user", "päss")) == "user:päss"


class TestTestConnection:
    def test_ok_on_200(self, dispatcher, stub_server):
        result = dispatcher.test_connection(stub_server.url("/ok"), "user", "pass")

        assert result.ok is True
        assert result.message == Messages.CONNECTION_OK
        (request,) = stub_server.requests
        assert _decode_basic(request["headers"]["Authorization"]) == "user:pass"
        assert request["body"] == b""

    def test_error_carries_status(self, dispatcher, stub_server):
        result = dispatcher.test_connection(stub_server.url("/status/403"), "user", "pass")

        assert result.ok is False
        assert result.error == CallbackErrorKind.HTTP_STATUS
        assert result.status_code == 403
        assert "403" in result.message

    def test_non_200_success_codes_are_failures(self, dispatcher, stub_server):
        result = dispatcher.test_connection(stub_server.url("/status/204"), "user", "pass")

        assert result.ok is False
        assert result.status_code == 204

    def test_accepts_secret_password(self, dispatcher, stub_server):
        result = dispatcher.test_connection(stub_server.url("/ok"), "user", SecretStr("pass"))

        assert result.ok is True
        assert _decode_basic(stub_server.requests[0]["headers"]["Authorization"]) == "user:pass"

    @pytest.mark.parametrize(
        "url,username,password",
        [
            ("http://host/ok", "", "pass"),
            ("http://host/ok", "user", "   "),
            ("  ", "user", "pass"),
            (None, "user", "pass"),
            ("http://host/ok", "user", SecretStr("")),
        ],
    )
    def test_missing_field_makes_no_request(self, mock_http_client, url, username, password):
        dispatcher = CallbackDispatcher(timeout=1, session=mock_http_client)

        result = dispatcher.test_connection(url, username, password)

        assert result.ok is False
        assert result.error == CallbackErrorKind.MISSING_FIELD
        mock_http_client.post.assert_not_called()

    def test_transport_failure_is_reported(self, mock_http_client):
        mock_http_client.post.side_effect = requests.ConnectionError("connection refused")
        dispatcher = CallbackDispatcher(timeout=1, session=mock_http_client)

        result = dispatcher.test_connection("http://host/ok", "user", "pass")

        assert result.ok is False
        assert result.error == CallbackErrorKind.TRANSPORT_FAILURE
        assert "connection refused" in result.message
        assert result.status_code is None

    def test_unparseable_host_is_a_transport_failure(self, dispatcher):
        url = "http://" + "a" * 300 + ".com/"

        result = dispatcher.test_connection(url, "user", "pass")

        assert result.ok is False
        assert result.error == CallbackErrorKind.TRANSPORT_FAILURE

    def test_value_error_from_session_is_a_transport_failure(self, mock_http_client):
        mock_http_client.post.side_effect = ValueError("label empty or too long")
        dispatcher = CallbackDispatcher(timeout=1, session=mock_http_client)

        result = dispatcher.submit_credential("http://host/ok", "user", "pass", "secret")

        assert result.error == CallbackErrorKind.TRANSPORT_FAILURE
        assert "label empty or too long" in result.message

    def test_timeout_and_tls_settings_are_passed(self, mock_http_client):
        dispatcher = CallbackDispatcher(timeout=2.5, verify_ssl=False, session=mock_http_client)

        dispatcher.test_connection("http://host/ok", "user", "pass")

        kwargs = mock_http_client.post.call_args.kwargs
        assert kwargs["timeout"] == 2.5
        assert kwargs["verify"] is False
        assert kwargs["data"] is None

    def test_defaults_come_from_config(self, app_config):
        app_config.dispatcher.timeout = 12
        app_config.dispatcher.verify_ssl = False

        dispatcher = CallbackDispatcher()

        assert dispatcher.timeout == 12
        assert dispatcher.verify_ssl is False


class TestSubmitCredential:
    def test_secret_sent_as_body(self, dispatcher, stub_server):
        result = dispatcher.submit_credential(stub_server.url("/ok"), "user", "pass", "top-secret")

        assert result.ok is True
        (request,) = stub_server.requests
        assert request["body"] == b"top-secret"
        assert request["headers"]["Content-Type"].startswith("text/plain")

    def test_blank_payload_sends_no_body(self, dispatcher, stub_server):
        result = dispatcher.submit_credential(stub_server.url("/ok"), "user", "pass", "  ")

        assert result.ok is True
        assert stub_server.requests[0]["body"] == b""

    def test_http_error(self, dispatcher, stub_server):
        result = dispatcher.submit_credential(stub_server.url("/status/500"), "user", "pass", "x")

        assert result.error == CallbackErrorKind.HTTP_STATUS
        assert result.status_code == 500


class TestSubmitResolved:
    def test_string_secret_is_forwarded(self, dispatcher, stub_server):
        credential = ResolvedCredential(
            id="token", kind=CredentialKind.STRING, secret=SecretStr("abc")
        )

        result = dispatcher.submit_resolved(stub_server.url("/ok"), "user", "pass", credential)

        assert result.ok is True
        assert stub_server.requests[0]["body"] == b"abc"

    def test_other_kinds_rejected_without_request(self, mock_http_client):
        dispatcher = CallbackDispatcher(timeout=1, session=mock_http_client)
        credential = ResolvedCredential(
            id="login",
            kind=CredentialKind.USERNAME_PASSWORD,
            username="u",
            secret=SecretStr("p"),
        )

        result = dispatcher.submit_resolved("http://host/ok", "user", "pass", credential)

        assert result.error == CallbackErrorKind.UNSUPPORTED_CREDENTIAL_TYPE
        mock_http_client.post.assert_not_called()

    def test_empty_secret_rejected_without_request(self, mock_http_client):
        dispatcher = CallbackDispatcher(timeout=1, session=mock_http_client)
        credential = ResolvedCredential(id="token", kind=CredentialKind.STRING, secret=SecretStr(""))

        result = dispatcher.submit_resolved("http://host/ok", "user", "pass", credential)

        assert result.error == CallbackErrorKind.EMPTY_SECRET
        mock_http_client.post.assert_not_called()
