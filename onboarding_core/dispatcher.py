"""
Callback dispatcher: one Basic Auth POST per call, success strictly on HTTP 200.

The endpoint is an administrator-configured webhook. No retries are made and the
response body is never read; only the status code is consulted. Failures are
returned as CallbackResult values, never raised to the caller.
"""

import base64
from typing import Dict, Optional, Union

import requests
from pydantic import SecretStr

from .config import get_config
from .constants import CallbackErrorKind, Messages
from .exceptions import CallbackError
from .schemas.credential_schemas import ResolvedCredential
from .schemas.onboarding_schemas import CallbackResult
from .utils.logger import get_logger
from .validation import is_blank

SecretLike = Union[str, SecretStr, None]

HTTP_OK = 200


def _reveal(value: SecretLike) -> Optional[str]:
    if isinstance(value, SecretStr):
        return value.get_secret_value()
    return value


def basic_auth_header(username: str, password: str) -> str:
    """Authorization header value for HTTP Basic authentication."""
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


class CallbackDispatcher:
    """
    Makes authenticated POST requests to a callback endpoint.

    Each call blocks for at most ``timeout`` seconds. Callers that must not block
    should run the dispatcher on a worker thread.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        verify_ssl: Optional[bool] = None,
        session: Optional[requests.Session] = None,
    ):
        dispatcher_config = get_config().dispatcher
        self.timeout = timeout if timeout is not None else dispatcher_config.timeout
        self.verify_ssl = verify_ssl if verify_ssl is not None else dispatcher_config.verify_ssl
        self.session = session
        self.logger = get_logger()

    def test_connection(self, url: str, username: str, password: SecretLike) -> CallbackResult:
        """
        POST with no body to check that the endpoint accepts the credentials.

        Args:
            url: Callback endpoint
            username: Basic Auth username
            password: Basic Auth password

        Returns:
            CallbackResult, ok only when the endpoint answered 200
        """
        try:
            self._require_fields(url, username, password)
            self._post_basic_auth(url, username, _reveal(password))
        except CallbackError as e:
            return self._to_result(e)
        return CallbackResult.success(Messages.CONNECTION_OK)

    def submit_credential(
        self, url: str, username: str, password: SecretLike, secret_payload: SecretLike
    ) -> CallbackResult:
        """
        POST a resolved secret to the endpoint as a plain-text body.

        The body is only attached when ``secret_payload`` is not blank.
        """
        try:
            self._require_fields(url, username, password)
            self._post_basic_auth(url, username, _reveal(password), _reveal(secret_payload))
        except CallbackError as e:
            return self._to_result(e)
        return CallbackResult.success()

    def submit_resolved(
        self, url: str, username: str, password: SecretLike, credential: ResolvedCredential
    ) -> CallbackResult:
        """Forward a credential looked up from a store; only string secrets are accepted."""
        if not credential.is_string_secret:
            return CallbackResult.failure(
                CallbackErrorKind.UNSUPPORTED_CREDENTIAL_TYPE, Messages.UNSUPPORTED_CREDENTIAL
            )
        if credential.secret is None or not credential.secret.get_secret_value():
            return CallbackResult.failure(CallbackErrorKind.EMPTY_SECRET, Messages.EMPTY_SECRET)
        return self.submit_credential(url, username, password, credential.secret)

    @staticmethod
    def _require_fields(url: str, username: str, password: SecretLike) -> None:
        if is_blank(url) or is_blank(username) or is_blank(_reveal(password)):
            raise CallbackError(Messages.MISSING_FIELD, kind=CallbackErrorKind.MISSING_FIELD)

    def _post_basic_auth(
        self, url: str, username: str, password: str, data: Optional[str] = None
    ) -> int:
        headers: Dict[str, str] = {"Authorization": basic_auth_header(username, password)}
        body = None
        if not is_blank(data):
            headers["Content-Type"] = "text/plain; charset=utf-8"
            body = data.encode("utf-8")

        http = self.session if self.session is not None else requests
        try:
            response = http.post(
                url,
                headers=headers,
                data=body,
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        # urllib3 URL parse errors (e.g. an overlong host label) are not wrapped by requests
        except (requests.RequestException, ValueError) as e:
            raise CallbackError(
                str(e) or type(e).__name__,
                kind=CallbackErrorKind.TRANSPORT_FAILURE,
                cause=e,
                url=url,
            )

        self.logger.info(
            "Callback request completed",
            extra={"url": url, "status_code": response.status_code, "has_body": body is not None},
        )
        if response.status_code != HTTP_OK:
            raise CallbackError(
                f"Server error : {response.status_code}",
                kind=CallbackErrorKind.HTTP_STATUS,
                status_code_received=response.status_code,
                url=url,
            )
        return response.status_code

    @staticmethod
    def _to_result(error: CallbackError) -> CallbackResult:
        return CallbackResult.failure(error.kind, error.message, error.status_code_received)
