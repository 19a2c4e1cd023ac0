"""
Token endpoint client: authorization_code redemption and refresh_token grant.
Every call ends in a TokenExchangeOutcome recorded on the tracker; nothing raises out of here.
"""
import base64
import logging
from typing import Any

import httpx

from pkce_client.config import ClientConfig
from pkce_client.errors import LocalValidationError
from pkce_client.token_state import (
    AuthorizationError,
    AuthorizationSuccess,
    Loading,
    RefreshError,
    RefreshSuccess,
    RequestStateTracker,
    TokenExchangeOutcome,
    UnknownAuthorizationError,
    UnknownRefreshError,
)

logger = logging.getLogger(__name__)

# Statuses the provider uses for expected failures: bad config, expired or reused code/refresh token
KNOWN_ERROR_STATUSES = (400, 401)


def basic_authorization(client_id: str, client_secret: str) -> str:
    encoded = base64.b64encode(f"{client_id}:{client_secret}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def validate_refresh_token(value: Any) -> str:
    """Reject a missing or non-string refresh token before any network call."""
    if value is None or value == "":
        raise LocalValidationError("no refresh token supplied")
    if not isinstance(value, str):
        raise LocalValidationError("refresh token was not a string")
    return value


def _response_body(r: httpx.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return r.text


class TokenExchanger:
    def __init__(self, config: ClientConfig, tracker: RequestStateTracker, timeout: float | None = None) -> None:
        self.config = config
        self.tracker = tracker
        self.timeout = timeout if timeout is not None else config.token_timeout_seconds

    def build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        # Confidential clients authenticate with Basic; public clients rely on client_id alone
        if self.config.client_secret != "":
            headers["Authorization"] = basic_authorization(self.config.client_id, self.config.client_secret)
        return headers

    def redeem_code(self, code: str, code_verifier: str) -> TokenExchangeOutcome:
        """Exchange an authorization code plus the stored verifier for tokens."""
        data = {
            "client_id": self.config.client_id,
            "code_verifier": code_verifier,
            "redirect_uri": self.config.redirect_uri,
            "code": code,
            "grant_type": "authorization_code",
        }
        return self._exchange(
            data,
            success=AuthorizationSuccess,
            known_error=AuthorizationError,
            unknown_error=UnknownAuthorizationError,
        )

    def refresh(self, refresh_token: str) -> TokenExchangeOutcome:
        data = {
            "client_id": self.config.client_id,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        return self._exchange(
            data,
            success=RefreshSuccess,
            known_error=RefreshError,
            unknown_error=UnknownRefreshError,
        )

    def _exchange(self, data: dict[str, str], *, success, known_error, unknown_error) -> TokenExchangeOutcome:
        self.tracker.set(Loading())
        outcome = self._post(data, success=success, known_error=known_error, unknown_error=unknown_error)
        self.tracker.set(outcome)
        return outcome

    def _post(self, data: dict[str, str], *, success, known_error, unknown_error) -> TokenExchangeOutcome:
        grant_type = data["grant_type"]
        try:
            r = httpx.post(
                self.config.token_endpoint,
                data=data,
                headers=self.build_headers(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            logger.error("Token request (%s) failed without a response: %r", grant_type, e)
            return unknown_error()

        if 200 <= r.status_code < 300:
            try:
                body = r.json()
            except ValueError:
                logger.error("Token response (%s) was not JSON (status %s)", grant_type, r.status_code)
                return unknown_error()
            logger.info("Token request (%s) succeeded", grant_type)
            return success(body)

        if r.status_code in KNOWN_ERROR_STATUSES:
            body = _response_body(r)
            error_code = body.get("error") if isinstance(body, dict) else None
            logger.warning("Token request (%s) rejected: status=%s error=%s", grant_type, r.status_code, error_code)
            return known_error(body)

        logger.error("Token request (%s) returned unexpected status %s", grant_type, r.status_code)
        return unknown_error()
