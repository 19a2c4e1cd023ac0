"""
Outcome of the latest token endpoint call, and the tracker that holds it.
Single process-wide cell for the demo; concurrent exchanges overwrite each other (last write wins).
"""
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar


class OutcomeKind(str, Enum):
    NONE = "none"
    LOADING = "loading"
    AUTHORIZATION_SUCCESS = "authorization_success"
    AUTHORIZATION_ERROR = "authorization_error"
    UNKNOWN_AUTHORIZATION_ERROR = "unknown_authorization_error"
    REFRESH_SUCCESS = "refresh_success"
    REFRESH_ERROR = "refresh_error"
    UNKNOWN_REFRESH_ERROR = "unknown_refresh_error"


@dataclass(frozen=True)
class TokenExchangeOutcome:
    kind: ClassVar[OutcomeKind]

    @property
    def payload(self) -> Any:
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "payload": self.payload}


@dataclass(frozen=True)
class NoOutcome(TokenExchangeOutcome):
    kind: ClassVar[OutcomeKind] = OutcomeKind.NONE


@dataclass(frozen=True)
class Loading(TokenExchangeOutcome):
    kind: ClassVar[OutcomeKind] = OutcomeKind.LOADING


@dataclass(frozen=True)
class _WithPayload(TokenExchangeOutcome):
    body: Any

    @property
    def payload(self) -> Any:
        return self.body


@dataclass(frozen=True)
class AuthorizationSuccess(_WithPayload):
    """Token response: access_token and optionally refresh_token, expires_in, scope."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.AUTHORIZATION_SUCCESS


@dataclass(frozen=True)
class AuthorizationError(_WithPayload):
    """400/401 from the token endpoint; body is the provider's error object."""

    kind: ClassVar[OutcomeKind] = OutcomeKind.AUTHORIZATION_ERROR


@dataclass(frozen=True)
class UnknownAuthorizationError(TokenExchangeOutcome):
    kind: ClassVar[OutcomeKind] = OutcomeKind.UNKNOWN_AUTHORIZATION_ERROR


@dataclass(frozen=True)
class RefreshSuccess(_WithPayload):
    kind: ClassVar[OutcomeKind] = OutcomeKind.REFRESH_SUCCESS


@dataclass(frozen=True)
class RefreshError(_WithPayload):
    kind: ClassVar[OutcomeKind] = OutcomeKind.REFRESH_ERROR


@dataclass(frozen=True)
class UnknownRefreshError(TokenExchangeOutcome):
    kind: ClassVar[OutcomeKind] = OutcomeKind.UNKNOWN_REFRESH_ERROR


SUCCESS_KINDS = {OutcomeKind.AUTHORIZATION_SUCCESS, OutcomeKind.REFRESH_SUCCESS}
KNOWN_ERROR_KINDS = {OutcomeKind.AUTHORIZATION_ERROR, OutcomeKind.REFRESH_ERROR}
UNKNOWN_ERROR_KINDS = {OutcomeKind.UNKNOWN_AUTHORIZATION_ERROR, OutcomeKind.UNKNOWN_REFRESH_ERROR}


class RequestStateTracker:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outcome: TokenExchangeOutcome = NoOutcome()

    def set(self, outcome: TokenExchangeOutcome) -> None:
        with self._lock:
            self._outcome = outcome

    def get(self) -> TokenExchangeOutcome:
        with self._lock:
            return self._outcome

    def reset(self) -> None:
        self.set(NoOutcome())
