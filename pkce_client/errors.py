"""
Errors raised by the client core. Route handlers turn OAuthClientError subclasses into
status pages; StateCollisionError is not one of them and surfaces as a 500.

Token endpoint failures are not exceptions: they are TokenExchangeOutcome variants
(see token_state.py).
"""


class ConfigError(ValueError):
    """Startup configuration is invalid."""


class OAuthClientError(Exception):
    """Base for per-request failures. Terminal for the request; never retried."""

    message = "OAuth request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class CorrelationFailure(OAuthClientError):
    """Callback state is absent, expired or already consumed. The provider is not contacted."""

    message = "request not recognized"


class ProviderDeniedAuthorization(OAuthClientError):
    """The provider redirected back with an error parameter."""

    def __init__(self, error: str, description: str | None = None) -> None:
        self.error = error
        self.description = description
        super().__init__(f"{error}: {description}" if description else error)


class InvalidCallbackError(OAuthClientError):
    """State matched but the callback carried neither an error nor a code."""

    message = "authorization response carried no code"


class LocalValidationError(OAuthClientError):
    """Request input rejected before any network call."""


class StateCollisionError(RuntimeError):
    """A freshly generated state already had a live entry: the random source is broken."""
