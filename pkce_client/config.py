"""
PKCE client configuration. Values come from the environment; defaults are for local development.
The client secret may be empty (public client); never log it.
"""
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from pkce_client.errors import ConfigError

# Registered OAuth integration
CLIENT_ID = os.environ.get("OAUTH_CLIENT_ID", "test-client").strip()
CLIENT_SECRET = os.environ.get("OAUTH_CLIENT_SECRET", "").strip()

# Must exactly match the redirect URI registered with the provider, path included
REDIRECT_URI = os.environ.get("OAUTH_REDIRECT_URI", "http://localhost:4000/airtable-oauth").strip()

# Scopes the integration was registered with
SCOPE = os.environ.get("OAUTH_SCOPE", "data.records:read data.records:write").strip()

# Authorization server base URL; /oauth2/v1/authorize and /oauth2/v1/token hang off it
PROVIDER_URL = os.environ.get("OAUTH_PROVIDER_URL", "https://airtable.com").strip().rstrip("/")

# Listening port; if you change it, change REDIRECT_URI too
PORT = int(os.environ.get("PORT", "4000"))

# Pending authorizations are evicted after this many seconds
FLOW_TTL_SECONDS = int(os.environ.get("OAUTH_FLOW_TTL_SECONDS", "600"))

# Upper bound on a single token endpoint call
TOKEN_TIMEOUT_SECONDS = float(os.environ.get("OAUTH_TOKEN_TIMEOUT_SECONDS", "10"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class ClientConfig:
    client_id: str
    client_secret: str
    redirect_uri: str
    scope: str
    provider_url: str
    port: int = 4000
    flow_ttl_seconds: int = 600
    token_timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            client_id=CLIENT_ID,
            client_secret=CLIENT_SECRET,
            redirect_uri=REDIRECT_URI,
            scope=SCOPE,
            provider_url=PROVIDER_URL,
            port=PORT,
            flow_ttl_seconds=FLOW_TTL_SECONDS,
            token_timeout_seconds=TOKEN_TIMEOUT_SECONDS,
        )

    @property
    def authorize_endpoint(self) -> str:
        return f"{self.provider_url}/oauth2/v1/authorize"

    @property
    def token_endpoint(self) -> str:
        return f"{self.provider_url}/oauth2/v1/token"

    def validate(self) -> "ClientConfig":
        """Raise ConfigError on the first invalid value; return self so calls can chain."""
        if not self.client_id:
            raise ConfigError("client_id is required")
        if not self.scope:
            raise ConfigError("scope is required")
        for name, url in (("redirect_uri", self.redirect_uri), ("provider_url", self.provider_url)):
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ConfigError(f"{name} must be an absolute http(s) URL, got {url!r}")
        if self.port <= 0:
            raise ConfigError("port must be positive")
        if self.flow_ttl_seconds <= 0:
            raise ConfigError("flow TTL must be positive")
        if self.token_timeout_seconds <= 0:
            raise ConfigError("token timeout must be positive")
        return self
