"""
PKCE (RFC 7636) and authorization URL helpers for starting the flow.
S256 only. The verifier is used as a string: the challenge hashes its ASCII bytes.
"""
import hashlib
import secrets
from base64 import urlsafe_b64encode
from urllib.parse import urlencode

CODE_CHALLENGE_METHOD = "S256"

# 100 bytes -> 134 chars base64url
STATE_BYTES = 100
# 96 bytes -> 128 chars base64url, the RFC 7636 maximum verifier length
VERIFIER_BYTES = 96


def _b64url(raw: bytes) -> str:
    return urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def generate_state() -> str:
    """Opaque value for CSRF protection and callback correlation."""
    return _b64url(secrets.token_bytes(STATE_BYTES))


def derive_code_challenge(code_verifier: str) -> str:
    """base64url(sha256(verifier)) without padding."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return _b64url(digest)


def generate_pkce() -> tuple[str, str, str]:
    """
    Generate code_verifier and code_challenge.
    Returns (code_verifier, code_challenge, code_challenge_method).
    """
    code_verifier = _b64url(secrets.token_bytes(VERIFIER_BYTES))
    return code_verifier, derive_code_challenge(code_verifier), CODE_CHALLENGE_METHOD


def build_authorize_url(
    *,
    provider_url: str,
    client_id: str,
    redirect_uri: str,
    scope: str,
    state: str,
    code_challenge: str,
) -> str:
    """Build the provider's /oauth2/v1/authorize URL."""
    params = {
        "code_challenge": code_challenge,
        "code_challenge_method": CODE_CHALLENGE_METHOD,
        "state": state,
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": scope,
    }
    return f"{provider_url.rstrip('/')}/oauth2/v1/authorize?{urlencode(params)}"
