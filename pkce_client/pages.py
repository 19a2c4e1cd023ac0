"""
HTML status pages. Everything user- or provider-supplied goes through html.escape.
"""
import html
import json
from typing import Any

from fastapi.responses import HTMLResponse

from pkce_client.token_state import (
    KNOWN_ERROR_KINDS,
    SUCCESS_KINDS,
    UNKNOWN_ERROR_KINDS,
    OutcomeKind,
    TokenExchangeOutcome,
)

_TITLES = {
    OutcomeKind.NONE: "No token request yet",
    OutcomeKind.LOADING: "Token request in progress",
    OutcomeKind.AUTHORIZATION_SUCCESS: "Authorization success",
    OutcomeKind.AUTHORIZATION_ERROR: "Authorization error",
    OutcomeKind.UNKNOWN_AUTHORIZATION_ERROR: "Authorization failed",
    OutcomeKind.REFRESH_SUCCESS: "Refresh success",
    OutcomeKind.REFRESH_ERROR: "Refresh error",
    OutcomeKind.UNKNOWN_REFRESH_ERROR: "Refresh failed",
}

# Token fields pulled out of the JSON dump so they can be copied on their own
_TOKEN_FIELDS = ("access_token", "refresh_token")


def page(title: str, body: str, status_code: int = 200) -> HTMLResponse:
    return HTMLResponse(
        f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>{html.escape(title)}</title></head>
<body>
  <h1>{html.escape(title)}</h1>
{body}
  <p><a href="/">Home</a></p>
</body>
</html>""",
        status_code=status_code,
    )


def home_page() -> HTMLResponse:
    return HTMLResponse(
        """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>OAuth PKCE Client</title></head>
<body>
  <h1>OAuth PKCE Client</h1>
  <p><a href="redirect-testing">Testify!</a></p>
  <form method="post" action="/refresh_token">
    <label>Refresh token <input type="text" name="refresh_token"></label>
    <button type="submit">Refresh</button>
  </form>
  <p><a href="/token-state">Latest token request state</a></p>
</body>
</html>"""
    )


def error_page(title: str, message: str, status_code: int = 400) -> HTMLResponse:
    return page(title, f"  <p>{html.escape(message)}</p>", status_code=status_code)


def provider_error_page(error: str, description: str | None) -> HTMLResponse:
    body = (
        "  <p>There was an error authorizing this request.</p>\n"
        f'  <p>Error: "{html.escape(error)}"</p>\n'
        f'  <p>Error Description: "{html.escape(description or "")}"</p>'
    )
    return page("Authorization error", body, status_code=400)


def format_payload(payload: Any) -> str:
    """Token fields each on their own line, then the full body pretty-printed."""
    lines = []
    if isinstance(payload, dict):
        for name in _TOKEN_FIELDS:
            if name in payload:
                lines.append(f"  <p>{name}:<br><code>{html.escape(str(payload[name]))}</code></p>")
        dumped = json.dumps(payload, indent=2)
    else:
        dumped = str(payload)
    lines.append(f"  <pre>{html.escape(dumped)}</pre>")
    return "\n".join(lines)


def outcome_page(outcome: TokenExchangeOutcome) -> HTMLResponse:
    title = _TITLES[outcome.kind]
    if outcome.kind in SUCCESS_KINDS:
        return page(title, format_payload(outcome.payload))
    if outcome.kind in KNOWN_ERROR_KINDS:
        return page(title, format_payload(outcome.payload), status_code=400)
    if outcome.kind in UNKNOWN_ERROR_KINDS:
        return error_page(title, "Something went wrong talking to the provider. Check the server logs.", 502)
    return page(title, "  <p>Nothing to show.</p>")
