"""
Start of the flow: issue state + PKCE material, remember the verifier, build the provider URL.
"""
import logging
from typing import Any

from pkce_client.config import ClientConfig
from pkce_client.flow_store import CorrelationStore
from pkce_client.pkce import build_authorize_url, generate_pkce, generate_state

logger = logging.getLogger(__name__)


def build_authorization_redirect(
    store: CorrelationStore,
    config: ClientConfig,
    metadata: dict[str, Any] | None = None,
) -> str:
    """
    Register a pending authorization and return the URL to send the user to.
    metadata is kept alongside the verifier (e.g. a user id) and handed back on callback.
    """
    state = generate_state()
    code_verifier, code_challenge, _method = generate_pkce()
    store.put(state, code_verifier, metadata)
    logger.info("Issued authorization request (pending=%d)", len(store))
    return build_authorize_url(
        provider_url=config.provider_url,
        client_id=config.client_id,
        redirect_uri=config.redirect_uri,
        scope=config.scope,
        state=state,
        code_challenge=code_challenge,
    )
