"""
Provider redirect handling: correlate state, check for a provider error, redeem the code.

If the client_id or redirect_uri sent to the provider do not match its registration, the
provider never redirects here at all, so that misconfiguration cannot be detected in this module.
"""
import logging
from typing import Mapping

from pkce_client.errors import CorrelationFailure, InvalidCallbackError, ProviderDeniedAuthorization
from pkce_client.exchange import TokenExchanger
from pkce_client.flow_store import CorrelationStore
from pkce_client.token_state import TokenExchangeOutcome

logger = logging.getLogger(__name__)


class CallbackHandler:
    def __init__(self, store: CorrelationStore, exchanger: TokenExchanger) -> None:
        self.store = store
        self.exchanger = exchanger

    def handle(self, params: Mapping[str, str]) -> TokenExchangeOutcome:
        """
        Raises CorrelationFailure, ProviderDeniedAuthorization or InvalidCallbackError without
        contacting the provider. Otherwise returns the outcome of the code exchange.
        """
        pending = self.store.take(params.get("state"))
        if pending is None:
            logger.warning("Callback with unknown, expired or reused state")
            raise CorrelationFailure()

        # State is consumed from here on, whatever happens next
        error = params.get("error")
        if error:
            description = params.get("error_description")
            logger.warning("Provider returned error on callback: %s (%s)", error, description)
            raise ProviderDeniedAuthorization(error, description)

        code = params.get("code")
        if not code:
            logger.warning("Callback matched a pending authorization but had no code")
            raise InvalidCallbackError()

        return self.exchanger.redeem_code(code, pending.code_verifier)
