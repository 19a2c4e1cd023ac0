"""
PKCE client web app.
GET /redirect-testing starts the flow, GET /airtable-oauth is the provider callback,
POST /refresh_token exchanges a refresh token. Store, tracker and exchanger are created per app
and reached through dependencies, so tests can build isolated apps.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from pkce_client.authorize import build_authorization_redirect
from pkce_client.callback import CallbackHandler
from pkce_client.config import LOG_LEVEL, ClientConfig
from pkce_client.errors import (
    CorrelationFailure,
    InvalidCallbackError,
    LocalValidationError,
    ProviderDeniedAuthorization,
)
from pkce_client.exchange import TokenExchanger, validate_refresh_token
from pkce_client.flow_store import CorrelationStore
from pkce_client.pages import error_page, home_page, outcome_page, provider_error_page
from pkce_client.token_state import RequestStateTracker

logger = logging.getLogger(__name__)
router = APIRouter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = app.state.config
    logger.info(
        "PKCE client ready: provider=%s client_id=%s redirect_uri=%s confidential=%s",
        config.provider_url,
        config.client_id,
        config.redirect_uri,
        bool(config.client_secret),
    )
    yield
    logger.info("Shutting down with %d pending authorization(s)", len(app.state.store))


def create_app(
    config: ClientConfig | None = None,
    *,
    store: CorrelationStore | None = None,
    tracker: RequestStateTracker | None = None,
) -> FastAPI:
    config = (config or ClientConfig.from_env()).validate()
    app = FastAPI(title="PKCE Client", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.store = store if store is not None else CorrelationStore(ttl=config.flow_ttl_seconds)
    app.state.tracker = tracker if tracker is not None else RequestStateTracker()
    app.state.exchanger = TokenExchanger(config, app.state.tracker)
    app.include_router(router)
    return app


def get_config(request: Request) -> ClientConfig:
    return request.app.state.config


def get_store(request: Request) -> CorrelationStore:
    return request.app.state.store


def get_tracker(request: Request) -> RequestStateTracker:
    return request.app.state.tracker


def get_exchanger(request: Request) -> TokenExchanger:
    return request.app.state.exchanger


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "pkce_client"}


@router.get("/", response_class=HTMLResponse)
def home():
    return home_page()


@router.get("/redirect-testing")
def redirect_testing(
    config: ClientConfig = Depends(get_config),
    store: CorrelationStore = Depends(get_store),
):
    """Generate state + PKCE, remember the verifier, redirect to the provider's /oauth2/v1/authorize."""
    url = build_authorization_redirect(store, config)
    return RedirectResponse(url=url, status_code=302)


@router.get("/airtable-oauth", response_class=HTMLResponse)
def airtable_oauth(
    request: Request,
    store: CorrelationStore = Depends(get_store),
    exchanger: TokenExchanger = Depends(get_exchanger),
):
    """Provider redirect target. Validates state, then redeems the code."""
    handler = CallbackHandler(store, exchanger)
    try:
        outcome = handler.handle(dict(request.query_params))
    except CorrelationFailure:
        return error_page("Request not recognized", "This request was not from the authorization server!")
    except ProviderDeniedAuthorization as e:
        return provider_error_page(e.error, e.description)
    except InvalidCallbackError as e:
        return error_page("Error", str(e))
    return outcome_page(outcome)


@router.post("/refresh_token", response_class=HTMLResponse)
async def refresh_token(request: Request, exchanger: TokenExchanger = Depends(get_exchanger)):
    """Exchange the posted refresh_token form field for new tokens."""
    form = await request.form()
    try:
        value = validate_refresh_token(form.get("refresh_token"))
    except LocalValidationError as e:
        return error_page("Refresh error", str(e))
    outcome = await run_in_threadpool(exchanger.refresh, value)
    return outcome_page(outcome)


@router.get("/token-state")
def token_state(tracker: RequestStateTracker = Depends(get_tracker)):
    """Latest token request outcome, for debugging and tests."""
    return JSONResponse(tracker.get().to_dict())


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(
        "pkce_client.main:app",
        host="127.0.0.1",
        port=app.state.config.port,
        log_level=LOG_LEVEL.lower(),
    )
