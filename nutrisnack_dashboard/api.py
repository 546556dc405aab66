"""
HTTP surface for the dashboard and the chat assistant.

Run with:  uvicorn nutrisnack_dashboard.api:app
"""

import datetime as dt
import logging
from functools import lru_cache
from typing import Callable

import anthropic
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import config
from .assistant import ask_assistant, get_anthropic_client
from .dashboard import get_assistant_context, get_dashboard_view
from .errors import ConfigurationError, DashboardError
from .loaders import DataStore, SupabaseStore
from .schemas import ChatRequest
from .simulator import build_demo_store

logger = logging.getLogger(__name__)

DASHBOARD_ERROR_MESSAGE = "Error al cargar los datos del tablero"
INVALID_REQUEST_MESSAGE = "Solicitud inválida"


@lru_cache(maxsize=1)
def _demo_store(today: dt.date) -> DataStore:
    """Demo data ending at ``today``; rebuilt when the date changes."""
    return build_demo_store(today)


def get_store() -> DataStore:
    """Store for the configured data source."""
    if config.DATA_SOURCE == "demo":
        return _demo_store(dt.date.today())
    if config.DATA_SOURCE == "supabase":
        return SupabaseStore()
    raise ConfigurationError(f"Unknown DASHBOARD_DATA_SOURCE '{config.DATA_SOURCE}'")


def get_assistant_client() -> Callable[[], anthropic.Anthropic]:
    """Factory for the gateway client, resolved inside the request so that
    missing credentials surface as a chat error."""
    return get_anthropic_client


def create_app() -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFMT,
    )
    app = FastAPI(title=f"{config.BRAND_NAME} Analytics API")

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError):
        logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": INVALID_REQUEST_MESSAGE})

    @app.exception_handler(DashboardError)
    async def _dashboard_error(request: Request, exc: DashboardError):
        logger.error("Request to %s failed: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": DASHBOARD_ERROR_MESSAGE})

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "data_source": config.DATA_SOURCE}

    @app.get("/api/dashboard")
    def dashboard(store: DataStore = Depends(get_store)) -> dict:
        return get_dashboard_view(store)

    @app.post("/api/chat")
    def chat(
        body: ChatRequest,
        store: DataStore = Depends(get_store),
        client_factory: Callable[[], anthropic.Anthropic] = Depends(get_assistant_client),
    ):
        try:
            context = get_assistant_context(store)
            message = ask_assistant(body.messages, context, client=client_factory())
        except DashboardError:
            logger.exception("Chat API error")
            return JSONResponse(status_code=500, content={"error": config.ASSISTANT_ERROR_MESSAGE})
        return {"message": message}

    return app


app = create_app()
