"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from repair_advisor import __version__
from repair_advisor.api.v1.diagnostics import router as diagnostics_router
from repair_advisor.config import settings
from repair_advisor.controller import DiagnosticsController
from repair_advisor.history.storage import build_history_storage
from repair_advisor.history.store import HistoryStore
from repair_advisor.llm.analysis import AnalysisRequester
from repair_advisor.llm.device_lookup import DeviceIdentifier
from repair_advisor.redis_client import close_redis_client
from repair_advisor.web.views import router as web_router

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.dev.ConsoleRenderer() if settings.environment == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    ),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info(
        "app_starting",
        environment=settings.environment,
        history_backend=settings.history_backend,
        llm_model=settings.llm_model,
    )
    if not settings.anthropic_api_key:
        logger.warning("anthropic_api_key_missing")

    history = HistoryStore(build_history_storage(settings))
    await history.load()

    app.state.controller = DiagnosticsController(
        requester=AnalysisRequester(),
        identifier=DeviceIdentifier(),
        history=history,
    )
    yield
    if settings.history_backend == "redis":
        await close_redis_client()
    logger.info("app_shutting_down")


app = FastAPI(
    title="Repair Advisor",
    description="AI repair analysis and cost estimate for phones and tablets",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(web_router)
app.include_router(diagnostics_router)


@app.get("/health")
async def health():
    return {
        "name": "Repair Advisor",
        "version": __version__,
        "status": "running",
    }
