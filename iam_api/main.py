"""FastAPI application factory for the IAM demo REST API."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from iam_api.api import routes as routes_module
from iam_api.config import Settings
from iam_api.config import settings as default_settings
from iam_api.identity.inferencer import CallerInferencer
from iam_api.identity.loader import load_gateway_table_for_environment

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the gateway table and build the inferencer singleton."""
    cfg: Settings = app.state.settings

    table = load_gateway_table_for_environment(cfg.gateway_dir, cfg.environment, cfg.gateway_file)
    app.state.inferencer = CallerInferencer.from_settings(cfg, table)

    logger.info(
        "IAM demo API started (environment=%s, gateways=%d)",
        cfg.environment,
        len(table.gateways),
    )

    yield

    logger.info("IAM demo API shut down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    cfg = settings or default_settings

    app = FastAPI(
        title="IAM Demo REST API",
        description="Demo endpoints behind three IAM-protected API Gateways, with caller inference",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = cfg
    app.include_router(routes_module.router)

    return app


# Module-level app instance for uvicorn / gunicorn
app = create_app()
