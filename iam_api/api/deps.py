"""FastAPI dependency providers.

The inferencer and settings are app-state singletons created once in the
lifespan; both are immutable and safe to share across requests.
"""

from fastapi import Request

from iam_api.config import Settings
from iam_api.identity.inferencer import CallerInferencer


async def get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


async def get_inferencer(request: Request) -> CallerInferencer:
    """Return the shared CallerInferencer from app state."""
    inferencer: CallerInferencer = request.app.state.inferencer
    return inferencer
