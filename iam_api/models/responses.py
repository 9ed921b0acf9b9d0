from typing import Any

from pydantic import BaseModel

from iam_api.models.caller import CallerInfo


class HealthResponse(BaseModel):
    status: str
    timestamp: str  # RFC3339, UTC
    message: str
    caller: CallerInfo | None = None


class DataResponse(BaseModel):
    message: str
    data: dict[str, Any] | None = None
    method: str
    path: str
    caller: CallerInfo | None = None


class ErrorResponse(BaseModel):
    message: str
