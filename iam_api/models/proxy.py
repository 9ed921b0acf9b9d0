from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProxyEvent(BaseModel):
    """API Gateway REST (v1) Lambda proxy integration event.

    Only the fields the adapter reads are declared; everything else in the
    event (query strings, path parameters, ...) is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    httpMethod: str
    path: str = "/"
    headers: dict[str, str | None] | None = None
    multiValueHeaders: dict[str, list[str] | None] | None = None
    body: str | None = None
    isBase64Encoded: bool = False
    requestContext: dict[str, Any] = Field(default_factory=dict)
