"""HTTP boundary shared by every transport.

Adds Content-Type and CORS headers to dispatcher output and answers CORS
preflight (OPTIONS) directly, without running the dispatcher or inferencer.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from iam_api.config import Settings
from iam_api.dispatch.router import Body, dispatch
from iam_api.identity.headers import HeaderInput
from iam_api.identity.inferencer import CallerInferencer


@dataclass(frozen=True)
class HTTPResult:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


def response_headers(settings: Settings) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": settings.cors_allow_origin,
        "Access-Control-Allow-Methods": settings.cors_allow_methods,
        "Access-Control-Allow-Headers": settings.cors_allow_headers,
    }


def handle_request(
    method: str,
    path: str,
    headers: HeaderInput,
    body: Body,
    inferencer: CallerInferencer,
    settings: Settings,
) -> HTTPResult:
    if method.upper() == "OPTIONS":
        return HTTPResult(status_code=200, headers=response_headers(settings), body="")

    status_code, payload = dispatch(method, path, headers, body, inferencer)
    return HTTPResult(status_code=status_code, headers=response_headers(settings), body=payload)
