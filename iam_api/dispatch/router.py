"""Request dispatcher: exact path/method routing for the three demo endpoints.

    /         any      200  welcome + method/path echo
    /health   any      200  status, UTC timestamp
    /data     GET      200  fixed sample items
    /data     POST     201  echo of the JSON object body (400 if empty / not an object)
    /data     other    405
    *         any      404

Every response carries the inferred CallerInfo. dispatch() is a pure function
of its arguments plus the wall clock; transports add headers and CORS.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError

from iam_api.dispatch.errors import (
    DispatchError,
    EndpointNotFoundError,
    InvalidBodyError,
    MethodNotAllowedError,
)
from iam_api.identity.headers import HeaderInput
from iam_api.identity.inferencer import CallerInferencer
from iam_api.models.caller import CallerInfo
from iam_api.models.responses import DataResponse, HealthResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_BODY = '{"message":"Internal server error"}'
INVALID_JSON_MESSAGE = "Invalid JSON in request body"
SAMPLE_ITEMS: tuple[str, ...] = ("item1", "item2", "item3")



class UndecodableBody:
    """A body the transport could not decode, such as invalid base64.

    Handlers that ignore the body are unaffected; parsing it is a 400.
    """

    def __repr__(self) -> str:
        return "UndecodableBody()"


UNDECODABLE_BODY = UndecodableBody()

Body = str | bytes | UndecodableBody | None


@dataclass(frozen=True)
class RequestContext:
    method: str
    path: str
    body: Body
    caller: CallerInfo


Handler = Callable[[RequestContext], tuple[int, BaseModel]]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def handle_root(ctx: RequestContext) -> tuple[int, BaseModel]:
    return 200, DataResponse(
        message="Welcome to AWS Lambda REST API with IAM Authentication",
        method=ctx.method,
        path=ctx.path,
        caller=ctx.caller,
    )


def handle_health(ctx: RequestContext) -> tuple[int, BaseModel]:
    return 200, HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        message="API is running successfully",
        caller=ctx.caller,
    )


def handle_data(ctx: RequestContext) -> tuple[int, BaseModel]:
    if ctx.method == "GET":
        return 200, DataResponse(
            message="Data retrieved successfully",
            data={"items": list(SAMPLE_ITEMS), "count": len(SAMPLE_ITEMS)},
            method=ctx.method,
            path=ctx.path,
            caller=ctx.caller,
        )

    if ctx.method == "POST":
        payload = parse_json_object(ctx.body)
        return 201, DataResponse(
            message="Data received successfully",
            data=payload,
            method=ctx.method,
            path=ctx.path,
            caller=ctx.caller,
        )

    raise MethodNotAllowedError(ctx.method)


ROUTES: dict[str, Handler] = {
    "/": handle_root,
    "/health": handle_health,
    "/data": handle_data,
}


# ---------------------------------------------------------------------------
# Body parsing
# ---------------------------------------------------------------------------


def parse_json_object(body: Body) -> dict[str, Any]:
    """Decode a request body that must be a JSON object.

    Anything that would not serialize back to identical JSON is rejected:
    NaN / Infinity literals, numbers that overflow a double (``1e400``) and
    strings holding lone UTF-16 surrogates (``"\\ud800"``).
    """
    if isinstance(body, UndecodableBody):
        raise InvalidBodyError(INVALID_JSON_MESSAGE)
    if body is None or len(body) == 0:
        raise InvalidBodyError("No data provided")

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidBodyError(INVALID_JSON_MESSAGE) from exc

    try:
        payload = json.loads(body, parse_constant=_reject_constant, parse_float=_finite_float)
        # lone surrogates survive json.loads but cannot be encoded as UTF-8
        json.dumps(payload, ensure_ascii=False).encode("utf-8")
    except (ValueError, RecursionError) as exc:
        raise InvalidBodyError(INVALID_JSON_MESSAGE) from exc

    if not isinstance(payload, dict):
        raise InvalidBodyError(INVALID_JSON_MESSAGE)
    return payload


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def dispatch(
    method: str,
    path: str,
    headers: HeaderInput,
    body: Body,
    inferencer: CallerInferencer,
) -> tuple[int, str]:
    """Route one request and return (status_code, JSON body)."""
    method = method.upper()
    caller = inferencer.infer(headers)
    logger.info(
        "Processing request | method=%s path=%s caller=%s", method, path, caller.summary()
    )

    ctx = RequestContext(method=method, path=path, body=body, caller=caller)
    try:
        handler = ROUTES.get(path)
        if handler is None:
            raise EndpointNotFoundError("Endpoint not found")
        status_code, response = handler(ctx)
    except DispatchError as exc:
        logger.info(
            "Request rejected | method=%s path=%s status=%d reason=%s",
            method,
            path,
            exc.status_code,
            exc.message,
        )
        status_code = exc.status_code
        response = DataResponse(message=exc.message, method=method, path=path, caller=caller)

    return render(status_code, response)


def render(status_code: int, response: BaseModel) -> tuple[int, str]:
    """Serialize a response envelope; any encoding fault becomes a generic 500."""
    try:
        return status_code, response.model_dump_json()
    except (PydanticSerializationError, ValueError, TypeError):
        logger.exception("Error encoding JSON response | status=%d", status_code)
        return 500, INTERNAL_ERROR_BODY
