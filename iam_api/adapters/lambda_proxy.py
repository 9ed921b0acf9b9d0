"""API Gateway REST proxy integration adapter.

Maps a v1 proxy event onto (method, path, headers, body), runs it through the
HTTP boundary and maps the result back to the proxy response shape.

Besides the client's own headers, the adapter injects the context the gateway
only supplies out-of-band, so the inferencer sees it as ordinary headers:

    requestContext.requestId              -> X-Request-Id
    requestContext.stage                  -> X-Stage
    _X_AMZN_TRACE_ID (runtime env)        -> X-Amzn-Trace-Id
    requestContext.identity.userArn       -> X-Amzn-RequestContext-Identity-UserArn
    requestContext.identity.user          -> X-Amzn-RequestContext-Identity-User
    requestContext.authorizer.principalId -> X-Amzn-RequestContext-Identity-PrincipalId

Request id and stage always overwrite; the rest only fill gaps. A body flagged
as base64 that does not decode is never passed on raw.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from iam_api.api.boundary import HTTPResult, handle_request, response_headers
from iam_api.config import Settings
from iam_api.config import settings as default_settings
from iam_api.dispatch.router import UNDECODABLE_BODY, Body
from iam_api.identity.inferencer import CallerInferencer
from iam_api.identity.loader import load_gateway_table_for_environment
from iam_api.logging_config import configure_logging
from iam_api.models.proxy import ProxyEvent
from iam_api.models.responses import ErrorResponse

logger = logging.getLogger(__name__)

_TRACE_ENV_VAR = "_X_AMZN_TRACE_ID"


@lru_cache(maxsize=1)
def _default_inferencer() -> CallerInferencer:
    """One inferencer per Lambda container; built on the first invocation."""
    configure_logging(default_settings.log_level, install_handler=False)
    table = load_gateway_table_for_environment(
        default_settings.gateway_dir,
        default_settings.environment,
        default_settings.gateway_file,
    )
    return CallerInferencer.from_settings(default_settings, table)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point (``iam_api.adapters.lambda_proxy.lambda_handler``)."""
    return handle_event(event, _default_inferencer(), default_settings)


def handle_event(
    event: dict[str, Any],
    inferencer: CallerInferencer,
    settings: Settings,
) -> dict[str, Any]:
    try:
        proxy_event = ProxyEvent.model_validate(event)
    except ValidationError as exc:
        logger.warning("Malformed proxy event: %s", exc.errors(include_url=False))
        return _to_proxy_response(
            HTTPResult(
                status_code=400,
                headers=response_headers(settings),
                body=ErrorResponse(message="Malformed proxy event").model_dump_json(),
            )
        )

    try:
        body = decode_body(proxy_event)
    except (binascii.Error, ValueError):
        logger.warning("Undecodable base64 body | path=%s", proxy_event.path)
        body = UNDECODABLE_BODY

    result = handle_request(
        proxy_event.httpMethod,
        proxy_event.path,
        event_headers(proxy_event),
        body,
        inferencer,
        settings,
    )
    return _to_proxy_response(result)


def event_headers(event: ProxyEvent) -> dict[str, str]:
    """Merge single- and multi-value headers and add gateway context headers."""
    headers: dict[str, str] = {}
    for name, values in (event.multiValueHeaders or {}).items():
        if values:
            headers[name.lower()] = values[0]
    for name, value in (event.headers or {}).items():
        if value is not None:
            headers[name.lower()] = value

    ctx = event.requestContext
    if request_id := _str(ctx.get("requestId")):
        headers["x-request-id"] = request_id
    if stage := _str(ctx.get("stage")):
        headers["x-stage"] = stage
    if trace_id := os.environ.get(_TRACE_ENV_VAR, ""):
        headers.setdefault("x-amzn-trace-id", trace_id)

    identity = _mapping(ctx.get("identity"))
    authorizer = _mapping(ctx.get("authorizer"))
    projections = {
        "x-amzn-requestcontext-identity-userarn": identity.get("userArn"),
        "x-amzn-requestcontext-identity-user": identity.get("user"),
        "x-amzn-requestcontext-identity-principalid": authorizer.get("principalId"),
    }
    for name, value in projections.items():
        if text := _str(value):
            headers.setdefault(name, text)

    return headers


def decode_body(event: ProxyEvent) -> Body:
    if event.body is None:
        return None
    if event.isBase64Encoded:
        return base64.b64decode(event.body, validate=True)
    return event.body


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _to_proxy_response(result: HTTPResult) -> dict[str, Any]:
    return {
        "statusCode": result.status_code,
        "headers": result.headers,
        "body": result.body,
        "isBase64Encoded": False,
    }
