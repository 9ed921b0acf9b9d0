"""Unit tests for the API Gateway proxy-event adapter.

Events are plain dicts shaped like API Gateway REST (v1) proxy events.
"""

from __future__ import annotations

import base64
import json
from typing import Any
from unittest.mock import patch

import pytest

from iam_api.adapters import lambda_proxy
from iam_api.adapters.lambda_proxy import event_headers, handle_event
from iam_api.config import Settings
from iam_api.identity.inferencer import CallerInferencer
from iam_api.models.proxy import ProxyEvent
from tests.conftest import API_A_HOST, API_B_HOST, RESTRICTED_ROLE


def _event(method: str = "GET", path: str = "/", **overrides: Any) -> dict[str, Any]:
    event: dict[str, Any] = {
        "resource": "/{proxy+}",
        "httpMethod": method,
        "path": path,
        "headers": {"Host": API_A_HOST},
        "multiValueHeaders": {"Host": [API_A_HOST]},
        "queryStringParameters": None,
        "body": None,
        "isBase64Encoded": False,
        "requestContext": {
            "requestId": "c6af9ac6-7b61-11e6-9a41-93e8deadbeef",
            "stage": "dev",
            "identity": {"sourceIp": "203.0.113.10", "userArn": None, "user": None},
        },
    }
    event.update(overrides)
    return event


def _handle(event: dict[str, Any], inferencer: CallerInferencer, settings: Settings) -> tuple[int, dict]:  # type: ignore[type-arg]
    response = handle_event(event, inferencer, settings)
    return response["statusCode"], json.loads(response["body"]) if response["body"] else {}


# ---------------------------------------------------------------------------
# Routing through the adapter
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize("method, path, body, expected_status", [
    ("GET", "/", None, 200),
    ("GET", "/health", None, 200),
    ("GET", "/data", None, 200),
    ("POST", "/data", '{"message":"test"}', 201),
    ("POST", "/data", None, 400),
    ("PUT", "/data", None, 405),
    ("GET", "/unknown", None, 404),
])
def test_handler_status_codes(
    inferencer: CallerInferencer,
    settings: Settings,
    method: str,
    path: str,
    body: str | None,
    expected_status: int,
) -> None:
    status, payload = _handle(_event(method, path, body=body), inferencer, settings)
    assert status == expected_status
    assert "message" in payload


@pytest.mark.unit
def test_response_shape(inferencer: CallerInferencer, settings: Settings) -> None:
    response = handle_event(_event("GET", "/health"), inferencer, settings)
    assert set(response) == {"statusCode", "headers", "body", "isBase64Encoded"}
    assert response["isBase64Encoded"] is False
    assert response["headers"]["Content-Type"] == "application/json"
    assert response["headers"]["Access-Control-Allow-Origin"] == "*"


@pytest.mark.unit
def test_options_returns_empty_body(inferencer: CallerInferencer, settings: Settings) -> None:
    response = handle_event(_event("OPTIONS", "/data"), inferencer, settings)
    assert response["statusCode"] == 200
    assert response["body"] == ""


@pytest.mark.unit
def test_base64_body_is_decoded(inferencer: CallerInferencer, settings: Settings) -> None:
    encoded = base64.b64encode(b'{"encoded": true}').decode()
    status, payload = _handle(
        _event("POST", "/data", body=encoded, isBase64Encoded=True), inferencer, settings
    )
    assert status == 201
    assert payload["data"] == {"encoded": True}


@pytest.mark.unit
@pytest.mark.parametrize("raw_body", ["@@not-base64@@", '{"a": 1}', "eyJhIjogMX0"])
def test_bad_base64_body_is_rejected_as_json(
    inferencer: CallerInferencer, settings: Settings, raw_body: str
) -> None:
    # '{"a": 1}' is valid JSON but not base64; it must not be echoed back
    status, payload = _handle(
        _event("POST", "/data", body=raw_body, isBase64Encoded=True), inferencer, settings
    )
    assert status == 400
    assert payload["message"] == "Invalid JSON in request body"
    assert payload["data"] is None


@pytest.mark.unit
def test_bad_base64_body_ignored_by_get(inferencer: CallerInferencer, settings: Settings) -> None:
    status, payload = _handle(
        _event("GET", "/data", body='{"a": 1}', isBase64Encoded=True), inferencer, settings
    )
    assert status == 200
    assert payload["data"]["count"] == 3


@pytest.mark.unit
@pytest.mark.parametrize("event", [{}, {"path": "/"}, {"httpMethod": 42}, None])
def test_malformed_event_is_400(inferencer: CallerInferencer, settings: Settings, event: Any) -> None:
    status, payload = _handle(event, inferencer, settings)
    assert status == 400
    assert payload == {"message": "Malformed proxy event"}


# ---------------------------------------------------------------------------
# Gateway context projected into headers
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_request_context_feeds_caller(inferencer: CallerInferencer, settings: Settings) -> None:
    _, payload = _handle(_event("GET", "/health"), inferencer, settings)
    caller = payload["caller"]
    assert caller["user_arn"] == "API A (Open Access)"
    assert caller["principal_id"] == "Request: c6af9ac6-7b61-11e6-9a41-93e8deadbeef"
    assert caller["account_id"] == "Stage: dev"


@pytest.mark.unit
def test_identity_user_arn_is_scanned_for_role(inferencer: CallerInferencer, settings: Settings) -> None:
    event = _event(
        "GET",
        "/data",
        headers={"Host": API_A_HOST, "X-Amz-Security-Token": "opaque-token"},
        requestContext={
            "requestId": "req-1",
            "identity": {"userArn": "arn:aws:sts::123456789012:assumed-role/Deployer/ci-run"},
        },
    )
    _, payload = _handle(event, inferencer, settings)
    assert payload["caller"]["role_name"] == "Deployer"
    assert payload["caller"]["session_name"] == "ci-run"


@pytest.mark.unit
def test_restricted_gateway_via_event(inferencer: CallerInferencer, settings: Settings) -> None:
    event = _event(
        "GET",
        "/data",
        headers={"Host": API_B_HOST, "X-Amz-Security-Token": "abc"},
        multiValueHeaders=None,
    )
    _, payload = _handle(event, inferencer, settings)
    assert "API B" in payload["caller"]["user_arn"]
    assert payload["caller"]["role_name"] == RESTRICTED_ROLE


@pytest.mark.unit
def test_event_headers_merge_and_projection() -> None:
    event = ProxyEvent.model_validate(_event(
        headers={"Host": "single.example", "X-Amzn-RequestContext-Identity-User": "client-sent"},
        multiValueHeaders={"Host": ["multi.example"], "Accept": ["a", "b"], "Empty": []},
        requestContext={
            "requestId": "req-2",
            "stage": "prod",
            "identity": {"user": "AIDAEXAMPLE", "userArn": "arn:aws:iam::1:user/bob"},
            "authorizer": {"principalId": "principal-123"},
        },
    ))
    headers = event_headers(event)
    assert headers["host"] == "single.example"
    assert headers["accept"] == "a"
    assert "empty" not in headers
    assert headers["x-request-id"] == "req-2"
    assert headers["x-stage"] == "prod"
    assert headers["x-amzn-requestcontext-identity-userarn"] == "arn:aws:iam::1:user/bob"
    # client-supplied value is kept
    assert headers["x-amzn-requestcontext-identity-user"] == "client-sent"
    assert headers["x-amzn-requestcontext-identity-principalid"] == "principal-123"


@pytest.mark.unit
def test_trace_id_from_runtime_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("_X_AMZN_TRACE_ID", "Root=1-5759e988-bd862e3fe1be46a994272793")
    event = ProxyEvent.model_validate(_event(requestContext={}))
    assert event_headers(event)["x-amzn-trace-id"] == "Root=1-5759e988-bd862e3fe1be46a994272793"


@pytest.mark.unit
def test_null_header_values_are_skipped() -> None:
    event = ProxyEvent.model_validate(_event(headers={"Host": None}, multiValueHeaders=None))
    assert "host" not in event_headers(event)


# ---------------------------------------------------------------------------
# Lambda entry point
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_lambda_handler_uses_cached_inferencer(
    inferencer: CallerInferencer, settings: Settings
) -> None:
    with patch.object(lambda_proxy, "_default_inferencer", return_value=inferencer), \
            patch.object(lambda_proxy, "default_settings", settings):
        response = lambda_proxy.lambda_handler(_event("GET", "/data"), context=None)
    assert response["statusCode"] == 200
    assert json.loads(response["body"])["data"]["count"] == 3
