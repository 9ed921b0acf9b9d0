"""Shared fixtures for scenario tests.

Scenario tests replay the requests each API Gateway front forwards and go
through the full HTTP boundary. No server, no network, no AWS account needed.
All scenario tests use @pytest.mark.scenario.
"""
import json

import pytest

from iam_api.api.boundary import handle_request
from iam_api.config import Settings
from iam_api.identity.inferencer import CallerInferencer
from iam_api.models.gateway import GatewayTable

# Note: default_table and settings fixtures are defined in root tests/conftest.py


@pytest.fixture(scope="session")
def scenario_inferencer(default_table: GatewayTable) -> CallerInferencer:
    return CallerInferencer(default_table)


def send(
    inferencer: CallerInferencer,
    settings: Settings,
    method: str,
    path: str,
    headers: dict[str, str],
    body: str | None = None,
) -> tuple[int, dict]:
    """Run one request through the boundary and return (status, parsed body)."""
    result = handle_request(method, path, headers, body, inferencer, settings)
    return result.status_code, json.loads(result.body) if result.body else {}
