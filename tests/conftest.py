"""
Shared test fixtures.
"""

from pathlib import Path

import pytest

from iam_api.config import PACKAGED_GATEWAY_DIR, Settings
from iam_api.identity.inferencer import CallerInferencer
from iam_api.identity.loader import load_gateway_table
from iam_api.models.gateway import GatewayTable

RESTRICTED_ROLE = "aws-lambda-rest-iam-api-api-b-restricted-role"

API_A_HOST = "7pxbysogui.execute-api.eu-west-2.amazonaws.com"
API_B_HOST = "cqst45pam7.execute-api.eu-west-2.amazonaws.com"
API_C_HOST = "vo9f4c6gj4.execute-api.eu-west-2.amazonaws.com"


@pytest.fixture(scope="session")
def gateway_dir() -> Path:
    return PACKAGED_GATEWAY_DIR


@pytest.fixture(scope="session")
def default_table(gateway_dir: Path) -> GatewayTable:
    return load_gateway_table(gateway_dir / "default.yaml")


@pytest.fixture
def settings(gateway_dir: Path) -> Settings:
    return Settings(
        environment="dev",
        gateway_dir=str(gateway_dir),
        aws_execution_role_arn="",
    )


@pytest.fixture
def inferencer(default_table: GatewayTable) -> CallerInferencer:
    return CallerInferencer(default_table)


@pytest.fixture
def sts_token() -> str:
    """A fake temporary-credential token long enough to yield a session label."""
    return "IQoJb3JpZ2luX2VjE" + "".join(chr(ord("A") + i % 26) for i in range(150))
