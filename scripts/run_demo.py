"""Replay the gateway demo scenarios against a running API.

Each scenario sends the headers one of the three API Gateway fronts would
forward and checks the status code and the inferred caller label.

Requires:
    API running locally:  python -m iam_api   (or uvicorn iam_api.main:app)
    httpx:                pip install ".[demo]"

Usage:
    python scripts/run_demo.py
    API_URL=http://localhost:8080 python scripts/run_demo.py

Exit code: 0 = all pass, 1 = one or more failures
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

import httpx

# ---------------------------------------------------------------------------
# ANSI colour helpers
# ---------------------------------------------------------------------------

GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"


def _green(text: str) -> str:
    return f"{GREEN}{text}{RESET}"


def _red(text: str) -> str:
    return f"{RED}{text}{RESET}"


# ---------------------------------------------------------------------------
# Scenario definition
# ---------------------------------------------------------------------------

_API_A_HOST = "7pxbysogui.execute-api.eu-west-2.amazonaws.com"
_API_B_HOST = "cqst45pam7.execute-api.eu-west-2.amazonaws.com"
_API_C_HOST = "vo9f4c6gj4.execute-api.eu-west-2.amazonaws.com"
_ASSUMED_ROLE_ARN = "arn:aws:sts::123456789012:assumed-role/DemoReader/demo-session"


@dataclass
class Scenario:
    name: str
    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    expected_status: int = 200
    expected_user_arn: str | None = None  # substring; None skips the check


SCENARIOS: list[Scenario] = [
    Scenario(
        name="health-unauthenticated",
        method="GET",
        path="/health",
        expected_status=200,
    ),
    Scenario(
        name="root-via-api-a",
        method="GET",
        path="/",
        headers={"Host": _API_A_HOST, "X-Amz-Security-Token": "IQoJ" + "a" * 120},
        expected_user_arn="API A",
    ),
    Scenario(
        name="data-via-api-b-restricted",
        method="GET",
        path="/data",
        headers={
            "Host": _API_B_HOST,
            "X-Amz-Security-Token": "IQoJ" + "b" * 120,
            "X-Amzn-RequestContext-Identity-UserArn": _ASSUMED_ROLE_ARN,
        },
        expected_user_arn="API B",
    ),
    Scenario(
        name="data-via-api-c-with-key",
        method="GET",
        path="/data",
        headers={"Host": _API_C_HOST, "X-API-Key": "demo-key", "Authorization": "AWS4-HMAC-SHA256 demo"},
        expected_user_arn="API C",
    ),
    Scenario(
        name="post-data-valid-json",
        method="POST",
        path="/data",
        headers={"Content-Type": "application/json"},
        body='{"message": "Hello from demo script", "count": 3}',
        expected_status=201,
    ),
    Scenario(
        name="post-data-invalid-json",
        method="POST",
        path="/data",
        headers={"Content-Type": "application/json"},
        body="{not json",
        expected_status=400,
    ),
    Scenario(
        name="delete-data-not-allowed",
        method="DELETE",
        path="/data",
        expected_status=405,
    ),
    Scenario(
        name="unknown-path",
        method="GET",
        path="/nonexistent",
        expected_status=404,
    ),
    Scenario(
        name="cors-preflight",
        method="OPTIONS",
        path="/data",
        expected_status=200,
    ),
]


# ---------------------------------------------------------------------------
# HTTP helper
# ---------------------------------------------------------------------------


def _send(client: httpx.Client, api_url: str, scenario: Scenario) -> tuple[int, str]:
    """Send one scenario and return (status_code, caller.user_arn)."""
    response = client.request(
        scenario.method,
        f"{api_url}{scenario.path}",
        headers=scenario.headers,
        content=scenario.body,
        timeout=10.0,
    )
    if not response.content:
        return response.status_code, ""
    caller = response.json().get("caller") or {}
    return response.status_code, caller.get("user_arn", "")


def _check(scenario: Scenario, status: int, user_arn: str) -> bool:
    if status != scenario.expected_status:
        return False
    if scenario.expected_user_arn is not None and scenario.expected_user_arn not in user_arn:
        return False
    return True


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> int:
    api_url = os.environ.get("API_URL", "http://localhost:8080").rstrip("/")

    print(f"IAM Demo API scenarios against {api_url}")
    print(f"{'Scenario':<32} {'Expected':<10} {'Actual':<10} {'Caller':<32} {'Result'}")
    print("-" * 96)

    passed = 0
    failed = 0

    with httpx.Client() as client:
        for scenario in SCENARIOS:
            try:
                status, user_arn = _send(client, api_url, scenario)
            except httpx.HTTPError as exc:
                status, user_arn = -1, f"ERROR: {exc}"

            if _check(scenario, status, user_arn):
                passed += 1
                result = _green("PASS")
            else:
                failed += 1
                result = _red("FAIL")

            print(
                f"{scenario.name:<32} {scenario.expected_status:<10} {status:<10} "
                f"{user_arn[:30]:<32} {result}"
            )

    print("-" * 96)
    summary = f"{passed}/{passed + failed} scenarios passed"
    print(_green(summary) if failed == 0 else _red(summary))
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
