"""
Pluggable header matchers used by the caller-identity inferencer.

Two ordered strategy lists:
    - gateway matchers:  headers -> GatewayMatch | None
    - role matchers:     headers -> RoleMatch | None

The inferencer walks each list and keeps the first non-None result. Matchers
are pure functions of the (normalized, lower-cased) header mapping; the only
deployment-specific inputs are the GatewayTable and the execution-role ARN,
both bound in by the factory functions below.
"""

import logging
import re
from collections.abc import Callable, Mapping

from iam_api.identity.headers import header
from iam_api.models.gateway import AccessPolicy, GatewayTable
from iam_api.models.identity import GatewayMatch, RoleMatch

logger = logging.getLogger(__name__)

GatewayMatcher = Callable[[Mapping[str, str]], GatewayMatch | None]
RoleMatcher = Callable[[Mapping[str, str]], RoleMatch | None]

HOST_HEADER = "Host"
API_KEY_HEADER = "X-API-Key"
SECURITY_TOKEN_HEADER = "X-Amz-Security-Token"

# Scanned in this order; the first header yielding a role wins.
IDENTITY_HEADERS: tuple[str, ...] = (
    "Authorization",
    "X-Amz-User-Agent",
    "X-Amzn-RequestContext-Identity-Arn",
    "X-Amzn-RequestContext-Identity-UserArn",
    "X-Amzn-RequestContext-Identity-User",
    "X-Amzn-RequestContext-Identity-PrincipalId",
)

MIN_HEADER_LENGTH = 10  # values this short or shorter are never scanned
STS_TOKEN_PREFIX = "IQoJ"
STS_ROLE_SENTINEL = "STS-AssumedRole"
# Labeling heuristic only: the token is opaque, this is not a decode.
_STS_SESSION_SLICE = slice(50, 60)
_STS_SESSION_MIN_LENGTH = 100

_ROLE_NAME_END = re.compile(r"[/,; ]")


# ---------------------------------------------------------------------------
# Gateway matchers
# ---------------------------------------------------------------------------


def host_fragment_matcher(table: GatewayTable) -> GatewayMatcher:
    """Match the Host header against each table entry's API id fragment."""

    def match(headers: Mapping[str, str]) -> GatewayMatch | None:
        host = header(headers, HOST_HEADER)
        if not host:
            return None
        for entry in table.gateways:
            if entry.host_fragment and entry.host_fragment in host:
                return GatewayMatch(entry.label, entry.access)
        return None

    return match


def api_key_matcher(table: GatewayTable) -> GatewayMatcher:
    """An unknown host carrying an API key can only have come through the key-protected API."""
    entry = table.first_with_access(AccessPolicy.API_KEY)

    def match(headers: Mapping[str, str]) -> GatewayMatch | None:
        if entry is None or not header(headers, HOST_HEADER):
            return None
        if header(headers, API_KEY_HEADER):
            return GatewayMatch(entry.label, entry.access)
        return None

    return match


def match_any_host(headers: Mapping[str, str]) -> GatewayMatch | None:
    host = header(headers, HOST_HEADER)
    if not host:
        return None
    return GatewayMatch(f"API Gateway: {host}")


def default_gateway_matchers(table: GatewayTable) -> list[GatewayMatcher]:
    return [host_fragment_matcher(table), api_key_matcher(table), match_any_host]


# ---------------------------------------------------------------------------
# Role matchers
# ---------------------------------------------------------------------------


def parse_role_from_value(value: str) -> RoleMatch | None:
    """Pull a role (and possibly session) name out of an ARN-ish header value.

    ``...:assumed-role/<role>/<session>`` yields both names; ``...role/<role>``
    yields the role name up to the next ``/ , ;`` or space.
    """
    if "assumed-role" in value:
        parts = value.split("/")
        for i, part in enumerate(parts):
            if _is_assumed_role_segment(part) and i + 1 < len(parts):
                session = parts[i + 2] if i + 2 < len(parts) else ""
                return RoleMatch(parts[i + 1], session)

    idx = value.find("role/")
    if idx != -1:
        remaining = value[idx + len("role/"):]
        return RoleMatch(_ROLE_NAME_END.split(remaining, maxsplit=1)[0])

    return None


def _is_assumed_role_segment(part: str) -> bool:
    # "arn:aws:sts::123456789012:assumed-role" or a bare "assumed-role"
    return part == "assumed-role" or part.endswith(":assumed-role")


def execution_role_matcher(role_arn: str) -> RoleMatcher:
    """Role name from the configured execution-role ARN (last path segment)."""

    def match(headers: Mapping[str, str]) -> RoleMatch | None:
        if not role_arn or "role/" not in role_arn:
            return None
        parts = role_arn.split("/")
        if len(parts) > 1:
            return RoleMatch(parts[-1])
        return None

    return match


def identity_header_matcher(
    header_names: tuple[str, ...] = IDENTITY_HEADERS,
    log_preview_length: int = 100,
) -> RoleMatcher:
    """Scan identity-bearing headers for assumed-role or role ARN fragments."""

    def match(headers: Mapping[str, str]) -> RoleMatch | None:
        for name in header_names:
            value = header(headers, name)
            if len(value) <= MIN_HEADER_LENGTH:
                continue
            logger.debug(
                "Checking header for role info | header=%s value=%s",
                name,
                value[:log_preview_length],
            )
            found = parse_role_from_value(value)
            if found is not None:
                logger.debug("Role info found | header=%s role=%s", name, found.role_name)
                return found
        return None

    return match


def match_sts_token(headers: Mapping[str, str]) -> RoleMatch | None:
    """Label temporary STS credentials; the token itself is never decoded."""
    token = header(headers, SECURITY_TOKEN_HEADER)
    if not token.startswith(STS_TOKEN_PREFIX):
        return None
    session = ""
    if len(token) > _STS_SESSION_MIN_LENGTH:
        session = "session-" + token[_STS_SESSION_SLICE]
    return RoleMatch(STS_ROLE_SENTINEL, session)


def default_role_matchers(
    execution_role_arn: str = "",
    log_preview_length: int = 100,
) -> list[RoleMatcher]:
    return [
        execution_role_matcher(execution_role_arn),
        identity_header_matcher(log_preview_length=log_preview_length),
        match_sts_token,
    ]
