"""CallerInferencer: best-effort reconstruction of who sent a request.

The service sits behind API Gateway, which authenticates the caller but hands
the backend nothing more than proxy headers. This module guesses:

    1.  which gateway the request came through  (gateway matchers)
    2.  which role / session signed it          (role matchers)
    3.  request / trace correlation ids and the deployment stage

Critical invariants:
    - infer() never raises. A failure part-way through returns whatever was
      populated so far.
    - Token and Authorization values are only ever exposed as short previews.
    - The result is advisory. It must never drive an access-control decision.
"""

from __future__ import annotations

import logging

from iam_api.config import Settings
from iam_api.identity.headers import HeaderInput, header, normalize_headers
from iam_api.identity.matchers import (
    SECURITY_TOKEN_HEADER,
    GatewayMatcher,
    RoleMatcher,
    default_gateway_matchers,
    default_role_matchers,
)
from iam_api.models.caller import CallerInfo
from iam_api.models.gateway import AccessPolicy, GatewayTable
from iam_api.models.identity import GatewayMatch, RoleMatch

logger = logging.getLogger(__name__)

UNAUTHENTICATED_LABEL = "Unauthenticated Request"

_REQUEST_ID_HEADER = "X-Request-Id"
_TRACE_ID_HEADER = "X-Amzn-Trace-Id"
_STAGE_HEADER = "X-Stage"
_AUTHORIZATION_HEADER = "Authorization"


class CallerInferencer:
    """
    Builds a CallerInfo from request headers.

    Usage:
        inferencer = CallerInferencer(table, execution_role_arn=settings.aws_execution_role_arn)
        caller = inferencer.infer(request_headers)
    """

    def __init__(
        self,
        table: GatewayTable,
        execution_role_arn: str = "",
        *,
        gateway_matchers: list[GatewayMatcher] | None = None,
        role_matchers: list[RoleMatcher] | None = None,
        preview_length: int = 20,
        log_preview_length: int = 100,
    ) -> None:
        self._table = table
        self._preview_length = preview_length
        self._gateway_matchers = (
            gateway_matchers if gateway_matchers is not None else default_gateway_matchers(table)
        )
        self._role_matchers = (
            role_matchers
            if role_matchers is not None
            else default_role_matchers(execution_role_arn, log_preview_length)
        )

    @classmethod
    def from_settings(cls, settings: Settings, table: GatewayTable) -> CallerInferencer:
        return cls(
            table,
            execution_role_arn=settings.aws_execution_role_arn,
            preview_length=settings.preview_length,
            log_preview_length=settings.log_preview_length,
        )

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def infer(self, headers: HeaderInput) -> CallerInfo:
        caller = CallerInfo()
        try:
            self._populate(caller, normalize_headers(headers))
        except Exception:
            logger.exception("Caller inference failed, returning partial caller info")
        return caller

    def identify_gateway(self, headers: HeaderInput) -> GatewayMatch | None:
        normalized = normalize_headers(headers)
        for matcher in self._gateway_matchers:
            found = matcher(normalized)
            if found is not None:
                return found
        return None

    def extract_role_info(self, headers: HeaderInput) -> RoleMatch:
        """Run the role matchers in order; empty names when none matches."""
        normalized = normalize_headers(headers)
        for matcher in self._role_matchers:
            found = matcher(normalized)
            if found is not None:
                return found
        return RoleMatch()

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def _populate(self, caller: CallerInfo, headers: dict[str, str]) -> None:
        # Correlation: request id wins over trace id
        if request_id := header(headers, _REQUEST_ID_HEADER):
            caller.principal_id = f"Request: {request_id}"
        elif trace_id := header(headers, _TRACE_ID_HEADER):
            caller.principal_id = f"Trace: {trace_id}"

        if stage := header(headers, _STAGE_HEADER):
            caller.account_id = f"Stage: {stage}"

        gateway = self.identify_gateway(headers)
        if gateway is not None:
            caller.user_arn = gateway.label

        token = header(headers, SECURITY_TOKEN_HEADER)
        authorization = header(headers, _AUTHORIZATION_HEADER)

        if token:
            role = self.extract_role_info(headers)
            if role.role_name:
                caller.role_name = role.role_name
                caller.user_id = f"Role: {role.role_name}"
            else:
                caller.user_id = f"Token: {self._preview(token)}"
            if role.session_name:
                caller.session_name = role.session_name

            # Hard override: the restricted API only admits one role, so any
            # parsed role is replaced by it.
            if (
                gateway is not None
                and gateway.access == AccessPolicy.RESTRICTED
                and self._table.restricted_role_name
            ):
                caller.role_name = self._table.restricted_role_name
                caller.user_id = f"Role: {self._table.restricted_role_name}"

        elif authorization:
            caller.user_id = f"Auth: {self._preview(authorization)}"
        elif not caller.user_arn:
            caller.user_arn = UNAUTHENTICATED_LABEL

    def _preview(self, value: str) -> str:
        return value[: self._preview_length] + "..."
