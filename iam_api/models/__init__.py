from iam_api.models.caller import CallerInfo
from iam_api.models.gateway import AccessPolicy, GatewayEntry, GatewayTable
from iam_api.models.identity import GatewayMatch, RoleMatch
from iam_api.models.proxy import ProxyEvent
from iam_api.models.responses import DataResponse, ErrorResponse, HealthResponse

__all__ = [
    "CallerInfo",
    "AccessPolicy",
    "GatewayEntry",
    "GatewayTable",
    "GatewayMatch",
    "RoleMatch",
    "ProxyEvent",
    "DataResponse",
    "ErrorResponse",
    "HealthResponse",
]
