from typing import NamedTuple

from iam_api.models.gateway import AccessPolicy


class GatewayMatch(NamedTuple):
    label: str
    access: AccessPolicy | None = None  # None when the host matched no table entry


class RoleMatch(NamedTuple):
    role_name: str = ""
    session_name: str = ""
