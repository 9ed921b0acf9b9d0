from enum import Enum

from pydantic import BaseModel, Field


class AccessPolicy(str, Enum):
    OPEN = "open"  # any authenticated IAM caller
    RESTRICTED = "restricted"  # resource policy limits callers to one role
    API_KEY = "api_key"  # IAM plus an API key bound to a usage plan


class GatewayEntry(BaseModel):
    name: str
    host_fragment: str  # sub-domain fragment, i.e. the deployed REST API id
    label: str  # reported as CallerInfo.user_arn
    access: AccessPolicy = AccessPolicy.OPEN


class GatewayTable(BaseModel):
    version: str = "1.0"
    restricted_role_name: str = ""
    gateways: list[GatewayEntry] = Field(default_factory=list)

    def first_with_access(self, access: AccessPolicy) -> GatewayEntry | None:
        for entry in self.gateways:
            if entry.access == access:
                return entry
        return None
