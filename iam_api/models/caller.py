from pydantic import BaseModel


class CallerInfo(BaseModel):
    """Best-effort description of who sent a request.

    Every field is derived from proxy headers and is advisory only. Nothing
    downstream may use these values for access-control decisions.
    """

    user_arn: str = ""  # gateway label, or "Unauthenticated Request"
    user_id: str = ""  # "Role: ...", "Token: ...", or "Auth: ..."
    account_id: str = ""  # carries the stage label ("Stage: dev")
    principal_id: str = ""  # "Request: <id>" or "Trace: <id>"
    role_name: str = ""
    session_name: str = ""

    def summary(self) -> str:
        """Compact key=value rendering of the populated fields, for log lines."""
        parts = [f"{key}={value}" for key, value in self.model_dump().items() if value]
        return " ".join(parts) or "empty"
