"""Custom exception types raised by request handlers and rendered by dispatch()."""


class DispatchError(Exception):
    """Base for handler failures that map onto a client-facing status code."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidBodyError(DispatchError):
    """Raised when POST /data carries an empty body or anything but a JSON object."""

    status_code = 400


class EndpointNotFoundError(DispatchError):
    status_code = 404


class MethodNotAllowedError(DispatchError):
    status_code = 405

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method {method} not allowed")
