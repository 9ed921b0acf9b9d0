from iam_api.dispatch.router import INTERNAL_ERROR_BODY, dispatch

__all__ = ["INTERNAL_ERROR_BODY", "dispatch"]
