"""Catch-all route: every method and path goes through the HTTP boundary.

Routing by path happens in the dispatcher, not in FastAPI, so the direct
listener and the Lambda adapter answer identically.
"""

from fastapi import APIRouter, Depends, Request, Response

from iam_api.api.boundary import handle_request
from iam_api.api.deps import get_inferencer, get_settings
from iam_api.config import Settings
from iam_api.identity.inferencer import CallerInferencer

router = APIRouter()

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@router.api_route("/{full_path:path}", methods=_METHODS, include_in_schema=False)
async def catch_all(
    request: Request,
    inferencer: CallerInferencer = Depends(get_inferencer),
    settings: Settings = Depends(get_settings),
) -> Response:
    body = await request.body()
    result = handle_request(
        request.method,
        request.url.path,
        request.headers.items(),
        body,
        inferencer,
        settings,
    )
    return Response(content=result.body, status_code=result.status_code, headers=result.headers)
