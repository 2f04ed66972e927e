"""
Public blog-read function.

Third parties read a user's blogs with one of that user's API keys:

    GET .../blogs?status=published&limit=50&offset=0
    GET .../blogs/<slug>
    Authorization: Bearer <api_key>

Routing is by path suffix so the function works behind any mount prefix
(e.g. ``/functions/v1/blog-api/blogs``). Every response is JSON, either
``{"data": ..., "count"?: n}`` or ``{"error": "..."}``, and carries CORS headers.

Local dev:
    PYTHONPATH=src uv run uvicorn blog_api.handler:app --reload --port 8002

Lambda handler:
    blog_api.handler.handler
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from mangum import Mangum

from blog_api import reader
from shared.db import get_client
from shared.logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, apikey",
}

app = FastAPI(
    title="Blog Read API",
    description="Read-only access to a user's blogs, authenticated by that user's API key.",
    version="0.1.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


def _json(body: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


def _error(message: str, status_code: int) -> JSONResponse:
    return _json({"error": message}, status_code)


def _int_param(raw: str | None, default: int) -> int:
    """Non-numeric input falls back to the default; negatives clamp to 0."""
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    return max(value, 0)


def _bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    if header.startswith("Bearer "):
        header = header[len("Bearer "):]
    return header.strip()


def _dispatch(request: Request) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

    api_key = _bearer_token(request)
    if not api_key:
        return _error("API key required", status.HTTP_401_UNAUTHORIZED)

    client = get_client()

    user_id = reader.authenticate_key(client, api_key)
    if user_id is None:
        return _error("Invalid or inactive API key", status.HTTP_401_UNAUTHORIZED)

    reader.touch_key(client, api_key)

    path = request.url.path
    params = request.query_params

    if path.endswith("/blogs") and request.method == "GET":
        result = reader.list_blogs(
            client,
            user_id,
            status=params.get("status") or reader.DEFAULT_STATUS,
            limit=_int_param(params.get("limit"), reader.DEFAULT_LIMIT),
            offset=_int_param(params.get("offset"), reader.DEFAULT_OFFSET),
        )
        if result.error:
            return _error(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
        return _json({"data": result.data, "count": len(result.data)})

    if "/blogs/" in path and request.method == "GET":
        slug = path.split("/blogs/", 1)[1]
        blog = reader.get_blog(client, user_id, slug)
        if blog is None:
            return _error("Blog not found", status.HTTP_404_NOT_FOUND)
        return _json({"data": blog})

    return _error("Endpoint not found", status.HTTP_404_NOT_FOUND)


@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
def serve(request: Request, path: str):
    try:
        return _dispatch(request)
    except Exception:
        logger.exception("Unhandled error", extra={"method": request.method, "path": request.url.path})
        return _error("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)


# Mangum adapts the FastAPI ASGI app for AWS Lambda + API Gateway (HTTP API).
handler = Mangum(app, lifespan="off")
