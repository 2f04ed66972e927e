"""
Dashboard Lambda entry point.

Local dev:
    PYTHONPATH=src uv run uvicorn dashboard.handler:app --reload --port 8001

Lambda handler:
    dashboard.handler.handler
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum

from dashboard.routes import api_keys, auth, blogs, overview, profile, tags
from shared.config import ConfigurationError
from shared.logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Blog CMS Dashboard API",
    description="Admin API behind the blog dashboard: sessions, blogs, tags, API keys and profile.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(blogs.router)
app.include_router(tags.router)
app.include_router(api_keys.router)
app.include_router(profile.router)
app.include_router(overview.router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error(str(exc), extra={"path": request.url.path, "missing": exc.missing})
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


@app.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}


# Mangum adapts the FastAPI ASGI app for AWS Lambda + API Gateway (HTTP API).
handler = Mangum(app, lifespan="off")
