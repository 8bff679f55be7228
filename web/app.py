"""FastAPI application: routers, rate limiting, middleware."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from web.middleware import SecurityHeadersMiddleware
from web.routers.health import router as health_router
from web.routers.suggestions import router as suggestions_router
from web.routers.view import router as view_router
from web.shared import limiter

logger = logging.getLogger(__name__)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        {"error": "Too many requests. Please wait a moment and try again."},
        status_code=429,
    )


def create_app() -> FastAPI:
    """Build the app. Controller and collaborators are attached to app.state by the caller."""
    app = FastAPI(title="vidbrowse")
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    app.include_router(view_router)
    app.include_router(suggestions_router)
    app.include_router(health_router)

    app.add_middleware(SecurityHeadersMiddleware)
    return app


app = create_app()
