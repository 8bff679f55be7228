"""Health route: local liveness plus the video API's own health payload."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.client import FetchFailure
from web.deps import get_api_client, get_controller

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    controller = get_controller(request)
    body = {
        "status": "ok",
        "state": controller.state.value if controller.state else None,
        "cache_entries": len(controller.cache),
    }
    try:
        body["api"] = await get_api_client(request).health()
    except FetchFailure as e:
        logger.warning("Upstream health check failed: %s", e.message)
        body["status"] = "degraded"
        body["api"] = {"error": e.message}
        return JSONResponse(body, status_code=503)
    return JSONResponse(body)
