"""View routes: read and drive the browsing controller."""

from typing import Literal

from fastapi import APIRouter, Request, Query
from pydantic import BaseModel, Field

from browser.models import SortOrder
from web.deps import get_controller
from web.helpers import snapshot_to_dict
from web.shared import limiter, READ_LIMIT, ACTION_LIMIT

router = APIRouter()


class PageRequest(BaseModel):
    page: int = Field(..., ge=1)


class SortRequest(BaseModel):
    sort: SortOrder


class SearchRequest(BaseModel):
    q: str = Field(..., max_length=200)


class SearchTypeRequest(BaseModel):
    search_type: Literal["live", "stored"]


async def _respond(request: Request, wait: bool) -> dict:
    controller = get_controller(request)
    if wait:
        await controller.wait()
    return snapshot_to_dict(controller.snapshot())


@router.get("/api/view")
@limiter.limit(READ_LIMIT)
async def get_view(request: Request, wait: bool = Query(False)):
    """Current view snapshot. Starts the initial load on first call."""
    get_controller(request).start()
    return await _respond(request, wait)


@router.post("/api/view/page")
@limiter.limit(ACTION_LIMIT)
async def set_page(request: Request, body: PageRequest, wait: bool = Query(False)):
    """Jump to a page; out-of-range pages leave the view unchanged."""
    controller = get_controller(request)
    controller.start()
    controller.set_page(body.page)
    return await _respond(request, wait)


@router.post("/api/view/sort")
@limiter.limit(ACTION_LIMIT)
async def set_sort(request: Request, body: SortRequest, wait: bool = Query(False)):
    controller = get_controller(request)
    controller.start()
    controller.set_sort(body.sort)
    return await _respond(request, wait)


@router.post("/api/view/search")
@limiter.limit(ACTION_LIMIT)
async def search(request: Request, body: SearchRequest, wait: bool = Query(False)):
    """Submit a search in the current search type."""
    controller = get_controller(request)
    controller.start()
    controller.search(body.q)
    return await _respond(request, wait)


@router.post("/api/view/quick-search")
@limiter.limit(ACTION_LIMIT)
async def quick_search(request: Request, body: SearchRequest, wait: bool = Query(False)):
    """Search from a suggestion or recent-search chip."""
    controller = get_controller(request)
    controller.start()
    controller.quick_search(body.q)
    return await _respond(request, wait)


@router.delete("/api/view/search")
@limiter.limit(ACTION_LIMIT)
async def clear_search(request: Request, wait: bool = Query(False)):
    controller = get_controller(request)
    controller.start()
    controller.clear_search()
    return await _respond(request, wait)


@router.post("/api/view/search-type")
@limiter.limit(ACTION_LIMIT)
async def set_search_type(request: Request, body: SearchTypeRequest, wait: bool = Query(False)):
    """Toggle live vs stored search; refetches when a search is active."""
    controller = get_controller(request)
    controller.start()
    controller.set_search_type(body.search_type)
    return await _respond(request, wait)


@router.post("/api/view/retry")
@limiter.limit(ACTION_LIMIT)
async def retry(request: Request, wait: bool = Query(False)):
    controller = get_controller(request)
    controller.start()
    controller.retry()
    return await _respond(request, wait)
