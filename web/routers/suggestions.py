"""Search suggestion routes: popular terms + recent searches."""

from fastapi import APIRouter, Request

from web.deps import get_browser_config, get_recent_store
from web.helpers import build_suggestions
from web.shared import limiter, READ_LIMIT

router = APIRouter()


@router.get("/api/suggestions")
@limiter.limit(READ_LIMIT)
async def suggestions(request: Request):
    """Terms for the quick-search chips under the search box."""
    cfg = get_browser_config(request)
    recent = get_recent_store(request)
    return build_suggestions(cfg.popular_searches, recent.terms)


@router.get("/api/recent-searches")
@limiter.limit(READ_LIMIT)
async def recent_searches(request: Request):
    return {"recent": list(get_recent_store(request).terms)}
