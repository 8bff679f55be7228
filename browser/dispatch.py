"""Pick which API operation serves a set of view parameters."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from api.client import VideoAPIProtocol, VideoPage
from browser.models import FetchResult, SearchMode, ViewParameters

logger = logging.getLogger(__name__)

Handler = Callable[[VideoAPIProtocol, ViewParameters], Awaitable[VideoPage]]


async def _list(api: VideoAPIProtocol, params: ViewParameters) -> VideoPage:
    return await api.list_videos(params.page, params.page_size, params.sort_order.value)


async def _search_live(api: VideoAPIProtocol, params: ViewParameters) -> VideoPage:
    return await api.search_live(params.search_text, params.page, params.page_size,
                                 params.sort_order.value)


async def _search_stored(api: VideoAPIProtocol, params: ViewParameters) -> VideoPage:
    return await api.search_stored(params.search_text, params.page, params.page_size,
                                   params.sort_order.value)


HANDLERS: dict[SearchMode, Handler] = {
    SearchMode.NONE: _list,
    SearchMode.LIVE: _search_live,
    SearchMode.STORED: _search_stored,
}

_missing = set(SearchMode) - HANDLERS.keys()
if _missing:
    raise RuntimeError(f"No fetch handler for search modes: {sorted(m.value for m in _missing)}")


def select_handler(params: ViewParameters) -> Handler:
    """A search mode without search text falls back to the plain listing."""
    mode = params.search_mode if params.search_text else SearchMode.NONE
    return HANDLERS[mode]


async def dispatch(api: VideoAPIProtocol, params: ViewParameters) -> FetchResult:
    """Run the selected operation. FetchFailure propagates; nothing is retried here."""
    handler = select_handler(params)
    logger.debug("Dispatching %s for %s", handler.__name__, params)
    page = await handler(api, params)
    return FetchResult(results=tuple(page.results), total_count=page.count)
