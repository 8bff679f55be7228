"""App state wiring and snapshot serialization shared across web routers."""

from typing import Optional

from api.client import FetchFailure
from browser.cache import QueryCache
from browser.controller import QueryController, ViewSnapshot
from browser.models import SearchMode
from browser.pagination import page_info
from config import BrowserConfig
from data.recent_searches import RecentSearchStore

# Suggestion chips shown under the search box
POPULAR_SHOWN = 6
RECENT_SHOWN = 4

_SOURCE_LABELS = {
    SearchMode.LIVE: "Live from YouTube",
    SearchMode.STORED: "From stored videos",
}

_MODE_TITLES = {
    SearchMode.LIVE: "Live YouTube Search",
    SearchMode.STORED: "Stored Videos Search",
}


# ---------------------------------------------------------------------------
# App state
# ---------------------------------------------------------------------------

def init_app_state(state, api_client, recent_store: RecentSearchStore,
                   browser_config: Optional[BrowserConfig] = None) -> QueryController:
    """Build the controller and hang it plus its collaborators on app.state."""
    cfg = browser_config or BrowserConfig()
    controller = QueryController(
        api=api_client,
        recent=recent_store,
        cache=QueryCache(max_entries=cfg.cache_max_entries),
        page_size=cfg.page_size,
        stale_after=cfg.stale_after_seconds,
        window_size=cfg.window_size,
        sort_order=cfg.default_sort,
        search_type=cfg.default_search_type,
    )
    state.api_client = api_client
    state.recent_store = recent_store
    state.browser_config = cfg
    state.controller = controller
    return controller


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def error_to_dict(error: Optional[FetchFailure]) -> Optional[dict]:
    if error is None:
        return None
    return {"reason": error.reason, "message": error.message, "retryable": True}


def build_summary(snap: ViewSnapshot) -> dict:
    """Header copy for the current view, mirroring the dashboard's wording."""
    params = snap.params
    searching = params.search_active
    shown = len(snap.results)

    if searching:
        title = f'{_MODE_TITLES[params.search_mode]}: "{params.search_text}"'
        showing = f"Showing {shown} videos" if snap.total_count else ""
        source = _SOURCE_LABELS[params.search_mode]
    else:
        title = f"{snap.total_count:,} stored videos" if snap.total_count else ""
        showing = f"Showing {shown} of {snap.total_count:,} videos" if snap.total_count else ""
        source = None

    loading_message = None
    if snap.is_loading:
        loading_message = "Searching YouTube..." if searching else "Loading videos..."

    return {
        "title": title,
        "showing": showing or None,
        "source": source,
        "page_info": page_info(snap.pagination) if snap.pagination else None,
        "loading_message": loading_message,
    }


def snapshot_to_dict(snap: ViewSnapshot) -> dict:
    return {
        "state": snap.state.value if snap.state else None,
        "params": snap.params.to_dict(),
        "results": [v.model_dump() for v in snap.results],
        "count": snap.total_count,
        "is_fetching": snap.is_fetching,
        "is_loading": snap.is_loading,
        "has_data": snap.has_data,
        "error": error_to_dict(snap.error),
        "pagination": snap.pagination.to_dict() if snap.pagination else None,
        "recent_searches": list(snap.recent_searches),
        "search_type": snap.search_type.value,
        "summary": build_summary(snap),
    }


def build_suggestions(popular: list[str], recent: tuple[str, ...]) -> dict:
    return {
        "popular": list(popular[:POPULAR_SHOWN]),
        "recent": list(recent[:RECENT_SHOWN]),
    }
