"""Query/cache controller: owns the current view and decides when to fetch.

State per current key:

    CACHED    fresh entry served, no fetch
    STALE     old entry served, immediately followed by FETCHING
    FETCHING  fetch in flight; the last shown results stay visible
    ERROR     fetch failed; last good results stay visible, retry() refetches

Mutating methods schedule fetches with asyncio and must be called from
inside the running event loop. Results are applied only while their key is
still the current key (last request wins); anything else is dropped.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from api.client import FetchFailure, VideoAPIProtocol, VideoSummary
from browser import pagination
from browser.cache import QueryCache
from browser.cache_key import CacheKey, compose
from browser.dispatch import dispatch
from browser.models import CacheEntry, SearchMode, SortOrder, ViewParameters
from browser.pagination import PaginationWindow
from data.recent_searches import RecentSearchStore

logger = logging.getLogger(__name__)


class QueryState(str, Enum):
    CACHED = "cached"
    STALE = "stale"
    FETCHING = "fetching"
    ERROR = "error"


# None is the state before start()
TRANSITIONS: dict[Optional[QueryState], frozenset[QueryState]] = {
    None: frozenset({QueryState.CACHED, QueryState.STALE, QueryState.FETCHING}),
    QueryState.CACHED: frozenset({QueryState.CACHED, QueryState.STALE, QueryState.FETCHING}),
    QueryState.STALE: frozenset({QueryState.FETCHING}),
    QueryState.FETCHING: frozenset({QueryState.CACHED, QueryState.STALE,
                                    QueryState.FETCHING, QueryState.ERROR}),
    QueryState.ERROR: frozenset({QueryState.CACHED, QueryState.STALE, QueryState.FETCHING}),
}


@dataclass(frozen=True)
class ViewSnapshot:
    """Read-only picture of the controller handed to the presentation layer."""
    state: Optional[QueryState]
    params: ViewParameters
    results: tuple[VideoSummary, ...]
    total_count: int
    is_fetching: bool
    is_loading: bool
    error: Optional[FetchFailure]
    pagination: Optional[PaginationWindow]
    recent_searches: tuple[str, ...]
    search_type: SearchMode

    @property
    def has_data(self) -> bool:
        """True once there is a result set to render, even an empty one."""
        return bool(self.results) or self.state is QueryState.CACHED


class QueryController:

    def __init__(
        self,
        api: VideoAPIProtocol,
        recent: RecentSearchStore,
        cache: Optional[QueryCache] = None,
        page_size: int = 12,
        stale_after: float = 120.0,
        window_size: int = pagination.DEFAULT_WINDOW_SIZE,
        sort_order: SortOrder | str = SortOrder.LATEST,
        search_type: SearchMode | str = SearchMode.LIVE,
    ):
        self._api = api
        self._recent = recent
        self._cache = cache if cache is not None else QueryCache()
        self._stale_after = stale_after
        self._window_size = window_size
        self._search_type = _search_type(search_type)

        self._params = ViewParameters(page=1, page_size=page_size, sort_order=SortOrder(sort_order))
        self._key: CacheKey = compose(self._params)
        self._state: Optional[QueryState] = None
        self._display: Optional[CacheEntry] = None
        self._error: Optional[FetchFailure] = None
        self._inflight: dict[CacheKey, asyncio.Task] = {}
        self.history: deque[tuple[Optional[QueryState], QueryState]] = deque(maxlen=50)

    # --- Read side ---

    @property
    def state(self) -> Optional[QueryState]:
        return self._state

    @property
    def params(self) -> ViewParameters:
        return self._params

    @property
    def cache(self) -> QueryCache:
        return self._cache

    @property
    def is_fetching(self) -> bool:
        return self._key in self._inflight

    def snapshot(self) -> ViewSnapshot:
        """While a new key loads, results, total_count and pagination still describe
        the last displayed entry; only params reflect the new request.
        """
        display = self._display
        results = display.results if display else ()
        total = display.total_count if display else 0
        fetching = self.is_fetching
        return ViewSnapshot(
            state=self._state,
            params=self._params,
            results=results,
            total_count=total,
            is_fetching=fetching,
            is_loading=fetching and display is None,
            error=self._error,
            pagination=pagination.compute(self._params.page, total, self._params.page_size,
                                          self._window_size),
            recent_searches=self._recent.terms,
            search_type=self._search_type,
        )

    # --- User actions ---

    def start(self) -> None:
        """Load the initial view."""
        if self._state is None:
            self._load(force=False)

    def search(self, term: str) -> bool:
        """Submit a search in the current search type. Returns False for blank input."""
        term = term.strip()
        if not term:
            return False
        self._recent.record(term)
        self._navigate(dataclasses.replace(
            self._params, search_text=term, search_mode=self._search_type, page=1,
        ))
        return True

    def quick_search(self, term: str) -> bool:
        """Search from a suggestion or recent-search chip."""
        return self.search(term)

    def clear_search(self) -> None:
        self._navigate(dataclasses.replace(
            self._params, search_text="", search_mode=SearchMode.NONE, page=1,
        ))

    def set_page(self, page: int) -> bool:
        """Go to page. Out-of-range pages and the current page are ignored."""
        window = pagination.compute(self._params.page, self._display_total(),
                                    self._params.page_size, self._window_size)
        if not pagination.is_navigable(window, page):
            return False
        self._navigate(dataclasses.replace(self._params, page=page))
        return True

    def next_page(self) -> bool:
        return self.set_page(self._params.page + 1)

    def previous_page(self) -> bool:
        """Step back one page, or to the last page when the total has shrunk below us."""
        last = pagination.total_pages(self._display_total(), self._params.page_size)
        return self.set_page(min(self._params.page - 1, last))

    def set_sort(self, sort_order: SortOrder | str) -> None:
        self._navigate(dataclasses.replace(self._params, sort_order=SortOrder(sort_order), page=1))

    def set_search_type(self, search_type: SearchMode | str) -> None:
        """Switch between live and stored search.

        With a search active this changes the key, so results are fetched
        for the new mode rather than reused from the other one.
        """
        self._search_type = _search_type(search_type)
        mode = self._search_type if self._params.search_text else SearchMode.NONE
        self._navigate(dataclasses.replace(self._params, search_mode=mode, page=1))

    def retry(self) -> None:
        """Fetch the current key again, even if its entry is fresh."""
        self._load(force=True)

    async def wait(self) -> None:
        """Wait until the current key has no fetch in flight."""
        while True:
            task = self._inflight.get(self._key)
            if task is None:
                return
            await asyncio.shield(task)

    async def close(self) -> None:
        tasks = list(self._inflight.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # --- Internals ---

    def _display_total(self) -> int:
        return self._display.total_count if self._display else 0

    def _transition(self, new_state: QueryState) -> None:
        old = self._state
        if new_state not in TRANSITIONS[old]:
            raise RuntimeError(f"Illegal state transition {old} -> {new_state}")
        self._state = new_state
        self.history.append((old, new_state))
        logger.debug("State %s -> %s for %s", old.value if old else None, new_state.value, self._key)

    def _navigate(self, params: ViewParameters) -> None:
        if self._state is not None and params == self._params:
            return
        self._params = params
        self._load(force=False)

    def _load(self, force: bool) -> None:
        key = compose(self._params)
        self._key = key
        self._error = None

        entry = self._cache.get(key)
        if entry is not None:
            self._display = entry
            # A key with a fetch already in flight stays FETCHING and joins it
            if not force and key not in self._inflight:
                if self._cache.is_fresh(entry, self._stale_after):
                    self._transition(QueryState.CACHED)
                    return
                self._transition(QueryState.STALE)
        self._start_fetch(key, self._params)

    def _start_fetch(self, key: CacheKey, params: ViewParameters) -> None:
        self._transition(QueryState.FETCHING)
        if key in self._inflight:
            logger.debug("Joining in-flight fetch for %s", key)
            return
        task = asyncio.get_running_loop().create_task(self._run_fetch(key, params))
        self._inflight[key] = task

    async def _run_fetch(self, key: CacheKey, params: ViewParameters) -> None:
        try:
            result = await dispatch(self._api, params)
        except FetchFailure as e:
            self._on_failure(key, e)
        except Exception as e:
            logger.exception("Unexpected error fetching %s", key)
            self._on_failure(key, FetchFailure("unexpected", str(e) or type(e).__name__))
        else:
            self._on_success(key, result.results, result.total_count)
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

    def _on_success(self, key: CacheKey, results, total_count: int) -> None:
        if key != self._key:
            logger.debug("Discarding superseded result for %s", key)
            return
        self._display = self._cache.put(key, results, total_count)
        self._error = None
        self._transition(QueryState.CACHED)

    def _on_failure(self, key: CacheKey, failure: FetchFailure) -> None:
        if key != self._key:
            logger.debug("Discarding superseded failure for %s: %s", key, failure.message)
            return
        logger.warning("Fetch failed (%s): %s", failure.reason, failure.message)
        self._error = failure
        self._transition(QueryState.ERROR)


def _search_type(value: SearchMode | str) -> SearchMode:
    mode = SearchMode(value)
    if mode is SearchMode.NONE:
        raise ValueError("search type must be 'live' or 'stored'")
    return mode
