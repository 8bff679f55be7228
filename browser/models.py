"""View parameters and cache records shared by the browser components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from api.client import VideoSummary


class SearchMode(str, Enum):
    NONE = "none"
    LIVE = "live"
    STORED = "stored"


class SortOrder(str, Enum):
    LATEST = "latest"
    OLDEST = "oldest"
    TITLE = "title"
    CHANNEL = "channel"


@dataclass(frozen=True)
class ViewParameters:
    """Everything that decides which result set the user is looking at.

    Frozen: a change always produces a new instance via dataclasses.replace().
    """
    page: int = 1
    page_size: int = 12
    search_text: str = ""
    search_mode: SearchMode = SearchMode.NONE
    sort_order: SortOrder = SortOrder.LATEST

    def __post_init__(self):
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")
        # Coerce wire strings so callers can pass "live" / "title"
        object.__setattr__(self, "search_mode", SearchMode(self.search_mode))
        object.__setattr__(self, "sort_order", SortOrder(self.sort_order))

    @property
    def search_active(self) -> bool:
        return self.search_mode is not SearchMode.NONE and bool(self.search_text)

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "search_text": self.search_text,
            "search_mode": self.search_mode.value,
            "sort": self.sort_order.value,
        }


@dataclass(frozen=True)
class FetchResult:
    """What a successful dispatch hands back to the controller."""
    results: tuple[VideoSummary, ...]
    total_count: int


@dataclass(frozen=True)
class CacheEntry:
    results: tuple[VideoSummary, ...]
    total_count: int
    fetched_at: float  # monotonic seconds
