"""Bounded page-number window for pagination controls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_WINDOW_SIZE = 5


@dataclass(frozen=True)
class PaginationWindow:
    current_page: int
    total_pages: int
    total_items: int
    pages: tuple[int, ...]
    show_first_page: bool
    show_leading_ellipsis: bool
    show_last_page: bool
    show_trailing_ellipsis: bool

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def to_dict(self) -> dict:
        return {
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_items": self.total_items,
            "pages": list(self.pages),
            "show_first_page": self.show_first_page,
            "show_leading_ellipsis": self.show_leading_ellipsis,
            "show_last_page": self.show_last_page,
            "show_trailing_ellipsis": self.show_trailing_ellipsis,
            "has_previous": self.has_previous,
            "has_next": self.has_next,
        }


def total_pages(total_items: int, page_size: int) -> int:
    """Number of pages needed for total_items (ceiling division)."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    if total_items <= 0:
        return 0
    return (total_items + page_size - 1) // page_size


def compute(current_page: int, total_items: int, page_size: int,
            window_size: int = DEFAULT_WINDOW_SIZE) -> Optional[PaginationWindow]:
    """Center a window of page numbers on current_page.

    Returns None when everything fits on one page (no controls shown).
    The window always holds min(window_size, total_pages) pages.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")
    pages_total = total_pages(total_items, page_size)
    if pages_total <= 1:
        return None

    start = max(1, current_page - window_size // 2)
    end = min(pages_total, start + window_size - 1)
    start = max(1, end - window_size + 1)

    return PaginationWindow(
        current_page=current_page,
        total_pages=pages_total,
        total_items=total_items,
        pages=tuple(range(start, end + 1)),
        show_first_page=start > 1,
        show_leading_ellipsis=start > 2,
        show_last_page=end < pages_total,
        show_trailing_ellipsis=end < pages_total - 1,
    )


def is_navigable(window: Optional[PaginationWindow], page: int) -> bool:
    """A click is acted on only inside [1, total_pages] and away from the current page."""
    if window is None:
        return False
    return 1 <= page <= window.total_pages and page != window.current_page


def page_info(window: PaginationWindow) -> str:
    """'Showing page 2 of 9 (100 total videos)'."""
    return (f"Showing page {window.current_page} of {window.total_pages} "
            f"({window.total_items:,} total videos)")
