"""Canonical cache keys for view parameters."""

from browser.models import SearchMode, ViewParameters

CacheKey = tuple[str, int, int, str, bool, str, str]

_NAMESPACE = "videos"


def compose(params: ViewParameters) -> CacheKey:
    """Map view parameters to a hashable, totally ordered key.

    Field order is fixed. The search mode value is kept alongside the
    active flag so live and stored results for the same text never share
    a key.
    """
    return (
        _NAMESPACE,
        params.page,
        params.page_size,
        params.search_text,
        params.search_mode is not SearchMode.NONE,
        params.search_mode.value,
        params.sort_order.value,
    )
