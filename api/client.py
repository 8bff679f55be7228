"""Async client for the video listing/search API.

Every call returns parsed data or raises a FetchFailure subclass; callers
never see raw httpx exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

LIST_PATH = "/api/videos"
SEARCH_STORED_PATH = "/api/videos/search"
SEARCH_LIVE_PATH = "/api/videos/youtube-search"
HEALTH_PATH = "/health"

# Operation labels prefixed onto failure messages
_LIST_LABEL = "Failed to fetch videos"
_STORED_LABEL = "Failed to search stored videos"
_LIVE_LABEL = "Failed to search YouTube"
_HEALTH_LABEL = "Health check failed"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class FetchFailure(Exception):
    """A fetch that produced no usable result set.

    `reason` is a short machine tag (transport, timeout, upstream,
    malformed_response, unexpected); `message` is shown to the user as-is.
    """

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(reason={self.reason!r}, message={self.message!r})"


class TransportFailure(FetchFailure):
    """Network error or timeout before a response arrived."""


class UpstreamFailure(FetchFailure):
    """The API answered, but with an error status or an unreadable body."""

    def __init__(self, reason: str, message: str, status_code: Optional[int] = None):
        super().__init__(reason, message)
        self.status_code = status_code


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class Thumbnails(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    default: str = ""
    medium: str = ""
    high: str = ""


class VideoSummary(BaseModel):
    """One video record. Opaque to the browser beyond counting."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = ""
    video_id: str = ""
    title: str = ""
    description: str = ""
    channel_title: str = ""
    channel_id: str = ""
    published_at: Optional[str] = None
    thumbnails: Thumbnails = Field(default_factory=Thumbnails)

    @field_validator("thumbnails", mode="before")
    @classmethod
    def _null_thumbnails(cls, value):
        return {} if value is None else value


class VideoPage(BaseModel):
    """A page of results plus the total match count across all pages."""
    model_config = ConfigDict(extra="ignore")

    results: list[VideoSummary] = Field(default_factory=list)
    count: int = 0

    @field_validator("results", mode="before")
    @classmethod
    def _null_results(cls, value):
        # The API serializes an empty slice as null
        return [] if value is None else value


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

@runtime_checkable
class VideoAPIProtocol(Protocol):
    """The operations the browser needs from the video API."""

    async def list_videos(self, page: int = 1, page_size: int = 12,
                          sort: str = "latest") -> VideoPage: ...

    async def search_stored(self, query: str, page: int = 1, page_size: int = 12,
                            sort: str = "latest") -> VideoPage: ...

    async def search_live(self, query: str, page: int = 1, page_size: int = 12,
                          sort: str = "latest") -> VideoPage: ...

    async def health(self) -> dict: ...


def _error_message(resp: httpx.Response) -> str:
    """Pull the `error` field out of an error body, else describe the status."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Request failed with status code {resp.status_code}"


class VideoAPIClient:
    """httpx-backed implementation of VideoAPIProtocol."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        search_timeout: float = 20.0,
        retries: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.search_timeout = search_timeout
        if transport is None:
            transport = httpx.AsyncHTTPTransport(retries=retries)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def _get(self, path: str, params: Optional[dict], label: str, timeout: float) -> Any:
        try:
            resp = await self._client.get(path, params=params, timeout=timeout)
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out after %ss", path, params or "", timeout)
            raise TransportFailure("timeout", f"{label}: {str(e) or 'request timed out'}") from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", path, params or "", e)
            raise TransportFailure("transport", f"{label}: {str(e) or type(e).__name__}") from e

        if not resp.is_success:
            msg = _error_message(resp)
            logger.warning("%s returned %d: %s", path, resp.status_code, msg)
            raise UpstreamFailure("upstream", f"{label}: {msg}", status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamFailure(
                "malformed_response", f"{label}: response was not valid JSON",
                status_code=resp.status_code,
            ) from e

    async def _get_page(self, path: str, params: dict, label: str, timeout: float) -> VideoPage:
        data = await self._get(path, params, label, timeout)
        try:
            return VideoPage.model_validate(data)
        except ValidationError as e:
            logger.warning("Unexpected response shape from %s: %s", path, e)
            raise UpstreamFailure("malformed_response", f"{label}: unexpected response shape") from e

    async def list_videos(self, page: int = 1, page_size: int = 12, sort: str = "latest") -> VideoPage:
        """Page through stored videos."""
        params = {"page": page, "page_size": page_size, "sort": sort}
        return await self._get_page(LIST_PATH, params, _LIST_LABEL, self.timeout)

    async def search_stored(self, query: str, page: int = 1, page_size: int = 12,
                            sort: str = "latest") -> VideoPage:
        """Full-text search over stored videos."""
        params = {"q": query, "page": page, "page_size": page_size, "sort": sort}
        return await self._get_page(SEARCH_STORED_PATH, params, _STORED_LABEL, self.search_timeout)

    async def search_live(self, query: str, page: int = 1, page_size: int = 12,
                          sort: str = "latest") -> VideoPage:
        """Live search passed through to YouTube."""
        params = {"q": query, "page": page, "page_size": page_size, "sort": sort}
        return await self._get_page(SEARCH_LIVE_PATH, params, _LIVE_LABEL, self.search_timeout)

    async def health(self) -> dict:
        data = await self._get(HEALTH_PATH, None, _HEALTH_LABEL, self.timeout)
        return data if isinstance(data, dict) else {"status": data}

    async def aclose(self) -> None:
        await self._client.aclose()
