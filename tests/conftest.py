"""Shared pytest fixtures for vidbrowse tests."""

import asyncio

import pytest

from api.client import VideoPage, VideoSummary
from config import Config, APIConfig, BrowserConfig, WebConfig, DatabaseConfig
from data.recent_searches import RecentSearchStore
from data.settings_store import SettingsStore


def make_video(n, prefix="vid") -> VideoSummary:
    return VideoSummary(
        id=f"{prefix}{n}",
        video_id=f"{prefix}{n:08d}",
        title=f"Video {prefix} {n}",
        channel_title="Test Channel",
        published_at="2025-01-15T10:00:00Z",
        thumbnails={"default": f"https://i.ytimg.com/vi/{prefix}{n}/default.jpg"},
    )


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeVideoAPI:
    """In-memory VideoAPIProtocol.

    Every call is recorded in `calls` as (op, query, page, page_size, sort).
    `hold(op, query, page)` returns an asyncio.Event the matching call waits
    on before answering; `failures[op]` makes that operation raise.
    """

    def __init__(self, total: int = 100):
        self.total = total
        self.totals: dict[str, int] = {}
        self.calls: list[tuple] = []
        self.failures: dict[str, Exception] = {}
        self._gates: dict[tuple, asyncio.Event] = {}

    def hold(self, op: str, query=None, page: int = 1) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[(op, query, page)] = gate
        return gate

    def calls_for(self, op: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == op]

    async def _respond(self, op, query, page, page_size, sort) -> VideoPage:
        self.calls.append((op, query, page, page_size, sort))
        gate = self._gates.get((op, query, page))
        if gate is not None:
            await gate.wait()
        if op in self.failures:
            raise self.failures[op]
        total = self.totals.get(op, self.total)
        first = (page - 1) * page_size
        count = max(0, min(page_size, total - first))
        prefix = f"{op}-{query or ''}-{sort}-"
        return VideoPage(results=[make_video(first + i, prefix) for i in range(count)], count=total)

    async def list_videos(self, page=1, page_size=12, sort="latest"):
        return await self._respond("list", None, page, page_size, sort)

    async def search_stored(self, query, page=1, page_size=12, sort="latest"):
        return await self._respond("stored", query, page, page_size, sort)

    async def search_live(self, query, page=1, page_size=12, sort="latest"):
        return await self._respond("live", query, page, page_size, sort)

    async def health(self):
        return {"status": "ok"}


@pytest.fixture
def settings_store(tmp_path):
    """SettingsStore backed by a temp-dir SQLite file."""
    store = SettingsStore(db_path=str(tmp_path / "test.db"))
    yield store
    store.close()


@pytest.fixture
def recent_store(settings_store):
    return RecentSearchStore(settings_store)


@pytest.fixture
def fake_api():
    return FakeVideoAPI()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sample_config(tmp_path):
    """Minimal Config with safe defaults for testing."""
    return Config(
        api=APIConfig(base_url="http://api.test", timeout=5, search_timeout=10, retries=0),
        browser=BrowserConfig(page_size=12, stale_after_seconds=60, cache_max_entries=50),
        web=WebConfig(host="127.0.0.1", port=9999),
        database=DatabaseConfig(path=str(tmp_path / "test.db")),
    )


@pytest.fixture
def config_yaml(tmp_path):
    """Write a minimal config.yaml and return its path."""
    cfg = tmp_path / "config.yaml"
    cfg.write_text("""\
api:
  base_url: "http://api.local:8080"
  timeout: 5
  search_timeout: 15
  retries: 1
browser:
  page_size: 24
  stale_after_seconds: 30
  cache_max_entries: 10
  default_sort: title
  default_search_type: stored
  popular_searches:
    - "cats"
    - "dogs"
web:
  host: 127.0.0.1
  port: 8001
database:
  path: "{db_path}"
""".format(db_path=str(tmp_path / "cfg_test.db")))
    return cfg
