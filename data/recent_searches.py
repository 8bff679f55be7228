"""Recent search terms: bounded, most-recent-first, persisted in the settings table."""

import json
import logging
import sqlite3

from data.settings_store import SettingsStore

logger = logging.getLogger(__name__)

RECENT_SEARCHES_KEY = "vidbrowse:recent_searches"
MAX_RECENT_SEARCHES = 5


class MalformedPersistedState(ValueError):
    """The stored payload is not a JSON list of strings."""


def decode_terms(raw: str, limit: int = MAX_RECENT_SEARCHES) -> tuple[str, ...]:
    """Parse a persisted payload into at most `limit` terms."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedPersistedState(f"not JSON: {e}") from e
    if not isinstance(data, list):
        raise MalformedPersistedState(f"expected a list, got {type(data).__name__}")
    if not all(isinstance(t, str) for t in data):
        raise MalformedPersistedState("list contains non-string items")
    # First occurrence wins so a hand-edited payload cannot repeat a term
    return tuple(dict.fromkeys(data))[:limit]


class RecentSearchStore:
    """Ordered set of the last few search terms.

    Loaded once on construction; every record() rewrites the whole list.
    Matching is exact and case-sensitive.
    """

    def __init__(self, settings: SettingsStore, key: str = RECENT_SEARCHES_KEY,
                 limit: int = MAX_RECENT_SEARCHES):
        self._settings = settings
        self._key = key
        self._limit = limit
        self._terms: tuple[str, ...] = self.load()

    @property
    def terms(self) -> tuple[str, ...]:
        return self._terms

    def load(self) -> tuple[str, ...]:
        """Read persisted terms. Missing or malformed payloads read as empty."""
        raw = self._settings.get_setting(self._key, "")
        if not raw:
            return ()
        try:
            return decode_terms(raw, self._limit)
        except MalformedPersistedState as e:
            logger.debug("Ignoring malformed recent searches under %r: %s", self._key, e)
            return ()

    def record(self, term: str) -> tuple[str, ...]:
        """Move term to the front, drop the overflow, persist. Returns the current list.

        A failed write is logged and leaves the list unchanged.
        """
        if not term:
            return self._terms
        updated = (term,) + tuple(t for t in self._terms if t != term)
        updated = updated[:self._limit]
        try:
            self._settings.set_setting(self._key, json.dumps(list(updated)))
        except sqlite3.Error as e:
            logger.warning("Could not persist recent searches under %r: %s", self._key, e)
            return self._terms
        self._terms = updated
        return updated
