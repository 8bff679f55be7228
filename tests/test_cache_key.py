"""Tests for browser/cache_key.py and the ViewParameters value object."""

import dataclasses
import itertools

import pytest

from browser.cache_key import compose
from browser.models import SearchMode, SortOrder, ViewParameters


BASE = ViewParameters(page=2, page_size=12, search_text="cats",
                      search_mode=SearchMode.LIVE, sort_order=SortOrder.TITLE)


class TestCompose:
    def test_deterministic(self):
        assert compose(BASE) == compose(BASE)
        assert compose(BASE) == compose(dataclasses.replace(BASE))

    @pytest.mark.parametrize("field, value", [
        ("page", 3),
        ("page_size", 24),
        ("search_text", "dogs"),
        ("search_mode", SearchMode.STORED),
        ("search_mode", SearchMode.NONE),
        ("sort_order", SortOrder.LATEST),
    ])
    def test_any_field_change_changes_key(self, field, value):
        other = dataclasses.replace(BASE, **{field: value})
        assert compose(other) != compose(BASE)

    def test_live_and_stored_never_share_key(self):
        live = ViewParameters(search_text="football", search_mode=SearchMode.LIVE)
        stored = dataclasses.replace(live, search_mode=SearchMode.STORED)
        assert compose(live) != compose(stored)

    def test_all_distinct_params_give_distinct_keys(self):
        combos = list(itertools.product(
            [1, 2], [12], ["", "a", "A"], list(SearchMode), list(SortOrder),
        ))
        keys = {compose(ViewParameters(p, s, t, m, o)) for p, s, t, m, o in combos}
        assert len(keys) == len(combos)

    def test_keys_are_hashable_and_ordered(self):
        a = compose(ViewParameters(page=1))
        b = compose(ViewParameters(page=2))
        assert a < b
        assert len({a, b, a}) == 2

    def test_field_order(self):
        key = compose(BASE)
        assert key == ("videos", 2, 12, "cats", True, "live", "title")


class TestViewParameters:
    def test_defaults(self):
        p = ViewParameters()
        assert p.page == 1
        assert p.search_mode is SearchMode.NONE
        assert p.sort_order is SortOrder.LATEST
        assert p.search_active is False

    def test_wire_strings_coerced(self):
        p = ViewParameters(search_text="x", search_mode="stored", sort_order="channel")
        assert p.search_mode is SearchMode.STORED
        assert p.sort_order is SortOrder.CHANNEL
        assert compose(p) == compose(ViewParameters(search_text="x", search_mode=SearchMode.STORED,
                                                    sort_order=SortOrder.CHANNEL))

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            BASE.page = 5

    @pytest.mark.parametrize("kw", [{"page": 0}, {"page_size": 0}, {"page": -3}])
    def test_rejects_non_positive(self, kw):
        with pytest.raises(ValueError):
            ViewParameters(**kw)

    def test_rejects_unknown_sort(self):
        with pytest.raises(ValueError):
            ViewParameters(sort_order="popularity")

    def test_to_dict(self):
        assert BASE.to_dict() == {
            "page": 2, "page_size": 12, "search_text": "cats",
            "search_mode": "live", "sort": "title",
        }
