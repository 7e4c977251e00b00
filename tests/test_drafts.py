"""Tests for campaign wizard auto-save."""

import json
from datetime import date
from unittest.mock import MagicMock

import pytest

from elaview.domain.drafts import DraftCache, InMemoryStore, is_meaningful


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def cache(store):
    return DraftCache(store, "campaign:user-1")


class TestSave:
    def test_empty_first_step_not_saved(self, cache, store):
        assert cache.save({"name": "", "brand_name": ""}, 1) is False
        assert store.data == {}

    def test_named_form_saved(self, cache, store):
        assert cache.save({"name": "Summer", "start_date": date(2024, 7, 13)}, 1) is True

        payload = json.loads(store.data["campaign:user-1:form_data"])
        assert payload["formData"]["name"] == "Summer"
        assert payload["formData"]["start_date"] == "2024-07-13"
        assert payload["currentStep"] == 1
        assert "timestamp" in payload

    def test_later_step_saved_even_when_blank(self, cache):
        assert cache.save({}, 2) is True

    def test_write_through_overwrites(self, cache, store):
        cache.save({"name": "A"}, 1)
        cache.save({"name": "B"}, 2)

        assert json.loads(store.data[cache.key])["formData"]["name"] == "B"

    def test_store_failure_is_swallowed(self):
        broken = MagicMock()
        broken.set.side_effect = OSError("quota exceeded")

        assert DraftCache(broken, "s").save({"name": "A"}, 1) is False

    def test_scopes_are_isolated(self, store):
        DraftCache(store, "a").save({"name": "A"}, 1)

        assert DraftCache(store, "b").has_saved() is False


class TestRestore:
    def test_round_trip_restores_dates_and_defaults(self, cache):
        cache.save({"brand_name": "Acme", "end_date": date(2024, 7, 15)}, 3)

        restored = cache.restore()

        assert restored.current_step == 3
        assert restored.form_data["end_date"] == date(2024, 7, 15)
        assert restored.form_data["content_type"] == []
        assert restored.form_data["media_dimensions"] == {"width": "", "height": ""}
        assert restored.saved_at is not None

    def test_nothing_saved(self, cache):
        assert cache.has_saved() is False
        assert cache.restore() is None

    def test_corrupt_payload_is_deleted(self, cache, store):
        store.set(cache.key, "{not json")

        assert cache.has_saved() is False
        assert cache.key not in store.data

    def test_malformed_payload_is_deleted(self, cache, store):
        store.set(cache.key, json.dumps({"formData": "oops"}))

        assert cache.restore() is None
        assert cache.key not in store.data

    def test_bad_date_is_deleted(self, cache, store):
        store.set(cache.key, json.dumps({"formData": {"name": "A", "start_date": "soon"}, "currentStep": 1}))

        assert cache.restore() is None
        assert cache.key not in store.data

    def test_blank_payload_is_not_offered(self, cache, store):
        store.set(cache.key, json.dumps({"formData": {"name": ""}, "currentStep": 1}))

        assert cache.has_saved() is False


class TestDiscard:
    def test_discard_removes_entry(self, cache, store):
        cache.save({"name": "A"}, 1)

        cache.discard()

        assert cache.has_saved() is False
        assert store.data == {}

    def test_discard_without_entry(self, cache):
        cache.discard()


def test_is_meaningful():
    assert is_meaningful({"brand_name": "X"}, 1)
    assert not is_meaningful({}, 1)
    assert is_meaningful({}, 2)
