"""Unit tests for the filter state key-value store."""

import os
from pathlib import Path

import orjson
import pytest

from domain.entities.filter_state import DEFAULT_FILTER_STATE, FilterState
from infrastructure.storage import filter_state_store
from infrastructure.storage.filter_state_store import JsonFileKeyValue, KeyValueFilterStateStore


class TestKeyValueFilterStateStore:
    def test_empty_backend_gives_defaults(self):
        store = KeyValueFilterStateStore({})

        assert store.load() == DEFAULT_FILTER_STATE

    def test_saves_four_prefixed_keys(self):
        backend: dict[str, str] = {}
        store = KeyValueFilterStateStore(backend)

        store.save(
            FilterState(search_term="Ai", status_filter="accepted", current_page=2, sort_by="age")
        )

        assert backend == {
            "studio_profile_search_term": "Ai",
            "studio_profile_status_filter": "accepted",
            "studio_profile_current_page": "2",
            "studio_profile_sort_by": "age",
        }

    def test_no_status_filter_removes_key(self):
        backend = {"studio_profile_status_filter": "accepted"}
        store = KeyValueFilterStateStore(backend)

        store.save(DEFAULT_FILTER_STATE)

        assert "studio_profile_status_filter" not in backend
        assert store.load().status_filter is None

    def test_malformed_values_fall_back(self):
        backend = {
            "studio_profile_current_page": "two",
            "studio_profile_sort_by": "mobile_number",
        }

        state = KeyValueFilterStateStore(backend).load()

        assert state.current_page == 1
        assert state.sort_by == "updated_at"

    def test_non_positive_page_falls_back(self):
        state = KeyValueFilterStateStore({"studio_profile_current_page": "-3"}).load()

        assert state.current_page == 1

    def test_clear_leaves_other_keys(self):
        backend = {"studio_profile_search_term": "Ai", "theme": "dark"}

        KeyValueFilterStateStore(backend).clear()

        assert backend == {"theme": "dark"}


class TestJsonFileKeyValue:
    def test_persists_across_instances(self, tmp_path: Path):
        path = tmp_path / "filters.json"
        KeyValueFilterStateStore(JsonFileKeyValue(path)).save(FilterState(search_term="Ro"))

        state = KeyValueFilterStateStore(JsonFileKeyValue(path)).load()

        assert state.search_term == "Ro"
        assert orjson.loads(path.read_bytes())["studio_profile_search_term"] == "Ro"

    def test_corrupt_file_reads_as_empty(self, tmp_path: Path):
        path = tmp_path / "filters.json"
        path.write_text("{not json")

        assert dict(JsonFileKeyValue(path)) == {}

    def test_save_rewrites_file_once(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        path = tmp_path / "filters.json"
        store = KeyValueFilterStateStore(JsonFileKeyValue(path))
        replaced: list[str] = []
        real_replace = os.replace

        def counting_replace(src: str, dst: str | Path) -> None:
            replaced.append(str(dst))
            real_replace(src, dst)

        monkeypatch.setattr(filter_state_store.os, "replace", counting_replace)

        store.save(
            FilterState(search_term="Ai", status_filter="accepted", current_page=3, sort_by="age")
        )
        assert replaced == [str(path)]
        assert orjson.loads(path.read_bytes()) == {
            "studio_profile_current_page": "3",
            "studio_profile_search_term": "Ai",
            "studio_profile_sort_by": "age",
            "studio_profile_status_filter": "accepted",
        }

        store.save(DEFAULT_FILTER_STATE)
        assert len(replaced) == 2
        assert "studio_profile_status_filter" not in orjson.loads(path.read_bytes())

        store.clear()
        assert len(replaced) == 3
        assert orjson.loads(path.read_bytes()) == {}
