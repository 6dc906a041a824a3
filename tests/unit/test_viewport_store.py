"""Tests for the JSON file viewport store."""

import json
import os
import time

import pytest

from taskcanvas.constants import STATE_EXPIRY_DAYS
from taskcanvas.models import PersistedViewport, Position
from taskcanvas.persistence import JsonFileViewportStore, sanitize_viewport, storage_key


class TestStorageKey:

    def test_shared_scope(self):
        assert storage_key() == "viewport-state"

    def test_user_scope(self):
        assert storage_key("u1") == "viewport-state-user-u1"

    def test_user_and_project_scope(self):
        assert storage_key("u1", "p9") == "viewport-state-user-u1-project-p9"

    def test_project_without_user(self):
        assert storage_key(project_id="p9") == "viewport-state-project-p9"


class TestSanitizeViewport:

    def test_replaces_non_finite(self):
        snapshot = PersistedViewport(translate=Position(x=float("nan"), y=float("inf")), scale=float("nan"))

        assert sanitize_viewport(snapshot) == PersistedViewport(translate=Position(x=0, y=0), scale=1)

    def test_keeps_finite(self):
        snapshot = PersistedViewport(translate=Position(x=3, y=float("-inf")), scale=0.8)

        assert sanitize_viewport(snapshot) == PersistedViewport(translate=Position(x=3, y=0), scale=0.8)


class TestJsonFileViewportStore:

    @pytest.mark.asyncio
    async def test_load_missing_returns_none(self, viewport_store):
        assert await viewport_store.load() is None
        assert await viewport_store.has_saved() is False

    @pytest.mark.asyncio
    async def test_save_then_load(self, viewport_store):
        snapshot = PersistedViewport(translate=Position(x=120.5, y=-40), scale=1.3)

        await viewport_store.save(snapshot)

        assert await viewport_store.has_saved() is True
        assert await viewport_store.load() == snapshot

    @pytest.mark.asyncio
    async def test_file_body_is_exactly_the_viewport(self, viewport_store):
        await viewport_store.save(PersistedViewport(translate=Position(x=1, y=2), scale=0.7))

        with open(viewport_store.path) as f:
            data = json.load(f)

        assert data == {"translate": {"x": 1.0, "y": 2.0}, "scale": 0.7}
        assert viewport_store.path.name == "viewport-state-user-u1-project-p1.json"

    @pytest.mark.asyncio
    async def test_save_repairs_nan(self, viewport_store):
        await viewport_store.save(PersistedViewport(translate=Position(x=float("nan"), y=5), scale=float("nan")))

        assert await viewport_store.load() == PersistedViewport(translate=Position(x=0, y=5), scale=1)

    @pytest.mark.asyncio
    async def test_scopes_are_isolated(self, viewport_dir):
        first = JsonFileViewportStore(user_id="u1", storage_dir=viewport_dir)
        second = JsonFileViewportStore(user_id="u2", storage_dir=viewport_dir)

        await first.save(PersistedViewport(scale=1.5))

        assert await second.load() is None
        assert (await first.load()).scale == 1.5

    @pytest.mark.asyncio
    async def test_malformed_file_returns_none(self, viewport_store):
        viewport_store.storage_dir.mkdir(parents=True)
        viewport_store.path.write_text("{not json")

        assert await viewport_store.load() is None

    @pytest.mark.asyncio
    async def test_wrong_shape_returns_none(self, viewport_store):
        viewport_store.storage_dir.mkdir(parents=True)
        viewport_store.path.write_text(json.dumps({"translate": "left", "scale": "big"}))

        assert await viewport_store.load() is None

    @pytest.mark.asyncio
    async def test_expired_file_is_cleared(self, viewport_store):
        await viewport_store.save(PersistedViewport(scale=1.2))
        old = time.time() - (STATE_EXPIRY_DAYS + 1) * 86400
        os.utime(viewport_store.path, (old, old))

        assert await viewport_store.load() is None
        assert not viewport_store.path.exists()

    @pytest.mark.asyncio
    async def test_clear(self, viewport_store):
        await viewport_store.save(PersistedViewport(scale=1.2))

        await viewport_store.clear()
        await viewport_store.clear()

        assert await viewport_store.has_saved() is False

    def test_unsafe_ids_sanitized_in_filename(self, viewport_dir):
        store = JsonFileViewportStore(user_id="a/b", project_id="../x", storage_dir=viewport_dir)

        assert store.path.parent == viewport_dir
        assert store.key == "viewport-state-user-a/b-project-../x"
