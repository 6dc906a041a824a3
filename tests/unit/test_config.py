"""Tests for settings loading and logging setup."""

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from taskcanvas.config import LOG_FORMAT, CanvasSettings, load_settings, setup_logging
from taskcanvas.constants import DEFAULT_MIN_DISTANCE, MAX_ZOOM, RESTORE_HARD_TIMEOUT


class TestCanvasSettings:

    def test_defaults(self):
        settings = CanvasSettings()

        assert settings.layout.constraints.min_distance == DEFAULT_MIN_DISTANCE
        assert settings.max_zoom == MAX_ZOOM
        assert settings.restoration.hard_timeout == RESTORE_HARD_TIMEOUT
        assert settings.restoration.enforce_snapshot is False

    def test_zoom_range_validated(self):
        with pytest.raises(ValidationError):
            CanvasSettings(min_zoom=3, max_zoom=2)

    def test_camel_case_layout_keys(self):
        settings = CanvasSettings.model_validate(
            {"layout": {"constraints": {"minDistance": 15, "noIntersection": False}, "screenBounds": {"width": 800, "height": 600}}}
        )

        assert settings.layout.constraints.min_distance == 15
        assert settings.layout.constraints.no_intersection is False
        assert settings.layout.screen_bounds.width == 800


class TestFromEnvironment:

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TASKCANVAS_MIN_DISTANCE", "42")
        monkeypatch.setenv("TASKCANVAS_ENFORCE_SNAPSHOT", "yes")
        monkeypatch.setenv("TASKCANVAS_RESTORE_TIMEOUT", "0.5")
        monkeypatch.setenv("TASKCANVAS_STORAGE_DIR", str(tmp_path))

        settings = CanvasSettings.from_environment()

        assert settings.layout.constraints.min_distance == 42
        assert settings.restoration.enforce_snapshot is True
        assert settings.restoration.hard_timeout == 0.5
        assert settings.storage_dir == tmp_path

    def test_invalid_values_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("TASKCANVAS_PADDING", "wide")
        monkeypatch.setenv("TASKCANVAS_MAX_ZOOM", "-2")
        monkeypatch.setenv("TASKCANVAS_ZOOM_STEP", "0.25")

        settings = CanvasSettings.from_environment()

        assert settings.layout.padding == CanvasSettings().layout.padding
        assert settings.max_zoom == MAX_ZOOM
        assert settings.zoom_step == 0.25
        assert "TASKCANVAS_PADDING" in caplog.text

    def test_base_preserved(self, monkeypatch):
        monkeypatch.setenv("TASKCANVAS_MIN_ZOOM", "0.25")
        base = CanvasSettings(max_zoom=4)

        settings = CanvasSettings.from_environment(base)

        assert settings.min_zoom == 0.25
        assert settings.max_zoom == 4


class TestLoadSettings:

    def test_missing_file_defaults(self, tmp_path):
        assert load_settings(tmp_path / "nope.json") == CanvasSettings()

    def test_file_then_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"max_zoom": 3, "min_zoom": 0.2, "storage_dir": str(tmp_path / "vp")}))
        monkeypatch.setenv("TASKCANVAS_MAX_ZOOM", "2.5")

        settings = load_settings(path)

        assert settings.min_zoom == 0.2
        assert settings.max_zoom == 2.5
        assert settings.storage_dir == Path(tmp_path / "vp")

    def test_invalid_file_falls_back(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"min_zoom": -1}))

        assert load_settings(path, apply_environment=False) == CanvasSettings()
        assert "Failed to load settings" in caplog.text


class TestSetupLogging:

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("TASKCANVAS_LOG_LEVEL", "debug")

        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_explicit_level_and_format(self):
        setup_logging("warning")

        root = logging.getLogger()
        ours = [h for h in root.handlers if getattr(h, "_taskcanvas", False)]
        assert root.level == logging.WARNING
        assert len(ours) == 1
        assert ours[0].formatter._fmt == LOG_FORMAT

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging("INFO")
        setup_logging("INFO")

        ours = [h for h in logging.getLogger().handlers if getattr(h, "_taskcanvas", False)]
        assert len(ours) == 1
