"""Tests for persisted settings."""

import json

import pytest

from snapcrop.config.settings import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, tmp_path):
        settings = Settings(str(tmp_path / "settings.json"))

        assert settings.open_in_tab is False
        assert settings.download is True
        assert settings.include_metadata is True
        assert settings.default_export_format == "workbook"

    def test_set_persists(self, tmp_path):
        path = str(tmp_path / "settings.json")
        Settings(path).set("default_export_format", "both")

        assert Settings(path).default_export_format == "both"

    def test_invalid_format_rejected(self, tmp_path):
        settings = Settings(str(tmp_path / "settings.json"))

        with pytest.raises(ValueError):
            settings.set("default_export_format", "pdf")

    def test_invalid_stored_format_reset(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"default_export_format": "pdf", "download": False}))

        settings = Settings(str(path))

        assert settings.default_export_format == "workbook"
        assert settings.download is False

    def test_corrupt_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{oops")

        assert Settings(str(path)).include_metadata is True

    def test_env_override(self, tmp_path, monkeypatch):
        path = str(tmp_path / "env.json")
        monkeypatch.setenv("SNAPCROP_CONFIG", path)

        assert Settings().config_file == path

    def test_reset(self, tmp_path):
        settings = Settings(str(tmp_path / "settings.json"))
        settings.set("download", False)

        settings.reset()

        assert settings.download is True
