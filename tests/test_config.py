"""Tests for oasir.config -- data directory, project file, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from oasir.config import get_data_dir, load_project_config, resolve_settings
from oasir.exceptions import ConfigError
from oasir.models import ParserSettings


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_project_config(root: Path, data: Any) -> None:
    (root / "oasir.json").write_text(json.dumps(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# Data directory
# ---------------------------------------------------------------------------


class TestDataDir:
    """XDG and home-directory data paths."""

    def test_xdg_data_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("oasir.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
        path = get_data_dir()
        assert path == tmp_path / "xdg" / "oasir"
        assert path.is_dir()

    def test_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("oasir.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_data_dir() == tmp_path / ".local" / "share" / "oasir"

    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("oasir.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_data_dir() == tmp_path / ".oasir"


# ---------------------------------------------------------------------------
# Project-local config
# ---------------------------------------------------------------------------


class TestLoadProjectConfig:
    """Reading ``./oasir.json``."""

    def test_absent(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_present(self, isolated_config: Path) -> None:
        _write_project_config(isolated_config, {"media_type": "application/hal+json"})
        assert load_project_config() == {"media_type": "application/hal+json"}

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "oasir.json").write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_not_an_object(self, isolated_config: Path) -> None:
        _write_project_config(isolated_config, ["timeout", 5])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveSettings:
    """CLI > env > project file > defaults."""

    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_settings() == ParserSettings()

    def test_project_file(self, isolated_config: Path) -> None:
        _write_project_config(isolated_config, {"timeout": 12, "follow_redirects": False})
        settings = resolve_settings()
        assert settings.timeout == 12.0
        assert settings.follow_redirects is False
        assert settings.media_type == "application/json"

    def test_env_beats_project_file(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_project_config(isolated_config, {"timeout": 12, "media_type": "a/b"})
        monkeypatch.setenv("OASIR_TIMEOUT", "3.5")
        monkeypatch.setenv("OASIR_MEDIA_TYPE", "application/vnd.api+json")
        settings = resolve_settings()
        assert settings.timeout == 3.5
        assert settings.media_type == "application/vnd.api+json"

    def test_cli_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OASIR_TIMEOUT", "3.5")
        monkeypatch.setenv("OASIR_MEDIA_TYPE", "application/vnd.api+json")
        settings = resolve_settings(cli_timeout=60, cli_media_type="application/json")
        assert settings.timeout == 60.0
        assert settings.media_type == "application/json"

    def test_empty_env_is_ignored(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OASIR_TIMEOUT", "")
        assert resolve_settings().timeout == 30.0

    def test_invalid_env_value(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OASIR_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="Invalid settings"):
            resolve_settings()

    def test_non_positive_timeout(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError):
            resolve_settings(cli_timeout=0)
