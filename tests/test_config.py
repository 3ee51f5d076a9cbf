"""Tests for specedit.config: XDG paths, atomic writes and precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from specedit.config import (
    atomic_write,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
)
from specedit.exceptions import ConfigError
from specedit.models import GlobalConfig, HistoryConfig, HostConfig, OutputConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPaths:
    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specedit.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "specedit"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("specedit.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        assert get_config_dir() == custom / "specedit"

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specedit.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_data_dir() == tmp_path / ".local" / "share" / "specedit"

    def test_fallback_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specedit.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        assert get_config_dir() == tmp_path / ".specedit"
        assert get_data_dir() == tmp_path / ".specedit" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("old content", encoding="utf-8")
        atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "test.txt"
        atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        atomic_write(target, "content")
        assert list(tmp_path.iterdir()) == [target]

    def test_failure_keeps_original(self, tmp_path: Path) -> None:
        target = tmp_path / "spec.yaml"
        target.write_text("original", encoding="utf-8")
        with patch("specedit.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                atomic_write(target, "will fail")
        assert target.read_text(encoding="utf-8") == "original"
        assert [f for f in tmp_path.iterdir() if ".tmp" in f.name] == []

    def test_line_endings_untouched(self, tmp_path: Path) -> None:
        target = tmp_path / "crlf.yaml"
        atomic_write(target, "a: 1\r\nb: 2\r\n")
        assert target.read_bytes() == b"a: 1\r\nb: 2\r\n"

    def test_unicode_content(self, tmp_path: Path) -> None:
        target = tmp_path / "unicode.txt"
        content = "Hello 世界 éàüñ"
        atomic_write(target, content)
        assert target.read_text(encoding="utf-8") == content


# ---------------------------------------------------------------------------
# Global and project config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        cfg = load_global_config()
        assert cfg == GlobalConfig()
        assert cfg.history.max_size == 100
        assert cfg.selection.max_history == 50
        assert cfg.host.read_timeout == 10.0
        assert cfg.output.format == "auto"

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        original = GlobalConfig(
            history=HistoryConfig(max_size=20),
            host=HostConfig(read_timeout=2.5),
            output=OutputConfig(format="json"),
        )
        save_global_config(original)
        assert load_global_config() == original

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        path = isolated_config / "config" / "specedit" / "config.json"
        path.parent.mkdir(parents=True)
        path.write_text("{invalid json!!!", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_schema_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / "config" / "specedit" / "config.json",
            {"history": {"max_size": 0}},
        )
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()


class TestProjectConfig:
    def test_missing(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_valid(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specedit.json", {"history": {"max_size": 5}})
        assert load_project_config() == {"history": {"max_size": 5}}

    def test_not_an_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specedit.json", [1, 2])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "specedit.json").write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """Test the full precedence chain: CLI > env > project > global > defaults."""

    def test_defaults(self, isolated_config: Path) -> None:
        assert resolve_config() == GlobalConfig()

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(history=HistoryConfig(max_size=30)))
        _write_json(isolated_config / "specedit.json", {"history": {"max_size": 40}})
        cfg = resolve_config()
        assert cfg.history.max_size == 40

    def test_project_merges_partial_sections(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(host=HostConfig(read_timeout=3.0)))
        _write_json(isolated_config / "specedit.json", {"selection": {"max_history": 7}})
        cfg = resolve_config()
        assert cfg.host.read_timeout == 3.0
        assert cfg.selection.max_history == 7

    def test_env_overrides_project(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(isolated_config / "specedit.json", {"history": {"max_size": 40}})
        monkeypatch.setenv("SPECEDIT_MAX_HISTORY", "60")
        monkeypatch.setenv("SPECEDIT_READ_TIMEOUT", "1.5")
        cfg = resolve_config()
        assert cfg.history.max_size == 60
        assert cfg.host.read_timeout == 1.5

    def test_cli_overrides_env(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SPECEDIT_MAX_HISTORY", "60")
        cfg = resolve_config(cli_max_history=5, cli_read_timeout=0.5, cli_format="json")
        assert cfg.history.max_size == 5
        assert cfg.host.read_timeout == 0.5
        assert cfg.output.format == "json"

    def test_bad_env_value(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SPECEDIT_MAX_HISTORY", "lots")
        with pytest.raises(ConfigError, match="SPECEDIT_MAX_HISTORY"):
            resolve_config()

    def test_out_of_range_cli_value(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config(cli_max_history=0)

    def test_project_section_of_wrong_shape(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "specedit.json", {"history": 5})
        with pytest.raises(ConfigError):
            resolve_config(cli_max_history=3)
