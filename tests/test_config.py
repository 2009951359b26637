"""Tests for clearapi.config -- XDG paths, atomic writes, config keys, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from clearapi.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    get_documents_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
    set_config_value,
)
from clearapi.exceptions import ConfigError
from clearapi.models import GlobalConfig, OutputConfig, TreeConfig
from clearapi.store import save_document


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _store(key: str) -> None:
    save_document({"openapi": "3.0.0", "info": {"title": key}}, name=key)


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("clearapi.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".config" / "clearapi"
        assert result.is_dir()

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom_config"
        monkeypatch.setattr("clearapi.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(custom))

        result = get_config_dir()
        assert result == custom / "clearapi"
        assert result.is_dir()

    def test_data_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("clearapi.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".local" / "share" / "clearapi"
        assert result.is_dir()

    def test_documents_dir_inside_data_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("clearapi.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        result = get_documents_dir()
        assert result == tmp_path / "clearapi" / "documents"
        assert result.is_dir()


class TestXDGPathsFallback:
    """Fallback paths on non-XDG platforms (macOS, Windows)."""

    def test_config_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("clearapi.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_config_dir()
        assert result == tmp_path / ".clearapi"
        assert result.is_dir()

    def test_data_dir_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("clearapi.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))

        result = get_data_dir()
        assert result == tmp_path / ".clearapi" / "data"
        assert result.is_dir()


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_creates_file_with_content(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        target.write_text("old content", encoding="utf-8")
        _atomic_write(target, "new content")
        assert target.read_text(encoding="utf-8") == "new content"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "test.txt"
        _atomic_write(target, "deep write")
        assert target.read_text(encoding="utf-8") == "deep write"

    def test_no_temp_files_left_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        _atomic_write(target, "content")
        assert list(tmp_path.iterdir()) == [target]

    def test_no_temp_files_left_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "test.txt"
        with patch("clearapi.config.os.fsync", side_effect=OSError("disk error")):
            with pytest.raises(OSError, match="disk error"):
                _atomic_write(target, "will fail")
        assert list(tmp_path.iterdir()) == []

    def test_unicode_content(self, tmp_path: Path) -> None:
        target = tmp_path / "unicode.txt"
        content = "Hello 世界 éàüñ"
        _atomic_write(target, content)
        assert target.read_text(encoding="utf-8") == content


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_load_returns_defaults_when_missing(self, isolated_config: Path) -> None:
        cfg = load_global_config()
        assert cfg == GlobalConfig()
        assert cfg.default_document is None
        assert cfg.auto_select_single_document is True
        assert cfg.output.format == "auto"
        assert cfg.tree.max_depth == 8

    def test_save_and_load_roundtrip(self, isolated_config: Path) -> None:
        original = GlobalConfig(
            default_document="bookstore-api",
            auto_select_single_document=False,
            output=OutputConfig(format="json"),
            tree=TreeConfig(max_depth=3),
        )
        save_global_config(original)
        assert load_global_config() == original

    def test_load_invalid_json_raises_config_error(self, isolated_config: Path) -> None:
        path = isolated_config / "config" / "clearapi" / "config.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("{invalid json!!!", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_load_invalid_schema_raises_config_error(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "config" / "clearapi" / "config.json", {"tree": "deep"})

        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()


class TestSetConfigValue:
    def test_string_value(self) -> None:
        cfg = set_config_value(GlobalConfig(), "output.format", "json")
        assert cfg.output.format == "json"

    def test_int_coercion(self) -> None:
        cfg = set_config_value(GlobalConfig(), "tree.max_depth", "3")
        assert cfg.tree.max_depth == 3

    def test_int_coercion_failure(self) -> None:
        with pytest.raises(ConfigError, match="Expected integer"):
            set_config_value(GlobalConfig(), "tree.max_depth", "deep")

    @pytest.mark.parametrize("raw, expected", [
        ("true", True), ("1", True), ("yes", True), ("false", False), ("no", False),
    ])
    def test_bool_coercion(self, raw: str, expected: bool) -> None:
        cfg = set_config_value(GlobalConfig(), "auto_select_single_document", raw)
        assert cfg.auto_select_single_document is expected

    def test_optional_field_set_and_cleared(self) -> None:
        cfg = set_config_value(GlobalConfig(), "default_document", "bookstore")
        assert cfg.default_document == "bookstore"
        cfg = set_config_value(cfg, "default_document", "none")
        assert cfg.default_document is None

    @pytest.mark.parametrize("key", ["nope", "output.nope", "nope.format", "output"])
    def test_unknown_keys(self, key: str) -> None:
        with pytest.raises(ConfigError):
            set_config_value(GlobalConfig(), key, "x")

    def test_original_unchanged(self) -> None:
        original = GlobalConfig()
        set_config_value(original, "tree.max_depth", "2")
        assert original.tree.max_depth == 8


# ---------------------------------------------------------------------------
# Project-local config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_load_returns_none_when_missing(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert load_project_config() is None

    def test_load_valid_project_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        _write_json(tmp_path / "clearapi.json", {"default_document": "local-api"})

        result = load_project_config()
        assert result == {"default_document": "local-api"}

    def test_load_invalid_json_raises_config_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "clearapi.json").write_text("broken{", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()

    def test_non_object_raises_config_error(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        _write_json(tmp_path / "clearapi.json", ["a"])

        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """Test the full precedence chain: CLI > env > project > global > auto-select."""

    def test_defaults_no_document(self, isolated_config: Path) -> None:
        cfg, key = resolve_config()
        assert isinstance(cfg, GlobalConfig)
        assert key is None

    def test_global_default_document(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(default_document="global-api"))

        _, key = resolve_config()
        assert key == "global-api"

    def test_project_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(default_document="global-api"))
        _write_json(isolated_config / "clearapi.json", {"default_document": "project-api"})

        _, key = resolve_config()
        assert key == "project-api"

    def test_env_overrides_project(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(isolated_config / "clearapi.json", {"default_document": "project-api"})
        monkeypatch.setenv("CLEARAPI_DOCUMENT", "env-api")

        _, key = resolve_config()
        assert key == "env-api"

    def test_cli_overrides_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLEARAPI_DOCUMENT", "env-api")

        _, key = resolve_config(cli_document="cli-api")
        assert key == "cli-api"

    def test_cli_format_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(output=OutputConfig(format="plain")))

        cfg, _ = resolve_config(cli_format="json")
        assert cfg.output.format == "json"

    def test_auto_select_single_document(self, isolated_config: Path) -> None:
        _store("only-one")

        _, key = resolve_config()
        assert key == "only-one"

    def test_auto_select_disabled(self, isolated_config: Path) -> None:
        _store("only-one")
        save_global_config(GlobalConfig(auto_select_single_document=False))

        _, key = resolve_config()
        assert key is None

    def test_auto_select_skipped_when_multiple(self, isolated_config: Path) -> None:
        _store("alpha")
        _store("beta")

        _, key = resolve_config()
        assert key is None
