"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for clearapi:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.clearapi/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_data_dir`, :func:`get_documents_dir`.
* **Global config** -- A single :class:`~clearapi.models.GlobalConfig`
  JSON file storing defaults (active document, output format, tree depth).
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  effective configuration and the active document key.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from clearapi.exceptions import ConfigError
from clearapi.models import GlobalConfig

_APP_NAME = "clearapi"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "clearapi.json"

DOCUMENT_ENV_VAR = "CLEARAPI_DOCUMENT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/clearapi/`` (default ``~/.config/clearapi/``).
    On macOS/Windows: ``~/.clearapi/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (stored documents, crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/clearapi/`` (default ``~/.local/share/clearapi/``).
    On macOS/Windows: ``~/.clearapi/data/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_documents_dir() -> Path:
    """Return the document store directory (``<data_dir>/documents/``), creating it if necessary."""
    path = get_data_dir() / "documents"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~clearapi.models.GlobalConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


def set_config_value(config: GlobalConfig, key: str, value: str) -> GlobalConfig:
    """Return a copy of *config* with the dotted *key* set to *value*.

    The string is coerced to the type of the current value (bool, int or
    str). ``none``/``null`` clears an optional field.

    Args:
        config: The configuration to update.
        key: Dot-separated key path, e.g. ``tree.max_depth``.
        value: The raw string from the command line.

    Returns:
        The validated new configuration.

    Raises:
        ConfigError: If the key is unknown or the value does not validate.

    Example::

        cfg = set_config_value(load_global_config(), "output.format", "json")
        save_global_config(cfg)
    """
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            raise ConfigError(f"Invalid config key: {key}")
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        raise ConfigError(f"Unknown config key: {key}")

    current = target[final_key]
    coerced: Any
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            raise ConfigError(f"Expected integer for {key}, got: {value}") from None
    elif value.lower() in ("none", "null"):
        coerced = None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        return GlobalConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Validation error: {exc}") from exc


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./clearapi.json``.

    A repository can pin which stored document the CLI opens by setting
    ``default_document`` there.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or is not
            an object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_document: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[str]]:
    """Resolve config and the active document key with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``--doc``, output format flags)
        2. Environment variable ``CLEARAPI_DOCUMENT``
        3. Project config (``./clearapi.json``)
        4. User config (``~/.config/clearapi/config.json``)
        5. The only stored document, when ``auto_select_single_document``
           is enabled

    Returns:
        A tuple of ``(global_config, document_key_or_None)``.
    """
    global_cfg = load_global_config()

    resolved: Optional[str] = global_cfg.default_document

    project = load_project_config()
    if project is not None and project.get("default_document"):
        resolved = str(project["default_document"])

    env_document = os.environ.get(DOCUMENT_ENV_VAR)
    if env_document:
        resolved = env_document

    if cli_document is not None:
        resolved = cli_document

    if resolved is None and global_cfg.auto_select_single_document:
        from clearapi.store import list_documents

        documents = list_documents()
        if len(documents) == 1:
            resolved = documents[0]

    if cli_format is not None:
        global_cfg.output.format = cli_format

    return global_cfg, resolved
