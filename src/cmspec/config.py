"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for cmspec:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.cmspec/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **User config** -- A single :class:`~cmspec.models.UserConfig` JSON file
  storing document defaults and the preferred output format.
* **Project config** -- An optional ``./cmspec.json`` pinning document
  metadata and the output path for one repository.
* **Precedence resolution** -- :func:`resolve_options` merges CLI flags,
  environment variables, project-local config, and user config into the
  effective :class:`~cmspec.models.GeneratorOptions` for one run.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so that a crash never leaves a half-written config or
document behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from cmspec.exceptions import ConfigError
from cmspec.models import GeneratorOptions, UserConfig

_APP_NAME = "cmspec"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "cmspec.json"

_TRUTHY = ("1", "true", "yes", "on")


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

    On Linux/BSD: ``$XDG_CONFIG_HOME/cmspec/`` (default ``~/.config/cmspec/``).
    On macOS/Windows: ``~/.cmspec/``.

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
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/cmspec/`` (default ``~/.local/share/cmspec/``).
    On macOS/Windows: ``~/.cmspec/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up and the error propagates.
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
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- User config ---


def _user_config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_user_config() -> UserConfig:
    """Load the user configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~cmspec.models.UserConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _user_config_path()
    if not path.is_file():
        return UserConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return UserConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid user config at {path}: {exc}") from exc


def save_user_config(config: UserConfig) -> None:
    """Persist the user configuration atomically to disk.

    Args:
        config: The configuration to save.
    """
    data = config.model_dump(mode="json")
    atomic_write(_user_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./cmspec.json``.

    Project-local config sits between user config and environment variables
    in the precedence chain. Recognised keys are ``title``, ``description``,
    ``version``, ``info``, ``output`` and ``strict_slugs``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
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
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


# --- Precedence resolution ---


def resolve_options(
    cli_output: Optional[str] = None,
    cli_title: Optional[str] = None,
    cli_description: Optional[str] = None,
    cli_version: Optional[str] = None,
    cli_info: Optional[dict[str, Any]] = None,
    cli_strict_slugs: Optional[bool] = None,
) -> GeneratorOptions:
    """Resolve generator options with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_*`` arguments)
        2. Environment variables (``CMSPEC_OUTPUT``, ``CMSPEC_TITLE``,
           ``CMSPEC_STRICT_SLUGS``)
        3. Project config (``./cmspec.json``)
        4. User config (``~/.config/cmspec/config.json``)
        5. Defaults

    ``info`` mappings are merged key by key in the same order rather than
    replaced wholesale.

    Returns:
        The effective :class:`~cmspec.models.GeneratorOptions`.

    Raises:
        ConfigError: If the user or project config is invalid.
    """
    # 5 + 4. User config (fills in defaults automatically)
    defaults = load_user_config().defaults
    resolved: dict[str, Any] = {
        "title": defaults.title,
        "description": defaults.description,
        "version": defaults.version,
        "strict_slugs": defaults.strict_slugs,
        "info": dict(defaults.info),
        "output": None,
    }

    # 3. Project-local config
    project = load_project_config() or {}
    for key in ("title", "description", "version", "strict_slugs", "output"):
        if project.get(key) is not None:
            resolved[key] = project[key]
    if isinstance(project.get("info"), dict):
        resolved["info"].update(project["info"])

    # 2. Environment variables
    env_output = os.environ.get("CMSPEC_OUTPUT")
    if env_output:
        resolved["output"] = env_output
    env_title = os.environ.get("CMSPEC_TITLE")
    if env_title:
        resolved["title"] = env_title
    env_strict = os.environ.get("CMSPEC_STRICT_SLUGS")
    if env_strict:
        resolved["strict_slugs"] = env_strict.lower() in _TRUTHY

    # 1. CLI flags (highest precedence)
    overrides = {
        "output": cli_output,
        "title": cli_title,
        "description": cli_description,
        "version": cli_version,
        "strict_slugs": cli_strict_slugs,
    }
    for key, value in overrides.items():
        if value is not None:
            resolved[key] = value
    if cli_info:
        resolved["info"].update(cli_info)

    try:
        return GeneratorOptions.model_validate(resolved)
    except ValueError as exc:
        raise ConfigError(f"Invalid generator options: {exc}") from exc
