"""Settings resolution with precedence layering and an XDG data directory.

This module handles configuration for oasir:

* **Precedence resolution** -- :func:`resolve_settings` merges CLI flags,
  environment variables and the project-local ``./oasir.json`` into the final
  :class:`~oasir.models.ParserSettings`.
* **Data directory** -- :func:`get_data_dir` returns where crash logs go,
  ``$XDG_DATA_HOME/oasir/`` on Linux/BSD and ``~/.oasir/`` elsewhere.

Recognised environment variables:

* ``OASIR_TIMEOUT`` -- HTTP timeout in seconds for remote documents.
* ``OASIR_MEDIA_TYPE`` -- media type whose schemas type bodies and responses.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from oasir.exceptions import ConfigError
from oasir.models import ParserSettings

_APP_NAME = "oasir"
_PROJECT_CONFIG_FILENAME = "oasir.json"

_ENV_TIMEOUT = "OASIR_TIMEOUT"
_ENV_MEDIA_TYPE = "OASIR_MEDIA_TYPE"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/oasir/`` (default ``~/.local/share/oasir/``).
    On macOS/Windows: ``~/.oasir/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./oasir.json``.

    Project-local config sits between the defaults and environment variables
    in the precedence chain. It typically pins a non-standard media type for
    an API that serves ``application/vnd.api+json``.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_settings(
    cli_timeout: Optional[float] = None,
    cli_media_type: Optional[str] = None,
) -> ParserSettings:
    """Resolve parser settings with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_timeout``, ``cli_media_type``)
        2. Environment variables (``OASIR_TIMEOUT``, ``OASIR_MEDIA_TYPE``)
        3. Project config (``./oasir.json``)
        4. Defaults

    Returns:
        The effective :class:`~oasir.models.ParserSettings`.

    Raises:
        ConfigError: If any layer supplies an invalid value.
    """
    # 4 + 3. Defaults, then project-local values
    values: dict[str, Any] = dict(load_project_config() or {})

    # 2. Environment variables
    env_timeout = os.environ.get(_ENV_TIMEOUT)
    if env_timeout:
        values["timeout"] = env_timeout
    env_media_type = os.environ.get(_ENV_MEDIA_TYPE)
    if env_media_type:
        values["media_type"] = env_media_type

    # 1. CLI flags (highest precedence)
    if cli_timeout is not None:
        values["timeout"] = cli_timeout
    if cli_media_type is not None:
        values["media_type"] = cli_media_type

    try:
        return ParserSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc
