"""Option loading from XDG config files and environment variables.

The :class:`~pbclient.client.Client` itself only ever takes an explicit
options mapping. This module is what the command line uses to assemble that
mapping:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.pbclient/`` on macOS and Windows. See :func:`get_config_dir`.
* **Config file** -- a single JSON object of client options in
  ``config.json``. See :func:`load_options`.
* **Environment** -- ``PBCLIENT_<OPTION>`` variables. See :func:`env_options`.
* **Precedence resolution** -- :func:`resolve_options` layers file,
  environment and explicit overrides.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  referenced as ``env:VAR`` or ``file:/path``.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Mapping, Optional

from pbclient.exceptions import ConfigError
from pbclient.models import DEFINED_OPTIONS

_APP_NAME = "pbclient"
_CONFIG_FILENAME = "config.json"
_ENV_PREFIX = "PBCLIENT_"

_BOOL_OPTIONS = frozenset({"use_ssl", "use_cookies", "http_debug"})
_INT_OPTIONS = frozenset({"proxy_port"})
_FLOAT_OPTIONS = frozenset({"read_timeout"})
_JSON_OPTIONS = frozenset({"default_headers", "additional_cookies"})

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory without creating it.

    On Linux/BSD: ``$XDG_CONFIG_HOME/pbclient/`` (default ``~/.config/pbclient/``).
    On macOS/Windows: ``~/.pbclient/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        return base / _APP_NAME
    return Path.home() / f".{_APP_NAME}"


def default_config_path() -> Path:
    """Path of the user-wide options file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Config file ---


def load_options(path: Optional[str | Path] = None) -> dict[str, Any]:
    """Load client options from a JSON file.

    Args:
        path: File to read. Defaults to :func:`default_config_path`.

    Returns:
        The options mapping, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file is not valid JSON or is not a JSON object.
    """
    file_path = Path(path).expanduser() if path is not None else default_config_path()
    if not file_path.is_file():
        return {}
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config file at {file_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {file_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {file_path} must contain a JSON object")
    return data


# --- Environment ---


def _parse_env_value(option: str, raw: str, var_name: str) -> Any:
    if option in _BOOL_OPTIONS:
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigError(f"{var_name} must be a boolean, got {raw!r}")
    if option == "ssl_verify_mode":
        # Numeric modes or names such as VERIFY_NONE; ClientConfig parses both
        return int(raw) if raw.strip().isdigit() else raw
    try:
        if option in _INT_OPTIONS:
            return int(raw)
        if option in _FLOAT_OPTIONS:
            return float(raw)
        if option in _JSON_OPTIONS:
            return json.loads(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {var_name}: {exc}") from exc
    return raw


def env_options(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Collect options from ``PBCLIENT_<OPTION>`` environment variables.

    Only names in :data:`~pbclient.models.DEFINED_OPTIONS` are looked up,
    so unrelated ``PBCLIENT_*`` variables are ignored.

    Args:
        environ: Mapping to read instead of :data:`os.environ`.

    Returns:
        Options parsed to their natural types (booleans, numbers, JSON
        objects for ``default_headers``).

    Raises:
        ConfigError: If a variable cannot be parsed.
    """
    env = os.environ if environ is None else environ
    options: dict[str, Any] = {}
    for option in DEFINED_OPTIONS:
        var_name = f"{_ENV_PREFIX}{option.upper()}"
        raw = env.get(var_name)
        if raw is None:
            continue
        options[option] = _parse_env_value(option, raw, var_name)
    return options


# --- Precedence resolution ---


def resolve_options(
    file_path: Optional[str | Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> dict[str, Any]:
    """Resolve client options with full precedence chain.

    Precedence (high to low):
        1. Explicit overrides (CLI flags); ``None`` values are skipped
        2. Environment variables (``PBCLIENT_SITE``, ``PBCLIENT_USERNAME`` ...)
        3. Config file (``~/.config/pbclient/config.json``)

    Defaults are not applied here; :meth:`~pbclient.models.ClientConfig.from_options`
    does that when the client is built.
    """
    options = load_options(file_path)
    options.update(env_options(environ))
    for key, value in (overrides or {}).items():
        if value is not None:
            options[key] = value
    return options


# --- Credential source resolution ---


def resolve_credential(value: str) -> str:
    """Resolve a credential that may be given as a source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads file content, stripped of whitespace
        - anything else -- returned unchanged (a literal credential)

    Raises:
        ConfigError: If the referenced variable or file is missing.
    """
    if value.startswith("env:"):
        var_name = value[4:]
        resolved = os.environ.get(var_name)
        if resolved is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {value})"
            )
        return resolved

    if value.startswith("file:"):
        path = Path(value[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {value})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    return value
