"""Configuration loading for the MCP server."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_SCRIPTS_PATH = Path(__file__).with_name("scripts")
DEFAULT_OSASCRIPT = "osascript"
DEFAULT_SCRIPT_TIMEOUT = 60
DEFAULT_LOG_LEVEL = "INFO"


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class AppConfig:
    scripts_path: Path
    osascript_path: str
    script_timeout: int
    service_token: str | None
    log_level: int


def _read_dotenv_value(dotenv_path: Path, key: str) -> str | None:
    """Read a single key from a .env file without mutating the environment."""
    if not dotenv_path.is_file():
        return None
    try:
        content = dotenv_path.read_text(encoding="utf-8")
    except OSError:
        return None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].strip()
        if "=" not in stripped:
            continue
        name, value = stripped.split("=", 1)
        name = name.strip()
        if name != key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        return value or None
    return None


def _read_setting(dotenv_path: Path, key: str) -> str | None:
    raw_value = os.environ.get(key)
    if raw_value is None:
        raw_value = _read_dotenv_value(dotenv_path, key)
    if raw_value is None:
        return None
    return raw_value.strip() or None


def _read_positive_int(raw_value: str | None, *, default: int, key: str) -> int:
    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except ValueError:
        raise ConfigError(f"{key} must be an integer.") from None
    if value <= 0:
        raise ConfigError(f"{key} must be a positive integer.")
    return value


def _read_log_level(raw_value: str | None, *, key: str) -> int:
    name = (raw_value or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ConfigError(f"{key} must be a logging level name.")
    return level


def load_config() -> AppConfig:
    """Load configuration from the environment, falling back to .env."""
    dotenv_path = Path.cwd() / ".env"

    scripts_key = "OMNIFOCUS_MCP_SCRIPTS_PATH"
    raw_scripts = _read_setting(dotenv_path, scripts_key)
    scripts_path = Path(raw_scripts).resolve() if raw_scripts else DEFAULT_SCRIPTS_PATH
    if not scripts_path.is_dir():
        raise ConfigError(
            f"{scripts_key} must point to a directory containing the OmniFocus scripts."
        )

    osascript_path = (
        _read_setting(dotenv_path, "OMNIFOCUS_MCP_OSASCRIPT") or DEFAULT_OSASCRIPT
    )

    timeout_key = "OMNIFOCUS_MCP_SCRIPT_TIMEOUT"
    script_timeout = _read_positive_int(
        _read_setting(dotenv_path, timeout_key),
        default=DEFAULT_SCRIPT_TIMEOUT,
        key=timeout_key,
    )

    service_token = _read_setting(dotenv_path, "OMNIFOCUS_MCP_SERVICE_TOKEN")

    log_level_key = "OMNIFOCUS_MCP_LOG_LEVEL"
    log_level = _read_log_level(
        _read_setting(dotenv_path, log_level_key), key=log_level_key
    )

    return AppConfig(
        scripts_path=scripts_path,
        osascript_path=osascript_path,
        script_timeout=script_timeout,
        service_token=service_token,
        log_level=log_level,
    )
