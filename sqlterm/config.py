"""Configuration management for sqlterm.

Settings live in a JSON file (``~/.sqlterm/config.json`` unless overridden
by ``SQLTERM_CONFIG_DIR`` or ``--config``). Every key is optional; missing
sections fall back to the dataclass defaults below.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

CONFIG_DIR = Path(os.environ.get("SQLTERM_CONFIG_DIR", "~/.sqlterm")).expanduser()
CONFIG_PATH = CONFIG_DIR / "config.json"
DDL_PATH = CONFIG_DIR / "ddl.sql"
LOG_DIR = CONFIG_DIR / "logs"


class ConfigError(ValueError):
    """Exception raised when the configuration file cannot be used."""


@dataclass
class DisplayConfig:
    """Rendering options."""

    tick_rate_ms: int = 250
    show_logs_tab: bool = True


@dataclass
class EditorConfig:
    """Query editor options."""

    viewport_height: int = 17  # Editor lines rendered at once

    def __post_init__(self) -> None:
        if self.viewport_height < 1:
            raise ConfigError("editor.viewport_height must be >= 1")


@dataclass
class ExecutionConfig:
    """Query engine options."""

    database: str = ":memory:"
    ddl_path: str = ""  # Empty means <config dir>/ddl.sql
    max_rows: int = 10000  # 0 fetches everything

    def __post_init__(self) -> None:
        if self.max_rows < 0:
            raise ConfigError("execution.max_rows must be >= 0")


@dataclass
class InteractionConfig:
    """Key handling options."""

    # Enter runs the query (instead of inserting a newline) once a ';' was typed
    run_on_terminated_enter: bool = False


@dataclass
class AppConfig:
    """Top-level application configuration."""

    display: DisplayConfig = field(default_factory=DisplayConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    history_limit: int = 100

    def __post_init__(self) -> None:
        if self.history_limit < 1:
            raise ConfigError("history_limit must be >= 1")

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> AppConfig:
        if not isinstance(payload, dict):
            raise ConfigError("Top-level config must be a JSON object")
        return cls(
            display=_build_section(DisplayConfig, payload.get("display"), "display"),
            editor=_build_section(EditorConfig, payload.get("editor"), "editor"),
            execution=_build_section(ExecutionConfig, payload.get("execution"), "execution"),
            interaction=_build_section(InteractionConfig, payload.get("interaction"), "interaction"),
            history_limit=_check_type("history_limit", payload.get("history_limit", 100), 100),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def ddl_path(self) -> Path:
        if self.execution.ddl_path:
            return Path(self.execution.ddl_path).expanduser()
        return DDL_PATH


def _check_type(name: str, value: Any, default: Any) -> Any:
    # bool is an int subclass; keep them apart so "true" never sets a row limit
    if isinstance(default, bool) != isinstance(value, bool) or not isinstance(value, type(default)):
        raise ConfigError(f"{name} must be of type {type(default).__name__}, got {value!r}")
    return value


def _build_section(cls: type, payload: Any, name: str) -> Any:
    if payload is None:
        return cls()
    if not isinstance(payload, dict):
        raise ConfigError(f"[{name}] must be a JSON object")
    kwargs: dict[str, Any] = {}
    defaults = cls()
    for item in fields(cls):
        if item.name in payload:
            kwargs[item.name] = _check_type(f"{name}.{item.name}", payload[item.name], getattr(defaults, item.name))
    return cls(**kwargs)


def get_config_path(cli_config_arg: str | None = None) -> Path:
    """Path given on the command line, or the default config location."""
    if cli_config_arg:
        return Path(cli_config_arg).expanduser()
    return CONFIG_PATH


def read_config(path: Path) -> AppConfig:
    """Load ``path`` strictly.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values.
    """
    if not path.exists():
        return AppConfig()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to read config JSON: {exc}") from exc
    return AppConfig.from_dict(payload)


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration, falling back to defaults when it is unusable."""
    path = path or CONFIG_PATH
    try:
        return read_config(path)
    except ConfigError as exc:
        print(f"[sqlterm] Failed to load config '{path}': {exc}", file=sys.stderr)
        return AppConfig()

