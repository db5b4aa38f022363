"""Unified settings — init kwargs, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags or ``configure()`` overrides
  2. Env vars     — ``TIMEGUARD_*`` prefix
  3. TOML file    — ``timeguard.toml`` discovered via walk-up
  4. Code defaults — baked into the models

The process-wide instance read by validators at evaluation time is held
here and swapped by :func:`configure`.
"""

from __future__ import annotations

import threading
from datetime import date
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from timeguard.config.discovery import find_config, read_toml
from timeguard.config.models import MessageCatalog


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``timeguard.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class TimeguardSettings(BaseSettings):
    """Process-wide validation settings.

    Attributes:
        ignore_restriction_errors: Silently skip restrictions whose operand
            cannot be resolved instead of reporting a diagnostic error.
        default_timezone: Zone naive comparisons are normalized into.
        time_zone: Application zone for timezone-aware attributes.
        dummy_date_for_time_type: Date that ``time`` values are pinned to.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TIMEGUARD_",
        "env_nested_delimiter": "__",
    }

    ignore_restriction_errors: bool = False
    default_timezone: str = "UTC"
    time_zone: str = "UTC"
    dummy_date_for_time_type: date = date(2000, 1, 1)
    catalog: MessageCatalog = Field(default_factory=MessageCatalog)

    # --- CLI flags ---
    config_path: Path | None = None
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    @field_validator("default_timezone", "time_zone")
    @classmethod
    def _check_zone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown time zone: {value!r}"
            raise ValueError(msg) from exc
        return value

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone)

    @property
    def default_zone(self) -> ZoneInfo:
        return ZoneInfo(self.default_timezone)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> TimeguardSettings:
        """Construct settings from all sources.

        Uses the explicit *config_path* when given, otherwise discovers
        ``timeguard.toml`` by walking up from *start*. *overrides* win over
        every other source.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None


_lock = threading.Lock()
_current: TimeguardSettings | None = None


def get_settings() -> TimeguardSettings:
    """Return the process-wide settings, loading them on first use."""
    global _current
    with _lock:
        if _current is None:
            _current = TimeguardSettings.load()
        return _current


def configure(settings: TimeguardSettings | None = None, **overrides: Any) -> TimeguardSettings:
    """Replace the process-wide settings.

    Pass a ready-made *settings* object, or keyword *overrides* applied on
    top of the regular sources.
    """
    global _current
    new = settings if settings is not None else TimeguardSettings.load(**overrides)
    with _lock:
        _current = new
    return new


def reset_settings() -> None:
    """Forget the process-wide settings; the next read reloads them."""
    global _current
    with _lock:
        _current = None
