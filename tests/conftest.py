"""Shared pytest fixtures and test helpers for timeguard tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from timeguard.config.settings import TimeguardSettings, reset_settings
from timeguard.domain.errors import Errors


@pytest.fixture(autouse=True)
def _isolated_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Generator[None]:
    """Keep tests away from real config files, env vars, and leaked settings."""
    for var in (
        "TIMEGUARD_CONFIG",
        "TIMEGUARD_IGNORE_RESTRICTION_ERRORS",
        "TIMEGUARD_TIME_ZONE",
        "TIMEGUARD_DEFAULT_TIMEZONE",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root and package logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    package = logging.getLogger("timeguard")
    package_level = package.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    package.setLevel(package_level)
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings() -> TimeguardSettings:
    """Default settings, built without any config file."""
    return TimeguardSettings()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


# ---------------------------------------------------------------------------
# Record doubles
# ---------------------------------------------------------------------------


class Record:
    """Plain record: attributes plus an error sink, no optional capabilities."""

    def __init__(self, **attrs: Any) -> None:
        self.errors = Errors()
        for name, value in attrs.items():
            setattr(self, name, value)


class RawRecord(Record):
    """Record that remembers the value assigned before typecasting."""

    def __init__(self, raw: dict[str, Any] | None = None, **attrs: Any) -> None:
        super().__init__(**attrs)
        self._raw = raw or {}

    def timeliness_raw_value_for(self, attribute: str) -> Any:
        return self._raw.get(attribute)


class AwareRecord(Record):
    """Record whose ``starts_at`` attribute is timezone-aware."""

    @classmethod
    def timeliness_attribute_timezone_aware(cls, attribute: str) -> bool:
        return attribute == "starts_at"
