"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, timeguard.toml only contains
overrides. Override tables are merged key-by-key over the defaults.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from timeguard.domain.templates import check_template, render_template

DEFAULT_MESSAGES: dict[str, str] = {
    "invalid_date": "is not a valid date",
    "invalid_time": "is not a valid time",
    "invalid_datetime": "is not a valid datetime",
    "is_at": "must be at {restriction}",
    "before": "must be before {restriction}",
    "after": "must be after {restriction}",
    "on_or_before": "must be on or before {restriction}",
    "on_or_after": "must be on or after {restriction}",
}

DEFAULT_ERROR_VALUE_FORMATS: dict[str, str] = {
    "date": "%Y-%m-%d",
    "time": "%H:%M:%S",
    "datetime": "%Y-%m-%d %H:%M:%S",
}


class MessageCatalog(BaseModel):
    """[catalog] section — message templates and error value formats.

    Templates use ``str.format`` fields; ``{restriction}`` receives the
    formatted restriction value. Fields without a value render verbatim.
    """

    model_config = {"frozen": True}

    messages: dict[str, str] = Field(default_factory=dict)
    error_value_formats: dict[str, str] = Field(default_factory=dict)

    @field_validator("messages")
    @classmethod
    def _check_templates(cls, value: dict[str, str]) -> dict[str, str]:
        for template in value.values():
            check_template(template)
        return value

    def template(self, key: str) -> str:
        """Return the template for *key*, falling back to the defaults.

        Unknown keys render as the key itself.
        """
        return self.messages.get(key) or DEFAULT_MESSAGES.get(key, key)

    def message(self, key: str, override: str | None = None, /, **params: object) -> str:
        """Render *key*, or *override* when given, with *params*."""
        return render_template(override or self.template(key), **params)

    def error_value_format(self, temporal_type: str) -> str:
        return self.error_value_formats.get(temporal_type) or DEFAULT_ERROR_VALUE_FORMATS[
            temporal_type
        ]
