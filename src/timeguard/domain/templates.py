"""Message templates.

Templates use ``str.format`` fields. A field with no value renders as
written, so a custom message can never fail a validation pass; templates
that cannot render at all are rejected when they are configured.
"""

from __future__ import annotations

import string
from collections.abc import Mapping, Sequence
from typing import Any


class _Missing:
    """Stand-in for a template field with no value; renders as the field."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __format__(self, format_spec: str) -> str:
        suffix = f":{format_spec}" if format_spec else ""
        return "{" + self.name + suffix + "}"


class _TemplateFormatter(string.Formatter):
    """``str.format`` that leaves fields it has no value for in place."""

    def get_field(self, field_name: str, args: Sequence[Any], kwargs: Mapping[str, Any]) -> Any:
        try:
            return super().get_field(field_name, args, kwargs)
        except (KeyError, IndexError, AttributeError):
            return _Missing(field_name), field_name

    def convert_field(self, value: Any, conversion: str | None) -> Any:
        if isinstance(value, _Missing):
            return value
        return super().convert_field(value, conversion)


_FORMATTER = _TemplateFormatter()


def check_template(template: str) -> str:
    """Return *template* unchanged if it renders; raise ValueError otherwise.

    Restriction values reach templates as text, so a trial render with a
    text ``restriction`` covers every field specification.
    """
    try:
        render_template(template, restriction="2000-01-01")
    except (ValueError, TypeError) as exc:
        msg = f"Invalid message template {template!r}: {exc}"
        raise ValueError(msg) from exc
    return template


def render_template(template: str, **params: object) -> str:
    return _FORMATTER.format(template, **params)
