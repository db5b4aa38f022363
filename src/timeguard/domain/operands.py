"""Restriction operands — the right-hand side of a comparison.

An operand is one of three tagged forms, resolved fresh on every
validation call:

- :class:`Literal` — a fixed value (``date``, ``time``, ``datetime`` or text).
- :class:`AttributeRef` — another attribute read from the record.
- :class:`Clock` — the current time (``NOW``) or date (``TODAY``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import StrEnum


@dataclass(frozen=True)
class Literal:
    """A static operand value."""

    value: datetime | date | time | str


@dataclass(frozen=True)
class AttributeRef:
    """Operand read from ``getattr(record, name)`` at evaluation time."""

    name: str


class Clock(StrEnum):
    """Symbolic operands resolved against the clock."""

    NOW = "now"
    TODAY = "today"


Operand = Literal | AttributeRef | Clock


def attr(name: str) -> AttributeRef:
    """Reference another attribute on the record being validated."""
    return AttributeRef(name)


def now() -> Clock:
    return Clock.NOW


def today() -> Clock:
    return Clock.TODAY


def coerce_operand(value: object) -> Operand:
    """Wrap a raw option value as an operand.

    Raises:
        TypeError: If *value* is not a temporal value, text, or operand.
    """
    if isinstance(value, (Literal, AttributeRef, Clock)):
        return value
    if isinstance(value, (date, time, str)):
        return Literal(value)
    msg = (
        f"Unsupported restriction value {value!r}; "
        "use a date/time value, text, attr(), now() or today()"
    )
    raise TypeError(msg)
