"""Temporal types and restriction kinds.

Each restriction kind maps to the relational operator applied as
``subject <op> operand``. ``RESTRICTIONS`` keeps the canonical order.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from enum import StrEnum
from typing import Any


class TemporalType(StrEnum):
    """The canonical value type an attribute is validated as."""

    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"

    @property
    def invalid_key(self) -> str:
        """Message key reported when a value cannot be coerced to this type."""
        return f"invalid_{self.value}"


class RestrictionKind(StrEnum):
    """Primitive comparison restrictions."""

    IS_AT = "is_at"
    BEFORE = "before"
    AFTER = "after"
    ON_OR_BEFORE = "on_or_before"
    ON_OR_AFTER = "on_or_after"


RESTRICTIONS: dict[RestrictionKind, Callable[[Any, Any], bool]] = {
    RestrictionKind.IS_AT: operator.eq,
    RestrictionKind.BEFORE: operator.lt,
    RestrictionKind.AFTER: operator.gt,
    RestrictionKind.ON_OR_BEFORE: operator.le,
    RestrictionKind.ON_OR_AFTER: operator.ge,
}

RESTRICTION_ERROR = "restriction_error"


def is_blank(value: object) -> bool:
    """True for None, whitespace-only strings and empty containers."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False
