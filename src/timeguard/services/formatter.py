"""Error value formatting and message rendering."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timeguard.config.models import MessageCatalog
    from timeguard.domain.spec import ValidationSpec
    from timeguard.domain.types import TemporalType


def format_error_value(value: date, temporal_type: TemporalType, catalog: MessageCatalog) -> str:
    """Render a restriction value with the catalog's pattern for *temporal_type*."""
    return value.strftime(catalog.error_value_format(temporal_type.value))


def render_message(
    spec: ValidationSpec,
    key: str,
    catalog: MessageCatalog,
    **params: object,
) -> str:
    """Render the message for *key*, preferring a per-validator override."""
    return catalog.message(key, spec.messages.get(key), **params)
