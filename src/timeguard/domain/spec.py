"""Validation spec compiler.

Turns constructor options into a frozen :class:`ValidationSpec`. The
``between`` shorthand is expanded into ``on_or_after``/``on_or_before``
here and never survives into the compiled spec.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from timeguard.domain.operands import Operand, coerce_operand
from timeguard.domain.templates import check_template
from timeguard.domain.types import RestrictionKind, TemporalType

_RESTRICTION_NAMES = frozenset(kind.value for kind in RestrictionKind)
_BASE_OPTIONS = frozenset({"type", "allow_nil", "allow_blank", "between", "format", "ignore_usec"})
_MESSAGE_KEYS = frozenset(
    [f"{kind.value}_message" for kind in RestrictionKind]
    + [f"{t.invalid_key}_message" for t in TemporalType]
)


class ConfigurationError(ValueError):
    """Raised at setup time for malformed validator options."""


class ValidationSpec(BaseModel):
    """Compiled, immutable validator configuration.

    Attributes:
        temporal_type: Canonical type values are coerced to.
        restrictions: ``(kind, operand)`` pairs in declaration order.
        messages: Override text keyed by restriction kind or ``invalid_<type>``.
        format: Explicit ``strptime`` pattern for parsing text input.
        extra: Unrecognized options, passed through untouched.
    """

    model_config = {"frozen": True}

    temporal_type: TemporalType = TemporalType.DATETIME
    allow_nil: bool = False
    allow_blank: bool = False
    restrictions: tuple[tuple[RestrictionKind, Operand], ...] = ()
    messages: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    format: str | None = None
    ignore_usec: bool = False
    extra: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("messages", "extra")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("messages", "extra")
    def _plain_dict(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)

    @property
    def restriction_kinds(self) -> list[RestrictionKind]:
        return [kind for kind, _ in self.restrictions]

    def operand_for(self, kind: RestrictionKind) -> Operand | None:
        for candidate, operand in self.restrictions:
            if candidate == kind:
                return operand
        return None


def _expand_between(value: object) -> tuple[object, object]:
    if not isinstance(value, (list, tuple)):
        msg = f"between must be a list or tuple, got {type(value).__name__}"
        raise ConfigurationError(msg)
    if len(value) != 2:
        msg = f"between must have exactly two elements, got {len(value)}"
        raise ConfigurationError(msg)
    return value[0], value[1]


def compile_spec(**options: Any) -> ValidationSpec:
    """Compile validator options into a :class:`ValidationSpec`.

    Raises:
        ConfigurationError: For an unknown ``type``, a malformed ``between``
            or an unusable restriction value.
    """
    raw_type = options.get("type") or TemporalType.DATETIME
    try:
        temporal_type = TemporalType(raw_type)
    except ValueError as exc:
        msg = f"Unknown type {raw_type!r}; expected one of {[t.value for t in TemporalType]}"
        raise ConfigurationError(msg) from exc

    # Declaration order; between's bounds take the position of between.
    order: list[str] = []
    for key in options:
        if key == "between":
            names: tuple[str, ...] = (RestrictionKind.ON_OR_AFTER, RestrictionKind.ON_OR_BEFORE)
        elif key in _RESTRICTION_NAMES:
            names = (key,)
        else:
            continue
        for name in names:
            if name not in order:
                order.append(name)

    values = {key: options[key] for key in options if key in _RESTRICTION_NAMES}
    if "between" in options:
        first, last = _expand_between(options["between"])
        values[RestrictionKind.ON_OR_AFTER] = first
        values[RestrictionKind.ON_OR_BEFORE] = last

    restrictions: list[tuple[RestrictionKind, Operand]] = []
    for name in order:
        try:
            operand = coerce_operand(values[name])
        except TypeError as exc:
            raise ConfigurationError(f"{name}: {exc}") from exc
        restrictions.append((RestrictionKind(name), operand))

    messages: dict[str, str] = {}
    for key in options:
        if key in _MESSAGE_KEYS:
            try:
                messages[key.removesuffix("_message")] = check_template(str(options[key]))
            except ValueError as exc:
                raise ConfigurationError(f"{key}: {exc}") from exc
    extra = {
        key: val
        for key, val in options.items()
        if key not in _BASE_OPTIONS and key not in _RESTRICTION_NAMES and key not in _MESSAGE_KEYS
    }

    return ValidationSpec(
        temporal_type=temporal_type,
        allow_nil=bool(options.get("allow_nil", False)),
        allow_blank=bool(options.get("allow_blank", False)),
        restrictions=tuple(restrictions),
        messages=messages,
        format=options.get("format"),
        ignore_usec=bool(options.get("ignore_usec", False)),
        extra=extra,
    )
