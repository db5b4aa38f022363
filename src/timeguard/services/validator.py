"""TimelinessValidator — validate one temporal attribute on a record.

A validation pass runs ``fetch-raw -> empty-check -> type-check ->
restriction-loop``:

- The raw, pre-typecast value is preferred when the record exposes it, so
  unparsable user input is reported as invalid instead of silently nil.
- Only the first violated restriction is reported.
- A restriction whose operand cannot be resolved is reported as a
  ``restriction_error`` diagnostic, or skipped when
  ``ignore_restriction_errors`` is set. Either way the loop continues.

Record capabilities are probed, never required:

- ``record.errors.add(error)`` — error sink (required)
- ``record.timeliness_raw_value_for(attribute)`` — raw value accessor
- ``type(record).timeliness_attribute_timezone_aware(attribute)``
"""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

from timeguard.config.logging import validation_context
from timeguard.config.settings import get_settings
from timeguard.domain.errors import Errors, ErrorSink
from timeguard.domain.operands import AttributeRef, Clock, Literal, Operand
from timeguard.domain.outcome import (
    OutcomeStatus,
    RestrictionFailed,
    RestrictionPassed,
    RestrictionResult,
    RestrictionViolated,
    TimelinessError,
    ValidationOutcome,
)
from timeguard.domain.spec import ValidationSpec, compile_spec
from timeguard.domain.types import (
    RESTRICTION_ERROR,
    RESTRICTIONS,
    RestrictionKind,
    TemporalType,
    is_blank,
)
from timeguard.services.formatter import format_error_value, render_message
from timeguard.services.normalizer import CanonicalValue, Normalizer

if TYPE_CHECKING:
    from timeguard.config.settings import TimeguardSettings

logger = logging.getLogger(__name__)


class TimelinessValidator:
    """Validate a date, time or datetime attribute against restrictions.

    Usage::

        validator = TimelinessValidator(type="date", on_or_after=date(2020, 1, 1))
        outcome = validator.validate_each(record, "starts_on", record.starts_on)

    Args:
        spec: A precompiled spec. When omitted, *options* are compiled.
        settings: Fixed settings for every call. When omitted, the
            process-wide settings are read at evaluation time.
    """

    kind = "timeliness"

    def __init__(
        self,
        spec: ValidationSpec | None = None,
        *,
        settings: TimeguardSettings | None = None,
        **options: Any,
    ) -> None:
        self.spec = spec if spec is not None else compile_spec(**options)
        self._settings = settings

    @property
    def temporal_type(self) -> TemporalType:
        return self.spec.temporal_type

    def validate(
        self,
        value: object,
        *,
        record: Any = None,
        attribute: str = "value",
        settings: TimeguardSettings | None = None,
    ) -> ValidationOutcome:
        """Validate a bare value, optionally against a record for operands."""
        if record is None:
            record = SimpleNamespace(errors=Errors())
        return self.validate_each(record, attribute, value, settings=settings)

    def validate_each(
        self,
        record: Any,
        attribute: str,
        value: object,
        *,
        settings: TimeguardSettings | None = None,
    ) -> ValidationOutcome:
        """Run one validation pass, adding errors to ``record.errors``."""
        settings = settings or self._settings or get_settings()
        with validation_context(attribute=attribute, temporal_type=self.temporal_type.value):
            return self._run(record, attribute, value, settings)

    # --- pass ---

    def _run(
        self,
        record: Any,
        attribute: str,
        value: object,
        settings: TimeguardSettings,
    ) -> ValidationOutcome:
        spec = self.spec
        sink: ErrorSink = record.errors
        if not isinstance(sink, ErrorSink):
            msg = f"{type(record).__name__}.errors has no add() method"
            raise TypeError(msg)
        added: list[TimelinessError] = []

        def add(error: TimelinessError) -> None:
            sink.add(error)
            added.append(error)

        raw = attribute_raw_value(record, attribute)
        if raw is None:
            raw = value
        if (spec.allow_nil and raw is None) or (spec.allow_blank and is_blank(raw)):
            return ValidationOutcome(attribute=attribute, status=OutcomeStatus.SKIPPED)

        normalizer = Normalizer(
            settings,
            timezone_aware=timezone_aware(record, attribute),
            ignore_usec=spec.ignore_usec,
        )
        subject = normalizer.normalize(raw, spec.temporal_type, spec.format)
        if subject is None:
            key = spec.temporal_type.invalid_key
            add(
                TimelinessError(
                    attribute=attribute,
                    kind=key,
                    message=render_message(spec, key, settings.catalog),
                )
            )
            return ValidationOutcome(
                attribute=attribute, status=OutcomeStatus.INVALID_TYPE, errors=added
            )

        results: list[RestrictionResult] = []
        for kind, operand in spec.restrictions:
            result = self._evaluate(record, subject, kind, operand, normalizer, settings)
            results.append(result)

            if isinstance(result, RestrictionViolated):
                add(
                    TimelinessError(
                        attribute=attribute,
                        kind=kind.value,
                        message=render_message(
                            spec, kind.value, settings.catalog, restriction=result.restriction_value
                        ),
                        restriction=kind,
                        restriction_value=result.restriction_value,
                    )
                )
                return ValidationOutcome(
                    attribute=attribute,
                    status=OutcomeStatus.VIOLATED,
                    errors=added,
                    results=results,
                )

            if isinstance(result, RestrictionFailed) and not result.suppressed:
                add(
                    TimelinessError(
                        attribute=attribute,
                        kind=RESTRICTION_ERROR,
                        message=(
                            f"Error occurred validating {attribute} for {kind.value!r} "
                            f"restriction:\n{result.error}"
                        ),
                        restriction=kind,
                    )
                )

        status = OutcomeStatus.ERRORED if added else OutcomeStatus.VALID
        return ValidationOutcome(attribute=attribute, status=status, errors=added, results=results)

    def _evaluate(
        self,
        record: Any,
        subject: CanonicalValue,
        kind: RestrictionKind,
        operand: Operand,
        normalizer: Normalizer,
        settings: TimeguardSettings,
    ) -> RestrictionResult:
        try:
            resolved = resolve_operand(operand, record, normalizer)
            restriction_value = normalizer.normalize_operand(
                resolved, self.temporal_type, self.spec.format
            )
            if restriction_value is None:
                msg = f"{resolved!r} is not a valid {self.temporal_type.value}"
                raise ValueError(msg)
            if RESTRICTIONS[kind](subject, restriction_value):
                logger.debug("Restriction %s passed", kind.value)
                return RestrictionPassed(kind=kind)
            formatted = format_error_value(restriction_value, self.temporal_type, settings.catalog)
        except Exception as exc:
            suppressed = settings.ignore_restriction_errors
            logger.debug(
                "Restriction %s could not be evaluated (suppressed=%s)",
                kind.value,
                suppressed,
                exc_info=True,
            )
            return RestrictionFailed(
                kind=kind,
                error_type=type(exc).__name__,
                error=str(exc),
                suppressed=suppressed,
            )
        logger.debug("Restriction %s violated by %s", kind.value, formatted)
        return RestrictionViolated(kind=kind, restriction_value=formatted)


def resolve_operand(operand: Operand, record: Any, normalizer: Normalizer) -> object:
    """Resolve *operand* to a raw value for this pass.

    Raises:
        AttributeError: If an :class:`AttributeRef` names a missing attribute.
    """
    if isinstance(operand, Clock):
        return normalizer.current(operand)
    if isinstance(operand, AttributeRef):
        return getattr(record, operand.name)
    if isinstance(operand, Literal):
        return operand.value
    msg = f"Unsupported operand: {operand!r}"
    raise TypeError(msg)


def attribute_raw_value(record: Any, attribute: str) -> object:
    """Pre-typecast value from the record, or None if it doesn't track one."""
    accessor = getattr(record, "timeliness_raw_value_for", None)
    if callable(accessor):
        return accessor(attribute)
    return None


def timezone_aware(record: Any, attribute: str) -> bool:
    """Ask the record's class whether *attribute* is timezone-aware."""
    query = getattr(type(record), "timeliness_attribute_timezone_aware", None)
    if callable(query):
        return bool(query(attribute))
    return False
