"""Check a single value against restrictions, for command-line use."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from timeguard.domain.outcome import OutcomeStatus
from timeguard.domain.spec import ConfigurationError
from timeguard.services.result import ServiceError, ServiceResult
from timeguard.services.validator import TimelinessValidator

if TYPE_CHECKING:
    from timeguard.config.settings import TimeguardSettings


def check_value(value: str, *, settings: TimeguardSettings, **options: Any) -> ServiceResult:
    """Validate *value* with validator *options*.

    Returns ``ok=False`` with code ``INVALID_OPTIONS`` for bad options and
    ``INVALID_VALUE`` when the value fails validation.
    """
    try:
        validator = TimelinessValidator(settings=settings, **options)
    except ConfigurationError as exc:
        return ServiceResult(
            ok=False,
            op="check",
            error=ServiceError(code="INVALID_OPTIONS", message=str(exc)),
        )

    outcome = validator.validate(value)
    data = {
        "value": value,
        "type": validator.temporal_type.value,
        "status": outcome.status.value,
        "restrictions": [kind.value for kind in validator.spec.restriction_kinds],
    }
    warnings = [
        f"{r.kind.value} restriction skipped: {r.error}"
        for r in outcome.results
        if getattr(r, "suppressed", False)
    ]

    if outcome.valid:
        return ServiceResult(ok=True, op="check", data=data, warnings=warnings)

    first = outcome.errors[0]
    if outcome.status is OutcomeStatus.ERRORED:
        code = "RESTRICTION_ERROR"
    else:
        code = "INVALID_VALUE"
    return ServiceResult(
        ok=False,
        op="check",
        data=data,
        warnings=warnings,
        error=ServiceError(
            code=code,
            message=first.message,
            detail={"errors": [e.model_dump(mode="json") for e in outcome.errors]},
        ),
    )
