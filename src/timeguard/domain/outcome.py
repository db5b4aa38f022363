"""Validation outcomes — the result contract of one validation pass.

Each restriction evaluates to exactly one of :class:`RestrictionPassed`,
:class:`RestrictionViolated` or :class:`RestrictionFailed`. The evaluator
branches on these instead of letting exceptions escape.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from timeguard.domain.types import RestrictionKind


class TimelinessError(BaseModel):
    """One attribute-scoped error added to a record."""

    model_config = {"frozen": True}

    attribute: str
    kind: str
    message: str
    restriction: RestrictionKind | None = None
    restriction_value: str | None = None


class RestrictionPassed(BaseModel):
    model_config = {"frozen": True}

    status: Literal["passed"] = "passed"
    kind: RestrictionKind


class RestrictionViolated(BaseModel):
    """The subject value failed the comparison against *restriction_value*."""

    model_config = {"frozen": True}

    status: Literal["violated"] = "violated"
    kind: RestrictionKind
    restriction_value: str


class RestrictionFailed(BaseModel):
    """Resolving, normalizing or comparing the operand raised."""

    model_config = {"frozen": True}

    status: Literal["failed"] = "failed"
    kind: RestrictionKind
    error_type: str
    error: str
    suppressed: bool = False


RestrictionResult = RestrictionPassed | RestrictionViolated | RestrictionFailed


class OutcomeStatus(StrEnum):
    VALID = "valid"
    SKIPPED = "skipped"
    INVALID_TYPE = "invalid_type"
    VIOLATED = "violated"
    ERRORED = "errored"


class ValidationOutcome(BaseModel):
    """Summary of a single ``validate_each`` call.

    Attributes:
        status: Terminal state of the pass.
        errors: Errors added to the record during this pass.
        results: Per-restriction results, in evaluation order.
    """

    model_config = {"frozen": True}

    attribute: str
    status: OutcomeStatus
    errors: list[TimelinessError] = Field(default_factory=list)
    results: list[RestrictionResult] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.status in (OutcomeStatus.VALID, OutcomeStatus.SKIPPED)

    @property
    def violation(self) -> RestrictionViolated | None:
        for result in self.results:
            if isinstance(result, RestrictionViolated):
                return result
        return None
