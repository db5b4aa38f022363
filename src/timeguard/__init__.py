"""timeguard — date, time and datetime restriction validation for records."""

from timeguard.config.settings import TimeguardSettings, configure, get_settings
from timeguard.domain.errors import Errors
from timeguard.domain.operands import AttributeRef, Clock, Literal, attr, now, today
from timeguard.domain.outcome import TimelinessError, ValidationOutcome
from timeguard.domain.spec import ConfigurationError, ValidationSpec, compile_spec
from timeguard.domain.types import RestrictionKind, TemporalType
from timeguard.services.validator import TimelinessValidator

__version__ = "0.4.0"

__all__ = [
    "AttributeRef",
    "Clock",
    "ConfigurationError",
    "Errors",
    "Literal",
    "RestrictionKind",
    "TemporalType",
    "TimelinessError",
    "TimelinessValidator",
    "TimeguardSettings",
    "ValidationOutcome",
    "ValidationSpec",
    "__version__",
    "attr",
    "compile_spec",
    "configure",
    "get_settings",
    "now",
    "today",
]
