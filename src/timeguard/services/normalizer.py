"""Value normalizer — raw input to canonical temporal values.

Canonical forms by type:

- ``date``: :class:`datetime.date`
- ``datetime``: :class:`datetime.datetime`
- ``time``: :class:`datetime.datetime` pinned to the configured dummy date

Timezone-aware attributes produce aware datetimes in the application
zone; everything else is naive, with aware input first converted to the
default zone. Anything that cannot be normalized becomes ``None``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import TYPE_CHECKING

from timeguard.domain.operands import Clock
from timeguard.domain.types import TemporalType, is_blank

if TYPE_CHECKING:
    from timeguard.config.settings import TimeguardSettings

logger = logging.getLogger(__name__)

CanonicalValue = date | datetime


class Normalizer:
    """Parse and type-cast values for one validation pass.

    Built per call because timezone awareness depends on the attribute.
    """

    def __init__(
        self,
        settings: TimeguardSettings,
        *,
        timezone_aware: bool = False,
        ignore_usec: bool = False,
    ) -> None:
        self._settings = settings
        self.timezone_aware = timezone_aware
        self.ignore_usec = ignore_usec

    def normalize(
        self,
        value: object,
        temporal_type: TemporalType,
        fmt: str | None = None,
    ) -> CanonicalValue | None:
        """Parse text (or anything, when *fmt* is set), then type-cast."""
        if isinstance(value, str) or fmt:
            value = self.parse(value, temporal_type, fmt)
        return self.type_cast(value, temporal_type)

    def normalize_operand(
        self,
        value: object,
        temporal_type: TemporalType,
        fmt: str | None = None,
    ) -> CanonicalValue | None:
        """Type-cast a restriction value.

        Text tries *fmt* first and falls back to ISO 8601, so restriction
        literals need not be written in the subject's format.
        """
        if isinstance(value, str):
            parsed = self.parse(value, temporal_type, fmt) if fmt else None
            value = parsed if parsed is not None else self.parse(value, temporal_type)
        return self.type_cast(value, temporal_type)

    def parse(
        self,
        value: object,
        temporal_type: TemporalType,
        fmt: str | None = None,
    ) -> date | time | datetime | None:
        """Parse text into a temporal value; ``None`` when unparsable.

        Non-text values are returned unchanged.
        """
        if is_blank(value):
            return None
        if not isinstance(value, str):
            return value  # type: ignore[return-value]
        text = value.strip()
        try:
            if fmt:
                parsed = datetime.strptime(text, fmt)
                return parsed.date() if temporal_type is TemporalType.DATE else parsed
            return _parse_iso(text, temporal_type)
        except (ValueError, TypeError):
            logger.debug("Unparsable %s value %r (format=%r)", temporal_type, text, fmt)
            return None

    def type_cast(self, value: object, temporal_type: TemporalType) -> CanonicalValue | None:
        """Coerce a typed value to *temporal_type*; ``None`` if impossible."""
        if isinstance(value, str):
            value = self.parse(value, temporal_type)
        if not isinstance(value, (date, time)):
            return None

        if temporal_type is TemporalType.DATE:
            if isinstance(value, datetime):
                return self._apply_zone(value).date()
            if isinstance(value, date):
                return value
            return None

        if temporal_type is TemporalType.TIME:
            return self._strip_usec(self._dummy_time(value))

        if isinstance(value, datetime):
            cast = self._apply_zone(value)
        elif isinstance(value, date):
            cast = self._apply_zone(datetime.combine(value, time()))
        else:
            dummy = self._settings.dummy_date_for_time_type
            cast = self._apply_zone(datetime.combine(dummy, value))
        return self._strip_usec(cast)

    def current(self, clock: Clock) -> datetime | date:
        """Resolve a clock operand in the zone this pass compares in."""
        zone = self._settings.zone if self.timezone_aware else self._settings.default_zone
        moment = datetime.now(zone)
        if clock is Clock.TODAY:
            return moment.date()
        return moment

    # --- internals ---

    def _apply_zone(self, value: datetime) -> datetime:
        if self.timezone_aware:
            zone = self._settings.zone
            if value.tzinfo is None:
                return value.replace(tzinfo=zone)
            return value.astimezone(zone)
        if value.tzinfo is not None:
            return value.astimezone(self._settings.default_zone).replace(tzinfo=None)
        return value

    def _dummy_time(self, value: date | time) -> datetime:
        dummy = self._settings.dummy_date_for_time_type
        if isinstance(value, datetime):
            value = self._apply_zone(value)
            clock = value.time()
        elif isinstance(value, time):
            clock = value
            if value.tzinfo is not None:
                clock = self._apply_zone(datetime.combine(dummy, value)).timetz()
        else:
            clock = time()
        clock = clock.replace(tzinfo=None)
        pinned = datetime.combine(dummy, clock)
        if self.timezone_aware:
            pinned = pinned.replace(tzinfo=self._settings.zone)
        return pinned

    def _strip_usec(self, value: datetime) -> datetime:
        if self.ignore_usec:
            return value.replace(microsecond=0)
        return value


def _parse_iso(text: str, temporal_type: TemporalType) -> date | time | datetime:
    if temporal_type is TemporalType.DATE:
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text)
    if temporal_type is TemporalType.TIME:
        try:
            return time.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text)
    return datetime.fromisoformat(text)
