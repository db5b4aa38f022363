"""Error collection for records.

Records hand the validator an ``errors`` sink. Anything with an
``add(error: TimelinessError)`` method works; :class:`Errors` is the
ready-made implementation.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from timeguard.domain.outcome import TimelinessError


@runtime_checkable
class ErrorSink(Protocol):
    def add(self, error: TimelinessError) -> None: ...


class Errors:
    """Ordered, attribute-keyed collection of :class:`TimelinessError`."""

    def __init__(self) -> None:
        self._errors: list[TimelinessError] = []

    def add(self, error: TimelinessError) -> None:
        self._errors.append(error)

    def __getitem__(self, attribute: str) -> list[str]:
        """Messages recorded for *attribute*."""
        return [e.message for e in self._errors if e.attribute == attribute]

    def __iter__(self) -> Iterator[TimelinessError]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def for_attribute(self, attribute: str) -> list[TimelinessError]:
        return [e for e in self._errors if e.attribute == attribute]

    def kinds(self, attribute: str) -> list[str]:
        return [e.kind for e in self._errors if e.attribute == attribute]

    def clear(self) -> None:
        self._errors.clear()
