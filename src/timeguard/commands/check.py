"""Command: check a single value against date/time restrictions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from timeguard.commands._base import ExamplesCommand
from timeguard.domain.operands import Clock
from timeguard.domain.types import RestrictionKind, TemporalType

if TYPE_CHECKING:
    from timeguard.commands._context import AppContext


def _operand(text: str) -> object:
    """``now``/``today`` select the clock; anything else is parsed as a value."""
    lowered = text.strip().lower()
    if lowered in (Clock.NOW.value, Clock.TODAY.value):
        return Clock(lowered)
    return text


@click.command(
    cls=ExamplesCommand,
    examples="""\
  timeguard check 2019-12-31 --type date --on-or-after 2020-01-01
  timeguard check "2024-05-01 09:30" --before now
  timeguard check 14:30 --type time --between 09:00 17:00
  timeguard check 31/12/2019 --type date --format %d/%m/%Y --after 2019-01-01
  timeguard --json check 2030-01-01 --type date --on-or-before today""",
)
@click.argument("value")
@click.option(
    "--type",
    "temporal_type",
    type=click.Choice([t.value for t in TemporalType]),
    default=TemporalType.DATETIME.value,
    help="Type the value is validated as.",
)
@click.option("--is-at", default=None, help="Value must equal this.")
@click.option("--before", default=None, help="Value must be before this.")
@click.option("--after", default=None, help="Value must be after this.")
@click.option("--on-or-before", default=None, help="Value must be on or before this.")
@click.option("--on-or-after", default=None, help="Value must be on or after this.")
@click.option("--between", nargs=2, default=None, help="Inclusive range: FIRST LAST.")
@click.option("--format", "fmt", default=None, help="strptime pattern for parsing text.")
@click.option("--allow-blank", is_flag=True, help="Treat a blank value as valid.")
@click.option("--ignore-usec", is_flag=True, help="Drop microseconds before comparing.")
@click.pass_obj
def check(
    app: AppContext,
    value: str,
    temporal_type: str,
    is_at: str | None,
    before: str | None,
    after: str | None,
    on_or_before: str | None,
    on_or_after: str | None,
    between: tuple[str, str] | None,
    fmt: str | None,
    allow_blank: bool,
    ignore_usec: bool,
) -> None:
    """Check VALUE against date/time restrictions."""
    from timeguard.services.check import check_value

    options: dict[str, Any] = {"type": temporal_type}
    restrictions = {
        RestrictionKind.IS_AT: is_at,
        RestrictionKind.BEFORE: before,
        RestrictionKind.AFTER: after,
        RestrictionKind.ON_OR_BEFORE: on_or_before,
        RestrictionKind.ON_OR_AFTER: on_or_after,
    }
    for kind, raw in restrictions.items():
        if raw is not None:
            options[kind.value] = _operand(raw)
    if between:
        options["between"] = tuple(_operand(bound) for bound in between)
    if fmt:
        options["format"] = fmt
    if allow_blank:
        options["allow_blank"] = True
    if ignore_usec:
        options["ignore_usec"] = True

    app.emit(check_value(value, settings=app.settings, **options))
