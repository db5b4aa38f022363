"""Root CLI group for timeguard with global flags and command registration."""

from __future__ import annotations

import click

from timeguard import __version__
from timeguard.commands import register_commands
from timeguard.commands._context import AppContext
from timeguard.config.settings import TimeguardSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="timeguard")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--time-zone", default=None, help="Application time zone (e.g. Europe/Berlin).")
@click.option(
    "--ignore-restriction-errors",
    is_flag=True,
    help="Skip restrictions whose value cannot be resolved.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    time_zone: str | None,
    ignore_restriction_errors: bool,
) -> None:
    """timeguard — date and time restriction validator."""
    overrides: dict[str, object] = {
        "json_output": json_output,
        "verbose": verbose,
        "log_json": log_json,
    }
    if time_zone is not None:
        overrides["time_zone"] = time_zone
    if ignore_restriction_errors:
        overrides["ignore_restriction_errors"] = True
    try:
        settings = TimeguardSettings.load(config_path=config_path, **overrides)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
