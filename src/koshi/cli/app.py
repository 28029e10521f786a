"""Entry point of the `koshi` command."""

from pathlib import Path
from typing import Annotated

import typer

from koshi import __version__
from koshi.cli import describe as describe_cmd
from koshi.cli import pr as pr_cmd
from koshi.cli.common import AppState, console
from koshi.config import get_settings
from koshi.logging import setup_logging

app = typer.Typer(
    name="koshi",
    help="Koshi: give your jj projects a powerful lift.",
    add_completion=False,
    no_args_is_help=True,
)


def _show_version(value: bool) -> None:
    if value:
        console.print(f"koshi {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Apply settings and the -v/-q flags to the log handlers."""
    settings = get_settings()
    file_config = settings.logging
    setup_logging(
        settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(file_config.log_file) if file_config.log_file else None,
        rotation=file_config.rotation,
        retention=file_config.retention,
        serialize=file_config.serialize,
    )


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the config file (default: $HOME/.config/koshi/config.json).",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log warnings and errors."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=_show_version,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """AI change descriptions and GitHub pull requests for Jujutsu."""
    _configure_logging(verbose, quiet)
    ctx.obj = AppState(config_path=config)


app.command("ai-desc")(describe_cmd.ai_desc)
app.command("ad", help="Alias of ai-desc.")(describe_cmd.ai_desc)
app.command("pr")(pr_cmd.pr)
