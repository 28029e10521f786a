"""Common CLI option factories and helpers.

It provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `open_services`: wiring of jj, GitHub, aichat and the prompts for a command
- Shared option type aliases
"""

from __future__ import annotations

import asyncio
import signal
import threading
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, TypeVar

import typer
from rich.console import Console

from koshi.ai import AIChatConversationalist
from koshi.config import FileConfigStore, get_settings
from koshi.exceptions import Cancelled, KoshiError, PreconditionError
from koshi.github import GitHubClient
from koshi.interaction import RichInteraction
from koshi.process import require_executables
from koshi.sync import DescriptionWorkflow, OutputFormat, PrSyncEngine, ReviewerResolver
from koshi.vcs import JujutsuRepository

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


@dataclass
class AppState:
    """Global options shared by every command."""

    config_path: Path | None = None


async def _with_interrupts(coro: Coroutine[object, object, T]) -> T:
    """Await coro with Ctrl-C raising KeyboardInterrupt again.

    asyncio.run() replaces the SIGINT handler with one that only cancels the
    main task at its next await. The prompts block in input(), so they would
    never see the interrupt.
    """
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGINT, signal.default_int_handler)
    return await coro


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. User interrupts exit
    with status 130 without an error message; koshi errors print a
    user-friendly message and exit with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1/130
    """
    try:
        return asyncio.run(_with_interrupts(coro))
    except typer.Exit:
        raise
    except (Cancelled, KeyboardInterrupt):
        raise typer.Exit(Cancelled.exit_code) from None
    except KoshiError as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


@dataclass
class Services:
    """Collaborators wired together for one command."""

    vcs: JujutsuRepository
    ui: RichInteraction
    config: FileConfigStore
    engine: PrSyncEngine | None = None


@asynccontextmanager
async def open_services(
    state: AppState, *, with_github: bool, with_ai: bool = False
) -> AsyncIterator[Services]:
    """Build the collaborators for a command.

    The GitHub repository is read from the jj git remote, so it is only
    resolved for commands that talk to GitHub.
    """
    settings = get_settings()
    require_executables(
        settings.jj_executable, *([settings.aichat_executable] if with_ai else [])
    )
    vcs = JujutsuRepository()
    ui = RichInteraction(console)
    config = FileConfigStore(state.config_path)
    if not with_github:
        yield Services(vcs=vcs, ui=ui, config=config)
        return

    if not await vcs.is_repository():
        raise PreconditionError("must be used inside jj repo")
    async with GitHubClient(await vcs.remote_repository()) as platform:
        reviewers = ReviewerResolver(config, platform, ui)
        engine = PrSyncEngine(vcs, platform, ui, reviewers)
        yield Services(vcs=vcs, ui=ui, config=config, engine=engine)


def describe_workflow(services: Services) -> DescriptionWorkflow:
    return DescriptionWorkflow(
        vcs=services.vcs,
        conversationalist=AIChatConversationalist(),
        ui=services.ui,
        config=services.config,
        engine=services.engine,
    )


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

PullRequestOption = Annotated[
    bool,
    typer.Option(
        "--pull-request",
        "-p",
        help="Create or update a pull request afterwards.",
    ),
]
