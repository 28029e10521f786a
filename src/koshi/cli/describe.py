"""`koshi ai-desc`: generate and refine change descriptions with AI."""

from typing import Annotated

import typer

from koshi.cli.common import (
    AppState,
    PullRequestOption,
    console,
    describe_workflow,
    open_services,
    run_async_command,
)
from koshi.sync import DescribeOptions, DescribeResult
from koshi.sync.results import SyncResult


def ai_desc(
    ctx: typer.Context,
    role: Annotated[
        str | None,
        typer.Option("--role", "-r", help="Role to use for making description."),
    ] = None,
    ticket: Annotated[
        str | None,
        typer.Option("--ticket", "-t", help="Ticket this change is related to."),
    ] = None,
    fixes: Annotated[
        bool,
        typer.Option("--fixes", help="The change fixes the ticket given with --ticket."),
    ] = False,
    instruction: Annotated[
        str | None,
        typer.Option("--instruction", "-i", help="Extra instruction for the AI."),
    ] = None,
    commit: Annotated[
        bool,
        typer.Option("--commit", "-c", help="Start a new change after describing this one."),
    ] = False,
    pull_request: PullRequestOption = False,
) -> None:
    """Generate and refine Jujutsu change descriptions with AI.

    Uses a conversational AI to generate a description from the diff of the
    current change (@). Suggest refinements interactively, or accept the
    current suggestion with an empty reply. The accepted description is
    written to the change.

    Examples:
        koshi ai-desc
        koshi ad --ticket PROJ-12 --fixes
        koshi ad -p -c
    """
    state: AppState = ctx.obj or AppState()
    options = DescribeOptions(
        role=role,
        ticket=ticket,
        fixes=fixes,
        instruction=instruction,
        pull_request=pull_request,
        commit=commit,
    )

    async def _describe() -> DescribeResult:
        async with open_services(state, with_github=pull_request, with_ai=True) as services:
            return await describe_workflow(services).run(options)

    result = run_async_command(_describe())
    if result.skipped_empty:
        console.print("[dim]Change is empty, nothing to describe.[/dim]")
        return
    if result.sync is not None:
        print_sync_result(result.sync)
    if result.committed:
        console.print("[green]Started a new change.[/green]")


def print_sync_result(result: SyncResult) -> None:
    """Print a one-line summary of a PR sync."""
    if result.pr is None:
        console.print(f"[dim]Pushed {result.bookmark.name}, no pull request created.[/dim]")
        return
    action = result.action.title()
    console.print(
        f"[bold]{action}[/bold] PR #{result.pr.number} "
        f"({result.base} <- {result.bookmark.name})"
    )
    if result.pr.url:
        console.print(f"  {result.pr.url}")
