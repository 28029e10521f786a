"""`koshi pr`: create and update GitHub pull requests from jj changes."""

import json

import typer

from koshi.cli.common import (
    AppState,
    OutputFormatOption,
    console,
    open_services,
    run_async_command,
)
from koshi.cli.describe import print_sync_result
from koshi.sync import OutputFormat, SyncResult


def pr(ctx: typer.Context, output_format: OutputFormatOption = OutputFormat.TEXT) -> None:
    """Create or update the GitHub pull request of the current change.

    Pushes the current change (@) and creates or updates its PR. The PR base
    branch is the latest ancestor with a bookmark. The first line of the
    change description becomes the PR title, lines from the third onward its
    body.

    Examples:
        koshi pr
        koshi pr --format json
    """
    state: AppState = ctx.obj or AppState()

    async def _sync() -> SyncResult:
        async with open_services(state, with_github=True) as services:
            assert services.engine is not None
            return await services.engine.review_and_sync()

    result = run_async_command(_sync())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result.to_dict()))
        return
    print_sync_result(result)
