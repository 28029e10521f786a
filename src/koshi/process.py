"""Running external commands (jj, aichat) from async code."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from koshi.exceptions import CommandError, PreconditionError
from koshi.logging import get_logger

logger = get_logger(__name__)


async def run_command(
    *args: str,
    input_text: str | None = None,
    cwd: Path | None = None,
    check: bool = True,
    interactive: bool = False,
) -> tuple[int, str]:
    """Run a command and return (returncode, stdout).

    Args:
        args: Executable and arguments
        input_text: Text written to stdin
        cwd: Working directory (defaults to the current one)
        check: Raise CommandError on a non-zero exit status
        interactive: Inherit the terminal instead of capturing output,
            for commands that open an editor

    Raises:
        CommandError: If check is set and the command fails, or the
            executable cannot be found
    """
    logger.debug("Running {command}", command=" ".join(args))
    pipe = None if interactive else asyncio.subprocess.PIPE
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=cwd,
            stdin=asyncio.subprocess.PIPE if input_text is not None else None,
            stdout=pipe,
            stderr=pipe,
        )
    except FileNotFoundError as e:
        raise CommandError(list(args), 127, f"{args[0]} is not installed or not in PATH") from e

    stdout, stderr = await process.communicate(
        input_text.encode() if input_text is not None else None
    )
    returncode = process.returncode if process.returncode is not None else 0
    out = stdout.decode() if stdout else ""

    if check and returncode != 0:
        err = stderr.decode() if stderr else ""
        raise CommandError(list(args), returncode, err)
    return returncode, out


def require_executables(*names: str) -> None:
    """Fail before doing anything if a required tool is missing.

    Raises:
        PreconditionError: Naming the first executable not found in PATH
    """
    for name in names:
        if shutil.which(name) is None:
            raise PreconditionError(
                f"Required dependency '{name}' is not installed or not in PATH"
            )
