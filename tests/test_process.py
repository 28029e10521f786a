"""Tests for running external commands."""

import sys

import pytest

from koshi.exceptions import CommandError, PreconditionError
from koshi.process import require_executables, run_command


async def test_captures_stdout():
    code, out = await run_command(sys.executable, "-c", "print('hello')")

    assert code == 0
    assert out.strip() == "hello"


async def test_input_text_on_stdin():
    _, out = await run_command(
        sys.executable,
        "-c",
        "import sys; sys.stdout.write(sys.stdin.read().upper())",
        input_text="title\n\nbody\n",
    )

    assert out == "TITLE\n\nBODY\n"


async def test_failure_raises_with_stderr():
    with pytest.raises(CommandError) as exc_info:
        await run_command(
            sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"
        )

    assert exc_info.value.returncode == 3
    assert exc_info.value.stderr == "boom"
    assert "boom" in str(exc_info.value)


async def test_failure_without_check():
    code, _ = await run_command(sys.executable, "-c", "raise SystemExit(2)", check=False)

    assert code == 2


async def test_missing_executable():
    with pytest.raises(CommandError, match="not installed") as exc_info:
        await run_command("koshi-no-such-binary", "--version")

    assert exc_info.value.returncode == 127


def test_require_executables_found():
    require_executables(sys.executable)


def test_require_executables_missing():
    with pytest.raises(PreconditionError, match="'koshi-no-such-binary' is not installed"):
        require_executables(sys.executable, "koshi-no-such-binary")
