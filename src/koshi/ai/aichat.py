"""Conversationalist backed by the aichat CLI.

aichat keeps named sessions on disk. Sessions are named after the role, so
the first turn clears the session and every later turn continues it.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from koshi.config import get_settings
from koshi.logging import get_logger
from koshi.process import run_command

logger = get_logger(__name__)


class AIChatConversationalist:
    """Conversationalist implementation that shells out to aichat.

    Usage:
        ai = AIChatConversationalist()
        draft = await ai.start_session("commit", diff, "write description")
        better = await ai.continue_session("commit", "mention the migration")
    """

    def __init__(self, executable: str | None = None) -> None:
        self._aichat = executable or get_settings().aichat_executable

    def _base_args(self, role: str) -> list[str]:
        return [self._aichat, f"--session={role}", "--save-session", f"--role={role}"]

    async def start_session(self, role: str, diff: str, instructions: str) -> str:
        """Start a fresh session with the diff attached as a file."""
        with tempfile.TemporaryDirectory(prefix="koshi-") as tmp:
            diff_file = Path(tmp) / "change.diff"
            diff_file.write_text(diff, encoding="utf-8")
            args = self._base_args(role) + ["--empty-session", f"--file={diff_file}", instructions]
            logger.debug("Starting aichat session {role}", role=role)
            _, out = await run_command(*args)
        return out.strip()

    async def continue_session(self, role: str, feedback: str) -> str:
        logger.debug("Continuing aichat session {role}", role=role)
        _, out = await run_command(*self._base_args(role), feedback)
        return out.strip()
