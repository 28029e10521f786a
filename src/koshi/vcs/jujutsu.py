"""Jujutsu (jj) repository adapter.

All reads go through `jj log` templates with color and graph disabled so the
output can be parsed as plain text.
"""

from __future__ import annotations

from pathlib import Path

from koshi.config import get_settings
from koshi.exceptions import CommandError
from koshi.logging import get_logger
from koshi.process import run_command
from koshi.schemas import Bookmark, Change, RepositoryRef, parse_remote_url

logger = get_logger(__name__)

WORKING_COPY = "@"
DEFAULT_BOOKMARK_TEMPLATE = '"push-" ++ change_id.short()'
_CHANGE_TEMPLATE = 'change_id ++ "\\n" ++ if(empty, "true", "false") ++ "\\n" ++ description'


def first_bookmark(output: str) -> str | None:
    """First bookmark name from a `bookmarks` template, without markers.

    jj appends `*` to bookmarks that differ from their remote and `??` to
    conflicted ones.
    """
    for token in output.split():
        name = token.rstrip("*?")
        if name:
            return name
    return None


class JujutsuRepository:
    """VersionControl implementation that shells out to jj.

    Usage:
        repo = JujutsuRepository()
        change = await repo.current_change()
        print(await repo.diff_stat(change))
    """

    def __init__(
        self,
        cwd: Path | None = None,
        executable: str | None = None,
        remote: str | None = None,
    ) -> None:
        settings = get_settings()
        self._cwd = cwd
        self._jj = executable or settings.jj_executable
        self._remote = remote or settings.remote

    async def _run(self, *args: str, input_text: str | None = None) -> str:
        _, out = await run_command(self._jj, *args, input_text=input_text, cwd=self._cwd)
        return out

    async def _log(self, revset: str, template: str, *, limit: int | None = None) -> str:
        args = ["log", "--color", "never", "--no-graph", "-r", revset, "-T", template]
        if limit is not None:
            args += ["--limit", str(limit)]
        return await self._run(*args)

    # -------------------------------------------------------------------------
    # Repository
    # -------------------------------------------------------------------------
    async def is_repository(self) -> bool:
        code, _ = await run_command(self._jj, "root", cwd=self._cwd, check=False)
        return code == 0

    async def root(self) -> Path:
        return Path((await self._run("root")).strip())

    async def remote_repository(self) -> RepositoryRef:
        """GitHub repository of the configured git remote."""
        for line in (await self._run("git", "remote", "list")).splitlines():
            name, _, url = line.partition(" ")
            if name == self._remote:
                return parse_remote_url(url)
        raise CommandError(
            [self._jj, "git", "remote", "list"], 1, f"remote '{self._remote}' is not configured"
        )

    # -------------------------------------------------------------------------
    # Change
    # -------------------------------------------------------------------------
    async def current_change(self) -> Change:
        out = await self._log(WORKING_COPY, _CHANGE_TEMPLATE)
        change_id, empty, description = (out.split("\n", 2) + ["", ""])[:3]
        return Change(id=change_id, is_empty=empty == "true", description=description)

    async def is_empty(self, change: Change) -> bool:
        return (await self._log(change.id, "empty")).strip() == "true"

    async def diff(self, change: Change) -> str:
        return await self._run("diff", "--color", "never", "--git", "-r", change.id)

    async def diff_stat(self, change: Change) -> str:
        return await self._run("diff", "--color", "never", "--stat", "-r", change.id)

    async def get_description(self, change: Change) -> str:
        return await self._log(change.id, "description")

    async def set_description(self, change: Change, text: str) -> None:
        await self._run("describe", "--quiet", "--stdin", "-r", change.id, input_text=text)

    async def edit_description(self, change: Change) -> None:
        """Open the user's editor on the description."""
        await run_command(self._jj, "describe", "-r", change.id, cwd=self._cwd, interactive=True)

    async def new_change(self) -> None:
        await self._run("new", "--quiet")

    # -------------------------------------------------------------------------
    # Bookmarks
    # -------------------------------------------------------------------------
    async def bookmark_of(self, change: Change) -> str | None:
        return first_bookmark(await self._log(change.id, "bookmarks"))

    async def render_bookmark_name(self, change: Change) -> str:
        """Render the `templates.git_push_bookmark` template for the change."""
        try:
            template = (await self._run("config", "get", "templates.git_push_bookmark")).strip()
        except CommandError:
            template = ""
        if not template:
            template = DEFAULT_BOOKMARK_TEMPLATE
        return (await self._log(change.id, template)).strip()

    async def create_bookmark(self, change: Change, name: str) -> Bookmark:
        await self._run("bookmark", "create", name, "-r", change.id, "--quiet")
        return Bookmark(name=name, created=True)

    async def nearest_bookmarked_ancestor(self, change: Change) -> str | None:
        revset = f"latest(ancestors({change.id}-) & bookmarks())"
        out = await self._log(revset, "bookmarks", limit=1)
        return first_bookmark(out)

    async def is_on_remote(self, name: str) -> bool:
        """True if the remote already has a bookmark called name."""
        revset = f'remote_bookmarks(exact:"{name}", exact:"{self._remote}")'
        return bool((await self._log(revset, '"x"')).strip())

    async def push(self, change: Change, bookmark: Bookmark) -> None:
        """Push the change's bookmark to the remote.

        A bookmark created from the push template is pushed with `--change`
        so jj starts tracking it. An existing bookmark is pushed by name, with
        `--allow-new` when the remote does not have it yet.
        """
        args = ["git", "push", "--quiet", "--remote", self._remote]
        if bookmark.created:
            args += ["--change", change.id]
        else:
            args += ["--bookmark", bookmark.name]
            if not await self.is_on_remote(bookmark.name):
                args.append("--allow-new")
        await self._run(*args)
