"""PR Sync Engine - Resolve → Push → Create or Update pipeline.

Orchestrates synchronizing the working jj change with its GitHub pull
request: picks the bookmark, pushes it, targets the nearest bookmarked
ancestor as base and creates or updates the PR together with its reviewer
requests.
"""

from __future__ import annotations

from pathlib import Path

from koshi.exceptions import PreconditionError
from koshi.logging import bind_change, bind_pr, get_logger
from koshi.schemas import Bookmark, Change, PRDescription, PullRequestRef

from .protocols import CodeReviewPlatform, InteractionSurface, VersionControl
from .results import SyncResult
from .reviewers import ReviewerResolver

logger = get_logger(__name__)


class PrSyncEngine:
    """Engine for creating and updating the PR of the working change.

    Usage:
        engine = PrSyncEngine(vcs=repo, platform=client, ui=ui, reviewers=resolver)
        result = await engine.create_or_update()
        print(f"{result.action}: PR #{result.pr.number}")
    """

    def __init__(
        self,
        vcs: VersionControl,
        platform: CodeReviewPlatform,
        ui: InteractionSurface,
        reviewers: ReviewerResolver,
    ) -> None:
        """Initialize the sync engine.

        Args:
            vcs: Local repository
            platform: Remote code review platform
            ui: Terminal prompts
            reviewers: Reviewer resolver sharing the same platform and ui
        """
        self._vcs = vcs
        self._platform = platform
        self._ui = ui
        self._reviewers = reviewers

    # -------------------------------------------------------------------------
    # Preconditions
    # -------------------------------------------------------------------------
    async def assert_repository(self) -> None:
        if not await self._vcs.is_repository():
            raise PreconditionError("must be used inside jj repo")

    async def assert_non_empty(self, change: Change) -> None:
        if await self._vcs.is_empty(change):
            raise PreconditionError(f"change {change.short_id} is empty")

    async def assert_authenticated(self) -> None:
        if not await self._platform.is_authenticated():
            raise PreconditionError(
                "GitHub is not authorized, set GITHUB_TOKEN to a valid token"
            )

    async def check_preconditions(self, change: Change) -> PRDescription:
        """Run every check that must pass before the first remote mutation.

        Returns:
            Title and body parsed from the change description

        Raises:
            PreconditionError: On the first failed check
        """
        await self.assert_repository()
        await self.assert_non_empty(change)
        await self.assert_authenticated()
        description = await self._vcs.get_description(change)
        return PRDescription.from_text(description)

    # -------------------------------------------------------------------------
    # Bookmark and base resolution
    # -------------------------------------------------------------------------
    async def resolve_bookmark(self, change: Change) -> Bookmark:
        """Reuse the change's bookmark or create one from the push template.

        Must run before pushing: pushing creates a bookmark itself, after
        which a fresh bookmark can no longer be told from an existing one.
        """
        existing = await self._vcs.bookmark_of(change)
        if existing:
            logger.info("using existing bookmark {name}", name=existing)
            return Bookmark(name=existing, created=False)

        name = await self._vcs.render_bookmark_name(change)
        logger.info("creating new bookmark {name}", name=name)
        return await self._vcs.create_bookmark(change, name)

    async def resolve_base(self, change: Change) -> str:
        """Nearest ancestor of the change's parent that carries a bookmark.

        Raises:
            PreconditionError: If no ancestor has a bookmark
        """
        base = await self._vcs.nearest_bookmarked_ancestor(change)
        if not base:
            raise PreconditionError(
                f"no bookmarked ancestor found for change {change.short_id}, "
                "cannot determine pull request base"
            )
        return base

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------
    async def create_or_update(self, change: Change | None = None) -> SyncResult:
        """Push the working change and create or update its PR.

        Flow:
            1. Check preconditions (repo, non-empty, auth, description)
            2. Resolve the base bookmark
            3. Resolve or create the bookmark
            4. Push, then create or update the PR

        Raises:
            PreconditionError: Before any remote mutation
            Cancelled: If the user interrupts a prompt
            RemoteOperationError: If a push or API call fails
        """
        if change is None:
            await self.assert_repository()
            change = await self._vcs.current_change()
        description = await self.check_preconditions(change)
        base = await self.resolve_base(change)
        bookmark = await self.resolve_bookmark(change)
        return await self.sync(change, bookmark, base, description)

    async def review_and_sync(self) -> SyncResult:
        """Show the description, offer to edit it, then create or update the PR."""
        await self.assert_repository()
        change = await self._vcs.current_change()
        await self.assert_non_empty(change)
        await self.assert_authenticated()

        self._ui.show_description("commit description:", await self._vcs.get_description(change))
        if self._ui.confirm("edit description?", default=False):
            await self._vcs.edit_description(change)
        return await self.create_or_update()

    async def sync(
        self,
        change: Change,
        bookmark: Bookmark,
        base: str,
        description: PRDescription | None = None,
    ) -> SyncResult:
        """Push the bookmark, then create or update the PR for it."""
        change_logger = bind_change(change.id)
        if description is None:
            description = PRDescription.from_text(await self._vcs.get_description(change))

        with self._ui.spinner("pushing bookmark"):
            await self._vcs.push(change, bookmark)
        change_logger.debug("Pushed bookmark {name}", name=bookmark.name)

        project_path = await self._vcs.root()
        pr = await self._platform.find_open_pr(bookmark.name)
        if pr is None:
            return await self._create(project_path, bookmark, base, description)
        return await self._update(project_path, pr, bookmark, base, description)

    async def _create(
        self,
        project_path: Path,
        bookmark: Bookmark,
        base: str,
        description: PRDescription,
    ) -> SyncResult:
        candidates = await self._reviewers.resolve_candidates(project_path)
        reviewers = self._reviewers.select_desired(candidates)

        if not self._ui.confirm("create pr?", default=False):
            logger.info("Not creating pull request for {name}", name=bookmark.name)
            return SyncResult.from_declined(bookmark, base)

        logger.info("creating new pull request with parent {base}", base=base)
        pr = await self._platform.create_pr(
            base=base,
            head=bookmark.name,
            title=description.title,
            body=description.body,
            reviewers=sorted(reviewers),
        )
        logger.info("Created pull request #{number} {url}", number=pr.number, url=pr.url)
        return SyncResult.from_created(bookmark, base, pr, reviewers)

    async def _update(
        self,
        project_path: Path,
        pr: PullRequestRef,
        bookmark: Bookmark,
        base: str,
        description: PRDescription,
    ) -> SyncResult:
        pr_logger = bind_pr(bookmark.name, pr.number)
        if not self._ui.confirm("update pr?", default=True):
            pr_logger.info("Not updating pull request")
            return SyncResult.from_declined(bookmark, base, pr)

        pr_logger.info(
            "updating pull request {number} for branch {name}",
            number=pr.number,
            name=bookmark.name,
        )
        await self._platform.update_pr(
            pr, base=base, title=description.title, body=description.body
        )

        current = await self._platform.current_review_requests(pr)
        candidates = await self._reviewers.resolve_candidates(project_path, pr, current)
        desired = self._reviewers.select_desired(candidates, current)

        plan = self._reviewers.reconcile(desired, current)
        await self._reviewers.apply(pr, plan)
        return SyncResult.from_updated(bookmark, base, pr, plan)
