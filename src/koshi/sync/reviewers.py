"""Reviewer resolution and reconciliation for pull requests.

Candidates come from the project config plus whoever is already requested
on the PR, so earlier picks never silently drop out of the picker. The user
picks the desired reviewers among them and the PR is brought in line with
the smallest set of add/remove calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from koshi.exceptions import ConfigurationError
from koshi.logging import get_logger
from koshi.schemas import PullRequestRef

from .protocols import CodeReviewPlatform, ConfigStore, InteractionSurface
from .results import ReviewerPlan
from .sets import difference, union

logger = get_logger(__name__)

MAX_REVIEWERS = 3


class ReviewerResolver:
    """Computes candidate and desired reviewer sets and applies them to a PR.

    Usage:
        resolver = ReviewerResolver(config_store, platform, ui)
        candidates = await resolver.resolve_candidates(root, pr)
        desired = resolver.select_desired(candidates, preselected=current)
        plan = resolver.reconcile(desired, current)
        await resolver.apply(pr, plan)
    """

    def __init__(
        self,
        config: ConfigStore,
        platform: CodeReviewPlatform,
        ui: InteractionSurface,
    ) -> None:
        self._config = config
        self._platform = platform
        self._ui = ui

    def configured_reviewers(self, project_path: Path | str) -> frozenset[str]:
        """Reviewers configured for the project; empty if config is unusable."""
        try:
            return self._config.reviewers_for(project_path)
        except ConfigurationError as e:
            logger.warning("Ignoring reviewer configuration: {error}", error=str(e))
            return frozenset()

    async def resolve_candidates(
        self,
        project_path: Path | str,
        existing_pr: PullRequestRef | None = None,
        current_requests: Iterable[str] | None = None,
    ) -> frozenset[str]:
        """Configured reviewers, plus current review requests of existing_pr.

        Pass current_requests when the caller already fetched them, so the
        PR is not queried again.
        """
        candidates = self.configured_reviewers(project_path)
        if current_requests is None and existing_pr is not None:
            current_requests = await self._platform.current_review_requests(existing_pr)
        if current_requests is not None:
            candidates = union(candidates, current_requests)

        if not candidates:
            logger.warning("unable to determine pull request reviewers")
        return candidates

    def select_desired(
        self,
        candidates: Iterable[str],
        preselected: Iterable[str] = (),
    ) -> frozenset[str]:
        """Let the user pick up to MAX_REVIEWERS reviewers among candidates.

        Raises:
            Cancelled: If the user interrupts the picker
        """
        options = sorted(candidates)
        if not options:
            return frozenset()

        checked = [login for login in sorted(preselected) if login in options]
        picked = self._ui.multi_select(
            "select reviewers:",
            options,
            preselected=checked,
            max_picks=MAX_REVIEWERS,
        )
        # The picker may only return offered options; enforce it regardless.
        return frozenset(picked) & frozenset(options)

    @staticmethod
    def reconcile(desired: Iterable[str], current: Iterable[str]) -> ReviewerPlan:
        """Compute the add/remove calls that turn current into desired."""
        desired = frozenset(desired)
        current = frozenset(current)
        return ReviewerPlan(
            to_add=difference(desired, current),
            to_remove=difference(current, desired),
        )

    async def apply(self, pr: PullRequestRef, plan: ReviewerPlan) -> ReviewerPlan:
        """Remove then add reviewers on the PR; empty sides skip the call."""
        if plan.to_remove:
            with self._ui.spinner("removing reviewers"):
                await self._platform.remove_reviewers(pr, sorted(plan.to_remove))
            logger.info("Removed reviewers: {logins}", logins=", ".join(sorted(plan.to_remove)))
        if plan.to_add:
            with self._ui.spinner("adding reviewers"):
                await self._platform.add_reviewers(pr, sorted(plan.to_add))
            logger.info("Added reviewers: {logins}", logins=", ".join(sorted(plan.to_add)))
        return plan
