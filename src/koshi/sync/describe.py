"""Description workflow behind `koshi ai-desc`.

Generates a description for the working change, lets the user refine it,
writes it onto the change and optionally continues with the PR sync and a
new change.
"""

from __future__ import annotations

from dataclasses import dataclass

from koshi.exceptions import Cancelled, ConfigurationError, PreconditionError
from koshi.logging import bind_change, get_logger

from .engine import PrSyncEngine
from .protocols import ConfigStore, Conversationalist, InteractionSurface, VersionControl
from .refinement import RefinementLoop, build_instructions
from .results import RefinementOutcome, SyncResult

logger = get_logger(__name__)


@dataclass(frozen=True)
class DescribeOptions:
    """User choices for one `ai-desc` run."""

    role: str | None = None
    ticket: str | None = None
    fixes: bool = False
    instruction: str | None = None
    pull_request: bool = False
    commit: bool = False


@dataclass
class DescribeResult:
    """What an `ai-desc` run did."""

    outcome: RefinementOutcome | None = None
    """None when the change was empty and nothing was generated."""

    sync: SyncResult | None = None
    committed: bool = False

    @property
    def skipped_empty(self) -> bool:
        return self.outcome is None


class DescriptionWorkflow:
    """Coordinates the refinement loop, the change and the PR sync."""

    def __init__(
        self,
        vcs: VersionControl,
        conversationalist: Conversationalist,
        ui: InteractionSurface,
        config: ConfigStore,
        engine: PrSyncEngine | None = None,
    ) -> None:
        self._vcs = vcs
        self._ai = conversationalist
        self._ui = ui
        self._config = config
        self._engine = engine

    async def resolve_role(self, explicit: str | None = None) -> str:
        """Explicit role, else the configured one for the repository root.

        Raises:
            ConfigurationError: If no role is configured
        """
        if explicit:
            return explicit
        root = await self._vcs.root()
        role = self._config.role_for(root)
        if not role:
            raise ConfigurationError(f"Cannot determine AI description role for '{root}'")
        return role

    async def run(self, options: DescribeOptions) -> DescribeResult:
        """Generate, refine and apply a description for the working change.

        Raises:
            PreconditionError: If not inside a jj repository
            ConfigurationError: If no role can be determined
            Cancelled: If the user interrupts; nothing is written
        """
        if not await self._vcs.is_repository():
            raise PreconditionError("must be used inside jj repo")
        change = await self._vcs.current_change()
        if await self._vcs.is_empty(change):
            logger.info("Change {id} is empty, nothing to describe", id=change.short_id)
            return DescribeResult()

        change_logger = bind_change(change.id)
        role = await self.resolve_role(options.role)
        change_logger.debug("Using role {role}", role=role)

        self._ui.show_text(await self._vcs.diff_stat(change))

        instructions = build_instructions(
            ticket=options.ticket,
            fixes=options.fixes,
            extra=options.instruction,
            current_description=await self._vcs.get_description(change),
        )
        loop = RefinementLoop(self._ai, self._ui, role)
        outcome = await loop.run(await self._vcs.diff(change), instructions)
        if not outcome.accepted or outcome.description is None:
            raise Cancelled()

        await self._vcs.set_description(change, outcome.description)
        change_logger.info("Updated description of change {id}", id=change.short_id)

        result = DescribeResult(outcome=outcome)
        if options.pull_request:
            if self._engine is None:
                raise ConfigurationError("pull request sync is not available")
            result.sync = await self._engine.create_or_update()
        if options.commit:
            await self._vcs.new_change()
            result.committed = True
        return result
