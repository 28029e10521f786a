"""Conversational loop that converges a change description.

The first turn sends the diff and the instructions in a fresh session named
after the role. Every later turn only sends the user's feedback to the same
session, so the conversationalist keeps the earlier context. The loop runs
until the user accepts with an empty reply or interrupts a prompt.
"""

from __future__ import annotations

from koshi.exceptions import Cancelled
from koshi.logging import get_logger

from .enums import RefinementState
from .protocols import Conversationalist, InteractionSurface
from .results import RefinementOutcome

logger = get_logger(__name__)

BASE_INSTRUCTION = "write description for this change"
FEEDBACK_PLACEHOLDER = "suggest refinements, empty input to accept"


def build_instructions(
    *,
    ticket: str | None = None,
    fixes: bool = False,
    extra: str | None = None,
    current_description: str | None = None,
) -> str:
    """Compose the first-turn instruction for the conversationalist."""
    prompt = BASE_INSTRUCTION
    if ticket:
        prompt += f". this change is related to ticket {ticket}."
        if fixes:
            prompt += f" this change fixes ticket {ticket}."
    if extra and extra.strip():
        prompt += f"\n\n{extra.strip()}"
    if current_description and current_description.strip():
        prompt += f"\n\ncurrent change description:\n{current_description.strip()}"
    return prompt


class RefinementLoop:
    """State machine: Drafting -> Reviewing -> Refining* -> Accepted | Cancelled.

    The loop only produces the description; persisting it on the change is
    up to the caller, and only for an accepted outcome.
    """

    def __init__(
        self,
        conversationalist: Conversationalist,
        ui: InteractionSurface,
        role: str,
    ) -> None:
        self._ai = conversationalist
        self._ui = ui
        self._role = role
        self._state = RefinementState.DRAFTING

    @property
    def state(self) -> RefinementState:
        return self._state

    @property
    def role(self) -> str:
        return self._role

    async def run(self, diff: str, instructions: str) -> RefinementOutcome:
        """Drive the loop to a terminal state."""
        self._state = RefinementState.DRAFTING
        rounds = 0
        try:
            with self._ui.spinner("generating description"):
                description = await self._ai.start_session(self._role, diff, instructions)
            logger.debug("Generated first draft with role {role}", role=self._role)

            while True:
                self._state = RefinementState.REVIEWING
                self._ui.show_description("commit description:", description)
                feedback = self._ui.prompt_text(FEEDBACK_PLACEHOLDER)
                if not feedback:
                    self._state = RefinementState.ACCEPTED
                    logger.debug("Description accepted after {rounds} round(s)", rounds=rounds)
                    return RefinementOutcome(self._state, description, rounds)

                self._state = RefinementState.REFINING
                rounds += 1
                with self._ui.spinner("updating description"):
                    description = await self._ai.continue_session(self._role, feedback)
        except Cancelled:
            self._state = RefinementState.CANCELLED
            return RefinementOutcome(self._state, None, rounds)
