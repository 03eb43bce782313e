"""In-memory conversation history for one workspace."""
import logging
from typing import List, Optional, Tuple

from models.conversation import Role, Turn
from models.site import Artifact

logger = logging.getLogger(__name__)


class ConversationStore:
    """
    Ordered, append-only log of conversation turns.

    The current artifact is always the artifact of the last turn that carries
    one, so a failed assistant turn never hides an earlier successful design.
    """

    def __init__(self):
        self._turns: List[Turn] = []

    def append_user_turn(self, content: str) -> Turn:
        """
        Append a user prompt to the history.

        Args:
            content: Prompt text (non-empty, checked by the caller)

        Returns:
            The appended Turn
        """
        return self._append(Turn(role=Role.USER, content=content))

    def append_assistant_turn(self, content: str, artifact: Optional[Artifact] = None) -> Turn:
        """
        Append an assistant reply to the history.

        Args:
            content: Display text (the artifact summary or a fallback message)
            artifact: Generated artifact; becomes the current one when present

        Returns:
            The appended Turn
        """
        return self._append(Turn(role=Role.ASSISTANT, content=content, artifact=artifact))

    def current_artifact(self) -> Optional[Artifact]:
        for turn in reversed(self._turns):
            if turn.artifact is not None:
                return turn.artifact
        return None

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def clear(self) -> None:
        """Drop the whole history (logout or leaving the workspace)."""
        count = len(self._turns)
        self._turns = []
        logger.info(f"Cleared conversation history ({count} turns)")

    def __len__(self) -> int:
        return len(self._turns)

    def _append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        logger.debug(f"Appended {turn.role.value} turn #{len(self._turns)}")
        return turn
