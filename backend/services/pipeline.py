"""
Pipeline orchestrator for conversational site synthesis.

Drives one request cycle at a time: the user turn is recorded, the generation
client is awaited, and exactly one assistant turn is recorded whatever the
outcome. The orchestrator knows nothing about HTTP or any UI; adapters read
its state and the outcomes it returns.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from models.conversation import GenerationState, Turn
from models.site import Artifact
from services.conversation_store import ConversationStore
from services.generation_client import GenerationClient, GenerationError

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "I encountered a creative block. Please try refining your request."

SUGGESTIONS = (
    "Dark mode portfolio",
    "Luxury fashion store",
    "Minimalist blog",
    "Brutalist gallery",
)

REJECTED_EMPTY_PROMPT = "empty_prompt"
REJECTED_IN_FLIGHT = "generation_in_flight"


@dataclass(frozen=True)
class GenerationResult:
    """Either an artifact (ok) or the error that prevented one."""
    artifact: Optional[Artifact] = None
    error: Optional[GenerationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.artifact is not None

    @classmethod
    def success(cls, artifact: Artifact) -> "GenerationResult":
        return cls(artifact=artifact)

    @classmethod
    def failure(cls, error: GenerationError) -> "GenerationResult":
        return cls(error=error)


@dataclass(frozen=True)
class SubmitOutcome:
    """What a call to submit() did."""
    accepted: bool
    state: GenerationState
    result: Optional[GenerationResult] = None
    reply: Optional[Turn] = None
    rejection_reason: Optional[str] = None


class GenerationGuard:
    """
    Holds the GenerationState.

    One guard is shared by every orchestrator in the process, so discarding a
    workspace while its generation is still running does not open a second
    flight.
    """

    def __init__(self):
        self.state = GenerationState.IDLE


class PipelineOrchestrator:
    """Single-flight state machine around the generation client."""

    def __init__(
        self,
        client: GenerationClient,
        store: ConversationStore,
        guard: Optional[GenerationGuard] = None
    ):
        self.client = client
        self.store = store
        self.guard = guard if guard is not None else GenerationGuard()

    @property
    def state(self) -> GenerationState:
        return self.guard.state

    @property
    def is_generating(self) -> bool:
        return self.guard.state is GenerationState.GENERATING

    async def submit(self, prompt: str) -> SubmitOutcome:
        """
        Run one full request cycle for ``prompt``.

        A blank prompt, or any prompt while a generation is in flight, is
        rejected without touching the history or the state. Generation errors
        never propagate: they become the fallback assistant turn and the
        FAILED state.

        Args:
            prompt: Free-text description of the desired site

        Returns:
            SubmitOutcome describing the reply and the resulting state
        """
        if not prompt or not prompt.strip():
            logger.warning("Rejected submission: empty prompt")
            return SubmitOutcome(accepted=False, state=self.guard.state, rejection_reason=REJECTED_EMPTY_PROMPT)

        if self.is_generating:
            logger.warning("Rejected submission: a generation is already in flight")
            return SubmitOutcome(accepted=False, state=self.guard.state, rejection_reason=REJECTED_IN_FLIGHT)

        self.store.append_user_turn(prompt)
        self.guard.state = GenerationState.GENERATING
        logger.info(f"Generating site for prompt: {prompt[:100]}", extra={"state": self.guard.state.value})

        result = await self._run_generation(prompt)

        if result.ok:
            reply = self.store.append_assistant_turn(result.artifact.summary, result.artifact)
            self.guard.state = GenerationState.SUCCEEDED
            logger.info(
                f"Generation succeeded: {result.artifact.summary[:100]}",
                extra={"state": self.guard.state.value, "turns": len(self.store)}
            )
        else:
            reply = self.store.append_assistant_turn(FALLBACK_MESSAGE)
            self.guard.state = GenerationState.FAILED
            logger.error(
                f"Generation failed: {result.error.code}: {result.error}",
                extra={
                    "state": self.guard.state.value,
                    "error_code": result.error.code,
                    "error_details": result.error.error.details
                }
            )

        return SubmitOutcome(accepted=True, state=self.guard.state, result=result, reply=reply)

    def acknowledge(self) -> GenerationState:
        """Return a terminal state to IDLE once the caller has observed it."""
        if self.guard.state in (GenerationState.SUCCEEDED, GenerationState.FAILED):
            self.guard.state = GenerationState.IDLE
        return self.guard.state

    async def _run_generation(self, prompt: str) -> GenerationResult:
        try:
            artifact = await self.client.generate(prompt)
        except GenerationError as e:
            return GenerationResult.failure(e)
        except BaseException:
            # Keep the history paired and the pipeline resubmittable before re-raising.
            self.store.append_assistant_turn(FALLBACK_MESSAGE)
            self.guard.state = GenerationState.FAILED
            logger.error("Unexpected error during generation", exc_info=True)
            raise
        return GenerationResult.success(artifact)
