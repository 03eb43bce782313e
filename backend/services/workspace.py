"""Workspace: the per-session context that owns the pipeline state."""
import logging
from typing import Optional

from models.conversation import GenerationState
from models.identity import Credential
from services.conversation_store import ConversationStore
from services.generation_client import GenerationClient
from services.pipeline import GenerationGuard, PipelineOrchestrator, SubmitOutcome
from services.render_sink import RenderSink, RenderedView

logger = logging.getLogger(__name__)


class Workspace:
    """
    Bundles one conversation, its orchestrator and its render sink.

    A workspace starts empty when the user enters it and is discarded on
    logout or when leaving for the landing page; nothing in it outlives that.
    """

    def __init__(
        self,
        client: GenerationClient,
        user: Optional[Credential] = None,
        render_sink: Optional[RenderSink] = None,
        guard: Optional[GenerationGuard] = None
    ):
        self.user = user
        self.store = ConversationStore()
        self.orchestrator = PipelineOrchestrator(client, self.store, guard)
        self.render_sink = render_sink or RenderSink()
        self.closed = False
        logger.info(f"Workspace opened for {user.email if user else 'anonymous user'}")

    @property
    def state(self) -> GenerationState:
        return self.orchestrator.state

    async def submit(self, prompt: str) -> SubmitOutcome:
        """Submit a prompt and refresh the preview with whatever is current afterwards."""
        outcome = await self.orchestrator.submit(prompt)
        if outcome.accepted and not self.closed:
            self.refresh_view()
        return outcome

    def refresh_view(self) -> RenderedView:
        artifact = self.store.current_artifact()
        if artifact is None:
            return self.render_sink.present_empty()
        return self.render_sink.render(artifact)

    def close(self) -> None:
        self.store.clear()
        self.render_sink.present_empty()
        self.closed = True
        logger.info("Workspace closed")
