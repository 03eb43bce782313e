"""Render sink: sandboxed preview, source view, export and simulated deploy."""
import asyncio
import html
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from config import EXPORT_FILENAME, DEPLOY_DELAY_SECONDS
from models.site import Artifact

logger = logging.getLogger(__name__)

# Scripts may run inside the frame; storage, navigation and the top-level
# context of the host page stay out of reach.
SANDBOX_POLICY = "allow-scripts"
SANDBOX_CSP = f"sandbox {SANDBOX_POLICY}"
EXPORT_MEDIA_TYPE = "text/html"
SOURCE_LABEL = "source_code.html"

EMPTY_PLACEHOLDER = """<div class="sinko-preview sinko-preview--empty">
  <div class="sinko-preview__mark">S.</div>
  <p class="sinko-preview__status">Awaiting Input</p>
  <p class="sinko-preview__hint">Render engine ready</p>
</div>"""


@dataclass(frozen=True)
class RenderedView:
    """Markup the host page shows in the preview panel."""
    markup: str
    artifact: Optional[Artifact] = None


@dataclass(frozen=True)
class ExportedFile:
    """A downloadable copy of an artifact body."""
    filename: str
    media_type: str
    content: bytes


class RenderSink:
    """Presents the current artifact and serves its export."""

    def __init__(self, export_filename: Optional[str] = None, deploy_delay: Optional[float] = None):
        self.export_filename = export_filename or EXPORT_FILENAME
        self.deploy_delay = DEPLOY_DELAY_SECONDS if deploy_delay is None else deploy_delay
        self._view: RenderedView = RenderedView(markup=EMPTY_PLACEHOLDER)

    @property
    def view(self) -> RenderedView:
        return self._view

    def render(self, artifact: Artifact, title: str = "View") -> RenderedView:
        """
        Load an artifact into a fresh sandboxed frame.

        The frame document comes entirely from ``srcdoc``, so every render
        replaces the previous document instead of patching it.

        Args:
            artifact: Artifact to present
            title: Label shown above the frame

        Returns:
            The new RenderedView, which also becomes the sink's current view
        """
        markup = (
            f'<div class="sinko-preview">\n'
            f'  <div class="sinko-preview__bar"><span>{html.escape(title)}</span></div>\n'
            f'  <iframe title="Site Preview" sandbox="{SANDBOX_POLICY}" '
            f'srcdoc="{html.escape(artifact.body, quote=True)}"></iframe>\n'
            f'</div>'
        )
        self._view = RenderedView(markup=markup, artifact=artifact)
        logger.debug(f"Rendered artifact ({len(artifact.body)} chars)")
        return self._view

    def present_empty(self) -> RenderedView:
        self._view = RenderedView(markup=EMPTY_PLACEHOLDER)
        return self._view

    def render_source(self, artifact: Artifact) -> str:
        """Escaped source listing for the code view."""
        return (
            f'<div class="sinko-source">\n'
            f'  <span class="sinko-source__label">{SOURCE_LABEL}</span>\n'
            f'  <pre><code>{html.escape(artifact.body)}</code></pre>\n'
            f'</div>'
        )

    def export(self, artifact: Artifact) -> ExportedFile:
        return ExportedFile(
            filename=self.export_filename,
            media_type=EXPORT_MEDIA_TYPE,
            content=artifact.body.encode("utf-8"),
        )

    def write_export(self, artifact: Artifact, directory: Path) -> Path:
        """Write the exported file into ``directory`` and return its path."""
        exported = self.export(artifact)
        target = Path(directory) / exported.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(exported.content)
        logger.info(f"Exported artifact to {target}")
        return target

    async def deploy(self, repository: str) -> str:
        """
        Simulate publishing the current design to a repository.

        Nothing leaves the process: the call waits a fixed delay and reports
        success.

        Args:
            repository: Target repository name

        Returns:
            Status string for display

        Raises:
            ValueError: If the repository name is blank
        """
        if not repository or not repository.strip():
            raise ValueError("Repository name is required")

        repository = repository.strip()
        logger.info(f"Simulating deploy to {repository}")
        await asyncio.sleep(self.deploy_delay)
        return f"Uploaded to {repository}"
