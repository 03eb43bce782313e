"""Unit tests for RenderSink."""
import sys
sys.path.insert(0, 'backend')

import asyncio
import html
import pytest
from datetime import datetime, timezone
from unittest.mock import patch, AsyncMock

from models.site import Artifact
from services.render_sink import RenderSink, EMPTY_PLACEHOLDER, SANDBOX_CSP


BODY = """<!DOCTYPE html>
<html><head><title>Noir & Co</title></head>
<body><h1 class="font-serif">"Noir"</h1><script>document.title = 'ready';</script></body></html>"""


def make_artifact(body=BODY, summary="A dark portfolio page"):
    return Artifact(body=body, summary=summary, created_at=datetime.now(timezone.utc))


@pytest.fixture
def sink():
    return RenderSink(export_filename="sinko_design.html", deploy_delay=0)


class TestRender:

    def test_initial_view_is_placeholder(self, sink):
        assert sink.view.artifact is None
        assert sink.view.markup == EMPTY_PLACEHOLDER

    def test_render_uses_script_only_sandbox(self, sink):
        view = sink.render(make_artifact())

        assert 'sandbox="allow-scripts"' in view.markup
        assert "allow-same-origin" not in view.markup
        assert "allow-top-navigation" not in view.markup
        assert SANDBOX_CSP == "sandbox allow-scripts"

    def test_body_is_escaped_into_srcdoc(self, sink):
        view = sink.render(make_artifact())

        assert f'srcdoc="{html.escape(BODY, quote=True)}"' in view.markup
        assert "<script>document.title" not in view.markup

    def test_render_is_idempotent(self, sink):
        artifact = make_artifact()

        first = sink.render(artifact)
        second = sink.render(artifact)

        assert first == second
        assert sink.view == first

    def test_render_replaces_previous_content(self, sink):
        sink.render(make_artifact(body="<html><body>OLD</body></html>"))
        view = sink.render(make_artifact(body="<html><body>NEW</body></html>"))

        assert "NEW" in view.markup
        assert "OLD" not in view.markup
        assert view.markup.count("<iframe") == 1

    def test_present_empty(self, sink):
        sink.render(make_artifact())
        view = sink.present_empty()

        assert view.artifact is None
        assert "Awaiting Input" in view.markup
        assert "<script" not in view.markup
        assert sink.view is view

    def test_render_source(self, sink):
        source = sink.render_source(make_artifact())

        assert "source_code.html" in source
        assert html.escape(BODY) in source


class TestExport:

    def test_export_metadata(self, sink):
        exported = sink.export(make_artifact())

        assert exported.filename == "sinko_design.html"
        assert exported.media_type == "text/html"

    def test_export_round_trip(self, sink):
        artifact = make_artifact(body=BODY + "<!-- café ✓ -->")
        assert sink.export(artifact).content.decode("utf-8") == artifact.body

    def test_write_export_round_trip(self, sink, tmp_path):
        artifact = make_artifact()

        path = sink.write_export(artifact, tmp_path / "downloads")

        assert path.name == "sinko_design.html"
        assert path.read_bytes() == artifact.body.encode("utf-8")

    def test_export_does_not_change_view(self, sink):
        artifact = make_artifact()
        view = sink.render(artifact)
        sink.export(artifact)
        assert sink.view is view


class TestDeploy:

    def test_deploy_returns_status(self, sink):
        assert asyncio.run(sink.deploy("sinko-portfolio")) == "Uploaded to sinko-portfolio"

    def test_deploy_waits_configured_delay(self):
        sink = RenderSink(deploy_delay=2.0)
        with patch("services.render_sink.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            asyncio.run(sink.deploy("site"))
        mock_sleep.assert_awaited_once_with(2.0)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_deploy_requires_repository(self, sink, name):
        with pytest.raises(ValueError, match="Repository name is required"):
            asyncio.run(sink.deploy(name))
