"""Unit tests for ConversationStore."""
import sys
sys.path.insert(0, 'backend')

import dataclasses
import pytest
from datetime import datetime, timezone
from models.conversation import Role, Turn
from models.site import Artifact
from services.conversation_store import ConversationStore


def make_artifact(summary="A page.", body="<html></html>"):
    return Artifact(body=body, summary=summary, created_at=datetime.now(timezone.utc))


class TestConversationStore:
    """Test suite for ConversationStore."""

    @pytest.fixture
    def store(self):
        return ConversationStore()

    def test_starts_empty(self, store):
        assert len(store) == 0
        assert store.turns == ()
        assert store.current_artifact() is None

    def test_append_user_turn(self, store):
        turn = store.append_user_turn("Minimalist blog")

        assert turn.role == Role.USER
        assert turn.content == "Minimalist blog"
        assert turn.artifact is None
        assert store.turns == (turn,)

    def test_append_assistant_turn_with_artifact(self, store):
        artifact = make_artifact()
        store.append_user_turn("Minimalist blog")
        turn = store.append_assistant_turn("A page.", artifact)

        assert turn.role == Role.ASSISTANT
        assert store.current_artifact() is artifact

    def test_turn_order_is_insertion_order(self, store):
        store.append_user_turn("one")
        store.append_assistant_turn("two")
        store.append_user_turn("three")

        assert [t.content for t in store.turns] == ["one", "two", "three"]

    def test_failed_turn_keeps_previous_artifact(self, store):
        first = make_artifact(summary="First.")
        store.append_user_turn("Dark mode portfolio")
        store.append_assistant_turn("First.", first)
        store.append_user_turn("Make it louder")
        store.append_assistant_turn("I encountered a creative block.")

        assert store.current_artifact() is first

    def test_latest_artifact_wins(self, store):
        first = make_artifact(summary="First.")
        second = make_artifact(summary="Second.")
        store.append_assistant_turn("First.", first)
        store.append_assistant_turn("Second.", second)

        assert store.current_artifact() is second

    def test_turns_snapshot_cannot_mutate_store(self, store):
        store.append_user_turn("one")
        snapshot = store.turns

        assert isinstance(snapshot, tuple)
        store.append_user_turn("two")
        assert len(snapshot) == 1
        assert len(store) == 2

    def test_turns_are_immutable(self, store):
        turn = store.append_user_turn("one")
        with pytest.raises(dataclasses.FrozenInstanceError):
            turn.content = "changed"

    def test_clear(self, store):
        store.append_user_turn("one")
        store.append_assistant_turn("two", make_artifact())

        store.clear()

        assert len(store) == 0
        assert store.current_artifact() is None
