"""Conversation data models."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .site import Artifact


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class GenerationState(str, Enum):
    """Pipeline state: IDLE -> GENERATING -> SUCCEEDED | FAILED -> IDLE."""
    IDLE = "IDLE"
    GENERATING = "GENERATING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Turn:
    """Represents a single turn in a conversation."""
    role: Role
    content: str
    artifact: Optional[Artifact] = None
