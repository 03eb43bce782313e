"""Data models for the Sinko site-synthesis backend."""
from .site import Artifact, SitePayload, RESPONSE_SCHEMA
from .conversation import GenerationState, Role, Turn
from .identity import Credential
from .api import (
    AuthRequest,
    CredentialResponse,
    ChatRequest,
    ChatResponse,
    TurnResponse,
    ArtifactInfo,
    HistoryResponse,
    StateResponse,
    DeployRequest,
    DeployResponse,
)

__all__ = [
    "Artifact",
    "SitePayload",
    "RESPONSE_SCHEMA",
    "GenerationState",
    "Role",
    "Turn",
    "Credential",
    "AuthRequest",
    "CredentialResponse",
    "ChatRequest",
    "ChatResponse",
    "TurnResponse",
    "ArtifactInfo",
    "HistoryResponse",
    "StateResponse",
    "DeployRequest",
    "DeployResponse",
]
