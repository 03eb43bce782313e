"""Request and response models for the HTTP API."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class AuthRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class CredentialResponse(BaseModel):
    id: str
    email: str
    name: str
    created_at: int


class ChatRequest(BaseModel):
    prompt: str = Field(min_length=1)


class ArtifactInfo(BaseModel):
    summary: str
    created_at: datetime
    size_bytes: int


class TurnResponse(BaseModel):
    role: str
    content: str
    artifact: Optional[ArtifactInfo] = None


class ChatResponse(BaseModel):
    """Outcome of one submission: the assistant reply and the terminal state."""
    turn: TurnResponse
    state: str
    succeeded: bool


class HistoryResponse(BaseModel):
    turns: List[TurnResponse]
    has_artifact: bool


class StateResponse(BaseModel):
    state: str


class DeployRequest(BaseModel):
    repository: str = Field(min_length=1)


class DeployResponse(BaseModel):
    status: str
