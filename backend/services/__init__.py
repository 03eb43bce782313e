"""Services for the Sinko site-synthesis backend."""
from .generation_client import (
    GenerationClient,
    GenerationError,
    EmptyResponse,
    SchemaViolation,
    TransportFailure,
    ErrorDetail,
    parse_site_payload,
)
from .conversation_store import ConversationStore
from .pipeline import GenerationGuard, PipelineOrchestrator, GenerationResult, SubmitOutcome, FALLBACK_MESSAGE, SUGGESTIONS
from .render_sink import RenderSink, RenderedView, ExportedFile
from .identity_store import IdentityStore, IdentityError, IdentityStorageError, AlreadyExists, InvalidCredentials
from .workspace import Workspace

__all__ = [
    'GenerationClient', 'GenerationError', 'EmptyResponse', 'SchemaViolation', 'TransportFailure',
    'ErrorDetail', 'parse_site_payload', 'ConversationStore', 'PipelineOrchestrator', 'GenerationResult',
    'SubmitOutcome', 'GenerationGuard', 'FALLBACK_MESSAGE', 'SUGGESTIONS', 'RenderSink', 'RenderedView', 'ExportedFile',
    'IdentityStore', 'IdentityError', 'IdentityStorageError', 'AlreadyExists', 'InvalidCredentials', 'Workspace'
]
