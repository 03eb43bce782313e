"""Main entry point for the Sinko site-synthesis API."""
import logging
from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response

from config import PORT, CORS_ORIGINS, LOG_LEVEL, LOG_FORMAT
from logger import setup_logging
from models.api import (
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
from models.conversation import Turn
from models.identity import Credential
from models.site import Artifact
from services.generation_client import GenerationClient
from services.identity_store import IdentityStore, AlreadyExists, InvalidCredentials, IdentityStorageError
from services.pipeline import GenerationGuard, SUGGESTIONS, REJECTED_IN_FLIGHT
from services.render_sink import SANDBOX_CSP, EMPTY_PLACEHOLDER
from services.workspace import Workspace

if LOG_FORMAT == "json":
    setup_logging(LOG_LEVEL)

# Initialize logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Sinko",
    description="Conversational single-file website synthesis",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
identity_store: IdentityStore = None
generation_client: GenerationClient = None
workspace: Optional[Workspace] = None
# Outlives any single workspace so at most one generation runs per process
generation_guard = GenerationGuard()


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup and resume an existing session."""
    global identity_store, generation_client, workspace

    logger.info("Initializing Sinko services...")

    try:
        identity_store = IdentityStore()
        logger.info("Initialized IdentityStore")

        generation_client = GenerationClient()
        logger.info("Initialized GenerationClient")

        user = identity_store.get_current_session()
        if user:
            # Returning user skips the landing page
            workspace = Workspace(generation_client, user=user, guard=generation_guard)

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


def _enter_workspace(user: Optional[Credential] = None) -> Workspace:
    global workspace
    if workspace is not None and user is not None and workspace.user is not None and workspace.user.id != user.id:
        # Another account signs in: the previous conversation is not carried over
        _discard_workspace()
    if workspace is None or workspace.closed:
        workspace = Workspace(generation_client, user=user, guard=generation_guard)
    elif user is not None:
        workspace.user = user
    return workspace


def _discard_workspace() -> None:
    global workspace
    if workspace is not None:
        workspace.close()
    workspace = None


def _require_artifact() -> Artifact:
    artifact = workspace.store.current_artifact() if workspace else None
    if artifact is None:
        raise HTTPException(status_code=404, detail="No design has been generated yet")
    return artifact


def _turn_response(turn: Turn) -> TurnResponse:
    artifact = None
    if turn.artifact is not None:
        artifact = ArtifactInfo(
            summary=turn.artifact.summary,
            created_at=turn.artifact.created_at,
            size_bytes=len(turn.artifact.body.encode("utf-8"))
        )
    return TurnResponse(role=turn.role.value, content=turn.content, artifact=artifact)


def _credential_response(credential: Credential) -> CredentialResponse:
    return CredentialResponse(**credential.to_dict())


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Sinko API"}


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "sinko",
        "version": "1.0.0"
    }


@app.post("/auth/register", response_model=CredentialResponse, status_code=201)
async def register(request: AuthRequest) -> CredentialResponse:
    try:
        credential = identity_store.register(request.email, request.password)
    except AlreadyExists as e:
        raise HTTPException(status_code=409, detail=str(e))
    except IdentityStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    _enter_workspace(credential)
    return _credential_response(credential)


@app.post("/auth/login", response_model=CredentialResponse)
async def login(request: AuthRequest) -> CredentialResponse:
    try:
        credential = identity_store.login(request.email, request.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=401, detail=str(e))
    except IdentityStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    _enter_workspace(credential)
    return _credential_response(credential)


@app.post("/auth/logout")
async def logout():
    try:
        identity_store.logout()
    except IdentityStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    _discard_workspace()
    return {"status": "logged_out"}


@app.get("/auth/session", response_model=Optional[CredentialResponse])
async def current_session():
    try:
        credential = identity_store.get_current_session()
    except IdentityStorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return _credential_response(credential) if credential else None


@app.post("/workspace/leave")
async def leave_workspace():
    """Back to the landing page; the conversation is discarded."""
    _discard_workspace()
    return {"status": "left"}


@app.get("/suggestions")
async def suggestions():
    return {"suggestions": list(SUGGESTIONS)}


@app.post("/chat", response_model=ChatResponse)
async def chat_endpoint(request: ChatRequest) -> ChatResponse:
    """
    Submit one prompt to the synthesis pipeline.

    Args:
        request: ChatRequest with the prompt text

    Returns:
        ChatResponse with the assistant turn and the terminal state

    Raises:
        HTTPException: 409 while another generation is running, 422 for a
            blank prompt
    """
    ws = _enter_workspace()
    outcome = await ws.submit(request.prompt)

    if not outcome.accepted:
        if outcome.rejection_reason == REJECTED_IN_FLIGHT:
            raise HTTPException(status_code=409, detail="A design is already being generated")
        raise HTTPException(status_code=422, detail="Prompt cannot be empty")

    # The caller has now observed the terminal state
    ws.orchestrator.acknowledge()

    return ChatResponse(
        turn=_turn_response(outcome.reply),
        state=outcome.state.value,
        succeeded=outcome.result.ok
    )


@app.get("/chat/history", response_model=HistoryResponse)
async def chat_history() -> HistoryResponse:
    if workspace is None:
        return HistoryResponse(turns=[], has_artifact=False)
    return HistoryResponse(
        turns=[_turn_response(turn) for turn in workspace.store.turns],
        has_artifact=workspace.store.current_artifact() is not None
    )


@app.get("/state", response_model=StateResponse)
async def generation_state() -> StateResponse:
    return StateResponse(state=generation_guard.state.value)


@app.get("/preview", response_class=HTMLResponse)
async def preview():
    if workspace is None:
        return HTMLResponse(EMPTY_PLACEHOLDER)
    return HTMLResponse(workspace.refresh_view().markup)


@app.get("/preview/raw", response_class=HTMLResponse)
async def preview_raw():
    """Serve the artifact itself, sandboxed the same way as the preview frame."""
    artifact = _require_artifact()
    return HTMLResponse(artifact.body, headers={"Content-Security-Policy": SANDBOX_CSP})


@app.get("/preview/source", response_class=HTMLResponse)
async def preview_source():
    artifact = _require_artifact()
    return HTMLResponse(workspace.render_sink.render_source(artifact))


@app.get("/export")
async def export():
    artifact = _require_artifact()
    exported = workspace.render_sink.export(artifact)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'}
    )


@app.post("/deploy", response_model=DeployResponse)
async def deploy(request: DeployRequest) -> DeployResponse:
    _require_artifact()
    try:
        status = await workspace.render_sink.deploy(request.repository)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return DeployResponse(status=status)


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Sinko API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
