"""FastAPI application for the Mindlog server.

This module provides the JSON API used by the Mindlog pages: sessions,
logs, likes, comments, search and mind maps.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mindlog import __version__
from mindlog.auth import IdentityVerifier, Session, SessionManager, verified_profile
from mindlog.core import MindMap
from mindlog.errors import MindlogError, NotAuthenticated
from mindlog.schemas import (
    CommentEntry,
    CommentForm,
    LogForm,
    LogRecord,
    UserProfile,
    parse_form,
    youtube_embed_url,
)
from mindlog.server.api.models import (
    CommentListResponse,
    HealthResponse,
    LikeResponse,
    LogListResponse,
    LogResponse,
    SessionResponse,
    SignInRequest,
)
from mindlog.server.config import ServerConfig
from mindlog.services import LogService
from mindlog.store import DocumentStore, FetchOk, FetchResult, get_document_store
from mindlog.utils.logger import bind_log_context, get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class ServerState:
    """Shared state for the server.

    Attributes:
        config: Server configuration
        store: Document store
        sessions: Session manager
        verify_identity: Identity provider token verifier, if configured
        logs: Log service
    """

    def __init__(
        self,
        config: ServerConfig,
        store: DocumentStore,
        sessions: SessionManager,
        verify_identity: IdentityVerifier | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.sessions = sessions
        self.verify_identity = verify_identity
        self.logs = LogService(store)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager.

    Args:
        app: FastAPI application
    """
    state: ServerState = app.state.mindlog
    logger.info(
        "Mindlog server starting",
        extra={
            "context": {
                "store": state.config.store_type.value,
                "logs": state.store.get_stats()["logs"],
            }
        },
    )

    yield

    purged = state.sessions.purge_expired()
    logger.info("Mindlog server stopped", extra={"context": {"expired_sessions": purged}})


def _records(result: FetchResult) -> list[LogRecord]:
    """Unwrap a fetch result, raising the matching error on failure."""
    if isinstance(result, FetchOk):
        return result.records
    raise result.to_exception()


def create_app(
    config: ServerConfig,
    store: DocumentStore | None = None,
    sessions: SessionManager | None = None,
    verify_identity: IdentityVerifier | None = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Server configuration
        store: Document store to use instead of the configured one
        sessions: Session manager to use instead of a fresh one
        verify_identity: Turns an identity provider ID token into a verified
            profile. Without it every sign-in is refused.

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="Mindlog",
        description="Notes, links between notes, comments and likes",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.mindlog = ServerState(
        config=config,
        store=store if store is not None else get_document_store(config.store_config()),
        sessions=sessions if sessions is not None else SessionManager(ttl=config.session_ttl),
        verify_identity=verify_identity,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MindlogError)
    async def mindlog_error_handler(request: Request, exc: MindlogError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    def get_state() -> ServerState:
        return app.state.mindlog

    async def optional_session(
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    ) -> Session | None:
        if credentials is None:
            return None
        try:
            session = get_state().sessions.get(credentials.credentials)
        except NotAuthenticated:
            # Stale tokens fall back to anonymous access on public endpoints
            return None
        bind_log_context(uid=session.uid)
        return session

    async def require_session(
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    ) -> Session:
        token = credentials.credentials if credentials else None
        session = get_state().sessions.get(token)
        bind_log_context(uid=session.uid)
        return session

    CurrentSession = Annotated[Session, Depends(require_session)]
    MaybeSession = Annotated[Session | None, Depends(optional_session)]

    # Sessions

    @app.post("/api/auth/session", response_model=SessionResponse, status_code=201)
    async def sign_in(request: SignInRequest) -> SessionResponse:
        """Start a session for the user behind an identity provider ID token."""
        state = get_state()
        profile = verified_profile(state.verify_identity, request.id_token)
        session = state.sessions.sign_in(profile)
        return SessionResponse(token=session.token, user=session.user, expires_at=session.expires_at)

    @app.delete("/api/auth/session", status_code=204)
    async def sign_out(session: CurrentSession) -> None:
        """End the caller's session."""
        get_state().sessions.sign_out(session.token)

    @app.get("/api/auth/me", response_model=UserProfile)
    async def me(session: CurrentSession) -> UserProfile:
        """Return the signed-in user."""
        return session.user

    # Logs

    @app.get("/api/logs", response_model=LogListResponse)
    async def list_own_logs(session: CurrentSession) -> LogListResponse:
        """List the caller's logs, most recently updated first."""
        logs = _records(get_state().logs.fetch_own_logs(session))
        return LogListResponse(logs=logs, total_found=len(logs))

    @app.post("/api/logs", response_model=LogRecord, status_code=201)
    async def create_log(
        session: CurrentSession,
        payload: Annotated[dict[str, Any], Body()],
    ) -> LogRecord:
        """Create a log."""
        form = parse_form(LogForm, payload)
        return get_state().logs.create_log(session, form)

    @app.get("/api/logs/{log_id}", response_model=LogResponse)
    async def get_log(log_id: str, session: MaybeSession) -> LogResponse:
        """Read a public log, or one of the caller's private logs."""
        service = get_state().logs
        log = service.get_log(session, log_id)
        return LogResponse(
            log=log,
            liked=service.is_liked(session, log_id) if session else False,
            youtube_embed_url=youtube_embed_url(log.youtube_link) if log.youtube_link else None,
        )

    @app.put("/api/logs/{log_id}", response_model=LogRecord)
    async def update_log(
        log_id: str,
        session: CurrentSession,
        payload: Annotated[dict[str, Any], Body()],
    ) -> LogRecord:
        """Edit one of the caller's logs."""
        form = parse_form(LogForm, payload)
        return get_state().logs.update_log(session, log_id, form)

    @app.delete("/api/logs/{log_id}", status_code=204)
    async def delete_log(log_id: str, session: CurrentSession) -> None:
        """Delete one of the caller's logs."""
        get_state().logs.delete_log(session, log_id)

    # Search

    @app.get("/api/search", response_model=LogListResponse)
    async def search_private(
        session: CurrentSession,
        q: Annotated[str, Query(description="Search text")] = "",
    ) -> LogListResponse:
        """Search the caller's own and liked logs."""
        logs = _records(get_state().logs.search_private(session, q))
        return LogListResponse(logs=logs, total_found=len(logs), query=q)

    @app.get("/api/public/logs", response_model=LogListResponse)
    async def search_public(
        session: MaybeSession,
        q: Annotated[str, Query(description="Search text")] = "",
    ) -> LogListResponse:
        """List or search public logs."""
        logs = _records(get_state().logs.search_public(q, session))
        return LogListResponse(logs=logs, total_found=len(logs), query=q or None)

    # Likes

    @app.post("/api/logs/{log_id}/like", response_model=LikeResponse)
    async def toggle_like(log_id: str, session: CurrentSession) -> LikeResponse:
        """Like a log, or remove the caller's like."""
        liked = get_state().logs.toggle_like(session, log_id)
        return LikeResponse(log_id=log_id, liked=liked)

    @app.get("/api/likes", response_model=LogListResponse)
    async def list_liked(session: CurrentSession) -> LogListResponse:
        """List the logs the caller likes."""
        logs = get_state().logs.list_liked_logs(session)
        return LogListResponse(logs=logs, total_found=len(logs))

    # Comments

    @app.get("/api/logs/{log_id}/comments", response_model=CommentListResponse)
    async def list_comments(log_id: str, session: MaybeSession) -> CommentListResponse:
        """List the comments of a log, newest first."""
        return CommentListResponse(comments=get_state().logs.list_comments(session, log_id))

    @app.post("/api/logs/{log_id}/comments", response_model=CommentEntry, status_code=201)
    async def add_comment(
        log_id: str,
        session: CurrentSession,
        payload: Annotated[dict[str, Any], Body()],
    ) -> CommentEntry:
        """Comment on a log."""
        form = parse_form(CommentForm, payload)
        return get_state().logs.add_comment(session, log_id, form)

    @app.delete("/api/logs/{log_id}/comments/{comment_id}", status_code=204)
    async def delete_comment(log_id: str, comment_id: str, session: CurrentSession) -> None:
        """Delete a comment written by the caller or left on the caller's log."""
        get_state().logs.delete_comment(session, log_id, comment_id)

    # Mind map

    @app.get("/api/mindmap/{log_id}", response_model=MindMap)
    async def mind_map(log_id: str, session: MaybeSession) -> MindMap:
        """Return the mind map around a log."""
        return get_state().logs.mind_map(session, log_id)

    @app.get("/api/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        state = get_state()
        try:
            stats = state.store.get_stats()
        except MindlogError as e:
            logger.error(f"Health check failed: {e.message}")
            return HealthResponse(status="error", store=state.config.store_type.value)

        return HealthResponse(
            status="ok",
            store=state.config.store_type.value,
            logs=stats.get("logs", 0),
        )

    return app
