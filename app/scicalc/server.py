"""
FastAPI Server Module

HTTP API for the calculator. Front ends keep the display text and send
it along with each keypad action; the server keeps memory and history
per session.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from .api_types import (
    ActionRequest,
    ActionResponse,
    EvaluateRequest,
    EvaluateResponse,
    HistoryEntryModel,
    HistoryResponse,
    PreferencesRequest,
    PreferencesResponse,
    SessionCreatedResponse,
)
from .config import Config, load_config
from .errors import SessionNotFoundError
from .logging_config import setup_logging, get_logger, set_correlation_id
from .preferences import AVAILABLE_THEMES, Preferences, load_preferences, save_preferences
from .services import CalculatorService

logger = get_logger("server")

CLEANUP_INTERVAL = 60.0  # Seconds between stale session sweeps


async def _cleanup_stale_sessions(service: CalculatorService) -> None:
    """Background task to periodically drop idle sessions."""
    while True:
        try:
            await asyncio.sleep(CLEANUP_INTERVAL)
            service.cleanup_stale_sessions()
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.error(f"Error in cleanup task: {e}")


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Configuration to use (default: loaded from environment)
    """
    config = config or load_config()
    setup_logging(level=config.log_level, log_file=config.log_file, json_format=config.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start the session cleanup task, cancel it on shutdown."""
        logger.info("Starting calculator server...")
        cleanup_task = asyncio.create_task(_cleanup_stale_sessions(app.state.service))
        try:
            yield
        finally:
            logger.info("Shutting down calculator server...")
            cleanup_task.cancel()
            try:
                await cleanup_task
            except asyncio.CancelledError:
                pass

    app = FastAPI(
        title="SciCalc API",
        description="Scientific calculator expression evaluation API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.service = CalculatorService(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        """Middleware to handle correlation IDs."""
        correlation_id = request.headers.get("X-Correlation-ID", f"req_{uuid.uuid4().hex[:8]}")
        set_correlation_id(correlation_id)
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response

    def get_service() -> CalculatorService:
        return app.state.service

    # ============================================
    # Endpoints
    # ============================================

    @app.get("/health")
    async def health_check():
        """Health check endpoint with session stats."""
        return {
            "status": "healthy",
            "sessions": get_service().get_stats(),
        }

    @app.post("/api/evaluate", response_model=EvaluateResponse)
    async def evaluate_expression(request: EvaluateRequest):
        """Evaluate an expression without touching any session."""
        service = get_service()
        outcome = service.evaluate(request.expression)
        if not outcome.success:
            return EvaluateResponse(success=False, error=outcome.error, message=outcome.message)
        return EvaluateResponse(
            success=True,
            value=outcome.value,
            result=service.format(outcome.value),
        )

    @app.post("/api/sessions", response_model=SessionCreatedResponse, status_code=201)
    async def create_session():
        """Start a new calculator session."""
        return SessionCreatedResponse(session_id=get_service().create_session())

    @app.delete("/api/sessions/{session_id}", status_code=204)
    async def close_session(session_id: str):
        """End a calculator session."""
        try:
            get_service().close_session(session_id)
        except SessionNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.post("/api/sessions/{session_id}/actions", response_model=ActionResponse)
    async def run_action(session_id: str, request: ActionRequest):
        """Apply a keypad action to the caller's display text."""
        try:
            outcome = get_service().dispatch(session_id, request.action, request.display)
        except SessionNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

        response = ActionResponse(
            action=request.action,
            success=outcome.success,
            display=outcome.display,
            memory=outcome.memory,
        )
        result = outcome.result
        if result is not None and result.success:
            response.expression = result.expression
            response.result = result.result
        elif result is not None:
            response.error = result.error
            response.message = result.message
            response.reset_after = config.error_reset_delay
        return response

    @app.get("/api/sessions/{session_id}/history", response_model=HistoryResponse)
    async def get_history(session_id: str):
        """Session history, most recent first."""
        try:
            session = get_service().get_session(session_id)
        except SessionNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return HistoryResponse(entries=[
            HistoryEntryModel(expression=entry.expression, result=entry.result)
            for entry in session.history
        ])

    @app.delete("/api/sessions/{session_id}/history", status_code=204)
    async def clear_history(session_id: str):
        """Empty the session history."""
        try:
            get_service().get_session(session_id).clear_history()
        except SessionNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @app.get("/api/preferences", response_model=PreferencesResponse)
    def get_preferences():
        """Current display preferences."""
        preferences = load_preferences(Path(config.preferences_file))
        return PreferencesResponse(theme=preferences.theme, available_themes=list(AVAILABLE_THEMES))

    @app.put("/api/preferences", response_model=PreferencesResponse)
    def update_preferences(request: PreferencesRequest):
        """Change and persist display preferences."""
        try:
            preferences = Preferences(theme=request.theme)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        save_preferences(preferences, Path(config.preferences_file))
        logger.info(f"Theme changed to {preferences.theme}")
        return PreferencesResponse(theme=preferences.theme, available_themes=list(AVAILABLE_THEMES))

    return app
