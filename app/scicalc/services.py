"""
Service Layer

Manages calculator sessions for remote callers and maps the keypad's
action names onto session operations.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import Config, load_config
from .errors import SessionNotFoundError
from .evaluator import EvalResult, evaluate
from .formatter import format_result
from .logging_config import get_logger
from .session import CalculatorSession, OperationResult

logger = get_logger("services")

ACTIONS = (
    "calculate",
    "factorial",
    "reciprocal",
    "square",
    "memory_add",
    "memory_recall",
    "memory_clear",
    "clear_history",
)


@dataclass
class SessionInfo:
    """A session plus the bookkeeping needed to expire it."""
    session: CalculatorSession
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    action_count: int = 0


@dataclass
class ActionOutcome:
    """
    What a caller needs after running an action.

    display is the text the caller should show next. For memory_recall
    it is the caller's display with the memory value appended; for the
    other memory and history actions it is the display unchanged.
    """
    action: str
    display: str
    memory: float
    result: Optional[OperationResult] = None

    @property
    def success(self) -> bool:
        return self.result is None or self.result.success


class CalculatorService:
    """
    Registry of calculator sessions keyed by session id.

    Sessions idle for longer than config.session_timeout are dropped by
    cleanup_stale_sessions(); when max_sessions is reached, creating a
    new session evicts the least recently used one.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or load_config()
        self.sessions: Dict[str, SessionInfo] = {}

    # === Session lifecycle ===

    def create_session(self) -> str:
        """Create a session and return its id."""
        if len(self.sessions) >= self.config.max_sessions:
            oldest = min(self.sessions.values(), key=lambda info: info.last_activity)
            logger.info(f"Session limit reached, evicting session {oldest.session_id}")
            del self.sessions[oldest.session_id]

        info = SessionInfo(session=CalculatorSession(self.config))
        self.sessions[info.session_id] = info
        logger.info(f"Session created: {info.session_id}")
        return info.session_id

    def get_session(self, session_id: str) -> CalculatorSession:
        """
        Look up a session.

        Raises:
            SessionNotFoundError: Unknown or expired session id
        """
        return self._get_info(session_id).session

    def close_session(self, session_id: str) -> None:
        """Remove a session. Unknown ids raise SessionNotFoundError."""
        self._get_info(session_id)
        del self.sessions[session_id]
        logger.info(f"Session closed: {session_id}")

    def cleanup_stale_sessions(self, now: Optional[float] = None) -> List[str]:
        """Drop sessions idle longer than the timeout. Returns the removed ids."""
        now = time.time() if now is None else now
        stale = [
            session_id
            for session_id, info in self.sessions.items()
            if now - info.last_activity > self.config.session_timeout
        ]
        for session_id in stale:
            del self.sessions[session_id]

        if stale:
            logger.info(f"Cleaned up {len(stale)} stale session(s)")
        return stale

    # === Calculations ===

    def evaluate(self, expression: str) -> EvalResult:
        """Stateless evaluation, no session or history involved."""
        return evaluate(expression)

    def format(self, value: float) -> str:
        return format_result(value, self.config.significant_digits)

    def dispatch(self, session_id: str, action: str, display: str = "") -> ActionOutcome:
        """
        Run a keypad action against a session.

        Args:
            session_id: Target session
            action: One of ACTIONS
            display: The caller's current display text

        Raises:
            SessionNotFoundError: Unknown session id
            ValueError: Unknown action
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown action {action!r}. Available: {', '.join(ACTIONS)}")

        info = self._get_info(session_id)
        info.last_activity = time.time()
        info.action_count += 1
        session = info.session

        result: Optional[OperationResult] = None
        new_display = display

        if action == "calculate":
            result = session.compute(display)
        elif action == "factorial":
            result = session.factorial(display)
        elif action == "reciprocal":
            result = session.reciprocal(display)
        elif action == "square":
            result = session.square(display)
        elif action == "memory_add":
            session.memory_add(display)
        elif action == "memory_recall":
            new_display = display + session.memory_recall()
        elif action == "memory_clear":
            session.memory_clear()
        elif action == "clear_history":
            session.clear_history()

        if result is not None:
            new_display = result.display if result.success else ""
            if not result.success:
                logger.info(
                    f"Action {action} failed: {result.error.value}",
                    extra={
                        "session_id": session_id,
                        "action": action,
                        "error_kind": result.error,
                    },
                )

        return ActionOutcome(
            action=action,
            display=new_display,
            memory=session.memory,
            result=result,
        )

    # === Stats ===

    def get_stats(self) -> dict:
        """Session statistics for the health endpoint."""
        return {
            "count": len(self.sessions),
            "max_sessions": self.config.max_sessions,
            "actions": sum(info.action_count for info in self.sessions.values()),
        }

    def _get_info(self, session_id: str) -> SessionInfo:
        info = self.sessions.get(session_id)
        if info is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return info
