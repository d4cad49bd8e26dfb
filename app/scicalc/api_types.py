"""
API Types

Pydantic models for the HTTP API.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel

from .errors import ErrorKind

ActionName = Literal[
    "calculate",
    "factorial",
    "reciprocal",
    "square",
    "memory_add",
    "memory_recall",
    "memory_clear",
    "clear_history",
]


# ============================================
# Requests
# ============================================

class EvaluateRequest(BaseModel):
    """Stateless evaluation of one expression."""
    expression: str


class ActionRequest(BaseModel):
    """A keypad action applied to the caller's current display text."""
    action: ActionName
    display: str = ""


class PreferencesRequest(BaseModel):
    """Update display preferences."""
    theme: str


# ============================================
# Responses
# ============================================

class EvaluateResponse(BaseModel):
    """Result of a stateless evaluation."""
    success: bool
    value: Optional[float] = None
    result: Optional[str] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None


class SessionCreatedResponse(BaseModel):
    session_id: str


class ActionResponse(BaseModel):
    """
    Outcome of a session action.

    On failure display is empty and reset_after tells the caller how
    long to show the error before clearing its input.
    """
    action: ActionName
    success: bool
    display: str
    memory: float
    expression: Optional[str] = None
    result: Optional[str] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None
    reset_after: Optional[float] = None


class HistoryEntryModel(BaseModel):
    expression: str
    result: str


class HistoryResponse(BaseModel):
    """Session history, most recent first."""
    entries: List[HistoryEntryModel]


class PreferencesResponse(BaseModel):
    theme: str
    available_themes: List[str]
