"""
History Module

Keeps the list of completed calculations for a session.
New entries go to the front; once the list is full the oldest entry
falls off the end.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Tuple

from .logging_config import get_logger

logger = get_logger("history")

DEFAULT_HISTORY_LIMIT = 12


@dataclass(frozen=True)
class HistoryEntry:
    """
    One completed calculation.

    expression is the label shown to the user (e.g. "5!" or "1/(4)"),
    result is the formatted result text.
    """
    expression: str
    result: str

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"


class History:
    """Most-recent-first list of HistoryEntry, capped at max_entries."""

    def __init__(self, max_entries: int = DEFAULT_HISTORY_LIMIT):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: List[HistoryEntry] = []

    def add(self, expression: str, result: str) -> HistoryEntry:
        """Record a calculation at the front of the list."""
        entry = HistoryEntry(expression=expression, result=result)
        self._entries.insert(0, entry)

        # Trim the oldest entries if we exceed max
        if len(self._entries) > self.max_entries:
            logger.debug(f"History full, evicting {self._entries[-1]}")
            self._entries = self._entries[:self.max_entries]

        return entry

    @property
    def entries(self) -> Tuple[HistoryEntry, ...]:
        """Read-only view, most recent first."""
        return tuple(self._entries)

    def clear(self) -> None:
        """Remove all entries."""
        self._entries = []

    def to_list(self) -> List[Dict[str, str]]:
        return [entry.to_dict() for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))

    def __str__(self) -> str:
        return f"History({len(self._entries)} entries)"
