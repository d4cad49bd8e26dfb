"""
Preferences Module

Display preferences owned by the caller (currently just the theme).
The calculator core never reads these; front ends load and save them
explicitly.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Union

from .logging_config import get_logger

logger = get_logger("preferences")

AVAILABLE_THEMES = ("default", "dark", "light")


@dataclass
class Preferences:
    """Caller-side display preferences."""
    theme: str = "default"

    def __post_init__(self):
        if self.theme not in AVAILABLE_THEMES:
            raise ValueError(
                f"Unknown theme {self.theme!r}. Available: {', '.join(AVAILABLE_THEMES)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preferences":
        """Create from dictionary, ignoring unknown keys."""
        return cls(theme=data.get("theme", "default"))


def load_preferences(path: Union[str, Path]) -> Preferences:
    """
    Load preferences from a JSON file.

    A missing or unreadable file gives the defaults, so a corrupt
    preferences file never stops the calculator from starting.
    """
    path = Path(path)
    if not path.exists():
        return Preferences()

    try:
        with open(path, "r") as f:
            data = json.load(f)
        return Preferences.from_dict(data)
    except (OSError, ValueError, AttributeError) as e:
        logger.warning(f"Ignoring unreadable preferences file {path}: {e}")
        return Preferences()


def save_preferences(preferences: Preferences, path: Union[str, Path]) -> None:
    """Save preferences to a JSON file."""
    with open(path, "w") as f:
        json.dump(preferences.to_dict(), f, indent=2)
