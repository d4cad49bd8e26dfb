"""
Configuration Module

Loads settings from environment variables and .env file.
Everything here has a sensible default, so the calculator runs with
no configuration at all.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_PATH = PROJECT_ROOT / "config" / ".env"
load_dotenv(dotenv_path=ENV_PATH)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Largest n whose factorial still fits in a double
MAX_FACTORIAL_LIMIT = 170


@dataclass
class Config:
    """
    Application configuration.

    All settings are loaded from environment variables.
    See config/.env.example for available options.
    """

    # === Calculator Settings ===
    history_limit: int = 12              # Entries kept per session
    significant_digits: int = 12         # Rounding budget for results
    factorial_limit: int = 170           # Largest accepted factorial operand
    error_reset_delay: float = 1.5       # Seconds a caller shows an error before clearing

    # === Logging Settings ===
    log_level: str = "INFO"
    log_json: bool = True
    log_file: Optional[str] = None

    # === Server Settings ===
    server_host: str = "127.0.0.1"
    server_port: int = 8765
    session_timeout: float = 1800.0      # Seconds of inactivity before a session is dropped
    max_sessions: int = 100
    allowed_cors_origins: List[str] = field(default_factory=lambda: [
        "http://localhost",
        "http://127.0.0.1",
    ])

    # === Preferences ===
    preferences_file: str = "preferences.json"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Load configuration from environment variables.

        Environment variables override defaults.
        """
        def get_bool(key: str, default: bool) -> bool:
            """Helper to parse boolean env vars."""
            value = os.getenv(key, str(default)).lower()
            return value in ("true", "1", "yes")

        def get_float(key: str, default: float) -> float:
            """Helper to parse float env vars."""
            try:
                return float(os.getenv(key, default))
            except ValueError:
                return default

        def get_int(key: str, default: int) -> int:
            """Helper to parse int env vars."""
            try:
                return int(os.getenv(key, default))
            except ValueError:
                return default

        def get_list(key: str, default: List[str]) -> List[str]:
            """Helper to parse comma-separated env vars."""
            value = os.getenv(key)
            if not value:
                return list(default)
            return [item.strip() for item in value.split(",") if item.strip()]

        defaults = cls()
        return cls(
            # Calculator
            history_limit=get_int("HISTORY_LIMIT", 12),
            significant_digits=get_int("SIGNIFICANT_DIGITS", 12),
            factorial_limit=get_int("FACTORIAL_LIMIT", 170),
            error_reset_delay=get_float("ERROR_RESET_DELAY", 1.5),

            # Logging
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_json=get_bool("LOG_JSON", True),
            log_file=os.getenv("LOG_FILE") or None,

            # Server
            server_host=os.getenv("SERVER_HOST", "127.0.0.1"),
            server_port=get_int("SERVER_PORT", 8765),
            session_timeout=get_float("SESSION_TIMEOUT", 1800.0),
            max_sessions=get_int("MAX_SESSIONS", 100),
            allowed_cors_origins=get_list("ALLOWED_CORS_ORIGINS", defaults.allowed_cors_origins),

            # Preferences
            preferences_file=os.getenv("PREFERENCES_FILE", "preferences.json"),
        )

    def validate(self) -> List[str]:
        """
        Validate the configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if self.history_limit < 1:
            errors.append("HISTORY_LIMIT must be at least 1")

        if not 1 <= self.significant_digits <= 17:
            errors.append("SIGNIFICANT_DIGITS must be between 1 and 17")

        if not 0 <= self.factorial_limit <= MAX_FACTORIAL_LIMIT:
            errors.append(f"FACTORIAL_LIMIT must be between 0 and {MAX_FACTORIAL_LIMIT}")

        if self.error_reset_delay < 0:
            errors.append("ERROR_RESET_DELAY must not be negative")

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}")

        if self.max_sessions < 1:
            errors.append("MAX_SESSIONS must be at least 1")

        return errors

    def __post_init__(self):
        """Validate after initialization."""
        errors = self.validate()
        if errors:
            raise ValueError(f"Configuration errors: {errors}")


# === Convenience function ===

def load_config() -> Config:
    """
    Load configuration from environment.

    Usage:
        from scicalc.config import load_config
        config = load_config()
    """
    return Config.from_env()


# === For testing/debugging ===

if __name__ == "__main__":
    # Run this file directly to see current config
    config = load_config()
    print("Current Configuration:")
    print(f"  History Limit: {config.history_limit}")
    print(f"  Significant Digits: {config.significant_digits}")
    print(f"  Factorial Limit: {config.factorial_limit}")
    print(f"  Error Reset Delay: {config.error_reset_delay}s")
    print(f"  Log Level: {config.log_level}")
    print(f"  Server: {config.server_host}:{config.server_port}")
