"""
Configuration module for loading and validating environment variables.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


DEFAULT_COMPILER_TIMEOUT = 10.0
DEFAULT_TOOLCHAIN_IMAGE = "node:18-slim"
DEFAULT_TOOLCHAIN_TIMEOUT = 120.0
DEFAULT_INSTALL_TIMEOUT = 180.0


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        # Load .env file from project root
        env_path = Path(__file__).parent.parent / ".env"
        load_dotenv(dotenv_path=env_path)

        # Remote compile service (unset means in-process only)
        self.compiler_url = os.getenv("PREVIEWKIT_COMPILER_URL") or None
        self.compiler_timeout = self._read_seconds("PREVIEWKIT_COMPILER_TIMEOUT", DEFAULT_COMPILER_TIMEOUT)

        # Docker toolchain used by the compile service
        self.toolchain_image = os.getenv("PREVIEWKIT_TOOLCHAIN_IMAGE") or DEFAULT_TOOLCHAIN_IMAGE
        self.toolchain_timeout = self._read_seconds("PREVIEWKIT_TOOLCHAIN_TIMEOUT", DEFAULT_TOOLCHAIN_TIMEOUT)
        self.install_timeout = self._read_seconds("PREVIEWKIT_INSTALL_TIMEOUT", DEFAULT_INSTALL_TIMEOUT)

        self.log_level = (os.getenv("PREVIEWKIT_LOG_LEVEL") or "INFO").upper()

        # Validate settings
        self._validate()

    def _read_seconds(self, name: str, default: float) -> float:
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        try:
            return float(raw)
        except ValueError:
            raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from None

    def _validate(self):
        """Validate that the settings are usable."""
        problems = []

        for name, value in (
            ("PREVIEWKIT_COMPILER_TIMEOUT", self.compiler_timeout),
            ("PREVIEWKIT_TOOLCHAIN_TIMEOUT", self.toolchain_timeout),
            ("PREVIEWKIT_INSTALL_TIMEOUT", self.install_timeout),
        ):
            if value <= 0:
                problems.append(f"{name} must be positive")

        if self.compiler_url and not self.compiler_url.startswith(("http://", "https://")):
            problems.append("PREVIEWKIT_COMPILER_URL must start with http:// or https://")

        if not isinstance(logging.getLevelName(self.log_level), int):
            problems.append(f"PREVIEWKIT_LOG_LEVEL is not a log level: {self.log_level}")

        if problems:
            raise ConfigError(
                "Invalid configuration:\n- " + "\n- ".join(problems) + "\n"
                "See .env.example for reference."
            )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() re-reads it."""
    global _config
    _config = None
