"""
Configuration management for nanogen.

This module handles the API key, model selection, endpoint and timeout settings.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from nanogen.logging_config import get_logger
from nanogen.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

# Load environment variables from .env file
load_dotenv()

# Default configuration constants
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash-image"
DEFAULT_TIMEOUT = 120

MISSING_API_KEY_MESSAGE = "API Key is missing. Please check your environment configuration."


@dataclass
class Config:
    """Configuration for nanogen."""

    # api_key excluded from repr to avoid leaking secrets
    api_key: str = field(default="", repr=False)
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL

    # Timeout for the single generateContent call (seconds)
    generation_timeout: int = DEFAULT_TIMEOUT

    # Debug: log raw API payload/response with image data truncated
    debug_api: bool = False

    _validated: bool = field(default=False, repr=False)

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create a Config instance from environment variables.

        Environment variables:
            GEMINI_API_KEY: Required for generation (API_KEY is accepted as a fallback)
            NANOGEN_BASE_URL: Optional API base URL
            NANOGEN_MODEL: Optional model id
            NANOGEN_TIMEOUT: Optional request timeout in seconds
            NANOGEN_DEBUG_API: "1"/"true"/"yes" to log truncated payloads

        The key is not checked here; call validate() before sending a request.
        """
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""

        timeout_raw = os.getenv("NANOGEN_TIMEOUT", "").strip()
        try:
            timeout = int(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError as e:
            raise ConfigurationError(
                f"NANOGEN_TIMEOUT must be an integer, got {timeout_raw!r}."
            ) from e

        debug_api = os.getenv("NANOGEN_DEBUG_API", "").strip().lower() in ("1", "true", "yes")

        return cls(
            api_key=api_key,
            base_url=os.getenv("NANOGEN_BASE_URL") or DEFAULT_BASE_URL,
            model=os.getenv("NANOGEN_MODEL") or DEFAULT_MODEL,
            generation_timeout=timeout,
            debug_api=debug_api,
        )

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ConfigurationError: If the API key is missing or a setting is invalid
        """
        logger.debug("Validating config")

        if not self.api_key:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE)
        if not self.model:
            raise ConfigurationError("Model ID cannot be empty")
        if self.generation_timeout <= 0:
            raise ConfigurationError(
                f"generation_timeout must be positive, got {self.generation_timeout}."
            )

        self._validated = True

    def is_valid(self) -> bool:
        """Return True if validate() has been called successfully."""
        return self._validated

    def set_api_key(self, api_key: str) -> None:
        """
        Set the API key.

        Raises:
            ConfigurationError: If the key is empty
        """
        if not api_key:
            raise ConfigurationError("API key cannot be empty")

        self.api_key = api_key
        self._validated = False

    def set_model(self, model: str) -> None:
        """
        Set the image model id.

        Raises:
            ConfigurationError: If model is empty
        """
        if not model:
            raise ConfigurationError("Model ID cannot be empty")

        self.model = model
        self._validated = False


# Global configuration instance
_global_config: Config | None = None


def get_config() -> Config:
    """Return the global configuration instance, creating it from env on first use."""
    global _global_config
    if _global_config is None:
        _global_config = Config.from_env()
    return _global_config


def set_config(config: Config) -> None:
    """Set the global configuration instance."""
    global _global_config
    _global_config = config
