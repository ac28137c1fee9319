"""Configuration management for the Sous Chef generation core.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()

SUPPORTED_ASPECT_RATIOS = ("1:1", "3:4", "4:3", "9:16", "16:9")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Structured generation model (dish suggestions and recipes)
        # Default: gemini-3-pro-preview for reliable schema-following output
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-3-pro-preview")
        # Chat model used by the streaming kitchen assistant
        self.CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gemini-3-pro-preview")
        # Image model: must support inline image output
        self.IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "gemini-2.5-flash-image")
        # Aspect ratio of the generated dish photo
        self.IMAGE_ASPECT_RATIO: str = os.getenv("IMAGE_ASPECT_RATIO", "16:9")
        # Image Generation: Enable/disable the dish photo next to each recipe
        self.GENERATE_IMAGES: bool = _env_bool("GENERATE_IMAGES", "true")
        # Number of dishes requested per discovery call. Advisory only, the
        # model may return fewer or more.
        self.SUGGESTION_COUNT: int = int(os.getenv("SUGGESTION_COUNT", "4"))
        # Temperature: Controls randomness. Unset leaves the model default in place.
        temperature = os.getenv("TEMPERATURE")
        self.TEMPERATURE: Optional[float] = float(temperature) if temperature else None

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If required API keys are missing or invalid values provided.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if self.IMAGE_ASPECT_RATIO not in SUPPORTED_ASPECT_RATIOS:
            raise ValueError(
                f"IMAGE_ASPECT_RATIO must be one of {', '.join(SUPPORTED_ASPECT_RATIOS)}, "
                f"got: {self.IMAGE_ASPECT_RATIO}"
            )
        if not (1 <= self.SUGGESTION_COUNT <= 12):
            raise ValueError(
                f"SUGGESTION_COUNT must be between 1 and 12, got: {self.SUGGESTION_COUNT}"
            )
        if self.TEMPERATURE is not None and not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}"
            )


# Module-level config instance. Validated when the assistant is wired up
# (see sous_chef.agents.kitchen.initialize_kitchen_assistant).
config = Config()
