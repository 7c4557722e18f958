"""Assistant configuration with environment variable loading.

Pydantic-based configuration for the OpenAI Assistants relay.
Supports OpenAI and OpenAI-compatible APIs via custom base URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    # Raw string; field types do the coercion
    return os.getenv(name) or default


class AssistantConfig(BaseModel):
    """Configuration for the assistant relay.

    Attributes:
        openai_api_key: API key for the assistant provider.
        assistant_id: Identifier of the assistant that runs each turn.
        base_url: API base URL (None for OpenAI default).
        poll_interval: First delay between run status checks, in seconds.
        poll_backoff: Multiplier applied to the delay after each check.
        max_poll_interval: Upper bound for a single delay, in seconds.
        poll_timeout: Seconds to wait for a run before giving up.
        max_poll_attempts: Optional cap on status checks per run.
    """

    model_config = ConfigDict(validate_default=True)

    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="API key for the assistant provider",
    )
    assistant_id: str = Field(
        default_factory=lambda: os.getenv("OPENAI_ASSISTANT_ID", ""),
        description="Assistant that processes each run",
    )
    base_url: str | None = Field(
        default_factory=lambda: _env("LLM_BASE_URL"),
        description="API base URL (None for OpenAI default)",
    )
    poll_interval: float = Field(
        default_factory=lambda: _env("POLL_INTERVAL", "1.0"),
        gt=0.0,
        description="Initial delay between run status checks",
    )
    poll_backoff: float = Field(
        default_factory=lambda: _env("POLL_BACKOFF", "1.5"),
        ge=1.0,
        description="Delay multiplier applied after each status check",
    )
    max_poll_interval: float = Field(
        default_factory=lambda: _env("MAX_POLL_INTERVAL", "5.0"),
        gt=0.0,
        description="Maximum delay between run status checks",
    )
    poll_timeout: float = Field(
        default_factory=lambda: _env("POLL_TIMEOUT", "120.0"),
        gt=0.0,
        description="Seconds to wait for a run to reach a terminal status",
    )
    max_poll_attempts: int | None = Field(
        default_factory=lambda: _env("MAX_POLL_ATTEMPTS"),
        ge=1,
        description="Optional cap on status checks per run",
    )

    @field_validator("openai_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("OPENAI_API_KEY is required. Set it in the environment or .env")
        return v.strip()

    @field_validator("assistant_id")
    @classmethod
    def validate_assistant_id(cls, v: str) -> str:
        """Validate that an assistant id is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "OPENAI_ASSISTANT_ID is required. Set it in the environment or .env"
            )
        return v.strip()

    @model_validator(mode="after")
    def validate_poll_bounds(self) -> "AssistantConfig":
        """Ensure the first poll delay does not exceed the delay cap."""
        if self.poll_interval > self.max_poll_interval:
            raise ValueError("poll_interval must not exceed max_poll_interval")
        return self


def get_assistant_config() -> AssistantConfig:
    """Create assistant configuration from environment.

    Returns:
        Configured AssistantConfig instance.

    Raises:
        ValidationError: If the API key or assistant id is not set, or a poll
            setting is not a number within its bounds.
    """
    return AssistantConfig()
