"""Agent configuration with environment variable loading.

Pydantic-based configuration for the Agno tutor agents.
Supports Google Gemini and OpenAI-compatible APIs via custom base URL.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()


def _api_key_from_env() -> str:
    for name in ("LLM_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY", "OPENAI_API_KEY"):
        if value := os.getenv(name):
            return value
    return ""


class AgentConfig(BaseModel):
    """Configuration for the Agno tutor agents.

    Attributes:
        provider: Model provider, "gemini" or "openai".
        api_key: API key for model access.
        base_url: API base URL (OpenAI-compatible providers only).
        model_name: Model identifier to use.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
    """

    provider: Literal["gemini", "openai"] = Field(
        default_factory=lambda: os.getenv("LLM_PROVIDER", "gemini").lower(),
        description="Model provider",
    )
    api_key: str = Field(
        default_factory=_api_key_from_env,
        description="API key for LLM provider",
    )
    base_url: str | None = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or None,
        description="API base URL (None for provider default)",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gemini-2.5-flash"),
        description="Model to use",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=2048,
        ge=1,
        le=128000,
        description="Maximum tokens in generated response",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError(
                "API key required. Set LLM_API_KEY or GEMINI_API_KEY in .env"
            )
        return v.strip()


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Returns:
        Configured AgentConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return AgentConfig()
