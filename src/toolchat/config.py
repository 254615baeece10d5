"""Configuration module for toolchat using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "qwen3:4b"


class ToolchatSettings(BaseSettings):
    """Main configuration settings for toolchat.

    All settings can be overridden via environment variables with the TOOLCHAT_ prefix.
    For example, TOOLCHAT_OLLAMA_HOST will override the ollama_host setting.
    Command-line flags take precedence over environment variables.
    """

    # Ollama
    ollama_host: str = "http://localhost:11434"
    default_model: str = DEFAULT_MODEL
    temperature: float = 0.0

    # None waits forever, matching a plain blocking request
    request_timeout: float | None = None

    # Tools
    tool_timeout: float = 30.0
    weather_api_url: str = "https://api.open-meteo.com/v1/forecast"

    # Conversation loop safety margin, None disables it
    max_iterations: int | None = Field(default=50, ge=1)

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="TOOLCHAT_")
