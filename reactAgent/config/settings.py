"""Environment-bound configuration objects.

This module provides Pydantic BaseSettings-based configuration loading from .env files.
Model settings accept both the MODEL_CHAT_* names and the OPENAI_* names used by the
OpenAI SDK, so an existing OpenAI environment works without changes.

Example:
    from reactAgent.config.settings import get_settings

    settings = get_settings()  # Cached singleton
    model_id = settings.models.chat
    serialize = settings.executor.serialize_conversations
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()


class ModelSettings(BaseSettings):
    """Chat model identifier and credentials for the ReAct agent."""

    chat: str = Field(
        default="gpt-4o-mini",
        validation_alias=AliasChoices("MODEL_CHAT", "MODEL_CHAT_ID", "OPENAI_MODEL"),
    )
    chat_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MODEL_CHAT_API_KEY", "OPENAI_API_KEY"),
    )
    chat_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("MODEL_CHAT_BASE_URL", "MODEL_CHAT_URL", "OPENAI_BASE_URL"),
    )
    temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=2.0,
        validation_alias=AliasChoices("MODEL_TEMPERATURE"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class ExecutorSettings(BaseSettings):
    """Task execution controls.

    - serialize_conversations: run executions on the same conversation one at a time
    - recursion_limit: LangGraph super-step limit for a single task (1-200, default: 25)
    """

    serialize_conversations: bool = Field(default=True, alias="EXECUTOR_SERIALIZE_CONVERSATIONS")
    recursion_limit: int = Field(default=25, ge=1, le=200, alias="EXECUTOR_RECURSION_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class MCPSettings(BaseSettings):
    """Remote tool discovery through MCP servers."""

    enabled: bool = Field(default=True, alias="MCP_ENABLED")
    # Relative paths are resolved against the project root
    config_path: str = Field(default="reactAgent/config/mcp_servers.yaml", alias="MCP_CONFIG_PATH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class Settings(BaseSettings):
    """Root application settings loaded from .env file.

    Hierarchical structure containing four nested settings groups:
    - models: Chat model routing and API credentials (ModelSettings)
    - executor: Task execution controls (ExecutorSettings)
    - mcp: MCP tool discovery (MCPSettings)
    - observability: Logging (ObservabilitySettings)

    Use get_settings() to obtain a cached singleton instance.
    """

    environment: str = Field(default="dev", alias="APP_ENV")
    models: ModelSettings = Field(default_factory=ModelSettings)
    executor: ExecutorSettings = Field(default_factory=ExecutorSettings)
    mcp: MCPSettings = Field(default_factory=MCPSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Returns:
        Settings: Cached application settings instance
    """
    return Settings()
