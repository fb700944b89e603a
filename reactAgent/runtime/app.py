"""Runtime assembly: settings -> chat model -> tools -> adapter -> executor."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import yaml
from langchain_core.language_models import BaseChatModel
from langchain_openai import ChatOpenAI

from reactAgent.agent.adapter import LangGraphReasoningAdapter
from reactAgent.config import Settings, get_settings, resolve_project_path
from reactAgent.executor import ReactAgentExecutor
from reactAgent.persistence import build_checkpointer
from reactAgent.tools import LOCAL_TOOLS, load_mcp_config

LOGGER = logging.getLogger(__name__)

EMPTY_MCP_CONFIG = {"servers": {}, "settings": {}}


def _chat_kwargs(settings: Settings) -> Dict[str, object]:
    models = settings.models
    if not models.chat_api_key:
        raise RuntimeError(
            f"Missing API key for model {models.chat}; set MODEL_CHAT_API_KEY or OPENAI_API_KEY in .env."
        )
    kwargs: Dict[str, object] = {
        "model": models.chat,
        "api_key": models.chat_api_key,
        "temperature": models.temperature,
    }
    if models.chat_base_url:
        kwargs["base_url"] = models.chat_base_url
    return kwargs


def build_chat_model(settings: Settings) -> ChatOpenAI:
    """Create the OpenAI-compatible chat model the agent reasons with."""
    return ChatOpenAI(**_chat_kwargs(settings))


def load_mcp_servers(settings: Settings) -> dict:
    """Read the MCP server declarations; problems degrade to no servers."""
    if not settings.mcp.enabled:
        LOGGER.info("MCP tool discovery disabled")
        return dict(EMPTY_MCP_CONFIG)

    config_path = resolve_project_path(settings.mcp.config_path)
    try:
        config = load_mcp_config(config_path)
    except (FileNotFoundError, yaml.YAMLError) as e:
        LOGGER.warning(f"No MCP servers will be available: {e}")
        return dict(EMPTY_MCP_CONFIG)

    LOGGER.info(f"Loaded MCP server configurations from {config_path}")
    return config


async def build_executor(
    *,
    settings: Optional[Settings] = None,
    model: Optional[BaseChatModel] = None,
) -> ReactAgentExecutor:
    """Return a ready ReactAgentExecutor.

    The reasoning adapter is fully initialized before returning, so the
    first task never waits on tool discovery. Errors other than tool
    discovery failures propagate and abort startup.

    Args:
        settings: Optional settings (defaults to the cached .env settings)
        model: Optional chat model (defaults to ChatOpenAI from settings)
    """
    settings = settings or get_settings()

    adapter = LangGraphReasoningAdapter(
        model or build_chat_model(settings),
        local_tools=LOCAL_TOOLS,
        mcp_config=load_mcp_servers(settings),
        checkpointer=build_checkpointer(),
        recursion_limit=settings.executor.recursion_limit,
    )
    await adapter.initialize()

    executor = ReactAgentExecutor(
        adapter,
        serialize_conversations=settings.executor.serialize_conversations,
    )
    LOGGER.info("ReactAgentExecutor ready")
    return executor
