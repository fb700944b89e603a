"""Runtime assembly helpers."""

from .app import build_chat_model, build_executor, load_mcp_servers

__all__ = ["build_chat_model", "build_executor", "load_mcp_servers"]
