"""Tools available to the ReAct agent."""

from .local import LOCAL_TOOLS, calculator, get_current_time
from .mcp import MCPServerManager, ToolDiscovery, discover_tools, load_mcp_config

__all__ = [
    "LOCAL_TOOLS",
    "MCPServerManager",
    "ToolDiscovery",
    "calculator",
    "discover_tools",
    "get_current_time",
    "load_mcp_config",
]
