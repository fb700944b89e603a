"""MCP (Model Context Protocol) integration for reactAgent."""

from .loader import ToolDiscovery, discover_mcp_tools, discover_tools, load_mcp_config
from .manager import MCPServerManager
from .wrapper import MCPToolWrapper

__all__ = [
    "MCPServerManager",
    "MCPToolWrapper",
    "ToolDiscovery",
    "discover_mcp_tools",
    "discover_tools",
    "load_mcp_config",
]
