"""Configuration loader and tool discovery for MCP integration."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import yaml
from langchain_core.tools import BaseTool

from .manager import MCPServerManager
from .wrapper import MCPToolWrapper

LOGGER = logging.getLogger(__name__)


@dataclass
class ToolDiscovery:
    """Outcome of assembling the agent's tool set at startup.

    `degraded_reason` is set when remote discovery failed and only the
    local tools are available.
    """

    tools: List[BaseTool] = field(default_factory=list)
    degraded_reason: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.degraded_reason is not None

    @property
    def tool_names(self) -> List[str]:
        return [t.name for t in self.tools]


def load_mcp_config(config_path: Path) -> dict:
    """
    Load MCP configuration from YAML file.

    Args:
        config_path: Path to mcp_servers.yaml

    Returns:
        Configuration dictionary with `servers` and `settings` keys

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"MCP config not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if not config:
        return {"servers": {}, "settings": {}}

    config.setdefault("servers", {})
    config.setdefault("settings", {})
    return config


async def discover_mcp_tools(config: dict, manager: MCPServerManager) -> List[MCPToolWrapper]:
    """
    Start every configured server and wrap the tools it lists.

    Raises whatever the first failing server raises; callers decide how to
    degrade.
    """
    tools = []
    servers = config.get("servers") or {}

    for server_id in manager.list_configured_servers():
        tools_config = servers.get(server_id, {}).get("tools") or {}
        connection = await manager.get_server(server_id)

        for mcp_tool in await connection.list_tools():
            tool_cfg = tools_config.get(mcp_tool.name, {})
            if not tool_cfg.get("enabled", True):
                LOGGER.debug(f"    Skipping disabled tool: {server_id}.{mcp_tool.name}")
                continue

            final_name = _resolve_tool_name(server_id, mcp_tool.name, tool_cfg)
            description = (
                tool_cfg.get("description")
                or mcp_tool.description
                or f"MCP tool '{mcp_tool.name}' from server '{server_id}'"
            )

            tools.append(
                MCPToolWrapper(
                    server_id=server_id,
                    tool_name=final_name,
                    original_tool_name=mcp_tool.name,
                    description=description,
                    manager=manager,
                    input_schema=mcp_tool.inputSchema,
                )
            )
            LOGGER.info(f"    ✓ Discovered MCP tool: {final_name} (server: {server_id})")

    return tools


async def discover_tools(
    local_tools: Sequence[BaseTool],
    config: dict,
    manager: MCPServerManager,
) -> ToolDiscovery:
    """
    Merge the local tools with the tools discovered on MCP servers.

    Any discovery failure falls back to the local tools only; started
    servers are shut down again.
    """
    try:
        remote_tools = await discover_mcp_tools(config, manager)
    except Exception as e:
        LOGGER.warning(f"MCP tool discovery failed, continuing with local tools only: {e}")
        started = manager.list_started_servers()
        if started:
            LOGGER.info(f"Stopping MCP servers started before the failure: {started}")
        await manager.shutdown()
        return ToolDiscovery(tools=list(local_tools), degraded_reason=str(e) or type(e).__name__)

    tools = list(local_tools)
    names = {t.name for t in tools}
    for remote in remote_tools:
        if remote.name in names:
            LOGGER.warning(f"  ✗ MCP tool name conflicts with an existing tool, skipped: {remote.name}")
            continue
        names.add(remote.name)
        tools.append(remote)

    LOGGER.info(
        f"Assembled {len(tools)} tools ({len(local_tools)} local, {len(tools) - len(local_tools)} MCP)"
    )
    return ToolDiscovery(tools=tools)


def _resolve_tool_name(server_id: str, tool_name: str, tool_cfg: dict) -> str:
    """
    Determine the name exposed to the model.

    A configured alias wins; otherwise the name is prefixed with the server
    so tools from different servers cannot collide.
    """
    if "alias" in tool_cfg:
        return tool_cfg["alias"]
    return f"mcp__{server_id}__{tool_name}"
