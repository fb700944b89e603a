"""Client sessions to MCP servers over stdio or SSE."""

import logging
import os
from abc import ABC, abstractmethod
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional

LOGGER = logging.getLogger(__name__)


def resolve_env(env: Dict[str, str]) -> Dict[str, str]:
    """Merge configured variables into the current environment.

    Values written as ${NAME} are looked up in os.environ.
    """
    full_env = os.environ.copy()
    for key, value in env.items():
        if value.startswith("${") and value.endswith("}"):
            full_env[key] = os.environ.get(value[2:-1], "")
        else:
            full_env[key] = value
    return full_env


class MCPConnection(ABC):
    """Base class for MCP server connections.

    Subclasses open the transport streams; session setup, tool listing,
    tool calls and teardown are shared.
    """

    def __init__(self, server_id: str):
        self.server_id = server_id
        self._client = None
        self._stack: Optional[AsyncExitStack] = None
        self._initialized = False

    @abstractmethod
    async def _open_streams(self, stack: AsyncExitStack):
        """Enter the transport context on `stack` and return (read, write) streams."""

    async def start(self):
        """Establish the transport and initialize the MCP session."""
        from mcp import ClientSession

        stack = AsyncExitStack()
        try:
            read_stream, write_stream = await self._open_streams(stack)
            self._client = await stack.enter_async_context(ClientSession(read_stream, write_stream))
            await self._client.initialize()
        except BaseException:
            await stack.aclose()
            self._client = None
            raise

        self._stack = stack
        self._initialized = True
        LOGGER.debug(f"  ✓ MCP session established for server: {self.server_id}")

    def _require_started(self):
        if not self._initialized:
            raise RuntimeError(f"Server not initialized: {self.server_id}")

    async def list_tools(self) -> List[Any]:
        """Tools the server advertises (mcp.types.Tool)."""
        self._require_started()
        result = await self._client.list_tools()
        return result.tools

    async def call_tool(self, tool_name: str, arguments: Dict[str, Any]) -> str:
        """Call a tool and join the text content of its result."""
        self._require_started()

        LOGGER.debug(f"  Calling tool: {tool_name} on server {self.server_id}")
        result = await self._client.call_tool(tool_name, arguments)

        # Non-text content (images, resources) is dropped
        text_parts = [item.text for item in (result.content or []) if hasattr(item, "text")]
        text = "\n".join(text_parts)

        if getattr(result, "isError", False):
            raise RuntimeError(text or f"Tool '{tool_name}' failed on server '{self.server_id}'")
        return text

    async def close(self):
        """Close the session and transport."""
        if self._stack:
            try:
                await self._stack.aclose()
            except Exception as e:
                LOGGER.warning(f"  Error closing connection for {self.server_id}: {e}")
            self._stack = None

        self._client = None
        self._initialized = False
        LOGGER.debug(f"  ✓ Closed connection for server: {self.server_id}")


class StdioMCPConnection(MCPConnection):
    """MCP connection to a server process spoken to over stdin/stdout."""

    def __init__(self, server_id: str, command: str, args: List[str], env: Dict[str, str]):
        super().__init__(server_id)
        self.command = command
        self.args = args
        self.env = env

    async def _open_streams(self, stack: AsyncExitStack):
        from mcp import StdioServerParameters
        from mcp.client.stdio import stdio_client

        LOGGER.debug(f"  Starting stdio server: {self.command} {' '.join(self.args)}")
        server_params = StdioServerParameters(
            command=self.command,
            args=self.args,
            env=resolve_env(self.env),
        )
        return await stack.enter_async_context(stdio_client(server_params))


class SSEMCPConnection(MCPConnection):
    """MCP connection to an already running server over Server-Sent Events."""

    def __init__(self, server_id: str, url: Optional[str] = None):
        super().__init__(server_id)
        self.url = url or "http://localhost:8000/sse"

    async def _open_streams(self, stack: AsyncExitStack):
        from mcp.client.sse import sse_client

        LOGGER.debug(f"  Connecting to SSE server: {self.url}")
        return await stack.enter_async_context(sse_client(self.url))


def create_connection(
    server_id: str,
    command: Optional[str] = None,
    args: Optional[List[str]] = None,
    env: Optional[Dict[str, str]] = None,
    mode: str = "stdio",
    url: Optional[str] = None,
) -> MCPConnection:
    """Build the connection for a server entry of mcp_servers.yaml."""
    if mode == "stdio":
        if not command:
            raise ValueError(f"MCP server '{server_id}' needs a command in stdio mode")
        return StdioMCPConnection(server_id, command, args or [], env or {})
    elif mode == "sse":
        return SSEMCPConnection(server_id, url)
    else:
        raise ValueError(f"Unknown connection mode: {mode}")
