"""LangChain tool exposing one tool of an MCP server."""

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from langchain_core.tools import BaseTool
from pydantic import ConfigDict, Field

if TYPE_CHECKING:
    from .manager import MCPServerManager

LOGGER = logging.getLogger(__name__)


class MCPToolWrapper(BaseTool):
    """
    Tool discovered on an MCP server, callable from the ReAct graph.

    `name` is what the model sees (prefixed or aliased); calls are routed to
    `original_tool_name` on `server_id`. The server's JSON schema is used as
    the argument schema. Failures come back to the model as text so the
    graph keeps running.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    server_id: str
    original_tool_name: str
    manager: Any = Field(exclude=True)

    def __init__(
        self,
        server_id: str,
        tool_name: str,
        original_tool_name: str,
        description: str,
        manager: "MCPServerManager",
        input_schema: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            name=tool_name,
            description=description,
            args_schema=input_schema or None,
            server_id=server_id,
            original_tool_name=original_tool_name,
            manager=manager,
        )

    async def _arun(self, **kwargs: Any) -> str:
        LOGGER.debug(f"Calling {self.server_id}.{self.original_tool_name} as {self.name}")
        try:
            connection = await self.manager.get_server(self.server_id)
            return await connection.call_tool(self.original_tool_name, kwargs)
        except Exception as e:
            LOGGER.error(f"  ✗ MCP tool {self.name} failed on server {self.server_id}: {e}")
            return f"Error: MCP tool '{self.name}' on server '{self.server_id}' failed: {e}"

    def _run(self, **kwargs: Any) -> str:
        # Sessions are bound to the event loop that opened them
        raise NotImplementedError(f"MCP tool '{self.name}' only supports async invocation")
