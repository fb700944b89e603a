"""Pytest fixtures for MCP tests."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from mcp.types import Tool


class FakeConnection:
    """Stands in for a started MCP connection."""

    def __init__(self, server_id, tools=(), results=None):
        self.server_id = server_id
        self.tools = list(tools)
        self.results = results or {}
        self.start = AsyncMock()
        self.close = AsyncMock()
        self.calls = []

    async def list_tools(self):
        return self.tools

    async def call_tool(self, tool_name, arguments):
        self.calls.append((tool_name, arguments))
        result = self.results.get(tool_name, "")
        if isinstance(result, Exception):
            raise result
        return result


def make_tool(name, description="", schema=None):
    return Tool(
        name=name,
        description=description,
        inputSchema=schema or {"type": "object", "properties": {}},
    )


@pytest.fixture
def fake_connection():
    return FakeConnection


@pytest.fixture
def mcp_tool():
    return make_tool


@pytest.fixture
def test_server_path():
    """Path to the stdio test server."""
    return Path(__file__).parent.parent / "mcp_servers" / "echo_server.py"


@pytest.fixture
def test_mcp_config(test_server_path):
    """MCP configuration with one stdio server."""
    return {
        "servers": {
            "echo": {
                "command": sys.executable,
                "args": [str(test_server_path)],
                "enabled": True,
                "env": {},
                "tools": {
                    "echo": {"alias": "echo_back"},
                    "add": {"description": "Add two numbers"},
                },
            }
        },
        "settings": {
            "startup_timeout": 30,
            "default_connection_mode": "stdio",
        },
    }
