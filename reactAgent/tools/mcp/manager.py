"""Lifecycle of the MCP servers declared in mcp_servers.yaml."""

import asyncio
import logging
from typing import Dict, List

from .connection import MCPConnection, create_connection

LOGGER = logging.getLogger(__name__)

DEFAULT_STARTUP_TIMEOUT = 30


class MCPServerManager:
    """
    Owns one connection per declared server.

    Servers start on first use. Each server has its own start lock, so tool
    calls arriving together share a single startup. Servers with
    `enabled: false` are never registered.
    """

    def __init__(self, config: dict):
        self.config = config
        settings = config.get("settings") or {}
        self.default_mode = settings.get("default_connection_mode", "stdio")
        self.startup_timeout = settings.get("startup_timeout", DEFAULT_STARTUP_TIMEOUT)

        self._declared: Dict[str, dict] = {}
        for server_id, server_cfg in (config.get("servers") or {}).items():
            server_cfg = server_cfg or {}
            if server_cfg.get("enabled", True):
                self._declared[server_id] = server_cfg

        self._connections: Dict[str, MCPConnection] = {}
        self._start_locks: Dict[str, asyncio.Lock] = {}

        if self._declared:
            LOGGER.debug(f"MCP servers declared: {list(self._declared)}")

    async def get_server(self, server_id: str) -> MCPConnection:
        """
        Return the started connection for `server_id`.

        Raises:
            ValueError: If the server is not declared or disabled
            RuntimeError: If the server does not come up
        """
        if server_id not in self._declared:
            raise ValueError(f"MCP server not configured: {server_id}")

        lock = self._start_locks.setdefault(server_id, asyncio.Lock())
        async with lock:
            connection = self._connections.get(server_id)
            if connection is None:
                connection = await self._start(server_id)
                self._connections[server_id] = connection
        return connection

    def _connect(self, server_id: str) -> MCPConnection:
        cfg = self._declared[server_id]
        return create_connection(
            server_id=server_id,
            command=cfg.get("command"),
            args=cfg.get("args") or [],
            env=cfg.get("env") or {},
            mode=cfg.get("connection_mode", self.default_mode),
            url=cfg.get("url"),
        )

    async def _start(self, server_id: str) -> MCPConnection:
        LOGGER.info(f"Starting MCP server: {server_id}")
        connection = self._connect(server_id)

        try:
            # The transport must be entered in the calling task
            async with asyncio.timeout(self.startup_timeout):
                await connection.start()
        except TimeoutError:
            await connection.close()
            raise RuntimeError(f"MCP server startup timeout: {server_id}") from None
        except Exception as e:
            await connection.close()
            raise RuntimeError(f"Failed to start MCP server '{server_id}': {e}") from e

        LOGGER.info(f"  ✓ MCP server started: {server_id}")
        return connection

    async def shutdown(self):
        """Close every started server; one failing close does not keep the others open."""
        started, self._connections = self._connections, {}
        if not started:
            return

        LOGGER.info(f"Shutting down {len(started)} MCP server(s)...")
        for server_id, connection in started.items():
            try:
                await connection.close()
                LOGGER.info(f"  ✓ Closed: {server_id}")
            except Exception as e:
                LOGGER.error(f"  ✗ Failed to close {server_id}: {e}")

    def list_configured_servers(self) -> List[str]:
        return list(self._declared)

    def list_started_servers(self) -> List[str]:
        return list(self._connections)
