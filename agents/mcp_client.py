"""
JSON-RPC over HTTP client for the MCP search server.

The Tavily deployment (and `mcp_servers.local_tavily_server`) exposes
``list_tools`` and ``call_tool`` as JSON-RPC 2.0 methods on a single HTTP
endpoint. The tool catalogue is fetched lazily on the first call.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class MCPRPCError(RuntimeError):
    """Raised when the MCP server responds with a JSON-RPC error."""

    def __init__(self, *, code: int, message: str, data: Any | None = None) -> None:
        super().__init__(f"MCP RPC error {code}: {message}")
        self.code = code
        self.data = data


@dataclass(slots=True)
class MCPServerConfig:
    """Connection details for an MCP server exposed via JSON-RPC over HTTP."""

    base_url: str
    api_key: Optional[str] = None
    tool_name: Optional[str] = None
    request_timeout: int = 60


class MCPToolClient:
    def __init__(self, *, config: MCPServerConfig, session: Optional[requests.Session] = None) -> None:
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._session = session or requests.Session()
        headers = {
            "Accept": "application/json, application/*+json, text/event-stream",
            "Content-Type": "application/json",
            "User-Agent": "ResearchPlannerAgent/0.1",
        }
        if config.api_key:
            headers["Authorization"] = f"Bearer {config.api_key}"
        self._session.headers.update(headers)
        self._tools: Optional[Dict[str, Dict[str, Any]]] = None

    def list_tools(self) -> List[Dict[str, Any]]:
        if self._tools is None:
            logger.info("Fetching MCP tool catalogue from %s", self._base_url)
            result = self._json_rpc("list_tools", params={})
            tools = result.get("tools", []) if isinstance(result, dict) else result or []
            self._tools = {tool["name"]: tool for tool in tools}
            if not self._tools:
                logger.warning("No tools discovered from MCP server at %s", self._base_url)
        return list(self._tools.values())

    def call_tool(self, *, tool_name: Optional[str] = None, **arguments: Any) -> Dict[str, Any]:
        target = tool_name or self._config.tool_name
        if not target:
            raise ValueError("Tool name must be provided when no default is configured.")
        known = {tool["name"] for tool in self.list_tools()}
        if target not in known:
            logger.warning("Tool '%s' not present in cached catalogue; invoking anyway.", target)

        logger.info("Invoking MCP tool '%s'", target)
        result = self._json_rpc("call_tool", params={"name": target, "arguments": arguments})
        return result if isinstance(result, dict) else {"result": result}

    def _json_rpc(self, method: str, params: Optional[Dict[str, Any]]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": str(uuid.uuid4()),
            "method": method,
            "params": params or {},
        }
        logger.debug("JSON-RPC request payload: %s", payload)
        response = self._session.post(self._base_url, json=payload, timeout=self._config.request_timeout)
        if response.status_code >= 400:
            logger.error("JSON-RPC HTTP error %s: %s", response.status_code, response.text)
            response.raise_for_status()
        data = response.json()
        logger.debug("JSON-RPC response payload: %s", data)

        error = data.get("error")
        if error is not None:
            raise MCPRPCError(
                code=error.get("code", -32000),
                message=error.get("message", "Unknown error"),
                data=error.get("data"),
            )
        return data.get("result")
