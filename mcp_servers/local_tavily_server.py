"""
Local JSON-RPC MCP server that proxies web searches to the Tavily Python client.

The research search agent talks to this server when no remote MCP endpoint is
configured. Two JSON-RPC 2.0 methods are served over HTTP POST on ``/mcp``:

  - `list_tools` returns the `tavily.search` tool definition.
  - `call_tool` runs `tavily.search` with the supplied arguments.

Run it with:

    python -m mcp_servers.local_tavily_server

`TAVILY_API_KEY` must be set. The research agent defaults to
`http://127.0.0.1:6112/mcp`.
"""

from __future__ import annotations

import json
import logging
import os
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Type

from dotenv import load_dotenv
from tavily import TavilyClient

logger = logging.getLogger("local_mcp_server")

ALLOWED_ARGUMENTS = {"query", "max_results", "include_raw_content", "search_depth", "topic"}

TOOL_DEFINITION: Dict[str, Any] = {
    "name": "tavily.search",
    "description": "General-purpose Tavily web search used to answer research plan steps.",
    "input_schema": {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "Search query", "minLength": 1},
            "max_results": {"type": "integer", "minimum": 1, "maximum": 10, "default": 5},
            "include_raw_content": {"type": "boolean", "default": False},
            "search_depth": {"type": "string", "enum": ["basic", "advanced"], "default": "basic"},
        },
        "required": ["query"],
    },
}


def rpc_error(rpc_id: Any, code: int, message: str, data: Any | None = None) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message, "data": data}}


def rpc_result(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def handle_rpc(request: Dict[str, Any], tavily_client: TavilyClient) -> Dict[str, Any]:
    """Dispatch one decoded JSON-RPC request."""

    rpc_id = request.get("id")
    method = request.get("method")
    params = request.get("params") or {}

    if method == "list_tools":
        return rpc_result(rpc_id, {"tools": [TOOL_DEFINITION]})

    if method != "call_tool":
        return rpc_error(rpc_id, -32601, f"Unknown method '{method}'")

    name = params.get("name")
    if name != TOOL_DEFINITION["name"]:
        return rpc_error(rpc_id, -32601, f"Unknown tool '{name}'")

    arguments = params.get("arguments") or {}
    query = arguments.get("query")
    if not query or not isinstance(query, str):
        return rpc_error(rpc_id, -32602, "Argument 'query' is required.")

    search_kwargs = {key: value for key, value in arguments.items() if key in ALLOWED_ARGUMENTS}
    try:
        return rpc_result(rpc_id, tavily_client.search(**search_kwargs))
    except Exception as exc:  # pragma: no cover - passthrough
        logger.exception("Error while executing Tavily search.")
        return rpc_error(rpc_id, -32001, str(exc))


def make_handler(tavily_client: TavilyClient) -> Type[BaseHTTPRequestHandler]:
    class LocalMCPHandler(BaseHTTPRequestHandler):
        server_version = "ResearchMCP/0.1"
        rpc_path = "/mcp"

        def log_message(self, format: str, *args: Any) -> None:  # noqa: A003
            logger.info("%s - - %s", self.address_string(), format % args)

        def _send_json(self, payload: Dict[str, Any], status: int = 200) -> None:
            body = json.dumps(payload).encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def do_POST(self) -> None:  # noqa: N802
            if self.path.rstrip("/") != self.rpc_path:
                self.send_error(404, "Not Found")
                return
            length = int(self.headers.get("Content-Length", "0"))
            try:
                request = json.loads(self.rfile.read(length))
            except json.JSONDecodeError as exc:
                logger.error("Invalid JSON payload: %s", exc)
                self._send_json(rpc_error(None, -32700, "Invalid JSON"))
                return
            self._send_json(handle_rpc(request, tavily_client))

    return LocalMCPHandler


def run_server(host: str, port: int, tavily_client: TavilyClient) -> None:
    server = ThreadingHTTPServer((host, port), make_handler(tavily_client))
    logger.info("Local MCP server listening on http://%s:%d/mcp", host, port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:  # pragma: no cover - manual shutdown
        logger.info("Shutting down local MCP server.")
    finally:
        server.server_close()


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    load_dotenv()

    api_key = os.getenv("TAVILY_API_KEY")
    if not api_key:
        raise EnvironmentError("TAVILY_API_KEY must be set to run the local MCP server.")

    host = os.getenv("LOCAL_MCP_HOST", "127.0.0.1")
    port = int(os.getenv("LOCAL_MCP_PORT", "6112"))
    run_server(host, port, TavilyClient(api_key=api_key))


if __name__ == "__main__":
    main()
