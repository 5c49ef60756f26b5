"""An in-process MCP server that routes JSON-RPC tool calls to Python callables."""

from __future__ import annotations

import dataclasses
import json
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Callable

from agentsdk.protocol import ErrorCode, Response, error_response, success_response

PROTOCOL_VERSION = "0.1.0"


@dataclass
class McpTool:
    """A tool exposed by an SDK MCP server.

    ``handler`` receives the call's arguments and returns the tool result,
    which must be JSON-serializable (dataclasses are converted to dicts).
    """

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Callable[[dict[str, Any]], Any]

    def execute(self, arguments: dict[str, Any]) -> Any:
        """Run the tool with the given arguments."""
        return self.handler(arguments)


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"object of type {type(obj).__name__} is not JSON serializable")


def _normalize(result: Any) -> Any:
    """Round-trip through JSON so the result holds only plain JSON values."""
    try:
        return json.loads(json.dumps(result, default=_json_default))
    except (TypeError, ValueError):
        return result


def _response_to_dict(resp: Response) -> dict[str, Any]:
    out: dict[str, Any] = {"jsonrpc": resp.jsonrpc, "id": resp.id}
    if resp.error is not None:
        out["error"] = resp.error.to_dict()
    elif resp.result is not None:
        out["result"] = _normalize(resp.result)
    return out


class SdkMcpServer:
    """Handles MCP ``initialize``, ``tools/list`` and ``tools/call`` messages."""

    def __init__(self, name: str, version: str, tools: Iterable[McpTool] = ()) -> None:
        self.name = name
        self.version = version
        self._lock = threading.RLock()
        self._tools: list[McpTool] = list(tools)
        self._by_name: dict[str, McpTool] = {tool.name: tool for tool in self._tools}

    def tools(self) -> list[McpTool]:
        """Return the registered tools in registration order."""
        with self._lock:
            return list(self._tools)

    def add_tool(self, tool: McpTool) -> None:
        """Register a tool; raises ValueError if the name is taken."""
        with self._lock:
            if tool.name in self._by_name:
                raise ValueError(f"tool already exists: {tool.name}")
            self._tools.append(tool)
            self._by_name[tool.name] = tool

    def remove_tool(self, name: str) -> None:
        """Unregister a tool; raises KeyError if it is not registered."""
        with self._lock:
            if name not in self._by_name:
                raise KeyError(f"tool not found: {name}")
            del self._by_name[name]
            self._tools = [tool for tool in self._tools if tool.name != name]

    def handle_message(self, msg: dict[str, Any]) -> dict[str, Any]:
        """Process one JSON-RPC message and return the response as a dict.

        Raises ValueError when the message has no string ``method``.
        """
        method = msg.get("method")
        if not isinstance(method, str):
            raise ValueError("missing or invalid method field")
        handlers = {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
        }
        handler = handlers.get(method)
        if handler is None:
            resp = error_response(
                msg.get("id"), ErrorCode.METHOD_NOT_FOUND, f"method not found: {method}"
            )
        else:
            resp = handler(msg)
        return _response_to_dict(resp)

    def _handle_initialize(self, msg: dict[str, Any]) -> Response:
        return success_response(
            msg.get("id"),
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": self.name, "version": self.version},
            },
        )

    def _handle_tools_list(self, msg: dict[str, Any]) -> Response:
        tool_list = [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.input_schema,
            }
            for tool in self.tools()
        ]
        return success_response(msg.get("id"), {"tools": tool_list})

    def _handle_tools_call(self, msg: dict[str, Any]) -> Response:
        request_id = msg.get("id")
        params = msg.get("params")
        if not isinstance(params, dict):
            return error_response(request_id, ErrorCode.INVALID_PARAMS, "missing or invalid params")
        name = params.get("name")
        if not isinstance(name, str):
            return error_response(
                request_id, ErrorCode.INVALID_PARAMS, "missing or invalid tool name"
            )
        with self._lock:
            tool = self._by_name.get(name)
        if tool is None:
            return error_response(
                request_id, ErrorCode.METHOD_NOT_FOUND, f"tool not found: {name}"
            )
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            return error_response(
                request_id, ErrorCode.INVALID_PARAMS, "missing or invalid arguments"
            )
        try:
            result = tool.execute(arguments)
        except Exception as exc:  # a failing tool becomes a JSON-RPC error
            return error_response(
                request_id, ErrorCode.INTERNAL_ERROR, f"tool execution failed: {exc}"
            )
        return success_response(request_id, result)


@dataclass
class ToolServerConfig:
    """Configuration entry for an in-process SDK MCP server."""

    name: str
    version: str = ""
    instance: SdkMcpServer | None = None
    type: str = field(default="sdk", init=False)


def create_sdk_mcp_server(
    name: str, version: str, tools: Iterable[McpTool] = ()
) -> ToolServerConfig:
    """Build a server config holding a new SdkMcpServer with ``tools``."""
    return ToolServerConfig(
        name=name, version=version, instance=SdkMcpServer(name, version, tools)
    )