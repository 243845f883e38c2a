"""JSON-RPC dispatcher for the MCP methods this server answers.

``handle_request`` takes one request body (already-decoded JSON, or raw
bytes/str) and always returns a response envelope: errors are encoded in
the body, never raised.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from bible_mcp import __version__
from bible_mcp.bible_client import BibleAPIClient
from bible_mcp.protocol import (
    JSONRPC_VERSION,
    PROTOCOL_VERSION,
    InternalError,
    InvalidParams,
    InvalidRequest,
    JsonRpcError,
    MethodNotFound,
    ParseError,
    failure,
    success,
)
from bible_mcp.registry import CONTENT_TOOL, REFERENCE_TOOL, list_tools
from bible_mcp.tools.base import ToolHandler
from bible_mcp.tools.content import call_content_tool
from bible_mcp.tools.reference import call_reference_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "bible-server"

TOOL_HANDLERS: dict[str, ToolHandler] = {
    CONTENT_TOOL.name: call_content_tool,
    REFERENCE_TOOL.name: call_reference_tool,
}


def _decode(body: Any) -> Any:
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Parse error: {e}") from e
    if isinstance(body, str):
        if not body.strip():
            raise ParseError("Parse error: empty request body")
        try:
            body = json.loads(body)
        except RecursionError as e:
            raise ParseError("Parse error: request nested too deeply") from e
        except ValueError as e:
            raise ParseError(f"Parse error: {e}") from e
    if body is None:
        raise ParseError("Parse error: empty request body")
    return body


def _initialize() -> dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "serverInfo": {"name": SERVER_NAME, "version": __version__},
    }


async def _call_tool(
    params: Any, request_id: Any, client: BibleAPIClient
) -> dict[str, Any]:
    if not isinstance(params, dict):
        raise InvalidParams("Invalid params: missing tool name", request_id)
    name = params.get("name")
    if not isinstance(name, str) or not name.strip():
        raise InvalidParams("Invalid params: missing tool name", request_id)

    arguments = params.get("arguments") or {}
    if not isinstance(arguments, dict):
        raise InvalidParams("Invalid params: arguments must be an object", request_id)

    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        raise MethodNotFound(f"Unknown tool: {name}", request_id)

    logger.debug("tools/call %s %s", name, arguments)
    try:
        result = await handler(arguments, client)
    except Exception as e:
        logger.error("Tool %s crashed: %s", name, e, exc_info=True)
        raise InternalError(f"Tool execution error: {e}", request_id) from e
    return result.to_dict()


async def _dispatch(body: Any, client: BibleAPIClient) -> dict[str, Any]:
    body = _decode(body)
    if not isinstance(body, dict):
        raise InvalidRequest("Invalid Request: expected a JSON object")

    request_id = body.get("id")
    # A missing version tag is accepted; a wrong one is not.
    version = body.get("jsonrpc")
    if version is not None and version != JSONRPC_VERSION:
        raise InvalidRequest("Invalid Request: invalid jsonrpc version", request_id)

    method = body.get("method")
    if not method:
        raise InvalidRequest("Invalid Request: missing method", request_id)

    if method == "initialize":
        return success(request_id, _initialize())
    if method == "tools/list":
        return success(request_id, {"tools": list_tools()})
    if method == "tools/call":
        result = await _call_tool(body.get("params"), request_id, client)
        return success(request_id, result)
    raise MethodNotFound(f"Unknown method: {method}", request_id)


async def handle_request(body: Any, client: BibleAPIClient) -> dict[str, Any]:
    """Handle one JSON-RPC request and return exactly one response envelope."""
    try:
        return await _dispatch(body, client)
    except JsonRpcError as e:
        logger.info("JSON-RPC error %s: %s", e.code, e.message)
        return failure(e.request_id, e.code, e.message)
