"""MCP Server — Bible text tools on the official MCP SDK.

Registers the same two tools the JSON-RPC dispatcher serves:
- bible_content    (search, verse, passage, chapter)
- bible_reference  (list_books, list_chapters)

Descriptions come from the tool registry and the bodies call the shared
action handlers, so both transports behave identically.
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from bible_mcp.bible_client import BibleAPIClient
from bible_mcp.config import ConfigError, Settings
from bible_mcp.dispatcher import SERVER_NAME
from bible_mcp.protocol import ToolResult
from bible_mcp.registry import (
    CONTENT_TOOL,
    DEFAULT_SEARCH_LIMIT,
    REFERENCE_TOOL,
    ContentAction,
    ReferenceAction,
    ResponseFormat,
)
from bible_mcp.tools.content import call_content_tool
from bible_mcp.tools.reference import call_reference_tool

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

mcp = FastMCP(SERVER_NAME)


def _arguments(**kwargs: Any) -> dict[str, Any]:
    """Drop unset arguments and unwrap enums into their wire values."""
    arguments = {}
    for name, value in kwargs.items():
        if value is None:
            continue
        arguments[name] = value.value if hasattr(value, "value") else value
    return arguments


def _unwrap(result: ToolResult) -> str:
    if result.is_error:
        raise ToolError(result.text)
    return result.text


def register(mcp: FastMCP, client: BibleAPIClient) -> None:
    @mcp.tool(name=CONTENT_TOOL.name, description=CONTENT_TOOL.description)
    async def bible_content(
        action: ContentAction,
        query: str | None = None,
        verse_id: str | None = None,
        passage_id: str | None = None,
        book_id: str | None = None,
        chapter: int | None = None,
        limit: float = DEFAULT_SEARCH_LIMIT,
        response_format: ResponseFormat = ResponseFormat.concise,
    ) -> str:
        result = await call_content_tool(
            _arguments(
                action=action,
                query=query,
                verse_id=verse_id,
                passage_id=passage_id,
                book_id=book_id,
                chapter=chapter,
                limit=limit,
                response_format=response_format,
            ),
            client,
        )
        return _unwrap(result)

    @mcp.tool(name=REFERENCE_TOOL.name, description=REFERENCE_TOOL.description)
    async def bible_reference(
        action: ReferenceAction,
        book_id: str | None = None,
        response_format: ResponseFormat = ResponseFormat.concise,
    ) -> str:
        result = await call_reference_tool(
            _arguments(action=action, book_id=book_id, response_format=response_format),
            client,
        )
        return _unwrap(result)


# ============================================================================
# Entry point
# ============================================================================


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="bible-mcp",
        description="Serve API.Bible text as MCP tools (stdio unless a port is given)",
    )
    network = parser.add_mutually_exclusive_group()
    network.add_argument(
        "--sse",
        dest="sse_port",
        type=int,
        metavar="PORT",
        help="serve the SSE transport on PORT",
    )
    network.add_argument(
        "--http",
        dest="http_port",
        type=int,
        metavar="PORT",
        help="serve the Streamable HTTP transport on PORT",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None):
    """Run the MCP server against the configured Bible."""
    args = _parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logger.error("%s", e)
        raise SystemExit(1)

    register(mcp, BibleAPIClient(settings))

    transport, port = "stdio", None
    if args.sse_port:
        transport, port = "sse", args.sse_port
    elif args.http_port:
        transport, port = "streamable-http", args.http_port

    if port is not None:
        mcp.settings.host = "0.0.0.0"
        mcp.settings.port = port
    logger.info("Serving Bible %s over %s", settings.bible_id, transport)
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
