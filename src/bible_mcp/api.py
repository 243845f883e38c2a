"""FastAPI HTTP layer wrapping the JSON-RPC dispatcher.

POST /sse carries unary JSON-RPC calls; GET /sse holds an event stream open
with keep-alive comments for clients that expect one.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse

from bible_mcp import __version__
from bible_mcp.bible_client import BibleAPIClient
from bible_mcp.config import ConfigError, Settings
from bible_mcp.dispatcher import handle_request

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

KEEPALIVE_COMMENT = ": keepalive\n\n"
ALLOWED_METHODS = ["GET", "POST", "OPTIONS", "PUT", "DELETE"]
ALLOWED_HEADERS = [
    "Content-Type",
    "Authorization",
    "Accept",
    "Cache-Control",
    "X-Requested-With",
]


async def keepalive_stream(request: Request, interval: float) -> AsyncIterator[str]:
    """Yield an SSE comment every ``interval`` seconds until the client leaves."""
    while True:
        await asyncio.sleep(interval)
        if await request.is_disconnected():
            logger.debug("SSE client disconnected")
            break
        yield KEEPALIVE_COMMENT


def get_client(request: Request) -> BibleAPIClient:
    return request.app.state.client


def create_app(
    settings: Settings | None = None, client: BibleAPIClient | None = None
) -> FastAPI:
    """Build the app. Without a client, one is made from settings at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.client is None:
            app.state.client = BibleAPIClient(settings or Settings.from_env())
        logger.info("Serving Bible %s", app.state.client.bible_id)
        yield

    app = FastAPI(
        title="Bible MCP Server",
        description="Bible text tools over JSON-RPC, backed by API.Bible",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.client = client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        max_age=86400,
    )

    @app.get("/", response_class=PlainTextResponse)
    def index():
        return "Bible MCP Server"

    @app.get("/health", response_class=PlainTextResponse)
    def health():
        """Unauthenticated health check."""
        return "OK"

    @app.get("/sse")
    async def sse(request: Request, client: BibleAPIClient = Depends(get_client)):
        """Open an event stream; requests arrive separately via POST /sse."""
        return StreamingResponse(
            keepalive_stream(request, client.settings.keepalive_seconds),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )

    @app.post("/sse")
    async def rpc(request: Request, client: BibleAPIClient = Depends(get_client)):
        """One JSON-RPC call. Always HTTP 200; failures live in the body."""
        body = await request.body()
        return JSONResponse(await handle_request(body, client))

    @app.api_route("/sse", methods=["PUT", "DELETE", "PATCH"])
    def sse_method_not_allowed():
        return PlainTextResponse(
            "Method Not Allowed",
            status_code=405,
            headers={"Allow": "GET, POST, OPTIONS"},
        )

    @app.options("/{path:path}")
    def preflight(path: str):
        return Response(status_code=200)

    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logger.error("%s", e)
        raise SystemExit(1)

    uvicorn.run(create_app(settings=settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
