"""bible_content tool — search, verse, passage and chapter text."""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import field_validator

from bible_mcp.bible_client import BibleAPIClient, ContentType
from bible_mcp.content import flatten_content
from bible_mcp.models import Verse
from bible_mcp.protocol import ToolResult, tool_result
from bible_mcp.registry import (
    CONTENT_TOOL,
    DEFAULT_SEARCH_LIMIT,
    MAX_SEARCH_LIMIT,
    MIN_SEARCH_LIMIT,
    ContentAction,
)
from bible_mcp.tools.base import ToolOptions, dispatch_action, truncate

logger = logging.getLogger(__name__)

CONCISE_SEARCH_RESULTS = 5


class ContentOptions(ToolOptions):
    action: ContentAction
    query: str | None = None
    verse_id: str | None = None
    passage_id: str | None = None
    book_id: str | None = None
    chapter: int | None = None
    limit: int = DEFAULT_SEARCH_LIMIT

    @field_validator("limit", mode="before")
    @classmethod
    def _limit_default(cls, value: Any) -> Any:
        if value is None:
            return DEFAULT_SEARCH_LIMIT
        if isinstance(value, float) and math.isfinite(value):
            return int(value)
        return value

    @field_validator("limit")
    @classmethod
    def _clamp_limit(cls, value: int) -> int:
        return min(max(value, MIN_SEARCH_LIMIT), MAX_SEARCH_LIMIT)

    @field_validator("book_id")
    @classmethod
    def _upper_book(cls, value: str | None) -> str | None:
        return value.upper() if value is not None else None

    @property
    def content_type(self) -> ContentType:
        """Detailed output asks for the node tree, concise for flat text."""
        return ContentType.json if self.detailed else ContentType.text


def _passage_text(passage: Verse) -> str:
    if isinstance(passage.content, str):
        return passage.content.strip()
    return flatten_content(passage.content)


async def _search(options: ContentOptions, client: BibleAPIClient) -> ToolResult:
    query = options.query
    result = await client.search(query, options.limit)
    if result is None or not result.verses:
        return tool_result(f"No verses found for query: '{query}'")

    verses = result.verses
    if options.detailed:
        shown = verses
        response = f"Found {result.total} verses for '{query}' (showing {len(shown)}):\n\n"
    else:
        shown = verses[:CONCISE_SEARCH_RESULTS]
        response = f"Found {result.total} verses for '{query}' (top {len(shown)}):\n\n"

    for verse in shown:
        text = verse.text if options.detailed else truncate(verse.text)
        response += f"**{verse.reference}**\n{text}\n\n"
    return tool_result(response.strip())


async def _verse(options: ContentOptions, client: BibleAPIClient) -> ToolResult:
    verse = await client.get_verse(
        options.verse_id, include_verse_numbers=options.detailed
    )
    if verse is None:
        return tool_result(f"Verse not found: {options.verse_id}")

    text = _passage_text(verse)
    if not options.detailed:
        text = truncate(text)
    return tool_result(f"**{verse.reference}**\n{text}")


async def _passage(options: ContentOptions, client: BibleAPIClient) -> ToolResult:
    passage = await client.get_passage(
        options.passage_id,
        content_type=options.content_type,
        include_verse_numbers=options.detailed,
    )
    if passage is None:
        return tool_result(f"Passage not found: {options.passage_id}")

    text = _passage_text(passage)
    if not options.detailed:
        text = truncate(text)
    return tool_result(f"**{passage.reference}**\n{text}")


async def _chapter(options: ContentOptions, client: BibleAPIClient) -> ToolResult:
    book_id = options.book_id
    number = str(options.chapter)

    # Chapter ids are opaque; resolve the id from the book's chapter list.
    chapters = await client.get_chapters(book_id) or []
    found = next((ch for ch in chapters if ch.number == number), None)
    if found is None:
        return tool_result(f"Chapter {options.chapter} not found in book {book_id}")

    logger.debug("Resolved %s %s to chapter id %s", book_id, number, found.id)
    passage = await client.get_passage(
        found.id,
        content_type=options.content_type,
        include_verse_numbers=options.detailed,
    )
    if passage is None:
        return tool_result(f"Chapter content not found: {book_id} {options.chapter}")
    return tool_result(f"**{passage.reference}**\n{_passage_text(passage)}")


ACTIONS = {
    ContentAction.search: _search,
    ContentAction.verse: _verse,
    ContentAction.passage: _passage,
    ContentAction.chapter: _chapter,
}


async def call_content_tool(
    arguments: dict[str, Any], client: BibleAPIClient
) -> ToolResult:
    """Run one ``bible_content`` invocation."""
    return await dispatch_action(CONTENT_TOOL, arguments, client, ContentOptions, ACTIONS)
