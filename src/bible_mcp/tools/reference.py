"""bible_reference tool — book and chapter listings."""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from bible_mcp.bible_client import BibleAPIClient
from bible_mcp.protocol import ToolResult, tool_result
from bible_mcp.registry import REFERENCE_TOOL, ReferenceAction
from bible_mcp.tools.base import ToolOptions, dispatch_action

INTRO_CHAPTER = "intro"


class ReferenceOptions(ToolOptions):
    action: ReferenceAction
    book_id: str | None = None

    @field_validator("book_id")
    @classmethod
    def _upper_book(cls, value: str | None) -> str | None:
        return value.upper() if value is not None else None


async def _list_books(options: ReferenceOptions, client: BibleAPIClient) -> ToolResult:
    books = await client.get_books()
    if not books:
        return tool_result("No books found")

    lines = ["**Bible Books:**", ""]
    for book in books:
        line = f"• **{book.name}** ({book.abbreviation})"
        if options.detailed:
            line += f" - ID: {book.id}"
        lines.append(line)
    return tool_result("\n".join(lines))


async def _list_chapters(
    options: ReferenceOptions, client: BibleAPIClient
) -> ToolResult:
    book_id = options.book_id
    chapters = await client.get_chapters(book_id)
    if not chapters:
        return tool_result(f"No chapters found for book: {book_id}")

    lines = [f"**Chapters in {book_id}:**", ""]
    for chapter in chapters:
        if chapter.number == INTRO_CHAPTER:
            continue
        line = f"• Chapter {chapter.number}"
        if options.detailed:
            line += f" - {chapter.reference}"
        lines.append(line)
    return tool_result("\n".join(lines).strip())


ACTIONS = {
    ReferenceAction.list_books: _list_books,
    ReferenceAction.list_chapters: _list_chapters,
}


async def call_reference_tool(
    arguments: dict[str, Any], client: BibleAPIClient
) -> ToolResult:
    """Run one ``bible_reference`` invocation."""
    return await dispatch_action(
        REFERENCE_TOOL, arguments, client, ReferenceOptions, ACTIONS
    )
