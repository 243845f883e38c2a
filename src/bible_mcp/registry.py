"""Tool registry — declarations of every tool this server exposes.

Each ToolDefinition owns its action enum and the required arguments of each
action. The ``tools/list`` input schemas and the handlers' argument checks
are both derived from these tables.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ResponseFormat(str, Enum):
    concise = "concise"
    detailed = "detailed"


class ContentAction(str, Enum):
    search = "search"
    verse = "verse"
    passage = "passage"
    chapter = "chapter"


class ReferenceAction(str, Enum):
    list_books = "list_books"
    list_chapters = "list_chapters"


DEFAULT_SEARCH_LIMIT = 10
MIN_SEARCH_LIMIT = 1
MAX_SEARCH_LIMIT = 200


class ToolDescriptor(BaseModel):
    """What ``tools/list`` returns for one tool."""

    name: str
    title: str
    description: str
    inputSchema: dict[str, Any]


class ToolDefinition(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    title: str
    description: str
    actions: type[Enum]
    properties: dict[str, dict[str, Any]]
    response_format_description: str
    # action value -> argument names that action requires
    requirements: dict[str, tuple[str, ...]]

    def action_names(self) -> list[str]:
        return [a.value for a in self.actions]

    def required_for(self, action: Enum) -> tuple[str, ...]:
        return self.requirements.get(action.value, ())

    def input_schema(self) -> dict[str, Any]:
        properties: dict[str, Any] = {
            "action": {
                "type": "string",
                "enum": self.action_names(),
                "description": "Action to perform",
            },
        }
        properties.update(copy.deepcopy(self.properties))
        properties["response_format"] = {
            "type": "string",
            "enum": [f.value for f in ResponseFormat],
            "default": ResponseFormat.concise.value,
            "description": self.response_format_description,
        }
        schema: dict[str, Any] = {
            "type": "object",
            "properties": properties,
            "required": ["action"],
        }
        conditions = [
            {
                "if": {"properties": {"action": {"const": action}}},
                "then": {"required": list(required)},
            }
            for action, required in self.requirements.items()
            if required
        ]
        if conditions:
            schema["allOf"] = conditions
        return schema

    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=self.name,
            title=self.title,
            description=self.description,
            inputSchema=self.input_schema(),
        )


CONTENT_TOOL = ToolDefinition(
    name="bible_content",
    title="Bible Content",
    description=(
        "Read and search Bible verses. Actions: "
        "search - Find verses by text (requires query); "
        "verse - Single verse e.g. GEN.1.1 (requires verse_id); "
        "passage - Verse range e.g. GEN.1.1-GEN.1.5 (requires passage_id); "
        "chapter - Full chapter (requires book_id, chapter). "
        "Use concise (default) for summaries; use detailed for verse numbers "
        "and full context."
    ),
    actions=ContentAction,
    properties={
        "query": {
            "type": "string",
            "description": "Search query (required for search action)",
        },
        "verse_id": {
            "type": "string",
            "description": "Verse ID in format BOOK.CHAPTER.VERSE (e.g., GEN.1.1, JHN.3.16)",
        },
        "passage_id": {
            "type": "string",
            "description": "Passage ID e.g. GEN.1.1-GEN.1.5",
        },
        "book_id": {
            "type": "string",
            "description": "Book ID (e.g., GEN, EXO, MAT, JHN)",
        },
        "chapter": {
            "type": "number",
            "description": "Chapter number (required for chapter action)",
        },
        "limit": {
            "type": "number",
            "description": f"Max search results ({MIN_SEARCH_LIMIT}-{MAX_SEARCH_LIMIT})",
            "default": DEFAULT_SEARCH_LIMIT,
        },
    },
    response_format_description=(
        "concise = essential info only; detailed = full text with verse numbers"
    ),
    requirements={
        ContentAction.search.value: ("query",),
        ContentAction.verse.value: ("verse_id",),
        ContentAction.passage.value: ("passage_id",),
        ContentAction.chapter.value: ("book_id", "chapter"),
    },
)

REFERENCE_TOOL = ToolDefinition(
    name="bible_reference",
    title="Bible Reference",
    description=(
        "Navigate Bible structure. Actions: "
        "list_books - All books with names and abbreviations; "
        "list_chapters - Chapters for a book (requires book_id). "
        "Use concise for quick lookups; use detailed when you need book IDs "
        "for follow-up tool calls."
    ),
    actions=ReferenceAction,
    properties={
        "book_id": {
            "type": "string",
            "description": "Book ID (required for list_chapters, e.g., GEN, JHN)",
        },
    },
    response_format_description=(
        "concise = names/numbers only; detailed = includes IDs for follow-up calls"
    ),
    requirements={
        ReferenceAction.list_books.value: (),
        ReferenceAction.list_chapters.value: ("book_id",),
    },
)

TOOLS: tuple[ToolDefinition, ...] = (CONTENT_TOOL, REFERENCE_TOOL)


def list_tools() -> list[dict[str, Any]]:
    """Descriptors for ``tools/list``; rebuilt on every call, never mutated."""
    return [tool.descriptor().model_dump() for tool in TOOLS]

