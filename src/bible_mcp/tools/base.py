"""Pieces shared by the tool handlers: option resolution and text shaping."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import BaseModel, ValidationError, field_validator

from bible_mcp.bible_client import BibleAPIClient, BibleAPIError
from bible_mcp.protocol import ToolResult, tool_error
from bible_mcp.registry import ResponseFormat, ToolDefinition

logger = logging.getLogger(__name__)

MAX_VERSE_LENGTH_CONCISE = 100

OptionsT = TypeVar("OptionsT", bound="ToolOptions")
ToolHandler = Callable[[dict[str, Any], BibleAPIClient], Awaitable[ToolResult]]


class ToolOptions(BaseModel):
    """Fully-resolved arguments of one tool invocation."""

    action: Any = None  # narrowed to the tool's action enum by subclasses
    response_format: ResponseFormat = ResponseFormat.concise

    @field_validator("response_format", mode="before")
    @classmethod
    def _lenient_format(cls, value: Any) -> ResponseFormat:
        # Anything other than "detailed" falls back to concise.
        if value == ResponseFormat.detailed.value:
            return ResponseFormat.detailed
        return ResponseFormat.concise

    @property
    def detailed(self) -> bool:
        return self.response_format is ResponseFormat.detailed


class UsageError(Exception):
    """A tool was called with arguments it cannot act on."""


def truncate(text: str, max_len: int = MAX_VERSE_LENGTH_CONCISE) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len].strip() + "..."


def join_choices(choices: list[str]) -> str:
    """'a, b, or c' / 'a or b'."""
    if len(choices) <= 2:
        return " or ".join(choices)
    return ", ".join(choices[:-1]) + ", or " + choices[-1]


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_options(
    tool: ToolDefinition,
    arguments: dict[str, Any],
    options_type: type[OptionsT],
) -> OptionsT:
    """Validate the action, its required arguments and their types.

    Raises UsageError with a message meant for the calling agent.
    """
    raw_action = arguments.get("action")
    try:
        action = tool.actions(raw_action)
    except ValueError:
        raise UsageError(
            f"Unknown action: {raw_action}. Use {join_choices(tool.action_names())}."
        ) from None

    missing = [name for name in tool.required_for(action) if _is_missing(arguments.get(name))]
    if missing:
        raise UsageError(f"{action.value} action requires {' and '.join(missing)}")

    try:
        return options_type.model_validate({**arguments, "action": action})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise UsageError(f"Invalid arguments: {problems}") from e


async def dispatch_action(
    tool: ToolDefinition,
    arguments: dict[str, Any],
    client: BibleAPIClient,
    options_type: type[OptionsT],
    actions: dict[Enum, Callable[[OptionsT, BibleAPIClient], Awaitable[ToolResult]]],
) -> ToolResult:
    """Resolve options, then run the handler registered for the action.

    Usage errors and provider failures become ``isError`` tool results;
    anything else propagates to the caller.
    """
    try:
        options = resolve_options(tool, arguments, options_type)
    except UsageError as e:
        return tool_error(str(e))

    handler = actions[options.action]
    try:
        return await handler(options, client)
    except BibleAPIError as e:
        logger.warning("%s/%s failed: %s", tool.name, options.action.value, e)
        return tool_error(f"Error: {e}")
