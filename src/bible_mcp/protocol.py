"""JSON-RPC 2.0 envelopes and MCP tool-result shapes."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = Any  # str | int | None in practice; echoed as received


class JsonRpcError(Exception):
    """Base for protocol-level failures; carries the JSON-RPC error code."""

    code = INTERNAL_ERROR

    def __init__(self, message: str, request_id: RequestId = None) -> None:
        super().__init__(message)
        self.message = message
        self.request_id = request_id


class ParseError(JsonRpcError):
    code = PARSE_ERROR


class InvalidRequest(JsonRpcError):
    code = INVALID_REQUEST


class MethodNotFound(JsonRpcError):
    code = METHOD_NOT_FOUND


class InvalidParams(JsonRpcError):
    code = INVALID_PARAMS


class InternalError(JsonRpcError):
    code = INTERNAL_ERROR


# --- Envelopes ---


class ErrorObject(BaseModel):
    code: int
    message: str


class SuccessResponse(BaseModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: Any = None  # echoed verbatim
    result: Any


class ErrorResponse(BaseModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: Any = None  # echoed verbatim
    error: ErrorObject


def success(request_id: RequestId, result: Any) -> dict[str, Any]:
    return SuccessResponse(id=request_id, result=result).model_dump()


def failure(request_id: RequestId, code: int, message: str) -> dict[str, Any]:
    return ErrorResponse(
        id=request_id, error=ErrorObject(code=code, message=message)
    ).model_dump()


# --- Tool results ---


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result of a ``tools/call``; ``isError`` marks tool-level failures."""

    content: list[TextContent] = Field(default_factory=list)
    isError: bool | None = None

    @property
    def text(self) -> str:
        return "\n".join(c.text for c in self.content)

    @property
    def is_error(self) -> bool:
        return bool(self.isError)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


def tool_result(text: str) -> ToolResult:
    return ToolResult(content=[TextContent(text=text)])


def tool_error(text: str) -> ToolResult:
    return ToolResult(content=[TextContent(text=text)], isError=True)
