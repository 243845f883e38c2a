"""Nested content trees returned by API.Bible with content-type=json.

A passage in JSON form is a list of nodes. Leaves carry literal text
(``{"type": "text", "text": ...}``); every other node is a tag (paragraph,
verse marker, character style...) holding an ordered ``items`` list.
Raw payloads are coerced once into the closed ``TextNode | TagNode``
variant, then flattened into plain text.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field


class TextNode(BaseModel):
    type: Literal["text"] = "text"
    text: str = ""


class TagNode(BaseModel):
    name: str = ""
    items: list[ContentNode] = Field(default_factory=list)


ContentNode = Union[TextNode, TagNode]

TagNode.model_rebuild()


def coerce_node(raw: Any) -> ContentNode | None:
    """Coerce one raw payload node; returns None for unrecognised shapes."""
    if isinstance(raw, list):
        return TagNode(items=coerce_content(raw))
    if not isinstance(raw, dict):
        return None
    if raw.get("type") == "text":
        text = raw.get("text")
        return TextNode(text=text if isinstance(text, str) else "")
    items = raw.get("items")
    if isinstance(items, list):
        name = raw.get("name")
        return TagNode(
            name=name if isinstance(name, str) else "",
            items=coerce_content(items),
        )
    return None


def coerce_content(raw: Any) -> list[ContentNode]:
    """Coerce a raw content payload (list of nodes or a single node)."""
    if isinstance(raw, list):
        nodes = (coerce_node(item) for item in raw)
        return [node for node in nodes if node is not None]
    node = coerce_node(raw)
    return [node] if node is not None else []


def flatten_node(node: ContentNode) -> str:
    """Depth-first, left-to-right concatenation of a node's text leaves."""
    if isinstance(node, TextNode):
        return node.text
    if isinstance(node, TagNode):
        return "".join(flatten_node(child) for child in node.items)
    return ""


def flatten_content(nodes: list[ContentNode]) -> str:
    """Flatten a top-level node sequence into trimmed plain text."""
    return "".join(flatten_node(node) for node in nodes).strip()
