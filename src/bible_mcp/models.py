"""Provider payload models — the shapes of API.Bible ``data`` members."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bible_mcp.content import ContentNode, coerce_content


def _none_as_empty(value: Any) -> Any:
    return "" if value is None else value


class Book(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    abbreviation: str = ""
    name_long: str = Field(default="", alias="nameLong")

    _null_strings = field_validator(
        "name", "abbreviation", "name_long", mode="before"
    )(_none_as_empty)


class Chapter(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    book_id: str = Field(default="", alias="bookId")
    number: str  # "1", "2", ... or the literal "intro"
    reference: str = ""

    _null_strings = field_validator("book_id", "reference", mode="before")(
        _none_as_empty
    )

    @field_validator("number", mode="before")
    @classmethod
    def _number_as_str(cls, value: Any) -> str:
        return str(value)


class Verse(BaseModel):
    """A verse, passage or chapter. ``content`` is text or a node tree."""

    id: str = ""
    reference: str = ""
    content: str | list[ContentNode] = ""

    _null_strings = field_validator("id", "reference", mode="before")(_none_as_empty)

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value: Any) -> str | list[ContentNode]:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return coerce_content(value)


class Passage(Verse):
    pass


class SearchVerse(BaseModel):
    id: str = ""
    reference: str = ""
    text: str = ""

    _null_strings = field_validator("id", "reference", "text", mode="before")(
        _none_as_empty
    )


class SearchResult(BaseModel):
    query: str = ""
    total: int = 0
    verses: list[SearchVerse] = Field(default_factory=list)

    _null_query = field_validator("query", mode="before")(_none_as_empty)

    @field_validator("total", mode="before")
    @classmethod
    def _total_default(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("verses", mode="before")
    @classmethod
    def _verses_default(cls, value: Any) -> Any:
        return [] if value is None else value
