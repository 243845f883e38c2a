"""Async client for the API.Bible REST service.

Every call opens its own ``httpx.AsyncClient`` so that nothing outlives a
single request. A ``transport`` can be injected (``httpx.MockTransport`` in
tests).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from bible_mcp.config import Settings
from bible_mcp.models import Book, Chapter, Passage, SearchResult, Verse

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Flags sent with every verse/passage fetch unless overridden.
DEFAULT_CONTENT_FLAGS = {
    "include-notes": False,
    "include-titles": False,
    "include-chapter-numbers": False,
    "include-verse-numbers": False,
    "include-verse-spans": False,
    "use-org-id": False,
}


class ContentType(str, Enum):
    text = "text"  # flat string
    json = "json"  # nested node tree


class BibleAPIError(Exception):
    """Raised when API.Bible cannot be reached or answers with an error status.

    Also raised for payloads that do not fit the expected shape.
    """


def _encode(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning("Unexpected %s payload: %s", model.__name__, e)
        raise BibleAPIError(f"Bible API returned an unexpected payload: {e}") from e


def _parse_list(model: type[ModelT], data: Any) -> list[ModelT]:
    if not isinstance(data, list):
        raise BibleAPIError(
            f"Bible API returned an unexpected payload: expected a list of {model.__name__}"
        )
    return [_parse(model, item) for item in data]


class BibleAPIClient:
    """Fetches books, chapters, verses, passages and search results for one Bible."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    @property
    def bible_id(self) -> str:
        return self.settings.bible_id

    async def _request(
        self, endpoint: str, params: dict[str, Any] | None = None
    ) -> Any:
        """GET an endpoint and return the payload's ``data`` member (or None)."""
        url = f"{self.settings.base_url}/{endpoint}"
        query = {k: _encode(v) for k, v in (params or {}).items()}
        headers = {"api-key": self.settings.api_key, "Accept": "application/json"}

        logger.debug("GET %s %s", url, query)
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=self.settings.timeout
            ) as client:
                response = await client.get(url, params=query, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Bible API request to %s failed: %s", url, e)
            raise BibleAPIError(f"Bible API request failed: {e}") from e

        if not response.is_success:
            logger.warning(
                "Bible API returned %s for %s", response.status_code, url
            )
            raise BibleAPIError(
                f"Bible API request failed: {response.status_code} "
                f"{response.reason_phrase}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise BibleAPIError(f"Bible API returned invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            return None
        return payload.get("data")

    @staticmethod
    def _content_params(
        content_type: ContentType, include_verse_numbers: bool, **flags: bool
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"content-type": content_type.value}
        params.update(DEFAULT_CONTENT_FLAGS)
        params["include-verse-numbers"] = include_verse_numbers
        for name, value in flags.items():
            params[name.replace("_", "-")] = value
        return params

    async def get_books(self) -> list[Book] | None:
        data = await self._request(f"bibles/{self.bible_id}/books")
        if data is None:
            return None
        return _parse_list(Book, data)

    async def get_chapters(self, book_id: str) -> list[Chapter] | None:
        data = await self._request(f"bibles/{self.bible_id}/books/{book_id}/chapters")
        if data is None:
            return None
        return _parse_list(Chapter, data)

    async def get_verse(
        self,
        verse_id: str,
        content_type: ContentType = ContentType.text,
        include_verse_numbers: bool = False,
        **flags: bool,
    ) -> Verse | None:
        """Fetch one verse by ``BOOK.CHAPTER.VERSE`` id.

        Extra keyword flags (e.g. ``include_titles=True``) override the
        defaults in DEFAULT_CONTENT_FLAGS.
        """
        params = self._content_params(content_type, include_verse_numbers, **flags)
        data = await self._request(f"bibles/{self.bible_id}/verses/{verse_id}", params)
        if data is None:
            return None
        return _parse(Verse, data)

    async def get_passage(
        self,
        passage_id: str,
        content_type: ContentType = ContentType.json,
        include_verse_numbers: bool = False,
        **flags: bool,
    ) -> Passage | None:
        """Fetch a passage (``GEN.1.1-GEN.1.5``) or a whole chapter (``GEN.1``)."""
        params = self._content_params(content_type, include_verse_numbers, **flags)
        data = await self._request(
            f"bibles/{self.bible_id}/passages/{passage_id}", params
        )
        if data is None:
            return None
        return _parse(Passage, data)

    async def search(self, query: str, limit: int = 10) -> SearchResult | None:
        """Full-text search, sorted by relevance with fuzzy matching."""
        params = {
            "query": query,
            "limit": limit,
            "sort": "relevance",
            "fuzziness": "AUTO",
        }
        data = await self._request(f"bibles/{self.bible_id}/search", params)
        if data is None:
            return None
        return _parse(SearchResult, data)
