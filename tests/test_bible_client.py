"""Tests for the API.Bible client against a fake provider."""

import httpx
import pytest
from pydantic import ValidationError

from bible_mcp.bible_client import BibleAPIClient, BibleAPIError, ContentType
from bible_mcp.content import TagNode
from tests.data import BOOKS, GEN_1_1, PASSAGE_TREE


class TestRequests:
    async def test_sends_api_key_header(self, client: BibleAPIClient, provider):
        provider.add("books", BOOKS)
        await client.get_books()
        request = provider.requests[0]
        assert request.headers["api-key"] == "test-key"
        assert request.headers["accept"] == "application/json"
        assert str(request.url).startswith("https://api.test/v1/bibles/test-bible/books")

    async def test_verse_default_flags(self, client: BibleAPIClient, provider):
        provider.add("verses/GEN.1.1", {"id": "GEN.1.1", "reference": "Genesis 1:1", "content": GEN_1_1})
        await client.get_verse("GEN.1.1")
        params = provider.last_params
        assert params["content-type"] == "text"
        assert params["include-notes"] == "false"
        assert params["include-titles"] == "false"
        assert params["include-chapter-numbers"] == "false"
        assert params["include-verse-numbers"] == "false"
        assert params["include-verse-spans"] == "false"
        assert params["use-org-id"] == "false"

    async def test_passage_flags_override(self, client: BibleAPIClient, provider):
        provider.add("passages/GEN.1", {"id": "GEN.1", "reference": "Genesis 1", "content": PASSAGE_TREE})
        await client.get_passage(
            "GEN.1",
            content_type=ContentType.json,
            include_verse_numbers=True,
            include_titles=True,
        )
        params = provider.last_params
        assert params["content-type"] == "json"
        assert params["include-verse-numbers"] == "true"
        assert params["include-titles"] == "true"

    async def test_search_params(self, client: BibleAPIClient, provider):
        provider.add("search", {"query": "love", "total": 0, "verses": []})
        await client.search("love", 25)
        params = provider.last_params
        assert params["query"] == "love"
        assert params["limit"] == "25"
        assert params["sort"] == "relevance"
        assert params["fuzziness"] == "AUTO"


class TestPayloads:
    async def test_books(self, client: BibleAPIClient, provider):
        provider.add("books", BOOKS)
        books = await client.get_books()
        assert [b.id for b in books] == ["GEN", "EXO"]
        assert books[0].name_long == "The First Book of Moses"

    async def test_chapter_numbers_are_strings(self, client: BibleAPIClient, provider):
        provider.add("books/GEN/chapters", [{"id": "GEN.1", "bookId": "GEN", "number": 1, "reference": "Genesis 1"}])
        [chapter] = await client.get_chapters("GEN")
        assert chapter.number == "1"
        assert chapter.book_id == "GEN"

    async def test_passage_tree_is_coerced(self, client: BibleAPIClient, provider):
        provider.add("passages/GEN.1.1-GEN.1.2", {"reference": "Genesis 1:1-2", "content": PASSAGE_TREE})
        passage = await client.get_passage("GEN.1.1-GEN.1.2")
        assert isinstance(passage.content, list)
        assert isinstance(passage.content[0], TagNode)

    async def test_missing_data_is_none(self, client: BibleAPIClient, provider):
        provider.add("verses/GEN.99.1", payload={"meta": {}})
        assert await client.get_verse("GEN.99.1") is None

    async def test_null_data_is_none(self, client: BibleAPIClient, provider):
        provider.add("search", payload={"data": None})
        assert await client.search("nothing") is None

    async def test_search_without_verses(self, client: BibleAPIClient, provider):
        provider.add("search", {"query": "GEN 1", "total": None, "passages": []})
        result = await client.search("GEN 1")
        assert result.verses == []
        assert result.total == 0

    async def test_null_strings_become_empty(self, client: BibleAPIClient, provider):
        provider.add("search", {"query": None, "verses": [{"reference": "Genesis 1:1", "text": None}]})
        result = await client.search("God")
        assert result.query == ""
        assert result.verses[0].text == ""

    async def test_null_book_fields(self, client: BibleAPIClient, provider):
        provider.add("books", [{"id": "GEN", "name": "Genesis", "abbreviation": None, "nameLong": None}])
        [book] = await client.get_books()
        assert book.abbreviation == ""
        assert book.name_long == ""


class TestErrors:
    async def test_error_status(self, client: BibleAPIClient, provider):
        provider.add("books", status=401, payload={"error": "Unauthorized"})
        with pytest.raises(BibleAPIError, match="Bible API request failed: 401 Unauthorized"):
            await client.get_books()

    async def test_unknown_path_is_404(self, client: BibleAPIClient):
        with pytest.raises(BibleAPIError, match="404 Not Found"):
            await client.get_verse("NOPE.1.1")

    async def test_network_error(self, client: BibleAPIClient, provider):
        provider.failure = httpx.ConnectError("connection refused")
        with pytest.raises(BibleAPIError, match="connection refused") as exc_info:
            await client.get_books()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_book_without_id(self, client: BibleAPIClient, provider):
        provider.add("books", [{"name": "Genesis"}])
        with pytest.raises(BibleAPIError, match="unexpected payload") as exc_info:
            await client.get_books()
        assert isinstance(exc_info.value.__cause__, ValidationError)

    async def test_chapters_not_a_list(self, client: BibleAPIClient, provider):
        provider.add("books/GEN/chapters", {"id": "GEN.1"})
        with pytest.raises(BibleAPIError, match="expected a list of Chapter"):
            await client.get_chapters("GEN")
