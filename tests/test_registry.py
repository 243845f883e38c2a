"""Tests for the tool registry and the schemas it publishes."""

from bible_mcp.registry import (
    CONTENT_TOOL,
    REFERENCE_TOOL,
    TOOLS,
    ContentAction,
    ReferenceAction,
    list_tools,
)


class TestSchemas:
    def test_every_action_has_requirements(self):
        for tool in TOOLS:
            assert set(tool.requirements) == set(tool.action_names())

    def test_required_arguments_are_declared_properties(self):
        for tool in TOOLS:
            properties = tool.input_schema()["properties"]
            for required in tool.requirements.values():
                assert set(required) <= set(properties)

    def test_action_enum_matches_python_enum(self):
        content = CONTENT_TOOL.input_schema()
        assert content["properties"]["action"]["enum"] == [a.value for a in ContentAction]
        reference = REFERENCE_TOOL.input_schema()
        assert reference["properties"]["action"]["enum"] == [a.value for a in ReferenceAction]

    def test_common_fields(self):
        content = CONTENT_TOOL.input_schema()
        assert content["required"] == ["action"]
        assert content["properties"]["response_format"]["enum"] == ["concise", "detailed"]
        assert content["properties"]["response_format"]["default"] == "concise"
        assert content["properties"]["limit"]["default"] == 10
        assert "limit" not in REFERENCE_TOOL.input_schema()["properties"]

    def test_per_action_requirements_in_schema(self):
        conditions = CONTENT_TOOL.input_schema()["allOf"]
        chapter = next(c for c in conditions if c["if"]["properties"]["action"]["const"] == "chapter")
        assert chapter["then"]["required"] == ["book_id", "chapter"]

        reference_conditions = REFERENCE_TOOL.input_schema()["allOf"]
        assert len(reference_conditions) == 1  # list_books needs nothing


class TestLookup:
    def test_descriptors(self):
        tools = list_tools()
        assert [t["name"] for t in tools] == ["bible_content", "bible_reference"]
        assert set(tools[0]) == {"name", "title", "description", "inputSchema"}
        assert tools[1]["title"] == "Bible Reference"

