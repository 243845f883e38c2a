"""Bible MCP server — API.Bible text exposed as MCP tools."""

__version__ = "1.0.0"
