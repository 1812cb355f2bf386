"""Tests for legacy MCP tool handler."""

import json

import pytest

from calc_mcp.tools.legacy import LEGACY_TOOLS, handle_legacy_tool


class TestLegacyToolDefinitions:
    """Tests for tool definitions."""

    def test_legacy_evaluate_tool_exists(self):
        names = [t.name for t in LEGACY_TOOLS]
        assert "legacy_evaluate" in names

    def test_description_lists_legacy_functions(self):
        tool = LEGACY_TOOLS[0]
        assert "log_two" in tool.description
        assert "expression" in tool.inputSchema["required"]


class TestLegacyEvaluateTool:
    """Tests for legacy_evaluate tool handler."""

    @pytest.mark.asyncio
    async def test_simple_expression(self, strict_config):
        result = await handle_legacy_tool("legacy_evaluate", {"expression": "log_two(8) + 1"})
        data = json.loads(result[0].text)
        assert data["result"] == pytest.approx(4)
        assert data["expression"] == "log_two(8) + 1"

    @pytest.mark.asyncio
    async def test_mismatched_parentheses(self, strict_config):
        result = await handle_legacy_tool("legacy_evaluate", {"expression": "(1 + 2"})
        data = json.loads(result[0].text)
        assert data["error"] == "Mismatched parentheses - too many opening parentheses."
        assert data["error_type"] == "ParseError"

    @pytest.mark.asyncio
    async def test_missing_expression(self, strict_config):
        result = await handle_legacy_tool("legacy_evaluate", {})
        data = json.loads(result[0].text)
        assert data == {"error": "expression is required"}

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        result = await handle_legacy_tool("legacy_unknown", {})
        assert "Unknown legacy tool" in result[0].text
