import logging
from typing import Any

from mcp.server import Server
from mcp.types import Tool, TextContent

from calc_mcp.config import config
from calc_mcp.tools.math import MATH_TOOLS, handle_math_tool
from calc_mcp.tools.legacy import LEGACY_TOOLS, handle_legacy_tool

logger = logging.getLogger(__name__)

# Create the MCP server
server = Server("calc-mcp")


def get_enabled_tools() -> list[Tool]:
    """Get all tools from enabled tool groups."""
    tools: list[Tool] = []

    if config.is_enabled("math"):
        tools.extend(MATH_TOOLS)
        logger.info("Enabled tool group: math (%d tools)", len(MATH_TOOLS))

    if config.is_enabled("legacy"):
        tools.extend(LEGACY_TOOLS)
        logger.info("Enabled tool group: legacy (%d tools)", len(LEGACY_TOOLS))

    return tools


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools based on configuration."""
    return get_enabled_tools()


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Route tool calls to the appropriate handler."""
    logger.info("Tool call: %s with args: %s", name, arguments)

    # Route to appropriate handler based on tool prefix
    if name.startswith("math_"):
        if not config.is_enabled("math"):
            return [TextContent(type="text", text="Math tools are not enabled")]
        return await handle_math_tool(name, arguments)

    elif name.startswith("legacy_"):
        if not config.is_enabled("legacy"):
            return [TextContent(type="text", text="Legacy tools are not enabled")]
        return await handle_legacy_tool(name, arguments)

    else:
        return [TextContent(type="text", text=f"Unknown tool: {name}")]
