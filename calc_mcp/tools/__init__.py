from calc_mcp.tools.math import MATH_TOOLS, handle_math_tool
from calc_mcp.tools.legacy import LEGACY_TOOLS, handle_legacy_tool

__all__ = [
    "MATH_TOOLS",
    "handle_math_tool",
    "LEGACY_TOOLS",
    "handle_legacy_tool",
]
