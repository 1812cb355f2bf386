"""Legacy evaluation tool for calc-mcp.

Runs the shunting-yard evaluator kept for clients that depend on its
function names (log_two, log_ten, logn) and parenthesis error messages.
"""

import json
from typing import Any

from mcp.types import Tool, TextContent

from calc_mcp.services.legacy_service import SUPPORTED_LEGACY_FUNCTIONS, evaluate_expression_legacy
from calc_mcp.tools.math import validate_expression_arg


LEGACY_TOOLS: list[Tool] = [
    Tool(
        name="legacy_evaluate",
        description=(
            "Evaluate a mathematical expression with the legacy evaluator. "
            "Supports +, -, *, / and ^, parentheses, "
            f"functions ({', '.join(SUPPORTED_LEGACY_FUNCTIONS)}) and constants (PI, E)."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "expression": {
                    "type": "string",
                    "description": "Math expression to evaluate (e.g., 'log_two(8)', 'sin(PI / 2) + cos(0)').",
                },
            },
            "required": ["expression"],
        },
    ),
]


async def handle_legacy_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle execution of legacy tools."""
    if name == "legacy_evaluate":
        return await _legacy_evaluate(arguments)
    else:
        return [TextContent(type="text", text=f"Unknown legacy tool: {name}")]


async def _legacy_evaluate(args: dict[str, Any]) -> list[TextContent]:
    """Evaluate an expression with the legacy evaluator."""
    error = validate_expression_arg(args)
    if error:
        return [TextContent(type="text", text=json.dumps({"error": error}))]

    result = evaluate_expression_legacy(args["expression"])
    return [TextContent(type="text", text=json.dumps(result.to_dict()))]
