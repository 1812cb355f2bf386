"""Math evaluation tools for calc-mcp.

Exposes the lexer/parser/evaluator pipeline as MCP tools.
"""

import json
from typing import Any

from mcp.types import Tool, TextContent

from calc_mcp.config import config
from calc_mcp.services.lexer import tokenize
from calc_mcp.services.math_service import evaluate_expression, normalize_error
from calc_mcp.services.nodes import node_to_dict
from calc_mcp.services.parser import parse
from calc_mcp.services.registry import SUPPORTED_CONSTANTS, describe_functions

_EXPRESSION_PROPERTY = {
    "type": "string",
    "description": "Math expression (e.g., '3 + 4 * 2', 'sin(PI / 2)', 'log(8, 2)', '2 ^ 10').",
}


MATH_TOOLS: list[Tool] = [
    Tool(
        name="math_evaluate",
        description=(
            "Evaluate a mathematical expression. "
            "Supports +, -, *, /, % and ^ (or **, right-associative), parentheses, unary minus, "
            "functions (sin, cos, tan, asin, acos, atan, abs, sqrt, ln, log, log2, log10, exp; "
            "log takes an optional base, default 10) and constants (PI, E). "
            "Returns the numeric result or a structured error."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "expression": _EXPRESSION_PROPERTY,
                "include_tokens": {
                    "type": "boolean",
                    "description": "Also return the token stream.",
                },
                "include_ast": {
                    "type": "boolean",
                    "description": "Also return the parsed expression tree.",
                },
            },
            "required": ["expression"],
        },
    ),
    Tool(
        name="math_tokenize",
        description="Split a math expression into tokens with line/column positions.",
        inputSchema={
            "type": "object",
            "properties": {"expression": _EXPRESSION_PROPERTY},
            "required": ["expression"],
        },
    ),
    Tool(
        name="math_parse",
        description="Parse a math expression and return its expression tree without evaluating it.",
        inputSchema={
            "type": "object",
            "properties": {"expression": _EXPRESSION_PROPERTY},
            "required": ["expression"],
        },
    ),
    Tool(
        name="math_functions",
        description="List the supported functions (with parameters) and named constants.",
        inputSchema={
            "type": "object",
            "properties": {},
        },
    ),
]


async def handle_math_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle execution of math tools."""
    if name == "math_evaluate":
        return await _math_evaluate(arguments)
    elif name == "math_tokenize":
        return await _math_tokenize(arguments)
    elif name == "math_parse":
        return await _math_parse(arguments)
    elif name == "math_functions":
        return await _math_functions(arguments)
    else:
        return [TextContent(type="text", text=f"Unknown math tool: {name}")]


def _json(data: dict[str, Any]) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(data))]


def _error_payload(error: Exception, expression: str) -> dict[str, Any]:
    normalized = normalize_error(error)
    data: dict[str, Any] = {
        "error": normalized.message,
        "error_type": type(normalized).__name__,
        "expression": expression,
    }
    if normalized.location is not None:
        data["location"] = normalized.location.to_dict()
    return data


def validate_expression_arg(args: dict[str, Any]) -> str | None:
    """Return an error message if the ``expression`` argument is unusable."""
    expression = args.get("expression")
    if not expression or not isinstance(expression, str):
        return "expression is required"

    limit = config.max_expression_length
    if len(expression) > limit:
        return f"expression too long (max {limit} chars)"

    return None


async def _math_evaluate(args: dict[str, Any]) -> list[TextContent]:
    """Evaluate a math expression."""
    error = validate_expression_arg(args)
    if error:
        return _json({"error": error})

    result = evaluate_expression(args["expression"], allow_trailing=config.allow_trailing_tokens)
    return _json(result.to_dict(
        include_tokens=bool(args.get("include_tokens")),
        include_ast=bool(args.get("include_ast")),
    ))


async def _math_tokenize(args: dict[str, Any]) -> list[TextContent]:
    """Tokenize a math expression."""
    error = validate_expression_arg(args)
    if error:
        return _json({"error": error})

    expression = args["expression"]
    try:
        tokens = tokenize(expression)
    except Exception as e:
        return _json(_error_payload(e, expression))

    return _json({
        "expression": expression,
        "tokens": [token.to_dict() for token in tokens],
    })


async def _math_parse(args: dict[str, Any]) -> list[TextContent]:
    """Parse a math expression into its tree."""
    error = validate_expression_arg(args)
    if error:
        return _json({"error": error})

    expression = args["expression"]
    try:
        ast = parse(tokenize(expression), allow_trailing=config.allow_trailing_tokens)
    except Exception as e:
        return _json(_error_payload(e, expression))

    return _json({"expression": expression, "ast": node_to_dict(ast)})


async def _math_functions(args: dict[str, Any]) -> list[TextContent]:
    """List supported functions and constants."""
    return _json({
        "functions": describe_functions(),
        "constants": list(SUPPORTED_CONSTANTS),
    })
