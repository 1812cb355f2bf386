import logging
import sys

import uvicorn
from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, Mount

from calc_mcp.config import config
from calc_mcp.server import server
from calc_mcp.services.math_service import evaluate_expression

# Configure logging to stderr (stdout is used for MCP protocol in stdio mode)
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("calc-mcp")

# Create SSE transport
sse = SseServerTransport("/messages/")


async def handle_sse(request):
    async with sse.connect_sse(
        request.scope, request.receive, request._send
    ) as streams:
        await server.run(
            streams[0], streams[1], server.create_initialization_options()
        )


async def handle_health(request):
    return JSONResponse({
        "status": "ok",
        "service": "calc-mcp",
        "enabled_tools": sorted(config.enabled_tools),
    })


async def handle_evaluate(request: Request):
    """Evaluate ``{"expression": ...}`` outside of the MCP protocol."""
    try:
        body = await request.json()
    except ValueError:
        return JSONResponse({"error": "request body must be JSON"}, status_code=400)

    expression = body.get("expression") if isinstance(body, dict) else None
    if not expression or not isinstance(expression, str):
        return JSONResponse({"error": "expression is required"}, status_code=400)

    if len(expression) > config.max_expression_length:
        return JSONResponse(
            {"error": f"expression too long (max {config.max_expression_length} chars)"},
            status_code=400,
        )

    result = evaluate_expression(expression, allow_trailing=config.allow_trailing_tokens)
    return JSONResponse(result.to_dict(
        include_tokens=bool(body.get("include_tokens")),
        include_ast=bool(body.get("include_ast")),
    ))


# Create Starlette app
app = Starlette(
    routes=[
        Route("/health", endpoint=handle_health),
        Route("/sse", endpoint=handle_sse),
        Mount("/messages/", app=sse.handle_post_message),
        Route("/v1/evaluate", endpoint=handle_evaluate, methods=["POST"]),
    ],
)


def main() -> None:
    """Run the calc-mcp server."""
    logger.info("Starting calc-mcp server")
    logger.info("Enabled tool groups: %s", ", ".join(sorted(config.enabled_tools)))
    logger.info("Trailing tokens allowed: %s", config.allow_trailing_tokens)
    logger.info("Server: http://%s:%d", config.host, config.port)

    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
