import os
from unittest.mock import patch

import pytest

_CONFIG_ENV_VARS = (
    "CALC_MCP_HOST",
    "CALC_MCP_PORT",
    "CALC_MCP_TOOLS",
    "CALC_MCP_MAX_EXPRESSION_LENGTH",
    "CALC_MCP_ALLOW_TRAILING",
    "CALC_MCP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def reset_config():
    """Reset config env vars after each test."""
    # Store original env vars
    original_env = {key: os.environ.get(key) for key in _CONFIG_ENV_VARS}

    yield

    # Restore original env vars
    for key, value in original_env.items():
        if value is not None:
            os.environ[key] = value
        elif key in os.environ:
            del os.environ[key]


@pytest.fixture
def test_env():
    """Set up test environment variables."""
    env_vars = {
        "CALC_MCP_HOST": "localhost",
        "CALC_MCP_PORT": "7713",
        "CALC_MCP_TOOLS": "math",
        "CALC_MCP_MAX_EXPRESSION_LENGTH": "200",
        "CALC_MCP_ALLOW_TRAILING": "true",
        "CALC_MCP_LOG_LEVEL": "debug",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def strict_config():
    """Tool config with the default limits and trailing tokens rejected."""
    with patch("calc_mcp.tools.math.config") as mock_config:
        mock_config.max_expression_length = 500
        mock_config.allow_trailing_tokens = False
        yield mock_config
