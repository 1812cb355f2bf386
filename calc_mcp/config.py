import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean env var, falling back to ``default`` on unknown values."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False

    logger.warning("Ignoring invalid boolean %s=%r, using %s", name, raw, default)
    return default


def _env_log_level(name: str, default: str) -> str:
    raw = os.getenv(name, default).strip().upper()
    if raw not in _LOG_LEVELS:
        logger.warning("Ignoring invalid log level %s=%r, using %s", name, raw, default)
        return default
    return raw


@dataclass
class CalcMcpConfig:
    """Configuration for calc-mcp server."""

    # Server settings
    host: str = "localhost"
    port: int = 8013

    # Tool groups to enable (comma-separated in env, or list)
    enabled_tools: set[str] = field(default_factory=lambda: {"math", "legacy"})

    # Evaluation limits and parser strictness
    max_expression_length: int = 500
    allow_trailing_tokens: bool = False

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "CalcMcpConfig":
        """Load configuration from environment variables."""
        tools_str = os.getenv("CALC_MCP_TOOLS", "math,legacy")
        enabled_tools = {t.strip() for t in tools_str.split(",") if t.strip()}

        return cls(
            host=os.getenv("CALC_MCP_HOST", "localhost"),
            port=int(os.getenv("CALC_MCP_PORT", "8013")),
            enabled_tools=enabled_tools,
            max_expression_length=int(os.getenv("CALC_MCP_MAX_EXPRESSION_LENGTH", "500")),
            allow_trailing_tokens=_env_bool("CALC_MCP_ALLOW_TRAILING", False),
            log_level=_env_log_level("CALC_MCP_LOG_LEVEL", "INFO"),
        )

    def is_enabled(self, tool_group: str) -> bool:
        """Check if a tool group is enabled."""
        return tool_group in self.enabled_tools


# Global config instance
config = CalcMcpConfig.from_env()
