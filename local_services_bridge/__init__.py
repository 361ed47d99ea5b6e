from .tools.mcp_publisher import register_mcp_tools
from .tools.rest_publisher import register_rest_tools

__all__ = [
    "register_mcp_tools",
    "register_rest_tools",
]
