from .host import HostApi, HostLogger
from .mcp_publisher import McpToolPublisher, register_mcp_tools
from .naming import NameAllocator, is_optional_tool, map_tool_name, normalize_tool_name
from .rest_publisher import OPERATIONS, register_rest_tools

__all__ = [
    "HostApi",
    "HostLogger",
    "McpToolPublisher",
    "NameAllocator",
    "OPERATIONS",
    "is_optional_tool",
    "map_tool_name",
    "normalize_tool_name",
    "register_mcp_tools",
    "register_rest_tools",
]
