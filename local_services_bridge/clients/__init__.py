from .base import ApiKeyAuth, parse_base_url, resolve_endpoint_url, truncate_for_error
from .jsonrpc import JsonRpcClient
from .rest import RestClient, render_path

__all__ = [
    "ApiKeyAuth",
    "JsonRpcClient",
    "RestClient",
    "parse_base_url",
    "render_path",
    "resolve_endpoint_url",
    "truncate_for_error",
]
