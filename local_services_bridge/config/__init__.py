from .models import EndpointOverride, McpServiceConfig, RestServiceConfig, ServiceConfig
from .resolver import (
    ConfigLayout,
    EmptyLayout,
    PluginEntriesLayout,
    ServicesLayout,
    decode_config_layout,
    load_service_config,
    resolve_plugin_config,
)

__all__ = [
    "ConfigLayout",
    "EmptyLayout",
    "EndpointOverride",
    "McpServiceConfig",
    "PluginEntriesLayout",
    "RestServiceConfig",
    "ServiceConfig",
    "ServicesLayout",
    "decode_config_layout",
    "load_service_config",
    "resolve_plugin_config",
]
