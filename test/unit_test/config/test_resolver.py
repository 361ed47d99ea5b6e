from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from local_services_bridge.config.models import McpServiceConfig, RestServiceConfig
from local_services_bridge.config.resolver import (
    EmptyLayout,
    PluginEntriesLayout,
    ServicesLayout,
    decode_config_layout,
    load_service_config,
    resolve_plugin_config,
)

PLUGIN_ID = "openclaw-local-services-bridge"


def test_top_level_services_layout() -> None:
    raw = {"services": {"moviepilot": {"baseUrl": "http://mock"}}}
    layout = decode_config_layout(raw, PLUGIN_ID)
    assert isinstance(layout, ServicesLayout)
    assert resolve_plugin_config(raw, PLUGIN_ID) == raw


def test_plugin_entries_layout() -> None:
    inner = {"services": {"moviepilot": {"baseUrl": "http://mock"}}}
    raw = {"plugins": {"entries": {PLUGIN_ID: {"enabled": True, "config": inner}}}}
    layout = decode_config_layout(raw, PLUGIN_ID)
    assert isinstance(layout, PluginEntriesLayout)
    assert layout.plugin_id == PLUGIN_ID
    assert resolve_plugin_config(raw, PLUGIN_ID) == inner


def test_services_key_wins_over_plugin_entries() -> None:
    raw = {
        "services": {"moviepilot": {"baseUrl": "http://top"}},
        "plugins": {"entries": {PLUGIN_ID: {"config": {"services": {}}}}},
    }
    assert isinstance(decode_config_layout(raw, PLUGIN_ID), ServicesLayout)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        [],
        "services",
        {},
        {"plugins": None},
        {"plugins": {"entries": []}},
        {"plugins": {"entries": {"someone-else": {"config": {}}}}},
        {"plugins": {"entries": {PLUGIN_ID: None}}},
        {"plugins": {"entries": {PLUGIN_ID: {"enabled": True}}}},
        {"plugins": {"entries": {PLUGIN_ID: {"config": "oops"}}}},
    ],
)
def test_unrecognised_shapes_resolve_to_empty(raw: Any) -> None:
    assert isinstance(decode_config_layout(raw, PLUGIN_ID), EmptyLayout)
    assert resolve_plugin_config(raw, PLUGIN_ID) == {}


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {"services": None},
        {"services": {}},
        {"services": {"moviepilot": "http://mock"}},
        {"services": {"moviepilot": {}}},
        {"services": {"moviepilot": {"baseUrl": ""}}},
        {"services": {"moviepilot": {"apiKey": "k"}}},
    ],
)
def test_load_returns_none_without_base_url(raw: Any) -> None:
    assert load_service_config(raw, plugin_id=PLUGIN_ID, service_key="moviepilot", model=McpServiceConfig) is None


def test_load_validates_camel_case_block_with_defaults() -> None:
    raw = {
        "services": {
            "moviepilot": {
                "baseUrl": "http://mock:3000",
                "endpointPath": "/api/v1/mcp",
                "apiKey": "k",
                "apiKeyMode": "query",
                "expose": ["search_media"],
                "optionalTools": ["list_downloads"],
                "unknownKey": 1,
            }
        }
    }
    cfg = load_service_config(raw, plugin_id=PLUGIN_ID, service_key="moviepilot", model=McpServiceConfig)
    assert cfg is not None
    assert cfg.base_url == "http://mock:3000"
    assert cfg.endpoint_path == "/api/v1/mcp"
    assert cfg.api_key_mode == "query"
    assert cfg.api_key_header == "X-API-KEY"
    assert cfg.api_key_query_param == "apikey"
    assert cfg.timeout_ms == 15000
    assert cfg.retries == 1
    assert cfg.debug is False
    assert cfg.expose == ["search_media"]
    assert cfg.optional_tools == ["list_downloads"]
    policy = cfg.retry_policy()
    assert (policy.timeout_ms, policy.retries) == (15000, 1)


def test_config_is_frozen() -> None:
    cfg = McpServiceConfig.model_validate({"baseUrl": "http://mock"})
    with pytest.raises(ValidationError):
        cfg.base_url = "http://other"  # type: ignore[misc]


@pytest.mark.parametrize(
    "block",
    [
        {"baseUrl": "http://mock", "timeoutMs": "soon"},
        {"baseUrl": "http://mock", "retries": -1},
        {"baseUrl": "http://mock", "apiKeyMode": "bearer"},
        {"baseUrl": "http://mock", "expose": "search_media"},
    ],
)
def test_malformed_mcp_block_raises(block: dict) -> None:
    with pytest.raises(ValidationError):
        load_service_config(
            {"services": {"moviepilot": block}}, plugin_id=PLUGIN_ID, service_key="moviepilot", model=McpServiceConfig
        )


def test_rest_config_accepts_bearer_and_endpoint_overrides() -> None:
    cfg = RestServiceConfig.model_validate(
        {
            "baseUrl": "http://mock",
            "apiKeyMode": "bearer",
            "endpoints": {"searchMedia": {"path": "/v2/media/{mediaId}"}, "removeDownload": {"method": "post"}},
        }
    )
    assert cfg.api_key_mode == "bearer"
    assert cfg.endpoints["searchMedia"].path == "/v2/media/{mediaId}"
    assert cfg.endpoints["searchMedia"].method is None
    assert cfg.endpoints["removeDownload"].method == "post"


@pytest.mark.parametrize(
    "key,attr,default",
    [
        ("timeoutMs", "timeout_ms", 15000),
        ("retries", "retries", 1),
        ("apiKeyMode", "api_key_mode", "header"),
        ("apiKeyHeader", "api_key_header", "X-API-KEY"),
        ("expose", "expose", []),
        ("optionalTools", "optional_tools", []),
        ("toolPrefix", "tool_prefix", None),
        ("debug", "debug", False),
    ],
)
def test_null_mcp_fields_fall_back_to_defaults(key: str, attr: str, default: Any) -> None:
    cfg = load_service_config(
        {"services": {"moviepilot": {"baseUrl": "http://mock", key: None}}},
        plugin_id=PLUGIN_ID,
        service_key="moviepilot",
        model=McpServiceConfig,
    )
    assert cfg is not None
    assert getattr(cfg, attr) == default


def test_null_rest_fields_fall_back_to_defaults() -> None:
    cfg = RestServiceConfig.model_validate(
        {"baseUrl": "http://mock", "apiKeyMode": None, "endpoints": None, "retries": None}
    )
    assert cfg.api_key_mode == "header"
    assert cfg.endpoints == {}
    assert cfg.retries == 1
