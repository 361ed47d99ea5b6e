"""Publish MoviePilot MCP tools into the host's tool registry.

The MCP endpoint is asked for its tools once (``tools/list``); each advertised
tool becomes one registered host tool whose execute call forwards to
``tools/call``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from ..clients.base import ApiKeyAuth, resolve_endpoint_url
from ..clients.jsonrpc import JsonRpcClient
from ..config.models import McpServiceConfig
from ..config.resolver import load_service_config
from ..errors import ConfigurationError
from ..schemas.core import RegisteredTool, RemoteToolDescriptor, text_result
from ..transport.retry import SleepFunc
from .host import HostApi, HostLogger, register
from .naming import DEFAULT_TOOL_PREFIX, NameAllocator, is_optional_tool, map_tool_name, normalize_tool_name

logger = logging.getLogger(__name__)

PLUGIN_ID = "openclaw-local-services-bridge"
SERVICE_KEY = "moviepilot"


def parse_tool_descriptors(result: Any) -> List[RemoteToolDescriptor]:
    """Extract descriptors from a ``tools/list`` result.

    A non-object result or a missing/non-list ``tools`` member yields an empty
    list. Entries without a usable name are skipped.
    """
    items = result.get("tools") if isinstance(result, dict) else None
    if not isinstance(items, list):
        return []
    descriptors: List[RemoteToolDescriptor] = []
    for item in items:
        if not isinstance(item, dict) or not item.get("name"):
            continue
        try:
            descriptors.append(RemoteToolDescriptor.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping malformed MCP tool descriptor %r: %s", item.get("name"), e)
    return descriptors


async def discover_tools(client: JsonRpcClient) -> List[RemoteToolDescriptor]:
    return parse_tool_descriptors(await client.call("tools/list"))


def build_mcp_tool(client: JsonRpcClient, descriptor: RemoteToolDescriptor, name: str) -> RegisteredTool:
    remote_name = descriptor.name

    async def execute(tool_call_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.debug("MCP tool %s (call %s) -> tools/call %s", name, tool_call_id, remote_name)
        result = await client.call("tools/call", {"name": remote_name, "arguments": dict(params or {})})
        if isinstance(result, dict) and isinstance(result.get("content"), list):
            return result
        return text_result(result)

    return RegisteredTool(
        name=name,
        description=(
            descriptor.description
            if descriptor.description is not None
            else f"MoviePilot MCP tool: {remote_name}"
        ),
        parameters=descriptor.parameters_schema(),
        execute=execute,
    )


class McpToolPublisher:
    """Maps discovered descriptors to uniquely named host tools.

    Applies the ``expose`` allow-list, the tool prefix, collision suffixes and
    the optional classification. One publisher serves one registration run.
    """

    def __init__(self, client: JsonRpcClient, cfg: McpServiceConfig) -> None:
        self._client = client
        self._prefix = normalize_tool_name(cfg.tool_prefix or DEFAULT_TOOL_PREFIX)
        self._expose = frozenset(cfg.expose)
        self._optional = frozenset(cfg.optional_tools)
        self._names = NameAllocator()

    def _is_exposed(self, remote_name: str, mapped_name: str) -> bool:
        if not self._expose:
            return True
        return (
            remote_name in self._expose
            or mapped_name in self._expose
            or normalize_tool_name(remote_name) in self._expose
        )

    def plan(self, descriptors: List[RemoteToolDescriptor]) -> List[Tuple[RegisteredTool, bool]]:
        planned: List[Tuple[RegisteredTool, bool]] = []
        for descriptor in descriptors:
            mapped = map_tool_name(self._prefix, descriptor.name)
            if not self._is_exposed(descriptor.name, mapped):
                continue
            name = self._names.allocate(mapped)
            optional = is_optional_tool(descriptor.name, name, self._optional)
            planned.append((build_mcp_tool(self._client, descriptor, name), optional))
        return planned


async def register_mcp_tools(
    api: HostApi,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    sleep: SleepFunc = asyncio.sleep,
) -> int:
    """Discover MoviePilot MCP tools and register them with the host.

    Configuration problems and discovery failures are logged through the
    host's log facility and end registration with zero tools; nothing is
    raised to the host.

    Args:
        api: Host handle exposing ``config`` and ``register_tool``.
        http_client: Optional async httpx client (custom transport/proxies).
        sleep: Backoff sleep used by the retry layer.

    Returns:
        The number of tools registered.
    """
    log = HostLogger(api)
    try:
        cfg = load_service_config(
            getattr(api, "config", None),
            plugin_id=PLUGIN_ID,
            service_key=SERVICE_KEY,
            model=McpServiceConfig,
        )
    except ValidationError as e:
        log.error(f"Invalid MoviePilot MCP config: {e}")
        return 0
    if cfg is None or not cfg.base_url:
        log.info("MoviePilot MCP not configured; skipping tool registration.")
        return 0

    try:
        endpoint_url = resolve_endpoint_url(cfg.base_url, cfg.endpoint_path)
    except ConfigurationError as e:
        log.error(f"Invalid MoviePilot MCP baseUrl: {e}")
        return 0

    auth = ApiKeyAuth.from_config(cfg)
    client = JsonRpcClient(
        auth.apply_to_url(endpoint_url),
        headers=auth.headers(),
        policy=cfg.retry_policy(),
        client=http_client,
        sleep=sleep,
    )

    registered = 0
    try:
        try:
            descriptors = await discover_tools(client)
        except Exception as e:
            log.error(f"MoviePilot MCP tools/list failed: {e}")
            return 0

        if not descriptors:
            log.warn("MoviePilot MCP returned no tools; nothing to register.")
            return 0

        planned = McpToolPublisher(client, cfg).plan(descriptors)
        for tool, optional in planned:
            register(api, tool, optional=optional)
            registered += 1
    finally:
        # A client we created is only kept alive by the tools that use it.
        if registered == 0 and http_client is None:
            await client.aclose()

    if cfg.debug:
        log.info(f"Registered {registered} MoviePilot MCP tools.")
    return registered
