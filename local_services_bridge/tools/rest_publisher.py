"""Publish the fixed MoviePilot REST operations as host tools.

There is no discovery step: the operation table below is always registered.
Read-only operations (search, list) are required; every mutating operation is
registered as optional. Endpoints default to MoviePilot's v1 API and can be
overridden per operation through ``services.moviepilot.endpoints``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx
from pydantic import ValidationError

from ..clients.base import ApiKeyAuth, parse_base_url
from ..clients.rest import RestClient
from ..config.models import EndpointOverride, RestServiceConfig
from ..config.resolver import load_service_config
from ..errors import ConfigurationError, ToolParameterError
from ..schemas.core import EndpointDescriptor, RegisteredTool, text_result
from ..transport.retry import SleepFunc
from .host import HostApi, HostLogger, register

logger = logging.getLogger(__name__)

PLUGIN_ID = "openclaw-moviepilot-rest"
SERVICE_KEY = "moviepilot"


@dataclass(frozen=True)
class RestRequest:
    path_params: Dict[str, Any] = field(default_factory=dict)
    query: Dict[str, Any] = field(default_factory=dict)
    body: Any = None


RequestBuilder = Callable[[Mapping[str, Any]], RestRequest]


@dataclass(frozen=True)
class RestOperation:
    key: str
    tool_name: str
    description: str
    endpoint: EndpointDescriptor
    parameters: Dict[str, Any]
    build_request: RequestBuilder
    optional: bool = False


def require_string(params: Mapping[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ToolParameterError(f"'{key}' is required and must be a non-empty string")
    return value


def require_object(params: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = params.get(key)
    if not isinstance(value, dict) or not value:
        raise ToolParameterError(f"'{key}' is required and must be a non-empty object")
    return value


def _compact(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


def _object_schema(properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties, "additionalProperties": False}
    if required:
        schema["required"] = required
    return schema


def _hash_schema() -> Dict[str, Any]:
    return _object_schema(
        {"hash": {"type": "string", "description": "Torrent info hash of the download task."}},
        ["hash"],
    )


def _sites_property() -> Dict[str, Any]:
    return {
        "type": "array",
        "items": {"type": "integer"},
        "description": "Restrict the search to these site ids.",
    }


def _search_media(params: Mapping[str, Any]) -> RestRequest:
    return RestRequest(
        path_params={"mediaId": require_string(params, "mediaId")},
        query=_compact(
            {
                "mtype": params.get("mediaType"),
                "area": params.get("area"),
                "season": params.get("season"),
                "sites": params.get("sites"),
            }
        ),
    )


def _search_title(params: Mapping[str, Any]) -> RestRequest:
    return RestRequest(
        query=_compact(
            {
                "keyword": require_string(params, "title"),
                "page": params.get("page"),
                "sites": params.get("sites"),
            }
        )
    )


def _list_downloads(params: Mapping[str, Any]) -> RestRequest:
    return RestRequest(query=_compact({"name": params.get("downloader")}))


def _add_download(params: Mapping[str, Any]) -> RestRequest:
    return RestRequest(
        body=_compact(
            {
                "torrent_in": require_object(params, "torrent"),
                "media_in": params.get("media"),
                "downloader": params.get("downloader"),
                "save_path": params.get("savePath"),
            }
        )
    )


def _by_hash(params: Mapping[str, Any]) -> RestRequest:
    return RestRequest(path_params={"hash": require_string(params, "hash")})


def _list_subscriptions(params: Mapping[str, Any]) -> RestRequest:
    return RestRequest()


def _add_subscription(params: Mapping[str, Any]) -> RestRequest:
    return RestRequest(
        body=_compact(
            {
                "name": require_string(params, "title"),
                "type": params.get("mediaType"),
                "year": params.get("year"),
                "tmdbid": params.get("tmdbId"),
                "doubanid": params.get("doubanId"),
                "season": params.get("season"),
            }
        )
    )


def _remove_subscription(params: Mapping[str, Any]) -> RestRequest:
    return RestRequest(path_params={"id": require_string(params, "id")})


OPERATIONS: List[RestOperation] = [
    RestOperation(
        key="searchMedia",
        tool_name="moviepilot_search_media",
        description="Search MoviePilot sites for torrents of a media item identified by id (e.g. 'tmdb:603').",
        endpoint=EndpointDescriptor(path="/api/v1/search/media/{mediaId}", method="GET"),
        parameters=_object_schema(
            {
                "mediaId": {"type": "string", "description": "Media id such as 'tmdb:603' or 'douban:1291843'."},
                "mediaType": {"type": "string", "description": "MoviePilot media type, '电影' or '电视剧'."},
                "area": {"type": "string", "description": "Search area: 'title' or 'imdbid'."},
                "season": {"type": "integer", "description": "Season number for TV shows."},
                "sites": _sites_property(),
            },
            ["mediaId"],
        ),
        build_request=_search_media,
    ),
    RestOperation(
        key="searchTitle",
        tool_name="moviepilot_search_title",
        description="Search MoviePilot sites for torrents by title keyword.",
        endpoint=EndpointDescriptor(path="/api/v1/search/title", method="GET"),
        parameters=_object_schema(
            {
                "title": {"type": "string", "description": "Title keyword to search for."},
                "page": {"type": "integer", "description": "Result page, starting at 0."},
                "sites": _sites_property(),
            },
            ["title"],
        ),
        build_request=_search_title,
    ),
    RestOperation(
        key="listDownloads",
        tool_name="moviepilot_list_downloads",
        description="List the download tasks currently known to MoviePilot's downloaders.",
        endpoint=EndpointDescriptor(path="/api/v1/download/", method="GET"),
        parameters=_object_schema(
            {"downloader": {"type": "string", "description": "Only list tasks of this downloader."}}
        ),
        build_request=_list_downloads,
    ),
    RestOperation(
        key="addDownload",
        tool_name="moviepilot_add_download",
        description="Add a torrent (as returned by a search) to a MoviePilot downloader.",
        endpoint=EndpointDescriptor(path="/api/v1/download/", method="POST"),
        parameters=_object_schema(
            {
                "torrent": {"type": "object", "description": "Torrent info object from a search result."},
                "media": {"type": "object", "description": "Media info object the torrent belongs to."},
                "downloader": {"type": "string", "description": "Target downloader name."},
                "savePath": {"type": "string", "description": "Override the download directory."},
            },
            ["torrent"],
        ),
        build_request=_add_download,
        optional=True,
    ),
    RestOperation(
        key="pauseDownload",
        tool_name="moviepilot_pause_download",
        description="Pause a download task.",
        endpoint=EndpointDescriptor(path="/api/v1/download/stop/{hash}", method="GET"),
        parameters=_hash_schema(),
        build_request=_by_hash,
        optional=True,
    ),
    RestOperation(
        key="resumeDownload",
        tool_name="moviepilot_resume_download",
        description="Resume a paused download task.",
        endpoint=EndpointDescriptor(path="/api/v1/download/start/{hash}", method="GET"),
        parameters=_hash_schema(),
        build_request=_by_hash,
        optional=True,
    ),
    RestOperation(
        key="removeDownload",
        tool_name="moviepilot_remove_download",
        description="Remove a download task.",
        endpoint=EndpointDescriptor(path="/api/v1/download/{hash}", method="DELETE"),
        parameters=_hash_schema(),
        build_request=_by_hash,
        optional=True,
    ),
    RestOperation(
        key="listSubscriptions",
        tool_name="moviepilot_list_subscriptions",
        description="List MoviePilot subscriptions.",
        endpoint=EndpointDescriptor(path="/api/v1/subscribe/", method="GET"),
        parameters=_object_schema({}),
        build_request=_list_subscriptions,
    ),
    RestOperation(
        key="addSubscription",
        tool_name="moviepilot_add_subscription",
        description="Subscribe to a movie or TV show so MoviePilot downloads it when available.",
        endpoint=EndpointDescriptor(path="/api/v1/subscribe/", method="POST"),
        parameters=_object_schema(
            {
                "title": {"type": "string", "description": "Media title."},
                "mediaType": {"type": "string", "description": "MoviePilot media type, '电影' or '电视剧'."},
                "year": {"type": "string", "description": "Release year."},
                "tmdbId": {"type": "integer", "description": "TMDB id."},
                "doubanId": {"type": "string", "description": "Douban id."},
                "season": {"type": "integer", "description": "Season number for TV shows."},
            },
            ["title"],
        ),
        build_request=_add_subscription,
        optional=True,
    ),
    RestOperation(
        key="removeSubscription",
        tool_name="moviepilot_remove_subscription",
        description="Remove a MoviePilot subscription by id.",
        endpoint=EndpointDescriptor(path="/api/v1/subscribe/{id}", method="DELETE"),
        parameters=_object_schema(
            {"id": {"type": "string", "description": "Subscription id."}},
            ["id"],
        ),
        build_request=_remove_subscription,
        optional=True,
    ),
]


def resolve_endpoint(operation: RestOperation, overrides: Mapping[str, EndpointOverride]) -> EndpointDescriptor:
    override = overrides.get(operation.key)
    if override is None:
        return operation.endpoint
    return EndpointDescriptor(
        path=override.path or operation.endpoint.path,
        method=(override.method or operation.endpoint.method).upper(),
    )


def build_rest_tool(client: RestClient, operation: RestOperation, endpoint: EndpointDescriptor) -> RegisteredTool:
    async def execute(tool_call_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        request = operation.build_request(params or {})
        logger.debug("REST tool %s (call %s) -> %s %s", operation.tool_name, tool_call_id, endpoint.method, endpoint.path)
        data = await client.call(
            endpoint.method,
            endpoint.path,
            path_params=request.path_params,
            query=request.query,
            body=request.body,
        )
        return text_result(data, data=data)

    return RegisteredTool(
        name=operation.tool_name,
        description=operation.description,
        parameters=operation.parameters,
        execute=execute,
    )


async def register_rest_tools(
    api: HostApi,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
    sleep: SleepFunc = asyncio.sleep,
) -> int:
    """Register the fixed MoviePilot REST tools with the host.

    Args:
        api: Host handle exposing ``config`` and ``register_tool``.
        http_client: Optional async httpx client (custom transport/proxies).
        sleep: Backoff sleep used by the retry layer.

    Returns:
        The number of tools registered (zero when not configured).
    """
    log = HostLogger(api)
    try:
        cfg = load_service_config(
            getattr(api, "config", None),
            plugin_id=PLUGIN_ID,
            service_key=SERVICE_KEY,
            model=RestServiceConfig,
        )
    except ValidationError as e:
        log.error(f"Invalid MoviePilot REST config: {e}")
        return 0
    if cfg is None or not cfg.base_url:
        log.info("MoviePilot REST not configured; skipping tool registration.")
        return 0

    try:
        parse_base_url(cfg.base_url)
    except ConfigurationError as e:
        log.error(f"Invalid MoviePilot REST baseUrl: {e}")
        return 0

    client = RestClient(
        cfg.base_url,
        auth=ApiKeyAuth.from_config(cfg),
        policy=cfg.retry_policy(),
        client=http_client,
        sleep=sleep,
    )
    for operation in OPERATIONS:
        tool = build_rest_tool(client, operation, resolve_endpoint(operation, cfg.endpoints))
        register(api, tool, optional=operation.optional)

    if cfg.debug:
        log.info(f"Registered {len(OPERATIONS)} MoviePilot REST tools.")
    return len(OPERATIONS)
