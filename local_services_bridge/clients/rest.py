"""REST client for the MoviePilot HTTP API."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from ..errors import PathTemplateError, RemoteHttpError
from ..transport.retry import RetryPolicy, SleepFunc, send_with_retry
from .base import ApiKeyAuth, truncate_for_error

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")

# encodeURIComponent leaves these unescaped in addition to quote()'s defaults.
_COMPONENT_SAFE = "!~*'()"


def _stringify_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render_path(template: str, path_params: Optional[Mapping[str, Any]] = None) -> str:
    """Substitute ``{name}`` placeholders with percent-encoded values.

    Raises:
        PathTemplateError: If a placeholder has no value, or an empty one.
    """
    params = path_params or {}

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        value = params.get(name)
        if value is None or _stringify_param(value) == "":
            raise PathTemplateError(template, name)
        return quote(_stringify_param(value), safe=_COMPONENT_SAFE)

    return _PLACEHOLDER.sub(_substitute, template)


def _decode_body(response: httpx.Response) -> Any:
    text = response.text
    if not text:
        return None
    content_type = response.headers.get("content-type")
    if content_type is None or "application/json" in content_type.lower():
        try:
            return json.loads(text)
        except ValueError:
            return text
    return text


class RestClient:
    """
    Thin HTTP client for MoviePilot's REST API.

    Each call renders a path template, appends query parameters, applies the
    configured API-key auth, and goes through ``send_with_retry``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: Optional[ApiKeyAuth] = None,
        policy: Optional[RetryPolicy] = None,
        client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._auth = auth or ApiKeyAuth()
        self._policy = policy or RetryPolicy()
        self._http = client or httpx.AsyncClient(follow_redirects=True)
        self._sleep = sleep

    def build_url(
        self,
        path_template: str,
        *,
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> str:
        path = render_path(path_template, path_params)
        if not path.startswith("/"):
            path = f"/{path}"
        url = httpx.URL(f"{self.base_url}{path}")
        for key, value in (query or {}).items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                for item in value:
                    if item is not None:
                        url = url.copy_add_param(key, _stringify_param(item))
            else:
                url = url.copy_set_param(key, _stringify_param(value))
        return self._auth.apply_to_url(str(url))

    async def call(
        self,
        method: str,
        path_template: str,
        *,
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
    ) -> Any:
        """Send one REST request and decode its body.

        Returns:
            Parsed JSON for JSON responses, raw text otherwise, None for an empty body.

        Raises:
            PathTemplateError: If the path template cannot be fully resolved (no request is sent).
            RemoteHttpError: On a non-2xx HTTP status.
        """
        method = method.upper()
        url = self.build_url(path_template, path_params=path_params, query=query)
        headers: Dict[str, str] = dict(self._auth.headers())
        request_kwargs: Dict[str, Any] = {}
        if method != "GET" and body is not None:
            headers["content-type"] = "application/json"
            request_kwargs["content"] = json.dumps(body, ensure_ascii=False).encode("utf-8")

        logger.debug("RestClient.call: %s %s", method, url)
        response = await send_with_retry(
            self._http,
            method,
            url,
            policy=self._policy,
            sleep=self._sleep,
            headers=headers,
            **request_kwargs,
        )
        if not response.is_success:
            details = truncate_for_error(response.text)
            raise RemoteHttpError(
                f"MoviePilot HTTP {response.status_code}: {details}",
                status_code=response.status_code,
                details=details,
            )
        return _decode_body(response)

    async def aclose(self) -> None:
        await self._http.aclose()
