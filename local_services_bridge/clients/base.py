"""Helpers shared by the JSON-RPC and REST clients: URL handling, API-key
auth and error-body truncation."""

from __future__ import annotations

import re
from typing import Dict, Literal, Optional

import httpx
from pydantic import ConfigDict, Field

from ..config.models import ServiceConfig
from ..errors import ConfigurationError
from ..schemas.base import BaseSchema

ERROR_BODY_LIMIT = 500

_WHITESPACE = re.compile(r"\s+")


def truncate_for_error(text: str, limit: int = ERROR_BODY_LIMIT) -> str:
    """Collapse whitespace and cut ``text`` to ``limit`` chars, suffixing ``...`` when cut."""
    cleaned = _WHITESPACE.sub(" ", text or "").strip()
    if len(cleaned) > limit:
        return f"{cleaned[:limit]}..."
    return cleaned


def parse_base_url(base_url: str) -> httpx.URL:
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid base URL {base_url!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid base URL {base_url!r}: expected an absolute http(s) URL")
    return url


def resolve_endpoint_url(base_url: str, endpoint_path: Optional[str] = None) -> str:
    """Join ``endpoint_path`` onto ``base_url``.

    Trailing slashes are stripped from the base. A path the base already ends
    with is not appended twice; otherwise the path is resolved as a URL
    reference, so an absolute path replaces any path on the base.

    Args:
        base_url: Service base URL, e.g. ``http://host:3000/``.
        endpoint_path: Optional endpoint path, e.g. ``/mcp``.

    Returns:
        The absolute endpoint URL, e.g. ``http://host:3000/mcp``.

    Raises:
        ConfigurationError: If the base URL is not an absolute http(s) URL.
    """
    trimmed = base_url.rstrip("/")
    parse_base_url(trimmed)
    if not endpoint_path:
        return trimmed
    path = endpoint_path if endpoint_path.startswith("/") else f"/{endpoint_path}"
    if trimmed.endswith(path):
        return trimmed
    return str(httpx.URL(f"{trimmed}/").join(path))


class ApiKeyAuth(BaseSchema):
    """How the API key travels with each request."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["header", "query", "bearer", "none"] = Field(default="none")
    api_key: Optional[str] = Field(default=None)
    header_name: str = Field(default="X-API-KEY", min_length=1)
    query_param: str = Field(default="apikey", min_length=1)

    @classmethod
    def from_config(cls, cfg: ServiceConfig) -> "ApiKeyAuth":
        return cls(
            mode=getattr(cfg, "api_key_mode", "none"),
            api_key=cfg.api_key,
            header_name=cfg.api_key_header,
            query_param=cfg.api_key_query_param,
        )

    def headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        if self.mode == "header":
            return {self.header_name: self.api_key}
        if self.mode == "bearer":
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}

    def apply_to_url(self, url: str) -> str:
        if not self.api_key or self.mode != "query":
            return url
        return str(httpx.URL(url).copy_set_param(self.query_param, self.api_key))
