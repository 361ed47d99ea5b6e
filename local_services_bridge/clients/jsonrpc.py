"""JSON-RPC 2.0 client for the MoviePilot MCP endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from ..errors import McpProtocolError, McpRemoteError, RemoteHttpError
from ..transport.retry import RetryPolicy, SleepFunc, send_with_retry
from .base import truncate_for_error

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """
    Thin JSON-RPC client bound to one fixed endpoint URL.

    Responsibilities:
    - build ``{"jsonrpc": "2.0", "id", "method", "params"}`` envelopes with a
      per-client id counter starting at 1
    - POST them through ``send_with_retry``
    - unwrap ``result`` or raise a descriptive error

    Auth is baked into ``endpoint_url`` (query mode) or ``headers`` (header
    mode) by the caller.
    """

    def __init__(
        self,
        endpoint_url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        policy: Optional[RetryPolicy] = None,
        client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.endpoint_url = endpoint_url
        self._headers: Dict[str, str] = dict(headers or {})
        self._policy = policy or RetryPolicy()
        self._http = client or httpx.AsyncClient(follow_redirects=True)
        self._sleep = sleep
        self._id_counter = 0

    def _next_id(self) -> int:
        self._id_counter += 1
        return self._id_counter

    async def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Invoke ``method`` and return the JSON-RPC ``result`` verbatim.

        Raises:
            RemoteHttpError: On a non-2xx HTTP status.
            McpProtocolError: On an empty, non-JSON or non-object body, or a missing result.
            McpRemoteError: When the response carries an ``error`` member.
            RequestTimeoutError: If the final attempt timed out.
            httpx.TransportError: If the final attempt failed at the network level.
        """
        payload: Dict[str, Any] = {"jsonrpc": "2.0", "id": self._next_id(), "method": method}
        if params is not None:
            payload["params"] = params
        logger.debug("JsonRpcClient.call: POST %s method=%s id=%s", self.endpoint_url, method, payload["id"])
        response = await send_with_retry(
            self._http,
            "POST",
            self.endpoint_url,
            policy=self._policy,
            sleep=self._sleep,
            headers={"content-type": "application/json", **self._headers},
            content=json.dumps(payload).encode("utf-8"),
        )

        if not response.is_success:
            details = truncate_for_error(response.text)
            raise RemoteHttpError(
                f"MCP HTTP {response.status_code}: {details}",
                status_code=response.status_code,
                details=details,
            )

        data = self._decode(response.text)
        error = data.get("error")
        if error:
            if isinstance(error, Mapping) and error.get("message") is not None:
                raise McpRemoteError(str(error["message"]), code=error.get("code"))
            raise McpRemoteError("Unknown MCP error")

        if "result" not in data:
            raise McpProtocolError("MCP response missing result.")
        return data["result"]

    @staticmethod
    def _decode(text: str) -> Dict[str, Any]:
        if not text:
            raise McpProtocolError("MCP response was not JSON.")
        try:
            data = json.loads(text)
        except ValueError as e:
            raise McpProtocolError(f"Invalid JSON response: {truncate_for_error(text)}") from e
        if not isinstance(data, dict):
            raise McpProtocolError("MCP response was not JSON.")
        return data

    async def aclose(self) -> None:
        await self._http.aclose()
