"""Error types raised by the MoviePilot bridge.

Purpose:
- Give publishers and hosts typed exceptions for each failure class
  (configuration, transport, protocol, validation).
- Keep HTTP-oriented context (status code, truncated body) on the exception
  for diagnosis.

Usage:
- Catch `BridgeError` for any failure produced by this package.
- Catch `RemoteHttpError` and inspect `status_code` / `details` for non-OK
  responses.
"""

from __future__ import annotations

from typing import Any, Optional


class BridgeError(Exception):
    pass


class ConfigurationError(BridgeError):
    """Raised when a service configuration is present but unusable (e.g. bad base URL)."""


class RequestTimeoutError(BridgeError):
    """Raised when a single HTTP attempt exceeds its timeout and is cancelled.

    Args:
        url: Target URL of the attempt.
        timeout_ms: The per-attempt budget that was exceeded.
    """

    def __init__(self, url: str, timeout_ms: int) -> None:
        super().__init__(f"Request to {url} timed out after {timeout_ms} ms")
        self.url = url
        self.timeout_ms = timeout_ms


class RemoteHttpError(BridgeError):
    """Raised when the remote service answers with a non-OK HTTP status.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code of the response.
        details: Truncated response body.
    """

    def __init__(self, message: str, *, status_code: int, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class McpProtocolError(BridgeError):
    """Raised when a JSON-RPC response envelope cannot be interpreted."""


class McpRemoteError(McpProtocolError):
    """Raised when a JSON-RPC response carries an ``error`` member."""

    def __init__(self, message: str, *, code: Optional[Any] = None) -> None:
        super().__init__(f"MCP error: {message}")
        self.remote_message = message
        self.code = code


class ToolParameterError(BridgeError, ValueError):
    """Raised when a tool is invoked without a required parameter."""


class PathTemplateError(ToolParameterError):
    def __init__(self, template: str, param: str) -> None:
        super().__init__(f"Missing path parameter '{param}' for {template}")
        self.template = template
        self.param = param
