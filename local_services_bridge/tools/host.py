"""Host plugin boundary.

The host hands each registration function an object exposing a configuration
snapshot, a ``register_tool`` call, and optionally a log facility whose
``info`` / ``warn`` / ``error`` channels may each be missing.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Protocol, runtime_checkable

from ..schemas.core import RegisteredTool

_fallback_logger = logging.getLogger("local_services_bridge.host")


@runtime_checkable
class HostApi(Protocol):
    config: Optional[Mapping[str, Any]]

    def register_tool(self, tool: RegisteredTool, *, optional: bool = False) -> None: ...


class HostLogger:
    """Routes messages to the host's log facility (``api.log`` or ``api.logger``).

    Without a facility, messages go to the ``local_services_bridge.host``
    stdlib logger. A facility lacking a channel drops that channel's messages.
    """

    def __init__(self, api: Any) -> None:
        self._facility = getattr(api, "log", None) or getattr(api, "logger", None)

    def _channel(self, *names: str) -> Optional[Callable[[str], Any]]:
        for name in names:
            fn = getattr(self._facility, name, None)
            if callable(fn):
                return fn
        return None

    def info(self, message: str) -> None:
        if self._facility is None:
            _fallback_logger.info(message)
            return
        fn = self._channel("info")
        if fn is not None:
            fn(message)

    def warn(self, message: str) -> None:
        if self._facility is None:
            _fallback_logger.warning(message)
            return
        fn = self._channel("warning", "warn")
        if fn is not None:
            fn(message)

    def error(self, message: str) -> None:
        if self._facility is None:
            _fallback_logger.error(message)
            return
        fn = self._channel("error")
        if fn is not None:
            fn(message)


def register(api: HostApi, tool: RegisteredTool, *, optional: bool) -> None:
    if optional:
        api.register_tool(tool, optional=True)
    else:
        api.register_tool(tool)
