from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx
import pytest


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    """Block any HTTP request that is not aimed at a mock host.

    Tests route traffic through ``httpx.MockTransport``; this guard catches a
    client accidentally built without one.
    """
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
    )

    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


class SleepRecorder:
    """Stands in for ``asyncio.sleep`` and records requested delays."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class RecordingLog:
    def __init__(self) -> None:
        self.messages: List[Tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def of(self, level: str) -> List[str]:
        return [m for lvl, m in self.messages if lvl == level]


class FakeHost:
    """Minimal host handle: config snapshot, tool registry and log facility."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, with_log: bool = True) -> None:
        self.config = config
        self.tools: Dict[str, Any] = {}
        self.optional: Dict[str, bool] = {}
        if with_log:
            self.log = RecordingLog()

    def register_tool(self, tool: Any, *, optional: bool = False) -> None:
        assert tool.name not in self.tools, f"duplicate tool name {tool.name}"
        self.tools[tool.name] = tool
        self.optional[tool.name] = optional


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_host():
    def _make(config: Optional[Dict[str, Any]] = None, *, with_log: bool = True) -> FakeHost:
        return FakeHost(config, with_log=with_log)

    return _make
