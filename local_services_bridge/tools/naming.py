"""Tool name mapping and optional-tool classification.

Remote tool names are arbitrary strings; hosts want short snake_case
identifiers that are unique within a registration run.
"""

from __future__ import annotations

import re
from typing import AbstractSet, List, Set

FALLBACK_TOOL_NAME = "moviepilot_tool"
DEFAULT_TOOL_PREFIX = "moviepilot"

# Substring tokens suggesting a tool mutates remote state. Matching is a plain
# substring test on the lowercased raw name, so e.g. "settings" matches "set".
MUTATING_NAME_TOKENS = (
    "add",
    "create",
    "update",
    "delete",
    "remove",
    "subscribe",
    "pause",
    "resume",
    "start",
    "stop",
    "enable",
    "disable",
    "set",
    "put",
    "post",
)

_NON_ALNUM_RUN = re.compile(r"[^A-Za-z0-9]+")
_UNDERSCORE_RUN = re.compile(r"_+")


def normalize_tool_name(name: str) -> str:
    """Lowercase snake_case form of ``name``; ``moviepilot_tool`` when nothing is left."""
    normalized = _NON_ALNUM_RUN.sub("_", name)
    normalized = _UNDERSCORE_RUN.sub("_", normalized).strip("_").lower()
    return normalized or FALLBACK_TOOL_NAME


def map_tool_name(prefix: str, remote_name: str) -> str:
    return normalize_tool_name(f"{prefix}_{remote_name}")


def is_mutating_tool_name(name: str) -> bool:
    lower = name.lower()
    return any(token in lower for token in MUTATING_NAME_TOKENS)


def is_optional_tool(remote_name: str, mapped_name: str, optional_names: AbstractSet[str]) -> bool:
    """Decide whether a published tool is registered as optional.

    Args:
        remote_name: Raw name advertised by the remote service.
        mapped_name: Final published name, including any collision suffix.
        optional_names: Configured override set; may hold raw, mapped or normalized names.

    Returns:
        True if any form of the name is in ``optional_names``, or the raw name
        looks like a mutating operation.
    """
    if (
        remote_name in optional_names
        or mapped_name in optional_names
        or normalize_tool_name(remote_name) in optional_names
    ):
        return True
    return is_mutating_tool_name(remote_name)


class NameAllocator:
    """Hands out names unique within one registration run.

    A taken name gets ``_2``, ``_3``, ... appended to the requested base until
    an unused one is found. Names already handed out never change.
    """

    def __init__(self) -> None:
        self._used: Set[str] = set()
        self._order: List[str] = []

    def allocate(self, base: str) -> str:
        name = base
        suffix = 2
        while name in self._used:
            name = f"{base}_{suffix}"
            suffix += 1
        self._used.add(name)
        self._order.append(name)
        return name

    def __contains__(self, name: object) -> bool:
        return name in self._used

    def __len__(self) -> int:
        return len(self._used)

    @property
    def names(self) -> List[str]:
        return list(self._order)
