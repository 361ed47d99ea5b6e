"""Pydantic base schema utilities for bridge models.

Provides a common `BaseSchema` that enables camelCase aliasing so models can
be populated straight from the host's JSON-style configuration and from the
remote service's payloads.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def _to_camel(s: str) -> str:
    """Convert snake_case to camelCase for JSON aliasing."""
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() or "_" for p in parts[1:])


class BaseSchema(BaseModel):
    """Shared base for all Pydantic models in the bridge.

    - Enables populate_by_name for using either snake_case or camelCase
    - Uses a snake->camel alias generator for JSON interop
    - Ignores unknown keys (host configs and remote payloads carry extras)
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        alias_generator=_to_camel,  # snake_case -> camelCase aliases
    )
