"""Resolve a service configuration out of the host's configuration snapshot.

Hosts store plugin configuration in one of two layouts:

- a blob that already carries a top-level ``services`` key;
- the generic host layout ``plugins.entries[<pluginId>].config``.

The raw snapshot is decoded into one of the layout classes below; anything
that fits neither shape decodes to ``EmptyLayout``. Decoding never raises and
does not look at the service settings themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Type, TypeVar, Union

from .models import ServiceConfig

TConfig = TypeVar("TConfig", bound=ServiceConfig)


@dataclass(frozen=True)
class ServicesLayout:
    blob: Mapping[str, Any]
    kind: Literal["services"] = "services"

    def plugin_config(self) -> Dict[str, Any]:
        return dict(self.blob)


@dataclass(frozen=True)
class PluginEntriesLayout:
    plugin_id: str
    config: Mapping[str, Any]
    kind: Literal["plugin_entries"] = "plugin_entries"

    def plugin_config(self) -> Dict[str, Any]:
        return dict(self.config)


@dataclass(frozen=True)
class EmptyLayout:
    kind: Literal["empty"] = "empty"
    reason: str = field(default="no recognised layout")

    def plugin_config(self) -> Dict[str, Any]:
        return {}


ConfigLayout = Union[ServicesLayout, PluginEntriesLayout, EmptyLayout]


def decode_config_layout(raw: Any, plugin_id: str) -> ConfigLayout:
    if not isinstance(raw, Mapping):
        return EmptyLayout(reason="config is not a mapping")
    if "services" in raw:
        return ServicesLayout(blob=raw)
    plugins = raw.get("plugins")
    entries = plugins.get("entries") if isinstance(plugins, Mapping) else None
    if not isinstance(entries, Mapping) or plugin_id not in entries:
        return EmptyLayout(reason=f"no plugins.entries[{plugin_id!r}]")
    entry = entries[plugin_id]
    if not isinstance(entry, Mapping) or not isinstance(entry.get("config"), Mapping):
        return EmptyLayout(reason=f"plugins.entries[{plugin_id!r}] has no config mapping")
    return PluginEntriesLayout(plugin_id=plugin_id, config=entry["config"])


def resolve_plugin_config(raw: Any, plugin_id: str) -> Dict[str, Any]:
    """Return a ``{"services": {...}}``-shaped dict for ``plugin_id``, or ``{}``."""
    return decode_config_layout(raw, plugin_id).plugin_config()


def load_service_config(
    raw: Any,
    *,
    plugin_id: str,
    service_key: str,
    model: Type[TConfig],
) -> Optional[TConfig]:
    """Validate ``services.<service_key>`` into ``model``.

    Args:
        raw: The host's configuration snapshot (may be None).
        plugin_id: Plugin identity used for the ``plugins.entries`` layout.
        service_key: Key under ``services``.
        model: Typed config model to validate into.

    Returns:
        The validated config, or None when the service block is absent or has
        no base URL.

    Raises:
        pydantic.ValidationError: If the block is present but malformed.
    """
    services = resolve_plugin_config(raw, plugin_id).get("services")
    block = services.get(service_key) if isinstance(services, Mapping) else None
    if not isinstance(block, Mapping):
        return None
    if not (block.get("baseUrl") or block.get("base_url")):
        return None
    return model.model_validate(block)
