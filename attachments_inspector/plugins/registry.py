"""
Plugin Registry

PluginRegistry: stores the loaded components in registration order and
dispatches content filters and asset handlers to them. It also tracks the
plugin lifecycle state (inactive -> active -> inactive).

A registry is built by the composition root and passed to whatever needs
it; there is no module-level instance.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from attachments_inspector.plugins.base import PluginBase, RenderContext
    from attachments_inspector.routes.endpoints import EndpointSpec
    from attachments_inspector.services.asset_service import AssetRegistry

logger = logging.getLogger(__name__)


class PluginState(str, enum.Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"


class PluginRegistry:
    """Registry of the inspector components."""

    def __init__(self) -> None:
        self._plugins: dict[str, PluginBase] = {}
        self.state = PluginState.INACTIVE

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, plugin: PluginBase) -> None:
        """Register a component under its meta name."""
        if plugin.meta.name in self._plugins:
            raise ValueError(f"Plugin already registered: {plugin.meta.name}")
        self._plugins[plugin.meta.name] = plugin
        logger.info("Plugin registered: %s v%s", plugin.meta.name, plugin.meta.version)

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, name: str) -> PluginBase | None:
        """Return the plugin with the given name, or None if not registered."""
        return self._plugins.get(name)

    def all_plugins(self) -> list[PluginBase]:
        """Return all registered plugins in registration order."""
        return list(self._plugins.values())

    def is_registered(self, name: str) -> bool:
        return name in self._plugins

    @property
    def is_active(self) -> bool:
        return self.state == PluginState.ACTIVE

    # ── Contribution tables ───────────────────────────────────────────────────

    def endpoint_specs(self) -> list[EndpointSpec]:
        specs: list[EndpointSpec] = []
        for plugin in self._plugins.values():
            specs.extend(plugin.endpoints())
        return specs

    def query_vars(self) -> list[str]:
        names: list[str] = []
        for plugin in self._plugins.values():
            for name in plugin.query_vars():
                if name not in names:
                    names.append(name)
        return names

    # ── Dispatch ──────────────────────────────────────────────────────────────

    def apply_content_filters(self, content: str, context: RenderContext) -> str:
        """Run the post content through every component's filter, in order."""
        for plugin in self._plugins.values():
            content = plugin.filter_content(content, context)
        return content

    def enqueue_assets(self, assets: AssetRegistry, context: RenderContext) -> None:
        """Let every component register and enqueue its bundles for the screen."""
        for plugin in self._plugins.values():
            plugin.enqueue_assets(assets, context)
