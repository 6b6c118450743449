"""
Plugin Loader

Reads the component configuration from ``settings.plugins_config_file``
and registers the enabled components.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from attachments_inspector.config import settings

if TYPE_CHECKING:
    from attachments_inspector.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    "attachment-report": {"enabled": True},
    "attachments-panel": {"enabled": True},
}


def load_plugins_config(path: Path | None = None) -> dict[str, dict[str, Any]]:
    """
    Load component configuration from disk.

    Returns defaults if the file does not exist or cannot be parsed.
    """
    config_file = path or Path(settings.plugins_config_file)
    if config_file.exists():
        try:
            return json.loads(config_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to read plugins config: %s", exc)
    return copy.deepcopy(_DEFAULT_CONFIG)


def load_plugins(registry: PluginRegistry, config: dict[str, dict[str, Any]] | None = None) -> PluginRegistry:
    """Register every enabled component with ``registry`` and return it."""
    from attachments_inspector.plugins.attachment_report import AttachmentReport
    from attachments_inspector.plugins.attachments_panel import AttachmentsPanel

    if config is None:
        config = load_plugins_config()

    for plugin_class in [AttachmentReport, AttachmentsPanel]:
        plugin = plugin_class()
        plugin_config = config.get(plugin.meta.name, {})
        if not plugin_config.get("enabled", True):
            logger.info("Plugin disabled by config: %s", plugin.meta.name)
            continue
        plugin.on_load(plugin_config)
        registry.register(plugin)

    logger.info("Plugin initialisation complete - %d plugins loaded", len(registry.all_plugins()))
    return registry
