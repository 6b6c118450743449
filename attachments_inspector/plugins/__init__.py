from .base import PluginBase, PluginMeta, RenderContext, Screen
from .registry import PluginRegistry, PluginState

__all__ = ["PluginBase", "PluginMeta", "PluginRegistry", "PluginState", "RenderContext", "Screen"]
