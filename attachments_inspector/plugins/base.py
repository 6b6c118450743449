"""
Plugin Base Classes

PluginMeta: declarative metadata for a component.
PluginBase: base class for the inspector components. Each component
contributes explicit tables (REST endpoints, query vars) and handlers
(content filter, asset enqueueing) that the composition root wires up.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from attachments_inspector.models.post import Post
    from attachments_inspector.routes.endpoints import EndpointSpec
    from attachments_inspector.services.asset_service import AssetRegistry

# Query var values that read as false; any other present value is true
FALSY_QUERY_VALUES = {"", "0"}


class Screen(str, Enum):
    """Where a page is being rendered."""

    FRONTEND = "frontend"
    BLOCK_EDITOR = "block-editor"
    SITE_EDITOR = "site-editor"


@dataclass
class PluginMeta:
    """
    Declarative metadata describing a component.

    Attributes:
        name:        Machine-readable slug, e.g. "attachment-report".
        version:     Semver string.
        description: Human-readable description.
        handle:      Asset handle of the component's script/style bundle.
        author:      Component author.
    """

    name: str
    version: str
    description: str
    handle: str | None = None
    author: str = "Pew Research Center"


@dataclass
class RenderContext:
    """Request state handed to content filters and asset handlers."""

    screen: Screen = Screen.FRONTEND
    post: Post | None = None
    query_vars: dict[str, str] = field(default_factory=dict)

    @property
    def is_admin(self) -> bool:
        return self.screen != Screen.FRONTEND

    def has_truthy_query_var(self, name: str) -> bool:
        value = self.query_vars.get(name)
        return value is not None and value not in FALSY_QUERY_VALUES


class PluginBase(ABC):
    """
    Abstract base class for inspector components.

    Subclasses must implement the `meta` property. Every contribution
    method defaults to contributing nothing, so subclasses only override
    what they need.
    """

    @property
    @abstractmethod
    def meta(self) -> PluginMeta:
        """Return the component's metadata."""
        ...

    def on_load(self, config: dict[str, Any]) -> None:  # noqa: B027
        """Called once when the component is loaded, with its config dict."""

    def endpoints(self) -> list[EndpointSpec]:
        """REST endpoints to mount under the API namespace."""
        return []

    def query_vars(self) -> list[str]:
        """Public query variables the component reads."""
        return []

    def filter_content(self, content: str, context: RenderContext) -> str:
        """Transform the rendered post content."""
        return content

    def enqueue_assets(self, assets: AssetRegistry, context: RenderContext) -> None:  # noqa: B027
        """Register and enqueue script/style bundles for the current screen."""
