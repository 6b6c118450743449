"""
Attachments Panel

Block editor panel listing the attachments uploaded to the post being
edited, for dragging into the content.
"""

from __future__ import annotations

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from attachments_inspector import PLUGIN_DIR, PLUGIN_VERSION
from attachments_inspector.auth import require_capability
from attachments_inspector.config import settings
from attachments_inspector.constants.roles import Capability
from attachments_inspector.database import get_db
from attachments_inspector.exceptions import AssetRegistrationError, is_error
from attachments_inspector.plugins.base import PluginBase, PluginMeta, RenderContext, Screen
from attachments_inspector.routes.endpoints import EndpointSpec
from attachments_inspector.schemas.attachment import PanelAttachment
from attachments_inspector.services import attachments_panel_service
from attachments_inspector.services.asset_service import AssetRegistry

ASSET_DIR = "assets/attachments-panel/build"


class AttachmentsPanel(PluginBase):
    """Attachments panel component."""

    handle = "prc-platform-attachments-panel"

    @property
    def meta(self) -> PluginMeta:
        return PluginMeta(
            name="attachments-panel",
            version=PLUGIN_VERSION,
            description="Block editor panel listing the attachments of the current post.",
            handle=self.handle,
        )

    def register_assets(self, assets: AssetRegistry) -> bool | AssetRegistrationError:
        return assets.register_bundle(
            self.handle,
            PLUGIN_DIR / ASSET_DIR,
            f"{settings.plugin_url.rstrip('/')}/{ASSET_DIR}",
        )

    def enqueue_assets(self, assets: AssetRegistry, context: RenderContext) -> None:
        # Post editor only; never the site editor
        if context.screen != Screen.BLOCK_EDITOR:
            return
        registered = self.register_assets(assets)
        if not is_error(registered):
            assets.enqueue(self.handle)

    def endpoints(self) -> list[EndpointSpec]:
        return [
            EndpointSpec(
                route="/attachments-panel/get/{post_id}",
                endpoint=self.get_attachments_restfully,
                methods=["GET"],
                permission=require_capability(Capability.EDIT_POSTS.value),
                response_model=list[PanelAttachment],
                name="attachments_panel",
                summary="Attachments uploaded to a post",
                tags=["Attachments Panel"],
            )
        ]

    async def get_attachments_restfully(
        self,
        post_id: int = Path(..., ge=0),
        db: AsyncSession = Depends(get_db),
    ) -> list[PanelAttachment]:
        """Up to 50 attachments of the post, in manual order."""
        return await attachments_panel_service.get_attachments_by_post_id(db, post_id)
