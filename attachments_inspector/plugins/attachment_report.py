"""
Attachment Report

Read-only report of every attachment under a post and its children. The
report is served by a public REST endpoint and shown on the front end in
place of the post content when the ``attachmentsReport`` query variable
is set.
"""

from __future__ import annotations

from fastapi import Depends, Path
from markupsafe import Markup
from sqlalchemy.ext.asyncio import AsyncSession

from attachments_inspector import PLUGIN_DIR, PLUGIN_VERSION
from attachments_inspector.config import settings
from attachments_inspector.database import get_db
from attachments_inspector.exceptions import AssetRegistrationError, is_error
from attachments_inspector.plugins.base import PluginBase, PluginMeta, RenderContext
from attachments_inspector.routes.endpoints import EndpointSpec
from attachments_inspector.schemas.attachment import AttachmentReportResponse
from attachments_inspector.schemas.requests import ReportQuery, report_query
from attachments_inspector.services import attachment_report_service
from attachments_inspector.services.asset_service import AssetRegistry

QUERY_VAR = "attachmentsReport"
MOUNT_ELEMENT_ID = "js-prc-attachments-report-frontend"
ASSET_DIR = "assets/attachment-report/build"


class AttachmentReport(PluginBase):
    """Attachments report component."""

    handle = "prc-platform-attachment-report"

    @property
    def meta(self) -> PluginMeta:
        return PluginMeta(
            name="attachment-report",
            version=PLUGIN_VERSION,
            description="Report of the attachments used by a post and its children.",
            handle=self.handle,
        )

    def query_vars(self) -> list[str]:
        return [QUERY_VAR]

    def register_assets(self, assets: AssetRegistry) -> bool | AssetRegistrationError:
        return assets.register_bundle(
            self.handle,
            PLUGIN_DIR / ASSET_DIR,
            f"{settings.plugin_url.rstrip('/')}/{ASSET_DIR}",
        )

    def enqueue_assets(self, assets: AssetRegistry, context: RenderContext) -> None:
        registered = self.register_assets(assets)
        # Admin screens only register the bundle; the front end enqueues it for the report view
        if context.is_admin or is_error(registered):
            return
        if context.has_truthy_query_var(QUERY_VAR):
            assets.enqueue(self.handle)

    def filter_content(self, content: str, context: RenderContext) -> str:
        if context.post is None or not context.has_truthy_query_var(QUERY_VAR):
            return content
        return Markup('<div id="{}" data-postType="{}" data-postId="{}"></div>').format(
            MOUNT_ELEMENT_ID, context.post.post_type, context.post.id
        )

    def endpoints(self) -> list[EndpointSpec]:
        return [
            EndpointSpec(
                route="/attachments-report/get/{post_id}",
                endpoint=self.get_attachments_restfully,
                methods=["GET"],
                response_model=AttachmentReportResponse,
                name="attachments_report",
                summary="Attachments used by a post and its children",
                tags=["Attachments Report"],
            )
        ]

    async def get_attachments_restfully(
        self,
        post_id: int = Path(..., ge=0),
        query: ReportQuery = Depends(report_query),
        db: AsyncSession = Depends(get_db),
    ) -> AttachmentReportResponse:
        """
        Attachments of the post (resolved to its parent) and of up to 25 children.

        - **mime_type**: `all` (default), a family such as `image`, or an exact type
        - **include_children**: include attachments of child posts (default true)
        """
        return await attachment_report_service.get_attachment_report(db, post_id, query)
