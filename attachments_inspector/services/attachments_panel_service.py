"""
Attachments Panel Service

Lists a post's own attachments for the block editor panel.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from attachments_inspector.config import settings
from attachments_inspector.models.post import Post
from attachments_inspector.schemas.attachment import PanelAttachment
from attachments_inspector.services import attachment_service, media_urls


def panel_caption(attachment: Post, source: str | None = None) -> str:
    """Caption shown in the panel, read from the body or the excerpt."""
    source = source or settings.panel_caption_source
    if source == "excerpt":
        return attachment.excerpt or ""
    return attachment.content or ""


def to_panel_attachment(attachment: Post) -> PanelAttachment:
    return PanelAttachment(
        id=attachment.id,
        title=attachment.title or "",
        type=attachment.mime_type or "",
        filename=media_urls.attachment_filename(attachment),
        edit_link=media_urls.edit_link(attachment),
        attachment_link=media_urls.attachment_link(attachment),
        # The large rendition is enough for previews
        url=media_urls.image_url(attachment, "large"),
        alt=media_urls.image_alt(attachment),
        caption=panel_caption(attachment),
    )


async def get_attachments_by_post_id(db: AsyncSession, post_id: int) -> list[PanelAttachment]:
    attachments = await attachment_service.get_panel_attachments(db, post_id, limit=settings.panel_limit)
    return [to_panel_attachment(attachment) for attachment in attachments]
