"""
Attachment Report Service

Builds the attachments report for a post: its own attachments followed by
those of its children, anchored at the top-level post.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from attachments_inspector.config import settings
from attachments_inspector.models.post import Post, PostStatus
from attachments_inspector.schemas.attachment import AttachmentReportResponse, ReportAttachment
from attachments_inspector.schemas.requests import MIME_TYPE_ALL, ReportQuery
from attachments_inspector.services import attachment_service, media_urls

logger = logging.getLogger(__name__)

CHILD_STATUSES = (PostStatus.PUBLISH.value, PostStatus.DRAFT.value)


def to_report_attachment(attachment: Post, owner: int) -> ReportAttachment:
    meta = media_urls.attachment_metadata(attachment)
    # Missing metadata reports 0x0; metadata without dimensions reports nulls
    width, height = (meta.get("width"), meta.get("height")) if meta else (0, 0)

    return ReportAttachment(
        id=attachment.id,
        title=attachment.title or "",
        caption=attachment.excerpt or "",
        description=attachment.content or "",
        alt=media_urls.image_alt(attachment),
        mime_type=attachment.mime_type or "",
        url=media_urls.attachment_url(attachment),
        thumbnail_url=media_urls.image_url(attachment, "thumbnail"),
        square_url=media_urls.image_url(attachment, "square"),
        width=width,
        height=height,
        owner=owner,
    )


async def get_attachments_by_post_id(
    db: AsyncSession, post_id: int, mime_type: str = MIME_TYPE_ALL
) -> list[ReportAttachment]:
    """Attachments directly owned by ``post_id``, with caption, description and alt text."""
    attachments = await attachment_service.get_attached_media(db, post_id, mime_type)
    return [to_report_attachment(attachment, owner=post_id) for attachment in attachments]


async def resolve_report_post_id(db: AsyncSession, post_id: int) -> int:
    """Anchor the report at the parent post when ``post_id`` is a child."""
    parent_id = await attachment_service.get_post_parent_id(db, post_id)
    if parent_id:
        logger.debug(f"Post {post_id} is a child of {parent_id}; reporting on the parent")
        return parent_id
    return post_id


async def get_attachment_report(db: AsyncSession, post_id: int, query: ReportQuery) -> AttachmentReportResponse:
    """
    Build the attachments report for ``post_id``.

    Args:
        db: Database session
        post_id: Requested post; children resolve to their parent
        query: Parsed report query (MIME filter, include_children)

    Returns:
        AttachmentReportResponse: the resolved post's title and its
        attachments, followed by those of up to ``report_children_limit``
        children when requested. Unknown posts yield an empty report.
    """
    post_id = await resolve_report_post_id(db, post_id)
    post = await attachment_service.get_post(db, post_id)

    attachments = await get_attachments_by_post_id(db, post_id, query.mime_type)

    if query.include_children and post is not None:
        children = await attachment_service.get_children(
            db,
            parent_id=post_id,
            post_type=post.post_type,
            statuses=CHILD_STATUSES,
            limit=settings.report_children_limit,
        )
        for child in children:
            attachments.extend(await get_attachments_by_post_id(db, child.id, query.mime_type))

    logger.info(f"Attachments report for post {post_id}: {len(attachments)} attachments")

    return AttachmentReportResponse(
        post_title=post.title if post is not None else "",
        attachments=attachments,
    )
