"""
Attachment Service

Post and attachment lookups shared by the report and the panel.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql.elements import ColumnElement

from attachments_inspector.models.post import ATTACHMENT_POST_TYPE, Post, PostStatus
from attachments_inspector.schemas.requests import MIME_TYPE_ALL

logger = logging.getLogger(__name__)


def mime_type_clause(mime_type: str | None) -> ColumnElement | None:
    """
    Build the WHERE clause for a MIME type filter.

    ``all`` or blank disables filtering. Each comma-separated entry is
    either a family (``image`` or ``image/*``) or an exact type
    (``image/png``).
    """
    if not mime_type or mime_type.strip().lower() == MIME_TYPE_ALL:
        return None

    clauses = []
    for entry in mime_type.split(","):
        entry = entry.strip().lower()
        if not entry:
            continue
        if entry.endswith("/*"):
            entry = entry[:-2]
        if "/" in entry:
            clauses.append(Post.mime_type == entry)
        else:
            clauses.append(Post.mime_type.like(f"{entry}/%"))

    if not clauses:
        return None
    return or_(*clauses)


async def get_post(db: AsyncSession, post_id: int) -> Post | None:
    result = await db.execute(select(Post).where(Post.id == post_id))
    return result.scalars().first()


async def get_post_parent_id(db: AsyncSession, post_id: int) -> int | None:
    """Return the parent id of a post (0 when top-level), or None if it does not exist."""
    result = await db.execute(select(Post.parent_id).where(Post.id == post_id))
    return result.scalar_one_or_none()


async def get_attached_media(db: AsyncSession, post_id: int, mime_type: str | None = None) -> Sequence[Post]:
    """Attachments directly owned by ``post_id``, in manual order."""
    query = select(Post).where(
        and_(
            Post.parent_id == post_id,
            Post.post_type == ATTACHMENT_POST_TYPE,
            Post.status != PostStatus.TRASH.value,
        )
    )
    clause = mime_type_clause(mime_type)
    if clause is not None:
        query = query.where(clause)
    query = query.order_by(Post.menu_order.asc(), Post.id.asc())

    result = await db.execute(query)
    return result.scalars().all()


async def get_children(
    db: AsyncSession,
    parent_id: int,
    post_type: str,
    statuses: Sequence[str],
    limit: int,
) -> Sequence[Post]:
    """Newest-first children of ``parent_id`` sharing ``post_type``, capped at ``limit``."""
    query = (
        select(Post)
        .where(
            and_(
                Post.parent_id == parent_id,
                Post.post_type == post_type,
                Post.status.in_(list(statuses)),
            )
        )
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(limit)
    )
    result = await db.execute(query)
    return result.scalars().all()


async def get_panel_attachments(db: AsyncSession, post_id: int, limit: int) -> Sequence[Post]:
    """Inherited-status attachments whose parent is exactly ``post_id``, manual order ascending."""
    query = (
        select(Post)
        .where(
            and_(
                Post.parent_id == post_id,
                Post.post_type == ATTACHMENT_POST_TYPE,
                Post.status == PostStatus.INHERIT.value,
            )
        )
        .order_by(Post.menu_order.asc(), Post.id.asc())
        .limit(limit)
    )
    result = await db.execute(query)
    return result.scalars().all()
