"""
Post Models

Posts of every type (including attachments) and their key/value meta,
as stored by the host CMS.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from attachments_inspector.database import Base

# Meta keys written by the host media library
ATTACHED_FILE_META_KEY = "_wp_attached_file"
IMAGE_ALT_META_KEY = "_wp_attachment_image_alt"
ATTACHMENT_METADATA_META_KEY = "_wp_attachment_metadata"

ATTACHMENT_POST_TYPE = "attachment"


class PostStatus(str, enum.Enum):
    PUBLISH = "publish"
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    INHERIT = "inherit"
    TRASH = "trash"


class Post(Base):
    """Content item; attachments are posts of type ``attachment``."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    excerpt = Column(Text, nullable=False, default="")
    slug = Column(String, nullable=True, index=True)
    status = Column(String, nullable=False, default=PostStatus.DRAFT.value)
    post_type = Column(String, nullable=False, default="post")
    parent_id = Column(Integer, nullable=False, default=0)  # 0 = top-level
    menu_order = Column(Integer, nullable=False, default=0)
    mime_type = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    meta = relationship("PostMeta", back_populates="post", cascade="all, delete-orphan", lazy="selectin")

    __table_args__ = (
        Index("ix_posts_parent_type_status", "parent_id", "post_type", "status"),
        Index("ix_posts_menu_order", "menu_order"),
    )

    def get_meta(self, key: str, default=None):
        """Return the value stored under ``key``, or ``default``."""
        for row in self.meta:
            if row.meta_key == key:
                return row.meta_value
        return default

    def __repr__(self):
        return f"<Post(id={self.id}, type={self.post_type}, parent={self.parent_id})>"


class PostMeta(Base):
    __tablename__ = "postmeta"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    meta_key = Column(String, nullable=False)
    meta_value = Column(JSON, nullable=True)

    post = relationship("Post", back_populates="meta")

    __table_args__ = (UniqueConstraint("post_id", "meta_key", name="unique_post_meta_key"),)
