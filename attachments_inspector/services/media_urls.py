"""
Media URL helpers

Derive public URLs, admin links and file names for attachments from their
stored file path and metadata.
"""

from pathlib import PurePosixPath
from typing import Any

from attachments_inspector.config import settings
from attachments_inspector.models.post import (
    ATTACHED_FILE_META_KEY,
    ATTACHMENT_METADATA_META_KEY,
    IMAGE_ALT_META_KEY,
    Post,
)


def attached_file(attachment: Post) -> str:
    return attachment.get_meta(ATTACHED_FILE_META_KEY) or ""


def attachment_metadata(attachment: Post) -> dict[str, Any]:
    meta = attachment.get_meta(ATTACHMENT_METADATA_META_KEY)
    return meta if isinstance(meta, dict) else {}


def image_alt(attachment: Post) -> str:
    return attachment.get_meta(IMAGE_ALT_META_KEY) or ""


def attachment_filename(attachment: Post) -> str:
    path = attached_file(attachment)
    return PurePosixPath(path).name if path else ""


def attachment_url(attachment: Post) -> str | None:
    path = attached_file(attachment)
    if not path:
        return None
    return f"{settings.uploads_url.rstrip('/')}/{path.lstrip('/')}"


def image_url(attachment: Post, size: str) -> str | None:
    """
    URL of a named image rendition.

    Falls back to the full-size file when the rendition was never
    generated. Non-image attachments have no renditions.
    """
    if not (attachment.mime_type or "").startswith("image/"):
        return None

    full = attachment_url(attachment)
    sizes = attachment_metadata(attachment).get("sizes") or {}
    rendition = sizes.get(size)
    if not full or not isinstance(rendition, dict) or not rendition.get("file"):
        return full

    directory = PurePosixPath(attached_file(attachment)).parent
    path = str(directory / rendition["file"]) if str(directory) != "." else rendition["file"]
    return f"{settings.uploads_url.rstrip('/')}/{path.lstrip('/')}"


def edit_link(attachment: Post) -> str:
    return f"{settings.site_url.rstrip('/')}/wp-admin/post.php?post={attachment.id}&action=edit"


def attachment_link(attachment: Post) -> str:
    return f"{settings.site_url.rstrip('/')}/?attachment_id={attachment.id}"
