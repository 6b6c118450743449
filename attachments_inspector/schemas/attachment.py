"""
Attachment Schemas

Response shapes for the attachments report and the attachments panel.
Field names are serialized in camelCase for the editor scripts.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportAttachment(CamelModel):
    """An attachment as listed in the attachments report"""

    id: int
    title: str = ""
    caption: str = ""
    description: str = ""
    alt: str = ""
    mime_type: str = ""
    url: str | None = None
    thumbnail_url: str | None = None
    square_url: str | None = None
    width: int | None = None
    height: int | None = None
    owner: int = Field(..., description="Id of the post the attachment was fetched for")


class AttachmentReportResponse(CamelModel):
    """Attachments report for a top-level post and its children"""

    post_title: str = ""
    attachments: list[ReportAttachment] = Field(default_factory=list)


class PanelAttachment(CamelModel):
    """An attachment as listed in the editor attachments panel"""

    id: int
    title: str = ""
    type: str = ""
    filename: str = ""
    edit_link: str
    attachment_link: str
    url: str | None = None
    alt: str = ""
    caption: str = ""
