from .attachment import AttachmentReportResponse, PanelAttachment, ReportAttachment
from .requests import MIME_TYPE_ALL, ReportQuery, report_query

__all__ = [
    "AttachmentReportResponse",
    "PanelAttachment",
    "ReportAttachment",
    "MIME_TYPE_ALL",
    "ReportQuery",
    "report_query",
]
