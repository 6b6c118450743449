"""
Request Schemas

Typed query parameters for the inspector endpoints. Validation is
type-only: a value that fails to validate is replaced by the field
default instead of rejecting the request.
"""

from typing import Any

from fastapi import Query
from pydantic import BaseModel, ValidationError, ValidatorFunctionWrapHandler, field_validator

MIME_TYPE_ALL = "all"


class ReportQuery(BaseModel):
    """Query parameters accepted by the attachments report endpoint"""

    mime_type: str = MIME_TYPE_ALL
    include_children: bool = True

    @field_validator("mime_type", "include_children", mode="wrap")
    @classmethod
    def default_on_invalid(cls, value: Any, handler: ValidatorFunctionWrapHandler, info) -> Any:
        default = cls.model_fields[info.field_name].default
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        try:
            return handler(value.strip() if isinstance(value, str) else value)
        except ValidationError:
            return default


def report_query(
    mime_type: str | None = Query(None, description="MIME type or family to filter by; 'all' disables filtering"),
    include_children: str | None = Query(None, description="Also report attachments of child posts"),
) -> ReportQuery:
    """Dependency parsing the report query string into a ReportQuery."""
    return ReportQuery(mime_type=mime_type, include_children=include_children)
