"""
Pydantic schemas for response serialization.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class IssueResponse(BaseModel):
    """
    An issue as returned by the API.

    The identifier is serialized as "_id". Timestamps are UTC with millisecond
    precision and a trailing "Z", the same text a client can send back as an
    exact-match filter.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(serialization_alias="_id")
    issue_title: str
    issue_text: str
    created_by: str
    assigned_to: str = ""
    status_text: str = ""
    created_on: datetime
    updated_on: datetime
    open: bool = True

    @field_serializer("created_on", "updated_on")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.isoformat(timespec="milliseconds") + "Z"


class FieldError(BaseModel):
    msg: str
    param: str
    location: str = "body"
    value: str = ""


class FieldErrorResponse(BaseModel):
    error: list[FieldError]
