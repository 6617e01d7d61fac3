"""
Issue SQLAlchemy model.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

# Timestamps carry millisecond precision so a value echoed back by a client
# as a filter compares equal to the stored one.
TIMESTAMP_RESOLUTION = timedelta(milliseconds=1)


def utc_now() -> datetime:
    """Current UTC time as a naive datetime truncated to milliseconds."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


def new_issue_id() -> str:
    return uuid.uuid4().hex


class Issue(Base):
    """
    A tracked bug or feature request.

    The project column partitions the table: every read and write is scoped
    to one project, and a project exists once its first issue is inserted.
    """
    __tablename__ = "issues"
    __table_args__ = (
        Index("ix_issues_project_created_on", "project", "created_on"),
    )

    # Insertion order; breaks ties between issues created in the same millisecond
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, index=True, default=new_issue_id)
    project: Mapped[str] = mapped_column(String(255), index=True)
    issue_title: Mapped[str] = mapped_column(Text)
    issue_text: Mapped[str] = mapped_column(Text)
    created_by: Mapped[str] = mapped_column(Text)
    assigned_to: Mapped[str] = mapped_column(Text, default="")
    status_text: Mapped[str] = mapped_column(Text, default="")
    created_on: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
    updated_on: Mapped[datetime] = mapped_column(DateTime, default=utc_now)
    open: Mapped[bool] = mapped_column(Boolean, default=True)

    def to_dict(self) -> dict[str, Any]:
        """The stored record without its partition key or sequence."""
        return {
            "id": self.id,
            "issue_title": self.issue_title,
            "issue_text": self.issue_text,
            "created_by": self.created_by,
            "assigned_to": self.assigned_to,
            "status_text": self.status_text,
            "created_on": self.created_on,
            "updated_on": self.updated_on,
            "open": self.open,
        }

    def __repr__(self) -> str:
        return f"<Issue {self.id} project={self.project!r} open={self.open}>"
