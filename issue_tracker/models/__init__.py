"""
SQLAlchemy models for the Issue Tracker.

Usage:
    from issue_tracker.models import Issue
"""

from .base import Base
from .issue import Issue, new_issue_id, utc_now

__all__ = ["Base", "Issue", "new_issue_id", "utc_now"]
