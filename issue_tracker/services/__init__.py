"""
Domain services.

Usage:
    from issue_tracker.services import IssueService
"""

from .issue_service import IssueService

__all__ = ["IssueService"]
