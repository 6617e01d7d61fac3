"""
Issue Tracker Core Library.

Storage, validation and the issue service behind the HTTP API.

Usage:
    # Database
    from issue_tracker.db import db
    from issue_tracker.models import Issue
    from issue_tracker.repositories import IssueRepository

    # Service
    from issue_tracker.services import IssueService

    # Config
    from issue_tracker.config import get_settings, Settings

    # Logging
    from issue_tracker.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"
