"""
Application configuration using Pydantic settings.

Re-exports the settings of the core library so backend modules import them
from one place:
    from ..config import get_settings
"""

from issue_tracker.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
