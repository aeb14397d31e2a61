"""
Base document class for Beanie ODM.

Provides automatic created_at/updated_at metadata on every document.
"""

from datetime import datetime, timezone

from beanie import Document
from pydantic import Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseDocument(Document):
    """
    Base document class for all person record models.

    Provides:
    - Automatic timestamps (created_at, updated_at)
    - State management so changed fields can be inspected before saving
    """

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    async def save(self, *args, **kwargs):
        """Override save to refresh the updated_at timestamp."""
        self.updated_at = utc_now()
        return await super().save(*args, **kwargs)

    class Settings:
        use_state_management = True
