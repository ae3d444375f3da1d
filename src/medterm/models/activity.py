"""Pydantic models for the recent activity log."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from .votes import utc_now


class ActivityAction(str, Enum):
    SUGGESTED = "suggested"
    VERIFIED = "verified"


class ActivityItem(BaseModel):
    """One human-readable entry in the recent activity log."""

    original: str = Field(description="Original search term")
    translation: str = Field(description="Translation that was suggested or verified")
    action: ActivityAction = Field(description="What the user did")
    timestamp: datetime = Field(default_factory=utc_now)

    def matches(self, original: str, translation: str, action: ActivityAction) -> bool:
        return (
            self.original == original
            and self.translation == translation
            and self.action == action
        )
