"""Pydantic models for MedTerm."""

from .activity import ActivityAction, ActivityItem
from .candidate import SELECT_MULTIPLIER, Candidate
from .suggestions import (
    SLOT_PRIORITY,
    ExternalSuggestions,
    SlotMissing,
    SlotPresent,
    SuggestionSlot,
    parse_slot,
)
from .votes import (
    CATEGORY_INFO,
    Category,
    CategoryInfo,
    InteractionKind,
    Origin,
    TermHistory,
    VoteRecord,
)

__all__ = [
    # Votes
    "Category",
    "CategoryInfo",
    "CATEGORY_INFO",
    "Origin",
    "InteractionKind",
    "VoteRecord",
    "TermHistory",
    # Activity
    "ActivityAction",
    "ActivityItem",
    # Suggestions
    "ExternalSuggestions",
    "SlotPresent",
    "SlotMissing",
    "SuggestionSlot",
    "SLOT_PRIORITY",
    "parse_slot",
    # Ranking
    "Candidate",
    "SELECT_MULTIPLIER",
]
