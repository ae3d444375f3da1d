"""MedTerm - crowdsourced Chinese/English medical term translator."""

from .activity import ActivityLog
from .ledger import VoteLedger
from .lookup import LookupResult, LookupSession, NoCandidatesError
from .models import (
    ActivityAction,
    ActivityItem,
    Candidate,
    Category,
    ExternalSuggestions,
    InteractionKind,
    Origin,
    VoteRecord,
)
from .ranking import fold, rank
from .store import FileStore, KeyValueStore, MemoryStore
from .validation import InvalidUserSuggestion, validate_user_suggestion

__version__ = "0.1.0"

__all__ = [
    "ActivityLog",
    "VoteLedger",
    "LookupSession",
    "LookupResult",
    "NoCandidatesError",
    "ActivityAction",
    "ActivityItem",
    "Candidate",
    "Category",
    "ExternalSuggestions",
    "InteractionKind",
    "Origin",
    "VoteRecord",
    "fold",
    "rank",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "InvalidUserSuggestion",
    "validate_user_suggestion",
]
