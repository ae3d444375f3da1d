"""Merge and rank engine.

Combines machine-suggested translations with community vote history into a
deduplicated, scored and capped candidate list. The engine never writes to
the store.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from .models.candidate import Candidate
from .models.suggestions import ExternalSuggestions, SlotMissing
from .models.votes import Origin, TermHistory, VoteRecord
from .store import KeyValueStore, load_term_history

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 6
REJECT_THRESHOLD = 3
HISTORY_CONTEXT = "User Suggested Translation"


def fold(text: str) -> str:
    """Normalization used for every case-insensitive comparison."""
    return text.strip().lower()


def resolve_key(keys: Mapping[str, object], text: str) -> str:
    """Return the existing key matching ``text`` case-insensitively, else ``text``."""
    if text in keys:
        return text
    folded = fold(text)
    return next((key for key in keys if fold(key) == folded), text)


def find_history(history: TermHistory, original_term: str) -> dict[str, VoteRecord]:
    """Records for ``original_term``; exact key first, then a case-insensitive match."""
    key = resolve_key(history, original_term)
    return history.get(key, {})


def _from_history(key: str, record: VoteRecord) -> Candidate:
    return Candidate(
        id=key,
        term=key,
        context=HISTORY_CONTEXT,
        category=record.category,
        selects=record.selects,
        rejects=record.rejects,
        origin=record.origin,
    )


def merge_candidates(
    records: Mapping[str, VoteRecord],
    external: Optional[ExternalSuggestions],
) -> list[Candidate]:
    """Build the deduplicated candidate list, external slots first."""
    candidates: list[Candidate] = []
    seen: set[str] = set()

    def add(candidate: Candidate) -> None:
        normalized = fold(candidate.term)
        if normalized in seen:
            return
        seen.add(normalized)
        candidates.append(candidate)

    if external is not None:
        for name, category, slot in external.slots_by_priority():
            if isinstance(slot, SlotMissing):
                logger.warning(f"Missing data for {name} translation ({slot.reason})")
                continue
            key = resolve_key(records, slot.term)
            stored = records.get(key)
            add(
                Candidate(
                    id=key,
                    term=slot.term,
                    context=slot.context,
                    category=category,
                    selects=stored.selects if stored else 0,
                    rejects=stored.rejects if stored else 0,
                    origin=Origin.AI,
                )
            )

    for key, record in records.items():
        add(_from_history(key, record))

    return candidates


def rank_candidates(
    candidates: list[Candidate],
    limit: int = MAX_CANDIDATES,
    reject_threshold: int = REJECT_THRESHOLD,
) -> list[Candidate]:
    """Drop over-rejected candidates, sort by score (stable) and cap."""
    visible = [c for c in candidates if c.rejects <= reject_threshold]
    visible.sort(key=lambda c: c.score, reverse=True)
    return visible[:limit]


def rank(
    store: KeyValueStore,
    original_term: str,
    external: Optional[ExternalSuggestions],
    limit: int = MAX_CANDIDATES,
    reject_threshold: int = REJECT_THRESHOLD,
) -> list[Candidate]:
    """Rank translation candidates for ``original_term``.

    Args:
        store: Store holding the vote history
        original_term: Term the user searched for (after any correction)
        external: Provider suggestions, or None when the provider failed
        limit: Maximum number of candidates returned
        reject_threshold: Candidates with more rejects than this are hidden

    Returns:
        Candidates ordered by descending score; empty when there is neither
        external data nor history.
    """
    records = find_history(load_term_history(store), original_term)
    return rank_candidates(merge_candidates(records, external), limit, reject_threshold)
