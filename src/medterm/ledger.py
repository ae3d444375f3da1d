"""Vote ledger: read-modify-write operations over the term history.

Every operation loads the whole history document, mutates it in memory and
writes it back. Callers must serialize calls against one store.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from .activity import ActivityLog
from .models.activity import ActivityAction, ActivityItem
from .models.votes import (
    Category,
    InteractionKind,
    Origin,
    TermHistory,
    VoteRecord,
    utc_now,
)
from .ranking import find_history, resolve_key
from .store import KeyValueStore, load_term_history, save_term_history

logger = logging.getLogger(__name__)


class VoteLedger:
    """Records selections, rejections and user suggestions per term."""

    def __init__(
        self,
        store: KeyValueStore,
        activity: Optional[ActivityLog] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the ledger.

        Args:
            store: Key-value store holding the vote and activity documents
            activity: Activity log to update; defaults to one over ``store``
            clock: Timestamp source for ``lastUpdated`` (defaults to UTC now)
        """
        self.store = store
        self._clock = clock or utc_now
        self.activity = activity or ActivityLog(store, clock=self._clock)

    def _new_record(self, category: Category) -> VoteRecord:
        return VoteRecord(
            selects=0,
            rejects=0,
            category=category,
            origin=Origin.USER,
            last_updated=self._clock(),
        )

    def _save(self, history: TermHistory) -> None:
        save_term_history(self.store, history)

    def record_interaction(
        self,
        original_term: str,
        target_term: str,
        kind: InteractionKind,
        category: Optional[Category] = None,
    ) -> VoteRecord:
        """Record a SELECT or REJECT of ``target_term`` for ``original_term``.

        A missing record is created with the given category (USER if none)
        and origin USER. Only SELECT writes an activity entry.
        """
        history = load_term_history(self.store)
        original_term = resolve_key(history, original_term)
        records = history.setdefault(original_term, {})
        target_term = resolve_key(records, target_term)

        record = records.get(target_term)
        if record is None:
            record = self._new_record(category or Category.USER)

        if kind == InteractionKind.SELECT:
            record.selects += 1
        else:
            record.rejects += 1
        record.last_updated = self._clock()

        records[target_term] = record
        self._save(history)
        logger.debug(f"{kind.value} {original_term!r} -> {target_term!r}: {record.selects}/{record.rejects}")

        if kind == InteractionKind.SELECT:
            self.activity.append(original_term, target_term, ActivityAction.VERIFIED)

        return record

    def remove_vote(self, original_term: str, target_term: str) -> Optional[VoteRecord]:
        """Retract one selection. No-op if the pair was never recorded."""
        history = load_term_history(self.store)
        original_term = resolve_key(history, original_term)
        records = history.get(original_term, {})
        target_term = resolve_key(records, target_term)
        record = records.get(target_term)
        if record is None:
            return None

        record.selects = max(0, record.selects - 1)
        record.last_updated = self._clock()
        self._save(history)

        self.activity.remove(original_term, target_term)
        return record

    def change_vote(
        self,
        original_term: str,
        old_term: str,
        new_term: str,
        category: Category,
    ) -> bool:
        """Move one selection from ``old_term`` to ``new_term``.

        Returns False without touching anything when ``original_term`` has
        no history at all.
        """
        history = load_term_history(self.store)
        original_term = resolve_key(history, original_term)
        records = history.get(original_term)
        if records is None:
            logger.debug(f"No history for {original_term!r}, ignoring vote change")
            return False

        old_term = resolve_key(records, old_term)
        new_term = resolve_key(records, new_term)
        now = self._clock()
        old_record = records.get(old_term)
        if old_record is not None:
            old_record.selects = max(0, old_record.selects - 1)
            old_record.last_updated = now

        new_record = records.get(new_term)
        if new_record is None:
            new_record = self._new_record(category)
            records[new_term] = new_record
        new_record.selects += 1
        new_record.last_updated = now

        self._save(history)
        self.activity.update(original_term, old_term, new_term)
        return True

    def add_user_suggestion(self, original_term: str, suggested_term: str) -> VoteRecord:
        """Seed (or reset) a user-suggested translation with zero votes."""
        history = load_term_history(self.store)
        original_term = resolve_key(history, original_term)
        records = history.setdefault(original_term, {})
        suggested_term = resolve_key(records, suggested_term)
        record = self._new_record(Category.USER)
        records[suggested_term] = record
        self._save(history)

        self.activity.append(original_term, suggested_term, ActivityAction.SUGGESTED)
        return record

    def submit_suggestion(self, original_term: str, suggested_term: str) -> VoteRecord:
        """Add a user suggestion and immediately select it.

        Same end state as the two separate calls: selects=1, a ``suggested``
        entry followed by a ``verified`` entry at the head of the log.
        """
        self.add_user_suggestion(original_term, suggested_term)
        return self.record_interaction(
            original_term, suggested_term, InteractionKind.SELECT, Category.USER
        )

    def get_recent_activity(self) -> list[ActivityItem]:
        return self.activity.recent()

    def get_total_contributions(self) -> int:
        """Sum of selects across every vote record."""
        history = load_term_history(self.store)
        return sum(
            record.selects
            for records in history.values()
            for record in records.values()
        )

    def get_term_history(self, original_term: str) -> dict[str, VoteRecord]:
        history = load_term_history(self.store)
        return dict(find_history(history, original_term))
