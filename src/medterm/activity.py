"""Bounded recent-activity log, most recent first."""

import logging
from datetime import datetime
from typing import Callable, Optional

from .models.activity import ActivityAction, ActivityItem
from .models.votes import utc_now
from .store import ACTIVITY_LIMIT, KeyValueStore, load_activity, save_activity

logger = logging.getLogger(__name__)


class ActivityLog:
    """Human-readable log of recent suggestions and verifications.

    Stored as one document and capped at ``limit`` entries; the oldest
    entries fall off when a new one is prepended.
    """

    def __init__(
        self,
        store: KeyValueStore,
        limit: int = ACTIVITY_LIMIT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.limit = limit
        self._clock = clock or utc_now

    def recent(self) -> list[ActivityItem]:
        return load_activity(self.store)[: self.limit]

    def append(self, original: str, translation: str, action: ActivityAction) -> None:
        """Prepend an entry unless the head is already the same event."""
        items = load_activity(self.store)

        if items and items[0].matches(original, translation, action):
            logger.debug(f"Skipping duplicate activity {original!r} -> {translation!r}")
            return

        items.insert(
            0,
            ActivityItem(
                original=original,
                translation=translation,
                action=action,
                timestamp=self._clock(),
            ),
        )
        save_activity(self.store, items, self.limit)

    def update(self, original: str, old_translation: str, new_translation: str) -> None:
        """Rewrite the latest verification of ``old_translation`` as ``new_translation``.

        The rewritten entry moves to the front. If no such verification is
        in the log, a fresh one for ``new_translation`` is prepended instead.
        """
        items = load_activity(self.store)

        index = next(
            (
                i for i, item in enumerate(items)
                if item.matches(original, old_translation, ActivityAction.VERIFIED)
            ),
            None,
        )

        if index is not None:
            item = items.pop(index)
            item.translation = new_translation
            item.timestamp = self._clock()
        else:
            item = ActivityItem(
                original=original,
                translation=new_translation,
                action=ActivityAction.VERIFIED,
                timestamp=self._clock(),
            )

        items.insert(0, item)
        save_activity(self.store, items, self.limit)

    def remove(self, original: str, translation: str) -> None:
        """Drop every verification of the pair; suggestions stay."""
        items = [
            item for item in load_activity(self.store)
            if not item.matches(original, translation, ActivityAction.VERIFIED)
        ]
        save_activity(self.store, items, self.limit)
