"""Lookup session: one search, its ranked candidates and the user's choice.

Mirrors the interactive flow of the translator: search, then select,
switch, unselect, reject or suggest. Every user action is forwarded to the
vote ledger as a single discrete operation.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .ledger import VoteLedger
from .llm.client import SuggestionProvider, SuggestionProviderError
from .models.candidate import Candidate
from .models.suggestions import ExternalSuggestions
from .models.votes import Category, InteractionKind, Origin
from .ranking import MAX_CANDIDATES, REJECT_THRESHOLD, fold, rank, resolve_key
from .validation import InvalidUserSuggestion, validate_user_suggestion

logger = logging.getLogger(__name__)

SUGGESTION_CONTEXT = "User Suggested definition"


class NoCandidatesError(LookupError):
    """Nothing to show: the provider gave no data and there is no history."""
    pass


@dataclass
class LookupResult:
    query: str
    term: str
    correction: Optional[str]
    candidates: list[Candidate] = field(default_factory=list)

    @property
    def corrected(self) -> bool:
        return self.correction is not None and self.correction != self.query


class LookupSession:
    """Holds the state of one search and routes user actions to the ledger."""

    def __init__(
        self,
        ledger: VoteLedger,
        provider: Optional[SuggestionProvider] = None,
        max_candidates: int = MAX_CANDIDATES,
        reject_threshold: int = REJECT_THRESHOLD,
    ):
        self.ledger = ledger
        self.provider = provider
        self.max_candidates = max_candidates
        self.reject_threshold = reject_threshold
        self.result: Optional[LookupResult] = None
        self.selected_id: Optional[str] = None
        self.has_suggested = False

    @property
    def candidates(self) -> list[Candidate]:
        return self.result.candidates if self.result else []

    def _fetch(self, term: str) -> Optional[ExternalSuggestions]:
        if self.provider is None:
            return None
        try:
            return self.provider.suggest(term)
        except SuggestionProviderError as e:
            logger.error(f"Suggestion provider failed for {term!r}: {e}")
            return None

    def search(self, raw_term: str) -> LookupResult:
        """Fetch suggestions, merge them with history and rank them.

        Raises:
            ValueError: If the search term is empty
            NoCandidatesError: If nothing was found and the provider gave no data
        """
        query = raw_term.strip()
        if not query:
            raise ValueError("Search term is empty")

        self.result = None
        self.selected_id = None
        self.has_suggested = False

        external = self._fetch(query)
        correction = external.correction if external else None
        term = correction or query

        candidates = rank(
            self.ledger.store,
            term,
            external,
            limit=self.max_candidates,
            reject_threshold=self.reject_threshold,
        )
        if not candidates and external is None:
            raise NoCandidatesError("No translations found and no history available.")

        self.result = LookupResult(query=query, term=term, correction=correction, candidates=candidates)
        return self.result

    def _require_result(self) -> LookupResult:
        if self.result is None:
            raise RuntimeError("No active search; call search() first")
        return self.result

    def _find(self, candidate_id: str) -> Candidate:
        for candidate in self._require_result().candidates:
            if candidate.id == candidate_id:
                return candidate
        raise KeyError(candidate_id)

    def select(self, candidate_id: str) -> Optional[str]:
        """Toggle, switch or make the selection; returns the new selection id."""
        result = self._require_result()
        item = self._find(candidate_id)

        if self.selected_id == item.id:
            self.ledger.remove_vote(result.term, item.term)
            item.selects = max(0, item.selects - 1)
            self.selected_id = None
            return None

        if self.selected_id is not None:
            old = self._find(self.selected_id)
            self.ledger.change_vote(result.term, old.term, item.term, item.category)
            old.selects = max(0, old.selects - 1)
            item.selects += 1
        else:
            self.ledger.record_interaction(result.term, item.term, InteractionKind.SELECT, item.category)
            item.selects += 1

        self.selected_id = item.id
        return self.selected_id

    def reject(self, candidate_id: str) -> bool:
        """Dismiss a candidate; ignored once something is selected."""
        result = self._require_result()
        if self.selected_id is not None:
            return False

        item = self._find(candidate_id)
        self.ledger.record_interaction(result.term, item.term, InteractionKind.REJECT, item.category)
        result.candidates = [c for c in result.candidates if c.id != item.id]
        return True

    def suggest(self, text: str) -> Candidate:
        """Add the user's own translation and select it.

        Raises:
            InvalidUserSuggestion: If the text is empty, in the wrong script,
                or a suggestion was already made for this search
        """
        result = self._require_result()
        if self.has_suggested or self.selected_id is not None:
            raise InvalidUserSuggestion("A translation was already chosen for this search.")

        term = validate_user_suggestion(result.term, text)
        self.ledger.submit_suggestion(result.term, term)
        # the ledger may have merged the text into an existing key of another casing
        term = resolve_key(self.ledger.get_term_history(result.term), term)

        item = Candidate(
            id=term,
            term=term,
            context=SUGGESTION_CONTEXT,
            category=Category.USER,
            selects=1,
            rejects=0,
            origin=Origin.USER,
        )
        result.candidates = [item] + [c for c in result.candidates if fold(c.term) != fold(item.term)]
        result.candidates = result.candidates[: self.max_candidates]
        self.selected_id = item.id
        self.has_suggested = True
        return item
