"""Tests for the lookup session flow."""

import pytest

from medterm.llm.client import FakeSuggestionProvider, SuggestionProvider, SuggestionProviderError
from medterm.lookup import LookupSession, NoCandidatesError
from medterm.models.activity import ActivityAction
from medterm.models.suggestions import ExternalSuggestions
from medterm.models.votes import Category, InteractionKind, Origin
from medterm.validation import InvalidUserSuggestion


class FailingProvider(SuggestionProvider):
    @property
    def engine_name(self) -> str:
        return "failing"

    def suggest(self, term: str) -> ExternalSuggestions:
        raise SuggestionProviderError("provider down")


class CorrectingProvider(SuggestionProvider):
    @property
    def engine_name(self) -> str:
        return "correcting"

    def suggest(self, term: str) -> ExternalSuggestions:
        return ExternalSuggestions.from_payload({
            "correction": "Palpitations",
            "clinical": {"term": "心悸", "context": "Awareness of heartbeat."},
        })


@pytest.fixture
def session(ledger):
    return LookupSession(ledger, FakeSuggestionProvider())


def test_search_ranks_provider_suggestions(session):
    result = session.search("  水腫 ")

    assert result.query == "水腫"
    assert result.term == "水腫"
    assert [c.term for c in result.candidates] == ["Edema", "Swelling", "Water retention"]
    assert session.selected_id is None


def test_search_rejects_empty_input(session):
    with pytest.raises(ValueError):
        session.search("   ")


def test_search_without_data_raises_no_candidates(ledger):
    with pytest.raises(NoCandidatesError):
        LookupSession(ledger, FailingProvider()).search("水腫")


def test_search_with_empty_provider_result_is_not_an_error(session):
    """Test that a reachable provider with nothing to offer yields an empty list."""
    result = session.search("unknown term")
    assert result.candidates == []


def test_provider_failure_falls_back_to_history(ledger):
    ledger.record_interaction("水腫", "Edema", InteractionKind.SELECT, Category.CLINICAL)

    result = LookupSession(ledger, FailingProvider()).search("水腫")

    assert [c.term for c in result.candidates] == ["Edema"]
    assert result.candidates[0].selects == 1


def test_correction_is_used_for_ranking_and_votes(ledger):
    session = LookupSession(ledger, CorrectingProvider())

    result = session.search("palpitatons")
    assert result.corrected
    assert result.term == "Palpitations"

    session.select("心悸")
    assert "心悸" in ledger.get_term_history("Palpitations")


def test_select_then_unselect(session, ledger):
    session.search("水腫")

    assert session.select("Swelling") == "Swelling"
    assert ledger.get_term_history("水腫")["Swelling"].selects == 1
    assert ledger.get_total_contributions() == 1

    assert session.select("Swelling") is None
    assert ledger.get_term_history("水腫")["Swelling"].selects == 0
    assert ledger.get_recent_activity() == []
    swelling = next(c for c in session.candidates if c.id == "Swelling")
    assert swelling.selects == 0


def test_select_other_switches_vote(session, ledger):
    session.search("水腫")
    session.select("Swelling")

    session.select("Edema")

    records = ledger.get_term_history("水腫")
    assert records["Swelling"].selects == 0
    assert records["Edema"].selects == 1
    assert records["Edema"].category == Category.CLINICAL
    assert session.selected_id == "Edema"
    items = ledger.get_recent_activity()
    assert [(i.translation, i.action) for i in items] == [("Edema", ActivityAction.VERIFIED)]


def test_reject_removes_candidate(session, ledger):
    session.search("水腫")

    assert session.reject("Water retention") is True

    assert "Water retention" not in [c.id for c in session.candidates]
    assert ledger.get_term_history("水腫")["Water retention"].rejects == 1


def test_reject_ignored_after_selection(session, ledger):
    session.search("水腫")
    session.select("Edema")

    assert session.reject("Swelling") is False
    assert "Swelling" not in ledger.get_term_history("水腫")


def test_rejected_term_hidden_on_later_search(session):
    for _ in range(4):
        session.search("水腫")
        session.reject("Swelling")

    result = session.search("水腫")
    assert "Swelling" not in [c.term for c in result.candidates]


def test_suggest_adds_selected_user_candidate(session, ledger):
    session.search("消瘦")

    item = session.suggest("cachexia")

    assert item.term == "Cachexia"
    assert item.origin == Origin.USER
    assert item.selects == 1
    assert session.candidates[0].id == "Cachexia"
    assert session.selected_id == "Cachexia"
    assert ledger.get_term_history("消瘦")["Cachexia"].selects == 1
    assert [i.action for i in ledger.get_recent_activity()] == [
        ActivityAction.VERIFIED,
        ActivityAction.SUGGESTED,
    ]


def test_suggest_wrong_script_mutates_nothing(session, ledger):
    session.search("消瘦")

    with pytest.raises(InvalidUserSuggestion):
        session.suggest("瘦弱")

    assert ledger.get_term_history("消瘦") == {}
    assert ledger.get_recent_activity() == []


def test_suggest_only_once_per_search(session):
    session.search("消瘦")
    session.suggest("Cachexia")

    with pytest.raises(InvalidUserSuggestion):
        session.suggest("Marasmus")


def test_suggested_term_ranks_first_next_time(session):
    session.search("消瘦")
    session.suggest("Cachexia")

    result = session.search("消瘦")

    assert result.candidates[0].term == "Cachexia"
    assert result.candidates[0].category == Category.USER


def test_actions_require_search(session):
    with pytest.raises(RuntimeError):
        session.select("Edema")


def test_suggest_differing_only_in_case_replaces_candidate(session, ledger):
    session.search("水腫")

    item = session.suggest("water Retention")

    folded = [c.term.lower() for c in session.candidates]
    assert len(folded) == len(set(folded)) == 3
    assert session.candidates[0] is item
    assert item.origin == Origin.USER
    assert item.id in ledger.get_term_history("水腫")


def test_suggest_reuses_stored_key_casing(session, ledger):
    ledger.record_interaction("水腫", "Water retention", InteractionKind.REJECT, Category.DESCRIPTIVE)
    session.search("水腫")

    item = session.suggest("water RETENTION")

    assert item.id == "Water retention"
    assert session.selected_id == "Water retention"
    assert list(ledger.get_term_history("水腫")) == ["Water retention"]
    assert [c.id for c in session.candidates].count("Water retention") == 1
