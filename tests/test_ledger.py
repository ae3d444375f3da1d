"""Tests for vote ledger operations."""

from medterm.ledger import VoteLedger
from medterm.models.activity import ActivityAction
from medterm.models.votes import Category, InteractionKind, Origin
from medterm.store import load_term_history


def test_select_creates_record_and_verified_entry(ledger, memory_store):
    """Test that a first selection creates the record and logs it."""
    record = ledger.record_interaction("消瘦", "Emaciation", InteractionKind.SELECT, Category.CLINICAL)

    assert record.selects == 1
    assert record.rejects == 0
    assert record.category == Category.CLINICAL
    assert record.origin == Origin.USER

    stored = load_term_history(memory_store)["消瘦"]["Emaciation"]
    assert stored.selects == 1

    head = ledger.get_recent_activity()[0]
    assert (head.original, head.translation, head.action) == ("消瘦", "Emaciation", ActivityAction.VERIFIED)


def test_select_without_category_defaults_to_user(ledger):
    """Test that a record created without a category is USER."""
    record = ledger.record_interaction("消瘦", "Thinness", InteractionKind.SELECT)
    assert record.category == Category.USER


def test_reject_counts_without_activity(ledger):
    """Test that rejections increment rejects and log nothing."""
    for _ in range(2):
        record = ledger.record_interaction("X", "Y", InteractionKind.REJECT, Category.LITERAL)

    assert record.rejects == 2
    assert record.selects == 0
    assert ledger.get_recent_activity() == []


def test_interactions_refresh_last_updated(ledger):
    """Test that every mutation refreshes the timestamp."""
    first = ledger.record_interaction("X", "Y", InteractionKind.SELECT)
    second = ledger.record_interaction("X", "Y", InteractionKind.REJECT)
    assert second.last_updated > first.last_updated


def test_remove_vote_unknown_pair_is_noop(ledger, memory_store):
    """Test that retracting an unknown pair writes nothing."""
    assert ledger.remove_vote("X", "Y") is None
    assert memory_store.read("medterm_data") is None


def test_remove_vote_clamps_at_zero(ledger):
    """Test that retracting twice never goes negative."""
    ledger.record_interaction("X", "Y", InteractionKind.SELECT)

    first = ledger.remove_vote("X", "Y")
    second = ledger.remove_vote("X", "Y")

    assert first.selects == 0
    assert second.selects == 0
    assert ledger.get_term_history("X")["Y"].selects == 0


def test_remove_vote_keeps_record_and_drops_verified_entry(ledger):
    """Test that the record survives and only the verification is unlogged."""
    ledger.add_user_suggestion("消瘦", "Wasting")
    ledger.record_interaction("消瘦", "Wasting", InteractionKind.SELECT)

    ledger.remove_vote("消瘦", "Wasting")

    assert "Wasting" in ledger.get_term_history("消瘦")
    items = ledger.get_recent_activity()
    assert [(i.translation, i.action) for i in items] == [("Wasting", ActivityAction.SUGGESTED)]


def test_change_vote_without_history_is_noop(ledger, memory_store):
    """Test that switching on an unknown term does nothing."""
    assert ledger.change_vote("X", "A", "B", Category.LITERAL) is False
    assert memory_store.read("medterm_data") is None
    assert ledger.get_recent_activity() == []


def test_change_vote_moves_selection(ledger):
    """Test that a switch decrements old and increments new."""
    ledger.record_interaction("消瘦", "Weight loss", InteractionKind.SELECT, Category.LITERAL)

    assert ledger.change_vote("消瘦", "Weight loss", "Emaciation", Category.CLINICAL) is True

    records = ledger.get_term_history("消瘦")
    assert records["Weight loss"].selects == 0
    assert records["Emaciation"].selects == 1
    assert records["Emaciation"].category == Category.CLINICAL
    assert records["Emaciation"].origin == Origin.USER

    items = ledger.get_recent_activity()
    assert len(items) == 1
    assert items[0].translation == "Emaciation"
    assert items[0].action == ActivityAction.VERIFIED


def test_change_vote_round_trip_restores_counts(ledger):
    """Test that switching A->B then B->A restores both select counts."""
    ledger.record_interaction("T", "A", InteractionKind.SELECT, Category.CLINICAL)
    ledger.record_interaction("T", "A", InteractionKind.SELECT, Category.CLINICAL)
    ledger.record_interaction("T", "B", InteractionKind.SELECT, Category.LITERAL)
    before = {k: r.selects for k, r in ledger.get_term_history("T").items()}

    ledger.change_vote("T", "A", "B", Category.LITERAL)
    ledger.change_vote("T", "B", "A", Category.CLINICAL)

    after = {k: r.selects for k, r in ledger.get_term_history("T").items()}
    assert after == before


def test_change_vote_missing_old_record_still_increments_new(ledger):
    """Test that a switch tolerates an old term with no record."""
    ledger.record_interaction("T", "A", InteractionKind.SELECT)

    ledger.change_vote("T", "Ghost", "B", Category.DESCRIPTIVE)

    records = ledger.get_term_history("T")
    assert "Ghost" not in records
    assert records["A"].selects == 1
    assert records["B"].selects == 1


def test_add_user_suggestion_seeds_zero_record(ledger):
    """Test that a suggestion creates a zero-vote USER record."""
    record = ledger.add_user_suggestion("消瘦", "Wasting")

    assert record.selects == 0
    assert record.rejects == 0
    assert record.category == Category.USER
    assert record.origin == Origin.USER
    assert ledger.get_recent_activity()[0].action == ActivityAction.SUGGESTED


def test_add_user_suggestion_overwrites_existing(ledger):
    """Test that suggesting an existing pair resets its counters."""
    ledger.record_interaction("X", "Y", InteractionKind.REJECT, Category.CLINICAL)

    record = ledger.add_user_suggestion("X", "Y")

    assert record.rejects == 0
    assert ledger.get_term_history("X")["Y"].category == Category.USER


def test_suggest_then_select_end_state(ledger):
    """Test the two-call suggestion pattern."""
    before = ledger.get_total_contributions()

    ledger.add_user_suggestion("消瘦", "Wasting")
    ledger.record_interaction("消瘦", "Wasting", InteractionKind.SELECT, Category.USER)

    assert ledger.get_total_contributions() == before + 1
    assert ledger.get_term_history("消瘦")["Wasting"].selects == 1
    items = ledger.get_recent_activity()
    assert [(i.original, i.translation, i.action) for i in items] == [
        ("消瘦", "Wasting", ActivityAction.VERIFIED),
        ("消瘦", "Wasting", ActivityAction.SUGGESTED),
    ]


def test_submit_suggestion_matches_two_call_pattern(memory_store, clock):
    """Test that the combined call produces the same end state."""
    ledger = VoteLedger(memory_store, clock=clock)

    record = ledger.submit_suggestion("消瘦", "Wasting")

    assert record.selects == 1
    assert [i.action for i in ledger.get_recent_activity()] == [
        ActivityAction.VERIFIED,
        ActivityAction.SUGGESTED,
    ]


def test_total_contributions_sums_all_terms(ledger):
    """Test that contributions count selects across every term."""
    ledger.record_interaction("A", "a1", InteractionKind.SELECT)
    ledger.record_interaction("A", "a2", InteractionKind.SELECT)
    ledger.record_interaction("B", "b1", InteractionKind.SELECT)
    ledger.record_interaction("B", "b1", InteractionKind.REJECT)
    ledger.remove_vote("A", "a2")

    assert ledger.get_total_contributions() == 2


def test_operations_resolve_keys_case_insensitively(ledger):
    """Test that differently cased terms update the existing record."""
    ledger.record_interaction("Edema", "水腫", InteractionKind.SELECT)
    ledger.record_interaction("edema ", "水腫", InteractionKind.SELECT)
    ledger.record_interaction("Palpitations", "Heart Racing", InteractionKind.SELECT)
    ledger.record_interaction("Palpitations", "heart racing", InteractionKind.SELECT)

    assert ledger.get_term_history("Edema")["水腫"].selects == 2
    assert list(ledger.get_term_history("Palpitations")) == ["Heart Racing"]
    assert ledger.get_term_history("Palpitations")["Heart Racing"].selects == 2


def test_ledger_persists_across_instances(file_store):
    """Test that a new ledger over the same files sees earlier votes."""
    VoteLedger(file_store).record_interaction("消瘦", "Wasting", InteractionKind.SELECT)

    reopened = VoteLedger(file_store)
    assert reopened.get_total_contributions() == 1
    assert reopened.get_recent_activity()[0].translation == "Wasting"
