"""Tests for draft rules - pick preconditions and their ordering."""

import pytest

from src.draft_coordinator.draft_initializer import DraftInitializer
from src.draft_coordinator.draft_rules import DraftRules
from src.draft_coordinator.draft_state import (
    ERR_NO_SLOT,
    ERR_NOT_LIVE,
    ERR_NOT_ON_CLOCK,
    ERR_PLAYER_TAKEN,
    LIVE,
    PAUSED,
    DraftPick,
)


@pytest.fixture
def rules(ledger):
    DraftInitializer(ledger).create_draft(
        year=2025, teams=["A", "B"], rounds=2, draft_id="d1"
    )
    ledger.update_draft("d1", {"status": LIVE})
    return DraftRules(ledger)


def _state(ledger, overall=None):
    draft = ledger.get_draft("d1")
    slot = ledger.get_slot("d1", overall or draft.cur_overall)
    return draft, slot


def _record(ledger, overall, player_id, team="A"):
    ledger.insert_pick(
        DraftPick(
            draft_id="d1",
            overall=overall,
            round=1,
            team=team,
            player_id=player_id,
            made_by=team,
            made_at="2025-08-30T18:00:00+00:00",
        )
    )


class TestValidatePick:
    def test_valid_pick(self, rules, ledger):
        draft, slot = _state(ledger)
        assert rules.validate_pick(draft, slot, "A", "p1") == (True, None)

    def test_player_taken(self, rules, ledger):
        _record(ledger, 1, "p1")
        draft, slot = _state(ledger, overall=2)
        assert rules.validate_pick(draft, slot, "B", "p1") == (False, ERR_PLAYER_TAKEN)

    def test_no_slot(self, rules, ledger):
        draft, _ = _state(ledger)
        assert rules.validate_pick(draft, None, "A", "p1") == (False, ERR_NO_SLOT)

    def test_not_live(self, rules, ledger):
        ledger.update_draft("d1", {"status": PAUSED})
        draft, slot = _state(ledger)
        assert rules.validate_pick(draft, slot, "A", "p1") == (False, ERR_NOT_LIVE)

    def test_not_on_clock(self, rules, ledger):
        draft, slot = _state(ledger)
        assert rules.validate_pick(draft, slot, "B", "p1") == (False, ERR_NOT_ON_CLOCK)

    def test_not_on_clock_even_with_later_slot(self, rules, ledger):
        """B owns overall 2 and 3 but not overall 1."""
        draft, slot = _state(ledger)
        assert rules.validate_pick(draft, slot, "B", "p9")[1] == ERR_NOT_ON_CLOCK

    def test_turn_check_skipped_when_not_enforced(self, rules, ledger):
        draft, slot = _state(ledger)
        assert rules.validate_pick(
            draft, slot, "B", "p1", enforce_turn=False
        ) == (True, None)


class TestCheckOrdering:
    def test_player_taken_beats_not_live(self, rules, ledger):
        _record(ledger, 1, "p1")
        ledger.update_draft("d1", {"status": PAUSED, "cur_overall": 2})
        draft, slot = _state(ledger)
        assert rules.validate_pick(draft, slot, "A", "p1")[1] == ERR_PLAYER_TAKEN

    def test_no_slot_beats_not_live(self, rules, ledger):
        ledger.update_draft("d1", {"status": PAUSED})
        draft, _ = _state(ledger)
        assert rules.validate_pick(draft, None, "A", "p1")[1] == ERR_NO_SLOT

    def test_not_live_beats_not_on_clock(self, rules, ledger):
        ledger.update_draft("d1", {"status": PAUSED})
        draft, slot = _state(ledger)
        assert rules.validate_pick(draft, slot, "B", "p1")[1] == ERR_NOT_LIVE
