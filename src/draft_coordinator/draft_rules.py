"""Draft rule enforcement and pick validation."""

from typing import Optional, Tuple

from src.draft_coordinator.draft_ledger import DraftLedger
from src.draft_coordinator.draft_state import (
    ERR_NO_SLOT,
    ERR_NOT_LIVE,
    ERR_NOT_ON_CLOCK,
    ERR_PLAYER_TAKEN,
    Draft,
    DraftSlot,
)


class StaleStateError(Exception):
    """Raised when a conditional head update finds the draft has moved on."""

    pass


class DraftRules:
    """Enforces pick preconditions against persisted ledger state."""

    def __init__(self, ledger: DraftLedger):
        self.ledger = ledger

    def validate_pick(
        self,
        draft: Draft,
        slot: Optional[DraftSlot],
        team: Optional[str],
        player_id: str,
        enforce_turn: bool = True,
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate if a pick is legal. Checks run in order; first failure wins.

        Returns:
            (is_valid, error_code) - (True, None) if valid
        """
        # Check 1: Is player still undrafted?
        if self.ledger.is_player_picked(draft.draft_id, player_id):
            return False, ERR_PLAYER_TAKEN

        # Check 2: Is there a slot at the pointer?
        if slot is None:
            return False, ERR_NO_SLOT

        # Check 3: Is the draft running?
        if not draft.is_live:
            return False, ERR_NOT_LIVE

        # Check 4: Is it this team's turn? (Skipped for forced picks)
        if enforce_turn and slot.team != team:
            return False, ERR_NOT_ON_CLOCK

        return True, None
