"""Draft overview - read-only snapshots for display."""

from typing import List, Optional

from src.draft_coordinator.config import (
    ALLOWED_POSITIONS,
    AVAILABLE_DEFAULT_LIMIT,
    AVAILABLE_MAX_LIMIT,
    RECENT_PICKS_LIMIT,
    UPCOMING_LIMIT,
)
from src.draft_coordinator.draft_ledger import DraftLedger
from src.draft_coordinator.draft_state import DraftOverview, PoolPlayer


class DraftOverviewBuilder:
    """Assembles overview snapshots. Never writes to the ledger."""

    def __init__(
        self,
        ledger: DraftLedger,
        recent_limit: int = RECENT_PICKS_LIMIT,
        upcoming_limit: int = UPCOMING_LIMIT,
    ):
        self.ledger = ledger
        self.recent_limit = recent_limit
        self.upcoming_limit = upcoming_limit

    def build(self, draft_id: str) -> Optional[DraftOverview]:
        """Snapshot of the draft head, on-clock team, recent picks and lookahead.

        Returns None if the draft does not exist.
        """
        draft = self.ledger.get_draft(draft_id)
        if draft is None:
            return None

        on_clock_team = None
        if not draft.is_complete:
            slot = self.ledger.get_slot(draft_id, draft.cur_overall)
            on_clock_team = slot.team if slot else None

        return DraftOverview(
            draft=draft,
            on_clock_team=on_clock_team,
            recent_picks=self.ledger.get_recent_picks(draft_id, self.recent_limit),
            upcoming=self.ledger.get_unfilled_slots(
                draft_id, draft.cur_overall, self.upcoming_limit
            ),
        )

    def available_players(
        self,
        draft_id: str,
        query: Optional[str] = None,
        position: Optional[str] = None,
        limit: int = AVAILABLE_DEFAULT_LIMIT,
    ) -> List[PoolPlayer]:
        """Undrafted pool players in pool order.

        Args:
            draft_id: Draft whose pool to list.
            query: Case-insensitive substring of the player name.
            position: Exact position (QB, RB, WR, TE, K).
            limit: Maximum rows, clamped to [1, AVAILABLE_MAX_LIMIT].
        """
        taken = set(self.ledger.get_picked_player_ids(draft_id))
        query = (query or "").strip().lower()
        position = (position or "").strip().upper()
        limit = max(1, min(AVAILABLE_MAX_LIMIT, limit))

        players = []
        for player in self.ledger.get_players(draft_id):
            pos = (player.pos or "").upper()
            if pos not in ALLOWED_POSITIONS or player.player_id in taken:
                continue
            if position and pos != position:
                continue
            if query and query not in player.name.lower():
                continue
            players.append(player)
            if len(players) >= limit:
                break
        return players
