"""Team queue management - each team's ordered draft preferences."""

import logging
from typing import List, Sequence

from src.draft_coordinator.draft_ledger import DraftLedger

logger = logging.getLogger(__name__)


class TeamQueueManager:
    """Reads and replaces per-team preference queues.

    Queues are replaced wholesale; there are no partial edits. Entries are
    consumed by autopick when used. No de-duplication is applied, callers
    send a clean list.
    """

    def __init__(self, ledger: DraftLedger):
        self.ledger = ledger

    def get_queue(self, draft_id: str, team: str) -> List[str]:
        """Player ids in the team's queue, best first."""
        return [entry.player_id for entry in self.ledger.get_queue(draft_id, team)]

    def set_queue(self, draft_id: str, team: str, player_ids: Sequence[str]) -> int:
        """Replace the team's queue. Rank is the 1-based list position."""
        player_ids = [str(pid).strip() for pid in player_ids if str(pid).strip()]
        count = self.ledger.replace_queue(draft_id, team, player_ids)
        logger.info("Draft %s: %s queue set (%d players)", draft_id, team, count)
        return count
