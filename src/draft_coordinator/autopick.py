"""Autopick - selects for a team whose clock has run out."""

import logging
from typing import TYPE_CHECKING, Iterator, Optional, Set, Tuple

from src.draft_coordinator.config import AUTO_ACTOR
from src.draft_coordinator.draft_state import (
    ERR_ALREADY_PICKED,
    ERR_NO_AVAILABLE_PLAYER,
    ERR_NO_TEAM,
    ERR_PLAYER_TAKEN,
    AutopickResult,
    QueueEntry,
)

if TYPE_CHECKING:
    from src.draft_coordinator.draft_controller import DraftController

logger = logging.getLogger(__name__)


class AutopickResolver:
    """Resolves expired clocks.

    Selection order for the team on the clock:
        1. its queue, in rank order, first player not yet drafted
        2. the draft's ranked player pool, first player not yet drafted
        3. nothing available: the slot is filled with a skip entry

    Safe to call at any frequency and from concurrent callers. Each call
    re-reads persisted state, and the forced pick is pinned to the slot
    that was expired when the call began, so at most one call wins a slot.
    """

    def __init__(self, controller: "DraftController"):
        self.controller = controller
        self.ledger = controller.ledger

    def check(self, draft_id: str) -> AutopickResult:
        now = self.controller.now()
        draft = self.ledger.get_draft(draft_id)

        if draft is None or not draft.is_clock_expired(now):
            logger.debug("Draft %s: no expired clock", draft_id)
            return AutopickResult(picked=False)

        slot = self.ledger.get_slot(draft_id, draft.cur_overall)
        if slot is None:
            return AutopickResult(picked=False, error=ERR_NO_TEAM)

        logger.info(
            "Draft %s: clock expired for %s at overall %d",
            draft_id,
            slot.team,
            slot.overall,
        )

        taken = set(self.ledger.get_picked_player_ids(draft_id))
        for player_id, player_name, queue_entry in self._candidates(
            draft_id, slot.team, taken
        ):
            result = self.controller.force_pick(
                draft_id,
                player_id,
                player_name=player_name,
                team=slot.team,
                made_by=AUTO_ACTOR,
                expected_overall=slot.overall,
                queue_entry=queue_entry,
            )
            if result.ok:
                logger.info(
                    "Autopicked %s for %s at overall %d (%s)",
                    player_name or player_id,
                    slot.team,
                    slot.overall,
                    "queue" if queue_entry is not None else "pool",
                )
                return AutopickResult(
                    picked=True, player_id=player_id, player_name=player_name
                )
            if result.error == ERR_PLAYER_TAKEN:
                # Drafted by a concurrent caller since we read the ledger.
                taken.add(player_id)
                continue
            return self._lost_race(draft_id, slot.overall, result.error)

        skipped = self.controller.skip_slot(draft_id, expected_overall=slot.overall)
        if not skipped.ok:
            return self._lost_race(draft_id, slot.overall, skipped.error)

        logger.info(
            "Draft %s: nothing available for %s, overall %d skipped",
            draft_id,
            slot.team,
            slot.overall,
        )
        return AutopickResult(picked=False, error=ERR_NO_AVAILABLE_PLAYER)

    def _candidates(
        self, draft_id: str, team: str, taken: Set[str]
    ) -> Iterator[Tuple[str, Optional[str], Optional[QueueEntry]]]:
        """Yield (player_id, name, queue_entry) in selection order.

        Candidates are produced lazily so the pool is only read once the
        queue is exhausted. ``taken`` is consulted on every step.
        """
        for entry in self.ledger.get_queue(draft_id, team):
            if entry.player_id in taken:
                continue
            name = self.ledger.get_player_name(draft_id, entry.player_id)
            yield entry.player_id, name, entry

        for player in self.ledger.get_players(draft_id):
            if player.player_id in taken:
                continue
            yield player.player_id, player.name, None

    @staticmethod
    def _lost_race(draft_id: str, overall: int, error: Optional[str]) -> AutopickResult:
        logger.info(
            "Draft %s: overall %d already resolved by another caller (%s)",
            draft_id,
            overall,
            error,
        )
        return AutopickResult(picked=False, error=error or ERR_ALREADY_PICKED)
