"""Draft controller - turn/clock state machine and the single pick path."""

import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Sequence

from src.draft_coordinator.autopick import AutopickResolver
from src.draft_coordinator.config import (
    ADMIN_ACTOR,
    AUTO_ACTOR,
    AVAILABLE_DEFAULT_LIMIT,
    DEFAULT_CLOCK_SECONDS,
    DEFAULT_ROUNDS,
    DEFAULT_SNAKE,
)
from src.draft_coordinator.draft_initializer import DraftInitializer
from src.draft_coordinator.draft_ledger import DraftLedger
from src.draft_coordinator.draft_rules import DraftRules, StaleStateError
from src.draft_coordinator.draft_state import (
    COMPLETED,
    ERR_ALREADY_PICKED,
    ERR_INVALID_STATE,
    ERR_NO_DRAFT,
    ERR_NO_PICKS,
    ERR_NO_SLOT,
    ERR_NO_TEAM,
    ERR_NOT_LAST_PICK,
    ERR_NOT_LIVE,
    ERR_PLAYER_TAKEN,
    LIVE,
    NOT_STARTED,
    PAUSED,
    ActionResult,
    AutopickResult,
    Draft,
    DraftOverview,
    DraftPick,
    PickResult,
    PoolPlayer,
    QueueEntry,
)
from src.draft_coordinator.overview import DraftOverviewBuilder
from src.draft_coordinator.queue_manager import TeamQueueManager

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DraftController:
    """Main controller for live draft coordination.

    Holds no draft state of its own. Every operation re-reads the ledger,
    decides, and writes back with conditional updates inside one
    transaction, so any number of short-lived controllers can share a
    database.
    """

    def __init__(
        self,
        ledger: DraftLedger,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.ledger = ledger
        self.now = now or _utcnow
        self.rules = DraftRules(ledger)
        self.initializer = DraftInitializer(ledger)
        self.queues = TeamQueueManager(ledger)
        self.overview = DraftOverviewBuilder(ledger)
        self.autopick = AutopickResolver(self)

    # ------------------------------------------------------------------
    # Creation / lookup
    # ------------------------------------------------------------------
    def create_draft(
        self,
        year: int,
        teams: List[str],
        rounds: int = DEFAULT_ROUNDS,
        clock_seconds: int = DEFAULT_CLOCK_SECONDS,
        snake: bool = DEFAULT_SNAKE,
        draft_id: Optional[str] = None,
    ) -> str:
        return self.initializer.create_draft(
            year=year,
            teams=teams,
            rounds=rounds,
            clock_seconds=clock_seconds,
            snake=snake,
            draft_id=draft_id,
            created_at=self.now(),
        )

    def get_draft(self, draft_id: str) -> Optional[Draft]:
        return self.ledger.get_draft(draft_id)

    def get_active_or_latest_draft_id(self) -> Optional[str]:
        return self.ledger.get_active_or_latest_draft_id()

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def start(self, draft_id: str) -> ActionResult:
        """NOT_STARTED -> LIVE, pointing at the first slot without a pick."""
        now = self.now()
        with self.ledger.transaction():
            draft = self.ledger.get_draft(draft_id)
            if draft is None:
                return ActionResult(False, ERR_NO_DRAFT)
            if draft.status != NOT_STARTED:
                return ActionResult(False, ERR_INVALID_STATE)

            first = self.ledger.next_unfilled_overall(draft_id, after=0)
            if first is None:
                last = self.ledger.get_last_pick(draft_id)
                values = {
                    "status": COMPLETED,
                    "cur_overall": (last.overall + 1) if last else 1,
                    "started_at": now.isoformat(),
                    "completed_at": now.isoformat(),
                }
            else:
                values = {
                    "status": LIVE,
                    "cur_overall": first,
                    "started_at": now.isoformat(),
                    **self._clock_values(now, draft.clock_seconds),
                }
            self.ledger.update_draft(draft_id, values, expect_status=(NOT_STARTED,))

        logger.info("Draft %s started (status %s)", draft_id, values["status"])
        return ActionResult(True)

    def pause(self, draft_id: str) -> ActionResult:
        """LIVE -> PAUSED. The clock fields are left as they were."""
        updated = self.ledger.update_draft(
            draft_id, {"status": PAUSED}, expect_status=(LIVE,)
        )
        if not updated:
            return self._transition_failure(draft_id)
        logger.info("Draft %s paused", draft_id)
        return ActionResult(True)

    def resume(self, draft_id: str) -> ActionResult:
        """PAUSED -> LIVE with a fresh clock starting now."""
        now = self.now()
        with self.ledger.transaction():
            draft = self.ledger.get_draft(draft_id)
            if draft is None:
                return ActionResult(False, ERR_NO_DRAFT)
            if draft.status != PAUSED:
                return ActionResult(False, ERR_INVALID_STATE)
            self.ledger.update_draft(
                draft_id,
                {"status": LIVE, **self._clock_values(now, draft.clock_seconds)},
                expect_status=(PAUSED,),
            )
        logger.info("Draft %s resumed at overall %d", draft_id, draft.cur_overall)
        return ActionResult(True)

    def set_clock_seconds(self, draft_id: str, seconds: int) -> ActionResult:
        """Change the per-pick budget. A running clock keeps its start time."""
        if seconds < 1:
            raise ValueError(f"Clock seconds must be at least 1 (got {seconds})")

        with self.ledger.transaction():
            draft = self.ledger.get_draft(draft_id)
            if draft is None:
                return ActionResult(False, ERR_NO_DRAFT)

            values: Dict = {"clock_seconds": seconds}
            if draft.is_live and draft.clock_started_at:
                started = datetime.fromisoformat(draft.clock_started_at)
                values["deadline_ts"] = (
                    started + timedelta(seconds=seconds)
                ).isoformat()
            self.ledger.update_draft(draft_id, values)

        logger.info("Draft %s clock set to %ds", draft_id, seconds)
        return ActionResult(True)

    # ------------------------------------------------------------------
    # Picks
    # ------------------------------------------------------------------
    def make_pick(
        self,
        draft_id: str,
        team: str,
        player_id: str,
        player_name: Optional[str] = None,
        made_by: Optional[str] = None,
    ) -> PickResult:
        """Record a pick for the team on the clock.

        Args:
            draft_id: Draft to pick in.
            team: Team making the pick; must own the current slot.
            player_id: Player being drafted. Unknown ids are accepted.
            player_name: Display label stored with the pick.
            made_by: Actor recorded for audit (default: the team).

        Returns:
            PickResult with the recorded pick, or the first failing
            precondition (player_taken, no_slot, not_live, not_on_clock).
        """
        return self._apply_pick(
            draft_id,
            team=team,
            player_id=player_id,
            player_name=player_name,
            made_by=made_by or team,
            enforce_turn=True,
        )

    def force_pick(
        self,
        draft_id: str,
        player_id: str,
        player_name: Optional[str] = None,
        team: Optional[str] = None,
        made_by: str = ADMIN_ACTOR,
        expected_overall: Optional[int] = None,
        queue_entry: Optional[QueueEntry] = None,
    ) -> PickResult:
        """Record a pick on behalf of any team, bypassing turn ownership.

        When ``team`` is omitted the pick goes to the team on the clock.
        ``expected_overall`` rejects the pick with already_picked if the
        draft has moved past that slot in the meantime.
        ``queue_entry`` is removed from its team's queue in the same
        transaction as the pick.
        """
        return self._apply_pick(
            draft_id,
            team=team,
            player_id=player_id,
            player_name=player_name,
            made_by=made_by,
            enforce_turn=False,
            expected_overall=expected_overall,
            queue_entry=queue_entry,
        )

    def skip_slot(
        self,
        draft_id: str,
        expected_overall: int,
        made_by: str = AUTO_ACTOR,
    ) -> PickResult:
        """Fill the current slot with a skip entry and move the clock on."""
        now = self.now()
        try:
            with self.ledger.transaction():
                draft = self.ledger.get_draft(draft_id)
                if draft is None:
                    return PickResult(False, ERR_NO_DRAFT)
                if not draft.is_live:
                    return PickResult(False, ERR_NOT_LIVE)
                if draft.cur_overall != expected_overall:
                    return PickResult(False, ERR_ALREADY_PICKED)

                slot = self.ledger.get_slot(draft_id, draft.cur_overall)
                if slot is None:
                    return PickResult(False, ERR_NO_SLOT)

                entry = DraftPick(
                    draft_id=draft_id,
                    overall=slot.overall,
                    round=slot.round,
                    team=slot.team,
                    player_id=None,
                    made_by=made_by,
                    made_at=now.isoformat(),
                    skipped=True,
                )
                try:
                    self.ledger.insert_pick(entry)
                except sqlite3.IntegrityError:
                    return PickResult(False, ERR_ALREADY_PICKED)

                self._advance(draft, slot.overall, now)
        except StaleStateError:
            return PickResult(False, ERR_ALREADY_PICKED)

        logger.info(
            "Pick %d (Rd %d): %s skipped, no available player",
            entry.overall,
            entry.round,
            entry.team,
        )
        return PickResult(True, pick=entry)

    def undo_last_pick(
        self, draft_id: str, overall: Optional[int] = None
    ) -> PickResult:
        """Remove the most recent ledger entry and pause the draft.

        Args:
            draft_id: Draft to rewind.
            overall: If given, must be the most recent entry's overall.

        Returns:
            PickResult carrying the removed entry, or no_picks /
            not_last_pick / no_draft.
        """
        with self.ledger.transaction():
            draft = self.ledger.get_draft(draft_id)
            if draft is None:
                return PickResult(False, ERR_NO_DRAFT)

            last = self.ledger.get_last_pick(draft_id)
            if last is None:
                return PickResult(False, ERR_NO_PICKS)
            if overall is not None and overall != last.overall:
                return PickResult(False, ERR_NOT_LAST_PICK)

            self.ledger.delete_pick(draft_id, last.overall)
            self.ledger.update_draft(
                draft_id,
                {
                    "status": PAUSED,
                    "cur_overall": last.overall,
                    "clock_started_at": None,
                    "deadline_ts": None,
                    "completed_at": None,
                },
            )

        logger.info(
            "Undid pick %d (%s: %s); draft %s paused",
            last.overall,
            last.team,
            last.player_id or "skipped",
            draft_id,
        )
        return PickResult(True, pick=last)

    def get_picked_player_ids(self, draft_id: str) -> List[str]:
        return self.ledger.get_picked_player_ids(draft_id)

    # ------------------------------------------------------------------
    # Queues, overview, autopick
    # ------------------------------------------------------------------
    def get_team_queue(self, draft_id: str, team: str) -> List[str]:
        return self.queues.get_queue(draft_id, team)

    def set_team_queue(self, draft_id: str, team: str, player_ids: Sequence[str]) -> int:
        return self.queues.set_queue(draft_id, team, player_ids)

    def get_overview(self, draft_id: str) -> Optional[DraftOverview]:
        return self.overview.build(draft_id)

    def list_available_players(
        self,
        draft_id: str,
        query: Optional[str] = None,
        position: Optional[str] = None,
        limit: int = AVAILABLE_DEFAULT_LIMIT,
    ) -> List[PoolPlayer]:
        return self.overview.available_players(
            draft_id, query=query, position=position, limit=limit
        )

    def check_autopick(self, draft_id: str) -> AutopickResult:
        return self.autopick.check(draft_id)

    # ------------------------------------------------------------------
    # Player pool
    # ------------------------------------------------------------------
    def set_draft_players(self, draft_id: str, players: Sequence[PoolPlayer]) -> int:
        """Replace the draft's ranked player pool. Returns the pool size."""
        count = self.ledger.replace_players(draft_id, players)
        logger.info("Loaded %d pool players for draft %s", count, draft_id)
        return count

    def clear_draft_players(self, draft_id: str) -> int:
        removed = self.ledger.clear_players(draft_id)
        logger.info("Cleared %d pool players for draft %s", removed, draft_id)
        return removed

    def count_draft_players(self, draft_id: str) -> int:
        return self.ledger.count_players(draft_id)

    def get_draft_players(self, draft_id: str) -> List[PoolPlayer]:
        return self.ledger.get_players(draft_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _apply_pick(
        self,
        draft_id: str,
        team: Optional[str],
        player_id: str,
        player_name: Optional[str],
        made_by: str,
        enforce_turn: bool,
        expected_overall: Optional[int] = None,
        queue_entry: Optional[QueueEntry] = None,
    ) -> PickResult:
        """Validate and record one pick, then move the turn pointer."""
        now = self.now()
        try:
            with self.ledger.transaction():
                draft = self.ledger.get_draft(draft_id)
                if draft is None:
                    return PickResult(False, ERR_NO_DRAFT)
                if expected_overall is not None and draft.cur_overall != expected_overall:
                    return PickResult(False, ERR_ALREADY_PICKED)

                slot = self.ledger.get_slot(draft_id, draft.cur_overall)
                if not enforce_turn and team is None:
                    if slot is None:
                        return PickResult(False, ERR_NO_TEAM)
                    team = slot.team

                is_valid, error = self.rules.validate_pick(
                    draft, slot, team, player_id, enforce_turn=enforce_turn
                )
                if not is_valid:
                    logger.warning(
                        "Rejected pick in draft %s: %s selecting %s (%s)",
                        draft_id,
                        team,
                        player_id,
                        error,
                    )
                    return PickResult(False, error)

                pick = DraftPick(
                    draft_id=draft_id,
                    overall=slot.overall,
                    round=slot.round,
                    team=team,
                    player_id=player_id,
                    player_name=player_name,
                    made_by=made_by,
                    made_at=now.isoformat(),
                )
                try:
                    self.ledger.insert_pick(pick)
                except sqlite3.IntegrityError:
                    error = self._conflict_error(draft_id, player_id)
                    logger.warning(
                        "Pick %d in draft %s lost a race (%s)",
                        slot.overall,
                        draft_id,
                        error,
                    )
                    return PickResult(False, error)

                self._advance(draft, slot.overall, now)
                if queue_entry is not None:
                    self.ledger.delete_queue_entry(queue_entry)
        except StaleStateError:
            return PickResult(False, ERR_ALREADY_PICKED)

        logger.info(
            "Pick %d (Rd %d): %s selects %s (%s) by %s",
            pick.overall,
            pick.round,
            pick.team,
            player_name or player_id,
            player_id,
            made_by,
        )
        return PickResult(True, pick=pick)

    def _advance(self, draft: Draft, filled_overall: int, now: datetime):
        """Point the draft at the next unfilled slot or complete it."""
        nxt = self.ledger.next_unfilled_overall(draft.draft_id, after=filled_overall)
        if nxt is not None:
            values = {
                "cur_overall": nxt,
                **self._clock_values(now, draft.clock_seconds),
            }
        else:
            values = {
                "status": COMPLETED,
                "cur_overall": filled_overall + 1,
                "clock_started_at": None,
                "deadline_ts": None,
                "completed_at": now.isoformat(),
            }

        updated = self.ledger.update_draft(
            draft.draft_id,
            values,
            expect_status=(LIVE,),
            expect_overall=filled_overall,
        )
        if not updated:
            raise StaleStateError(
                f"Draft {draft.draft_id} moved past overall {filled_overall}"
            )
        if nxt is None:
            logger.info("Draft %s completed", draft.draft_id)

    def _conflict_error(self, draft_id: str, player_id: str) -> str:
        if self.ledger.is_player_picked(draft_id, player_id):
            return ERR_PLAYER_TAKEN
        return ERR_ALREADY_PICKED

    def _transition_failure(self, draft_id: str) -> ActionResult:
        if self.ledger.get_draft(draft_id) is None:
            return ActionResult(False, ERR_NO_DRAFT)
        return ActionResult(False, ERR_INVALID_STATE)

    @staticmethod
    def _clock_values(now: datetime, clock_seconds: int) -> Dict[str, str]:
        return {
            "clock_started_at": now.isoformat(),
            "deadline_ts": (now + timedelta(seconds=clock_seconds)).isoformat(),
        }
