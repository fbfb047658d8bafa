"""Draft initialization - builds the turn order and creates draft instances."""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from src.draft_coordinator.config import (
    DEFAULT_CLOCK_SECONDS,
    DEFAULT_ROUNDS,
    DEFAULT_SNAKE,
)
from src.draft_coordinator.draft_ledger import DraftLedger
from src.draft_coordinator.draft_state import NOT_STARTED, Draft, DraftSlot

logger = logging.getLogger(__name__)


class DraftInitializer:
    """Handles creation of new draft instances."""

    def __init__(self, ledger: DraftLedger):
        self.ledger = ledger

    def create_draft(
        self,
        year: int,
        teams: List[str],
        rounds: int = DEFAULT_ROUNDS,
        clock_seconds: int = DEFAULT_CLOCK_SECONDS,
        snake: bool = DEFAULT_SNAKE,
        draft_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> str:
        """
        Create a new draft and its turn order.

        Args:
            year: Season the draft belongs to
            teams: Base team order for round 1 (non-empty, no duplicates)
            rounds: Number of rounds (>= 1)
            clock_seconds: Per-pick time budget (>= 1)
            snake: Reverse the order on even rounds
            draft_id: Explicit id; a uuid4 is generated when omitted
            created_at: Creation timestamp (default: now, UTC)

        Returns:
            The draft id. Re-using an existing id leaves its slots untouched.
        """
        self._validate_inputs(teams, rounds, clock_seconds)

        draft_id = draft_id or str(uuid.uuid4())
        created_at = created_at or datetime.now(timezone.utc)

        draft = Draft(
            draft_id=draft_id,
            year=year,
            rounds=rounds,
            clock_seconds=clock_seconds,
            status=NOT_STARTED,
            cur_overall=1,
            created_at=created_at.isoformat(),
        )
        slots = self.build_slots(draft_id, rounds, teams, snake)

        with self.ledger.transaction():
            created = self.ledger.insert_draft(draft)
            if created:
                self.ledger.insert_slots(slots)

        if created:
            logger.info(
                "Created draft %s: %d season, %d teams, %d rounds, %ds clock, %s",
                draft_id,
                year,
                len(teams),
                rounds,
                clock_seconds,
                "snake" if snake else "linear",
            )
        else:
            logger.info("Draft %s already exists; turn order left unchanged", draft_id)

        return draft_id

    @staticmethod
    def build_slots(
        draft_id: str, rounds: int, teams: List[str], snake: bool
    ) -> List[DraftSlot]:
        """Generate the full turn order.

        Odd rounds use the base order; even rounds are reversed when
        ``snake`` is set. Overall numbering runs 1..rounds*len(teams).
        """
        if not teams:
            raise ValueError("teams cannot be empty")

        slots = []
        overall = 0
        for rnd in range(1, rounds + 1):
            order = list(reversed(teams)) if snake and rnd % 2 == 0 else teams
            for pick_in_round, team in enumerate(order, start=1):
                overall += 1
                slots.append(
                    DraftSlot(
                        draft_id=draft_id,
                        overall=overall,
                        round=rnd,
                        pick_in_round=pick_in_round,
                        team=team,
                    )
                )
        return slots

    def _validate_inputs(self, teams: List[str], rounds: int, clock_seconds: int):
        """Validate draft configuration inputs."""
        if not teams:
            raise ValueError("Team list cannot be empty")

        if len(set(teams)) != len(teams):
            dupes = sorted({t for t in teams if teams.count(t) > 1})
            raise ValueError(f"Team list contains duplicates: {dupes}")

        if rounds < 1:
            raise ValueError(f"Rounds must be at least 1 (got {rounds})")

        if clock_seconds < 1:
            raise ValueError(
                f"Clock seconds must be at least 1 (got {clock_seconds})"
            )
