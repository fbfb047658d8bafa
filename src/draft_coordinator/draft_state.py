"""Draft state data models - rows of the draft ledger and operation results."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

# Draft status values
NOT_STARTED = "NOT_STARTED"
LIVE = "LIVE"
PAUSED = "PAUSED"
COMPLETED = "COMPLETED"

DRAFT_STATUSES = (NOT_STARTED, LIVE, PAUSED, COMPLETED)

# Typed rejection codes
ERR_PLAYER_TAKEN = "player_taken"
ERR_NO_SLOT = "no_slot"
ERR_NOT_LIVE = "not_live"
ERR_NOT_ON_CLOCK = "not_on_clock"
ERR_NO_TEAM = "no_team"
ERR_NO_PICKS = "no_picks"
ERR_NO_AVAILABLE_PLAYER = "no_available_player"
ERR_NO_DRAFT = "no_draft"
ERR_INVALID_STATE = "invalid_state"
ERR_ALREADY_PICKED = "already_picked"
ERR_NOT_LAST_PICK = "not_last_pick"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp stored in the ledger."""
    if not value:
        return None
    return datetime.fromisoformat(value)


@dataclass
class Draft:
    """Draft head row - one per season/event."""

    draft_id: str
    year: int
    rounds: int
    clock_seconds: int
    status: str
    cur_overall: int
    created_at: str
    clock_started_at: Optional[str] = None
    deadline_ts: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None

    @property
    def is_live(self) -> bool:
        return self.status == LIVE

    @property
    def is_complete(self) -> bool:
        return self.status == COMPLETED

    def deadline(self) -> Optional[datetime]:
        return parse_timestamp(self.deadline_ts)

    def is_clock_expired(self, now: datetime) -> bool:
        """Whether the on-clock team has run out of time."""
        deadline = self.deadline()
        return self.is_live and deadline is not None and now >= deadline


@dataclass(frozen=True)
class DraftSlot:
    """Immutable turn-order entry."""

    draft_id: str
    overall: int
    round: int
    pick_in_round: int
    team: str


@dataclass
class DraftPick:
    """A single ledger entry.

    A skipped slot is recorded with ``player_id`` None and ``skipped`` True.
    """

    draft_id: str
    overall: int
    round: int
    team: str
    player_id: Optional[str]
    made_by: str
    made_at: str
    player_name: Optional[str] = None
    skipped: bool = False
    id: Optional[int] = None


@dataclass(frozen=True)
class QueueEntry:
    """One row of a team's draft-preference queue."""

    draft_id: str
    team: str
    rank: int
    player_id: str


@dataclass
class PoolPlayer:
    """Ranked draftable identity used as the autopick fallback."""

    player_id: str
    name: str
    pos: str = ""
    nfl: Optional[str] = None
    rank: Optional[int] = None


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a head-state operation (start, pause, resume, undo)."""

    ok: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class PickResult:
    ok: bool
    error: Optional[str] = None
    pick: Optional[DraftPick] = None


@dataclass(frozen=True)
class AutopickResult:
    picked: bool
    player_id: Optional[str] = None
    player_name: Optional[str] = None
    error: Optional[str] = None


@dataclass
class DraftOverview:
    """Point-in-time snapshot of a draft for display."""

    draft: Draft
    on_clock_team: Optional[str]
    recent_picks: List[DraftPick] = field(default_factory=list)
    upcoming: List[DraftSlot] = field(default_factory=list)

    def remaining_seconds(self, now: datetime) -> Optional[int]:
        """Whole seconds left on the clock, or None when not running."""
        deadline = self.draft.deadline()
        if not self.draft.is_live or deadline is None:
            return None
        return max(0, int((deadline - now).total_seconds()))

    def to_dict(self) -> Dict:
        """Convert to a JSON-serializable dict."""
        head = asdict(self.draft)
        head["on_clock_team"] = self.on_clock_team
        head["recent_picks"] = [asdict(pick) for pick in self.recent_picks]
        head["upcoming"] = [
            {"overall": slot.overall, "round": slot.round, "team": slot.team}
            for slot in self.upcoming
        ]
        return head
