from src.draft_coordinator.autopick import AutopickResolver
from src.draft_coordinator.draft_controller import DraftController
from src.draft_coordinator.draft_initializer import DraftInitializer
from src.draft_coordinator.draft_ledger import DraftLedger
from src.draft_coordinator.draft_rules import DraftRules, StaleStateError
from src.draft_coordinator.draft_state import (
    ActionResult,
    AutopickResult,
    Draft,
    DraftOverview,
    DraftPick,
    DraftSlot,
    PickResult,
    PoolPlayer,
    QueueEntry,
)
from src.draft_coordinator.overview import DraftOverviewBuilder
from src.draft_coordinator.queue_manager import TeamQueueManager

__all__ = [
    "ActionResult",
    "AutopickResolver",
    "AutopickResult",
    "Draft",
    "DraftController",
    "DraftInitializer",
    "DraftLedger",
    "DraftOverview",
    "DraftOverviewBuilder",
    "DraftPick",
    "DraftRules",
    "DraftSlot",
    "PickResult",
    "PoolPlayer",
    "QueueEntry",
    "StaleStateError",
    "TeamQueueManager",
]
