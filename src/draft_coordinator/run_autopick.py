"""Poll a live draft and resolve expired clocks.

The coordinator has no timers of its own; this loop is the external
scheduler that calls check_autopick at a bounded interval.

Usage:
    python -m src.draft_coordinator.run_autopick [draft_id] [interval] [db_path]

Examples:
    python -m src.draft_coordinator.run_autopick
    python -m src.draft_coordinator.run_autopick 3f2c... 2 data/drafts.db
"""

import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional

from src.draft_coordinator.config import DEFAULT_POLL_SECONDS
from src.draft_coordinator.draft_controller import DraftController
from src.draft_coordinator.draft_ledger import DraftLedger
from src.draft_coordinator.draft_state import ERR_NO_AVAILABLE_PLAYER, AutopickResult
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


def poll_once(
    controller: DraftController, draft_id: Optional[str] = None
) -> Optional[AutopickResult]:
    """Run one autopick check. Returns None when there is no draft."""
    draft_id = draft_id or controller.get_active_or_latest_draft_id()
    if not draft_id:
        return None
    return controller.check_autopick(draft_id)


def run_poller(
    controller: DraftController,
    draft_id: Optional[str] = None,
    interval: float = DEFAULT_POLL_SECONDS,
    max_iterations: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll until the draft completes (or ``max_iterations`` is reached).

    Returns:
        Number of slots resolved by autopick (picks plus skips).
    """
    resolved = 0
    iterations = 0

    while max_iterations is None or iterations < max_iterations:
        iterations += 1
        result = poll_once(controller, draft_id)

        if result is not None and (result.picked or result.error == ERR_NO_AVAILABLE_PLAYER):
            resolved += 1

        target = draft_id or controller.get_active_or_latest_draft_id()
        draft = controller.get_draft(target) if target else None
        if draft is not None and draft.is_complete:
            logger.info("Draft %s complete; poller exiting", draft.draft_id)
            break

        sleep(interval)

    return resolved


if __name__ == "__main__":
    setup_logging(tool="autopick_poller")

    draft_id = sys.argv[1] if len(sys.argv) > 1 and sys.argv[1] != "-" else None
    interval = float(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_POLL_SECONDS
    db_path = Path(sys.argv[3]) if len(sys.argv) > 3 else None

    ledger = DraftLedger(db_path)
    try:
        count = run_poller(DraftController(ledger), draft_id, interval)
        print(f"Poller finished: {count} slots resolved by autopick")
    except KeyboardInterrupt:
        logger.info("Poller stopped")
    except Exception:
        logger.exception("Poller failed")
        sys.exit(1)
    finally:
        ledger.close()
