"""Load a ranked player pool from a rankings CSV into a draft.

Usage:
    python -m src.player_pool.run_load <draft_id> <csv_path> [db_path]

Examples:
    python -m src.player_pool.run_load 3f2c... data/raw/2025/FantasyPros_2025_Draft_ALL_Rankings.csv
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from src.draft_coordinator.draft_controller import DraftController
from src.draft_coordinator.draft_ledger import DraftLedger
from src.logging_config import setup_logging
from src.player_pool.cleaning import PoolCleaner
from src.player_pool.ingestion import RankingsIngester

logger = logging.getLogger(__name__)


def load_pool(
    controller: DraftController, draft_id: str, csv_path: Path
) -> int:
    """Replace a draft's player pool with the contents of a rankings CSV.

    Returns:
        Number of players now in the pool.
    """
    if controller.get_draft(draft_id) is None:
        raise ValueError(f"Draft {draft_id} does not exist")

    logger.info("Step 1/3: Reading rankings...")
    raw = RankingsIngester().read_rankings(csv_path)

    logger.info("Step 2/3: Cleaning rankings...")
    cleaner = PoolCleaner()
    players = cleaner.to_pool_players(cleaner.clean_rankings(raw))

    logger.info("Step 3/3: Writing pool for draft %s...", draft_id)
    count = controller.set_draft_players(draft_id, players)

    pos_counts: dict = {}
    for p in players:
        pos_counts[p.pos] = pos_counts.get(p.pos, 0) + 1
    logger.info(
        "  By position: %s",
        ", ".join(f"{k}={v}" for k, v in sorted(pos_counts.items())),
    )
    return count


def run_load(draft_id: str, csv_path: Path, db_path: Optional[Path] = None) -> int:
    ledger = DraftLedger(db_path)
    try:
        return load_pool(DraftController(ledger), draft_id, csv_path)
    finally:
        ledger.close()


if __name__ == "__main__":
    setup_logging(tool="pool_loader")

    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(2)

    draft_id = sys.argv[1]
    csv_path = Path(sys.argv[2])
    db_path = Path(sys.argv[3]) if len(sys.argv) > 3 else None

    try:
        count = run_load(draft_id, csv_path, db_path)
        print(f"Pool loaded: {count} players")
    except Exception:
        logger.exception("Pool load failed")
        sys.exit(1)
