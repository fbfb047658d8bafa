from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DB_PATH = DATA_DIR / "drafts.db"

# Default draft settings
DEFAULT_ROUNDS = 4
DEFAULT_CLOCK_SECONDS = 60
DEFAULT_SNAKE = True

# Overview lookahead / lookback
RECENT_PICKS_LIMIT = 12
UPCOMING_LIMIT = 12

# Actor ids recorded in DraftPick.made_by
AUTO_ACTOR = "auto"
ADMIN_ACTOR = "admin"

# Positions offered in the available-player list
ALLOWED_POSITIONS = {"QB", "RB", "WR", "TE", "K"}
AVAILABLE_DEFAULT_LIMIT = 50
AVAILABLE_MAX_LIMIT = 200

# Autopick poller
DEFAULT_POLL_SECONDS = 5
