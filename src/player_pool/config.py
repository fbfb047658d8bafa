from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"

# FantasyPros rankings export (use .format(year=YYYY))
RANKINGS_FILE_PATTERN = "FantasyPros_{year}_Draft_ALL_Rankings.csv"

# Columns required in a rankings export
REQUIRED_COLUMNS = ["PLAYER NAME", "POS"]

# Optional columns, read when present
RANK_COLUMN = "RK"
TEAM_COLUMN = "TEAM"
ID_COLUMNS = ["PLAYER ID", "ID", "player_id"]
