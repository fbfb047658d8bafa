"""Cleaning for ranked player pools.

- Extract base position from rank format (WR1 -> WR)
- Normalize player names and team abbreviations
- Build stable player ids when the export carries none
"""

import logging
import re
from typing import List, Optional

import pandas as pd

from src.draft_coordinator.draft_state import PoolPlayer
from src.player_pool.config import ID_COLUMNS, RANK_COLUMN, TEAM_COLUMN

logger = logging.getLogger(__name__)

# Valid base positions
_VALID_POSITIONS = {"QB", "RB", "WR", "TE", "K", "DST"}

# Aliases that map to canonical position names
_POSITION_ALIASES = {
    "PK": "K",
    "DEF": "DST",
}

# Regex: one or more letters followed by optional digits
_POS_PATTERN = re.compile(r"^([A-Za-z]+?)(\d+)?$")


class PoolCleaner:
    """Turns a rankings DataFrame into PoolPlayer rows."""

    @staticmethod
    def extract_base_position(pos_str) -> Optional[str]:
        """Extract the base position from a rank-embedded string.

        Examples:
            "WR1"  -> "WR"
            "PK3"  -> "K"
            "DEF1" -> "DST"
        """
        if pd.isna(pos_str):
            return None

        m = _POS_PATTERN.match(str(pos_str).strip())
        if not m:
            return None

        letters = m.group(1).upper()
        canonical = _POSITION_ALIASES.get(letters, letters)
        return canonical if canonical in _VALID_POSITIONS else None

    @staticmethod
    def normalize_player_name(name) -> Optional[str]:
        """Standardize apostrophes, dashes and whitespace in a display name."""
        if pd.isna(name):
            return None

        name = str(name).strip().strip('"')
        if name == "":
            return None

        name = name.replace("’", "'").replace("‘", "'")
        name = name.replace("–", "-").replace("—", "-")
        return " ".join(name.split())

    @staticmethod
    def normalize_team(team) -> Optional[str]:
        if pd.isna(team):
            return None
        team = str(team).strip().upper()
        return team or None

    @staticmethod
    def make_player_id(name: str, position: Optional[str], team: Optional[str]) -> str:
        """Build an id of the form {name}_{position}_{team}.

        Example: jamarr_chase_wr_cin
        """
        slug = (
            name.lower()
            .replace("'", "")
            .replace(".", "")
            .replace("-", "_")
            .replace(" ", "_")
        )
        pos = (position or "unk").lower()
        team = (team or "fa").lower()
        return f"{slug}_{pos}_{team}"

    def clean_rankings(self, df: pd.DataFrame) -> pd.DataFrame:
        """Add Position, Player_Norm, Team_Abbr and player_id columns.

        Rows with no recognized position are dropped. Generated ids that
        collide get a numeric suffix.
        """
        out = df.copy()
        out["Position"] = out["POS"].apply(self.extract_base_position)
        out["Player_Norm"] = out["PLAYER NAME"].apply(self.normalize_player_name)
        if TEAM_COLUMN in out.columns:
            out["Team_Abbr"] = out[TEAM_COLUMN].apply(self.normalize_team)
        else:
            out["Team_Abbr"] = None

        no_pos = out["Position"].isna()
        if no_pos.any():
            logger.warning(
                "Dropping %d players with no recognized position: %s",
                int(no_pos.sum()),
                out.loc[no_pos, "PLAYER NAME"].tolist(),
            )
            out = out[~no_pos].reset_index(drop=True)

        id_col = next((col for col in ID_COLUMNS if col in out.columns), None)
        if id_col is not None:
            out["player_id"] = out[id_col].astype(str).str.strip()
        else:
            out["player_id"] = [
                self.make_player_id(row["Player_Norm"], row["Position"], row["Team_Abbr"])
                for _, row in out.iterrows()
            ]
            dupes = out["player_id"].duplicated(keep=False)
            if dupes.any():
                dupe_ids = out.loc[dupes, "player_id"].unique().tolist()
                logger.warning("Duplicate player_ids detected: %s", dupe_ids)
                for pid in dupe_ids:
                    mask = out["player_id"] == pid
                    out.loc[mask, "player_id"] = [
                        f"{pid}_{n}" for n in range(1, int(mask.sum()) + 1)
                    ]

        logger.info("Cleaned rankings: %d rows", len(out))
        return out

    def to_pool_players(self, df: pd.DataFrame) -> List[PoolPlayer]:
        """Convert a cleaned rankings frame to PoolPlayer rows."""
        players = []
        for _, row in df.iterrows():
            rank = row.get(RANK_COLUMN)
            players.append(
                PoolPlayer(
                    player_id=row["player_id"],
                    name=row["Player_Norm"],
                    pos=row["Position"],
                    nfl=row["Team_Abbr"] if not pd.isna(row["Team_Abbr"]) else None,
                    rank=None if pd.isna(rank) else int(rank),
                )
            )
        return players
