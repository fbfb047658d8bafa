"""CSV ingestion for ranked player pools.

Reads a FantasyPros-style overall rankings export:
- Mixed quoting around names and teams
- Blank spacer rows with no rank
- Rank column may be missing (every player is then unranked)
"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from src.player_pool.config import (
    RANK_COLUMN,
    RANKINGS_FILE_PATTERN,
    REQUIRED_COLUMNS,
)

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


class RankingsIngester:
    """Reads a rankings CSV into a pandas DataFrame.

    The returned frame keeps the export's column names, with string
    columns stripped and the rank column parsed as a nullable integer.
    """

    def __init__(self, data_dir: Optional[Path] = None, year: Optional[int] = None):
        self.data_dir = Path(data_dir) if data_dir else None
        self.year = year

    def resolve_path(self) -> Path:
        """Build the rankings file path for the configured year."""
        if self.data_dir is None or self.year is None:
            raise ValueError("data_dir and year are required to resolve a path")
        filepath = self.data_dir / RANKINGS_FILE_PATTERN.format(year=self.year)
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")
        return filepath

    def read_rankings(self, filepath: Optional[Path] = None) -> pd.DataFrame:
        """Read the rankings file.

        Args:
            filepath: Explicit CSV path; defaults to the configured year's export.

        Raises:
            FileNotFoundError: if the file does not exist.
            IngestionError: if the CSV cannot be parsed or lacks columns.
        """
        filepath = Path(filepath) if filepath else self.resolve_path()
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")

        logger.info("Reading rankings: %s", filepath.name)
        try:
            df = pd.read_csv(filepath, quotechar='"', dtype=str)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise IngestionError(f"Failed to read {filepath}: {e}") from e

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise IngestionError(f"{filepath.name} is missing columns: {missing}")

        # Strip surrounding quotes and whitespace from string values
        for col in df.columns:
            df[col] = df[col].str.strip().str.strip('"').str.strip()

        # Drop blank spacer rows
        df = df[df["PLAYER NAME"].notna() & (df["PLAYER NAME"] != "")].copy()

        if RANK_COLUMN in df.columns:
            ranks = pd.to_numeric(df[RANK_COLUMN], errors="coerce")
            df[RANK_COLUMN] = ranks.round().astype("Int64")
        else:
            df[RANK_COLUMN] = pd.array([pd.NA] * len(df), dtype="Int64")

        df = df.reset_index(drop=True)
        logger.info("Loaded %d ranked players", len(df))
        return df
