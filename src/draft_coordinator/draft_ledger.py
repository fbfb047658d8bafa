"""Draft ledger - durable SQLite store for draft heads, slots, picks, queues and pools."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Union

from src.draft_coordinator.config import DEFAULT_DB_PATH
from src.draft_coordinator.draft_state import (
    Draft,
    DraftPick,
    DraftSlot,
    PoolPlayer,
    QueueEntry,
)

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS drafts (
        id TEXT PRIMARY KEY,
        year INTEGER NOT NULL,
        rounds INTEGER NOT NULL,
        clock_seconds INTEGER NOT NULL,
        status TEXT NOT NULL DEFAULT 'NOT_STARTED',
        cur_overall INTEGER NOT NULL DEFAULT 1,
        created_at TEXT NOT NULL,
        clock_started_at TEXT,
        deadline_ts TEXT,
        started_at TEXT,
        completed_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS draft_slots (
        draft_id TEXT NOT NULL REFERENCES drafts (id) ON DELETE CASCADE,
        overall INTEGER NOT NULL,
        round INTEGER NOT NULL,
        pick_in_round INTEGER NOT NULL,
        team TEXT NOT NULL,
        PRIMARY KEY (draft_id, overall)
    )
    """,
    # The two UNIQUE constraints are what keep concurrent callers from
    # double-filling a slot or drafting a player twice.
    """
    CREATE TABLE IF NOT EXISTS draft_picks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        draft_id TEXT NOT NULL REFERENCES drafts (id) ON DELETE CASCADE,
        overall INTEGER NOT NULL,
        round INTEGER NOT NULL,
        team TEXT NOT NULL,
        player_id TEXT,
        player_name TEXT,
        skipped INTEGER NOT NULL DEFAULT 0,
        made_by TEXT NOT NULL,
        made_at TEXT NOT NULL,
        UNIQUE (draft_id, overall),
        UNIQUE (draft_id, player_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS draft_queues (
        draft_id TEXT NOT NULL REFERENCES drafts (id) ON DELETE CASCADE,
        team TEXT NOT NULL,
        rank INTEGER NOT NULL,
        player_id TEXT NOT NULL,
        PRIMARY KEY (draft_id, team, rank)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS draft_players (
        draft_id TEXT NOT NULL REFERENCES drafts (id) ON DELETE CASCADE,
        player_id TEXT NOT NULL,
        name TEXT NOT NULL,
        pos TEXT NOT NULL DEFAULT '',
        nfl TEXT,
        rank INTEGER,
        PRIMARY KEY (draft_id, player_id)
    )
    """,
)

_DRAFT_COLUMNS = {
    "year",
    "rounds",
    "clock_seconds",
    "status",
    "cur_overall",
    "clock_started_at",
    "deadline_ts",
    "started_at",
    "completed_at",
}


class DraftLedger:
    """Single source of truth for every draft.

    All head updates go through :meth:`update_draft`, which only applies
    when the persisted status / cur_overall still match what the caller
    decided from.
    """

    def __init__(self, db_path: Optional[Union[Path, str]] = None):
        self.db_path = db_path or DEFAULT_DB_PATH
        if str(self.db_path) != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        # Autocommit mode; multi-statement units use transaction().
        self.conn = sqlite3.connect(
            str(self.db_path), timeout=30.0, isolation_level=None
        )
        self.conn.row_factory = sqlite3.Row
        self._in_transaction = False
        self._create_tables()

    def _create_tables(self):
        self.conn.execute("PRAGMA foreign_keys = ON;")
        for statement in _SCHEMA:
            self.conn.execute(statement)

    def close(self):
        self.conn.close()

    @contextmanager
    def transaction(self) -> Iterator["DraftLedger"]:
        """Run a block as one write transaction.

        BEGIN IMMEDIATE takes the database write lock up front, so two
        callers cannot interleave their read-decide-write sequences.
        Nested calls join the outer transaction.
        """
        if self._in_transaction:
            yield self
            return

        self.conn.execute("BEGIN IMMEDIATE")
        self._in_transaction = True
        try:
            yield self
        except BaseException:
            self.conn.execute("ROLLBACK")
            raise
        else:
            self.conn.execute("COMMIT")
        finally:
            self._in_transaction = False

    # ------------------------------------------------------------------
    # Draft head
    # ------------------------------------------------------------------
    def insert_draft(self, draft: Draft) -> bool:
        """Insert a draft head row. Returns False if the id already exists."""
        cursor = self.conn.execute(
            """
            INSERT OR IGNORE INTO drafts (
                id, year, rounds, clock_seconds, status, cur_overall,
                created_at, clock_started_at, deadline_ts, started_at,
                completed_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                draft.draft_id,
                draft.year,
                draft.rounds,
                draft.clock_seconds,
                draft.status,
                draft.cur_overall,
                draft.created_at,
                draft.clock_started_at,
                draft.deadline_ts,
                draft.started_at,
                draft.completed_at,
            ),
        )
        return cursor.rowcount == 1

    def get_draft(self, draft_id: str) -> Optional[Draft]:
        row = self.conn.execute(
            "SELECT * FROM drafts WHERE id = ?", (draft_id,)
        ).fetchone()
        return self._row_to_draft(row) if row else None

    def get_active_or_latest_draft_id(self) -> Optional[str]:
        """Most recent LIVE/PAUSED draft, else the most recently created one."""
        row = self.conn.execute(
            """
            SELECT id FROM drafts
            ORDER BY status IN ('LIVE', 'PAUSED') DESC, created_at DESC, rowid DESC
            LIMIT 1
            """
        ).fetchone()
        return row["id"] if row else None

    def update_draft(
        self,
        draft_id: str,
        values: Dict,
        expect_status: Optional[Sequence[str]] = None,
        expect_overall: Optional[int] = None,
    ) -> bool:
        """Conditionally update head fields.

        Args:
            draft_id: Draft to update.
            values: Column -> new value.
            expect_status: Only apply if the persisted status is one of these.
            expect_overall: Only apply if the persisted cur_overall equals this.

        Returns:
            True if the row was updated, False if a guard did not match.
        """
        unknown = set(values) - _DRAFT_COLUMNS
        if unknown:
            raise ValueError(f"Unknown draft columns: {sorted(unknown)}")

        assignments = ", ".join(f"{col} = ?" for col in values)
        params: List = list(values.values())
        sql = f"UPDATE drafts SET {assignments} WHERE id = ?"
        params.append(draft_id)

        if expect_status is not None:
            placeholders = ", ".join(["?"] * len(expect_status))
            sql += f" AND status IN ({placeholders})"
            params.extend(expect_status)
        if expect_overall is not None:
            sql += " AND cur_overall = ?"
            params.append(expect_overall)

        cursor = self.conn.execute(sql, params)
        return cursor.rowcount == 1

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------
    def insert_slots(self, slots: Iterable[DraftSlot]) -> int:
        """Insert slots, ignoring any that already exist. Returns rows added."""
        before = self.conn.total_changes
        self.conn.executemany(
            """
            INSERT OR IGNORE INTO draft_slots
                (draft_id, overall, round, pick_in_round, team)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                (s.draft_id, s.overall, s.round, s.pick_in_round, s.team)
                for s in slots
            ],
        )
        return self.conn.total_changes - before

    def get_slot(self, draft_id: str, overall: int) -> Optional[DraftSlot]:
        row = self.conn.execute(
            "SELECT * FROM draft_slots WHERE draft_id = ? AND overall = ?",
            (draft_id, overall),
        ).fetchone()
        return self._row_to_slot(row) if row else None

    def get_slots(self, draft_id: str) -> List[DraftSlot]:
        rows = self.conn.execute(
            "SELECT * FROM draft_slots WHERE draft_id = ? ORDER BY overall",
            (draft_id,),
        ).fetchall()
        return [self._row_to_slot(row) for row in rows]

    def next_unfilled_overall(self, draft_id: str, after: int = 0) -> Optional[int]:
        """Smallest slot overall greater than ``after`` with no ledger entry."""
        row = self.conn.execute(
            """
            SELECT MIN(s.overall) AS overall
            FROM draft_slots s
            LEFT JOIN draft_picks p
                ON p.draft_id = s.draft_id AND p.overall = s.overall
            WHERE s.draft_id = ? AND s.overall > ? AND p.id IS NULL
            """,
            (draft_id, after),
        ).fetchone()
        return row["overall"]

    def get_unfilled_slots(
        self, draft_id: str, from_overall: int, limit: int
    ) -> List[DraftSlot]:
        rows = self.conn.execute(
            """
            SELECT s.*
            FROM draft_slots s
            LEFT JOIN draft_picks p
                ON p.draft_id = s.draft_id AND p.overall = s.overall
            WHERE s.draft_id = ? AND s.overall >= ? AND p.id IS NULL
            ORDER BY s.overall
            LIMIT ?
            """,
            (draft_id, from_overall, limit),
        ).fetchall()
        return [self._row_to_slot(row) for row in rows]

    # ------------------------------------------------------------------
    # Picks
    # ------------------------------------------------------------------
    def insert_pick(self, pick: DraftPick) -> DraftPick:
        """Append a ledger entry.

        Raises:
            sqlite3.IntegrityError: if the overall or player is already taken.
        """
        cursor = self.conn.execute(
            """
            INSERT INTO draft_picks (
                draft_id, overall, round, team, player_id, player_name,
                skipped, made_by, made_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                pick.draft_id,
                pick.overall,
                pick.round,
                pick.team,
                pick.player_id,
                pick.player_name,
                int(pick.skipped),
                pick.made_by,
                pick.made_at,
            ),
        )
        pick.id = cursor.lastrowid
        return pick

    def is_player_picked(self, draft_id: str, player_id: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM draft_picks WHERE draft_id = ? AND player_id = ?",
            (draft_id, player_id),
        ).fetchone()
        return row is not None

    def get_picked_player_ids(self, draft_id: str) -> List[str]:
        rows = self.conn.execute(
            """
            SELECT player_id FROM draft_picks
            WHERE draft_id = ? AND player_id IS NOT NULL
            ORDER BY overall
            """,
            (draft_id,),
        ).fetchall()
        return [row["player_id"] for row in rows]

    def get_pick(self, draft_id: str, overall: int) -> Optional[DraftPick]:
        row = self.conn.execute(
            "SELECT * FROM draft_picks WHERE draft_id = ? AND overall = ?",
            (draft_id, overall),
        ).fetchone()
        return self._row_to_pick(row) if row else None

    def get_last_pick(self, draft_id: str) -> Optional[DraftPick]:
        row = self.conn.execute(
            """
            SELECT * FROM draft_picks WHERE draft_id = ?
            ORDER BY overall DESC LIMIT 1
            """,
            (draft_id,),
        ).fetchone()
        return self._row_to_pick(row) if row else None

    def get_picks(self, draft_id: str) -> List[DraftPick]:
        rows = self.conn.execute(
            "SELECT * FROM draft_picks WHERE draft_id = ? ORDER BY overall",
            (draft_id,),
        ).fetchall()
        return [self._row_to_pick(row) for row in rows]

    def get_recent_picks(self, draft_id: str, limit: int) -> List[DraftPick]:
        """Last ``limit`` ledger entries, in ascending overall order."""
        rows = self.conn.execute(
            """
            SELECT * FROM (
                SELECT * FROM draft_picks WHERE draft_id = ?
                ORDER BY overall DESC LIMIT ?
            ) ORDER BY overall
            """,
            (draft_id, limit),
        ).fetchall()
        return [self._row_to_pick(row) for row in rows]

    def delete_pick(self, draft_id: str, overall: int) -> bool:
        cursor = self.conn.execute(
            "DELETE FROM draft_picks WHERE draft_id = ? AND overall = ?",
            (draft_id, overall),
        )
        return cursor.rowcount == 1

    # ------------------------------------------------------------------
    # Team queues
    # ------------------------------------------------------------------
    def get_queue(self, draft_id: str, team: str) -> List[QueueEntry]:
        rows = self.conn.execute(
            """
            SELECT * FROM draft_queues
            WHERE draft_id = ? AND team = ?
            ORDER BY rank
            """,
            (draft_id, team),
        ).fetchall()
        return [
            QueueEntry(
                draft_id=row["draft_id"],
                team=row["team"],
                rank=row["rank"],
                player_id=row["player_id"],
            )
            for row in rows
        ]

    def replace_queue(self, draft_id: str, team: str, player_ids: Sequence[str]) -> int:
        with self.transaction():
            self.conn.execute(
                "DELETE FROM draft_queues WHERE draft_id = ? AND team = ?",
                (draft_id, team),
            )
            self.conn.executemany(
                """
                INSERT INTO draft_queues (draft_id, team, rank, player_id)
                VALUES (?, ?, ?, ?)
                """,
                [
                    (draft_id, team, rank, player_id)
                    for rank, player_id in enumerate(player_ids, start=1)
                ],
            )
        return len(player_ids)

    def delete_queue_entry(self, entry: QueueEntry) -> bool:
        """Remove one queue row, only if it still holds the same player."""
        cursor = self.conn.execute(
            """
            DELETE FROM draft_queues
            WHERE draft_id = ? AND team = ? AND rank = ? AND player_id = ?
            """,
            (entry.draft_id, entry.team, entry.rank, entry.player_id),
        )
        return cursor.rowcount == 1

    # ------------------------------------------------------------------
    # Player pool
    # ------------------------------------------------------------------
    def replace_players(self, draft_id: str, players: Iterable[PoolPlayer]) -> int:
        rows = [
            (draft_id, p.player_id, p.name, p.pos or "", p.nfl, p.rank)
            for p in players
        ]
        with self.transaction():
            self.conn.execute(
                "DELETE FROM draft_players WHERE draft_id = ?", (draft_id,)
            )
            # Later duplicates of a player id replace earlier ones.
            self.conn.executemany(
                """
                INSERT OR REPLACE INTO draft_players
                    (draft_id, player_id, name, pos, nfl, rank)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
        return self.count_players(draft_id)

    def clear_players(self, draft_id: str) -> int:
        cursor = self.conn.execute(
            "DELETE FROM draft_players WHERE draft_id = ?", (draft_id,)
        )
        return cursor.rowcount

    def count_players(self, draft_id: str) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) AS n FROM draft_players WHERE draft_id = ?",
            (draft_id,),
        ).fetchone()
        return row["n"]

    def get_players(self, draft_id: str) -> List[PoolPlayer]:
        """Pool ordered by rank ascending (unranked last), then name."""
        rows = self.conn.execute(
            """
            SELECT * FROM draft_players WHERE draft_id = ?
            ORDER BY rank IS NULL, rank, name COLLATE NOCASE, player_id
            """,
            (draft_id,),
        ).fetchall()
        return [
            PoolPlayer(
                player_id=row["player_id"],
                name=row["name"],
                pos=row["pos"],
                nfl=row["nfl"],
                rank=row["rank"],
            )
            for row in rows
        ]

    def get_player_name(self, draft_id: str, player_id: str) -> Optional[str]:
        row = self.conn.execute(
            "SELECT name FROM draft_players WHERE draft_id = ? AND player_id = ?",
            (draft_id, player_id),
        ).fetchone()
        return row["name"] if row else None

    # ------------------------------------------------------------------
    # Row conversion
    # ------------------------------------------------------------------
    @staticmethod
    def _row_to_draft(row: sqlite3.Row) -> Draft:
        return Draft(
            draft_id=row["id"],
            year=row["year"],
            rounds=row["rounds"],
            clock_seconds=row["clock_seconds"],
            status=row["status"],
            cur_overall=row["cur_overall"],
            created_at=row["created_at"],
            clock_started_at=row["clock_started_at"],
            deadline_ts=row["deadline_ts"],
            started_at=row["started_at"],
            completed_at=row["completed_at"],
        )

    @staticmethod
    def _row_to_slot(row: sqlite3.Row) -> DraftSlot:
        return DraftSlot(
            draft_id=row["draft_id"],
            overall=row["overall"],
            round=row["round"],
            pick_in_round=row["pick_in_round"],
            team=row["team"],
        )

    @staticmethod
    def _row_to_pick(row: sqlite3.Row) -> DraftPick:
        return DraftPick(
            id=row["id"],
            draft_id=row["draft_id"],
            overall=row["overall"],
            round=row["round"],
            team=row["team"],
            player_id=row["player_id"],
            player_name=row["player_name"],
            skipped=bool(row["skipped"]),
            made_by=row["made_by"],
            made_at=row["made_at"],
        )
