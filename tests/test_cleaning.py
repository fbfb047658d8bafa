"""Tests for the player pool cleaning module."""

import pandas as pd
import pytest

from src.draft_coordinator.draft_state import PoolPlayer
from src.player_pool.cleaning import PoolCleaner


@pytest.fixture
def cleaner():
    return PoolCleaner()


def _rankings(rows, columns=("RK", "PLAYER NAME", "TEAM", "POS")):
    df = pd.DataFrame(rows, columns=list(columns))
    if "RK" in df.columns:
        df["RK"] = df["RK"].astype("Int64")
    return df


# ---------------------------------------------------------------------------
# Position extraction
# ---------------------------------------------------------------------------

class TestExtractBasePosition:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("WR1", "WR"),
            ("RB23", "RB"),
            ("QB1", "QB"),
            ("TE12", "TE"),
            ("K5", "K"),
            ("DST1", "DST"),
            ("QB", "QB"),
            (" wr4 ", "WR"),
        ],
    )
    def test_positions(self, cleaner, raw, expected):
        assert cleaner.extract_base_position(raw) == expected

    def test_pk_alias(self, cleaner):
        assert cleaner.extract_base_position("PK3") == "K"

    def test_def_alias(self, cleaner):
        assert cleaner.extract_base_position("DEF1") == "DST"

    def test_none_input(self, cleaner):
        assert cleaner.extract_base_position(None) is None

    def test_nan_input(self, cleaner):
        assert cleaner.extract_base_position(float("nan")) is None

    def test_invalid_position(self, cleaner):
        assert cleaner.extract_base_position("XY1") is None


# ---------------------------------------------------------------------------
# Name / team normalization
# ---------------------------------------------------------------------------

class TestNormalize:
    def test_curly_apostrophe(self, cleaner):
        assert cleaner.normalize_player_name("Ja’Marr Chase") == "Ja'Marr Chase"

    def test_collapses_whitespace(self, cleaner):
        assert cleaner.normalize_player_name("  Josh   Allen ") == "Josh Allen"

    def test_en_dash(self, cleaner):
        assert cleaner.normalize_player_name("Amon–Ra St. Brown") == "Amon-Ra St. Brown"

    def test_blank_name(self, cleaner):
        assert cleaner.normalize_player_name("   ") is None

    def test_team_upper(self, cleaner):
        assert cleaner.normalize_team(" buf ") == "BUF"

    def test_team_missing(self, cleaner):
        assert cleaner.normalize_team(None) is None


class TestMakePlayerId:
    def test_basic(self, cleaner):
        assert cleaner.make_player_id("Ja'Marr Chase", "WR", "CIN") == "jamarr_chase_wr_cin"

    def test_punctuation(self, cleaner):
        assert cleaner.make_player_id("Amon-Ra St. Brown", "WR", "DET") == "amon_ra_st_brown_wr_det"

    def test_free_agent(self, cleaner):
        assert cleaner.make_player_id("Some Guy", "RB", None) == "some_guy_rb_fa"


# ---------------------------------------------------------------------------
# Frame cleaning
# ---------------------------------------------------------------------------

class TestCleanRankings:
    def test_adds_columns(self, cleaner):
        df = cleaner.clean_rankings(_rankings([(1, "Josh Allen", "buf", "QB1")]))
        row = df.iloc[0]
        assert row["Position"] == "QB"
        assert row["Player_Norm"] == "Josh Allen"
        assert row["Team_Abbr"] == "BUF"
        assert row["player_id"] == "josh_allen_qb_buf"

    def test_drops_unknown_position(self, cleaner):
        df = cleaner.clean_rankings(
            _rankings([(1, "Josh Allen", "BUF", "QB1"), (2, "Mystery Man", "NYJ", "XX1")])
        )
        assert df["Player_Norm"].tolist() == ["Josh Allen"]

    def test_duplicate_ids_suffixed(self, cleaner):
        df = cleaner.clean_rankings(
            _rankings([(10, "Mike Williams", None, "WR30"), (20, "Mike Williams", None, "WR40")])
        )
        assert df["player_id"].tolist() == ["mike_williams_wr_fa_1", "mike_williams_wr_fa_2"]

    def test_id_column_preferred(self, cleaner):
        df = cleaner.clean_rankings(
            _rankings(
                [(1, "Josh Allen", "BUF", "QB1", " 17298 ")],
                columns=("RK", "PLAYER NAME", "TEAM", "POS", "PLAYER ID"),
            )
        )
        assert df.loc[0, "player_id"] == "17298"

    def test_without_team_column(self, cleaner):
        df = cleaner.clean_rankings(
            _rankings([(1, "Josh Allen", "QB1")], columns=("RK", "PLAYER NAME", "POS"))
        )
        assert df.loc[0, "player_id"] == "josh_allen_qb_fa"


class TestToPoolPlayers:
    def test_converts_rows(self, cleaner):
        df = cleaner.clean_rankings(
            _rankings([(1, "Josh Allen", "BUF", "QB1"), (None, "Justin Tucker", "BAL", "K1")])
        )
        players = cleaner.to_pool_players(df)
        assert players == [
            PoolPlayer("josh_allen_qb_buf", "Josh Allen", "QB", "BUF", rank=1),
            PoolPlayer("justin_tucker_k_bal", "Justin Tucker", "K", "BAL", rank=None),
        ]
