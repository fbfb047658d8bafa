"""Tests for loading a rankings CSV into a draft's player pool."""

import textwrap

import pytest

from src.draft_coordinator.draft_ledger import DraftLedger
from src.player_pool.ingestion import IngestionError
from src.player_pool.run_load import load_pool, run_load


RANKINGS_CSV = textwrap.dedent(
    """\
    "RK","PLAYER NAME",TEAM,"POS"
    "2","Bijan Robinson","ATL","RB1"
    "1","Ja'Marr Chase","CIN","WR1"
    "3","Ravens","BAL","DST1"
    "4","Nobody","FA","LS1"
    """
)


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "rankings.csv"
    path.write_text(RANKINGS_CSV, encoding="utf-8")
    return path


class TestLoadPool:
    def test_loads_players_in_rank_order(self, controller, csv_path):
        controller.create_draft(year=2025, teams=["A", "B"], draft_id="d1")
        assert load_pool(controller, "d1", csv_path) == 3
        ids = [p.player_id for p in controller.get_draft_players("d1")]
        assert ids == ["jamarr_chase_wr_cin", "bijan_robinson_rb_atl", "ravens_dst_bal"]

    def test_reload_replaces_pool(self, controller, csv_path, tmp_path):
        controller.create_draft(year=2025, teams=["A", "B"], draft_id="d1")
        load_pool(controller, "d1", csv_path)
        smaller = tmp_path / "small.csv"
        smaller.write_text('RK,PLAYER NAME,POS\n1,"Josh Allen","QB1"\n', encoding="utf-8")
        assert load_pool(controller, "d1", smaller) == 1
        assert controller.count_draft_players("d1") == 1

    def test_pool_drives_autopick(self, controller, clock, csv_path):
        controller.create_draft(year=2025, teams=["A", "B"], draft_id="d1")
        load_pool(controller, "d1", csv_path)
        controller.start("d1")
        clock.advance(61)
        result = controller.check_autopick("d1")
        assert result.player_id == "jamarr_chase_wr_cin"
        assert result.player_name == "Ja'Marr Chase"

    def test_unknown_draft(self, controller, csv_path):
        with pytest.raises(ValueError, match="does not exist"):
            load_pool(controller, "nope", csv_path)

    def test_bad_csv(self, controller, tmp_path):
        controller.create_draft(year=2025, teams=["A", "B"], draft_id="d1")
        bad = tmp_path / "bad.csv"
        bad.write_text("NAME\nJosh Allen\n", encoding="utf-8")
        with pytest.raises(IngestionError):
            load_pool(controller, "d1", bad)
        assert controller.count_draft_players("d1") == 0


class TestRunLoad:
    def test_opens_and_closes_own_ledger(self, ledger, db_path, csv_path, controller):
        controller.create_draft(year=2025, teams=["A", "B"], draft_id="d1")
        assert run_load("d1", csv_path, db_path) == 3
        other = DraftLedger(db_path)
        try:
            assert other.count_players("d1") == 3
        finally:
            other.close()
