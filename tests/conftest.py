"""Shared fixtures for the draft coordinator test suite."""

from datetime import datetime, timedelta, timezone

import pytest

from src.draft_coordinator.draft_controller import DraftController
from src.draft_coordinator.draft_ledger import DraftLedger

T0 = datetime(2025, 8, 30, 18, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock passed as the controller's ``now``."""

    def __init__(self, start: datetime = T0):
        self.start = start
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current


# ------------------------------------------------------------------
# Lightweight factories – one SQLite file per test
# ------------------------------------------------------------------

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "drafts.db"


@pytest.fixture
def ledger(db_path):
    ledger = DraftLedger(db_path)
    yield ledger
    ledger.close()


@pytest.fixture
def controller(ledger, clock):
    return DraftController(ledger, now=clock)
