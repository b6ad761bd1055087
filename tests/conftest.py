"""Pytest configuration and fixtures."""

import tempfile
from datetime import date
from pathlib import Path

import pytest

from spt_calc.config import reset_config
from spt_calc.models.travel import TravelPeriod


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_config(temp_dir, monkeypatch):
    """Point the global configuration at a temporary directory."""
    config_dir = temp_dir / ".spt-calc"
    config_dir.mkdir(parents=True)

    monkeypatch.setenv("SPT_CALC_CONFIG_DIR", str(config_dir))
    reset_config()
    yield config_dir
    reset_config()


@pytest.fixture
def sample_i94_text():
    """Realistic I-94 travel history export, newest first."""
    return (
        "1\t2024-12-31\tArrival\tTST\n"
        "2\t2024-12-30\tDeparture\tTST\n"
        "3\t2024-11-20\tArrival\tTST\n"
        "4\t2024-09-15\tArrival\tTST\n"
        "5\t2024-03-10\tDeparture\tTST\n"
        "6\t2024-01-10\tArrival\tTST\n"
        "7\t2023-12-20\tDeparture\tTST\n"
        "8\t2023-09-15\tArrival\tTST\n"
        "9\t2023-09-10\tDeparture\tTST\n"
        "10\t2023-09-10\tArrival\tTST\n"
        "11\t2023-06-30\tDeparture\tTST\n"
        "12\t2022-08-31\tArrival\tTST\n"
        "13\t2022-08-20\tDeparture\tTST\n"
        "14\t2021-09-15\tArrival\tTST"
    )


@pytest.fixture
def make_period():
    """Build a TravelPeriod from ISO strings (None for an open end)."""
    def _make(arrival: str | None, departure: str | None) -> TravelPeriod:
        return TravelPeriod(
            arrival_date=date.fromisoformat(arrival) if arrival else None,
            departure_date=date.fromisoformat(departure) if departure else None,
        )
    return _make
