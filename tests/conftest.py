"""
Pytest fixtures for the utility splitter test suite.
"""
from datetime import date, datetime

import pytest

from config import settings
from engine.electricity_calculator import ElectricityBillCalculator
from engine.water_calculator import WaterBillCalculator
from models.date_range import DateRange
from models.occupant import Occupant
from models.room import Room

FIXED_NOW = datetime(2024, 4, 1, 12, 0, 0)


@pytest.fixture
def q1_2024():
    """2024-01-01..2024-03-31, 90 days long."""
    return DateRange(date(2024, 1, 1), date(2024, 3, 31))


@pytest.fixture
def water_calculator():
    return WaterBillCalculator(id_factory=lambda: "water-result", clock=lambda: FIXED_NOW)


@pytest.fixture
def electricity_calculator():
    return ElectricityBillCalculator(id_factory=lambda: "electricity-result", clock=lambda: FIXED_NOW)


@pytest.fixture
def make_occupant():
    def _make(name, start, end, occupant_id=None):
        return Occupant(name=name, stay=DateRange(start, end), occupant_id=occupant_id or name.lower())
    return _make


@pytest.fixture
def make_usage_room():
    def _make(name, start, end, room_id=None):
        return Room(name=name, usage_range=DateRange(start, end), room_id=room_id or name)
    return _make


@pytest.fixture
def history_dir(tmp_path, monkeypatch):
    """Point the JSON history store at a temporary directory."""
    path = tmp_path / "history"
    monkeypatch.setattr(settings, "HISTORY_PATH", str(path))
    return path


@pytest.fixture
def water_form():
    """Form-shaped water bill input."""
    return {
        "kind": "water",
        "startDate": "2024-01-01",
        "endDate": "2024-03-31",
        "totalAmount": "300",
        "rooms": [
            {
                "id": "room-a",
                "name": "Room A",
                "residents": [
                    {"id": "alice", "name": "Alice", "startDate": "2024-01-01", "endDate": "2024-03-31"},
                    {"id": "bob", "name": "Bob", "startDate": "2024-01-01", "endDate": "2024-01-31"},
                ],
            },
            {
                "id": "room-b",
                "name": "Room B",
                "residents": [
                    {"id": "carol", "name": "Carol", "startDate": "2024-01-01", "endDate": "2024-03-31"},
                ],
            },
        ],
    }


@pytest.fixture
def electricity_form():
    """Form-shaped electricity bill input (Room A has paid)."""
    return {
        "kind": "electricity",
        "startDate": "2024-01-01",
        "endDate": "2024-03-31",
        "totalAmount": 300,
        "rooms": [
            {"id": "A", "name": "Room A", "startDate": "2024-01-01", "endDate": "2024-01-31", "hasPaid": True},
            {"id": "B", "name": "Room B", "startDate": "2024-01-01", "endDate": "2024-01-31"},
            {"id": "C", "name": "Room C", "startDate": "2024-01-01", "endDate": "2024-01-31"},
        ],
    }
