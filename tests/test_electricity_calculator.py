"""
Tests for engine.electricity_calculator: shares and compensation.
"""
import pytest

from engine.electricity_calculator import compute_compensation
from models.bill import ElectricityBill
from models.date_range import DateRange
from models.results import RoomShare


@pytest.fixture
def make_bill(q1_2024):
    def _make(total_amount, rooms, paid=()):
        return ElectricityBill(
            billing_period=q1_2024,
            total_amount=total_amount,
            rooms=rooms,
            paid_room_ids=frozenset(paid),
        )
    return _make


@pytest.fixture
def three_january_rooms(make_usage_room):
    return [
        make_usage_room("A", "2024-01-01", "2024-01-31"),
        make_usage_room("B", "2024-01-01", "2024-01-31"),
        make_usage_room("C", "2024-01-01", "2024-01-31"),
    ]


# ---------------------------------------------------------------------------
# Shares
# ---------------------------------------------------------------------------

class TestShares:
    def test_equal_usage_splits_evenly(self, electricity_calculator, make_bill, three_january_rooms):
        result = electricity_calculator.calculate(make_bill(300, three_january_rooms))

        assert [r.days for r in result.room_results] == [30, 30, 30]
        assert [r.amount_to_pay for r in result.room_results] == [100.0, 100.0, 100.0]
        assert sum(r.share_ratio for r in result.room_results) == pytest.approx(1.0)

    def test_usage_is_prorated(self, electricity_calculator, make_bill, make_usage_room):
        rooms = [
            make_usage_room("A", "2024-01-01", "2024-03-01"),
            make_usage_room("B", "2024-01-01", "2024-01-31"),
        ]
        result = electricity_calculator.calculate(make_bill(300, rooms))

        a, b = result.room_results
        assert (a.days, b.days) == (60, 30)
        assert a.share_ratio == pytest.approx(2 / 3)
        assert (a.amount_to_pay, b.amount_to_pay) == (200.0, 100.0)

    def test_usage_outside_period_counts_zero(self, electricity_calculator, make_bill, make_usage_room):
        rooms = [
            make_usage_room("A", "2024-01-01", "2024-03-31"),
            make_usage_room("B", "2024-06-01", "2024-06-30"),
        ]
        result = electricity_calculator.calculate(make_bill(300, rooms))

        assert result.find_room("B").amount_to_pay == 0.0
        assert result.find_room("A").amount_to_pay == 300.0

    def test_no_usage_in_period_gives_all_zero(self, electricity_calculator, make_bill, make_usage_room):
        rooms = [
            make_usage_room("A", "2023-01-01", "2023-01-31"),
            make_usage_room("B", "2023-01-01", "2023-01-31"),
        ]
        result = electricity_calculator.calculate(make_bill(300, rooms, paid=["A"]))

        assert all(r.share_ratio == 0.0 and r.amount_to_pay == 0.0 for r in result.room_results)
        assert result.compensation == ()

    def test_has_paid_flags(self, electricity_calculator, make_bill, three_january_rooms):
        result = electricity_calculator.calculate(make_bill(300, three_january_rooms, paid=["B"]))

        assert [r.has_paid for r in result.room_results] == [False, True, False]
        assert result.paid_room_ids == ("B",)

    def test_result_is_stamped(self, electricity_calculator, make_bill, three_january_rooms, q1_2024):
        result = electricity_calculator.calculate(make_bill(300, three_january_rooms))

        assert result.result_id == "electricity-result"
        assert result.billing_period == q1_2024
        assert result.total_amount == 300.0


# ---------------------------------------------------------------------------
# Compensation
# ---------------------------------------------------------------------------

class TestCompensation:
    def test_single_paid_room_receives_full_amounts(self, electricity_calculator, make_bill, three_january_rooms):
        result = electricity_calculator.calculate(make_bill(300, three_january_rooms, paid=["A"]))

        transfers = [(c.from_room_id, c.to_room_id, c.amount) for c in result.compensation]
        assert transfers == [("B", "A", 100.0), ("C", "A", 100.0)]
        assert all(c.overlap_days == 30 for c in result.compensation)
        assert result.compensation[0].overlap_range == DateRange("2024-01-01", "2024-01-31")
        assert result.compensation_due_to("A") == 200.0
        assert result.compensation_owed_by("B") == 100.0

    def test_unpaid_amount_is_split_across_paid_rooms(self, electricity_calculator, make_bill, three_january_rooms):
        result = electricity_calculator.calculate(make_bill(300, three_january_rooms, paid=["A", "B"]))

        transfers = [(c.from_room_id, c.to_room_id, c.amount) for c in result.compensation]
        assert transfers == [("C", "A", 50.0), ("C", "B", 50.0)]

    def test_amount_is_flat_regardless_of_overlap(self, electricity_calculator, make_bill, make_usage_room):
        rooms = [
            make_usage_room("A", "2024-01-01", "2024-03-31"),
            make_usage_room("B", "2024-01-01", "2024-01-11"),
            make_usage_room("C", "2024-03-21", "2024-03-31"),
        ]
        result = electricity_calculator.calculate(make_bill(1100, rooms, paid=["A", "B"]))

        # C owes 100; split flat across both paid rooms, but only A overlaps C
        assert result.find_room("C").amount_to_pay == 100.0
        assert [(c.to_room_id, c.amount, c.overlap_days) for c in result.compensation] == [("A", 50.0, 10)]

    def test_non_overlapping_rooms_get_no_entry(self, electricity_calculator, make_bill, make_usage_room):
        rooms = [
            make_usage_room("A", "2024-01-01", "2024-01-31"),
            make_usage_room("B", "2024-02-01", "2024-03-02"),
        ]
        result = electricity_calculator.calculate(make_bill(300, rooms, paid=["A"]))

        assert result.find_room("B").amount_to_pay == 150.0
        assert result.compensation == ()

    @pytest.mark.parametrize("paid", [(), ("A", "B", "C")])
    def test_no_compensation_unless_some_but_not_all_paid(
        self, electricity_calculator, make_bill, three_january_rooms, paid
    ):
        result = electricity_calculator.calculate(make_bill(300, three_january_rooms, paid=paid))
        assert result.compensation == ()

    def test_entries_only_for_overlapping_pairs(self, electricity_calculator, make_bill, make_usage_room):
        rooms = [
            make_usage_room("A", "2024-01-01", "2024-01-31"),
            make_usage_room("B", "2024-01-15", "2024-02-15"),
            make_usage_room("C", "2024-03-01", "2024-03-31"),
            make_usage_room("D", "2024-02-20", "2024-03-10"),
        ]
        result = electricity_calculator.calculate(make_bill(400, rooms, paid=["A", "D"]))

        for entry in result.compensation:
            debtor = next(r for r in rooms if r.room_id == entry.from_room_id)
            creditor = next(r for r in rooms if r.room_id == entry.to_room_id)
            assert debtor.date_range.overlaps(creditor.date_range)
        assert {(c.from_room_id, c.to_room_id) for c in result.compensation} == {("B", "A"), ("C", "D")}


def test_compute_compensation_without_rooms():
    assert compute_compensation([]) == []


def test_split_that_rounds_to_zero_emits_no_entries():
    january = DateRange("2024-01-01", "2024-01-31")
    rooms = [
        RoomShare(room_id=room_id, room_name=f"Room {room_id}", usage_range=january,
                  days=30, share_ratio=0.25, amount_to_pay=0.01, has_paid=room_id != "D")
        for room_id in ("A", "B", "C", "D")
    ]
    # 0.01 across three paid rooms rounds to 0.00 each
    assert compute_compensation(rooms) == []
