"""
Electricity bill proration and compensation between paid and unpaid rooms
"""
import logging
from datetime import datetime
from typing import Callable, List, Sequence

from engine.water_calculator import prorate
from models.bill import ElectricityBill
from models.results import CompensationEntry, ElectricityBillResult, RoomShare
from utils.helpers import generate_id, round_money

logger = logging.getLogger(__name__)


def compute_compensation(room_results: Sequence[RoomShare]) -> List[CompensationEntry]:
    """
    Transfers from unpaid rooms to the rooms that already paid.

    Each unpaid room's amount is split evenly across all paid rooms, and one
    entry is emitted for every (unpaid, paid) pair whose usage ranges
    overlap. The amount is the flat per-paid-room split; the overlap is
    reported alongside it but does not scale it. Nothing is emitted unless
    some, but not all, rooms have paid.

    The zero check runs on the rounded split, so an unpaid room whose share
    per paid room rounds to 0.00 (e.g. 0.01 across three paid rooms) emits
    no entries rather than 0.00 transfers.
    """
    paid = [r for r in room_results if r.has_paid]
    unpaid = [r for r in room_results if not r.has_paid]
    if not paid or not unpaid:
        return []

    compensation = []
    for debtor in unpaid:
        per_paid_room = round_money(debtor.amount_to_pay / len(paid))
        if per_paid_room <= 0:
            continue

        for creditor in paid:
            shared = debtor.usage_range.overlap(creditor.usage_range)
            if shared is None:
                continue

            compensation.append(CompensationEntry(
                from_room_id=debtor.room_id,
                from_room_name=debtor.room_name,
                to_room_id=creditor.room_id,
                to_room_name=creditor.room_name,
                amount=per_paid_room,
                overlap_days=shared.length_in_days(),
                overlap_range=shared,
            ))

    return compensation


class ElectricityBillCalculator:
    """
    Splits an electricity bill across rooms in proportion to each room's
    usage days inside the billing period, then works out what unpaid rooms
    owe the rooms that already paid.
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.id_factory = id_factory
        self.clock = clock

    def calculate(self, bill: ElectricityBill) -> ElectricityBillResult:
        """Compute per-room share, payment status and compensation"""
        period = bill.billing_period

        days_by_room = [room.days_in(period) for room in bill.rooms]
        total_room_days = sum(days_by_room)

        if total_room_days == 0:
            logger.info(
                "No room usage overlaps billing period %s; all shares are zero",
                period,
            )

        room_results = []
        for room, days in zip(bill.rooms, days_by_room):
            room_results.append(RoomShare(
                room_id=room.room_id,
                room_name=room.name,
                usage_range=room.date_range,
                days=days,
                share_ratio=days / total_room_days if total_room_days > 0 else 0.0,
                amount_to_pay=prorate(bill.total_amount, days, total_room_days),
                has_paid=bill.has_paid(room),
            ))

        compensation = compute_compensation(room_results)

        result = ElectricityBillResult(
            result_id=self.id_factory(),
            created_at=self.clock(),
            billing_period=period,
            total_amount=bill.total_amount,
            room_results=tuple(room_results),
            paid_room_ids=tuple(r.room_id for r in bill.paid_rooms),
            compensation=tuple(compensation),
        )

        logger.debug(
            "Electricity bill %s: %d room days across %d rooms, %d compensation entries",
            bill.bill_id,
            total_room_days,
            len(room_results),
            len(compensation),
        )
        return result
