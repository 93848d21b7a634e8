"""
Water bill proration - splits a bill across occupants by days stayed
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, List

from models.bill import WaterBill
from models.results import OccupantShare, RoomWaterResult, WaterBillResult
from utils.helpers import generate_id, round_money

logger = logging.getLogger(__name__)


def prorate(total_amount: float, days: int, total_days: int) -> float:
    """total_amount * days / total_days rounded to cents (0 when total_days is 0)"""
    if total_days <= 0:
        return 0.0
    return round_money(Decimal(str(total_amount)) * days / total_days)


class WaterBillCalculator:
    """
    Splits a water bill across every occupant of every room in proportion
    to the days each occupant stayed inside the billing period.
    """

    def __init__(
        self,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.id_factory = id_factory
        self.clock = clock

    def calculate(self, bill: WaterBill) -> WaterBillResult:
        """Compute per-occupant share and amount; the bill is not modified"""
        period = bill.billing_period

        total_occupant_days = sum(o.days_in(period) for o in bill.occupants)

        if total_occupant_days == 0:
            logger.info(
                "No occupant stays overlap billing period %s; all shares are zero",
                period,
            )

        room_results: List[RoomWaterResult] = []
        for room in bill.rooms:
            if not room.occupants:
                continue

            occupant_results = []
            for occupant in room.occupants:
                days = occupant.days_in(period)
                occupant_results.append(OccupantShare(
                    occupant_id=occupant.occupant_id,
                    name=occupant.name,
                    stay=occupant.stay,
                    days=days,
                    share_ratio=occupant.share_ratio(period, total_occupant_days),
                    amount_to_pay=prorate(bill.total_amount, days, total_occupant_days),
                ))

            room_results.append(RoomWaterResult(
                room_id=room.room_id,
                room_name=room.name,
                occupant_results=tuple(occupant_results),
            ))

        result = WaterBillResult(
            result_id=self.id_factory(),
            created_at=self.clock(),
            billing_period=period,
            total_amount=bill.total_amount,
            room_results=tuple(room_results),
        )

        logger.debug(
            "Water bill %s: %d occupant days across %d rooms, %s distributed of %s",
            bill.bill_id,
            total_occupant_days,
            len(room_results),
            result.total_distributed,
            bill.total_amount,
        )
        return result
