"""
Bill models - write-once inputs to the water and electricity calculators
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple, FrozenSet

from models.date_range import DateRange
from models.errors import ValidationError
from models.occupant import Occupant
from models.room import Room
from utils.helpers import generate_id, parse_amount
from utils.validations import validate_amount, find_duplicates


def _check_common(bill) -> None:
    if not validate_amount(bill.total_amount):
        raise ValidationError(
            f"Total amount must be a positive number, got {bill.total_amount!r}"
        )
    object.__setattr__(bill, "total_amount", parse_amount(bill.total_amount))
    object.__setattr__(bill, "billing_period", DateRange.from_value(bill.billing_period))
    # The bill owns copies of its rooms
    object.__setattr__(bill, "rooms", tuple(room.copy() for room in bill.rooms))

    duplicates = find_duplicates(room.room_id for room in bill.rooms)
    if duplicates:
        raise ValidationError(f"Duplicate room ids: {', '.join(duplicates)}")


@dataclass(frozen=True)
class WaterBill:
    """A water bill split across the occupants of every room"""
    billing_period: DateRange
    total_amount: float
    rooms: Tuple[Room, ...] = ()
    bill_id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        _check_common(self)

    @property
    def occupants(self) -> Tuple[Occupant, ...]:
        """All occupants across all rooms, in room order"""
        return tuple(o for room in self.rooms for o in room.occupants)


@dataclass(frozen=True)
class ElectricityBill:
    """An electricity bill split across rooms by usage range"""
    billing_period: DateRange
    total_amount: float
    rooms: Tuple[Room, ...] = ()
    paid_room_ids: FrozenSet[str] = frozenset()
    bill_id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        _check_common(self)
        paid = frozenset(self.paid_room_ids)
        unknown = paid - {room.room_id for room in self.rooms}
        if unknown:
            raise ValidationError(
                f"Paid room ids not in bill: {', '.join(sorted(unknown))}"
            )
        object.__setattr__(self, "paid_room_ids", paid)

    def has_paid(self, room: Room) -> bool:
        return room.room_id in self.paid_room_ids

    @property
    def paid_rooms(self) -> Tuple[Room, ...]:
        return tuple(r for r in self.rooms if self.has_paid(r))
