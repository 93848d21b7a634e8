"""
Room model - a billable unit with occupants or an explicit usage range
"""
from dataclasses import dataclass, field
from typing import List, Optional, Mapping

from models.date_range import DateRange
from models.errors import ValidationError
from models.occupant import Occupant
from utils.helpers import generate_id
from utils.validations import validate_name


@dataclass
class Room:
    """
    Represents a room in a shared rental.

    Water bills split by the room's occupants; electricity bills split by
    the room's usage range. When no usage range is given, the room's extent
    is derived from its occupants each time it is read.
    """
    name: str
    occupants: List[Occupant] = field(default_factory=list)
    usage_range: Optional[DateRange] = None
    room_id: str = field(default_factory=generate_id)

    def __post_init__(self):
        """Normalize inputs and reject blank names or duplicate occupants"""
        if not validate_name(self.name):
            raise ValidationError("Room name is required")
        self.name = str(self.name).strip()
        self.room_id = self.room_id or generate_id()
        self.occupants = list(self.occupants)
        if self.usage_range is not None:
            self.usage_range = DateRange.from_value(self.usage_range)

        seen = set()
        for occupant in self.occupants:
            if occupant.occupant_id in seen:
                raise ValidationError(
                    f"Duplicate occupant id {occupant.occupant_id} in room {self.name}"
                )
            seen.add(occupant.occupant_id)

    @property
    def date_range(self) -> DateRange:
        """
        Explicit usage range if set, otherwise the span from the earliest
        move-in to the latest move-out. A room with neither is a zero-length
        range on today.
        """
        if self.usage_range is not None:
            return self.usage_range
        if not self.occupants:
            return DateRange.single_day()
        return DateRange(
            min(o.stay.start_date for o in self.occupants),
            max(o.stay.end_date for o in self.occupants),
        )

    def days_in(self, billing_period: DateRange) -> int:
        """Days of the room's extent inside the billing period"""
        return self.date_range.overlap_days(billing_period)

    def add_occupant(self, occupant: Occupant):
        """Add an occupant to the room"""
        if any(o.occupant_id == occupant.occupant_id for o in self.occupants):
            raise ValidationError(
                f"Occupant {occupant.occupant_id} is already in room {self.name}"
            )
        self.occupants.append(occupant)

    def remove_occupant(self, occupant_id: str) -> bool:
        """Remove an occupant by id; returns False when not found"""
        remaining = [o for o in self.occupants if o.occupant_id != occupant_id]
        if len(remaining) == len(self.occupants):
            return False
        self.occupants = remaining
        return True

    def copy(self) -> "Room":
        """Copy with its own occupant list"""
        return Room(
            name=self.name,
            occupants=list(self.occupants),
            usage_range=self.usage_range,
            room_id=self.room_id,
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.room_id,
            "name": self.name,
            "residents": [o.to_dict() for o in self.occupants],
        }
        # Only an explicit range is stored; a derived one is rebuilt from residents
        if self.usage_range is not None:
            data["dateRange"] = self.usage_range.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping) -> "Room":
        occupants = [Occupant.from_dict(r) for r in data.get("residents") or []]
        date_range = data.get("dateRange")
        return cls(
            name=data.get("name", ""),
            occupants=occupants,
            usage_range=DateRange.from_value(date_range) if date_range else None,
            room_id=data.get("id") or generate_id(),
        )
