"""
Occupant (resident) model - a person's stay in a room
"""
from dataclasses import dataclass, field
from typing import Mapping

from models.date_range import DateRange
from models.errors import ValidationError
from utils.helpers import generate_id
from utils.validations import validate_name


@dataclass(frozen=True)
class Occupant:
    """A resident whose prorated stay drives the water bill split"""
    name: str
    stay: DateRange
    occupant_id: str = field(default_factory=generate_id)

    def __post_init__(self):
        """Normalize the stay and reject blank names"""
        if not validate_name(self.name):
            raise ValidationError("Occupant name is required")
        object.__setattr__(self, "name", str(self.name).strip())
        object.__setattr__(self, "stay", DateRange.from_value(self.stay))
        if not self.occupant_id:
            object.__setattr__(self, "occupant_id", generate_id())

    def days_in(self, billing_period: DateRange) -> int:
        """Days of the stay that fall inside the billing period"""
        return self.stay.overlap_days(billing_period)

    def share_ratio(self, billing_period: DateRange, total_occupant_days: int) -> float:
        """This occupant's fraction of all prorated occupant days"""
        if total_occupant_days <= 0:
            return 0.0
        return self.days_in(billing_period) / total_occupant_days

    def to_dict(self) -> dict:
        return {
            "id": self.occupant_id,
            "name": self.name,
            "dateRange": self.stay.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "Occupant":
        return cls(
            name=data.get("name", ""),
            stay=DateRange.from_value(data["dateRange"]),
            occupant_id=data.get("id") or generate_id(),
        )


# Form input and stored history records call occupants "residents"
Resident = Occupant
