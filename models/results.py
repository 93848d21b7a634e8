"""
Calculation results - immutable snapshots handed to history and export
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Tuple, Mapping, Optional
import pandas as pd

from models.date_range import DateRange
from utils.helpers import parse_date, round_money


def _parse_created_at(value) -> datetime:
    return parse_date(value) or datetime.now()


# ---------------------------------------------------------------------------
# Water
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OccupantShare:
    """One occupant's prorated days, share and amount"""
    occupant_id: str
    name: str
    stay: DateRange
    days: int
    share_ratio: float
    amount_to_pay: float

    def to_dict(self) -> dict:
        return {
            "residentId": self.occupant_id,
            "residentName": self.name,
            "dateRange": self.stay.to_dict(),
            "days": self.days,
            "shareRatio": self.share_ratio,
            "amountToPay": self.amount_to_pay,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "OccupantShare":
        return cls(
            occupant_id=data["residentId"],
            name=data.get("residentName", ""),
            stay=DateRange.from_value(data["dateRange"]),
            days=int(data.get("days", 0)),
            share_ratio=float(data.get("shareRatio", 0.0)),
            amount_to_pay=float(data.get("amountToPay", 0.0)),
        )


@dataclass(frozen=True)
class RoomWaterResult:
    """Per-occupant results grouped under their room"""
    room_id: str
    room_name: str
    occupant_results: Tuple[OccupantShare, ...]

    @property
    def days(self) -> int:
        return sum(o.days for o in self.occupant_results)

    @property
    def amount_to_pay(self) -> float:
        return round_money(sum(o.amount_to_pay for o in self.occupant_results))

    def to_dict(self) -> dict:
        return {
            "roomId": self.room_id,
            "roomName": self.room_name,
            "residentResults": [o.to_dict() for o in self.occupant_results],
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "RoomWaterResult":
        return cls(
            room_id=data["roomId"],
            room_name=data.get("roomName", ""),
            occupant_results=tuple(
                OccupantShare.from_dict(o) for o in data.get("residentResults") or []
            ),
        )


@dataclass(frozen=True)
class WaterBillResult:
    """Result of splitting a water bill across occupants"""
    result_id: str
    created_at: datetime
    billing_period: DateRange
    total_amount: float
    room_results: Tuple[RoomWaterResult, ...]

    @property
    def occupant_results(self) -> Tuple[OccupantShare, ...]:
        return tuple(o for room in self.room_results for o in room.occupant_results)

    @property
    def total_days(self) -> int:
        """Sum of prorated occupant days"""
        return sum(o.days for o in self.occupant_results)

    @property
    def total_distributed(self) -> float:
        return round_money(sum(o.amount_to_pay for o in self.occupant_results))

    def find_occupant(self, occupant_id: str) -> Optional[OccupantShare]:
        return next((o for o in self.occupant_results if o.occupant_id == occupant_id), None)

    def to_dict(self) -> dict:
        return {
            "id": self.result_id,
            "date": self.created_at.isoformat(),
            "quarterRange": self.billing_period.to_dict(),
            "totalAmount": self.total_amount,
            "roomResults": [r.to_dict() for r in self.room_results],
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "WaterBillResult":
        return cls(
            result_id=data["id"],
            created_at=_parse_created_at(data.get("date")),
            billing_period=DateRange.from_value(data["quarterRange"]),
            total_amount=float(data.get("totalAmount", 0.0)),
            room_results=tuple(
                RoomWaterResult.from_dict(r) for r in data.get("roomResults") or []
            ),
        )

    def to_dataframe(self) -> pd.DataFrame:
        """One row per occupant"""
        if not self.room_results:
            return pd.DataFrame()

        data = []
        for room in self.room_results:
            for o in room.occupant_results:
                data.append({
                    'room_id': room.room_id,
                    'room_name': room.room_name,
                    'occupant_id': o.occupant_id,
                    'occupant_name': o.name,
                    'start_date': o.stay.start_date,
                    'end_date': o.stay.end_date,
                    'days': o.days,
                    'share_ratio': o.share_ratio,
                    'amount_to_pay': o.amount_to_pay,
                })

        return pd.DataFrame(data)


# ---------------------------------------------------------------------------
# Electricity
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RoomShare:
    """One room's prorated days, share, amount and payment status"""
    room_id: str
    room_name: str
    usage_range: DateRange
    days: int
    share_ratio: float
    amount_to_pay: float
    has_paid: bool = False

    def to_dict(self) -> dict:
        return {
            "roomId": self.room_id,
            "roomName": self.room_name,
            "dateRange": self.usage_range.to_dict(),
            "days": self.days,
            "shareRatio": self.share_ratio,
            "amountToPay": self.amount_to_pay,
            "hasPaid": self.has_paid,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "RoomShare":
        return cls(
            room_id=data["roomId"],
            room_name=data.get("roomName", ""),
            usage_range=DateRange.from_value(data["dateRange"]),
            days=int(data.get("days", 0)),
            share_ratio=float(data.get("shareRatio", 0.0)),
            amount_to_pay=float(data.get("amountToPay", 0.0)),
            has_paid=bool(data.get("hasPaid", False)),
        )


@dataclass(frozen=True)
class CompensationEntry:
    """Money an unpaid room owes a paid room"""
    from_room_id: str
    from_room_name: str
    to_room_id: str
    to_room_name: str
    amount: float
    overlap_days: int
    overlap_range: DateRange

    def to_dict(self) -> dict:
        return {
            "fromRoomId": self.from_room_id,
            "fromRoomName": self.from_room_name,
            "toRoomId": self.to_room_id,
            "toRoomName": self.to_room_name,
            "amount": self.amount,
            "overlapDays": self.overlap_days,
            "overlapStartDate": self.overlap_range.start_date.isoformat(),
            "overlapEndDate": self.overlap_range.end_date.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "CompensationEntry":
        return cls(
            from_room_id=data["fromRoomId"],
            from_room_name=data.get("fromRoomName", ""),
            to_room_id=data["toRoomId"],
            to_room_name=data.get("toRoomName", ""),
            amount=float(data.get("amount", 0.0)),
            overlap_days=int(data.get("overlapDays", 0)),
            overlap_range=DateRange(data["overlapStartDate"], data["overlapEndDate"]),
        )


@dataclass(frozen=True)
class ElectricityBillResult:
    """Result of splitting an electricity bill across rooms"""
    result_id: str
    created_at: datetime
    billing_period: DateRange
    total_amount: float
    room_results: Tuple[RoomShare, ...]
    paid_room_ids: Tuple[str, ...] = ()
    compensation: Tuple[CompensationEntry, ...] = ()

    @property
    def total_days(self) -> int:
        """Sum of prorated room days"""
        return sum(r.days for r in self.room_results)

    @property
    def total_distributed(self) -> float:
        return round_money(sum(r.amount_to_pay for r in self.room_results))

    def find_room(self, room_id: str) -> Optional[RoomShare]:
        return next((r for r in self.room_results if r.room_id == room_id), None)

    def compensation_owed_by(self, room_id: str) -> float:
        return round_money(sum(c.amount for c in self.compensation if c.from_room_id == room_id))

    def compensation_due_to(self, room_id: str) -> float:
        return round_money(sum(c.amount for c in self.compensation if c.to_room_id == room_id))

    def to_dict(self) -> dict:
        return {
            "id": self.result_id,
            "date": self.created_at.isoformat(),
            "quarterRange": self.billing_period.to_dict(),
            "totalAmount": self.total_amount,
            "roomResults": [r.to_dict() for r in self.room_results],
            "paidRooms": list(self.paid_room_ids),
            "compensation": [c.to_dict() for c in self.compensation],
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "ElectricityBillResult":
        return cls(
            result_id=data["id"],
            created_at=_parse_created_at(data.get("date")),
            billing_period=DateRange.from_value(data["quarterRange"]),
            total_amount=float(data.get("totalAmount", 0.0)),
            room_results=tuple(RoomShare.from_dict(r) for r in data.get("roomResults") or []),
            paid_room_ids=tuple(data.get("paidRooms") or ()),
            compensation=tuple(
                CompensationEntry.from_dict(c) for c in data.get("compensation") or []
            ),
        )

    def to_dataframe(self) -> pd.DataFrame:
        """One row per room"""
        if not self.room_results:
            return pd.DataFrame()

        data = []
        for r in self.room_results:
            data.append({
                'room_id': r.room_id,
                'room_name': r.room_name,
                'start_date': r.usage_range.start_date,
                'end_date': r.usage_range.end_date,
                'days': r.days,
                'share_ratio': r.share_ratio,
                'amount_to_pay': r.amount_to_pay,
                'has_paid': r.has_paid,
            })

        return pd.DataFrame(data)

    def compensation_dataframe(self) -> pd.DataFrame:
        """One row per compensation transfer"""
        if not self.compensation:
            return pd.DataFrame()

        data = []
        for c in self.compensation:
            data.append({
                'from_room': c.from_room_name,
                'to_room': c.to_room_name,
                'amount': c.amount,
                'overlap_days': c.overlap_days,
                'overlap_start': c.overlap_range.start_date,
                'overlap_end': c.overlap_range.end_date,
            })

        return pd.DataFrame(data)
