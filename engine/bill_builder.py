"""
Builds validated bills from form-shaped input (dicts, YAML or JSON files).

Input shape (camelCase keys as submitted by the bill forms):

    kind: water                      # or electricity
    startDate: 2024-01-01
    endDate: 2024-03-31
    totalAmount: 300
    rooms:
      - name: Room A
        residents:                   # water
          - name: Alice
            startDate: 2024-01-01
            endDate: 2024-03-31
      - name: Room B                 # electricity
        startDate: 2024-01-01
        endDate: 2024-02-15
        hasPaid: true

Stays and usage ranges reaching outside the billing period are clamped to
it, with a warning for every clamped edge.
"""
import json
import logging
from pathlib import Path
from typing import Mapping, Union

import yaml

from engine.electricity_calculator import ElectricityBillCalculator
from engine.water_calculator import WaterBillCalculator
from models.bill import ElectricityBill, WaterBill
from models.date_range import DateRange
from models.errors import ValidationError
from models.occupant import Occupant
from models.results import ElectricityBillResult, WaterBillResult
from models.room import Room
from utils.helpers import parse_amount, format_date, room_label
from utils.validations import validate_amount, validate_file_extension, validate_name

logger = logging.getLogger(__name__)

WATER = "water"
ELECTRICITY = "electricity"
SUPPORTED_EXTENSIONS = ["yaml", "yml", "json"]


def _require(data: Mapping, key: str, context: str):
    value = data.get(key)
    if value is None or value == "":
        raise ValidationError(f"{context} is missing required field '{key}'")
    return value


def _parse_total(data: Mapping) -> float:
    raw = _require(data, "totalAmount", "Bill")
    if not validate_amount(raw):
        raise ValidationError(f"Total amount must be a positive number, got {raw!r}")
    return parse_amount(raw)


def _parse_period(data: Mapping, context: str) -> DateRange:
    return DateRange(_require(data, "startDate", context), _require(data, "endDate", context))


def clamp_to_period(value: DateRange, period: DateRange, label: str) -> DateRange:
    """Clamp a stay or usage range to the billing period, warning on each edge"""
    if not value.overlaps(period):
        logger.warning(
            "%s (%s) lies entirely outside the billing period %s and counts as zero days",
            label, value, period,
        )
        return value

    if value.start_date < period.start_date:
        logger.warning(
            "%s starts on %s, before the billing period; using %s",
            label, format_date(value.start_date), format_date(period.start_date),
        )
    if value.end_date > period.end_date:
        logger.warning(
            "%s ends on %s, after the billing period; using %s",
            label, format_date(value.end_date), format_date(period.end_date),
        )
    return value.clamp_to(period)


def _room_name(room_data: Mapping, index: int) -> str:
    name = room_data.get("name")
    return str(name).strip() if validate_name(name) else room_label(index)


def build_water_bill(data: Mapping) -> WaterBill:
    """Build a WaterBill from form input; every room needs at least one resident"""
    total_amount = _parse_total(data)
    period = _parse_period(data, "Bill")

    rooms_data = data.get("rooms") or []
    if not rooms_data:
        raise ValidationError("A water bill needs at least one room")

    rooms = []
    for index, room_data in enumerate(rooms_data):
        name = _room_name(room_data, index)
        residents = room_data.get("residents") or []
        if not residents:
            raise ValidationError(f"{name} has no residents")

        occupants = []
        for resident in residents:
            resident_name = _require(resident, "name", f"Resident in {name}")
            stay = _parse_period(resident, f"Resident {resident_name}")
            occupants.append(Occupant(
                name=resident_name,
                stay=clamp_to_period(stay, period, f"Resident {resident_name}"),
                occupant_id=resident.get("id"),
            ))

        rooms.append(Room(name=name, occupants=occupants, room_id=room_data.get("id")))

    bill = WaterBill(billing_period=period, total_amount=total_amount, rooms=rooms)
    logger.info(
        "Built water bill %s: %d rooms, %d residents, total %s",
        bill.bill_id, len(rooms), len(bill.occupants), total_amount,
    )
    return bill


def build_electricity_bill(data: Mapping) -> ElectricityBill:
    """Build an ElectricityBill from form input; rooms carry their own usage range"""
    total_amount = _parse_total(data)
    period = _parse_period(data, "Bill")

    rooms_data = data.get("rooms") or []
    if not rooms_data:
        raise ValidationError("An electricity bill needs at least one room")

    rooms = []
    paid_room_ids = []
    for index, room_data in enumerate(rooms_data):
        name = _room_name(room_data, index)
        usage = _parse_period(room_data, name)
        room = Room(
            name=name,
            usage_range=clamp_to_period(usage, period, name),
            room_id=room_data.get("id"),
        )
        rooms.append(room)
        if room_data.get("hasPaid"):
            paid_room_ids.append(room.room_id)

    bill = ElectricityBill(
        billing_period=period,
        total_amount=total_amount,
        rooms=rooms,
        paid_room_ids=frozenset(paid_room_ids),
    )
    logger.info(
        "Built electricity bill %s: %d rooms (%d paid), total %s",
        bill.bill_id, len(rooms), len(bill.paid_rooms), total_amount,
    )
    return bill


def build_bill(data: Mapping) -> Union[WaterBill, ElectricityBill]:
    """Dispatch on the input's 'kind' field"""
    kind = str(data.get("kind", "")).strip().lower()
    if kind == WATER:
        return build_water_bill(data)
    if kind == ELECTRICITY:
        return build_electricity_bill(data)
    raise ValidationError(f"Unknown bill kind {kind!r}; expected '{WATER}' or '{ELECTRICITY}'")


def load_bill_file(file_path: str) -> Union[WaterBill, ElectricityBill]:
    """Read a YAML or JSON bill input file and build the bill it describes"""
    path = Path(file_path)
    if not validate_file_extension(path.name, SUPPORTED_EXTENSIONS):
        raise ValidationError(f"Unsupported bill file type: {path.name}")
    if not path.exists():
        raise ValidationError(f"File not found: {file_path}")

    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, Mapping):
        raise ValidationError(f"Bill file {path.name} does not contain a mapping")
    return build_bill(data)


def calculate_bill(
    bill: Union[WaterBill, ElectricityBill],
) -> Union[WaterBillResult, ElectricityBillResult]:
    """Run the calculator that matches the bill type"""
    if isinstance(bill, WaterBill):
        return WaterBillCalculator().calculate(bill)
    if isinstance(bill, ElectricityBill):
        return ElectricityBillCalculator().calculate(bill)
    raise TypeError(f"Unsupported bill type: {type(bill).__name__}")
