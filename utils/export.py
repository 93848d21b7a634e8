"""
Export functionality for calculation results
"""
import io
from datetime import datetime
from typing import Union

import pandas as pd

from models.results import ElectricityBillResult, WaterBillResult
from utils.helpers import format_currency, format_percentage, format_date
from utils.validations import sanitize_filename

BillResult = Union[WaterBillResult, ElectricityBillResult]


def summarize_water_result(result: WaterBillResult) -> str:
    """Plain-text summary of a water split, suitable for sharing"""
    lines = [
        "=== Water Bill Split ===",
        f"Billing period: {result.billing_period.format()}",
        f"Total amount: {format_currency(result.total_amount)}",
        f"Total resident days: {result.total_days}",
        f"Calculated: {format_date(result.created_at)}",
        "",
    ]

    for room in result.room_results:
        lines.append(f"{room.room_name}:")
        for o in room.occupant_results:
            lines.append(
                f"  - {o.name}: {o.days} days, {format_percentage(o.share_ratio)}, "
                f"{format_currency(o.amount_to_pay)}"
            )

    return "\n".join(lines)


def summarize_electricity_result(result: ElectricityBillResult) -> str:
    """Plain-text summary of an electricity split and its compensation"""
    lines = [
        "=== Electricity Bill Split ===",
        f"Billing period: {result.billing_period.format()}",
        f"Total amount: {format_currency(result.total_amount)}",
        f"Total room days: {result.total_days}",
        f"Calculated: {format_date(result.created_at)}",
        "",
    ]

    for r in result.room_results:
        status = "paid" if r.has_paid else "unpaid"
        lines.append(
            f"- {r.room_name}: {r.days} days, {format_percentage(r.share_ratio)}, "
            f"{format_currency(r.amount_to_pay)} ({status})"
        )

    if result.compensation:
        lines.append("")
        lines.append("Compensation:")
        for c in result.compensation:
            lines.append(
                f"  - {c.from_room_name} pays {c.to_room_name} {format_currency(c.amount)} "
                f"(overlap {c.overlap_days} days, {c.overlap_range.format()})"
            )

    return "\n".join(lines)


def summarize_result(result: BillResult) -> str:
    if isinstance(result, WaterBillResult):
        return summarize_water_result(result)
    return summarize_electricity_result(result)


def generate_summary_data(result: BillResult) -> dict:
    """Key figures for the summary sheet"""
    kind = "Water" if isinstance(result, WaterBillResult) else "Electricity"
    return {
        'Metric': [
            'Bill Type',
            'Billing Period',
            'Total Amount',
            'Total Days',
            'Total Distributed',
            'Undistributed',
            'Calculated',
        ],
        'Value': [
            kind,
            result.billing_period.format(),
            format_currency(result.total_amount),
            result.total_days,
            format_currency(result.total_distributed),
            format_currency(result.total_amount - result.total_distributed),
            result.created_at.strftime('%Y-%m-%d %H:%M:%S'),
        ],
    }


def result_to_dataframe(result: BillResult) -> pd.DataFrame:
    """Per-occupant (water) or per-room (electricity) table"""
    return result.to_dataframe()


def generate_csv_export(result: BillResult) -> bytes:
    """CSV of the split table"""
    df = result_to_dataframe(result)
    return df.to_csv(index=False).encode('utf-8')


def generate_excel_export(result: BillResult) -> bytes:
    """Excel workbook with summary, split and (electricity) compensation sheets"""
    output = io.BytesIO()

    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        pd.DataFrame(generate_summary_data(result)).to_excel(
            writer, sheet_name='Summary', index=False
        )

        split_df = result_to_dataframe(result)
        if not split_df.empty:
            split_df.to_excel(writer, sheet_name='Split', index=False)

        if isinstance(result, ElectricityBillResult) and result.compensation:
            result.compensation_dataframe().to_excel(
                writer, sheet_name='Compensation', index=False
            )

    return output.getvalue()


def export_filename(result: BillResult, extension: str) -> str:
    """e.g. water_split_20240401_120000.xlsx"""
    kind = "water" if isinstance(result, WaterBillResult) else "electricity"
    stamp = (result.created_at or datetime.now()).strftime('%Y%m%d_%H%M%S')
    return sanitize_filename(f"{kind}_split_{stamp}.{extension.lstrip('.')}")
