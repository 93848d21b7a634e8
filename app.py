"""
Rental Utility Splitter
Command line entry point: calculate bills from input files and manage history
"""
from pathlib import Path
from typing import Optional

import typer

from config import settings
from engine.bill_builder import load_bill_file, calculate_bill
from models.errors import InvalidRangeError, StorageError, ValidationError
from storage.history import BillHistory, create_history_store
from utils.export import (
    export_filename,
    generate_csv_export,
    generate_excel_export,
    summarize_result,
)
from utils.helpers import format_currency, format_date
from utils.logging_config import setup_logging

app = typer.Typer(help=f"{settings.APP_TITLE} - split water and electricity bills by occupancy")


@app.callback()
def main(
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
    log_format: str = typer.Option(settings.LOG_FORMAT, "--log-format", help="text or json"),
):
    setup_logging(log_level, log_format)


def _fail(error) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(1)


def _history(backend: Optional[str]) -> BillHistory:
    return BillHistory(create_history_store(backend))


@app.command()
def calculate(
    bill_file: Path = typer.Argument(..., help="YAML or JSON bill input"),
    save: bool = typer.Option(False, "--save", help="Save the result to history"),
    export: Optional[str] = typer.Option(None, "--export", help="Write an export: csv or xlsx"),
    output_dir: Path = typer.Option(Path("."), "--out", help="Directory for exports"),
    backend: Optional[str] = typer.Option(None, "--backend", help="History backend: json, duckdb or api"),
):
    """Calculate a bill split and print the summary"""
    try:
        result = calculate_bill(load_bill_file(str(bill_file)))
    except (InvalidRangeError, ValidationError) as e:
        raise _fail(e)

    typer.echo(summarize_result(result))

    if export:
        extension = export.lower().lstrip(".")
        if extension not in ("csv", "xlsx"):
            raise _fail(f"unsupported export format {export!r}")
        data = generate_csv_export(result) if extension == "csv" else generate_excel_export(result)
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / export_filename(result, extension)
        target.write_bytes(data)
        typer.echo(f"Exported to {target}")

    if save:
        try:
            stored = _history(backend).add_result(result)
        except (StorageError, ValueError) as e:
            raise _fail(e)
        typer.echo(f"Saved to history as {stored['id']}")


@app.command()
def history(
    kind: str = typer.Argument(..., help="water or electricity"),
    backend: Optional[str] = typer.Option(None, "--backend", help="History backend: json, duckdb or api"),
):
    """List saved results, newest first"""
    if kind not in settings.COLLECTIONS:
        raise _fail(f"unknown bill kind {kind!r}")

    try:
        bill_history = _history(backend)
        results = (
            bill_history.water_history() if kind == "water" else bill_history.electricity_history()
        )
    except (StorageError, ValueError) as e:
        raise _fail(e)

    if not results:
        typer.echo("No saved results.")
        return

    for result in results:
        typer.echo(
            f"{result.result_id}  {format_date(result.created_at)}  "
            f"{result.billing_period.format()}  {format_currency(result.total_amount)}"
        )


@app.command()
def delete(
    kind: str = typer.Argument(..., help="water or electricity"),
    result_id: str = typer.Argument(..., help="Id of the saved result"),
    backend: Optional[str] = typer.Option(None, "--backend", help="History backend: json, duckdb or api"),
):
    """Delete one saved result"""
    if kind not in settings.COLLECTIONS:
        raise _fail(f"unknown bill kind {kind!r}")

    try:
        bill_history = _history(backend)
        deleted = (
            bill_history.delete_water_result(result_id)
            if kind == "water"
            else bill_history.delete_electricity_result(result_id)
        )
    except (StorageError, ValueError) as e:
        raise _fail(e)

    if not deleted:
        typer.echo(f"No {kind} result with id {result_id}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Deleted {result_id}")


@app.command()
def clear(
    backend: Optional[str] = typer.Option(None, "--backend", help="History backend: json, duckdb or api"),
    yes: bool = typer.Option(False, "--yes", help="Skip confirmation"),
):
    """Delete all saved results"""
    if not yes:
        typer.confirm("Delete all saved water and electricity results?", abort=True)
    try:
        deleted = _history(backend).clear_all()
    except (StorageError, ValueError) as e:
        raise _fail(e)
    typer.echo(", ".join(f"{k}: {v} deleted" for k, v in deleted.items()))


if __name__ == "__main__":
    app()
