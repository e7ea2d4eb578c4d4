"""
Command-line interface for Glucose Log.

Provides commands for recording, listing, summarizing, and exporting
blood-sugar readings, and for storing the reminder chat ID.
"""

from pathlib import Path

import pandas as pd
import typer

from glucose_log.domain.reading import Reading, ReadingDraft, ReadingType
from glucose_log.domain.state import AppState
from glucose_log.infrastructure.storage.kv_store import JsonFileKeyValueStore
from glucose_log.services.filtering import Period, filter_readings, period_label
from glucose_log.services.readings import ReadingStore
from glucose_log.services.report import ReportGenerator
from glucose_log.services.statistics import calculate_stats, format_number, reading_status
from glucose_log.utils.exceptions import GlucoseLogError
from glucose_log.utils.logging_config import get_logger, setup_logging
from glucose_log.utils.parameters import ParameterLoader

app = typer.Typer(help="Glucose Log - Personal blood-sugar tracking")

logger = get_logger(__name__)


def init_config(config_path: str = "config/config.yaml") -> ParameterLoader:
    """
    Initialize configuration and logging.

    A missing configuration file falls back to built-in defaults.

    Args:
        config_path: Path to configuration file.

    Returns:
        Parameter loader instance.
    """
    param_loader = ParameterLoader(config_path, allow_missing=True)
    setup_logging(param_loader.get_logging_config(), "glucose_log")
    return param_loader


def open_store(param_loader: ParameterLoader) -> ReadingStore:
    """Create the reading store and load the persisted readings."""
    storage_config = param_loader.get_storage_config()
    store = ReadingStore(
        JsonFileKeyValueStore(Path(storage_config.path)),
        storage_config,
        param_loader.get_processing_config().timezone,
    )
    store.load()
    return store


def build_state(
    param_loader: ParameterLoader,
    store: ReadingStore,
    period: Period | None,
    start: str | None,
    end: str | None,
) -> AppState:
    """
    Assemble the session state for a view command.

    Supplying ``--start`` or ``--end`` without ``--period`` selects the
    custom range.
    """
    if period is not None:
        selected = period.value
    elif start or end:
        selected = Period.CUSTOM.value
    else:
        selected = param_loader.get_processing_config().default_period

    return AppState(
        readings=store.readings,
        period=selected,
        custom_start=start,
        custom_end=end,
        reminder_chat_id=store.load_reminder(),
    )


def select_readings(state: AppState, timezone_str: str) -> list[Reading]:
    """Apply the state's period selection to its readings."""
    return filter_readings(
        state.readings,
        state.period,
        state.custom_start,
        state.custom_end,
        timezone_str=timezone_str,
    )


@app.command()
def add(
    value: str = typer.Option("", "--value", "-v", help="Reading in mg/dL"),
    date: str | None = typer.Option(None, help="Measurement date (YYYY-MM-DD), default today"),
    time: str | None = typer.Option(None, help="Measurement time (HH:MM), default now"),
    reading_type: ReadingType = typer.Option(ReadingType.FASTING, "--type", help="fasting or normal"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """Record a new blood-sugar reading."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        fields: dict[str, object] = {"value": value, "type": reading_type}
        if date:
            fields["date"] = date
        if time:
            fields["time"] = time

        reading = store.add(ReadingDraft(**fields))
        status = reading_status(reading.numeric_value)

        typer.echo(
            f"Saved reading {reading.id}: {reading.value} mg/dL "
            f"({reading.type}) on {reading.date} {reading.time} - {status.value}"
        )

    except GlucoseLogError as e:
        logger.error(f"Add failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def delete(
    reading_id: int = typer.Argument(..., help="ID of the reading to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """Delete a reading after confirmation."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        if not any(r.id == reading_id for r in store.readings):
            typer.echo(f"Reading {reading_id} not found")
            return

        if not yes:
            typer.confirm("Delete this reading?", abort=True)

        remaining = store.remove(reading_id)
        typer.echo(f"Deleted reading {reading_id}. {len(remaining)} readings left.")

    except GlucoseLogError as e:
        logger.error(f"Delete failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command("list")
def list_readings(
    period: Period | None = typer.Option(None, help="View period"),
    start: str | None = typer.Option(None, help="Custom range start date (YYYY-MM-DD)"),
    end: str | None = typer.Option(None, help="Custom range end date (YYYY-MM-DD)"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """Show readings for the selected period with their status."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        state = build_state(param_loader, store, period, start, end)
        filtered = select_readings(state, param_loader.get_processing_config().timezone)

        typer.echo(f"Your Readings ({len(filtered)})")
        if not filtered:
            typer.echo("No readings yet. Add your first reading!")
            return

        rows = [
            {
                "Date": r.date,
                "Time": r.time,
                "Reading": f"{r.value} mg/dL",
                "Type": r.type.capitalize(),
                "Status": reading_status(r.numeric_value).value,
                "ID": r.id,
            }
            for r in filtered
        ]
        typer.echo(pd.DataFrame(rows).to_string(index=False))

    except GlucoseLogError as e:
        logger.error(f"List failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def stats(
    period: Period | None = typer.Option(None, help="View period"),
    start: str | None = typer.Option(None, help="Custom range start date (YYYY-MM-DD)"),
    end: str | None = typer.Option(None, help="Custom range end date (YYYY-MM-DD)"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """Show average, minimum and maximum for the selected period."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        state = build_state(param_loader, store, period, start, end)
        filtered = select_readings(state, param_loader.get_processing_config().timezone)
        result = calculate_stats(filtered)

        typer.echo(f"Period: {period_label(state.period, state.custom_start, state.custom_end)}")
        typer.echo(f"Readings: {len(filtered)}")
        typer.echo(f"Average: {result.avg:.1f} mg/dL")
        typer.echo(f"Minimum: {format_number(result.min)} mg/dL")
        typer.echo(f"Maximum: {format_number(result.max)} mg/dL")

    except GlucoseLogError as e:
        logger.error(f"Stats failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def export(
    period: Period | None = typer.Option(None, help="View period"),
    start: str | None = typer.Option(None, help="Custom range start date (YYYY-MM-DD)"),
    end: str | None = typer.Option(None, help="Custom range end date (YYYY-MM-DD)"),
    output_dir: str | None = typer.Option(None, help="Override report directory from config"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """Export the selected period as a PDF report."""
    try:
        param_loader = init_config(config_path)
        timezone_str = param_loader.get_processing_config().timezone
        store = open_store(param_loader)
        state = build_state(param_loader, store, period, start, end)
        filtered = select_readings(state, timezone_str)

        generator = ReportGenerator(param_loader.get_report_config(), timezone_str)
        out_path = generator.export(
            filtered,
            calculate_stats(filtered),
            period_label(state.period, state.custom_start, state.custom_end),
            Path(output_dir) if output_dir else None,
        )

        typer.echo(f"Report written to {out_path}")

    except GlucoseLogError as e:
        logger.error(f"Export failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def reminder(
    chat_id: str | None = typer.Argument(None, help="Telegram chat ID to store"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """
    Store the chat ID used by the external reminder bot.

    Without an argument, shows the stored ID.
    """
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        if chat_id is None:
            current = store.load_reminder()
            if current:
                typer.echo(f"Reminder chat ID: {current}")
            else:
                typer.echo("No reminder chat ID configured")
            return

        store.save_reminder(chat_id.strip())
        if chat_id.strip():
            typer.echo("Reminders enabled! You'll receive daily notifications.")
        else:
            typer.echo("Reminder chat ID cleared")

    except GlucoseLogError as e:
        logger.error(f"Reminder setup failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
