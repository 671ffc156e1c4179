"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..adapters.http_store import HttpAvailabilityStore
from ..adapters.json_file_store import JsonFileStore
from ..domain.exceptions import AvailabilityError, OverlapError
from ..domain.models import DayAvailability, TimeRange, Weekday, WeeklyAvailability
from ..domain.slot_scheduler import SlotScheduler
from ..domain.time_format import to_minutes
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="weeklyslots",
    help="Manage a provider's weekly availability and bookable time slots",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
ProviderArgument = Annotated[str, typer.Argument(help="Provider alias from the config or raw provider id")]
DayArgument = Annotated[str, typer.Argument(help="Weekday, e.g. monday or mon")]

WeekEdit = Callable[[SlotScheduler, WeeklyAvailability], WeeklyAvailability]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Weekly availability editor for clinic providers.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig) -> AvailabilityService:
    if config.store.backend == "http":
        store = HttpAvailabilityStore(
            base_url=config.store.base_url,
            api_token=config.store.api_token,
            timeout=config.store.timeout_seconds,
        )
    else:
        store = JsonFileStore(path=config.store.path, create_missing=True)

    return AvailabilityService(store=store)


async def _apply_edit(service: AvailabilityService, provider_id: str, edit: WeekEdit) -> WeeklyAvailability:
    week = await service.load_week(provider_id)
    updated = edit(service.scheduler, week)
    await service.save_week(provider_id, updated)
    return updated


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


def _run_edit(config_file: Optional[Path], provider: str, edit: WeekEdit) -> WeeklyAvailability:
    """Load the week, apply one edit, save it, and report errors uniformly."""
    try:
        config = _load_config(config_file)
        provider_id = config.resolve_provider(provider)
        service = _build_service(config)
        return asyncio.run(_apply_edit(service, provider_id, edit))

    except OverlapError as e:
        _fail(f"{e}. Remove slot {e.conflict.time_range} first or choose another time.")

    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _format_slots(day: DayAvailability) -> str:
    if not day.slots:
        return "-"
    return ", ".join(slot.time_range.format_display() for slot in day.sorted_slots())


def _render_week(week: WeeklyAvailability, title: str) -> None:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold yellow")
    table.add_column("Status")
    table.add_column("Slots", style="dim")

    for weekday, day in week.items():
        status = "[green]open[/green]" if day.is_available else "[red]closed[/red]"
        table.add_row(weekday.label, status, _format_slots(day))

    console.print()
    console.print(table)
    console.print()


def _parse_day(day: str) -> Weekday:
    try:
        return Weekday.parse(day)
    except AvailabilityError as e:
        _fail(str(e))


def _parse_clock(value: str) -> int:
    try:
        return to_minutes(value)
    except AvailabilityError as e:
        _fail(str(e))


@app.command()
def show(provider: ProviderArgument, config_file: ConfigOption = None):
    """
    Show the weekly availability of a provider.
    """
    try:
        config = _load_config(config_file)
        provider_id = config.resolve_provider(provider)
        week = asyncio.run(_build_service(config).load_week(provider_id))
    except (AvailabilityError, FileNotFoundError, ValueError) as e:
        _fail(str(e))

    _render_week(week, title=f"Availability for {provider_id}")


@app.command()
def day(
    provider: ProviderArgument,
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    config_file: ConfigOption = None,
):
    """
    Show the slots that apply to a calendar date.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    tz = config.timezone
    if date:
        try:
            target = pendulum.from_format(date, "YYYY-MM-DD", tz=tz)
        except ValueError as e:
            _fail(f"Could not parse date {date!r}: {e}")
    else:
        target = pendulum.now(tz)

    try:
        provider_id = config.resolve_provider(provider)
        service = _build_service(config)
        weekday, availability = asyncio.run(service.day_for_date(provider_id, target.date()))
    except AvailabilityError as e:
        _fail(str(e))

    header = f"{weekday.label}, {target.format('YYYY-MM-DD')}"
    if not availability.is_available or not availability.slots:
        console.print(f"\n[yellow]{header}: not available[/yellow]\n")
        return

    console.print(f"\n[bold cyan]{header}[/bold cyan] ({len(availability.slots)} slot(s))")
    for slot in availability.sorted_slots():
        console.print(f"  {slot.time_range.format_display()} ({slot.time_range.duration_minutes()} min)")
    console.print()


@app.command()
def add(
    provider: ProviderArgument,
    day: DayArgument,
    start: Annotated[str, typer.Argument(help="Slot start (HH:MM)")],
    end: Annotated[str, typer.Argument(help="Slot end (HH:MM)")],
    open_day: Annotated[bool, typer.Option("--open/--keep-closed", help="Mark the day as available.")] = True,
    config_file: ConfigOption = None,
):
    """
    Add a single slot to a weekday.
    """
    weekday = _parse_day(day)
    start_minute = _parse_clock(start)
    end_minute = _parse_clock(end)

    def edit(scheduler: SlotScheduler, week: WeeklyAvailability) -> WeeklyAvailability:
        updated = scheduler.add_slot(week[weekday], TimeRange(start=start_minute, end=end_minute))
        if open_day:
            updated = scheduler.set_day_available(updated, True)
        return week.with_day(weekday, updated)

    _run_edit(config_file, provider, edit)
    console.print(f"[green]✓ Added {start} - {end} on {weekday.label}[/green]")


@app.command()
def remove(
    provider: ProviderArgument,
    day: DayArgument,
    start: Annotated[str, typer.Argument(help="Start time (HH:MM) of the slot to remove")],
    config_file: ConfigOption = None,
):
    """
    Remove the slot starting at the given time.
    """
    weekday = _parse_day(day)
    start_minute = _parse_clock(start)
    removed = []

    def edit(scheduler: SlotScheduler, week: WeeklyAvailability) -> WeeklyAvailability:
        slot = week[weekday].find_slot_starting_at(start_minute)
        if slot is None:
            return week
        removed.append(slot)
        return week.with_day(weekday, scheduler.remove_slot(week[weekday], slot.id))

    _run_edit(config_file, provider, edit)

    if removed:
        console.print(f"[green]✓ Removed {removed[0].time_range} on {weekday.label}[/green]")
    else:
        console.print(f"[yellow]No slot starts at {start} on {weekday.label}; nothing changed.[/yellow]")


@app.command()
def generate(
    provider: ProviderArgument,
    day: DayArgument,
    start: Annotated[Optional[str], typer.Option("--start", help="Range start (HH:MM)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Range end (HH:MM)")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", help="Slot length in minutes")] = None,
    config_file: ConfigOption = None,
):
    """
    Replace a weekday's slots with equal-length slots across a time range.

    Examples:

        weeklyslots generate dr-smith monday --start 09:00 --end 12:00 --duration 30

        # Use the defaults from config.yaml
        weeklyslots generate dr-smith friday
    """
    weekday = _parse_day(day)

    try:
        defaults = _load_config(config_file).defaults
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    range_start = _parse_clock(start) if start else defaults.get_start_minute()
    range_end = _parse_clock(end) if end else defaults.get_end_minute()
    slot_minutes = duration if duration is not None else defaults.duration_minutes

    def edit(scheduler: SlotScheduler, week: WeeklyAvailability) -> WeeklyAvailability:
        return week.with_day(
            weekday,
            scheduler.generate_slots(week[weekday], range_start, range_end, slot_minutes),
        )

    week = _run_edit(config_file, provider, edit)
    console.print(
        f"[green]✓ Generated {len(week[weekday].slots)} time slot(s) on {weekday.label}[/green]"
    )


def _set_availability(config_file: Optional[Path], provider: str, day: str, flag: Optional[bool]) -> None:
    weekday = _parse_day(day)

    def edit(scheduler: SlotScheduler, week: WeeklyAvailability) -> WeeklyAvailability:
        current = week[weekday]
        if flag is None:
            updated = scheduler.toggle_day(current)
        else:
            updated = scheduler.set_day_available(current, flag)
        return week.with_day(weekday, updated)

    week = _run_edit(config_file, provider, edit)
    result = week[weekday]

    if result.is_available:
        console.print(f"[green]✓ {weekday.label} is now open[/green]")
        if not result.slots:
            console.print("[yellow]⚠ The day has no slots yet; it will be stored as closed.[/yellow]")
    else:
        console.print(f"[green]✓ {weekday.label} is now closed[/green]")
        if result.slots:
            console.print(
                f"[yellow]⚠ {len(result.slots)} slot(s) on {weekday.label} were dropped from the stored schedule.[/yellow]"
            )


@app.command()
def toggle(provider: ProviderArgument, day: DayArgument, config_file: ConfigOption = None):
    """
    Flip a weekday between open and closed.
    """
    _set_availability(config_file, provider, day, None)


@app.command(name="open")
def open_(provider: ProviderArgument, day: DayArgument, config_file: ConfigOption = None):
    """
    Mark a weekday as open.
    """
    _set_availability(config_file, provider, day, True)


@app.command()
def close(provider: ProviderArgument, day: DayArgument, config_file: ConfigOption = None):
    """
    Mark a weekday as closed. Its slots are dropped from the stored schedule.
    """
    _set_availability(config_file, provider, day, False)


@app.command()
def copy(
    provider: ProviderArgument,
    day: DayArgument,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
    config_file: ConfigOption = None,
):
    """
    Copy one weekday's slots to every other day, replacing their slots.
    """
    weekday = _parse_day(day)

    if not yes:
        typer.confirm(
            f"Copy {weekday.label}'s schedule to all other days? Their current slots will be replaced.",
            abort=True,
        )

    week = _run_edit(
        config_file,
        provider,
        lambda scheduler, current: scheduler.copy_day_to_all(weekday, current),
    )
    _render_week(week, title=f"Copied {weekday.label} to all days")


@app.command()
def providers(config_file: ConfigOption = None):
    """
    List configured providers and, for the file store, providers with a stored record.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    stored_ids = None
    if config.store.backend == "file":
        try:
            stored_ids = JsonFileStore(path=config.store.path).provider_ids()
        except AvailabilityError as e:
            _fail(str(e))

    configured_ids = {provider.provider_id for provider in config.providers}
    unconfigured_ids = [pid for pid in stored_ids or [] if pid not in configured_ids]

    if not config.providers and not unconfigured_ids:
        console.print("[yellow]No providers defined in the config file.[/yellow]")
        return

    table = Table(
        title="Providers",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Name (Alias)", style="bold yellow")
    table.add_column("Provider ID", style="dim")
    if stored_ids is not None:
        table.add_column("Stored")

    for provider in config.providers:
        row = [provider.name, provider.provider_id]
        if stored_ids is not None:
            row.append("yes" if provider.provider_id in stored_ids else "no")
        table.add_row(*row)

    for provider_id in unconfigured_ids:
        table.add_row("-", provider_id, "yes")

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]weeklyslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
