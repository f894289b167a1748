"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, List, Optional, Sequence

import pendulum
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.json_store import JsonScheduleStore
from ..config import AppConfig, get_default_config_path
from ..domain.booking import seats_left
from ..domain.exceptions import ScheduleError
from ..domain.models import DateInterval, ScheduleType, StoredSchedule
from ..services.availability import AvailabilityService
from ..services.requests import ScheduleRequest
from ..services.schedule_planner import SchedulePlan, SchedulePlanner

app = typer.Typer(
    name="doctorschedule",
    help="Plan doctors' availability and list bookable schedules",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
LocationFilter = Annotated[
    Optional[str],
    typer.Option("--location", "-l", help="Location id or name"),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Plan doctors' availability and list bookable schedules.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_request(
    config: AppConfig,
    *,
    location: str,
    doctor: str,
    date: Optional[str],
    days: Sequence[str],
    start: Optional[str],
    end: Optional[str],
    repeat: bool,
    max_appointments: Optional[int],
    visiting_fee: float,
    serial_fee: float,
    discount: Optional[float],
) -> ScheduleRequest:
    """
    Turn command line options into a validated ScheduleRequest.

    ``--date`` selects a single-day schedule, ``--day`` a weekly one.
    """
    if date and days:
        raise ValueError("Use either --date or --day, not both.")

    one_day = None
    if date:
        try:
            one_day = pendulum.from_format(date, "YYYY-MM-DD", tz=config.timezone).date()
        except ValueError as e:
            raise ValueError(f"Could not parse --date {date!r}: {e}") from e

    schedule_type = ScheduleType.SINGLE_DAY if date else ScheduleType.REPEAT_WEEKS

    return ScheduleRequest.model_validate(
        {
            "location_id": config.resolve_location(location),
            "doctor_id": doctor,
            "schedule_type": schedule_type,
            "one_day": one_day,
            "weekly_days": list(days),
            "start_time": start if start is not None else config.defaults.start_time,
            "end_time": end if end is not None else config.defaults.end_time,
            "max_appointments": (
                max_appointments if max_appointments is not None else config.defaults.max_appointments
            ),
            "repeat_weeks": repeat and schedule_type is ScheduleType.REPEAT_WEEKS,
            "repeat_months": repeat and schedule_type is ScheduleType.SINGLE_DAY,
            "visiting_fee": visiting_fee,
            "serial_fee": serial_fee,
            "discount": discount,
        },
        context={"timezone": config.timezone},
    )


def _print_schedules(title: str, schedules: Sequence[StoredSchedule], config: AppConfig) -> None:
    if not schedules:
        console.print(f"[yellow]⚠ {title}: no schedules.[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Schedule", style="bold yellow")
    table.add_column("Location", style="dim")
    table.add_column("Seats", justify="right")

    for schedule in schedules:
        local = DateInterval(
            start_time=schedule.start_time.in_timezone(config.timezone),
            end_time=schedule.end_time.in_timezone(config.timezone),
        )
        location = config.find_location(schedule.location_id)
        table.add_row(
            local.format_display(),
            location.display_name() if location else schedule.location_id,
            f"{seats_left(schedule.max_appointments, schedule.booked)}/{schedule.max_appointments}",
        )

    console.print()
    console.print(table)


def _print_plan(plan: SchedulePlan, config: AppConfig, created: bool) -> None:
    _print_schedules("Created schedules" if created else "Schedule preview", plan.schedules, config)
    console.print(f"\n[bold green]✓ {plan.message}[/bold green]")
    if created:
        console.print(f"[green]{plan.created_count} schedule(s) stored in {config.store_path}[/green]")
    console.print()


def _plan(
    *,
    create: bool,
    config_file: Optional[Path],
    remove: Optional[str] = None,
    **options,
) -> None:
    try:
        config = _load_config(config_file)
        request = _build_request(config, **options)

        store = JsonScheduleStore(config.store_path, timezone=config.timezone)
        planner = SchedulePlanner(store=store, timezone=config.timezone)

        if create:
            plan = asyncio.run(planner.create(request))
        elif remove:
            plan = asyncio.run(planner.remove(request, remove))
        else:
            plan = asyncio.run(planner.preview(request))

        _print_plan(plan, config, created=create)

    except (FileNotFoundError, ScheduleError, ValidationError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def preview(
    location: Annotated[str, typer.Option("--location", "-l", help="Location id or name")],
    doctor: Annotated[str, typer.Option("--doctor", help="Doctor id")],
    config_file: ConfigOption = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Single day (YYYY-MM-DD)")] = None,
    day: Annotated[Optional[List[str]], typer.Option("--day", help="Weekday name, repeatable")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start time (HH:MM)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End time (HH:MM)")] = None,
    repeat: Annotated[bool, typer.Option("--repeat", help="Repeat monthly (--date) or weekly (--day)")] = False,
    max_appointments: Annotated[Optional[int], typer.Option("--max-appointments", "-m")] = None,
    visiting_fee: Annotated[float, typer.Option("--visiting-fee")] = 0.0,
    serial_fee: Annotated[float, typer.Option("--serial-fee")] = 0.0,
    discount: Annotated[Optional[float], typer.Option("--discount")] = None,
    remove: Annotated[Optional[str], typer.Option("--remove", help="Drop the slot starting at this ISO date-time")] = None,
):
    """
    Preview the schedules a request would create, without storing them.

    Examples:

        doctorschedule preview -l main --doctor dr-house --day monday --day friday --repeat

        doctorschedule preview -l main --doctor dr-house --date 2024-12-02 --start 14:00 --end 18:00
    """
    _plan(
        create=False,
        config_file=config_file,
        remove=remove,
        location=location,
        doctor=doctor,
        date=date,
        days=day or [],
        start=start,
        end=end,
        repeat=repeat,
        max_appointments=max_appointments,
        visiting_fee=visiting_fee,
        serial_fee=serial_fee,
        discount=discount,
    )


@app.command()
def create(
    location: Annotated[str, typer.Option("--location", "-l", help="Location id or name")],
    doctor: Annotated[str, typer.Option("--doctor", help="Doctor id")],
    config_file: ConfigOption = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Single day (YYYY-MM-DD)")] = None,
    day: Annotated[Optional[List[str]], typer.Option("--day", help="Weekday name, repeatable")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start time (HH:MM)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End time (HH:MM)")] = None,
    repeat: Annotated[bool, typer.Option("--repeat", help="Repeat monthly (--date) or weekly (--day)")] = False,
    max_appointments: Annotated[Optional[int], typer.Option("--max-appointments", "-m")] = None,
    visiting_fee: Annotated[float, typer.Option("--visiting-fee")] = 0.0,
    serial_fee: Annotated[float, typer.Option("--serial-fee")] = 0.0,
    discount: Annotated[Optional[float], typer.Option("--discount")] = None,
):
    """
    Create schedules, skipping any that clash with stored ones.
    """
    _plan(
        create=True,
        config_file=config_file,
        location=location,
        doctor=doctor,
        date=date,
        days=day or [],
        start=start,
        end=end,
        repeat=repeat,
        max_appointments=max_appointments,
        visiting_fee=visiting_fee,
        serial_fee=serial_fee,
        discount=discount,
    )


def _availability(config_file: Optional[Path]) -> tuple[AppConfig, AvailabilityService]:
    config = _load_config(config_file)
    store = JsonScheduleStore(config.store_path, timezone=config.timezone)
    service = AvailabilityService(
        store=store,
        timezone=config.timezone,
        booking_cutoff_hours=config.booking_cutoff_hours,
    )
    return config, service


@app.command(name="next")
def next_date(
    location: LocationFilter = None,
    config_file: ConfigOption = None,
):
    """
    Show today's remaining schedules.
    """
    try:
        config, service = _availability(config_file)
        location_id = config.resolve_location(location) if location else None
        schedules = asyncio.run(service.next_date(location_id))
        _print_schedules("Today's schedules", schedules, config)
        console.print()

    except (FileNotFoundError, ScheduleError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def upcoming(
    location: LocationFilter = None,
    config_file: ConfigOption = None,
    bookable: Annotated[bool, typer.Option("--bookable", help="Only schedules patients can still book.")] = False,
):
    """
    Show all schedules that have not ended yet.
    """
    try:
        config, service = _availability(config_file)
        location_id = config.resolve_location(location) if location else None

        if bookable:
            schedules = asyncio.run(service.bookable(location_id))
            title = "Bookable schedules"
        else:
            schedules = asyncio.run(service.upcoming(location_id))
            title = "Upcoming schedules"

        _print_schedules(title, schedules, config)
        console.print()

    except (FileNotFoundError, ScheduleError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def list_locations(
    config_file: ConfigOption = None,
):
    """
    List all configured locations.
    """
    try:
        config = _load_config(config_file)

        if not config.locations:
            console.print("[yellow]No locations defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured locations",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Id", style="bold yellow")
        table.add_column("Name")
        table.add_column("Address", style="dim")

        for location in config.locations:
            table.add_row(
                location.id,
                location.name,
                ", ".join(part for part in (location.address, location.city) if part),
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]doctorschedule[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
