from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer

from .breaks import break_stats, break_suggestion_from_appointments, optimal_break_slots, wellness_message
from .energy import additional_capacity, adjusted_service_minutes, buffer_minutes, energy_cost_of, size_of
from .insights import insights_from_history, rolling_averages
from .performance import (
    drive_time_comparison_text,
    energy_comparison_text,
    finish_band,
    format_clock,
    large_dogs_comparison_text,
    revenue_band,
    route_efficiency,
    today_performance,
    weekly_comparison_text,
    weekly_performance,
)
from .schedule import Schedule, ScheduleError, load_schedule

app = typer.Typer(help="Workload and break advisories for mobile groomers")

logger = logging.getLogger(__name__)

SCHEDULE_OPTION = typer.Option(
    ...,
    "--schedule",
    envvar="GROOM_SCHEDULE_PATH",
    help="JSON file with today's (or the period's) appointments",
)
ASSISTANT_OPTION = typer.Option(
    None,
    "--assistant/--solo",
    envvar="GROOM_HAS_ASSISTANT",
    help="Working with a bather; defaults to the schedule's hasAssistant flag",
)
NOW_OPTION = typer.Option(None, help="Evaluate at this ISO timestamp instead of the current time")


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _echo(payload: dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, default=_json_default, ensure_ascii=False))


def _load(path: Path) -> Schedule:
    if not path.exists():
        raise SystemExit(f"Schedule file not found: {path}")
    try:
        return load_schedule(path)
    except ScheduleError as exc:
        raise SystemExit(f"Invalid schedule: {exc}") from exc


def _resolve_now(now: Optional[str], schedule: Schedule) -> datetime:
    tz = schedule.zone
    if not now:
        return datetime.now(tz)
    try:
        moment = datetime.fromisoformat(now.replace("Z", "+00:00"))
    except ValueError as exc:
        raise SystemExit(f"Invalid --now timestamp: {now}") from exc
    # Naive and aware timestamps cannot be compared; follow the schedule.
    if tz is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    if tz is None and moment.tzinfo is not None:
        return moment.replace(tzinfo=None)
    return moment


def _has_assistant(flag: Optional[bool], schedule: Schedule) -> bool:
    if flag is not None:
        return flag
    return bool(schedule.has_assistant)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", envvar="GROOM_LOG_LEVEL", help="Logging level"),
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def size(
    weight_lbs: Optional[float] = typer.Option(None, help="Animal weight in lbs; omit when unknown"),
) -> None:
    """Classify an animal by weight and show its energy cost."""
    tier = size_of(weight_lbs)
    _echo(
        {
            "weight_lbs": weight_lbs,
            "size": tier,
            "energy_cost": energy_cost_of(weight_lbs, size=tier),
            "energy_cost_with_assistant": energy_cost_of(weight_lbs, has_assistant=True, size=tier),
        }
    )


@app.command("break")
def suggest_break(
    schedule: Path = SCHEDULE_OPTION,
    now: Optional[str] = NOW_OPTION,
) -> None:
    """Decide whether a break should be suggested right now."""
    day = _load(schedule)
    moment = _resolve_now(now, day)
    stats = break_stats(day.breaks)
    suggestion = break_suggestion_from_appointments(day.appointments, stats.last_break_time, moment)
    logger.info("break check at %s: %s", moment.isoformat(), suggestion.trigger.value)
    _echo({"suggestion": asdict(suggestion), "stats": asdict(stats)})


@app.command()
def today(
    schedule: Path = SCHEDULE_OPTION,
    now: Optional[str] = NOW_OPTION,
    assistant: Optional[bool] = ASSISTANT_OPTION,
    drive_minutes: Optional[float] = typer.Option(None, help="Total drive minutes for today's route"),
) -> None:
    """Summarize today's workload with a headline."""
    day = _load(schedule)
    moment = _resolve_now(now, day)
    has_assistant = _has_assistant(assistant, day)
    total_drive = drive_minutes if drive_minutes is not None else day.total_drive_minutes

    result = today_performance(day.appointments, moment, has_assistant, total_drive)
    workload = result.workload
    stats = break_stats(day.breaks)
    payload: dict[str, Any] = asdict(result)
    payload["estimated_finish"] = (
        format_clock(workload.estimated_finish_time) if workload.estimated_finish_time else None
    )
    payload["energy_comparison"] = energy_comparison_text(workload.total_energy_load, has_assistant)
    payload["large_dogs_comparison"] = large_dogs_comparison_text(workload.large_or_giant_count)
    payload["drive_time_comparison"] = drive_time_comparison_text(workload.avg_drive_minutes_between_stops)
    payload["revenue_band"] = revenue_band(workload.revenue)
    payload["finish_band"] = (
        finish_band(workload.estimated_finish_time) if workload.estimated_finish_time else None
    )
    remaining = [apt for apt in day.appointments if apt.is_active and not apt.is_completed]
    payload["timing"] = {
        "buffer_minutes": buffer_minutes(has_assistant),
        "remaining_service_minutes": sum(
            adjusted_service_minutes(apt.service_minutes, has_assistant) for apt in remaining
        ),
    }
    payload["capacity"] = asdict(additional_capacity(workload.dogs_scheduled, has_assistant))
    payload["break_stats"] = asdict(stats)
    payload["wellness"] = wellness_message(stats.breaks_taken_today)
    payload["route_efficiency"] = (
        asdict(route_efficiency(int(total_drive), workload.dogs_scheduled))
        if total_drive and workload.dogs_scheduled > 1
        else None
    )
    _echo(payload)


@app.command()
def week(
    schedule: Path = SCHEDULE_OPTION,
    drive_minutes: Optional[float] = typer.Option(None, help="Total drive minutes across the week's routes"),
) -> None:
    """Summarize a week of completed appointments."""
    period = _load(schedule)
    total_drive = drive_minutes if drive_minutes is not None else period.total_drive_minutes
    result = weekly_performance(period.appointments, total_drive)
    payload: dict[str, Any] = asdict(result)
    payload["comparison"] = weekly_comparison_text(result.headline_key)
    payload["revenue_band"] = revenue_band(result.avg_revenue_per_day)
    _echo(payload)


@app.command()
def insights(
    schedule: Path = SCHEDULE_OPTION,
    assistant: Optional[bool] = ASSISTANT_OPTION,
) -> None:
    """Compare a period's averages against industry bands."""
    period = _load(schedule)
    has_assistant = _has_assistant(assistant, period)
    completed = [apt for apt in period.appointments if apt.is_completed]
    # Inactive appointments listed in the file count on top of cancelledCount.
    cancelled = period.cancelled_count + sum(1 for apt in period.appointments if not apt.is_active)
    averages = rolling_averages(completed, cancelled, period.total_drive_minutes)
    result = insights_from_history(completed, cancelled, period.total_drive_minutes, has_assistant)
    _echo({"averages": asdict(averages), "insights": asdict(result)})


@app.command()
def slots(schedule: Path = SCHEDULE_OPTION) -> None:
    """List open gaps in the day that fit a break."""
    day = _load(schedule)
    _echo({"slots": [asdict(slot) for slot in optimal_break_slots(day.appointments)]})


if __name__ == "__main__":
    app()
