from __future__ import annotations

from typing import Iterable

from .benchmarks import CANCELLATION_RATE, DRIVE_MINUTES, LARGE_DOGS, energy_bands, pace_bands
from .energy import count_large_or_giant, energy_cost_of, round1, round_half_up
from .models import Appointment, IndustryInsights, InsightLine, PaceBand, RollingAverages
from .performance import pace_band

_PACE_LABELS = {
    PaceBand.IN_ZONE: "Right in the strong zone",
    PaceBand.ABOVE_AVG: "Above typical pace",
    PaceBand.LIGHT: "Lighter than typical",
    PaceBand.HEAVY: "Heavy workload",
}


def _mode_label(has_assistant: bool) -> str:
    return "with assistant" if has_assistant else "solo"


def _dogs_per_day_line(avg_dogs_per_day: float, has_assistant: bool) -> InsightLine:
    typical = pace_bands(has_assistant).typical
    pace = pace_band(round_half_up(avg_dogs_per_day), has_assistant)
    return InsightLine(
        industry_band=f"{typical.min:g}-{typical.max:g} {_mode_label(has_assistant)}",
        user_value=round1(avg_dogs_per_day),
        comparison_label=_PACE_LABELS[pace],
    )


def _energy_line(avg_energy_per_day: float, has_assistant: bool) -> InsightLine:
    typical = energy_bands(has_assistant).typical
    label = "Balanced workload" if avg_energy_per_day <= typical.max else "Heavy workload"
    return InsightLine(
        industry_band=f"{typical.min:g}-{typical.max:g} energy units/day ({_mode_label(has_assistant)})",
        user_value=round1(avg_energy_per_day),
        comparison_label=label,
    )


def _drive_line(avg_drive_minutes: float | None) -> InsightLine:
    if avg_drive_minutes is None:
        label = "No route data"
    elif avg_drive_minutes <= DRIVE_MINUTES["excellent"]:
        label = "Excellent - minimal windshield time"
    elif avg_drive_minutes <= DRIVE_MINUTES["good"]:
        label = "Good - on target"
    elif avg_drive_minutes <= DRIVE_MINUTES["acceptable"]:
        label = "Acceptable - room to optimize"
    else:
        label = "Long drives - consider tighter routing"
    return InsightLine(
        industry_band=f"<{DRIVE_MINUTES['good']} min between stops",
        user_value=round1(avg_drive_minutes) if avg_drive_minutes is not None else None,
        comparison_label=label,
    )


def _cancellation_line(cancellation_rate: float) -> InsightLine:
    if cancellation_rate <= CANCELLATION_RATE["excellent"]:
        label = "Excellent - lower than typical"
    elif cancellation_rate <= CANCELLATION_RATE["good"]:
        label = "Good - around industry average"
    else:
        label = "Higher than typical"
    return InsightLine(industry_band="10-15%", user_value=round1(cancellation_rate), comparison_label=label)


def _large_dogs_line(avg_large_dogs_per_day: float) -> InsightLine:
    if avg_large_dogs_per_day <= LARGE_DOGS.typical:
        label = "Safe zone - sustainable"
    else:
        label = "High - watch your energy"
    return InsightLine(
        industry_band=f"{LARGE_DOGS.typical}/day max recommended",
        user_value=round1(avg_large_dogs_per_day),
        comparison_label=label,
    )


def industry_insights(
    avg_dogs_per_day: float,
    avg_energy_per_day: float,
    avg_drive_minutes: float | None,
    cancellation_rate: float,
    avg_large_dogs_per_day: float,
    has_assistant: bool = False,
) -> IndustryInsights:
    """Place rolling averages against industry bands, one line per dimension."""
    return IndustryInsights(
        dogs_per_day=_dogs_per_day_line(avg_dogs_per_day, has_assistant),
        energy_load=_energy_line(avg_energy_per_day, has_assistant),
        drive_time=_drive_line(avg_drive_minutes),
        cancellation_rate=_cancellation_line(cancellation_rate),
        large_dogs=_large_dogs_line(avg_large_dogs_per_day),
    )


def rolling_averages(
    completed: Iterable[Appointment],
    cancelled_count: int,
    total_drive_minutes: float | None = None,
) -> RollingAverages:
    """Per-day averages over a window of completed work (e.g. the last 30 days)."""
    done = [apt for apt in completed if apt.is_completed]
    dogs = len(done)
    days_worked = len({apt.start_at.date() for apt in done}) or 1

    total_energy = sum(energy_cost_of(apt.weight_lbs) for apt in done)
    avg_drive: float | None = None
    if total_drive_minutes is not None and dogs > days_worked:
        avg_drive = total_drive_minutes / (dogs - days_worked)

    booked = dogs + cancelled_count
    return RollingAverages(
        avg_dogs_per_day=dogs / days_worked,
        avg_energy_per_day=total_energy / days_worked,
        avg_drive_minutes=avg_drive,
        cancellation_rate=(cancelled_count / booked * 100) if booked else 0.0,
        avg_large_dogs_per_day=count_large_or_giant(done) / days_worked,
    )


def insights_from_history(
    completed: Iterable[Appointment],
    cancelled_count: int,
    total_drive_minutes: float | None = None,
    has_assistant: bool = False,
) -> IndustryInsights:
    averages = rolling_averages(completed, cancelled_count, total_drive_minutes)
    return industry_insights(
        averages.avg_dogs_per_day,
        averages.avg_energy_per_day,
        averages.avg_drive_minutes,
        averages.cancellation_rate,
        averages.avg_large_dogs_per_day,
        has_assistant,
    )
