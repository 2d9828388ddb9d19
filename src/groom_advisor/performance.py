"""Day and week performance summaries with supportive headlines.

The headline and the benchmark sentence are picked independently, so a day can
read "Heavy Lifting Today" while the pace sentence still says it was in the
typical zone.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from .benchmarks import (
    DOGS_PER_DAY_COMPARISONS,
    DRIVE_MINUTES,
    DRIVE_TIME_COMPARISONS,
    ENERGY_LOAD_COMPARISONS,
    FINISH_TIME,
    LARGE_DOGS,
    LARGE_DOGS_COMPARISONS,
    PERFORMANCE_HEADLINES,
    REVENUE_PER_DAY,
    ROUTE_EFFICIENCY,
    WEEKLY_COMPARISONS,
    WEEKLY_HEADLINES,
    WEEKLY_THRESHOLDS,
    energy_bands,
    pace_bands,
)
from .energy import aggregate_energy, count_by_size, count_large_or_giant, round1, round_half_up
from .models import (
    Appointment,
    AppointmentStatus,
    DayStatus,
    EnergyBand,
    FinishBand,
    HeadlineKey,
    PaceBand,
    PerformanceHeadline,
    RevenueBand,
    RouteEfficiency,
    RouteRating,
    TodayPerformance,
    WeeklyHeadlineKey,
    WeeklyPerformance,
    WorkloadSnapshot,
)

logger = logging.getLogger(__name__)


def pace_band(count: float, has_assistant: bool) -> PaceBand:
    bands = pace_bands(has_assistant)
    if count < bands.typical.min:
        return PaceBand.LIGHT
    if count <= bands.typical.max:
        return PaceBand.IN_ZONE
    if count <= bands.busy:
        return PaceBand.ABOVE_AVG
    return PaceBand.HEAVY


def energy_band(energy_load: float, has_assistant: bool) -> EnergyBand:
    bands = energy_bands(has_assistant)
    if energy_load < bands.light:
        return EnergyBand.LIGHT
    if bands.typical.min <= energy_load <= bands.typical.max:
        return EnergyBand.BALANCED
    return EnergyBand.HEAVY


def energy_comparison_text(energy_load: float, has_assistant: bool) -> str:
    return ENERGY_LOAD_COMPARISONS[energy_band(energy_load, has_assistant)]


def select_headline(
    dogs_completed: int,
    dogs_scheduled: int,
    energy_load: float,
    large_or_giant_count: int,
    avg_drive_minutes: float | None,
    has_assistant: bool,
    day_status: DayStatus,
) -> HeadlineKey:
    """Pick the one headline that best describes the day; first match wins."""
    if day_status is DayStatus.NOT_STARTED:
        return HeadlineKey.GETTING_STARTED
    if day_status is DayStatus.COMPLETED or (dogs_scheduled > 0 and dogs_completed == dogs_scheduled):
        return HeadlineKey.SMOOTH_FINISH

    if has_assistant and dogs_completed >= 6:
        return HeadlineKey.TEAM_DAY
    if has_assistant and dogs_completed >= 4:
        return HeadlineKey.TEAM_FLOW

    if large_or_giant_count >= 2:
        return HeadlineKey.HEAVY_LIFTING
    if large_or_giant_count == 0 and dogs_completed >= 4:
        return HeadlineKey.ALL_SMALL

    pace = pace_band(dogs_completed, has_assistant)
    if pace is PaceBand.LIGHT:
        return HeadlineKey.CALM_DAY
    if pace in (PaceBand.ABOVE_AVG, PaceBand.HEAVY):
        return HeadlineKey.STRONG_FLOW

    if avg_drive_minutes is not None and avg_drive_minutes > DRIVE_MINUTES["good"]:
        return HeadlineKey.STEADY_PROGRESS
    if 1 <= large_or_giant_count <= 2:
        return HeadlineKey.GOOD_MIX
    return HeadlineKey.GREAT_DAY


def soft_comparison_text(count: int, has_assistant: bool) -> str:
    pace = pace_band(count, has_assistant)
    if pace is PaceBand.HEAVY:
        pace = PaceBand.ABOVE_AVG
    return DOGS_PER_DAY_COMPARISONS[has_assistant][pace]


def large_dogs_comparison_text(large_or_giant_count: int) -> str:
    key = "typical" if large_or_giant_count <= LARGE_DOGS.typical else "high"
    return LARGE_DOGS_COMPARISONS[key]


def drive_time_comparison_text(avg_drive_minutes: float | None) -> str | None:
    if avg_drive_minutes is None:
        return None
    if avg_drive_minutes <= DRIVE_MINUTES["excellent"]:
        return DRIVE_TIME_COMPARISONS["excellent"]
    if avg_drive_minutes <= DRIVE_MINUTES["good"]:
        return DRIVE_TIME_COMPARISONS["good"]
    return DRIVE_TIME_COMPARISONS["longer"]


_WEEKLY_COMPARISON_KEYS = {
    WeeklyHeadlineKey.STRONG_WEEK: "strong",
    WeeklyHeadlineKey.STEADY_WEEK: "steady",
    WeeklyHeadlineKey.BALANCED_WEEK: "steady",
    WeeklyHeadlineKey.LIGHT_WEEK: "light",
}


def weekly_comparison_text(key: WeeklyHeadlineKey) -> str:
    return WEEKLY_COMPARISONS[_WEEKLY_COMPARISON_KEYS[key]]


def revenue_band(revenue: float) -> RevenueBand:
    if revenue < REVENUE_PER_DAY.typical.min:
        return RevenueBand.LIGHT
    if revenue < REVENUE_PER_DAY.strong:
        return RevenueBand.TYPICAL
    if revenue < REVENUE_PER_DAY.exceptional:
        return RevenueBand.STRONG
    return RevenueBand.EXCEPTIONAL


def finish_band(finish: datetime) -> FinishBand:
    """Place a finish time against the usual end of a grooming day."""
    hour = finish.hour + finish.minute / 60
    if hour <= FINISH_TIME.early:
        return FinishBand.EARLY
    if hour <= FINISH_TIME.typical:
        return FinishBand.TYPICAL
    if hour < FINISH_TIME.overtime:
        return FinishBand.LATE
    return FinishBand.OVERTIME



def build_headline(
    dogs_completed: int,
    dogs_scheduled: int,
    energy_load: float,
    large_or_giant_count: int,
    avg_drive_minutes: float | None,
    has_assistant: bool,
    day_status: DayStatus,
) -> PerformanceHeadline:
    key = select_headline(
        dogs_completed,
        dogs_scheduled,
        energy_load,
        large_or_giant_count,
        avg_drive_minutes,
        has_assistant,
        day_status,
    )
    text = PERFORMANCE_HEADLINES[key]
    comparison_count = dogs_scheduled if dogs_scheduled > 0 else dogs_completed
    logger.debug("headline %s for %d/%d dogs (%s)", key.value, dogs_completed, dogs_scheduled, day_status.value)
    return PerformanceHeadline(
        headline_key=key,
        headline_text=text.headline,
        subtext=text.subtext,
        soft_comparison_text=soft_comparison_text(comparison_count, has_assistant),
    )


def day_status(appointments: Sequence[Appointment], dogs_completed: int, now: datetime) -> DayStatus:
    scheduled = len(appointments)
    if dogs_completed > 0:
        return DayStatus.IN_PROGRESS if dogs_completed < scheduled else DayStatus.COMPLETED
    if scheduled > 0:
        first_start = min(apt.start_at for apt in appointments)
        if first_start <= now:
            return DayStatus.IN_PROGRESS
    return DayStatus.NOT_STARTED


def calculate_revenue(
    appointments: Iterable[Appointment],
    statuses: Iterable[AppointmentStatus] | None = None,
) -> float:
    wanted = set(statuses) if statuses is not None else None
    return sum(apt.price or 0.0 for apt in appointments if wanted is None or apt.status in wanted)


def estimate_finish_time(appointments: Iterable[Appointment]) -> datetime | None:
    last = max(appointments, key=lambda apt: apt.start_at, default=None)
    if last is None:
        return None
    return last.start_at + timedelta(minutes=last.service_minutes)


def format_clock(moment: datetime) -> str:
    """12-hour wall clock, e.g. ``5:30 PM``."""
    period = "PM" if moment.hour >= 12 else "AM"
    hour12 = moment.hour % 12 or 12
    return f"{hour12}:{moment.minute:02d} {period}"


def average_drive_minutes(total_drive_minutes: float | None, stops: int) -> int | None:
    if not total_drive_minutes or stops <= 1:
        return None
    return int(round_half_up(total_drive_minutes / (stops - 1)))


def today_performance(
    appointments: Iterable[Appointment],
    now: datetime,
    has_assistant: bool = False,
    total_drive_minutes: float | None = None,
) -> TodayPerformance:
    day = [apt for apt in appointments if apt.is_active]
    completed = [apt for apt in day if apt.is_completed]
    scheduled = len(day)

    energy_load = aggregate_energy(day, has_assistant)
    large_count = count_large_or_giant(day)
    avg_drive = average_drive_minutes(total_drive_minutes, scheduled)
    status = day_status(day, len(completed), now)

    workload = WorkloadSnapshot(
        dogs_scheduled=scheduled,
        dogs_completed=len(completed),
        dogs_by_size=count_by_size(day),
        total_energy_load=energy_load,
        large_or_giant_count=large_count,
        revenue=calculate_revenue(completed),
        avg_drive_minutes_between_stops=avg_drive,
        estimated_finish_time=estimate_finish_time(day),
        day_status=status,
    )
    headline = build_headline(
        len(completed),
        scheduled,
        energy_load,
        large_count,
        avg_drive,
        has_assistant,
        status,
    )
    return TodayPerformance(workload=workload, headline=headline, has_assistant=has_assistant)


def _weekly_headline(avg_dogs_per_day: float, avg_revenue_per_day: float) -> WeeklyHeadlineKey:
    if (
        avg_dogs_per_day >= WEEKLY_THRESHOLDS["strong_dogs"]
        and avg_revenue_per_day >= WEEKLY_THRESHOLDS["strong_revenue"]
    ):
        return WeeklyHeadlineKey.STRONG_WEEK
    if avg_dogs_per_day >= WEEKLY_THRESHOLDS["steady_dogs"]:
        return WeeklyHeadlineKey.STEADY_WEEK
    if avg_dogs_per_day >= WEEKLY_THRESHOLDS["balanced_dogs"]:
        return WeeklyHeadlineKey.BALANCED_WEEK
    return WeeklyHeadlineKey.LIGHT_WEEK


def weekly_performance(
    appointments: Iterable[Appointment],
    total_drive_minutes: float | None = None,
) -> WeeklyPerformance:
    week = [apt for apt in appointments if apt.is_completed]
    dogs = len(week)
    days_worked = len({apt.start_at.date() for apt in week})

    total_energy = aggregate_energy(week)
    revenue = calculate_revenue(week)
    avg_dogs = round1(dogs / days_worked) if days_worked else 0.0
    avg_energy = round1(total_energy / days_worked) if days_worked else 0.0
    avg_revenue = int(round_half_up(revenue / days_worked)) if days_worked else 0

    # One starting point per day carries no drive before it.
    avg_drive: int | None = None
    stops = dogs - days_worked
    if total_drive_minutes and stops > 0:
        avg_drive = int(round_half_up(total_drive_minutes / stops))

    key = _weekly_headline(avg_dogs, avg_revenue)
    text = WEEKLY_HEADLINES[key]
    return WeeklyPerformance(
        headline_key=key,
        headline_text=text.headline,
        subtext=text.subtext,
        dogs_groomed=dogs,
        dogs_by_size=count_by_size(week),
        total_energy_load=total_energy,
        revenue=revenue,
        days_worked=days_worked,
        avg_dogs_per_day=avg_dogs,
        avg_energy_per_day=avg_energy,
        avg_drive_minutes_per_stop=avg_drive,
        avg_revenue_per_day=avg_revenue,
    )


def route_rating(avg_minutes_between_stops: float) -> RouteRating:
    for rating, band in ROUTE_EFFICIENCY.items():
        if avg_minutes_between_stops <= band.max_minutes:
            return rating
    return RouteRating.NEEDS_WORK


def route_efficiency(total_drive_minutes: int, total_stops: int) -> RouteEfficiency:
    avg = int(round_half_up(total_drive_minutes / (total_stops - 1))) if total_stops > 1 else 0
    rating = route_rating(avg)
    return RouteEfficiency(
        rating=ROUTE_EFFICIENCY[rating].label,
        rating_key=rating,
        avg_minutes_between_stops=avg,
        total_drive_minutes=total_drive_minutes,
        total_stops=total_stops,
    )
