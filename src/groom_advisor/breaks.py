"""Break suggestions from the day's schedule.

Each call looks at one snapshot of today's appointments and the moment it is
evaluated at. Triggers are checked in a fixed order and the first one that
applies decides the kind of break:

1. a long open gap before the next appointment (a real lunch),
2. the last finished dog was large or giant,
3. the completed workload already carries a high energy load,
4. a round number of dogs has been completed,
5. hours have passed since the last break (hydration check).

Nothing is suggested when the next appointment is too close to rest safely.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from .benchmarks import BREAK_MESSAGES, BREAKS, WELLNESS_MESSAGES
from .energy import LARGE_TIERS, aggregate_energy, size_of
from .models import (
    NO_BREAK,
    Appointment,
    AppointmentStatus,
    BreakRecord,
    BreakSlot,
    BreakStats,
    BreakSuggestion,
    BreakTrigger,
    BreakType,
)

logger = logging.getLogger(__name__)

_DONE_STATUSES = frozenset(
    {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW}
)


def _suggest(
    trigger: BreakTrigger,
    break_type: BreakType,
    available_minutes: int,
    duration_minutes: int,
    **placeholders: int,
) -> BreakSuggestion:
    text = BREAK_MESSAGES[trigger]
    subtext = text.subtext
    for name, value in placeholders.items():
        subtext = subtext.replace("{" + name + "}", str(value))
    logger.debug(
        "break suggested trigger=%s type=%s available=%d duration=%d",
        trigger.value,
        break_type.value,
        available_minutes,
        duration_minutes,
    )
    return BreakSuggestion(
        should_suggest=True,
        trigger=trigger,
        break_type=break_type,
        available_minutes=available_minutes,
        suggested_duration_minutes=duration_minutes,
        message=text.headline,
        subtext=subtext,
    )


def _short_break_minutes(available_minutes: int) -> int:
    return min(BREAKS.short_break_minutes, available_minutes - BREAKS.recovery_buffer_minutes)


def calculate_break_suggestion(
    completed_today: int,
    last_break_time: datetime | None,
    next_appointment_start: datetime | None,
    energy_load_so_far: float,
    last_was_large: bool,
    now: datetime,
) -> BreakSuggestion:
    if next_appointment_start is None:
        return NO_BREAK

    available = math.floor((next_appointment_start - now).total_seconds() / 60)
    if available < BREAKS.min_available_minutes:
        logger.debug("no break: only %d minutes before next appointment", available)
        return NO_BREAK

    if available >= BREAKS.gap_minutes_for_lunch:
        return _suggest(
            BreakTrigger.LONG_GAP,
            BreakType.LUNCH,
            available,
            BREAKS.lunch_duration_minutes,
            minutes=available,
        )

    if BREAKS.after_large_dog and last_was_large:
        return _suggest(
            BreakTrigger.AFTER_LARGE_DOG,
            BreakType.SHORT,
            available,
            _short_break_minutes(available),
        )

    if energy_load_so_far >= BREAKS.after_energy_load:
        return _suggest(
            BreakTrigger.HEAVY_MORNING,
            BreakType.SHORT,
            available,
            _short_break_minutes(available),
        )

    if completed_today >= BREAKS.after_dogs and completed_today % BREAKS.after_dogs == 0:
        return _suggest(
            BreakTrigger.AFTER_DOGS,
            BreakType.SHORT,
            available,
            _short_break_minutes(available),
            count=completed_today,
        )

    if last_break_time is not None:
        since_break = now - last_break_time
        if since_break >= timedelta(hours=BREAKS.after_hours):
            return _suggest(
                BreakTrigger.CONTINUOUS,
                BreakType.HYDRATION,
                available,
                min(BREAKS.hydration_minutes, available - BREAKS.recovery_buffer_minutes),
                hours=int(since_break.total_seconds() // 3600),
            )

    return NO_BREAK


def next_appointment(appointments: Iterable[Appointment], now: datetime) -> Appointment | None:
    upcoming = [apt for apt in appointments if apt.status not in _DONE_STATUSES and apt.start_at > now]
    return min(upcoming, key=lambda apt: apt.start_at, default=None)


def last_completed_appointment(appointments: Iterable[Appointment]) -> Appointment | None:
    completed = [apt for apt in appointments if apt.is_completed]
    return max(completed, key=lambda apt: apt.start_at, default=None)


def count_completed(appointments: Iterable[Appointment]) -> int:
    return sum(1 for apt in appointments if apt.is_completed)


def completed_energy_load(appointments: Iterable[Appointment]) -> float:
    # No assistant discount here: a bather does not lower the rest threshold.
    return aggregate_energy(apt for apt in appointments if apt.is_completed)


def was_last_large(appointments: Iterable[Appointment]) -> bool:
    last = last_completed_appointment(appointments)
    if last is None:
        return False
    return size_of(last.weight_lbs) in LARGE_TIERS


def break_suggestion_from_appointments(
    appointments: Sequence[Appointment],
    last_break_time: datetime | None,
    now: datetime,
) -> BreakSuggestion:
    upcoming = next_appointment(appointments, now)
    return calculate_break_suggestion(
        completed_today=count_completed(appointments),
        last_break_time=last_break_time,
        next_appointment_start=upcoming.start_at if upcoming else None,
        energy_load_so_far=completed_energy_load(appointments),
        last_was_large=was_last_large(appointments),
        now=now,
    )


def break_stats(records: Iterable[BreakRecord]) -> BreakStats:
    records = list(records)
    taken = [rec for rec in records if rec.taken]
    taken_times = [rec.taken_at for rec in taken if rec.taken_at is not None]
    return BreakStats(
        breaks_taken_today=len(taken),
        total_break_minutes=sum(rec.duration_minutes or 0 for rec in taken),
        last_break_time=max(taken_times, default=None),
        scheduled_breaks=sum(1 for rec in records if rec.start_time is not None),
    )


def optimal_break_slots(appointments: Iterable[Appointment]) -> list[BreakSlot]:
    """Find gaps of half an hour or more between consecutive appointments."""
    ordered = sorted((apt for apt in appointments if apt.is_active), key=lambda apt: apt.start_at)
    slots: list[BreakSlot] = []
    for current, following in zip(ordered, ordered[1:]):
        ends_at = current.start_at + timedelta(minutes=current.service_minutes)
        gap = math.floor((following.start_at - ends_at).total_seconds() / 60)
        if gap < 30:
            continue
        if gap >= 60:
            slot_type, duration = BreakType.LUNCH, min(30, gap - 15)
        else:
            slot_type, duration = BreakType.SHORT, min(15, gap - 10)
        slots.append(
            BreakSlot(
                start_at=ends_at + timedelta(minutes=BREAKS.recovery_buffer_minutes),
                duration_minutes=duration,
                break_type=slot_type,
            )
        )
    return slots


def wellness_message(breaks_taken: int) -> str:
    if breaks_taken >= 2:
        return WELLNESS_MESSAGES["tookBreaks"]
    if breaks_taken == 1:
        return WELLNESS_MESSAGES["oneBreak"]
    return WELLNESS_MESSAGES["noBreaks"]
