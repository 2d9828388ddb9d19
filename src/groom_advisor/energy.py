from __future__ import annotations

import math
from collections import Counter
from typing import Iterable

from .benchmarks import ASSISTANT_MODE, DOG_SIZE_ENERGY, pace_bands
from .models import Appointment, CapacityNote, DogsBySize, SizeTier

LARGE_TIERS = frozenset({SizeTier.LARGE, SizeTier.GIANT})


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like the dashboard does (halves go up, not to even)."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def round1(value: float) -> float:
    return round_half_up(value, 1)


def size_of(weight_lbs: float | None) -> SizeTier:
    """Classify an animal by weight; unknown or invalid weight counts as medium."""
    if weight_lbs is None or not math.isfinite(weight_lbs) or weight_lbs <= 0:
        return SizeTier.MEDIUM
    for tier, band in DOG_SIZE_ENERGY.items():
        if weight_lbs <= band.max_weight:
            return tier
    return SizeTier.GIANT


def energy_cost_of(
    weight_lbs: float | None,
    has_assistant: bool = False,
    size: SizeTier | None = None,
) -> float:
    tier = size if size is not None else size_of(weight_lbs)
    base = DOG_SIZE_ENERGY[tier].energy_cost
    if has_assistant:
        return round1(base * ASSISTANT_MODE.energy_cost_multiplier)
    return float(base)


def aggregate_energy(appointments: Iterable[Appointment], has_assistant: bool = False) -> float:
    # Sum in full precision, round once.
    total = sum(energy_cost_of(apt.weight_lbs, has_assistant) for apt in appointments)
    return round1(total)


def count_by_size(appointments: Iterable[Appointment]) -> DogsBySize:
    tally = Counter(size_of(apt.weight_lbs) for apt in appointments)
    return DogsBySize(
        small=tally[SizeTier.SMALL],
        medium=tally[SizeTier.MEDIUM],
        large=tally[SizeTier.LARGE],
        giant=tally[SizeTier.GIANT],
    )


def count_large_or_giant(appointments: Iterable[Appointment]) -> int:
    return sum(1 for apt in appointments if size_of(apt.weight_lbs) in LARGE_TIERS)


def adjusted_service_minutes(base_minutes: int, has_assistant: bool) -> int:
    """Service time shrinks when a bather shares the work."""
    if has_assistant:
        return int(round_half_up(base_minutes * ASSISTANT_MODE.service_time_multiplier))
    return base_minutes


def buffer_minutes(has_assistant: bool) -> int:
    """Travel and setup time to leave between appointments."""
    if has_assistant:
        return ASSISTANT_MODE.buffer_minutes_with_assistant
    return ASSISTANT_MODE.buffer_minutes_solo


def additional_capacity(current_appointments: int, has_assistant: bool) -> CapacityNote:
    if not has_assistant:
        return CapacityNote(can_add_more=False, additional_slots=0, message="")

    slots = max(0, int(pace_bands(True).typical.max) - current_appointments)
    if slots > 0:
        plural = "s" if slots > 1 else ""
        return CapacityNote(
            can_add_more=True,
            additional_slots=slots,
            message=f"With your assistant, you have capacity for {slots} more appointment{plural} today",
        )
    return CapacityNote(can_add_more=False, additional_slots=0, message="At capacity for team day")
