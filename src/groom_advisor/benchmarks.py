"""Industry benchmarks for mobile pet groomers.

Reference tables shared by the energy model, break advisor, performance
narrator and insight comparator. Tables are read-only mappings; nothing here
is mutated at runtime.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .models import BreakTrigger, EnergyBand, HeadlineKey, PaceBand, RouteRating, SizeTier, WeeklyHeadlineKey


@dataclass(frozen=True)
class SizeBand:
    max_weight: float
    energy_cost: float
    label: str


@dataclass(frozen=True)
class TypicalRange:
    min: float
    max: float


@dataclass(frozen=True)
class PaceBands:
    light: int
    typical: TypicalRange
    busy: int
    max: int


@dataclass(frozen=True)
class EnergyBands:
    light: float
    typical: TypicalRange
    heavy: float
    max: float


@dataclass(frozen=True)
class AssistantMode:
    service_time_multiplier: float
    energy_cost_multiplier: float
    extra_daily_capacity: int
    buffer_minutes_solo: int
    buffer_minutes_with_assistant: int


@dataclass(frozen=True)
class BreakRules:
    after_dogs: int
    after_large_dog: bool
    after_hours: int
    after_energy_load: float
    gap_minutes_for_lunch: int
    lunch_duration_minutes: int
    short_break_minutes: int
    hydration_minutes: int
    min_available_minutes: int
    recovery_buffer_minutes: int


@dataclass(frozen=True)
class TextPair:
    headline: str
    subtext: str


@dataclass(frozen=True)
class RouteBand:
    max_minutes: float
    label: str


@dataclass(frozen=True)
class LargeDogLimits:
    typical: int
    max: int


@dataclass(frozen=True)
class RevenueBands:
    typical: TypicalRange
    strong: float
    exceptional: float


@dataclass(frozen=True)
class FinishTimeBands:
    # Hours on a 24h clock.
    early: int
    typical: int
    late: int
    overtime: int


# Upper weight bound (lbs) and energy multiplier per size tier.
DOG_SIZE_ENERGY: Mapping[SizeTier, SizeBand] = MappingProxyType(
    {
        SizeTier.SMALL: SizeBand(max_weight=20, energy_cost=1, label="Small"),
        SizeTier.MEDIUM: SizeBand(max_weight=50, energy_cost=1.5, label="Medium"),
        SizeTier.LARGE: SizeBand(max_weight=80, energy_cost=2, label="Large"),
        SizeTier.GIANT: SizeBand(max_weight=math.inf, energy_cost=3, label="Giant"),
    }
)

# A bather handles bathing/drying while the groomer preps the next dog.
ASSISTANT_MODE = AssistantMode(
    service_time_multiplier=0.75,
    energy_cost_multiplier=0.8,
    extra_daily_capacity=3,
    buffer_minutes_solo=15,
    buffer_minutes_with_assistant=12,
)

DOGS_PER_DAY_SOLO = PaceBands(light=3, typical=TypicalRange(4, 6), busy=7, max=8)
DOGS_PER_DAY_ASSISTED = PaceBands(light=5, typical=TypicalRange(6, 9), busy=10, max=12)

ENERGY_PER_DAY_SOLO = EnergyBands(light=3, typical=TypicalRange(4, 7), heavy=8, max=10)
ENERGY_PER_DAY_ASSISTED = EnergyBands(light=5, typical=TypicalRange(6, 10), heavy=12, max=15)

# Large or giant dogs per day; most groomers stop at two, three is pushing it.
LARGE_DOGS = LargeDogLimits(typical=2, max=3)

# Percent of booked appointments cancelled or missed; industry sits at 10-15%.
CANCELLATION_RATE: Mapping[str, float] = MappingProxyType(
    {
        "excellent": 5,
        "good": 12,
    }
)

DRIVE_MINUTES: Mapping[str, int] = MappingProxyType(
    {
        "excellent": 15,
        "good": 20,
        "acceptable": 30,
        "poor": 45,
    }
)

REVENUE_PER_DAY = RevenueBands(typical=TypicalRange(400, 600), strong=650, exceptional=800)

FINISH_TIME = FinishTimeBands(early=16, typical=17, late=18, overtime=19)

BREAKS = BreakRules(
    after_dogs=3,
    after_large_dog=True,
    after_hours=4,
    after_energy_load=5,
    gap_minutes_for_lunch=90,
    lunch_duration_minutes=30,
    short_break_minutes=15,
    hydration_minutes=10,
    min_available_minutes=20,
    recovery_buffer_minutes=5,
)

PERFORMANCE_HEADLINES: Mapping[HeadlineKey, TextPair] = MappingProxyType(
    {
        HeadlineKey.GREAT_DAY: TextPair(
            "Great Day!",
            "You worked a healthy pace and stayed in control of your schedule.",
        ),
        HeadlineKey.CALM_DAY: TextPair("Calm Day", "Light schedule - time for yourself."),
        HeadlineKey.STRONG_FLOW: TextPair("Strong Flow!", "Busy day handled well."),
        HeadlineKey.EXCELLENT_RHYTHM: TextPair("Excellent Rhythm", "Done early - you earned it."),
        HeadlineKey.STEADY_PROGRESS: TextPair(
            "Steady Progress",
            "Longer routes today, but you managed well.",
        ),
        HeadlineKey.SMOOTH_FINISH: TextPair(
            "Smooth Finish",
            "Every appointment completed successfully.",
        ),
        HeadlineKey.GETTING_STARTED: TextPair("Day Ahead", "Your schedule is ready and waiting."),
        HeadlineKey.HEAVY_LIFTING: TextPair(
            "Heavy Lifting Today",
            "Big dogs take extra energy - well done.",
        ),
        HeadlineKey.GOOD_MIX: TextPair("Good Mix", "Nice balance of sizes today."),
        HeadlineKey.ALL_SMALL: TextPair("Light & Quick", "Small dogs all day - efficient schedule."),
        HeadlineKey.TEAM_DAY: TextPair("Strong Team Day!", "You and your bather handled it well."),
        HeadlineKey.TEAM_FLOW: TextPair("Great Team Flow", "Your assistant made the difference today."),
    }
)

WEEKLY_HEADLINES: Mapping[WeeklyHeadlineKey, TextPair] = MappingProxyType(
    {
        WeeklyHeadlineKey.STRONG_WEEK: TextPair("Strong Week!", "You maintained a calm, profitable rhythm."),
        WeeklyHeadlineKey.STEADY_WEEK: TextPair("Steady Week", "Consistent and controlled."),
        WeeklyHeadlineKey.BALANCED_WEEK: TextPair("Balanced Week", "Good pace with time for yourself."),
        WeeklyHeadlineKey.LIGHT_WEEK: TextPair("Light Week", "Rest is productive too."),
    }
)

# Average dogs/day (and revenue/day for a strong week) a week must reach.
WEEKLY_THRESHOLDS = MappingProxyType(
    {
        "strong_dogs": 5,
        "strong_revenue": 500,
        "steady_dogs": 4,
        "balanced_dogs": 2,
    }
)

# Soft comparison text: context, never shame.
DOGS_PER_DAY_COMPARISONS: Mapping[bool, Mapping[PaceBand, str]] = MappingProxyType(
    {
        False: MappingProxyType(
            {
                PaceBand.IN_ZONE: "Most solo groomers handle 4-6 dogs/day. You're right in the strong zone.",
                PaceBand.ABOVE_AVG: "You're working above the typical pace today.",
                PaceBand.LIGHT: "A lighter day - nothing wrong with that.",
            }
        ),
        True: MappingProxyType(
            {
                PaceBand.IN_ZONE: "With a bather, 6-9 dogs/day is typical. You're right on track.",
                PaceBand.ABOVE_AVG: "Great teamwork - above typical pace.",
                PaceBand.LIGHT: "Lighter team day - still productive.",
            }
        ),
    }
)

ENERGY_LOAD_COMPARISONS: Mapping[EnergyBand, str] = MappingProxyType(
    {
        EnergyBand.BALANCED: "Good mix of sizes - energy well distributed.",
        EnergyBand.HEAVY: "Heavy lifting today - big dogs take extra energy.",
        EnergyBand.LIGHT: "Lighter energy load - mostly smaller dogs.",
    }
)

LARGE_DOGS_COMPARISONS: Mapping[str, str] = MappingProxyType(
    {
        "typical": "Most groomers limit large dogs to 2/day. You're in the safe zone.",
        "high": "Multiple large dogs - that's a lot of lifting. Take care of yourself.",
    }
)

DRIVE_TIME_COMPARISONS: Mapping[str, str] = MappingProxyType(
    {
        "excellent": "Your routing is tight - minimal windshield time.",
        "good": "Drive times are right where they should be.",
        "longer": "Longer drives today, but you're managing well.",
    }
)

WEEKLY_COMPARISONS: Mapping[str, str] = MappingProxyType(
    {
        "strong": "Strong week! You maintained a calm, profitable rhythm.",
        "steady": "Steady week - consistent and controlled.",
        "light": "Lighter week - rest is productive too.",
    }
)

ROUTE_EFFICIENCY: Mapping[RouteRating, RouteBand] = MappingProxyType(
    {
        RouteRating.EXCELLENT: RouteBand(max_minutes=18, label="Excellent"),
        RouteRating.GOOD: RouteBand(max_minutes=25, label="Good"),
        RouteRating.OKAY: RouteBand(max_minutes=35, label="Okay"),
        RouteRating.NEEDS_WORK: RouteBand(max_minutes=math.inf, label="Needs work"),
    }
)

BREAK_MESSAGES: Mapping[BreakTrigger, TextPair] = MappingProxyType(
    {
        BreakTrigger.AFTER_DOGS: TextPair(
            "Good stopping point - stretch your legs?",
            "You've completed {count} dogs.",
        ),
        BreakTrigger.AFTER_LARGE_DOG: TextPair(
            "Big dog done - take 5?",
            "Large dogs take extra energy.",
        ),
        BreakTrigger.LONG_GAP: TextPair(
            "You've got time - real lunch today?",
            "Next appointment in {minutes} minutes.",
        ),
        BreakTrigger.CONTINUOUS: TextPair(
            "You've been going strong - hydration check?",
            "Over {hours} hours without a break.",
        ),
        BreakTrigger.HEAVY_MORNING: TextPair(
            "Heavy morning - rest before the next one?",
            "Energy load is high.",
        ),
    }
)

WELLNESS_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        "tookBreaks": "You took breaks today - that's protecting your career longevity.",
        "oneBreak": "One break today - try for two tomorrow to keep your energy up.",
        "noBreaks": "No breaks today - tomorrow, try to fit one in? Rest isn't lazy, it's sustainable.",
    }
)


def pace_bands(has_assistant: bool) -> PaceBands:
    return DOGS_PER_DAY_ASSISTED if has_assistant else DOGS_PER_DAY_SOLO


def energy_bands(has_assistant: bool) -> EnergyBands:
    return ENERGY_PER_DAY_ASSISTED if has_assistant else ENERGY_PER_DAY_SOLO
