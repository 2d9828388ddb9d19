from dataclasses import fields
from datetime import datetime

import pytest

from groom_advisor.insights import industry_insights, insights_from_history, rolling_averages
from groom_advisor.models import Appointment, AppointmentStatus, IndustryInsights


def _done(idx: int, weight_lbs: float | None, day: int) -> Appointment:
    return Appointment(
        id=f"d{idx}",
        status=AppointmentStatus.COMPLETED,
        start_at=datetime(2025, 3, day, 9 + idx, 0),
        service_minutes=60,
        weight_lbs=weight_lbs,
    )


def test_solo_averages_in_the_typical_zone() -> None:
    result = industry_insights(5.24, 6.0, 14, 4.0, 1.5, has_assistant=False)

    assert result.dogs_per_day.industry_band == "4-6 solo"
    assert result.dogs_per_day.user_value == 5.2
    assert result.dogs_per_day.comparison_label == "Right in the strong zone"

    assert result.energy_load.industry_band == "4-7 energy units/day (solo)"
    assert result.energy_load.comparison_label == "Balanced workload"

    assert result.drive_time.industry_band == "<20 min between stops"
    assert result.drive_time.user_value == 14.0
    assert result.drive_time.comparison_label == "Excellent - minimal windshield time"

    assert result.cancellation_rate.industry_band == "10-15%"
    assert result.cancellation_rate.comparison_label == "Excellent - lower than typical"

    assert result.large_dogs.industry_band == "2/day max recommended"
    assert result.large_dogs.comparison_label == "Safe zone - sustainable"


def test_assisted_heavy_period() -> None:
    result = industry_insights(10.4, 11.0, 32, 15.0, 2.5, has_assistant=True)
    assert result.dogs_per_day.industry_band == "6-9 with assistant"
    assert result.dogs_per_day.comparison_label == "Above typical pace"
    assert result.energy_load.industry_band == "6-10 energy units/day (with assistant)"
    assert result.energy_load.comparison_label == "Heavy workload"
    assert result.drive_time.comparison_label == "Long drives - consider tighter routing"
    assert result.cancellation_rate.comparison_label == "Higher than typical"
    assert result.large_dogs.comparison_label == "High - watch your energy"


@pytest.mark.parametrize(
    ("avg_dogs", "label"),
    [
        (2.5, "Lighter than typical"),
        (6.4, "Right in the strong zone"),
        (9.0, "Heavy workload"),
    ],
)
def test_dogs_per_day_labels(avg_dogs: float, label: str) -> None:
    assert industry_insights(avg_dogs, 5.0, None, 0.0, 0.0).dogs_per_day.comparison_label == label


@pytest.mark.parametrize(
    ("drive", "label"),
    [
        (None, "No route data"),
        (20, "Good - on target"),
        (30, "Acceptable - room to optimize"),
    ],
)
def test_drive_labels(drive: float | None, label: str) -> None:
    line = industry_insights(5.0, 5.0, drive, 0.0, 0.0).drive_time
    assert line.comparison_label == label
    if drive is None:
        assert line.user_value is None


def test_cancellation_around_average() -> None:
    line = industry_insights(5.0, 5.0, 15, 11.66, 1.0).cancellation_rate
    assert line.user_value == 11.7
    assert line.comparison_label == "Good - around industry average"


def test_all_five_dimensions_always_present() -> None:
    result = industry_insights(0.0, 0.0, None, 0.0, 0.0)
    assert [f.name for f in fields(IndustryInsights)] == [
        "dogs_per_day",
        "energy_load",
        "drive_time",
        "cancellation_rate",
        "large_dogs",
    ]
    assert all(getattr(result, f.name).comparison_label for f in fields(IndustryInsights))


def test_rolling_averages() -> None:
    history = [
        _done(0, 10.0, 3),
        _done(1, 60.0, 3),
        _done(2, 95.0, 3),
        _done(3, None, 4),
    ]
    averages = rolling_averages(history, cancelled_count=1, total_drive_minutes=30)
    assert averages.avg_dogs_per_day == 2.0
    assert averages.avg_energy_per_day == pytest.approx(3.75)
    assert averages.avg_large_dogs_per_day == 1.0
    assert averages.cancellation_rate == pytest.approx(20.0)
    assert averages.avg_drive_minutes == pytest.approx(15.0)


def test_rolling_averages_without_history() -> None:
    averages = rolling_averages([], cancelled_count=0)
    assert averages.avg_dogs_per_day == 0.0
    assert averages.cancellation_rate == 0.0
    assert averages.avg_drive_minutes is None


def test_insights_from_history() -> None:
    history = [_done(i, 15.0, 3 + i % 2) for i in range(8)]
    result = insights_from_history(history, cancelled_count=0, total_drive_minutes=None)
    assert result.dogs_per_day.user_value == 4.0
    assert result.energy_load.user_value == 4.0
    assert result.drive_time.comparison_label == "No route data"
    assert result.cancellation_rate.user_value == 0.0
