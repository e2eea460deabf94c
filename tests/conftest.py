"""Shared fixtures and record factories for phangraphs tests."""

from datetime import date, timedelta

import pytest

from phangraphs.models import (
    LeaderboardFilter,
    PerformancePVS,
    PerformanceRecord,
    PVSComponents,
)


def make_track(**overrides):
    """Build a PerformanceRecord with sensible defaults."""
    fields = dict(
        song_name="Tweezer",
        show_date="2023-07-15",
        set_name="Set 1",
        position=3,
        duration_ms=600000,
        is_jamchart=0,
        venue="MSG",
        location="New York, NY",
    )
    fields.update(overrides)
    return PerformanceRecord(**fields)


def make_pvs(song_name, show_date, pvs):
    """Build a PerformancePVS whose whole score sits in the length term."""
    components = PVSComponents(length_value=pvs, jam_bonus=0.0, bustout_value=0.0,
                               set_leverage=0.0, run_leverage=0.0, rarity_value=0.0)
    return PerformancePVS(song_name=song_name, show_date=show_date, pvs=pvs,
                          components=components)


def show_dates(start, count, step_days=1):
    """Return ``count`` "YYYY-MM-DD" dates starting at ``start``."""
    first = date.fromisoformat(start)
    return [(first + timedelta(days=i * step_days)).isoformat() for i in range(count)]


@pytest.fixture
def open_filter():
    """A filter that keeps every record and qualifies every song."""
    return LeaderboardFilter(
        year_start=1983,
        year_end=2030,
        min_times_played=0,
        min_shows_appeared=0,
        min_jamchart_count=0,
        min_total_minutes=0,
    )
