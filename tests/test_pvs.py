"""Tests for Performance Value Score components and assembly."""

import pytest

from phangraphs.models import YearDurationStats
from phangraphs.pvs import (
    classify_set_position,
    compute_all_pvs,
    compute_rarity,
    compute_year_duration_stats,
    duration_z_score,
    set_leverage,
)
from phangraphs.runs import classify_runs
from phangraphs.show_index import build_show_index
from tests.conftest import make_track, show_dates


def _score(tracks):
    return compute_all_pvs(tracks, build_show_index(tracks), classify_runs(tracks),
                           compute_year_duration_stats(tracks))


class TestYearDurationStats:

    def test_population_stats_per_year(self):
        tracks = [
            make_track(show_date="2023-07-14", duration_ms=100),
            make_track(show_date="2023-07-15", duration_ms=200),
            make_track(show_date="2023-07-16", duration_ms=300),
            make_track(show_date="2022-07-16", duration_ms=500),
        ]
        stats = compute_year_duration_stats(tracks)
        assert [s.year for s in stats] == [2022, 2023]
        y2022, y2023 = stats
        assert y2022.mean_duration_ms == 500
        assert y2022.std_dev_duration_ms == 0
        assert y2022.total_performances == 1
        assert y2023.mean_duration_ms == 200
        # sqrt(20000 / 3) = 81.65, population not sample
        assert y2023.std_dev_duration_ms == 82
        assert y2023.total_performances == 3

    def test_empty(self):
        assert compute_year_duration_stats([]) == []


class TestDurationZScore:

    def test_zero_std_is_zero(self):
        ys = YearDurationStats(year=2023, mean_duration_ms=600000,
                               std_dev_duration_ms=0, total_performances=1)
        assert duration_z_score(900000, ys) == 0

    def test_z_score(self):
        ys = YearDurationStats(year=2023, mean_duration_ms=600000,
                               std_dev_duration_ms=100000, total_performances=10)
        assert duration_z_score(800000, ys) == pytest.approx(2.0)
        assert duration_z_score(500000, ys) == pytest.approx(-1.0)


class TestSetPosition:

    def _show(self):
        return [
            make_track(song_name="A", set_name="Set 1", position=1),
            make_track(song_name="B", set_name="Set 1", position=5),
            make_track(song_name="C", set_name="Set 1", position=10),
            make_track(song_name="D", set_name="Set 2", position=11),
            make_track(song_name="E", set_name="Set 2", position=15),
        ]

    def test_positions(self):
        show = self._show()
        assert [classify_set_position(t, show) for t in show] == [
            "opener", "middle", "closer", "opener", "closer",
        ]

    def test_single_song_set_is_opener(self):
        encore = make_track(set_name="Encore", position=20)
        assert classify_set_position(encore, self._show() + [encore]) == "opener"

    def test_other_shows_ignored(self):
        show = self._show()
        other = make_track(show_date="2023-07-16", set_name="Set 1", position=0)
        assert classify_set_position(show[0], show + [other]) == "opener"


class TestSetLeverage:

    def test_set1(self):
        assert set_leverage("Set 1", "opener") == pytest.approx(0.375)
        assert set_leverage("Set 1", "closer") == pytest.approx(0.5625)
        assert set_leverage("Set 1", "middle") == 0

    def test_set2_multiplier(self):
        assert set_leverage("Set 2", "closer") == pytest.approx(0.675)

    def test_set3_multiplier(self):
        assert set_leverage("Set 3", "opener") == pytest.approx(0.4875)

    def test_encore_ignores_position(self):
        assert set_leverage("Encore", "middle") == pytest.approx(0.75)
        assert set_leverage("Encore 2", "opener") == pytest.approx(0.75)


class TestRarity:

    def test_values(self):
        assert compute_rarity(100, 100) == 0
        assert compute_rarity(1, 100) == pytest.approx(0.99)
        assert compute_rarity(0, 0) == 0


class TestComputeAllPVS:

    def test_empty(self):
        assert _score([]) == []

    def test_single_performance(self):
        """Lone song in its set: opener leverage only."""
        (p,) = _score([make_track()])
        assert p.components.length_value == 0
        assert p.components.jam_bonus == 0
        assert p.components.bustout_value == 0
        assert p.components.set_leverage == pytest.approx(0.375)
        assert p.components.run_leverage == 0
        assert p.components.rarity_value == 0
        assert p.pvs == pytest.approx(0.375)

    def test_pvs_is_sum_of_components(self):
        tracks = [
            make_track(song_name="A", position=1, duration_ms=400000, is_jamchart=1),
            make_track(song_name="B", position=2, duration_ms=1600000),
            make_track(song_name="C", set_name="Set 2", position=3, duration_ms=1000000),
            make_track(song_name="D", set_name="Encore", position=4, duration_ms=300000),
        ]
        for p in _score(tracks):
            c = p.components
            assert p.pvs == pytest.approx(c.length_value + c.jam_bonus + c.bustout_value
                                          + c.set_leverage + c.run_leverage + c.rarity_value)

    def test_jam_bonus(self):
        tracks = [
            make_track(song_name="A", show_date="2023-07-14", duration_ms=1560000, is_jamchart=1),
            make_track(song_name="B", show_date="2023-07-15", duration_ms=1200000),
            make_track(song_name="C", show_date="2023-07-16", duration_ms=600000),
        ]
        bonuses = [p.components.jam_bonus for p in _score(tracks)]
        assert bonuses == [pytest.approx(3.0), pytest.approx(0.5), 0]

    def test_run_leverage(self):
        tracks = [
            make_track(show_date="2023-10-31", venue="MGM Grand Garden Arena"),
            make_track(show_date="2023-09-01", venue="Dick's Sporting Goods Park"),
            make_track(show_date="2023-04-20", venue="Madison Square Garden"),
        ]
        levs = [p.components.run_leverage for p in _score(tracks)]
        assert levs == [1.5, 0.75, 1.0]

    def test_rarity_within_year(self):
        tracks = [
            make_track(song_name="A", show_date="2023-07-14"),
            make_track(song_name="A", show_date="2023-07-15"),
            make_track(song_name="B", show_date="2023-07-15"),
            make_track(song_name="C", show_date="2023-07-16"),
            make_track(song_name="A", show_date="2022-07-16"),
        ]
        scored = _score(tracks)
        assert scored[0].components.rarity_value == pytest.approx(0.5)
        assert scored[2].components.rarity_value == pytest.approx(0.75)
        assert scored[4].components.rarity_value == 0

    def test_bustout_component(self):
        """First appearance scores 0; the return after 29 shows is a bustout."""
        dates = show_dates("2023-01-01", 30)
        tracks = [make_track(song_name="Filler", show_date=d, position=1) for d in dates]
        tracks.append(make_track(song_name="Rare", show_date=dates[0], position=2))
        tracks.append(make_track(song_name="Rare", show_date=dates[29], position=2))

        rare = [p for p in _score(tracks) if p.song_name == "Rare"]
        assert rare[0].components.bustout_value == 0
        assert rare[1].components.bustout_value == 0.5

    def test_repeat_in_same_show_gets_no_gap(self):
        dates = show_dates("2023-01-01", 30)
        tracks = [make_track(song_name="Filler", show_date=d, position=1) for d in dates]
        tracks.append(make_track(song_name="Rare", show_date=dates[0], position=2))
        tracks.append(make_track(song_name="Rare", show_date=dates[29], position=2))
        tracks.append(make_track(song_name="Rare", show_date=dates[29], position=5))

        rare = [p for p in _score(tracks) if p.song_name == "Rare"]
        assert [p.components.bustout_value for p in rare] == [0, 0.5, 0]

    def test_unsorted_input(self):
        """Gaps follow show order, not record order."""
        dates = show_dates("2023-01-01", 30)
        tracks = [make_track(song_name="Rare", show_date=dates[29], position=2)]
        tracks += [make_track(song_name="Filler", show_date=d, position=1) for d in dates]
        tracks.append(make_track(song_name="Rare", show_date=dates[0], position=2))

        rare = [p for p in _score(tracks) if p.song_name == "Rare"]
        assert rare[0].show_date == dates[29]
        assert rare[0].components.bustout_value == 0.5
        assert rare[1].components.bustout_value == 0

    def test_output_order_and_idempotence(self):
        tracks = [make_track(song_name=s, position=i + 1)
                  for i, s in enumerate(["A", "B", "C"])]
        before = list(tracks)
        first = _score(tracks)
        second = _score(tracks)
        assert [p.song_name for p in first] == ["A", "B", "C"]
        assert first == second
        assert tracks == before
