"""Data structures for the PhanGraphs pipeline.

Every structure here is built fresh per pipeline run from a list of
PerformanceRecords and a LeaderboardFilter.  Nothing is mutated after
construction.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from phangraphs.config import (
    DEFAULT_YEAR_START,
    DEFAULT_MIN_TIMES_PLAYED,
    DEFAULT_MIN_SHOWS_APPEARED,
    DEFAULT_MIN_JAMCHART_COUNT,
    DEFAULT_MIN_TOTAL_MINUTES,
)


@dataclass(frozen=True)
class PerformanceRecord:
    """One song played once, at one position, in one set, at one show."""
    song_name: str
    show_date: str          # "YYYY-MM-DD"
    set_name: str           # "Set 1", "Set 2", "Encore", ...
    position: int           # 1-indexed, across the whole show
    duration_ms: int
    is_jamchart: int = 0
    venue: str = ""
    location: str = ""      # "City, ST" or "City, Province, Country"
    likes: int = 0
    jam_notes: str = ""

    @property
    def year(self):
        return int(self.show_date[:4])


@dataclass
class ShowIndex:
    dates: list             # sorted unique show dates
    date_to_index: dict     # show_date → 0-based ordinal
    total_shows: int

    def ordinal(self, show_date, default=0):
        return self.date_to_index.get(show_date, default)


@dataclass
class TourInfo:
    tour_id: str            # "summer-2023", "nye-2023-2"
    tour_label: str         # "Summer 2023", "NYE 2023 (2)"
    start_date: str
    end_date: str
    show_count: int
    shows: list = field(default_factory=list)


@dataclass
class VenueRunInfo:
    venue: str
    run_length: int
    position_in_run: int    # 1-indexed
    is_opener: bool
    is_closer: bool


@dataclass
class SongCountingStats:
    song_name: str
    shows_appeared_in: int
    times_played: int
    jamchart_count: int
    times_20_min: int
    times_25_min: int
    total_minutes_played: float
    bustout_count: int
    mega_bustout_count: int
    max_shows_between_plays: int
    avg_shows_between_plays: float


@dataclass
class SongRateStats:
    song_name: str
    jam_rate: float
    rate_20_plus: float
    rate_25_plus: float
    bustout_rate: float
    plays_per_show: float
    jam_per_show: float
    avg_length_ms: int
    median_length_ms: int


@dataclass
class PVSComponents:
    length_value: float
    jam_bonus: float
    bustout_value: float
    set_leverage: float
    run_leverage: float
    rarity_value: float

    def total(self):
        return (self.length_value + self.jam_bonus + self.bustout_value
                + self.set_leverage + self.run_leverage + self.rarity_value)


@dataclass
class PerformancePVS:
    song_name: str
    show_date: str
    pvs: float
    components: PVSComponents

    @property
    def year(self):
        return int(self.show_date[:4])


@dataclass
class YearDurationStats:
    year: int
    mean_duration_ms: int
    std_dev_duration_ms: int
    total_performances: int


@dataclass
class SongWAR:
    song_name: str
    career_war: float
    war_per_play: float
    war_per_show: float
    peak_war_year: int
    war_by_year: dict = field(default_factory=dict)   # year → WAR


@dataclass
class SongJIS:
    song_name: str
    avg_jis: float
    peak_jis: float
    jis_volatility: float


def empty_war(song_name):
    """Zero-valued WAR for a song with no scored performances."""
    return SongWAR(song_name=song_name, career_war=0.0, war_per_play=0.0,
                   war_per_show=0.0, peak_war_year=0, war_by_year={})


def empty_jis(song_name):
    """Zero-valued JIS for a song with no scored performances."""
    return SongJIS(song_name=song_name, avg_jis=0.0, peak_jis=0.0,
                   jis_volatility=0.0)


@dataclass
class LeaderboardEntry:
    song_name: str
    counting: SongCountingStats
    rates: SongRateStats
    war: SongWAR
    jis: SongJIS


@dataclass
class AggregationKey:
    song_name: str
    year: Optional[int] = None
    tour_id: Optional[str] = None
    tour_label: Optional[str] = None


@dataclass
class AggregatedLeaderboardEntry(LeaderboardEntry):
    aggregation_key: AggregationKey = None

    @classmethod
    def from_entry(cls, entry, aggregation_key):
        return cls(
            song_name=entry.song_name,
            counting=entry.counting,
            rates=entry.rates,
            war=entry.war,
            jis=entry.jis,
            aggregation_key=aggregation_key,
        )


def _current_year():
    return date.today().year


@dataclass(frozen=True)
class LeaderboardFilter:
    year_start: int = DEFAULT_YEAR_START
    year_end: int = field(default_factory=_current_year)
    min_times_played: int = DEFAULT_MIN_TIMES_PLAYED
    min_shows_appeared: int = DEFAULT_MIN_SHOWS_APPEARED
    min_jamchart_count: int = DEFAULT_MIN_JAMCHART_COUNT
    min_total_minutes: float = DEFAULT_MIN_TOTAL_MINUTES
    set_split: str = "all"          # all|set1|set2|set3|encore|opener|closer
    aggregation: str = "career"     # career|byYear|byTour
    venue: Optional[str] = None
    state: Optional[str] = None
    country: str = "all"            # all|us|international
    run_position: str = "all"       # all|opener|closer|n1|n2|...

    def with_changes(self, **changes):
        return dataclasses.replace(self, **changes)
