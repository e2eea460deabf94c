"""Rate stats derived from counting stats."""

import statistics

from phangraphs.mathutil import round_half_up, safe_ratio
from phangraphs.models import SongRateStats


def median(values):
    """Median of ``values``; 0 for an empty sequence."""
    if not values:
        return 0
    return statistics.median(values)


def compute_rate_stats(counting, song_tracks, total_shows_in_filter):
    """Per-play and per-show rates for one song.

    ``total_shows_in_filter`` is the number of distinct shows in the
    filtered dataset, not the number the song appeared in.
    """
    plays = counting.times_played
    durations = [t.duration_ms for t in song_tracks]
    return SongRateStats(
        song_name=counting.song_name,
        jam_rate=safe_ratio(counting.jamchart_count, plays),
        rate_20_plus=safe_ratio(counting.times_20_min, plays),
        rate_25_plus=safe_ratio(counting.times_25_min, plays),
        bustout_rate=safe_ratio(counting.bustout_count, plays),
        plays_per_show=safe_ratio(plays, total_shows_in_filter),
        jam_per_show=safe_ratio(counting.jamchart_count, total_shows_in_filter),
        avg_length_ms=int(round_half_up(sum(durations) / plays)) if plays > 0 else 0,
        median_length_ms=int(round_half_up(median(durations))),
    )
