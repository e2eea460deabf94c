"""Leaderboard orchestrator.

Ties the pipeline together: records + filter → LeaderboardEntry list.

    filter_tracks → ShowIndex / run map / year stats → counting stats
    → PVS → replacement levels + WAR → JIS → rate stats → qualifications

Aggregated mode reruns everything after the pre-filter once per bucket
(calendar year or tour), so replacement levels, JIS ranges, and rates are
all relative to the bucket.
"""

from phangraphs.config import AGGREGATIONS
from phangraphs.counting import compute_counting_stats, group_by_song
from phangraphs.filters import filter_tracks, apply_qualifications
from phangraphs.jis import compute_jis
from phangraphs.models import (
    AggregatedLeaderboardEntry,
    AggregationKey,
    LeaderboardEntry,
    empty_jis,
    empty_war,
)
from phangraphs.pvs import compute_year_duration_stats, compute_all_pvs
from phangraphs.rates import compute_rate_stats
from phangraphs.runs import classify_runs
from phangraphs.show_index import build_show_index
from phangraphs.tours import identify_tours, build_tour_date_map
from phangraphs.war import compute_replacement_levels, compute_war


def compute_leaderboard_from_tracks(tracks, flt):
    """Run the pipeline on already-filtered records."""
    if not tracks:
        return []

    show_index = build_show_index(tracks)
    run_map = classify_runs(tracks)
    year_stats = compute_year_duration_stats(tracks)

    counting_stats = compute_counting_stats(tracks, show_index)
    all_pvs = compute_all_pvs(tracks, show_index, run_map, year_stats)

    replacement_levels = compute_replacement_levels(all_pvs)
    war_by_song = {w.song_name: w for w in compute_war(all_pvs, replacement_levels)}
    jis_by_song = {j.song_name: j for j in compute_jis(all_pvs)}

    tracks_by_song = group_by_song(tracks)
    entries = []
    for counting in counting_stats:
        name = counting.song_name
        entries.append(LeaderboardEntry(
            song_name=name,
            counting=counting,
            rates=compute_rate_stats(counting, tracks_by_song.get(name, []),
                                     show_index.total_shows),
            war=war_by_song.get(name) or empty_war(name),
            jis=jis_by_song.get(name) or empty_jis(name),
        ))

    return apply_qualifications(entries, flt)


def compute_leaderboard(all_tracks, flt):
    """Filter ``all_tracks`` with ``flt`` and compute the leaderboard."""
    return compute_leaderboard_from_tracks(filter_tracks(all_tracks, flt), flt)


def _year_buckets(tracks):
    buckets = {}
    for t in tracks:
        buckets.setdefault(t.year, []).append(t)
    return [(year, buckets[year]) for year in sorted(buckets)]


def _tour_buckets(tracks):
    tours = identify_tours(tracks)
    tour_by_date = build_tour_date_map(tours)
    buckets = {}
    for t in tracks:
        tour = tour_by_date.get(t.show_date)
        if tour is not None:
            buckets.setdefault(tour.tour_id, []).append(t)
    return [(tour, buckets[tour.tour_id]) for tour in tours if tour.tour_id in buckets]


def compute_aggregated_leaderboard(all_tracks, flt):
    """Leaderboard bucketed by ``flt.aggregation`` (career, byYear, byTour).

    Each entry carries an AggregationKey naming its song and bucket.
    Buckets are emitted in chronological order.
    """
    if flt.aggregation not in AGGREGATIONS:
        raise ValueError(f"Unknown aggregation: {flt.aggregation!r}")

    tracks = filter_tracks(all_tracks, flt)
    if not tracks:
        return []

    if flt.aggregation == "career":
        return [
            AggregatedLeaderboardEntry.from_entry(e, AggregationKey(song_name=e.song_name))
            for e in compute_leaderboard_from_tracks(tracks, flt)
        ]

    result = []
    if flt.aggregation == "byYear":
        for year, year_tracks in _year_buckets(tracks):
            for e in compute_leaderboard_from_tracks(year_tracks, flt):
                key = AggregationKey(song_name=e.song_name, year=year)
                result.append(AggregatedLeaderboardEntry.from_entry(e, key))
        return result

    for tour, tour_tracks in _tour_buckets(tracks):
        for e in compute_leaderboard_from_tracks(tour_tracks, flt):
            key = AggregationKey(song_name=e.song_name, tour_id=tour.tour_id,
                                 tour_label=tour.tour_label)
            result.append(AggregatedLeaderboardEntry.from_entry(e, key))
    return result


# ── Ranking ─────────────────────────────────────────────────────────

_SORT_VALUES = {
    "war": lambda e: e.war.career_war,
    "warPerPlay": lambda e: e.war.war_per_play,
    "warPerShow": lambda e: e.war.war_per_show,
    "avgJIS": lambda e: e.jis.avg_jis,
    "peakJIS": lambda e: e.jis.peak_jis,
    "timesPlayed": lambda e: e.counting.times_played,
    "jamRate": lambda e: e.rates.jam_rate,
    "jamchartCount": lambda e: e.counting.jamchart_count,
}


def sort_entries(entries, column="war", descending=True):
    """Return ``entries`` ranked by ``column``; ties keep their order."""
    if column not in _SORT_VALUES:
        raise ValueError(f"Unknown sort column: {column!r}")
    return sorted(entries, key=_SORT_VALUES[column], reverse=descending)
