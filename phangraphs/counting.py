"""Per-song counting stats and bustout classification.

Gaps are measured in shows via the ShowIndex: a song played at show
ordinals 3 and 40 has a gap of 37 regardless of how many days passed.
"""

from phangraphs.config import (
    BUSTOUT_TIERS,
    BUSTOUT_BONUS,
    BUSTOUT_GAP,
    MEGA_BUSTOUT_GAP,
    MS_20_MIN,
    MS_25_MIN,
    MS_PER_MINUTE,
)
from phangraphs.mathutil import round_half_up
from phangraphs.models import SongCountingStats


def classify_bustout(show_gap):
    """Return the bustout tier for a gap measured in shows."""
    for threshold, tier in BUSTOUT_TIERS:
        if show_gap >= threshold:
            return tier
    return "none"


def bustout_score(show_gap):
    return BUSTOUT_BONUS[classify_bustout(show_gap)]


def group_by_song(tracks):
    """Return dict: song_name → [records...] in input order."""
    by_song = {}
    for t in tracks:
        by_song.setdefault(t.song_name, []).append(t)
    return by_song


def song_show_ordinals(song_tracks, show_index):
    """Sorted, de-duplicated show ordinals at which a song was played."""
    return sorted({show_index.ordinal(t.show_date) for t in song_tracks})


def show_gaps(ordinals):
    return [b - a for a, b in zip(ordinals, ordinals[1:])]


def compute_counting_stats(tracks, show_index):
    """Compute SongCountingStats for every song, in order of first appearance."""
    results = []
    for song_name, song_tracks in group_by_song(tracks).items():
        ordinals = song_show_ordinals(song_tracks, show_index)
        gaps = show_gaps(ordinals)

        jamchart_count = sum(1 for t in song_tracks if t.is_jamchart)
        times_20 = sum(1 for t in song_tracks if t.duration_ms >= MS_20_MIN)
        times_25 = sum(1 for t in song_tracks if t.duration_ms >= MS_25_MIN)
        total_ms = sum(t.duration_ms for t in song_tracks)

        results.append(SongCountingStats(
            song_name=song_name,
            shows_appeared_in=len(ordinals),
            times_played=len(song_tracks),
            jamchart_count=jamchart_count,
            times_20_min=times_20,
            times_25_min=times_25,
            total_minutes_played=round_half_up(total_ms / MS_PER_MINUTE, 1),
            bustout_count=sum(1 for g in gaps if g >= BUSTOUT_GAP),
            mega_bustout_count=sum(1 for g in gaps if g >= MEGA_BUSTOUT_GAP),
            max_shows_between_plays=max(gaps, default=0),
            avg_shows_between_plays=(
                round_half_up(sum(gaps) / len(gaps), 1) if gaps else 0
            ),
        ))
    return results
