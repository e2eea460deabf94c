"""Performance Value Score (PVS).

Every performance is scored from six components which are summed without
clamping:

    length    1.5 × duration z-score within the show's year
    jam       +1.5 jamchart, +0.5 at 20 min, +1.0 more at 25 min
    bustout   tier bonus for the show gap since the song's previous show
    set       leverage of the slot (opener/closer/encore) × set multiplier
    run       leverage of the run type (Halloween, NYE, festival, ...)
    rarity    1 − song plays / all performances, within the year
"""

from bisect import bisect_left

from phangraphs.config import (
    LENGTH_WEIGHT,
    JAMCHART_BONUS,
    BONUS_20_MIN,
    BONUS_25_MIN,
    MS_20_MIN,
    MS_25_MIN,
    RUN_LEVERAGE,
    ENCORE_LEVERAGE,
    CLOSER_LEVERAGE,
    OPENER_LEVERAGE,
    MIDDLE_LEVERAGE,
    SET_MULTIPLIERS,
    SET_LEVERAGE_DAMPING,
)
from phangraphs.counting import bustout_score, group_by_song, song_show_ordinals
from phangraphs.mathutil import population_stats, round_half_up
from phangraphs.models import PerformancePVS, PVSComponents, YearDurationStats


# ── Year duration stats ─────────────────────────────────────────────

def compute_year_duration_stats(tracks):
    """Population mean / std dev of durations per year, sorted by year."""
    by_year = {}
    for t in tracks:
        by_year.setdefault(t.year, []).append(t.duration_ms)

    results = []
    for year in sorted(by_year):
        durations = by_year[year]
        mean, std = population_stats(durations)
        results.append(YearDurationStats(
            year=year,
            mean_duration_ms=int(round_half_up(mean)),
            std_dev_duration_ms=int(round_half_up(std)),
            total_performances=len(durations),
        ))
    return results


def duration_z_score(duration_ms, year_stats):
    if year_stats.std_dev_duration_ms == 0:
        return 0.0
    return (duration_ms - year_stats.mean_duration_ms) / year_stats.std_dev_duration_ms


# ── Set position ────────────────────────────────────────────────────

def set_position_bounds(tracks):
    """Return dict: (show_date, set_name) → (min position, max position)."""
    bounds = {}
    for t in tracks:
        key = (t.show_date, t.set_name)
        if key in bounds:
            lo, hi = bounds[key]
            bounds[key] = (min(lo, t.position), max(hi, t.position))
        else:
            bounds[key] = (t.position, t.position)
    return bounds


def _position_in_set(position, bounds):
    lo, hi = bounds
    if position == lo:
        return "opener"
    if position == hi:
        return "closer"
    return "middle"


def classify_set_position(track, all_tracks_in_show):
    """Classify a record as 'opener', 'closer', or 'middle' within its set.

    A single-song set is an opener.
    """
    key = (track.show_date, track.set_name)
    bounds = set_position_bounds(all_tracks_in_show).get(
        key, (track.position, track.position))
    return _position_in_set(track.position, bounds)


def set_leverage(set_name, position):
    if "encore" in set_name.lower():
        base = ENCORE_LEVERAGE
    elif position == "closer":
        base = CLOSER_LEVERAGE
    elif position == "opener":
        base = OPENER_LEVERAGE
    else:
        base = MIDDLE_LEVERAGE
    return base * SET_MULTIPLIERS.get(set_name, 1.0) * SET_LEVERAGE_DAMPING


# ── Rarity ──────────────────────────────────────────────────────────

def compute_rarity(song_plays_in_year, total_performances_in_year):
    if total_performances_in_year == 0:
        return 0.0
    return 1 - song_plays_in_year / total_performances_in_year


# ── Assembly ────────────────────────────────────────────────────────

def _jam_bonus(track):
    bonus = 0.0
    if track.is_jamchart:
        bonus += JAMCHART_BONUS
    if track.duration_ms >= MS_20_MIN:
        bonus += BONUS_20_MIN
    if track.duration_ms >= MS_25_MIN:
        bonus += BONUS_25_MIN
    return bonus


def _play_counts(tracks):
    """Return (song plays per (song, year), performances per year)."""
    song_year_plays = {}
    year_totals = {}
    for t in tracks:
        key = (t.song_name, t.year)
        song_year_plays[key] = song_year_plays.get(key, 0) + 1
        year_totals[t.year] = year_totals.get(t.year, 0) + 1
    return song_year_plays, year_totals


def compute_all_pvs(tracks, show_index, run_map, year_stats):
    """Score every record in ``tracks``; output order matches input order.

    The bustout gap for a record is the show gap back to the song's previous
    distinct show.  Only the first record of a song within a show carries
    that gap; repeats in the same show score a gap of 0.
    """
    stats_by_year = {ys.year: ys for ys in year_stats}
    bounds = set_position_bounds(tracks)
    song_year_plays, year_totals = _play_counts(tracks)
    song_ordinals = {
        song: song_show_ordinals(song_tracks, show_index)
        for song, song_tracks in group_by_song(tracks).items()
    }

    scored_shows = set()  # (song_name, show_date) already given a gap
    results = []
    for t in tracks:
        ys = stats_by_year.get(t.year)
        z = duration_z_score(t.duration_ms, ys) if ys else 0.0

        show_gap = 0
        if (t.song_name, t.show_date) not in scored_shows:
            scored_shows.add((t.song_name, t.show_date))
            ordinals = song_ordinals[t.song_name]
            ordinal = show_index.ordinal(t.show_date)
            i = bisect_left(ordinals, ordinal)
            if i > 0:
                show_gap = ordinal - ordinals[i - 1]

        components = PVSComponents(
            length_value=LENGTH_WEIGHT * z,
            jam_bonus=_jam_bonus(t),
            bustout_value=bustout_score(show_gap),
            set_leverage=set_leverage(
                t.set_name, _position_in_set(t.position, bounds[(t.show_date, t.set_name)])),
            run_leverage=RUN_LEVERAGE[run_map.get(t.show_date, "regular")],
            rarity_value=compute_rarity(
                song_year_plays.get((t.song_name, t.year), 0),
                year_totals.get(t.year, 0)),
        )
        results.append(PerformancePVS(
            song_name=t.song_name,
            show_date=t.show_date,
            pvs=components.total(),
            components=components,
        ))
    return results
