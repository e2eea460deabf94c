"""Record pre-filtering and leaderboard qualification thresholds."""

import re

from phangraphs.config import SET_SPLIT_LABELS
from phangraphs.location import parse_state, is_us_location
from phangraphs.pvs import set_position_bounds
from phangraphs.runs import classify_venue_runs

_NIGHT_RE = re.compile(r"^n(\d+)$")


def _matches_run_position(info, run_position):
    if info is None:
        return False
    if run_position == "opener":
        return info.is_opener
    if run_position == "closer":
        return info.is_closer
    m = _NIGHT_RE.match(run_position)
    if m:
        return info.position_in_run == int(m.group(1))
    return True


def filter_tracks(tracks, flt):
    """Apply the record-level parts of a LeaderboardFilter.

    In order: inclusive year range, venue, region code, country bucket,
    set label, opener/closer slot, and night of a multi-night venue run.
    Opener/closer bounds are taken over the records that survived the
    earlier filters.  Venue runs are detected over the full ``tracks`` list
    so a night's position within its run does not depend on other filters.
    """
    result = [t for t in tracks if flt.year_start <= t.year <= flt.year_end]

    if flt.venue:
        result = [t for t in result if t.venue == flt.venue]

    if flt.state:
        result = [t for t in result if parse_state(t.location) == flt.state]

    if flt.country == "us":
        result = [t for t in result if is_us_location(t.location)]
    elif flt.country == "international":
        result = [t for t in result if not is_us_location(t.location)]

    target_set = SET_SPLIT_LABELS.get(flt.set_split)
    if target_set:
        result = [t for t in result if t.set_name == target_set]

    if flt.set_split in ("opener", "closer"):
        bounds = set_position_bounds(result)
        slot = 0 if flt.set_split == "opener" else 1
        result = [t for t in result
                  if t.position == bounds[(t.show_date, t.set_name)][slot]]

    if flt.run_position and flt.run_position != "all":
        venue_runs = classify_venue_runs(tracks)
        result = [t for t in result
                  if _matches_run_position(venue_runs.get(t.show_date), flt.run_position)]

    return result


def qualifies(counting, flt):
    return (counting.times_played >= flt.min_times_played
            and counting.shows_appeared_in >= flt.min_shows_appeared
            and counting.jamchart_count >= flt.min_jamchart_count
            and counting.total_minutes_played >= flt.min_total_minutes)


def apply_qualifications(entries, flt):
    """Keep entries meeting every minimum threshold in ``flt``."""
    return [e for e in entries if qualifies(e.counting, flt)]
