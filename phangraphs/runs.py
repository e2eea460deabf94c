"""Show classification: run types by date/venue, and multi-night venue runs.

Run types (first matching rule wins):
    halloween  Oct 31
    nye        Dec 28-31
    dicks      Dick's Sporting Goods Park
    festival   known festival sites
    yemsg      Madison Square Garden
    regular    everything else
"""

from datetime import date, timedelta

from phangraphs.config import (
    HALLOWEEN_MONTH_DAY,
    NYE_WINDOW,
    DICKS_VENUE,
    YEMSG_VENUE,
    FESTIVAL_VENUES,
)
from phangraphs.models import VenueRunInfo

_FESTIVAL_VENUES_LOWER = tuple(v.lower() for v in FESTIVAL_VENUES)


def is_halloween(show_date):
    return show_date[5:] == HALLOWEEN_MONTH_DAY


def is_nye(show_date):
    month_day = show_date[5:]
    return NYE_WINDOW[0] <= month_day <= NYE_WINDOW[1]


def is_dicks(venue):
    return DICKS_VENUE in venue.lower()


def is_festival(venue):
    lower = venue.lower()
    return any(f in lower for f in _FESTIVAL_VENUES_LOWER)


def is_yemsg(venue):
    return YEMSG_VENUE in venue.lower()


def classify_show(show_date, venue):
    """Return the run type for a single show."""
    if is_halloween(show_date):
        return "halloween"
    if is_nye(show_date):
        return "nye"
    if is_dicks(venue):
        return "dicks"
    if is_festival(venue):
        return "festival"
    if is_yemsg(venue):
        return "yemsg"
    return "regular"


def classify_runs(tracks):
    """Return dict: show_date → run type, classifying each date once.

    The venue of the first record seen for a date is used.
    """
    run_map = {}
    for t in tracks:
        if t.show_date not in run_map:
            run_map[t.show_date] = classify_show(t.show_date, t.venue)
    return run_map


# ── Multi-night venue runs ──────────────────────────────────────────

def _is_next_day(prev_date, show_date):
    return date.fromisoformat(show_date) - date.fromisoformat(prev_date) == timedelta(days=1)


def group_venue_runs(tracks):
    """Group shows into runs of consecutive calendar days at one venue.

    Returns a list of (venue, [dates...]) in date order.
    """
    show_venues = {}
    for t in tracks:
        show_venues.setdefault(t.show_date, t.venue)

    runs = []
    for show_date, venue in sorted(show_venues.items()):
        if runs:
            run_venue, run_dates = runs[-1]
            if venue == run_venue and _is_next_day(run_dates[-1], show_date):
                run_dates.append(show_date)
                continue
        runs.append((venue, [show_date]))
    return runs


def classify_venue_runs(tracks):
    """Return dict: show_date → VenueRunInfo for every show in ``tracks``."""
    result = {}
    for venue, run_dates in group_venue_runs(tracks):
        run_length = len(run_dates)
        for i, show_date in enumerate(run_dates):
            result[show_date] = VenueRunInfo(
                venue=venue,
                run_length=run_length,
                position_in_run=i + 1,
                is_opener=i == 0,
                is_closer=i == run_length - 1,
            )
    return result
