"""Chronological ordinal index over unique show dates.

Gaps between plays are measured in shows, not calendar days, so every
gap computation goes through this index.
"""

from phangraphs.models import ShowIndex


def build_show_index(tracks):
    """Map each unique show date to its 0-based position in date order.

    Dates are fixed-width "YYYY-MM-DD" strings, so lexicographic order is
    chronological order.
    """
    dates = sorted({t.show_date for t in tracks})
    date_to_index = {d: i for i, d in enumerate(dates)}
    return ShowIndex(dates=dates, date_to_index=date_to_index,
                     total_shows=len(dates))
