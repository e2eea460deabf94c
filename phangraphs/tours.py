"""Tour segmentation and season labels.

A tour is a cluster of show dates where no two consecutive shows are more
than ``gap_days`` calendar days apart.  Labels follow the season of the
first show ("Summer 2023"); a tour touching Dec 28-31 is "NYE <year>".
"""

import re
from datetime import date

from phangraphs.config import NYE_WINDOW, TOUR_GAP_DAYS
from phangraphs.models import TourInfo

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday",
             "Friday", "Saturday", "Sunday")


def _month_to_season(month):
    if 1 <= month <= 3:
        return "Winter"
    if 4 <= month <= 5:
        return "Spring"
    if 6 <= month <= 8:
        return "Summer"
    if 9 <= month <= 11:
        return "Fall"
    return "Winter"  # December outside the NYE window


def _in_nye_window(show_date):
    return show_date[5:7] == "12" and show_date[5:] >= NYE_WINDOW[0]


def season_label(start_date, end_date):
    """Label a tour by its start season and start year.

    >>> season_label("2023-06-20", "2023-07-08")
    'Summer 2023'
    >>> season_label("2022-12-28", "2023-01-01")
    'NYE 2022'
    """
    year = start_date[:4]
    if _in_nye_window(end_date) or _in_nye_window(start_date):
        return f"NYE {year}"
    return f"{_month_to_season(int(start_date[5:7]))} {year}"


def season_from_date(show_date):
    """Seasonal bucket for a single date (December is "Holiday")."""
    month = int(show_date[5:7])
    if month <= 3:
        return "Winter"
    if month <= 5:
        return "Spring"
    if month <= 8:
        return "Summer"
    if month <= 11:
        return "Fall"
    return "Holiday"


def weekday_from_date(show_date):
    return _WEEKDAYS[date.fromisoformat(show_date).weekday()]


def tour_id_from_label(label):
    """'NYE 2023 (2)' → 'nye-2023-2'"""
    return re.sub(r"[^a-z0-9]+", "-", label.lower()).rstrip("-")


def _days_between(date_a, date_b):
    return (date.fromisoformat(date_b) - date.fromisoformat(date_a)).days


def identify_tours(tracks, gap_days=TOUR_GAP_DAYS):
    """Split the unique show dates in ``tracks`` into tours.

    A gap strictly greater than ``gap_days`` starts a new tour.  When a
    label occurs more than once, every occurrence gets a "(n)" suffix.
    """
    dates = sorted({t.show_date for t in tracks})
    if not dates:
        return []

    groups = [[dates[0]]]
    for prev, curr in zip(dates, dates[1:]):
        if _days_between(prev, curr) > gap_days:
            groups.append([curr])
        else:
            groups[-1].append(curr)

    labels = [season_label(g[0], g[-1]) for g in groups]
    label_totals = {}
    for label in labels:
        label_totals[label] = label_totals.get(label, 0) + 1

    seen = {}
    tours = []
    for shows, label in zip(groups, labels):
        if label_totals[label] > 1:
            seen[label] = seen.get(label, 0) + 1
            label = f"{label} ({seen[label]})"
        tours.append(TourInfo(
            tour_id=tour_id_from_label(label),
            tour_label=label,
            start_date=shows[0],
            end_date=shows[-1],
            show_count=len(shows),
            shows=shows,
        ))
    return tours


def build_tour_date_map(tours):
    """Return dict: show_date → TourInfo."""
    return {d: tour for tour in tours for d in tour.shows}
