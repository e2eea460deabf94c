"""Wins Above Replacement (WAR).

Replacement level is the 20th percentile PVS of each year.  A song's WAR
is the sum of (PVS − replacement level) over all of its performances;
contributions below replacement are negative and count too.
"""

from phangraphs.config import REPLACEMENT_PERCENTILE
from phangraphs.mathutil import percentile, round_half_up
from phangraphs.models import SongWAR


def compute_replacement_levels(all_pvs):
    """Return dict: year → replacement-level PVS."""
    by_year = {}
    for p in all_pvs:
        by_year.setdefault(p.year, []).append(p.pvs)
    return {year: percentile(values, REPLACEMENT_PERCENTILE)
            for year, values in by_year.items()}


def _peak_year(war_by_year):
    """Year with the highest WAR; ties go to the earliest year."""
    peak_year = 0
    peak_war = float("-inf")
    for year in sorted(war_by_year):
        if war_by_year[year] > peak_war:
            peak_year, peak_war = year, war_by_year[year]
    return peak_year


def compute_war(all_pvs, replacement_levels):
    """Compute SongWAR for every song in ``all_pvs``."""
    by_song = {}
    for p in all_pvs:
        by_song.setdefault(p.song_name, []).append(p)

    results = []
    for song_name, perfs in by_song.items():
        war_by_year = {}
        career_war = 0.0
        for p in perfs:
            contribution = p.pvs - replacement_levels.get(p.year, 0.0)
            war_by_year[p.year] = war_by_year.get(p.year, 0.0) + contribution
            career_war += contribution
        show_count = len({p.show_date for p in perfs})

        results.append(SongWAR(
            song_name=song_name,
            career_war=round_half_up(career_war, 2),
            war_per_play=round_half_up(career_war / len(perfs), 2),
            war_per_show=round_half_up(career_war / show_count, 2),
            peak_war_year=_peak_year(war_by_year),
            war_by_year={year: round_half_up(war_by_year[year], 2)
                         for year in sorted(war_by_year)},
        ))
    return results
