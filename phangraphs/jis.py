"""Jam Impact Score (JIS): PVS rescaled to 0-10 across the whole dataset."""

from phangraphs.config import JIS_SCALE, JIS_MIDPOINT
from phangraphs.mathutil import population_stats, round_half_up
from phangraphs.models import SongJIS


def normalize_to_jis(pvs, pvs_min, pvs_max):
    """Min-max scale ``pvs`` onto [0, 10]; 5 when every score is equal."""
    if pvs_max == pvs_min:
        return JIS_MIDPOINT
    raw = JIS_SCALE * (pvs - pvs_min) / (pvs_max - pvs_min)
    return max(0.0, min(JIS_SCALE, round_half_up(raw, 2)))


def compute_jis(all_pvs):
    """Average, peak, and volatility of normalized PVS for every song.

    The normalization range is global: the min and max PVS over all of
    ``all_pvs``, not per song.
    """
    if not all_pvs:
        return []

    scores = [p.pvs for p in all_pvs]
    pvs_min, pvs_max = min(scores), max(scores)

    by_song = {}
    for p in all_pvs:
        by_song.setdefault(p.song_name, []).append(
            normalize_to_jis(p.pvs, pvs_min, pvs_max))

    results = []
    for song_name, jis_scores in by_song.items():
        avg, std = population_stats(jis_scores)
        results.append(SongJIS(
            song_name=song_name,
            avg_jis=round_half_up(avg, 2),
            peak_jis=round_half_up(max(jis_scores), 2),
            jis_volatility=round_half_up(std, 2),
        ))
    return results
