"""CLI with subcommands for the PhanGraphs leaderboard."""

import argparse
import csv
import sys

from phangraphs.cache import TrackStore
from phangraphs.config import (
    AGGREGATIONS,
    CACHE_DIR,
    COUNTRIES,
    DEFAULT_MIN_JAMCHART_COUNT,
    DEFAULT_MIN_SHOWS_APPEARED,
    DEFAULT_MIN_TIMES_PLAYED,
    DEFAULT_MIN_TOTAL_MINUTES,
    DEFAULT_SORT_COLUMN,
    SET_SPLITS,
    SORT_COLUMNS,
    TOUR_GAP_DAYS,
    TRACKS_URL,
)
from phangraphs.leaderboard import compute_aggregated_leaderboard, sort_entries
from phangraphs.loader import is_url
from phangraphs.location import extract_unique_states, extract_unique_venues
from phangraphs.models import LeaderboardFilter
from phangraphs.runs import group_venue_runs
from phangraphs.show_index import build_show_index
from phangraphs.tours import identify_tours


def _load_tracks(args):
    cache_dir = CACHE_DIR if is_url(args.tracks) and not args.no_cache else None
    store = TrackStore(args.tracks, cache_dir=cache_dir, max_age_days=args.max_age)
    return store.tracks()


def _filter_from_args(args):
    flt = LeaderboardFilter(
        min_times_played=args.min_plays,
        min_shows_appeared=args.min_shows,
        min_jamchart_count=args.min_jamcharts,
        min_total_minutes=args.min_minutes,
        set_split=args.set,
        aggregation=args.aggregation,
        venue=args.venue,
        state=args.state,
        country=args.country,
        run_position=args.run_position,
    )
    if args.year_start is not None:
        flt = flt.with_changes(year_start=args.year_start)
    if args.year_end is not None:
        flt = flt.with_changes(year_end=args.year_end)
    return flt


def _bucket_label(entry):
    key = entry.aggregation_key
    if key.tour_label:
        return key.tour_label
    if key.year is not None:
        return str(key.year)
    return "career"


def _entry_row(rank, entry):
    return {
        "rank": rank,
        "song": entry.song_name,
        "bucket": _bucket_label(entry),
        "plays": entry.counting.times_played,
        "shows": entry.counting.shows_appeared_in,
        "jamcharts": entry.counting.jamchart_count,
        "minutes": entry.counting.total_minutes_played,
        "bustouts": entry.counting.bustout_count,
        "jam_rate": entry.rates.jam_rate,
        "plays_per_show": entry.rates.plays_per_show,
        "war": entry.war.career_war,
        "war_per_play": entry.war.war_per_play,
        "war_per_show": entry.war.war_per_show,
        "peak_war_year": entry.war.peak_war_year,
        "avg_jis": entry.jis.avg_jis,
        "peak_jis": entry.jis.peak_jis,
        "jis_volatility": entry.jis.jis_volatility,
    }


def cmd_leaderboard(args):
    """Compute the leaderboard and print or export it."""
    tracks = _load_tracks(args)
    if not tracks:
        print("No data. Check the --tracks source.")
        return
    flt = _filter_from_args(args)
    entries = compute_aggregated_leaderboard(tracks, flt)
    if not entries:
        print("No songs qualified. Loosen the filters or check the year range.")
        return

    ranked = sort_entries(entries, column=args.sort, descending=not args.asc)
    if args.top:
        ranked = ranked[:args.top]
    rows = [_entry_row(i + 1, e) for i, e in enumerate(ranked)]

    if args.output:
        out = args.output
        if out == "-":
            writer = csv.DictWriter(sys.stdout, fieldnames=rows[0].keys())
            writer.writeheader()
            writer.writerows(rows)
        else:
            with open(out, "w", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=rows[0].keys())
                writer.writeheader()
                writer.writerows(rows)
            print(f"Exported {len(rows)} rows to {out}")
        return

    print(f"\n  {len(entries)} {'songs' if flt.aggregation == 'career' else 'rows'} "
          f"qualified ({flt.year_start}-{flt.year_end}, sorted by {args.sort})")
    print(f"  {'#':>4} {'Song':<32} {'Bucket':<16} {'N':>4} {'JC':>4} "
          f"{'WAR':>8} {'WAR/P':>6} {'avgJIS':>6} {'pkJIS':>6}")
    print(f"  {'-'*4} {'-'*32} {'-'*16} {'-'*4} {'-'*4} "
          f"{'-'*8} {'-'*6} {'-'*6} {'-'*6}")
    for r in rows:
        print(f"  {r['rank']:>4} {r['song'][:32]:<32} {r['bucket'][:16]:<16} "
              f"{r['plays']:>4} {r['jamcharts']:>4} {r['war']:>8.2f} "
              f"{r['war_per_play']:>6.2f} {r['avg_jis']:>6.2f} {r['peak_jis']:>6.2f}")


def cmd_tours(args):
    """List tours detected from show-date gaps."""
    tracks = _load_tracks(args)
    tours = identify_tours(tracks, gap_days=args.gap_days)
    if not tours:
        print("No data. Check the --tracks source.")
        return
    print(f"  {len(tours)} tours (gap > {args.gap_days} days starts a new tour)")
    for tour in tours:
        print(f"    {tour.tour_label:<20} {tour.start_date} → {tour.end_date} "
              f"{tour.show_count:>3} shows")


def cmd_runs(args):
    """List multi-night venue runs."""
    tracks = _load_tracks(args)
    runs = [(venue, dates) for venue, dates in group_venue_runs(tracks)
            if len(dates) >= args.min_nights]
    if not runs:
        print(f"  No venue runs of {args.min_nights}+ nights.")
        return
    print(f"  {len(runs)} venue runs of {args.min_nights}+ nights")
    for venue, dates in runs:
        print(f"    {dates[0]} → {dates[-1]}  {len(dates)}N  {venue}")


def cmd_status(args):
    """Show dataset statistics."""
    tracks = _load_tracks(args)
    if not tracks:
        print("No data. Check the --tracks source.")
        return
    show_index = build_show_index(tracks)
    years = sorted({t.year for t in tracks})
    print(f"  Tracks:             {len(tracks)}")
    print(f"  Shows:              {show_index.total_shows}")
    print(f"  Songs:              {len({t.song_name for t in tracks})}")
    print(f"  Jamcharts:          {sum(1 for t in tracks if t.is_jamchart)}")
    if years:
        print(f"  Years:              {years[0]}-{years[-1]} ({len(years)})")
    print(f"  Venues:             {len(extract_unique_venues(tracks))}")
    print(f"  States:             {len(extract_unique_states(tracks))}")


def _add_source_args(p):
    p.add_argument("--tracks", default=TRACKS_URL,
                   help="tracks.json path or URL (default: %(default)s)")
    p.add_argument("--no-cache", action="store_true",
                   help="Always re-download a remote tracks export")
    p.add_argument("--max-age", type=int, default=0,
                   help="Max cache age in days (0 = never expire)")


def main():
    parser = argparse.ArgumentParser(
        prog="phangraphs",
        description="Sabermetrics-style song leaderboards from setlist data",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # leaderboard
    p_lb = subparsers.add_parser("leaderboard", help="Ranked song leaderboard")
    _add_source_args(p_lb)
    p_lb.add_argument("--year-start", type=int, default=None)
    p_lb.add_argument("--year-end", type=int, default=None)
    p_lb.add_argument("--min-plays", type=int, default=DEFAULT_MIN_TIMES_PLAYED)
    p_lb.add_argument("--min-shows", type=int, default=DEFAULT_MIN_SHOWS_APPEARED)
    p_lb.add_argument("--min-jamcharts", type=int, default=DEFAULT_MIN_JAMCHART_COUNT)
    p_lb.add_argument("--min-minutes", type=float, default=DEFAULT_MIN_TOTAL_MINUTES)
    p_lb.add_argument("--set", choices=SET_SPLITS, default="all",
                      help="Restrict to one set or slot (default: all)")
    p_lb.add_argument("--aggregation", choices=AGGREGATIONS, default="career")
    p_lb.add_argument("--venue", default=None, help="Exact venue name")
    p_lb.add_argument("--state", default=None, help="Two-letter region code")
    p_lb.add_argument("--country", choices=COUNTRIES, default="all")
    p_lb.add_argument("--run-position", default="all",
                      help="all, opener, closer, or nK for night K of a run")
    p_lb.add_argument("--sort", choices=SORT_COLUMNS, default=DEFAULT_SORT_COLUMN)
    p_lb.add_argument("--asc", action="store_true", help="Sort ascending")
    p_lb.add_argument("--top", type=int, default=25,
                      help="Rows to show (0 = all)")
    p_lb.add_argument("-o", "--output", default=None,
                      help="Write CSV to a file ('-' for stdout)")
    p_lb.set_defaults(func=cmd_leaderboard)

    # tours
    p_tours = subparsers.add_parser("tours", help="List detected tours")
    _add_source_args(p_tours)
    p_tours.add_argument("--gap-days", type=int, default=TOUR_GAP_DAYS)
    p_tours.set_defaults(func=cmd_tours)

    # runs
    p_runs = subparsers.add_parser("runs", help="List multi-night venue runs")
    _add_source_args(p_runs)
    p_runs.add_argument("--min-nights", type=int, default=2)
    p_runs.set_defaults(func=cmd_runs)

    # status
    p_status = subparsers.add_parser("status", help="Show dataset statistics")
    _add_source_args(p_status)
    p_status.set_defaults(func=cmd_status)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)
