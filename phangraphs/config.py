"""Constants, thresholds, and scoring weights for PhanGraphs."""

import os

# ── Paths ──────────────────────────────────────────────────────────────
DATA_DIR = os.path.expanduser("~/.phangraphs")
CACHE_DIR = os.path.join(DATA_DIR, "cache")
TRACKS_CACHE_KEY = "tracks"

# ── Dataset export ────────────────────────────────────────────────────
TRACKS_URL = "https://phangraphs.app/data/tracks.json"
HTTP_USER_AGENT = "PhanGraphs/1.0"
HTTP_RATE_LIMIT = 0.0

# ── Duration thresholds (milliseconds) ────────────────────────────────
MS_PER_MINUTE = 60 * 1000
MS_20_MIN = 20 * MS_PER_MINUTE
MS_25_MIN = 25 * MS_PER_MINUTE

# ── Bustouts ──────────────────────────────────────────────────────────
# Inclusive lower bounds on the show gap, most severe first.
BUSTOUT_TIERS = (
    (250, "historic"),
    (100, "major"),
    (50, "significant"),
    (25, "bustout"),
)
BUSTOUT_BONUS = {
    "none": 0.0,
    "bustout": 0.5,
    "significant": 1.0,
    "major": 1.5,
    "historic": 2.5,
}
BUSTOUT_GAP = 25
MEGA_BUSTOUT_GAP = 100

# ── Run classification ────────────────────────────────────────────────
# Evaluated in this order; the first match wins.
RUN_TYPES = ("halloween", "nye", "dicks", "festival", "yemsg", "regular")
RUN_LEVERAGE = {
    "halloween": 1.5,
    "festival": 1.25,
    "nye": 1.0,
    "yemsg": 1.0,
    "dicks": 0.75,
    "regular": 0.0,
}
HALLOWEEN_MONTH_DAY = "10-31"
NYE_WINDOW = ("12-28", "12-31")
DICKS_VENUE = "dick's"
YEMSG_VENUE = "madison square garden"
FESTIVAL_VENUES = (
    "Watkins Glen International",
    "Limestone",
    "Loring Commerce Centre",
    "Randall's Island",
    "Festival 8",
    "Magnaball",
    "Magna",
    "Curveball",
    "Mondegreen",
)

# ── PVS weights ───────────────────────────────────────────────────────
LENGTH_WEIGHT = 1.5
JAMCHART_BONUS = 1.5
BONUS_20_MIN = 0.5
BONUS_25_MIN = 1.0
ENCORE_LEVERAGE = 1.0
CLOSER_LEVERAGE = 0.75
OPENER_LEVERAGE = 0.5
MIDDLE_LEVERAGE = 0.0
SET_MULTIPLIERS = {"Set 2": 1.2, "Set 3": 1.3}
SET_LEVERAGE_DAMPING = 0.75

# ── WAR / JIS ─────────────────────────────────────────────────────────
REPLACEMENT_PERCENTILE = 20
JIS_SCALE = 10.0
JIS_MIDPOINT = 5.0

# ── Tours ─────────────────────────────────────────────────────────────
TOUR_GAP_DAYS = 5

# ── Filters ───────────────────────────────────────────────────────────
DEFAULT_YEAR_START = 2009
DEFAULT_MIN_TIMES_PLAYED = 5
DEFAULT_MIN_SHOWS_APPEARED = 3
DEFAULT_MIN_JAMCHART_COUNT = 0
DEFAULT_MIN_TOTAL_MINUTES = 0
SET_SPLITS = ("all", "set1", "set2", "set3", "encore", "opener", "closer")
SET_SPLIT_LABELS = {
    "set1": "Set 1",
    "set2": "Set 2",
    "set3": "Set 3",
    "encore": "Encore",
}
AGGREGATIONS = ("career", "byYear", "byTour")
COUNTRIES = ("all", "us", "international")

# ── Leaderboard ranking ──────────────────────────────────────────────
SORT_COLUMNS = (
    "war", "warPerPlay", "warPerShow", "avgJIS", "peakJIS",
    "timesPlayed", "jamRate", "jamchartCount",
)
DEFAULT_SORT_COLUMN = "war"
