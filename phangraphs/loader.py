"""Load track exports (tracks.json) into PerformanceRecords.

A source is either a local path or an http(s) URL.  Rows are dicts with
the export's keys:

    song_name, show_date, set_name, position, duration_ms,
    likes, is_jamchart, jam_notes, venue, location
"""

import json
import time

import requests

from phangraphs.config import HTTP_USER_AGENT, HTTP_RATE_LIMIT
from phangraphs.models import PerformanceRecord


def create_session(user_agent=HTTP_USER_AGENT):
    """Create a requests.Session with a User-Agent header."""
    s = requests.Session()
    s.headers["User-Agent"] = user_agent
    return s


def api_get_with_retry(session, url, params=None, rate_limit=HTTP_RATE_LIMIT,
                       max_retries=3):
    """GET JSON with rate limiting and retry on 429/5xx.

    Args:
        session: requests.Session to use
        url: Request URL
        params: Optional query parameters
        rate_limit: Seconds to wait after a successful request
        max_retries: Number of retry attempts before a final raise
    """
    for attempt in range(max_retries):
        resp = session.get(url, params=params)
        if resp.status_code == 429 or resp.status_code >= 500:
            retry_after = int(resp.headers.get("Retry-After", 2 ** attempt))
            print(f"    HTTP {resp.status_code}, retrying in {retry_after}s "
                  f"(attempt {attempt + 1}/{max_retries})")
            time.sleep(retry_after)
            continue
        resp.raise_for_status()
        time.sleep(rate_limit)
        return resp.json()
    # Final attempt, let it raise
    resp = session.get(url, params=params)
    resp.raise_for_status()
    time.sleep(rate_limit)
    return resp.json()


def is_url(source):
    return source.startswith(("http://", "https://"))


def fetch_rows(source, session=None, verbose=True):
    """Return the raw row dicts from a local JSON file or a URL."""
    if is_url(source):
        session = session or create_session()
        rows = api_get_with_retry(session, source)
    else:
        with open(source) as f:
            rows = json.load(f)
    if verbose:
        print(f"  Loaded {len(rows)} tracks from {source}")
    return rows


def record_from_row(row):
    """Build a PerformanceRecord from one export row, or None if unusable."""
    song_name = (row.get("song_name") or "").strip()
    show_date = (row.get("show_date") or "").strip()
    if not song_name or not show_date:
        return None
    return PerformanceRecord(
        song_name=song_name,
        show_date=show_date,
        set_name=row.get("set_name") or "",
        position=int(row.get("position") or 0),
        duration_ms=int(row.get("duration_ms") or 0),
        is_jamchart=int(row.get("is_jamchart") or 0),
        venue=row.get("venue") or "",
        location=row.get("location") or "",
        likes=int(row.get("likes") or 0),
        jam_notes=row.get("jam_notes") or "",
    )


def records_from_rows(rows):
    """Convert export rows, dropping rows without a song name or show date."""
    records = []
    for row in rows:
        record = record_from_row(row)
        if record is not None:
            records.append(record)
    return records


def load_tracks(source, verbose=True):
    """Load PerformanceRecords from a local JSON file or a URL."""
    return records_from_rows(fetch_rows(source, verbose=verbose))

