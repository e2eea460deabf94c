"""JSON caching helpers (two-level directory, atomic writes) and the
in-process track store."""

import json
import os
import tempfile
import time
from pathlib import Path

from phangraphs.config import TRACKS_CACHE_KEY
from phangraphs.loader import fetch_rows, records_from_rows


def cache_path(cache_dir, identifier):
    """Two-level cache path: cache_dir/prefix/identifier.json"""
    prefix = identifier[:4] if len(identifier) >= 4 else identifier
    return Path(cache_dir) / prefix / f"{identifier}.json"


def read_cache(cache_dir, identifier, max_age_seconds=0):
    """Read cached JSON for an identifier. Returns the data or None."""
    path = cache_path(cache_dir, identifier)
    if not path.exists():
        return None
    if max_age_seconds > 0:
        age = time.time() - path.stat().st_mtime
        if age > max_age_seconds:
            return None
    try:
        return json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return None


def write_cache(cache_dir, identifier, data):
    """Atomically write JSON to cache."""
    path = cache_path(cache_dir, identifier)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


class TrackStore:
    """Loads a track dataset once and hands out the same list afterwards.

    Construct one per process and pass it to whatever needs the records.
    With ``cache_dir`` set, the raw rows are also kept on disk so later
    runs can skip the download until ``max_age_days`` have passed.
    """

    def __init__(self, source, cache_dir=None, max_age_days=0,
                 cache_key=TRACKS_CACHE_KEY, verbose=True):
        self.source = source
        self.cache_dir = cache_dir
        self.cache_key = cache_key
        self.max_age_days = max_age_days
        self.verbose = verbose
        self._tracks = None

    def tracks(self):
        """Return the loaded PerformanceRecords, loading on first call."""
        if self._tracks is None:
            self._tracks = self._load()
        return self._tracks

    def clear(self):
        self._tracks = None

    def _load(self):
        rows = None
        if self.cache_dir:
            rows = read_cache(self.cache_dir, self.cache_key,
                              max_age_seconds=self.max_age_days * 86400)
            if rows is not None and self.verbose:
                print(f"  Using cached tracks from {self.cache_dir}")
        if rows is None:
            rows = fetch_rows(self.source, verbose=self.verbose)
            if self.cache_dir:
                write_cache(self.cache_dir, self.cache_key, rows)
        return records_from_rows(rows)
