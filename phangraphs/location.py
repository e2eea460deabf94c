"""Shared location parsing for region/venue extraction.

Locations look like "City, ST" for US shows and "City, Province, Country"
elsewhere.  Any trailing two-uppercase-letter segment is read as a US state
code, so a two-letter country abbreviation ("US") is indistinguishable
from a state.
"""

import re

# 50 US states + DC: abbreviation → full name
US_STATE_ABBREV = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "IA": "Iowa", "KS": "Kansas",
    "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma",
    "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah",
    "VT": "Vermont", "VA": "Virginia", "WA": "Washington", "WV": "West Virginia",
    "WI": "Wisconsin", "WY": "Wyoming", "DC": "District of Columbia",
}

_STATE_CODE = re.compile(r"^[A-Z]{2}$")


def parse_state(location):
    """Return the trailing two-letter region code of a location, or None.

        "Morrison, CO"              → "CO"
        "Toronto, Ontario, Canada"  → None
        "Morrison"                  → None
    """
    if not location:
        return None
    parts = location.split(",")
    if len(parts) < 2:
        return None
    last = parts[-1].strip()
    return last if _STATE_CODE.match(last) else None


def is_us_location(location):
    return parse_state(location) is not None


def state_name(code):
    """Full state name for a region code; unknown codes pass through."""
    if not code:
        return None
    return US_STATE_ABBREV.get(code, code)


def extract_unique_states(tracks):
    """Sorted distinct region codes across ``tracks``."""
    states = {parse_state(t.location) for t in tracks}
    states.discard(None)
    return sorted(states)


def extract_unique_venues(tracks):
    """Sorted distinct venue names across ``tracks``."""
    return sorted({t.venue for t in tracks})
