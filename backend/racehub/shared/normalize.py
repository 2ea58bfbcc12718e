"""
Normalization of raw provider strings.

Pure functions, no I/O. Latin alphabet only: characters outside a-z are
dropped, so names written in other scripts degrade to empty strings.
"""

import re

from .constants import Gender

_NON_LETTER = re.compile(r"[^a-z\s]")
_WHITESPACE = re.compile(r"\s+")

# Full state name (lower-case) -> postal code
STATE_CODES: dict[str, str] = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT",
    "delaware": "DE", "district of columbia": "DC", "florida": "FL",
    "georgia": "GA", "hawaii": "HI", "idaho": "ID", "illinois": "IL",
    "indiana": "IN", "iowa": "IA", "kansas": "KS", "kentucky": "KY",
    "louisiana": "LA", "maine": "ME", "maryland": "MD",
    "massachusetts": "MA", "michigan": "MI", "minnesota": "MN",
    "mississippi": "MS", "missouri": "MO", "montana": "MT",
    "nebraska": "NE", "nevada": "NV", "new hampshire": "NH",
    "new jersey": "NJ", "new mexico": "NM", "new york": "NY",
    "north carolina": "NC", "north dakota": "ND", "ohio": "OH",
    "oklahoma": "OK", "oregon": "OR", "pennsylvania": "PA",
    "rhode island": "RI", "south carolina": "SC", "south dakota": "SD",
    "tennessee": "TN", "texas": "TX", "utah": "UT", "vermont": "VT",
    "virginia": "VA", "washington": "WA", "west virginia": "WV",
    "wisconsin": "WI", "wyoming": "WY",
}


def clean_name(name: str | None) -> str:
    """
    Lower-case, strip everything but letters and spaces, collapse whitespace.

    "Sarah J. Chen " -> "sarah j chen"
    """
    if not name:
        return ""
    cleaned = _NON_LETTER.sub("", name.lower())
    return _WHITESPACE.sub(" ", cleaned).strip()


def clean_location(location: str | None) -> str:
    """Cleaned city name for comparison ("San Francisco" -> "san francisco")."""
    return clean_name(location)


def display_name(name: str) -> str:
    """Canonical display form of a raw name ("MARCUS  johnson" -> "Marcus Johnson")."""
    return clean_name(name).title()


def normalize_gender(gender: str | None) -> str:
    """
    Map a provider gender code to M / F / NB.

    Missing values default to "M".
    """
    if not gender or not gender.strip():
        return Gender.MALE.value
    g = gender.strip().lower()
    if g.startswith("f"):
        return Gender.FEMALE.value
    if g.startswith("m"):
        return Gender.MALE.value
    return Gender.NON_BINARY.value


def normalize_state(state: str | None) -> str:
    """
    Map a full state name to its 2-letter code.

    Unknown values are upper-cased as-is (no validation).
    """
    if not state:
        return ""
    key = _WHITESPACE.sub(" ", state.strip().lower())
    return STATE_CODES.get(key, state.strip().upper())


def parse_location_city(location: str | None) -> str | None:
    """City part of "City, ST"."""
    if not location:
        return None
    city = location.split(",")[0].strip()
    return city or None


def parse_location_state(location: str | None) -> str | None:
    """State part of "City, ST" (None if there is no comma)."""
    if not location:
        return None
    parts = location.split(",")
    if len(parts) < 2:
        return None
    return parts[1].strip() or None
