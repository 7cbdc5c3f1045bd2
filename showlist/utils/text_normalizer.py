"""Text normalization utilities for artist, venue and city names.

This module handles four distinct normalization concerns:

1. **Identity normalization** -- Lower-cases, strips leading articles and
   "DJ" prefixes, trailing "band"/"music"/"group" suffixes and unifies
   typographic punctuation so that "The Strokes" and "the strokes"
   produce the same identity key.

2. **Display helpers** -- URL-safe slugs and title-casing for city
   fallbacks.

3. **City aliases** -- Maps the shorthand used in hand-written listings
   ("sf", "s.f.", "san fran") to canonical city names.

4. **Artist splitting and fuzzy matching** -- Splits a billing line into
   individual names and finds near-duplicate names via rapidfuzz so that
   typos ("Thee Oh Sees" / "Thee Oh Seez") can be flagged for review.
"""

import re

from rapidfuzz import fuzz, process

# Leading articles / prefixes that never form part of an identity key.
_PREFIX_PATTERN = re.compile(r"^(?:the|dj|a)\s+", re.IGNORECASE)
_SUFFIX_PATTERN = re.compile(r"\s+(?:band|music|group)$", re.IGNORECASE)

_PUNCTUATION_MAP = str.maketrans(
    {
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
        "–": "-",
        "—": "-",
    }
)


def normalize_name(name: str) -> str:
    """Normalize an artist or venue name into its identity key.

    Args:
        name: Raw name as written in the listing.

    Returns:
        Lower-cased, prefix/suffix-stripped, punctuation-unified key.
    """
    normalized = name.lower().strip()
    normalized = _PREFIX_PATTERN.sub("", normalized)
    normalized = _SUFFIX_PATTERN.sub("", normalized)
    normalized = normalized.translate(_PUNCTUATION_MAP)
    normalized = re.sub(r"\s+", " ", normalized)
    return normalized.strip()


def create_slug(text: str) -> str:
    """Create a URL-safe slug ("Fox Theater" -> "fox-theater")."""
    slug = text.lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def to_title_case(text: str) -> str:
    """Title-case each whitespace-delimited word, leaving the rest lower-case."""
    return re.sub(r"\S+", lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


# ------------------------------------------------------------------
# City aliases
# ------------------------------------------------------------------

CITY_ALIASES: dict[str, str] = {
    "sf": "San Francisco",
    "s.f": "San Francisco",
    "san francisco": "San Francisco",
    "san fran": "San Francisco",
    "oakland": "Oakland",
    "berkeley": "Berkeley",
    "san jose": "San Jose",
    "santa cruz": "Santa Cruz",
    "petaluma": "Petaluma",
    "napa": "Napa",
    "novato": "Novato",
    "saratoga": "Saratoga",
    "palo alto": "Palo Alto",
    "santa rosa": "Santa Rosa",
    "livermore": "Livermore",
    "san leandro": "San Leandro",
}


def normalize_city(city: str, extra_aliases: dict[str, str] | None = None) -> str:
    """Map a raw city token to its canonical name.

    Unknown cities fall back to title case ("emeryville" -> "Emeryville").
    A single trailing period is ignored so "S.F." matches "s.f".

    Args:
        city: Raw city token or phrase.
        extra_aliases: Additional lower-case alias -> city mappings from config.

    Returns:
        Canonical city name, or an empty string for empty input.
    """
    key = city.lower().strip().rstrip(".")
    key = re.sub(r"\s+", " ", key)
    if not key:
        return ""
    if extra_aliases and key in extra_aliases:
        return extra_aliases[key]
    return CITY_ALIASES.get(key) or to_title_case(key)


# ------------------------------------------------------------------
# Artist names
# ------------------------------------------------------------------

# Connectives between co-billed artists.  "&" only counts when spaced so
# names like "AT&T" survive.
_SEPARATOR_PATTERN = re.compile(
    r",\s*|\s+&\s+|\s+with\s+|\s+feat\.?\s+|\s+ft\.\s+|\s+featuring\s+",
    re.IGNORECASE,
)

# Labels that introduce a continuation line ("with Special Guest",
# "special guests: Franz Ferdinand").
_LEADING_LABEL_PATTERN = re.compile(
    r"^(?:special\s+guests?\s*:\s*|special\s+guests?\s+|with\s+|w/\s*"
    r"|feat\.?\s+|featuring\s+|and\s+|&\s*)",
    re.IGNORECASE,
)


def split_artist_names(raw: str) -> list[str]:
    """Split a billing line into individual artist names.

    "The Strokes, Arctic Monkeys & Franz Ferdinand" ->
    ["The Strokes", "Arctic Monkeys", "Franz Ferdinand"].

    Args:
        raw: Artist line, possibly joined from several continuation lines.

    Returns:
        List of names stripped of whitespace and leading connectives.
    """
    names: list[str] = []
    for part in _SEPARATOR_PATTERN.split(raw):
        name = _LEADING_LABEL_PATTERN.sub("", part.strip()).strip()
        if name:
            names.append(name)
    return names


def fuzzy_match(
    query: str,
    candidates: list[str],
    threshold: float = 0.8,
) -> tuple[str, float] | None:
    """Find the best fuzzy match for a query among candidates.

    Uses rapidfuzz ``token_sort_ratio`` which sorts tokens alphabetically
    before comparing, so word-order differences ("Cox Carl" / "Carl Cox")
    still match.

    Args:
        query: The string to match.
        candidates: List of candidate strings to match against.
        threshold: Minimum similarity score (0.0--1.0) to accept a match.

    Returns:
        A (best_match, score) tuple if a match meets the threshold, else None.
    """
    if not candidates:
        return None

    result = process.extractOne(
        query,
        candidates,
        scorer=fuzz.token_sort_ratio,
        score_cutoff=threshold * 100,  # rapidfuzz uses 0-100 scale internally
    )

    if result is None:
        return None

    match_str, score, _ = result
    return (match_str, score / 100.0)
