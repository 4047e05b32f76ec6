"""
Song title normalization.

Every comparison in the filter works on normalized titles: lowercase
ASCII letters, digits and single spaces, with brackets and the usual
upload noise ("Official Video", "[HD]", "Lyrics", ...) removed.

Normalization Steps (order matters):
    1. Lowercase
    2. Drop bracket characters [ ] ( ) { } (their contents stay)
    3. Drop noise words as whole tokens, so "videogame" survives
    4. Drop every character outside a-z, 0-9 and whitespace
    5. Drop noise words assembled by step 4 ("m.v." -> "mv")
    6. Collapse whitespace runs and trim

Example:
    normalize("Artist - Song Name (Official Video)")  # "artist song name"
    normalize("ARTIST - SONG NAME [Lyrics]")          # "artist song name"
"""

import re

NOISE_WORDS = (
    "official",
    "video",
    "lyrics",
    "audio",
    "hd",
    "4k",
    "music",
    "mv",
    "clip",
)

_BRACKETS_RE = re.compile(r"[\[\](){}]")
_NOISE_WORDS_RE = re.compile(r"\b(?:" + "|".join(NOISE_WORDS) + r")\b")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(title: str | None) -> str:
    """
    Convert a raw song title into its canonical comparison form.

    Args:
        title: Raw title as typed by a user or scraped from a page.
               None and empty strings are accepted.

    Returns:
        The normalized title, or "" for None/empty input. The result
        contains only [a-z0-9 ], never starts or ends with a space and
        never contains a noise word as a token. normalize() is
        idempotent.
    """
    if not title:
        return ""

    text = title.lower()
    text = _BRACKETS_RE.sub("", text)
    text = _NOISE_WORDS_RE.sub(" ", text)
    text = _NON_ALNUM_RE.sub("", text)
    text = _NOISE_WORDS_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def normalize_all(*titles: str | None) -> list[str]:
    """Normalize several titles at once, preserving order."""
    return [normalize(title) for title in titles]


def is_normalized(title: str | None) -> bool:
    """True if title is already in canonical form (False for None)."""
    if title is None:
        return False
    return title == normalize(title)


def extract_keywords(normalized_title: str | None) -> list[str]:
    """
    Split a normalized title into its non-empty tokens.

    Example:
        extract_keywords("daft punk one more time")
        # ["daft", "punk", "one", "more", "time"]
    """
    if not normalized_title or not normalized_title.strip():
        return []
    return normalized_title.split()
