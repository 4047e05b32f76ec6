"""
Similarity scoring between normalized song titles.

No single string metric is robust for song titles:
    - Edit distance breaks on reordered words
      ("Song Title - Artist" vs "Artist - Song Title")
    - Token Jaccard breaks on near-identical single-token titles
    - Containment catches truncated/extended titles (remixes, extended mixes)

The combined score fuses the three with fixed weights, biased toward
edit distance as the primary signal.

Combined Score:
    1.0 if both normalized titles are identical, otherwise
    0.4 * edit + 0.3 * jaccard + 0.3 * containment

    rounded to SCORE_PRECISION (10) decimals. The rounding is part of the
    score: edit 1 - 12/15, jaccard 4/5 and containment 3/5 sum to
    0.49999999999999994 in floating point and are returned as 0.5, so a
    title pair can sit exactly on a threshold. Compare scores against
    thresholds with at most 10 decimals.

All functions expect titles that already went through normalize(),
except are_similar() and find_best_candidate() which normalize raw titles
themselves.

Dependencies:
    - rapidfuzz: Levenshtein distance (unit-cost insert/delete/substitute)

Usage:
    from song_filter.filter.similarity import combined_similarity

    combined_similarity("imagine dragons believer", "believer imagine dragons")
    # 0.7
"""

from typing import Iterable

from rapidfuzz.distance import Levenshtein

from song_filter.filter.models import SimilarityBreakdown
from song_filter.filter.normalizer import extract_keywords, normalize


# Weights of the combined score (sum to 1.0)
EDIT_WEIGHT = 0.4
JACCARD_WEIGHT = 0.3
CONTAINMENT_WEIGHT = 0.3

# Containment score when one whole title contains the other (a fixed
# heuristic, not a ratio)
SUBSTRING_CONTAINMENT_SCORE = 0.8

# Tokens this short never count toward token containment ("dj", "ft", "a")
MIN_CONTAINMENT_TOKEN_LENGTH = 3

# Combined scores are rounded so that boundary values such as
# 0.4 * (1 - 12 / 15) + 0.3 * 0.8 + 0.3 * 0.6 compare equal to 0.5 instead of 0.4999...
SCORE_PRECISION = 10


def levenshtein_distance(s1: str, s2: str) -> int:
    """Number of single-character insertions, deletions and substitutions."""
    return Levenshtein.distance(s1, s2)


def levenshtein_similarity(s1: str, s2: str) -> float:
    """
    Edit distance scaled to [0, 1] by the longer string's length.

    Two empty strings are identical (1.0).
    """
    max_length = max(len(s1), len(s2))
    if max_length == 0:
        return 1.0

    return 1.0 - levenshtein_distance(s1, s2) / max_length


def jaccard_similarity(s1: str, s2: str) -> float:
    """Size of the shared token set over the size of the token union."""
    words1 = set(extract_keywords(s1))
    words2 = set(extract_keywords(s2))

    union = words1 | words2
    if not union:
        return 0.0

    return len(words1 & words2) / len(union)


def containment_similarity(s1: str, s2: str) -> float:
    """
    How much one title is contained in the other.

    Returns SUBSTRING_CONTAINMENT_SCORE when either title is a substring
    of the other. Otherwise counts token pairs (both tokens at least
    MIN_CONTAINMENT_TOKEN_LENGTH long) where one token contains the other,
    divided by the larger token count and capped at 1.0. Empty titles
    score 0.0.
    """
    if not s1 or not s2:
        return 0.0

    if s2 in s1 or s1 in s2:
        return SUBSTRING_CONTAINMENT_SCORE

    words1 = extract_keywords(s1)
    words2 = extract_keywords(s2)

    matches = 0
    for word1 in words1:
        if len(word1) < MIN_CONTAINMENT_TOKEN_LENGTH:
            continue
        for word2 in words2:
            if len(word2) < MIN_CONTAINMENT_TOKEN_LENGTH:
                continue
            if word1 in word2 or word2 in word1:
                matches += 1

    # Repeated tokens can produce more matches than tokens
    return min(1.0, matches / max(len(words1), len(words2)))


def combined_similarity(normalized_title1: str | None, normalized_title2: str | None) -> float:
    """
    Fused similarity of two normalized titles.

    Args:
        normalized_title1: First title, already normalized.
        normalized_title2: Second title, already normalized.

    Returns:
        Score in [0.0, 1.0]. 1.0 only for identical titles (including two
        empty titles); 0.0 if either side is None. Symmetric in its
        arguments.
    """
    return similarity_breakdown(normalized_title1, normalized_title2).combined


def similarity_breakdown(
    normalized_title1: str | None,
    normalized_title2: str | None
) -> SimilarityBreakdown:
    """
    Compute every component metric and the combined score.

    Identical titles short-circuit to 1.0 on every metric. None on
    either side yields 0.0 everywhere.
    """
    if normalized_title1 is None or normalized_title2 is None:
        return SimilarityBreakdown(edit=0.0, jaccard=0.0, containment=0.0, combined=0.0)

    if normalized_title1 == normalized_title2:
        return SimilarityBreakdown(edit=1.0, jaccard=1.0, containment=1.0, combined=1.0)

    edit = levenshtein_similarity(normalized_title1, normalized_title2)
    jaccard = jaccard_similarity(normalized_title1, normalized_title2)
    containment = containment_similarity(normalized_title1, normalized_title2)

    combined = (
        EDIT_WEIGHT * edit
        + JACCARD_WEIGHT * jaccard
        + CONTAINMENT_WEIGHT * containment
    )

    return SimilarityBreakdown(
        edit=edit,
        jaccard=jaccard,
        containment=containment,
        combined=round(combined, SCORE_PRECISION),
    )


def are_similar(title1: str | None, title2: str | None, threshold: float) -> bool:
    """Normalize two raw titles and compare their combined score to threshold."""
    return combined_similarity(normalize(title1), normalize(title2)) >= threshold


def find_best_candidate(target: str | None, candidates: Iterable[str] | None) -> str | None:
    """
    Raw candidate with the highest combined score against target.

    Unlike DuplicateFinder.find_most_similar() no threshold applies: any
    candidate scoring above 0.0 can win. Ties keep the first candidate.

    Returns:
        The best candidate, or None when there are no candidates or none
        shares anything with target.
    """
    if not candidates:
        return None

    normalized_target = normalize(target)
    best: str | None = None
    best_score = 0.0

    for candidate in candidates:
        score = combined_similarity(normalized_target, normalize(candidate))
        if score > best_score:
            best_score = score
            best = candidate

    return best
