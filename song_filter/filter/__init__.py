"""
Duplicate song detection for song-filter.

This module decides whether an incoming song title is "the same song" as
one already downloaded, even when titles differ in case, bracketed tags,
punctuation or word order.

Components:
    - normalizer: Canonical comparison form of a title
    - similarity: Combined edit/token/containment similarity score
    - DuplicateFinder: Threshold-based membership, nearest match, grouping
    - DedupCache: TTL cache of the downloaded titles
    - SongFilterService: Service used by the rest of the application

Usage:
    from song_filter.filter import DuplicateFinder, normalize

    finder = DuplicateFinder(0.70)
    finder.is_duplicate(
        "Imagine Dragons - Believer",
        ["Believer - Imagine Dragons"]
    )
    # True
"""

from song_filter.filter.cache import DedupCache
from song_filter.filter.duplicate_finder import DuplicateFinder, clamp_threshold
from song_filter.filter.models import (
    CacheStatistics,
    DuplicateStats,
    SimilarityBreakdown,
    Song,
)
from song_filter.filter.normalizer import extract_keywords, normalize
from song_filter.filter.service import FilterService, SongFilterService
from song_filter.filter.similarity import (
    are_similar,
    combined_similarity,
    find_best_candidate,
    similarity_breakdown,
)

__all__ = [
    # Models
    "Song",
    "SimilarityBreakdown",
    "DuplicateStats",
    "CacheStatistics",
    # Normalization and scoring
    "normalize",
    "extract_keywords",
    "combined_similarity",
    "similarity_breakdown",
    "are_similar",
    "find_best_candidate",
    # Duplicate detection
    "DuplicateFinder",
    "clamp_threshold",
    "DedupCache",
    # Service
    "FilterService",
    "SongFilterService",
]
