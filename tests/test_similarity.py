# tests/test_similarity.py
"""Test similarity scoring"""

import itertools

import pytest

from song_filter.filter.normalizer import normalize
from song_filter.filter.similarity import (
    SCORE_PRECISION,
    SUBSTRING_CONTAINMENT_SCORE,
    are_similar,
    combined_similarity,
    containment_similarity,
    find_best_candidate,
    jaccard_similarity,
    levenshtein_distance,
    levenshtein_similarity,
    similarity_breakdown,
)

TITLE_PAIRS = [
    ("Imagine Dragons - Believer", "Believer - Imagine Dragons"),
    ("Queen - Bohemian Rhapsody", "Bohemian Rhapsody - Queen"),
    ("Daft Punk - One More Time", "Daft Punk - One More Time (Radio Edit)"),
    ("Coldplay - Yellow", "Coldplay - Fix You"),
    ("Nirvana - Smells Like Teen Spirit", "Radiohead - Creep"),
    ("abc abc abc", "xabcx abcde"),
    ("Song One", ""),
]


class TestComponentMetrics:
    """Test the three metrics individually"""

    def test_levenshtein_distance(self):
        """Test unit-cost edit distance"""
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_levenshtein_similarity(self):
        """Test edit distance scaled by the longer string"""
        assert levenshtein_similarity("", "") == 1.0
        assert levenshtein_similarity("abc", "") == 0.0
        assert levenshtein_similarity("kitten", "sitting") == pytest.approx(4 / 7)

    def test_jaccard_similarity(self):
        """Test token set overlap"""
        assert jaccard_similarity("a b", "b c") == pytest.approx(1 / 3)
        assert jaccard_similarity("b a a", "a b") == 1.0
        assert jaccard_similarity("", "") == 0.0
        assert jaccard_similarity("abc", "") == 0.0

    def test_containment_substring(self):
        """Test the fixed score for whole-title containment"""
        assert containment_similarity("artist song", "artist song remix") == SUBSTRING_CONTAINMENT_SCORE
        assert containment_similarity("artist song remix", "artist song") == 0.8

    def test_containment_tokens(self):
        """Test pairwise token containment"""
        assert containment_similarity(
            "imagine dragons believer", "believer imagine dragons"
        ) == 1.0
        # Only "coldplay" is shared
        assert containment_similarity("coldplay yellow", "coldplay fix you") == pytest.approx(1 / 3)

    def test_containment_ignores_short_tokens(self):
        """Test that tokens of two characters never match"""
        assert containment_similarity("dj ab", "dj cd") == 0.0

    def test_containment_is_capped(self):
        """Test repeated tokens cannot push the score above 1.0"""
        assert containment_similarity("abc abc abc", "xabcx abcde") == 1.0

    def test_containment_empty(self):
        """Test that empty titles contain nothing"""
        assert containment_similarity("", "abc") == 0.0
        assert containment_similarity("abc", "") == 0.0


class TestCombinedSimilarity:
    """Test combined_similarity() and similarity_breakdown()"""

    def test_identical_titles(self):
        """Test score(x, x) == 1.0 including the empty title"""
        for title in ("", "daft punk one more time", "a"):
            assert combined_similarity(title, title) == 1.0

    def test_none_scores_zero(self):
        """Test that a missing title never matches"""
        assert combined_similarity(None, "abc") == 0.0
        assert combined_similarity("abc", None) == 0.0
        assert combined_similarity(None, None) == 0.0

    def test_reordered_title_hits_default_threshold(self):
        """Test the word-order scenario lands exactly on 0.70"""
        a = normalize("Imagine Dragons - Believer")
        b = normalize("Believer - Imagine Dragons")
        assert combined_similarity(a, b) == 0.7

        breakdown = similarity_breakdown(a, b)
        assert breakdown.edit == pytest.approx(0.25)
        assert breakdown.jaccard == 1.0
        assert breakdown.containment == 1.0
        assert breakdown.combined == 0.7

    def test_combined_score_is_rounded(self):
        """Test the combined score never carries more than SCORE_PRECISION decimals"""
        key = normalize("Daft Punk - One More Time")
        for title in ("Daft Punk - One More Time (Radio Edit)", "Coldplay - Yellow (Live)"):
            score = combined_similarity(key, normalize(title))
            assert score == round(score, SCORE_PRECISION)

        # The unrounded sum misses a threshold it mathematically reaches
        assert 0.4 * (1 - 12 / 15) + 0.3 * (4 / 5) + 0.3 * (3 / 5) < 0.5
        assert round(0.4 * (1 - 12 / 15) + 0.3 * (4 / 5) + 0.3 * (3 / 5), SCORE_PRECISION) == 0.5

    def test_extended_titles(self):
        """Test scores of an original against its edits"""
        key = normalize("Daft Punk - One More Time")
        radio = normalize("Daft Punk - One More Time (Radio Edit)")
        extended = normalize("Daft Punk - One More Time (Extended Mix)")

        assert combined_similarity(key, radio) == pytest.approx(0.7248739496)
        assert combined_similarity(key, extended) == pytest.approx(0.7098412698)
        assert combined_similarity(radio, extended) == pytest.approx(0.6809523810)

    def test_unrelated_titles(self):
        """Test that different songs score low"""
        a = normalize("Nirvana - Smells Like Teen Spirit")
        b = normalize("Radiohead - Creep")
        assert combined_similarity(a, b) < 0.2

    @pytest.mark.parametrize("title1,title2", TITLE_PAIRS)
    def test_symmetric(self, title1, title2):
        """Test score(a, b) == score(b, a)"""
        a, b = normalize(title1), normalize(title2)
        assert combined_similarity(a, b) == combined_similarity(b, a)

    def test_bounds(self):
        """Test every score lies in [0, 1] and only identical titles reach 1.0"""
        titles = [normalize(t) for pair in TITLE_PAIRS for t in pair]
        for a, b in itertools.product(titles, repeat=2):
            score = combined_similarity(a, b)
            assert 0.0 <= score <= 1.0
            if a != b:
                assert score < 1.0

    def test_breakdown_of_none(self):
        """Test the breakdown of a missing title"""
        breakdown = similarity_breakdown(None, "abc")
        assert (breakdown.edit, breakdown.jaccard, breakdown.containment, breakdown.combined) == (
            0.0, 0.0, 0.0, 0.0
        )


class TestRawTitleHelpers:
    """Test are_similar() and find_best_candidate()"""

    def test_are_similar(self):
        """Test threshold comparison of raw titles"""
        assert are_similar("Artist - Song Name (Official Video)", "ARTIST - SONG NAME [Lyrics]", 0.70)
        assert are_similar("Imagine Dragons - Believer", "Believer - Imagine Dragons", 0.70)
        assert not are_similar("Artist - Song", "Artist - Song (Remix)", 0.70)
        assert not are_similar("Coldplay - Yellow", "Coldplay - Fix You", 0.70)

    def test_find_best_candidate(self):
        """Test that the highest scoring candidate wins without a threshold"""
        candidates = ["Coldplay - Fix You", "Coldplay - Yellow (Live)", "Radiohead - Creep"]
        assert find_best_candidate("Coldplay - Yellow", candidates) == "Coldplay - Yellow (Live)"
        assert find_best_candidate("Coldplay - Something", ["Coldplay - Fix You"]) == "Coldplay - Fix You"

    def test_find_best_candidate_empty(self):
        """Test missing candidates"""
        assert find_best_candidate("Coldplay - Yellow", []) is None
        assert find_best_candidate("Coldplay - Yellow", None) is None
        assert find_best_candidate("abc", ["xyz"]) is None
