"""
Threshold-based duplicate detection over a collection of known titles.

DuplicateFinder answers three kinds of questions for a fixed similarity
threshold T:
    - Membership: is this title a duplicate of any known title?
    - Nearest match: which known title is the most similar one above T?
    - Clustering: how does a batch of titles group into similar songs?

Grouping Algorithm (key-anchored, single pass):
    1. Walk the items in input order, skipping items already grouped
    2. Open a group keyed by the current item
    3. Absorb every later, ungrouped item whose score against the KEY is >= T
    4. Keep only groups with two or more members

Because every candidate is compared against the key and never against
other members, grouping is not transitive: two members of a group may
not be similar to each other, and the result depends on input order.

Usage:
    from song_filter.filter.duplicate_finder import DuplicateFinder

    finder = DuplicateFinder(similarity_threshold=0.70)
    finder.is_duplicate("ARTIST - SONG NAME [Lyrics]", ["Artist - Song Name"])
    # True
"""

from typing import Callable, Collection, Iterable, Sequence, TypeVar

from song_filter.core.config import DEFAULT_SIMILARITY_THRESHOLD
from song_filter.core.logger import get_logger
from song_filter.filter.models import DuplicateStats
from song_filter.filter.normalizer import normalize
from song_filter.filter.similarity import combined_similarity

logger = get_logger(__name__)

T = TypeVar("T")


def clamp_threshold(threshold: float) -> float:
    """Clamp a similarity threshold into [0.0, 1.0]."""
    return max(0.0, min(1.0, threshold))


class DuplicateFinder:
    """
    Duplicate index for a fixed similarity threshold.

    The finder holds no titles itself: every query receives the known
    titles, so one instance can be shared between threads.

    Attributes:
        similarity_threshold: Minimum combined score for two titles to be
                              treated as the same song (read-only).
    """

    def __init__(self, similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> None:
        self._similarity_threshold = clamp_threshold(similarity_threshold)

    @property
    def similarity_threshold(self) -> float:
        return self._similarity_threshold

    def is_duplicate(self, title: str | None, known_titles: Collection[str] | None) -> bool:
        """
        Check whether a title duplicates any known title.

        An exact (case-sensitive) match short-circuits before any
        normalization. Otherwise the first known title whose combined
        score reaches the threshold decides; which one is found first
        depends on the iteration order of known_titles.

        Args:
            title: Incoming raw title.
            known_titles: Raw titles already accepted.

        Returns:
            True if the title is a duplicate. False for None/empty title
            or no known titles.
        """
        if not title or not known_titles:
            return False

        if title in known_titles:
            logger.debug(f"Exact duplicate found: '{title}'")
            return True

        normalized_title = normalize(title)

        for known in known_titles:
            if known is None:
                continue
            score = combined_similarity(normalized_title, normalize(known))
            if score >= self._similarity_threshold:
                logger.debug(
                    f"Similar song found: '{title}' ~ '{known}' (score: {score:.2f})"
                )
                return True

        return False

    def find_most_similar(
        self,
        title: str | None,
        known_titles: Iterable[str] | None
    ) -> str | None:
        """
        Return the known title most similar to title, if any reaches the threshold.

        Scans every known title. Ties keep the first title encountered.

        Returns:
            The best matching known title, or None when nothing scores
            at or above the threshold (or inputs are empty).
        """
        best_match, _ = self.find_most_similar_with_score(title, known_titles)
        return best_match

    def find_most_similar_with_score(
        self,
        title: str | None,
        known_titles: Iterable[str] | None
    ) -> tuple[str | None, float]:
        """Like find_most_similar() but also return the winning score (0.0 if none)."""
        if not title or not known_titles:
            return None, 0.0

        normalized_title = normalize(title)
        best_match: str | None = None
        best_score = 0.0

        for known in known_titles:
            if known is None:
                continue
            score = combined_similarity(normalized_title, normalize(known))
            if score >= self._similarity_threshold and (best_match is None or score > best_score):
                best_match = known
                best_score = score

        return best_match, best_score

    def group_similar(
        self,
        items: Sequence[T] | None,
        key: Callable[[T], str | None]
    ) -> list[list[T]]:
        """
        Group arbitrary items by the similarity of their titles.

        Args:
            items: Items to group, in the order that decides group keys.
            key: Returns the raw title of an item. Items with a None or
                 empty title are never grouped.

        Returns:
            Groups of two or more items, each starting with its key item,
            in the order the groups were opened.
        """
        if not items:
            return []

        titles = [key(item) if item is not None else None for item in items]
        normalized = [normalize(title) for title in titles]
        grouped = [False] * len(items)
        groups: list[list[T]] = []

        for i, item in enumerate(items):
            if grouped[i] or not titles[i]:
                continue

            grouped[i] = True
            group = [item]

            for j in range(i + 1, len(items)):
                if grouped[j] or not titles[j]:
                    continue
                if combined_similarity(normalized[i], normalized[j]) >= self._similarity_threshold:
                    grouped[j] = True
                    group.append(items[j])

            if len(group) > 1:
                groups.append(group)

        return groups

    def group_similar_titles(self, titles: Sequence[str] | None) -> dict[str, list[str]]:
        """
        Group raw titles into key-anchored similarity clusters.

        Example:
            finder.group_similar_titles([
                "Daft Punk - One More Time",
                "Daft Punk - One More Time (Radio Edit)",
                "Daft Punk - One More Time (Extended Mix)",
            ])
            # {"Daft Punk - One More Time": [all three titles]}
            # although the two edits score below 0.70 against each other

        Returns:
            Mapping of key title to its group (key first), insertion
            ordered. Only groups with two or more titles are included.
        """
        return {
            group[0]: group
            for group in self.group_similar(titles, key=lambda title: title)
        }

    def remove_duplicates(self, titles: Iterable[str] | None) -> list[str]:
        """
        Drop titles that duplicate an earlier kept title.

        Titles are accepted in input order; each one is checked against
        the titles accepted so far. None and empty titles are dropped.
        """
        if not titles:
            return []

        unique: list[str] = []
        for title in titles:
            if not title:
                continue
            if not self.is_duplicate(title, unique):
                unique.append(title)

        return unique

    def calculate_duplicate_stats(self, titles: Sequence[str] | None) -> DuplicateStats:
        """
        Summarize how many duplicates a batch of titles contains.

        None and empty titles are not counted.
        """
        valid_titles = [title for title in titles or [] if title]
        total = len(valid_titles)
        unique = len(self.remove_duplicates(valid_titles))
        groups = len(self.group_similar_titles(valid_titles))
        percentage = (total - unique) / total * 100 if total else 0.0

        return DuplicateStats(
            total_titles=total,
            unique_titles=unique,
            duplicate_groups=groups,
            duplicate_percentage=percentage,
            similarity_threshold=self._similarity_threshold,
        )
