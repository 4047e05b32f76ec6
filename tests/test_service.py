# tests/test_service.py
"""Test the song filter service"""

import pytest

from song_filter.core.config import Config, FilterConfig, OutputConfig
from song_filter.core.exceptions import StorageError
from song_filter.filter.cache import DedupCache
from song_filter.filter.duplicate_finder import DuplicateFinder
from song_filter.filter.models import Song
from song_filter.filter.service import FilterService, SongFilterService


@pytest.fixture
def service(counting_store, clock):
    """Service over the in-memory store"""
    cache = DedupCache(counting_store, DuplicateFinder(0.70), ttl_seconds=30, clock=clock)
    return SongFilterService(cache)


def make_config(directory, threshold=0.70, ttl=30.0, songs_file="downloaded_songs.txt"):
    return Config(
        filter=FilterConfig(similarity_threshold=threshold, cache_ttl_seconds=ttl),
        output=OutputConfig(directory=directory, songs_file=directory / songs_file),
    )


class TestConstruction:
    """Test building the service"""

    def test_is_filter_service(self, service):
        """Test the service implements the FilterService contract"""
        assert isinstance(service, FilterService)

    def test_from_config(self, temp_dir):
        """Test configuration values reach the cache"""
        service = SongFilterService.from_config(make_config(temp_dir, threshold=0.9, ttl=5))

        assert service.similarity_threshold == 0.9
        assert service.cache.ttl_seconds == 5

        service.register_downloaded_song("Coldplay - Yellow")
        assert (temp_dir / "downloaded_songs.txt").read_text(encoding="utf-8") == "Coldplay - Yellow\n"

    def test_from_config_rejects_directory(self, temp_dir):
        """Test a songs file path that is a directory"""
        (temp_dir / "songs").mkdir()
        with pytest.raises(StorageError):
            SongFilterService.from_config(make_config(temp_dir, songs_file="songs"))


class TestDuplicateChecks:
    """Test title and Song level checks"""

    def test_titles_and_songs(self, service):
        """Test raw titles and Song objects are both accepted"""
        assert service.is_duplicate_song("Queen - Bohemian Rhapsody (Official Video)")
        assert service.song_exists(Song(title="QUEEN - BOHEMIAN RHAPSODY [HD]"))
        assert not service.song_exists(Song(title="Coldplay - Yellow"))
        assert not service.song_exists(None)

    def test_register_marks_song(self, service, counting_store):
        """Test registering a Song flags it as downloaded"""
        song = Song(title="Coldplay - Yellow")
        service.register_downloaded_song(song)

        assert song.downloaded
        assert counting_store.titles[-1] == "Coldplay - Yellow"
        assert service.song_exists("Coldplay - Yellow (Official Video)")

    def test_register_ignores_untitled(self, service, counting_store):
        """Test songs without title are not registered"""
        song = Song()
        service.register_downloaded_song(song)

        assert not song.downloaded
        assert len(counting_store.titles) == 2

    def test_find_match(self, service):
        """Test the closest downloaded title"""
        assert service.find_match(Song(title="Daft Punk - One More Time (Radio Edit)")) == "Daft Punk - One More Time"
        assert service.find_match("Radiohead - Creep") is None


class TestBatchOperations:
    """Test batch-level operations"""

    def test_filter_duplicates(self, service):
        """Test batch-local dedup"""
        songs = [Song(title="Song [HD]"), Song(title="song"), Song(title="Other")]
        assert [s.title for s in service.filter_duplicates(songs)] == ["Song [HD]", "Other"]

    def test_find_similar_songs(self, service, daft_punk_titles):
        """Test key-anchored grouping of Song objects"""
        key, radio, extended = daft_punk_titles
        songs = [Song(title=radio), Song(title=key), Song(title=extended), Song(title="Radiohead - Creep")]

        groups = service.find_similar_songs(songs, 0.70)
        assert [[s.title for s in group] for group in groups] == [[radio, key]]

    def test_find_similar_songs_threshold(self, service, daft_punk_titles):
        """Test the threshold argument overrides the configured one"""
        songs = [Song(title=title) for title in daft_punk_titles]

        assert len(service.find_similar_songs(songs, 0.60)[0]) == 3
        assert service.find_similar_songs(songs, 0.99) == []
        assert len(service.find_similar_songs(songs, -1.0)[0]) == 3
        assert service.find_similar_songs(None, 0.7) == []

    def test_group_similar_songs(self, service, daft_punk_titles):
        """Test grouping raw titles with the configured threshold"""
        groups = service.group_similar_songs(daft_punk_titles)
        assert list(groups) == [daft_punk_titles[0]]

    def test_load_downloaded_songs(self, service, counting_store):
        """Test a forced reload returns sorted Song objects"""
        service.get_downloaded_songs()
        counting_store.titles.append("ABBA - Waterloo")

        songs = service.load_downloaded_songs()

        assert [s.title for s in songs] == [
            "ABBA - Waterloo",
            "Daft Punk - One More Time",
            "Queen - Bohemian Rhapsody",
        ]
        assert all(s.downloaded for s in songs)
        assert counting_store.loads == 2

    def test_save_and_update(self, service, counting_store):
        """Test in-memory replacement through the service"""
        service.get_downloaded_songs()
        service.save_downloaded_songs([Song(title="Coldplay - Yellow")])
        assert service.get_downloaded_songs() == {"Coldplay - Yellow"}

        service.update_cache(["Radiohead - Creep"])
        assert service.get_downloaded_songs() == {"Radiohead - Creep"}
        assert "Radiohead - Creep" not in counting_store.titles

    def test_clear_reset_statistics(self, service, counting_store):
        """Test cache management"""
        service.get_downloaded_songs()
        service.clear_cache()
        assert service.get_statistics().last_cache_update is None

        service.reset()
        assert counting_store.titles == []
        assert service.get_statistics().total_downloaded_songs == 0


class TestSimilarityHelpers:
    """Test similarity helpers on raw titles"""

    def test_calculate_similarity(self, service):
        """Test combined score of raw titles"""
        assert service.calculate_similarity("Song [HD]", "SONG") == 1.0
        assert service.calculate_similarity("Imagine Dragons - Believer", "Believer - Imagine Dragons") == 0.7
        assert service.calculate_similarity(None, "Song") == 0.0

    def test_are_similar(self, service):
        """Test the configured threshold is used"""
        assert service.are_similar("Coldplay - Yellow", "Coldplay - Yellow (Live)")
        assert not service.are_similar("Artist - Song", "Artist - Song (Remix)")

    def test_similarity_breakdown(self, service):
        """Test per-metric scores of raw titles"""
        breakdown = service.similarity_breakdown("Coldplay - Yellow", "Coldplay - Yellow (Live)")
        assert breakdown.edit == pytest.approx(0.75)
        assert breakdown.jaccard == pytest.approx(2 / 3)
        assert breakdown.containment == 0.8
        assert breakdown.combined == pytest.approx(0.74)
        assert service.similarity_breakdown(None, "x").combined == 0.0

    def test_is_valid_url(self, service):
        """Test URL validation through the service"""
        assert service.is_valid_url("https://www.youtube.com/watch?v=abc")
        assert not service.is_valid_url("www.youtube.com/watch?v=abc")
