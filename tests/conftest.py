"""Test configuration and fixtures"""

import tempfile
from pathlib import Path

import pytest

from song_filter.core.storage import FlatFileTitleStore, TitleStore


class FakeClock:
    """Controllable replacement for time.time()"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingStore(TitleStore):
    """In-memory TitleStore that records how often it is read"""

    def __init__(self, titles=None):
        self.titles = list(titles or [])
        self.loads = 0
        self.clears = 0

    def load_all_titles(self):
        self.loads += 1
        return list(self.titles)

    def append_title(self, title):
        self.titles.append(title)

    def clear_all(self):
        self.clears += 1
        self.titles.clear()


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def songs_file(temp_dir):
    """Path of a (not yet existing) downloaded-songs list"""
    return temp_dir / "downloaded_songs.txt"


@pytest.fixture
def store(songs_file):
    """Flat-file store in a temporary directory"""
    return FlatFileTitleStore(songs_file)


@pytest.fixture
def clock():
    """Fake clock starting at t=1000s"""
    return FakeClock()


@pytest.fixture
def counting_store():
    """In-memory store preloaded with two titles"""
    return CountingStore(["Daft Punk - One More Time", "Queen - Bohemian Rhapsody"])


@pytest.fixture
def daft_punk_titles():
    """Key plus two edits that match the key but not each other"""
    return [
        "Daft Punk - One More Time",
        "Daft Punk - One More Time (Radio Edit)",
        "Daft Punk - One More Time (Extended Mix)",
    ]

