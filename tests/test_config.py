# tests/test_config.py
"""Test configuration loading"""

from pathlib import Path

import pytest

from song_filter.core.config import (
    DEFAULT_SONGS_FILENAME,
    default_config,
    load_config,
)
from song_filter.core.exceptions import ConfigError


def write_config(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test load_config()"""

    def test_defaults_without_file(self, temp_dir, monkeypatch):
        """Test built-in defaults when the working directory has no config.yaml"""
        monkeypatch.chdir(temp_dir)
        config = load_config()

        assert config == default_config()
        assert config.filter.similarity_threshold == 0.70
        assert config.filter.cache_ttl_seconds == 30.0
        assert config.output.directory == (Path.home() / "Desktop" / "MUSICA").resolve()
        assert config.output.songs_file.name == DEFAULT_SONGS_FILENAME

    def test_reads_cwd_config(self, temp_dir, monkeypatch):
        """Test config.yaml in the working directory is picked up"""
        write_config(temp_dir / "config.yaml", "filter:\n  similarity_threshold: 0.9\n")
        monkeypatch.chdir(temp_dir)

        assert load_config().filter.similarity_threshold == 0.9

    def test_full_config(self, temp_dir):
        """Test every field"""
        music_dir = temp_dir / "music"
        path = write_config(
            temp_dir / "custom.yaml",
            "filter:\n"
            "  similarity_threshold: 0.8\n"
            "  cache_ttl_seconds: 5\n"
            "output:\n"
            f"  directory: \"{music_dir.as_posix()}\"\n"
            "  songs_file: \"lists/done.txt\"\n"
        )

        config = load_config(path)

        assert config.filter.similarity_threshold == 0.8
        assert config.filter.cache_ttl_seconds == 5.0
        assert config.output.directory == music_dir.resolve()
        assert config.output.songs_file == music_dir.resolve() / "lists" / "done.txt"

    def test_absolute_songs_file(self, temp_dir):
        """Test an absolute songs_file is kept as is"""
        songs = temp_dir / "elsewhere" / "songs.txt"
        path = write_config(
            temp_dir / "config.yaml",
            f"output:\n  directory: \"{temp_dir.as_posix()}\"\n  songs_file: \"{songs.as_posix()}\"\n"
        )
        assert load_config(path).output.songs_file == songs.resolve()

    def test_empty_file(self, temp_dir):
        """Test an empty file means all defaults"""
        path = write_config(temp_dir / "config.yaml", "")
        assert load_config(path).filter == default_config().filter


class TestConfigErrors:
    """Test invalid configurations"""

    def test_explicit_missing_file(self, temp_dir):
        """Test a missing explicit path"""
        with pytest.raises(ConfigError, match="not found"):
            load_config(temp_dir / "missing.yaml")

    def test_invalid_yaml(self, temp_dir):
        """Test YAML syntax errors"""
        path = write_config(temp_dir / "config.yaml", "filter: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_dictionary(self, temp_dir):
        """Test a top-level list"""
        path = write_config(temp_dir / "config.yaml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="dictionary"):
            load_config(path)

    def test_section_not_a_dictionary(self, temp_dir):
        """Test a scalar section"""
        path = write_config(temp_dir / "config.yaml", "filter: 0.7\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.details["section"] == "filter"

    @pytest.mark.parametrize("value", ["1.5", "-0.1", "\"high\"", "true"])
    def test_invalid_threshold(self, temp_dir, value):
        """Test thresholds outside [0, 1] or of the wrong type"""
        path = write_config(temp_dir / "config.yaml", f"filter:\n  similarity_threshold: {value}\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.details["field"] == "filter.similarity_threshold"

    @pytest.mark.parametrize("value", ["0", "-5", "\"soon\""])
    def test_invalid_ttl(self, temp_dir, value):
        """Test non-positive TTLs"""
        path = write_config(temp_dir / "config.yaml", f"filter:\n  cache_ttl_seconds: {value}\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.details["field"] == "filter.cache_ttl_seconds"

    def test_empty_directory(self, temp_dir):
        """Test a blank output directory"""
        path = write_config(temp_dir / "config.yaml", "output:\n  directory: \"  \"\n")
        with pytest.raises(ConfigError, match="output.directory"):
            load_config(path)
