# tests/test_progress.py
"""Test the import progress bar"""

from song_filter.core.progress import ImportProgressBar


class TestImportProgressBar:
    """Test ImportProgressBar counters"""

    def test_counts(self):
        """Test registered and skipped titles are counted separately"""
        with ImportProgressBar(total=3) as progress:
            progress.update(registered=True)
            progress.update(registered=False)
            progress.update(registered=True)

        assert progress.completed == 3
        assert progress.registered == 2
        assert progress.skipped == 1

    def test_status_text(self):
        """Test the skipped counter only shows once something was skipped"""
        progress = ImportProgressBar(total=2)
        assert "⊘" not in progress._get_status_text()

        progress.update(registered=False)
        assert "⊘ 1" in progress._get_status_text()
