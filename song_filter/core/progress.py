"""
Progress bar handling for song-filter using Rich library.

Used by batch operations that walk many titles (importing a directory of
audio files or a text file of titles into the downloaded-songs list).

Usage:
    from song_filter.core.progress import ImportProgressBar

    with ImportProgressBar(total=len(titles)) as progress:
        for title in titles:
            registered = process(title)
            progress.update(registered=registered)
"""

from abc import ABC, abstractmethod
from typing import Optional

from rich import get_console
from rich.console import JustifyMethod, OverflowMethod
from rich.progress import BarColumn, Progress, ProgressColumn, Task, TaskID
from rich.style import StyleType
from rich.text import Text
from rich.theme import Theme


PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(165,66,129)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(165,66,129)",
    "progress.percentage": "white",
})


class SizedTextColumn(ProgressColumn):
    """
    Text column truncated (with ellipsis) to a fixed width.
    """

    def __init__(
        self,
        text_format: str,
        style: StyleType = "none",
        justify: JustifyMethod = "left",
        overflow: Optional[OverflowMethod] = None,
        width: int = 20,
    ) -> None:
        self.text_format = text_format
        self.justify: JustifyMethod = justify
        self.style = style
        self.overflow: Optional[OverflowMethod] = overflow
        self.width = width
        super().__init__()

    def render(self, task: Task) -> Text:
        """Render the column."""
        text = Text.from_markup(
            self.text_format.format(task=task),
            style=self.style,
            justify=self.justify,
        )
        text.truncate(max_width=self.width, overflow=self.overflow, pad=True)
        return text


class BaseProgressBar(ABC):
    """
    Abstract base class for progress bars.

    Provides:
    - Rich Progress instance with the shared theme
    - Context manager support (__enter__/__exit__)
    - Manual start/stop control
    - Log method for printing above the progress bar

    Subclasses must implement:
    - _get_status_text(): Return formatted status string
    - update(): Update progress with operation-specific counters
    """

    def __init__(self, total: int, description: str, status_width: int = 35):
        self.total = total
        self.description = description
        self.completed = 0

        self.console = get_console()

        self.progress = Progress(
            SizedTextColumn(
                "[white]{task.description}",
                overflow="ellipsis",
                width=15,
            ),
            SizedTextColumn(
                "{task.fields[status]}",
                width=status_width,
                style="white",
            ),
            BarColumn(bar_width=40, finished_style="green"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )

        self.task_id: Optional[TaskID] = None
        self._started = False

    def __enter__(self) -> "BaseProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        """Start the progress bar (can be called manually)."""
        if not self._started:
            self.console.push_theme(PROGRESS_THEME)
            self.progress.start()
            self.task_id = self.progress.add_task(
                description=self.description,
                total=self.total,
                status=self._get_status_text(),
            )
            self._started = True

    def stop(self) -> None:
        """Stop the progress bar and restore the console theme."""
        if self._started:
            self.progress.stop()
            self.console.pop_theme()
            self._started = False

    def log(self, message: str) -> None:
        """Print a message above the progress bar."""
        self.progress.console.print(message, highlight=False)

    def _update_progress(self) -> None:
        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                completed=self.completed,
                status=self._get_status_text(),
            )

    @abstractmethod
    def _get_status_text(self) -> str:
        """Formatted status string with Rich markup."""

    @abstractmethod
    def update(self, *args, **kwargs) -> None:
        """Record one processed item."""


class ImportProgressBar(BaseProgressBar):
    """
    Progress bar for importing titles into the downloaded-songs list.

    Displays:
    - Description (e.g., "Importing")
    - Status: ✓ registered, ⊘ skipped as duplicate
    - Progress bar
    - Percentage

    Example:
        Importing       ✓ 120  ⊘ 14            ━━━━━━━━━━━━━━━━━  64%
    """

    def __init__(self, total: int, description: str = "Importing"):
        super().__init__(total=total, description=description)
        self.registered = 0
        self.skipped = 0

    def _get_status_text(self) -> str:
        parts = [f"[green]✓ {self.registered}[/green]"]
        if self.skipped > 0:
            parts.append(f"[yellow]⊘ {self.skipped}[/yellow]")
        return "  ".join(parts)

    def update(self, registered: bool) -> None:
        """
        Update the progress bar with one processed title.

        Args:
            registered: True if the title was new and got registered,
                        False if it was skipped as a duplicate.
        """
        self.completed += 1
        if registered:
            self.registered += 1
        else:
            self.skipped += 1

        self._update_progress()


__all__ = [
    "PROGRESS_THEME",
    "SizedTextColumn",
    "BaseProgressBar",
    "ImportProgressBar",
]
