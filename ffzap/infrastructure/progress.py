import threading
from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.text import Text

ETA_WARNING = (
    "Warning: ETA is a highly experimental feature and prone to absurd estimations. "
    "If your encoding process has long pauses in-between each processed file, "
    "you WILL experience incredibly inaccurate estimations!"
)


class ProgressTracker:
    """Thread-safe completed/total counter rendered as a rich progress bar.

    The count is kept here rather than read back from rich, so it stays exact
    even when rendering is disabled. Display lines go through println() and
    share the Live console with the bar.
    """

    def __init__(self, total: int, eta: bool = False, console: Optional[Console] = None, disable: bool = False):
        self._total = max(0, int(total))
        self._completed = 0
        self._lock = threading.Lock()
        self._started = False
        self._finished = False
        self.eta = eta

        columns = [
            SpinnerColumn(style="green"),
            TextColumn("["),
            TimeElapsedColumn(),
        ]
        if eta:
            columns.extend([TextColumn("- ETA:"), TimeRemainingColumn()])
        columns.extend([
            TextColumn("]"),
            BarColumn(complete_style="cyan", finished_style="blue"),
            MofNCompleteColumn(),
            TaskProgressColumn(),
        ])
        self._progress = Progress(
            *columns,
            console=console,
            disable=disable,
            refresh_per_second=10,
        )
        self._task_id = self._progress.add_task("ffzap", total=self._total)

    @property
    def console(self) -> Console:
        return self._progress.console

    def start(self):
        """Starts the steady refresh of the bar."""
        with self._lock:
            if self._started or self._finished:
                return
            self._started = True
        self._progress.start()

    def increment(self, amount: int = 1):
        with self._lock:
            if self._finished:
                return
            self._completed += amount
            self._progress.update(self._task_id, completed=self._completed)

    def value(self) -> int:
        with self._lock:
            return self._completed

    current_value = value

    def total(self) -> int:
        return self._total

    def __len__(self) -> int:
        return self._total

    def println(self, line: str, style: Optional[str] = None):
        """Prints above the live bar without tearing it."""
        self._progress.console.print(Text(line, style=style or ""), highlight=False)

    def finish(self):
        """Stops rendering and leaves the bar where it ended (not completed)."""
        with self._lock:
            if self._finished:
                return
            self._finished = True
            was_started = self._started
        if was_started:
            self._progress.stop()

    @property
    def finished(self) -> bool:
        return self._finished
