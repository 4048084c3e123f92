# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Console progress for pipeline runs.

The processor reports every state change to a ``ProgressTracker``. The CLI shows
these as a Rich progress bar, tests create the tracker with ``show=False`` and
only read back the recorded state.
"""

from __future__ import annotations

import sys
import time

from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from .logger import setup_logging

logger = setup_logging()


class ProgressTracker:
    """Record the state and percentage of a pipeline run."""

    def __init__(self, *, show: bool = True) -> None:
        self.progress = 0
        self.state_name: str | None = None
        self._bar = (
            Progress(
                SpinnerColumn(),
                TextColumn('[bold blue]{task.description}'),
                BarColumn(bar_width=40),
                TaskProgressColumn(),
                TimeElapsedColumn(),
            )
            if show
            else None
        )
        self._task_id = None

    def update_progress(self, state_name: str, percentage: int) -> int:
        """Move to ``state_name``, the percentage is clamped and never goes back."""
        self.progress = max(self.progress, min(int(percentage), 100))
        self.state_name = state_name

        if self._bar is not None:
            if self._task_id is None:
                self._bar.start()
                self._task_id = self._bar.add_task(state_name, total=100)

            self._bar.update(self._task_id, completed=self.progress, description=state_name)

        return self.progress

    def get_progress(self) -> dict[str, int | str | None]:
        return {'percentage': self.progress, 'stage': self.state_name}

    def finalize_progress(self, *, complete: bool = True) -> None:
        """Stop the progress bar, filling it first when the run completed."""
        if complete:
            self.progress = 100

        if self._bar is None:
            return

        if complete and self._task_id is not None:
            self._bar.update(self._task_id, completed=100)

        self._bar.stop()
        sys.stdout.write('\n')
        self._bar = None
        self._task_id = None


def performance_metrics(start_time: float, file_count: int) -> None:
    """Log how long a run took in total and per file."""
    elapsed = time.time() - start_time
    per_file = elapsed / file_count if file_count else 0.0
    minutes, seconds = divmod(elapsed, 60)

    duration = f'{int(minutes)} minutes and {seconds:.2f} seconds' if minutes else f'{seconds:.2f} seconds'

    logger.info('Pseudonymized %d files in %s (%.6f seconds per file)', file_count, duration, per_file)
