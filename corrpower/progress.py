"""
Progress reporting for corrpower studies.

Progress is reported through a plain ``(current, total)`` callback counted
in trials, so the same hook drives a console line, a tqdm bar or a GUI.
"""

import sys
from typing import Callable, Optional


class SimulationCancelled(Exception):
    """Raised when a study is cancelled through its ``cancel_check``."""

    pass


class ProgressReporter:
    """Throttled wrapper around a ``(current, total)`` callback.

    Counts completed trials and fires the callback at most once every
    *update_every* trials, plus always on the last one.

    Args:
        total: Total number of trials in the run.
        callback: Called as ``callback(current, total)``.
        update_every: Minimum number of trials between callbacks.
            Defaults to ``max(1, total // 200)``.
    """

    def __init__(
        self,
        total: int,
        callback: Callable[[int, int], None],
        update_every: Optional[int] = None,
    ):
        self.total = total
        self._callback = callback
        self._current = 0
        self._last_reported = 0
        self.update_every = update_every if update_every is not None else max(1, total // 200)

    @property
    def current(self) -> int:
        return self._current

    def start(self):
        """Reset the counter and report ``0/total``."""
        self._current = 0
        self._last_reported = 0
        self._callback(0, self.total)

    def advance(self, n: int = 1):
        """Record *n* finished trials."""
        self._current = min(self._current + n, self.total)
        if self._current >= self.total or self._current - self._last_reported >= self.update_every:
            self._last_reported = self._current
            self._callback(self._current, self.total)

    def finish(self):
        """Report ``total/total`` unless that was the last update already."""
        if self._last_reported < self.total:
            self._current = self.total
            self._last_reported = self.total
            self._callback(self.total, self.total)


class PrintReporter:
    """Console reporter: ``\\rProgress:  45.2% (452/1000 trials)`` on stderr."""

    def __call__(self, current: int, total: int):
        if total <= 0:
            return
        pct = 100.0 * current / total
        sys.stderr.write(f"\rProgress: {pct:5.1f}% ({current}/{total} trials)")
        sys.stderr.flush()
        if current >= total:
            sys.stderr.write("\n")
            sys.stderr.flush()


class TqdmReporter:
    """tqdm progress bar; ``tqdm`` is imported on first use.

    Usage::

        from corrpower.progress import TqdmReporter
        model.find_power(200, progress_callback=TqdmReporter(desc="n=200"))
    """

    def __init__(self, **tqdm_kwargs):
        self._tqdm_kwargs = tqdm_kwargs
        self._bar = None

    def __call__(self, current: int, total: int):
        from tqdm import tqdm

        if self._bar is None:
            self._bar = tqdm(total=total, unit="trial", **self._tqdm_kwargs)

        delta = current - self._bar.n
        if delta > 0:
            self._bar.update(delta)

        if current >= total:
            self._bar.close()
            self._bar = None


def compute_total_trials(n_trials: int, n_sample_sizes: int = 1) -> int:
    """Total trials of a run: *n_trials* per sample size times the number of sizes."""
    return n_trials * n_sample_sizes
