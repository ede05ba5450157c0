"""
Simulation execution for corrpower.

This module contains the Monte Carlo loop that estimates empirical power:
draw a sample, test its correlation, record the result, repeat.

Every study seeds one ``numpy.random.SeedSequence`` at the start and
spawns one child stream per trial index. A trial's draw therefore depends
only on the study seed and its own index, and sequential and parallel runs
produce identical trial sequences.
"""

from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import InvalidParameterError
from ..progress import SimulationCancelled
from ..utils.validators import _validate_alpha, _validate_sample_size, _validate_seed, _validate_strict_trials
from .population import Population
from .results import StudySummary
from .sampling import draw_sample
from .testing import TrialResult, test_correlation

# Chunks per worker in parallel mode; more chunks give finer progress updates
CHUNKS_PER_WORKER = 4


def _spawn_trial_streams(seed: int, n_trials: int) -> List[np.random.SeedSequence]:
    """Split the study seed into one independent child seed per trial."""
    return np.random.SeedSequence(seed).spawn(n_trials)


def _run_trial(
    population: Population,
    sample_size: int,
    alpha: float,
    trial_index: int,
    stream: np.random.SeedSequence,
) -> TrialResult:
    rng = np.random.default_rng(stream)
    sample = draw_sample(population, sample_size, rng)
    return test_correlation(sample, alpha, trial_index=trial_index)


def _run_chunk(
    population: Population,
    sample_size: int,
    alpha: float,
    start: int,
    streams: Sequence[np.random.SeedSequence],
) -> List[TrialResult]:
    """Run the contiguous trials ``start .. start + len(streams) - 1``."""
    return [_run_trial(population, sample_size, alpha, start + offset, stream) for offset, stream in enumerate(streams)]


def _chunk_bounds(n_trials: int, n_chunks: int) -> List[Tuple[int, int]]:
    """Split ``range(n_trials)`` into *n_chunks* contiguous ``(start, stop)`` pairs."""
    n_chunks = max(1, min(n_trials, n_chunks))
    edges = np.linspace(0, n_trials, n_chunks + 1).astype(int)
    return [(int(edges[i]), int(edges[i + 1])) for i in range(n_chunks) if edges[i + 1] > edges[i]]


class StudyRunner:
    """Executes the Monte Carlo trials of one power study.

    Each trial draws a sample without replacement from the population and
    runs the correlation test. Results are written into the slot of their
    trial index, so the summary is in draw order no matter in which order
    parallel chunks complete. A ``DegenerateSampleError`` in any trial
    propagates and no summary is produced.
    """

    def __init__(
        self,
        n_trials: int,
        seed: int,
        alpha: float = 0.05,
        n_jobs: int = 1,
    ):
        """Initialise the study runner.

        Args:
            n_trials: Number of Monte Carlo trials.
            seed: Study seed; split into one child stream per trial.
            alpha: Significance level for every trial.
            n_jobs: ``1`` runs trials sequentially; any other value is
                passed to ``joblib.Parallel`` (``-1`` uses all cores).

        Raises:
            InvalidParameterError: If any argument is outside its domain.
        """
        result = _validate_strict_trials(n_trials)
        result = result.merge(_validate_seed(seed))
        result = result.merge(_validate_alpha(alpha))
        result.raise_if_invalid()

        if isinstance(n_jobs, bool) or not isinstance(n_jobs, int) or n_jobs == 0:
            raise InvalidParameterError(f"n_jobs must be a non-zero integer, got {n_jobs!r}")

        self.n_trials = int(n_trials)
        self.seed = int(seed)
        self.alpha = float(alpha)
        self.n_jobs = n_jobs

    def run(
        self,
        population: Population,
        sample_size: int,
        progress=None,
        cancel_check: Optional[Callable[[], bool]] = None,
    ) -> StudySummary:
        """Run all trials and return the finished summary.

        Args:
            population: Population to resample.
            sample_size: Observations per trial (2 to ``population.size``).
            progress: Optional ``ProgressReporter`` (advanced once per trial).
            cancel_check: Optional callable returning ``True`` to abort.

        Raises:
            InvalidParameterError: If *sample_size* is invalid for *population*.
            DegenerateSampleError: If any trial draws a sample with zero variance.
            SimulationCancelled: If *cancel_check* requests cancellation.
        """
        _validate_sample_size(sample_size, population.size).raise_if_invalid()

        streams = _spawn_trial_streams(self.seed, self.n_trials)
        slots: List[Optional[TrialResult]] = [None] * self.n_trials

        if self.n_jobs == 1:
            self._run_sequential(population, sample_size, streams, slots, progress, cancel_check)
        else:
            self._run_parallel(population, sample_size, streams, slots, progress, cancel_check)

        return StudySummary.from_slots(
            slots,
            sample_size=sample_size,
            alpha=self.alpha,
            seed=self.seed,
            population_size=population.size,
        )

    def _run_sequential(self, population, sample_size, streams, slots, progress, cancel_check):
        for trial_index, stream in enumerate(streams):
            if cancel_check is not None and cancel_check():
                raise SimulationCancelled("Simulation cancelled by user")

            slots[trial_index] = _run_trial(population, sample_size, self.alpha, trial_index, stream)

            if progress is not None:
                progress.advance(1)

    def _run_parallel(self, population, sample_size, streams, slots, progress, cancel_check):
        from joblib import Parallel, delayed, effective_n_jobs

        if cancel_check is not None and cancel_check():
            raise SimulationCancelled("Simulation cancelled by user")

        bounds = _chunk_bounds(self.n_trials, effective_n_jobs(self.n_jobs) * CHUNKS_PER_WORKER)
        chunks = Parallel(
            n_jobs=self.n_jobs,
            backend="loky",
            verbose=0,
            return_as="generator",
        )(delayed(_run_chunk)(population, sample_size, self.alpha, start, streams[start:stop]) for start, stop in bounds)

        # Closing the generator aborts chunks that have not finished yet
        try:
            for chunk in chunks:
                if cancel_check is not None and cancel_check():
                    raise SimulationCancelled("Simulation cancelled by user")

                for trial in chunk:
                    slots[trial.trial_index] = trial

                if progress is not None:
                    progress.advance(len(chunk))
        finally:
            chunks.close()


def run_study(
    population: Population,
    sample_size: int,
    n_trials: int,
    alpha: float,
    seed: int,
    n_jobs: int = 1,
    progress=None,
    cancel_check: Optional[Callable[[], bool]] = None,
) -> StudySummary:
    """Estimate empirical power by repeated sampling and testing.

    Args:
        population: Population to resample; it is never modified.
        sample_size: Observations drawn (without replacement) per trial.
        n_trials: Number of trials.
        alpha: Significance level.
        seed: Study seed. Identical arguments give identical summaries.
        n_jobs: Worker count for ``joblib``; ``1`` runs in-process.
        progress: Optional ``ProgressReporter``.
        cancel_check: Optional callable returning ``True`` to abort.

    Returns:
        The ``StudySummary`` with every trial in trial-index order.
    """
    runner = StudyRunner(n_trials=n_trials, seed=seed, alpha=alpha, n_jobs=n_jobs)
    return runner.run(population, sample_size, progress=progress, cancel_check=cancel_check)
