"""
Results processing for corrpower.

This module holds the ``StudySummary`` produced by a simulation run and
turns summaries into the power and sample-size result dictionaries used
for printing and plotting. Summaries report power as a proportion (0-1);
result dictionaries report it as a percentage (0-100), matching the
``target_power`` setting.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..stats.analytical import mc_margin
from .testing import TrialResult


@dataclass(frozen=True)
class StudySummary:
    """Ordered trial results of one study plus the derived empirical power.

    Attributes:
        trials: Trial results in trial-index order.
        sample_size: Observations drawn per trial.
        alpha: Significance level used for every trial.
        seed: Seed the study's random stream was created from.
        population_size: Size of the population that was resampled.
    """

    trials: Tuple[TrialResult, ...]
    sample_size: int
    alpha: float
    seed: Optional[int]
    population_size: int

    @classmethod
    def from_slots(
        cls,
        slots: Sequence[Optional[TrialResult]],
        sample_size: int,
        alpha: float,
        seed: Optional[int],
        population_size: int,
    ) -> "StudySummary":
        """Freeze a fully written slot list into a summary.

        Raises:
            RuntimeError: If a slot is empty or holds another trial's result.
        """
        for i, trial in enumerate(slots):
            if trial is None:
                raise RuntimeError(f"Trial {i} was never recorded")
            if trial.trial_index != i:
                raise RuntimeError(f"Slot {i} holds the result of trial {trial.trial_index}")
        return cls(
            trials=tuple(slots),  # type: ignore[arg-type]
            sample_size=sample_size,
            alpha=alpha,
            seed=seed,
            population_size=population_size,
        )

    def __len__(self) -> int:
        return len(self.trials)

    def __iter__(self) -> Iterator[TrialResult]:
        return iter(self.trials)

    @property
    def n_trials(self) -> int:
        return len(self.trials)

    @property
    def n_significant(self) -> int:
        return sum(1 for trial in self.trials if trial.is_significant)

    @property
    def empirical_power(self) -> float:
        """Fraction of trials that reached significance."""
        return self.n_significant / self.n_trials

    @property
    def correlations(self) -> np.ndarray:
        return np.array([trial.correlation for trial in self.trials], dtype=float)

    @property
    def p_values(self) -> np.ndarray:
        return np.array([trial.p_value for trial in self.trials], dtype=float)

    @property
    def significant(self) -> np.ndarray:
        return np.array([trial.is_significant for trial in self.trials], dtype=bool)

    @property
    def cumulative_power(self) -> np.ndarray:
        """Running empirical power after each trial, in trial order."""
        return np.cumsum(self.significant) / np.arange(1, self.n_trials + 1)

    @property
    def mean_correlation(self) -> float:
        return float(np.mean(self.correlations))

    @property
    def standard_error(self) -> float:
        """Binomial standard error of the empirical power."""
        p = self.empirical_power
        return float(np.sqrt(p * (1 - p) / self.n_trials))

    def to_dataframe(self):
        """Trial results as a ``pandas.DataFrame``, one row per trial."""
        import pandas as pd

        return pd.DataFrame(
            {
                "trial_index": [trial.trial_index for trial in self.trials],
                "correlation": self.correlations,
                "p_value": self.p_values,
                "is_significant": self.significant,
            }
        )


class ResultsProcessor:
    """Converts study summaries into power estimates and sample-size tables.

    Compares each empirical power against the target and, for sample-size
    sweeps, finds the first sample size that achieves it.
    """

    def __init__(self, target_power: float = 80.0):
        """Initialise the results processor.

        Args:
            target_power: Target power as a percentage (0–100).
        """
        self.target_power = target_power

    def summarize(self, summary: StudySummary, theoretical_power: Optional[float] = None) -> Dict[str, Any]:
        """
        Calculate the power estimate of one study.

        Args:
            summary: Finished study.
            theoretical_power: Analytic power (proportion) to report alongside.

        Returns:
            Dictionary with percentages ``power``, ``theoretical_power`` and
            ``mc_margin`` plus trial counts and the mean sample correlation.
        """
        power = summary.empirical_power * 100
        return {
            "power": power,
            "theoretical_power": theoretical_power * 100 if theoretical_power is not None else None,
            "mc_margin": mc_margin(summary.empirical_power, summary.n_trials) * 100,
            "n_trials": summary.n_trials,
            "n_significant": summary.n_significant,
            "mean_correlation": summary.mean_correlation,
            "achieved": power >= self.target_power,
        }

    def process_sample_size_results(
        self,
        results: List[Tuple[int, StudySummary]],
        theoretical_powers: Optional[List[float]] = None,
    ) -> Dict[str, Any]:
        """
        Process power results from a sample size sweep.

        Args:
            results: List of (sample_size, summary) tuples in sweep order.
            theoretical_powers: Optional analytic powers (proportions), one
                per entry of *results*.

        Returns:
            Dictionary with the sizes tested, empirical (and analytic) powers
            in percent, and ``first_achieved`` (``-1`` if never reached).
        """
        powers: List[float] = []
        first_achieved = -1

        for sample_size, summary in results:
            power = summary.empirical_power * 100
            powers.append(power)
            if power >= self.target_power and first_achieved == -1:
                first_achieved = sample_size

        return {
            "sample_sizes_tested": [r[0] for r in results],
            "powers": powers,
            "theoretical_powers": ([p * 100 for p in theoretical_powers] if theoretical_powers is not None else None),
            "first_achieved": first_achieved,
        }


def build_power_result(
    true_effect: float,
    population_size: int,
    sample_size: int,
    alpha: float,
    n_trials: int,
    seed: Optional[int],
    target_power: float,
    parallel: bool,
    power_results: Dict,
    summary: StudySummary,
) -> Dict[str, Any]:
    """
    Build complete power analysis result dictionary.

    Args:
        true_effect: Population effect used to generate the data
        population_size: Size of the simulated population
        sample_size: Sample size tested
        alpha: Significance level
        n_trials: Number of Monte Carlo trials
        seed: Seed of the study
        target_power: Target power level (percent)
        parallel: Whether parallel processing was used
        power_results: Results from ``ResultsProcessor.summarize``
        summary: The underlying study, for plotting or export

    Returns:
        Complete result dictionary
    """
    return {
        "model": {
            "true_effect": true_effect,
            "population_size": population_size,
            "sample_size": sample_size,
            "alpha": alpha,
            "n_trials": n_trials,
            "seed": seed,
            "target_power": target_power,
            "parallel": parallel,
        },
        "results": power_results,
        "study": summary,
    }


def build_sample_size_result(
    true_effect: float,
    population_size: int,
    sample_sizes: List[int],
    alpha: float,
    n_trials: int,
    seed: Optional[int],
    target_power: float,
    parallel: bool,
    analysis_results: Dict,
    analytic_sample_size: Optional[int],
) -> Dict[str, Any]:
    """
    Build complete sample size analysis result dictionary.

    Args:
        true_effect: Population effect used to generate the data
        population_size: Size of the simulated population
        sample_sizes: Sample sizes tested
        alpha: Significance level
        n_trials: Trials per sample size
        seed: Seed of every study in the sweep
        target_power: Target power level (percent)
        parallel: Whether parallel processing was used
        analysis_results: Results from ``process_sample_size_results``
        analytic_sample_size: Closed-form required sample size, if defined

    Returns:
        Complete result dictionary
    """
    analysis_results = dict(analysis_results)
    analysis_results["analytic_sample_size"] = analytic_sample_size
    return {
        "model": {
            "true_effect": true_effect,
            "population_size": population_size,
            "alpha": alpha,
            "n_trials": n_trials,
            "seed": seed,
            "target_power": target_power,
            "parallel": parallel,
            "sample_size_range": {
                "from_size": sample_sizes[0],
                "to_size": sample_sizes[-1],
                "by": sample_sizes[1] - sample_sizes[0] if len(sample_sizes) > 1 else 1,
            },
        },
        "results": analysis_results,
    }
