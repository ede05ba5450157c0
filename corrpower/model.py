"""
corrpower - Monte Carlo power analysis for correlations.

This module provides the main CorrPower class for estimating the power
of a Pearson correlation test by simulation and by formula.
"""

import warnings
from typing import Dict, List, Optional

import numpy as np

from .config import DEFAULT_N_TRIALS, DEFAULT_POPULATION_SIZE, DEFAULT_SEED, StudyConfig
from .core import (
    Population,
    ResultsProcessor,
    StudyRunner,
    build_power_result,
    build_sample_size_result,
    generate_population,
)
from .errors import InvalidParameterError
from .stats.analytical import MIN_ANALYTIC_SAMPLE_SIZE, required_sample_size, theoretical_power
from .utils.formatters import _format_results
from .utils.validators import (
    _validate_alpha,
    _validate_noise_sd,
    _validate_parallel_settings,
    _validate_population_size,
    _validate_power,
    _validate_sample_size,
    _validate_sample_size_range,
    _validate_seed,
    _validate_trials,
    _validate_true_effect,
)
from .utils.visualization import plot_power_curve, plot_study_progression

# Above this share of the population, draws without replacement visibly
# shrink the sampling variance of r
_FINITE_POPULATION_WARNING_SHARE = 0.1


class CorrPower:
    """Monte Carlo power analysis for a two-variable correlation.

    A synthetic population with ``y = true_effect * x + noise`` is generated
    once per seed and resampled many times. Each resample is tested for a
    non-zero Pearson correlation, and the share of significant tests is the
    empirical power. Analytic (Fisher z) power and sample sizes are
    reported alongside for comparison.

    Configuration methods (``set_*``) validate their input and return
    ``self`` for method chaining.

    Attributes:
        true_effect: Population coefficient of ``x`` in ``y``.
        population_size: Size of the synthetic population (default: 10,000).
        noise_sd: Standard deviation of the population noise (default: 1.0).
        seed: Random seed for reproducibility (default: 2137).
        power: Target power level in percent (default: 80.0).
        alpha: Significance level (default: 0.05).
        n_trials: Number of Monte Carlo trials (default: 1000).
        parallel: Whether trials run in ``joblib`` workers (default: False).
        n_cores: Number of workers when parallel.

    Example:
        >>> model = CorrPower(true_effect=-0.13)
        >>> model.find_power(sample_size=200)
        >>> model.find_sample_size(from_size=100, to_size=1000, by=100)
        >>> model.required_sample_size()
    """

    def __init__(
        self,
        true_effect: float,
        population_size: int = DEFAULT_POPULATION_SIZE,
        noise_sd: float = 1.0,
    ):
        """Initialise a correlation power analysis.

        Args:
            true_effect: Population coefficient in [-1, 1].
            population_size: Number of observations in the population.
            noise_sd: Standard deviation of the Gaussian noise on ``y``.

        Raises:
            InvalidParameterError: If any argument is outside its domain.
        """
        result = _validate_true_effect(true_effect)
        result = result.merge(_validate_population_size(population_size))
        result = result.merge(_validate_noise_sd(noise_sd))
        result.raise_if_invalid()

        self.true_effect = float(true_effect)
        self.population_size = int(population_size)
        self.noise_sd = float(noise_sd)

        self.seed: Optional[int] = DEFAULT_SEED
        self.power = 80.0
        self.alpha = 0.05
        self.n_trials = DEFAULT_N_TRIALS

        self.parallel = False
        self.n_cores = 1

        self._population: Optional[Population] = None

    @classmethod
    def from_config(cls, config: StudyConfig) -> "CorrPower":
        """Create a model from a validated ``StudyConfig``.

        ``config.target_power`` is a proportion; it is stored as a percentage.
        """
        config.validate()
        model = cls(config.true_effect, population_size=config.population_size, noise_sd=config.noise_sd)
        model.seed = config.seed
        model.alpha = float(config.alpha)
        model.n_trials = int(config.n_trials)
        if config.target_power is not None:
            model.power = float(config.target_power) * 100
        return model

    # =========================================================================
    # Configuration methods
    # =========================================================================

    def set_effect(self, true_effect: float):
        """Set the population effect; the population is regenerated on next use.

        Returns:
            self: For method chaining.
        """
        _validate_true_effect(true_effect).raise_if_invalid()
        self.true_effect = float(true_effect)
        return self

    def set_seed(self, seed: Optional[int] = None):
        """Set random seed for reproducibility.

        The seed drives both the population and the study's random stream.

        Args:
            seed: Non-negative integer. Pass ``None`` to draw a fresh seed
                for every analysis.

        Returns:
            self: For method chaining.

        Raises:
            InvalidParameterError: If *seed* is not a non-negative integer.
        """
        if seed is not None:
            _validate_seed(seed).raise_if_invalid()

        self.seed = seed
        if seed is not None:
            print(f"Seed set to: {seed}")
        else:
            print("Random seeding enabled")
        return self

    def set_power(self, power: float):
        """Set the target statistical power level.

        Args:
            power: Target power as a percentage (0–100). Default is 80.

        Returns:
            self: For method chaining.
        """
        _validate_power(power).raise_if_invalid()
        self.power = float(power)
        return self

    def set_alpha(self, alpha: float):
        """Set the significance level for the correlation test.

        Args:
            alpha: Type-I error rate in (0, 1). Default is 0.05.

        Returns:
            self: For method chaining.
        """
        result = _validate_alpha(alpha)
        for warning in result.warnings:
            print(f"Warning: {warning}")
        result.raise_if_invalid()
        self.alpha = float(alpha)
        return self

    def set_trials(self, n_trials: int):
        """Set the number of Monte Carlo trials per study.

        More trials give a tighter power estimate; the Monte Carlo margin
        shrinks with ``1 / sqrt(n_trials)``.

        Args:
            n_trials: Number of trials (positive; floats are rounded).

        Returns:
            self: For method chaining.
        """
        n, result = _validate_trials(n_trials)
        for warning in result.warnings:
            print(f"Warning: {warning}")
        result.raise_if_invalid()
        self.n_trials = n
        return self

    def set_parallel(self, enable: bool = True, n_cores: Optional[int] = None):
        """Enable or disable running trials in parallel ``joblib`` workers.

        Results are identical to a sequential run with the same seed.

        Args:
            enable: ``True`` for parallel trials, ``False`` for sequential.
            n_cores: Number of workers. Defaults to ``cpu_count // 2``.

        Returns:
            self: For method chaining.
        """
        if enable is False:
            self.parallel, self.n_cores = False, 1
            return self

        try:
            import joblib  # noqa: F401
        except ImportError:
            print("Warning: joblib not available. Install with: pip install joblib")
            print("Warning: Continuing with sequential processing.")
            self.parallel = False
            return self

        settings, result = _validate_parallel_settings(enable, n_cores)
        result.raise_if_invalid()
        self.parallel, self.n_cores = settings
        return self

    # =========================================================================
    # Population
    # =========================================================================

    @property
    def population(self) -> Population:
        """The synthetic population for the current settings.

        Cached until the effect, size, noise or seed changes. With random
        seeding a new population is drawn on every access.
        """
        return self._get_population(self._resolve_seed())

    def _resolve_seed(self) -> int:
        if self.seed is not None:
            return self.seed
        return int(np.random.default_rng().integers(0, 2**32))

    def _get_population(self, seed: int) -> Population:
        cached = self._population
        if (
            cached is not None
            and cached.seed == seed
            and cached.true_effect == self.true_effect
            and cached.noise_sd == self.noise_sd
            and cached.size == self.population_size
        ):
            return cached

        self._population = generate_population(self.population_size, self.true_effect, seed, noise_sd=self.noise_sd)
        return self._population

    @property
    def _n_jobs(self) -> int:
        return self.n_cores if self.parallel else 1

    # =========================================================================
    # Analysis
    # =========================================================================

    def find_power(
        self,
        sample_size: int,
        print_results: bool = True,
        summary: str = "short",
        return_results: bool = False,
        progress_callback=None,
        cancel_check=None,
        plot: bool = False,
    ):
        """
        Estimate power for a given sample size.

        Args:
            sample_size: Observations drawn per trial.
            print_results: Whether to print results.
            summary: Output detail level ("short" or "long").
            return_results: Return results dict.
            progress_callback: Progress reporting control:
                - ``None`` (default): auto-use ``PrintReporter`` when
                  *print_results* is ``True``.
                - ``False``: explicitly disable progress.
                - callable ``(current, total)``: custom callback.
            cancel_check: Optional callable returning ``True`` to abort.
            plot: Show the per-trial progression plot.

        Returns:
            dict or None: If *return_results* is ``True``, a dictionary with
            ``"model"`` (settings), ``"results"`` (power estimates in
            percent) and ``"study"`` (the ``StudySummary``).
        """
        self._check_sample_size(sample_size)

        reporter = self._make_reporter(progress_callback, print_results, n_sample_sizes=1)
        if reporter is not None:
            reporter.start()

        result = self._run_find_power(sample_size, self._resolve_seed(), progress=reporter, cancel_check=cancel_check)

        if reporter is not None:
            reporter.finish()

        if print_results:
            print(f"\n{'=' * 80}")
            print("MONTE CARLO CORRELATION POWER RESULTS")
            print(f"{'=' * 80}")
            print(_format_results("power", result, summary))

        if plot:
            plot_study_progression(result["study"])

        return result if return_results else None

    def find_sample_size(
        self,
        from_size: int = 20,
        to_size: int = 500,
        by: int = 20,
        print_results: bool = True,
        summary: str = "short",
        return_results: bool = False,
        progress_callback=None,
        cancel_check=None,
        plot: bool = False,
    ):
        """
        Find the minimum sample size reaching the target power.

        Runs one study per sample size in ``range(from_size, to_size + 1, by)``
        with the same seed and population, and reports the first size whose
        empirical power reaches ``self.power``. The analytic Fisher-z sample
        size is reported alongside.

        Args:
            from_size: Minimum sample size to test.
            to_size: Maximum sample size to test.
            by: Step size between sample sizes.
            print_results: Whether to print results.
            summary: Output detail level ("short" or "long").
            return_results: Return results dict.
            progress_callback: See ``find_power``.
            cancel_check: Optional callable returning ``True`` to abort.
            plot: Show the power curve.

        Returns:
            dict or None: If *return_results* is ``True``, a dictionary with
            ``"model"`` and ``"results"`` (powers per size in percent,
            ``first_achieved`` or ``-1``, ``analytic_sample_size``).
        """
        validation_result = _validate_sample_size_range(from_size, to_size, by)
        for warning in validation_result.warnings:
            print(f"Warning: {warning}")
        validation_result.raise_if_invalid()
        self._check_sample_size(to_size)

        sample_sizes = list(range(from_size, to_size + 1, by))

        reporter = self._make_reporter(progress_callback, print_results, n_sample_sizes=len(sample_sizes))
        if reporter is not None:
            reporter.start()

        result = self._run_sample_size_analysis(sample_sizes, self._resolve_seed(), progress=reporter, cancel_check=cancel_check)

        if reporter is not None:
            reporter.finish()

        if print_results:
            print(f"\n{'=' * 80}")
            print("SAMPLE SIZE ANALYSIS RESULTS")
            print(f"{'=' * 80}")
            print(_format_results("sample_size", result, summary))

        if plot:
            plot_power_curve(
                sample_sizes=result["results"]["sample_sizes_tested"],
                powers=result["results"]["powers"],
                first_achieved=result["results"]["first_achieved"],
                target_power=self.power,
                theoretical_powers=result["results"]["theoretical_powers"],
            )

        return result if return_results else None

    def compare(self, sample_sizes: List[int], print_results: bool = True, summary: str = "short") -> Dict[int, Dict]:
        """Run the same study at several sample sizes.

        Every run shares the population and the seed, so the results differ
        only through the sample size.

        Args:
            sample_sizes: Sample sizes to study, in the order to run them.
            print_results: Whether to print each result.
            summary: Output detail level ("short" or "long").

        Returns:
            Mapping of sample size to its power result dictionary.
        """
        if not sample_sizes:
            raise InvalidParameterError("sample_sizes must not be empty")
        for n in sample_sizes:
            self._check_sample_size(n)

        seed = self._resolve_seed()
        results = {}
        for n in sample_sizes:
            results[n] = self._run_find_power(n, seed)
            if print_results:
                print(_format_results("power", results[n], summary))
                print()
        return results

    def required_sample_size(self, target_power: Optional[float] = None) -> int:
        """Analytic sample size for the model's effect, alpha and target power.

        Args:
            target_power: Power as a percentage; defaults to ``self.power``.

        Raises:
            InvalidParameterError: If the effect is zero or the target power
                does not exceed alpha.
        """
        power_pct = self.power if target_power is None else target_power
        _validate_power(power_pct).raise_if_invalid()
        return required_sample_size(self.true_effect, self.alpha, power_pct / 100)

    def theoretical_power(self, sample_size: int) -> float:
        """Analytic power (proportion) for the model's effect and alpha."""
        return theoretical_power(self.true_effect, sample_size, self.alpha)

    # =========================================================================
    # Internal methods
    # =========================================================================

    def _check_sample_size(self, sample_size: int):
        result = _validate_sample_size(sample_size, self.population_size)
        for warning in result.warnings:
            print(f"Warning: {warning}")
        result.raise_if_invalid()

        if sample_size > _FINITE_POPULATION_WARNING_SHARE * self.population_size:
            warnings.warn(
                f"sample_size ({sample_size}) is more than {_FINITE_POPULATION_WARNING_SHARE:.0%} of the population "
                f"({self.population_size}). Draws without replacement then vary less than draws from an infinite "
                f"population, so empirical power will exceed the analytic value.",
                UserWarning,
                stacklevel=3,
            )

    def _make_reporter(self, progress_callback, print_results: bool, n_sample_sizes: int):
        from .progress import PrintReporter, ProgressReporter, compute_total_trials

        if progress_callback is None:
            effective_cb = PrintReporter() if print_results else None
        elif progress_callback is False:
            effective_cb = None
        else:
            effective_cb = progress_callback

        if effective_cb is None:
            return None
        return ProgressReporter(compute_total_trials(self.n_trials, n_sample_sizes), effective_cb)

    def _analytic_power(self, population: Population, sample_size: int) -> Optional[float]:
        """Fisher-z power at the population's realised correlation, if defined."""
        if sample_size < MIN_ANALYTIC_SAMPLE_SIZE:
            return None
        return theoretical_power(float(np.clip(population.correlation, -1.0, 1.0)), sample_size, self.alpha)

    def _analytic_sample_size(self, population: Population) -> Optional[int]:
        """Fisher-z required size at the population's realised correlation, if defined."""
        target = self.power / 100
        r = population.correlation
        if not (self.alpha < target < 1) or r == 0 or abs(r) >= 1:
            return None
        return required_sample_size(r, self.alpha, target)

    def _run_find_power(self, sample_size, seed, progress=None, cancel_check=None):
        """Run one study and return a power result dict."""
        population = self._get_population(seed)
        runner = StudyRunner(n_trials=self.n_trials, seed=seed, alpha=self.alpha, n_jobs=self._n_jobs)
        summary = runner.run(population, sample_size, progress=progress, cancel_check=cancel_check)

        processor = ResultsProcessor(target_power=self.power)
        power_results = processor.summarize(summary, theoretical_power=self._analytic_power(population, sample_size))

        return build_power_result(
            true_effect=self.true_effect,
            population_size=self.population_size,
            sample_size=sample_size,
            alpha=self.alpha,
            n_trials=self.n_trials,
            seed=seed,
            target_power=self.power,
            parallel=self.parallel,
            power_results=power_results,
            summary=summary,
        )

    def _run_sample_size_analysis(self, sample_sizes, seed, progress=None, cancel_check=None):
        """Iterate over sample sizes, running one study for each."""
        population = self._get_population(seed)
        runner = StudyRunner(n_trials=self.n_trials, seed=seed, alpha=self.alpha, n_jobs=self._n_jobs)

        results = []
        theoretical = []
        for sample_size in sample_sizes:
            summary = runner.run(population, sample_size, progress=progress, cancel_check=cancel_check)
            results.append((sample_size, summary))
            analytic = self._analytic_power(population, sample_size)
            theoretical.append(analytic if analytic is not None else float("nan"))

        processor = ResultsProcessor(target_power=self.power)
        analysis_results = processor.process_sample_size_results(results, theoretical)

        return build_sample_size_result(
            true_effect=self.true_effect,
            population_size=self.population_size,
            sample_sizes=sample_sizes,
            alpha=self.alpha,
            n_trials=self.n_trials,
            seed=seed,
            target_power=self.power,
            parallel=self.parallel,
            analysis_results=analysis_results,
            analytic_sample_size=self._analytic_sample_size(population),
        )

    def __repr__(self):
        return f"CorrPower(true_effect={self.true_effect}, population_size={self.population_size})"
