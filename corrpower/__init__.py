"""corrpower - Monte Carlo Power Analysis for Correlations.

A simulation-based framework for the power of a two-sided Pearson
correlation test: generate a population with a known effect, resample it
many times, and count how often the test rejects. Closed-form Fisher-z
power and sample sizes are provided for comparison.

Example:
    >>> from corrpower import CorrPower
    >>>
    >>> model = CorrPower(true_effect=-0.13)
    >>> model.find_power(sample_size=200)
    >>>
    >>> model.set_power(95).find_sample_size(from_size=100, to_size=1000, by=50)
    >>> model.required_sample_size()
"""

from importlib.metadata import version as _get_version

from .config import StudyConfig
from .core import (
    Population,
    Sample,
    StudyRunner,
    StudySummary,
    TrialResult,
    draw_sample,
    generate_population,
    run_study,
    test_correlation,
)
from .errors import CorrPowerError, DegenerateSampleError, InvalidParameterError
from .model import CorrPower
from .progress import PrintReporter, ProgressReporter, SimulationCancelled, TqdmReporter
from .stats.analytical import required_sample_size, theoretical_power

__version__ = _get_version("corrpower")

__all__ = [
    "CorrPower",
    "StudyConfig",
    "Population",
    "Sample",
    "TrialResult",
    "StudySummary",
    "StudyRunner",
    "generate_population",
    "draw_sample",
    "test_correlation",
    "run_study",
    "theoretical_power",
    "required_sample_size",
    "CorrPowerError",
    "InvalidParameterError",
    "DegenerateSampleError",
    "SimulationCancelled",
    "ProgressReporter",
    "PrintReporter",
    "TqdmReporter",
]
