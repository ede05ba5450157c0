"""Core components for the corrpower framework.

Re-exports the building blocks of a power study:

- ``Population``, ``generate_population``: the synthetic population.
- ``Sample``, ``draw_sample``: draws without replacement.
- ``TrialResult``, ``test_correlation``: the per-sample correlation test.
- ``StudyRunner``, ``run_study``: the Monte Carlo loop.
- ``StudySummary``, ``ResultsProcessor``, ``build_power_result``,
  ``build_sample_size_result``: results and result formatting.
"""

from .population import Population, generate_population
from .results import ResultsProcessor, StudySummary, build_power_result, build_sample_size_result
from .sampling import Sample, draw_sample
from .simulation import StudyRunner, run_study
from .testing import TrialResult, test_correlation

__all__ = [
    # Data
    "Population",
    "generate_population",
    "Sample",
    "draw_sample",
    # Testing
    "TrialResult",
    "test_correlation",
    # Simulation
    "StudyRunner",
    "run_study",
    # Results
    "StudySummary",
    "ResultsProcessor",
    "build_power_result",
    "build_sample_size_result",
]
