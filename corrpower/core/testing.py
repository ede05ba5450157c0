"""
Pearson correlation significance test for a single sample.
"""

import math
from dataclasses import dataclass

import numpy as np

from ..errors import DegenerateSampleError
from ..stats.distributions import t_two_sided_p
from ..utils.validators import _validate_alpha, _validate_sample_size
from .sampling import Sample

# |r| within this distance of 1 is treated as a perfect correlation
CORRELATION_EPS = 1e-12


@dataclass(frozen=True)
class TrialResult:
    """Outcome of testing one sample.

    Attributes:
        trial_index: Position of the trial within its study.
        correlation: Sample Pearson r.
        p_value: Two-sided p-value against zero correlation.
        is_significant: ``p_value < alpha``.
    """

    trial_index: int
    correlation: float
    p_value: float
    is_significant: bool


def _pearson_r(x: np.ndarray, y: np.ndarray) -> float:
    """Pearson correlation of two non-constant vectors, clipped to [-1, 1]."""
    xc = x - x.mean()
    yc = y - y.mean()
    r = np.dot(xc, yc) / math.sqrt(np.dot(xc, xc) * np.dot(yc, yc))
    return float(np.clip(r, -1.0, 1.0))


def test_correlation(sample: Sample, alpha: float, trial_index: int = 0) -> TrialResult:
    """Test whether the sample correlation differs from zero.

    Uses ``t = r * sqrt((n - 2) / (1 - r**2))`` with ``n - 2`` degrees of
    freedom. A correlation of (numerically) +/-1 short-circuits to
    ``p_value = 0`` instead of dividing by zero.

    Args:
        sample: Drawn sample with at least two observations.
        alpha: Significance level in (0, 1); significance is ``p < alpha``.
        trial_index: Index recorded in the returned ``TrialResult``.

    Raises:
        InvalidParameterError: If *alpha* is outside (0, 1) or the sample
            has fewer than two observations.
        DegenerateSampleError: If either variable is constant in the sample.
    """
    result = _validate_alpha(alpha)
    result = result.merge(_validate_sample_size(sample.size))
    result.raise_if_invalid()

    if np.ptp(sample.x) == 0 or np.ptp(sample.y) == 0:
        raise DegenerateSampleError(f"Correlation undefined in trial {trial_index}: a variable has zero variance in a sample of {sample.size}")

    n = sample.size
    r = _pearson_r(sample.x, sample.y)

    if 1.0 - abs(r) < CORRELATION_EPS:
        p_value = 0.0
    else:
        t_stat = r * math.sqrt((n - 2) / (1.0 - r * r))
        p_value = t_two_sided_p(t_stat, n - 2)

    return TrialResult(
        trial_index=int(trial_index),
        correlation=r,
        p_value=p_value,
        is_significant=bool(p_value < alpha),
    )

