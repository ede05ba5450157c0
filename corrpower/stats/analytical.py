"""
Analytic power formulas for the Pearson correlation test.

All formulas use the Fisher z-transformation: for a sample of size *n*,
``atanh(r_hat)`` is approximately normal with mean ``atanh(r)`` and
standard deviation ``1 / sqrt(n - 3)``.
"""

import math

import numpy as np

from ..utils.validators import (
    _validate_numeric_parameter,
    _validate_proportion,
    _validate_required_sample_size_inputs,
    _validate_true_effect,
)
from .distributions import norm_cdf, norm_ppf

__all__ = [
    "fisher_z",
    "inverse_fisher_z",
    "theoretical_power",
    "required_sample_size",
    "mc_margin",
]

MIN_ANALYTIC_SAMPLE_SIZE = 4


def fisher_z(r):
    """Convert a Pearson r to Fisher's z (``atanh``)."""
    return np.arctanh(r)


def inverse_fisher_z(z):
    """Convert Fisher's z back to a Pearson r (``tanh``)."""
    return np.tanh(z)


def theoretical_power(true_effect: float, sample_size: int, alpha: float = 0.05) -> float:
    """Two-sided power of a correlation test under the Fisher-z approximation.

    Under H1 the test statistic ``atanh(r_hat) * sqrt(n - 3)`` is normal
    with mean ``ncp = atanh(|r|) * sqrt(n - 3)`` and unit variance, so::

        power = Phi(ncp - z_crit) + Phi(-ncp - z_crit)

    Args:
        true_effect: Population correlation in [-1, 1].
        sample_size: Number of observations (at least 4).
        alpha: Two-sided significance level in (0, 1).

    Returns:
        Power as a proportion (0-1). Equals *alpha* when the effect is zero.

    Raises:
        InvalidParameterError: If any argument is outside its domain.
    """
    result = _validate_true_effect(true_effect)
    result = result.merge(_validate_proportion(alpha, "Alpha"))
    result = result.merge(
        _validate_numeric_parameter(
            sample_size,
            "sample_size",
            expected_types=(int, np.integer),
            min_val=MIN_ANALYTIC_SAMPLE_SIZE,
        )
    )
    result.raise_if_invalid()

    r = abs(float(true_effect))
    if r == 1.0:
        return 1.0

    ncp = fisher_z(r) * math.sqrt(sample_size - 3)
    z_crit = norm_ppf(1 - alpha / 2)
    return norm_cdf(ncp - z_crit) + norm_cdf(-ncp - z_crit)


def required_sample_size(true_effect: float, alpha: float = 0.05, target_power: float = 0.8) -> int:
    """Smallest sample size whose theoretical power reaches *target_power*.

    Closed-form inversion of the Fisher-z power formula (the far rejection
    tail is ignored, which can only overstate the requirement)::

        n = ((z_{1-alpha/2} + z_{power}) / atanh(|r|))**2 + 3

    rounded up to the next integer.

    Args:
        true_effect: Population correlation, non-zero and inside (-1, 1).
        alpha: Two-sided significance level in (0, 1).
        target_power: Desired power as a proportion in (alpha, 1).

    Returns:
        The required number of observations.

    Raises:
        InvalidParameterError: If the effect is zero, the power does not
            exceed alpha, or any argument is outside its domain.
    """
    _validate_required_sample_size_inputs(true_effect, alpha, target_power).raise_if_invalid()

    z_alpha = norm_ppf(1 - alpha / 2)
    z_power = norm_ppf(target_power)
    n = ((z_alpha + z_power) / fisher_z(abs(float(true_effect)))) ** 2 + 3
    return int(math.ceil(n))


def mc_margin(power: float, n_trials: int, z: float = 1.96) -> float:
    """Half-width of the normal-approximation interval for an empirical power.

    Args:
        power: Empirical power as a proportion (0-1).
        n_trials: Number of Monte Carlo trials behind the estimate.
        z: Normal quantile of the interval (1.96 for 95%).
    """
    return z * math.sqrt(power * (1 - power) / n_trials)
