"""Statistical distribution functions for corrpower.

Thin float-returning wrappers around ``scipy.stats`` for the normal and
Student t distributions used by the correlation test and the analytic
power formulas.

Usage:
    from corrpower.stats.distributions import norm_ppf, t_two_sided_p
"""

import numpy as np
from scipy.stats import norm as _norm_dist
from scipy.stats import t as _t_dist


def norm_ppf(p):
    """Standard normal quantile function (inverse CDF)."""
    return float(_norm_dist.ppf(p))


def norm_cdf(x):
    """Standard normal CDF."""
    return float(_norm_dist.cdf(x))


def t_two_sided_p(t_stat, df):
    """Two-sided p-value of a t statistic with *df* degrees of freedom.

    Uses the survival function rather than ``1 - cdf`` so that very large
    statistics keep their precision instead of rounding to zero.
    """
    return float(2.0 * _t_dist.sf(np.abs(t_stat), df))
