"""Statistical analysis modules: distributions and analytic power formulas."""

from . import analytical as analytical
from . import distributions as distributions
