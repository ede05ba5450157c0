"""
Synthetic population generation.

A population is a fixed set of paired observations ``(x, y)`` where
``y = true_effect * x + noise``. It is generated once per seed and then
only read from while trials resample it.
"""

from dataclasses import dataclass, field

import numpy as np

from ..utils.validators import _validate_noise_sd, _validate_population_size, _validate_seed, _validate_true_effect


@dataclass(frozen=True, eq=False)
class Population:
    """Immutable population of paired observations.

    Attributes:
        x: Independent variable, standard normal.
        y: Dependent variable, ``true_effect * x + N(0, noise_sd)``.
        true_effect: Linear coefficient linking ``x`` to ``y``.
        noise_sd: Standard deviation of the additive Gaussian noise.
        seed: Seed the population was generated from.

    Two populations are equal when their parameters and arrays match.
    """

    x: np.ndarray = field(repr=False)
    y: np.ndarray = field(repr=False)
    true_effect: float
    noise_sd: float
    seed: int

    @property
    def size(self) -> int:
        """Number of observations."""
        return int(self.x.shape[0])

    @property
    def correlation(self) -> float:
        """Empirical Pearson correlation over the whole population."""
        return float(np.corrcoef(self.x, self.y)[0, 1])

    @property
    def implied_correlation(self) -> float:
        """Correlation the population converges to as its size grows.

        With ``Var(x) = 1`` the coefficient and the noise combine into
        ``b / sqrt(b**2 + noise_sd**2)``; for unit noise and small
        coefficients this is close to the coefficient itself.
        Passing ``noise_sd=sqrt(1 - b**2)`` makes it equal to ``b``.
        """
        b = self.true_effect
        return float(b / np.sqrt(b**2 + self.noise_sd**2))

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other):
        if not isinstance(other, Population):
            return NotImplemented
        return bool(
            self.true_effect == other.true_effect
            and self.noise_sd == other.noise_sd
            and self.seed == other.seed
            and np.array_equal(self.x, other.x)
            and np.array_equal(self.y, other.y)
        )

    def __hash__(self):
        return hash((self.size, self.true_effect, self.noise_sd, self.seed))


def generate_population(size: int, true_effect: float, seed: int, noise_sd: float = 1.0) -> Population:
    """Generate a reproducible population with a known linear effect.

    Args:
        size: Number of paired observations (positive integer).
        true_effect: Coefficient of ``x`` in ``y``, within [-1, 1].
        seed: Seed for ``numpy.random.default_rng``; the same seed and size
            always give the same population.
        noise_sd: Standard deviation of the Gaussian noise added to ``y``.

    Returns:
        A frozen ``Population`` whose arrays are read-only.

    Raises:
        InvalidParameterError: If *size* is not positive, *true_effect* is
            outside [-1, 1], *noise_sd* is not positive, or *seed* is not a
            non-negative integer.
    """
    result = _validate_population_size(size)
    result = result.merge(_validate_true_effect(true_effect))
    result = result.merge(_validate_noise_sd(noise_sd))
    result = result.merge(_validate_seed(seed))
    result.raise_if_invalid()

    rng = np.random.default_rng(seed)
    x = rng.standard_normal(size)
    y = true_effect * x + rng.normal(0.0, noise_sd, size)

    x.setflags(write=False)
    y.setflags(write=False)

    return Population(x=x, y=y, true_effect=float(true_effect), noise_sd=float(noise_sd), seed=int(seed))
