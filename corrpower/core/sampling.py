"""Subsample drawing without replacement."""

from dataclasses import dataclass, field

import numpy as np

from ..utils.validators import _validate_sample_size
from .population import Population


@dataclass(frozen=True, eq=False)
class Sample:
    """One draw from a population.

    Attributes:
        indices: Distinct population indices, in draw order.
        x: Population ``x`` values at *indices*.
        y: Population ``y`` values at *indices*.
    """

    indices: np.ndarray
    x: np.ndarray = field(repr=False)
    y: np.ndarray = field(repr=False)

    @property
    def size(self) -> int:
        return int(self.indices.shape[0])

    def __len__(self) -> int:
        return self.size

    def __eq__(self, other):
        if not isinstance(other, Sample):
            return NotImplemented
        return bool(np.array_equal(self.indices, other.indices) and np.array_equal(self.x, other.x) and np.array_equal(self.y, other.y))

    def __hash__(self):
        return hash(self.indices.tobytes())


def draw_sample(population: Population, sample_size: int, rng: np.random.Generator) -> Sample:
    """Draw *sample_size* distinct observations uniformly at random.

    Args:
        population: Population to draw from. It is only read.
        sample_size: Number of observations, between 2 and ``population.size``.
        rng: Random generator; the draw advances its state.

    Raises:
        InvalidParameterError: If *sample_size* is below 2 or exceeds the
            population size.
    """
    _validate_sample_size(sample_size, population.size).raise_if_invalid()

    indices = rng.choice(population.size, size=sample_size, replace=False)
    return Sample(indices=indices, x=population.x[indices], y=population.y[indices])
