"""
Study configuration.

``StudyConfig`` gathers every recognised option of a power study in one
object that can be built from a plain mapping (for example a parsed YAML
or JSON document owned by the caller) and validated in one go.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidParameterError
from .utils.validators import (
    _validate_alpha,
    _validate_noise_sd,
    _validate_population_size,
    _validate_proportion,
    _validate_sample_size,
    _validate_seed,
    _validate_strict_trials,
    _validate_true_effect,
)

DEFAULT_POPULATION_SIZE = 10_000
DEFAULT_N_TRIALS = 1000
DEFAULT_SEED = 2137


@dataclass
class StudyConfig:
    """Recognised options of a correlation power study.

    Attributes:
        true_effect: Coefficient linking ``x`` to ``y`` in the population.
        sample_size: Observations per trial (needed for a power run).
        population_size: Size of the synthetic population.
        alpha: Two-sided significance level.
        n_trials: Monte Carlo trials per study.
        seed: Seed for the population and the study stream.
        target_power: Desired power as a proportion (0-1), used for the
            sample-size calculations.
        noise_sd: Standard deviation of the population noise.
    """

    true_effect: float
    sample_size: Optional[int] = None
    population_size: int = DEFAULT_POPULATION_SIZE
    alpha: float = 0.05
    n_trials: int = DEFAULT_N_TRIALS
    seed: int = DEFAULT_SEED
    target_power: Optional[float] = None
    noise_sd: float = 1.0

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "StudyConfig":
        """Build a config from a mapping, rejecting unknown keys.

        Raises:
            InvalidParameterError: On unknown or missing keys, or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise InvalidParameterError(f"Unknown configuration option(s): {', '.join(unknown)}. Recognised: {', '.join(sorted(known))}")
        if "true_effect" not in options:
            raise InvalidParameterError("Configuration must define 'true_effect'")

        config = cls(**dict(options))
        config.validate()
        return config

    def validate(self) -> "StudyConfig":
        """Check every field and raise one error listing all problems.

        Raises:
            InvalidParameterError: If any field is outside its domain.
        """
        result = _validate_true_effect(self.true_effect)
        result = result.merge(_validate_population_size(self.population_size))
        result = result.merge(_validate_alpha(self.alpha))
        result = result.merge(_validate_strict_trials(self.n_trials))
        result = result.merge(_validate_seed(self.seed))
        result = result.merge(_validate_noise_sd(self.noise_sd))

        if self.sample_size is not None:
            population_size = self.population_size if isinstance(self.population_size, int) else None
            result = result.merge(_validate_sample_size(self.sample_size, population_size))

        if self.target_power is not None:
            result = result.merge(_validate_proportion(self.target_power, "target_power"))

        result.raise_if_invalid()
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
