"""
Validation utilities for correlation power analysis.

This module provides validation functions for study parameters. Each
validator returns a ``_ValidationResult`` collecting every problem found,
so that callers can report all of them at once before any sampling
starts.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

import numpy as np

from ..errors import InvalidParameterError

__all__ = []

_INTEGER_TYPES = (int, np.integer)
_NUMERIC_TYPES = (int, float, np.integer, np.floating)

MAX_SEED = 2**63 - 1


@dataclass
class _ValidationResult:
    """Outcome of a validation check, carrying errors and warnings.

    Attributes:
        is_valid: ``True`` if no errors were found.
        errors: List of error messages (empty when valid).
        warnings: List of non-fatal warning messages.
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]

    def raise_if_invalid(self):
        """Raise ``InvalidParameterError`` if the validation failed."""
        if not self.is_valid:
            error_msg = "Validation failed:\n" + "\n".join(f"• {err}" for err in self.errors)
            raise InvalidParameterError(error_msg)

    def merge(self, other: "_ValidationResult") -> "_ValidationResult":
        """Combine two results into one."""
        return _ValidationResult(
            self.is_valid and other.is_valid,
            self.errors + other.errors,
            self.warnings + other.warnings,
        )


class _Validator:
    """Static helpers for type and range checks used by all validators."""

    @staticmethod
    def _check_type(value: Any, expected_types: tuple, name: str) -> Optional[str]:
        """Check if value has expected type (booleans are never numbers here)."""
        if isinstance(value, bool) or not isinstance(value, expected_types):
            actual_type = type(value).__name__
            expected = expected_types[0].__name__ if len(expected_types) == 1 else f"one of {[t.__name__ for t in expected_types]}"
            return f"{name} must be {expected}, got {actual_type}"
        return None

    @staticmethod
    def _check_range(
        value: Union[int, float],
        min_val: Optional[float],
        max_val: Optional[float],
        name: str,
        exclusive: bool = False,
    ) -> Optional[str]:
        """Check if value is within range (open interval when *exclusive*)."""
        if isinstance(value, (float, np.floating)) and np.isnan(value):
            return f"{name} must be a number, got NaN"
        if isinstance(value, (float, np.floating)) and np.isinf(value):
            return f"{name} must be finite, got {value}"
        if exclusive:
            if min_val is not None and value <= min_val:
                return f"{name} must be > {min_val}, got {value}"
            if max_val is not None and value >= max_val:
                return f"{name} must be < {max_val}, got {value}"
            return None
        if min_val is not None and value < min_val:
            return f"{name} must be >= {min_val}, got {value}"
        if max_val is not None and value > max_val:
            return f"{name} must be <= {max_val}, got {value}"
        return None


_validator = _Validator()


def _validate_numeric_parameter(
    value: Any,
    name: str,
    expected_types: tuple = _NUMERIC_TYPES,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    exclusive: bool = False,
    allow_rounding: bool = False,
) -> _ValidationResult:
    """Generic validation for numeric parameters."""
    errors: List[str] = []
    warnings: List[str] = []

    type_error = _validator._check_type(value, expected_types, name)
    if type_error:
        errors.append(type_error)
        return _ValidationResult(False, errors, warnings)

    range_error = _validator._check_range(value, min_val, max_val, name, exclusive=exclusive)
    if range_error:
        errors.append(range_error)

    # Rounding warning for floats when int expected
    if allow_rounding and not range_error and isinstance(value, (float, np.floating)):
        rounded = int(round(value))
        if value != rounded:
            warnings.append(f"{name} rounded from {value} to {rounded}")

    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_power(power: Any) -> _ValidationResult:
    """Validate target power given as a percentage (0-100%)."""
    return _validate_numeric_parameter(power, "Power", min_val=0, max_val=100)


def _validate_proportion(value: Any, name: str) -> _ValidationResult:
    """Validate a probability on the open interval (0, 1)."""
    return _validate_numeric_parameter(value, name, min_val=0, max_val=1, exclusive=True)


def _validate_alpha(alpha: Any) -> _ValidationResult:
    """Validate alpha level parameter (open interval 0-1)."""
    result = _validate_proportion(alpha, "Alpha")
    if result.is_valid and alpha > 0.25:
        result.warnings.append(f"Alpha of {alpha} is unusually lenient; the false-positive rate will be {alpha:.0%}.")
    return result


def _validate_true_effect(true_effect: Any) -> _ValidationResult:
    """Validate the population effect (a correlation-scale coefficient in [-1, 1])."""
    return _validate_numeric_parameter(true_effect, "true_effect", min_val=-1, max_val=1)


def _validate_noise_sd(noise_sd: Any) -> _ValidationResult:
    """Validate the noise standard deviation (strictly positive)."""
    return _validate_numeric_parameter(noise_sd, "noise_sd", min_val=0, exclusive=True)


def _validate_population_size(size: Any) -> _ValidationResult:
    """Validate population size: a positive integer."""
    return _validate_numeric_parameter(size, "population_size", expected_types=_INTEGER_TYPES, min_val=1)


def _validate_trials(n_trials: Any) -> Tuple[int, _ValidationResult]:
    """Validate and process number of Monte Carlo trials."""
    result = _validate_numeric_parameter(n_trials, "Number of trials", min_val=1, allow_rounding=True)

    if result.is_valid:
        rounded = int(round(n_trials))
        if rounded < 1000:
            result.warnings.append(f"Low trial count ({rounded}). Consider using at least 1000 for reliable results.")
        return rounded, result

    return 0, result


def _validate_strict_trials(n_trials: Any) -> _ValidationResult:
    """Validate trial count where no rounding is allowed (core API)."""
    return _validate_numeric_parameter(n_trials, "n_trials", expected_types=_INTEGER_TYPES, min_val=1)


def _validate_sample_size(sample_size: Any, population_size: Optional[int] = None) -> _ValidationResult:
    """Validate sample size parameter.

    A correlation needs at least two observations, and a draw without
    replacement cannot exceed the population.
    """
    errors = []
    warnings = []

    if isinstance(sample_size, bool) or not isinstance(sample_size, _INTEGER_TYPES):
        errors.append(f"sample_size must be an integer, got {type(sample_size).__name__}")
        return _ValidationResult(False, errors, [])

    if sample_size <= 1:
        errors.append(f"sample_size must be at least 2, got {sample_size}")
    elif population_size is not None and sample_size > population_size:
        errors.append(f"sample_size ({sample_size}) cannot exceed the population size ({population_size}) when drawing without replacement")
    elif sample_size < 4:
        warnings.append(f"sample_size of {sample_size} leaves {sample_size - 2} degrees of freedom; the test is nearly meaningless.")

    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_sample_size_range(from_size: Any, to_size: Any, by: Any) -> _ValidationResult:
    """Validate sample size range parameters."""
    errors: List[str] = []
    warnings: List[str] = []

    for param, name in [(from_size, "from_size"), (to_size, "to_size"), (by, "by")]:
        if isinstance(param, bool) or not isinstance(param, _INTEGER_TYPES) or param <= 0:
            errors.append(f"{name} must be a positive integer, got {param}")

    if errors:
        return _ValidationResult(False, errors, warnings)

    if from_size < 2:
        errors.append(f"from_size must be at least 2, got {from_size}")

    if from_size >= to_size:
        errors.append(f"from_size ({from_size}) must be less than to_size ({to_size})")

    if by > (to_size - from_size):
        errors.append(f"Step size 'by' ({by}) is larger than range ({to_size - from_size}). This will only test one sample size.")

    n_tests = len(range(from_size, to_size + 1, by))
    if n_tests > 100:
        warnings.append(f"Large number of sample sizes to test ({n_tests}). This may take significant time.")

    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_seed(seed: Any) -> _ValidationResult:
    """Validate a random seed: a non-negative integer."""
    return _validate_numeric_parameter(seed, "seed", expected_types=_INTEGER_TYPES, min_val=0, max_val=MAX_SEED)


def _validate_required_sample_size_inputs(true_effect: Any, alpha: Any, target_power: Any) -> _ValidationResult:
    """Validate inputs of the analytic sample-size calculation."""
    result = _validate_numeric_parameter(true_effect, "true_effect", min_val=-1, max_val=1, exclusive=True)
    result = result.merge(_validate_proportion(alpha, "Alpha"))
    result = result.merge(_validate_proportion(target_power, "target_power"))

    if not result.is_valid:
        return result

    if true_effect == 0:
        result.errors.append("true_effect must be non-zero: with no effect, power always equals alpha")
    if target_power <= alpha:
        result.errors.append(f"target_power ({target_power}) must exceed alpha ({alpha})")

    return _ValidationResult(len(result.errors) == 0, result.errors, result.warnings)


def _validate_parallel_settings(enable: Any, n_cores: Optional[int]) -> Tuple[Tuple[bool, int], _ValidationResult]:
    """Validate parallel processing settings.

    Args:
        enable: True or False
        n_cores: Number of CPU cores (positive int or None for auto)

    Returns:
        ((enable, n_cores), ValidationResult)
    """
    import multiprocessing as mp

    errors = []

    if enable not in (True, False):
        errors.append(f"enable must be True or False, got {enable!r}")
        return (False, 1), _ValidationResult(False, errors, [])

    max_cores = mp.cpu_count()
    validated_n_cores = max(1, max_cores // 2)

    if n_cores is not None:
        if isinstance(n_cores, bool) or not isinstance(n_cores, int) or n_cores <= 0:
            errors.append(f"n_cores must be a positive integer, got {n_cores}")
        else:
            validated_n_cores = min(n_cores, max_cores)

    return (bool(enable), validated_n_cores), _ValidationResult(len(errors) == 0, errors, [])
