"""
Exception types for corrpower.

Parameter problems are reported as ``InvalidParameterError`` before any
sampling happens; a sample whose correlation is undefined raises
``DegenerateSampleError`` and aborts the enclosing study.
"""


class CorrPowerError(Exception):
    """Base class for all corrpower errors."""

    pass


class InvalidParameterError(CorrPowerError, ValueError):
    """Raised when a parameter lies outside its valid domain."""

    pass


class DegenerateSampleError(CorrPowerError, ArithmeticError):
    """Raised when a sample has zero variance in either variable."""

    pass
