"""usl.errors

Exception taxonomy for measurement construction and model fitting.

All errors derive from :class:`USLError`, itself a ``ValueError``, so callers
that already guard numeric input with ``except ValueError`` keep working.

Model queries never raise; out-of-domain evaluation yields NaN/Infinity.
"""

from __future__ import annotations

__all__ = [
    "USLError",
    "InvalidArgumentError",
    "InsufficientDataError",
    "FittingFailureError",
]


class USLError(ValueError):
    """Base class for all errors raised by this package."""


class InvalidArgumentError(USLError):
    """A measurement point or frame has the wrong shape."""


class InsufficientDataError(USLError):
    """Too few measurements were supplied to attempt a fit."""


class FittingFailureError(USLError):
    """The linearized design matrix could not be factored (rank deficient)."""
