"""Universal Scalability Law (usl) package.

Fits the three USL parameters (contention σ, crosstalk κ, single-worker
throughput λ) to measurements of concurrency, throughput and latency, and
answers capacity-planning queries on the fitted model.

The package is organized into:
- usl.measurement: Measurement value type and Little's Law constructors
- usl.model: the Model and its closed-form equations
- usl.fit: linearization, Householder QR least squares, fitting
- usl.errors: exception taxonomy
- usl.utils: config, IO and logging setup
- usl.reporting: prediction tables and figures

Most users need only ``build`` and the ``Measurement`` constructors.
"""

from .errors import FittingFailureError, InsufficientDataError, InvalidArgumentError, USLError
from .fit import FitResult, build, fit
from .measurement import (
    Measurement,
    concurrency_and_latency,
    concurrency_and_throughput,
    throughput_and_concurrency,
    throughput_and_latency,
)
from .model import Model
from .utils.config import FitConfig, USLConfig

__all__ = [
    "Measurement",
    "concurrency_and_throughput",
    "concurrency_and_latency",
    "throughput_and_latency",
    "throughput_and_concurrency",
    "Model",
    "FitResult",
    "build",
    "fit",
    "FitConfig",
    "USLConfig",
    "USLError",
    "InvalidArgumentError",
    "InsufficientDataError",
    "FittingFailureError",
]
