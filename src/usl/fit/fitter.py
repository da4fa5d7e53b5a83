"""usl.fit.fitter

Fit a :class:`~usl.model.Model` to a set of measurements.

Procedure:
1. Sort a private copy of the measurements by concurrency.
2. Take λ = X/N of the lowest-concurrency sample. This approximates the
   unloaded single-worker throughput; λ is not a regression output.
3. Linearize (see :mod:`usl.fit.linearize`) and solve the quadratic
   regression by Householder QR (see :mod:`usl.fit.qr`).
4. Read off σ = |c2 - c1| and κ = |c2|.

A joint nonlinear fit of (σ, κ, λ) would avoid relying on the lowest
concurrency sample being typical of unloaded behavior, but the fixed
linearization is kept so results stay reproducible across implementations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np

from usl.errors import InsufficientDataError
from usl.fit.linearize import linearize
from usl.fit.qr import solve_least_squares
from usl.measurement import Measurement
from usl.model import Model
from usl.utils.config import FitConfig

logger = logging.getLogger(__name__)

__all__ = ["FitResult", "build", "fit", "sort_measurements"]


@dataclass(frozen=True)
class FitResult:
    """Fitted model plus regression diagnostics."""

    model: Model
    coefficients: Tuple[float, float, float]
    n_obs: int
    r2: float


def sort_measurements(measurements: Iterable[Measurement]) -> List[Measurement]:
    """Sorted copy, ascending by concurrency."""

    return sorted(measurements, key=lambda m: m.concurrency)


def _throughput_r2(model: Model, points: List[Measurement]) -> float:
    x = np.array([p.throughput for p in points], dtype=float)
    n = np.array([p.concurrency for p in points], dtype=float)
    pred = np.asarray(model.throughput_at_concurrency(n), dtype=float)
    ss_tot = float(np.sum((x - x.mean()) ** 2))
    ss_res = float(np.sum((x - pred) ** 2))
    return float("nan") if ss_tot <= 0 else 1.0 - ss_res / ss_tot


def fit(measurements: Iterable[Measurement], *, config: Optional[FitConfig] = None) -> FitResult:
    """Fit the USL and return the model with diagnostics.

    Raises
    ------
    InsufficientDataError
        Fewer than ``config.min_measurements`` measurements.
    FittingFailureError
        The linearized design matrix is rank deficient, e.g. fewer than three
        distinct concurrency levels.
    """

    cfg = config or FitConfig()
    points = sort_measurements(measurements)
    if len(points) < cfg.min_measurements:
        raise InsufficientDataError(
            f"Needs at least {cfg.min_measurements} measurements, got {len(points)}"
        )

    first = points[0]
    with np.errstate(divide="ignore", invalid="ignore"):
        lambda_ = float(np.float64(first.throughput) / np.float64(first.concurrency))
    logger.debug("fitting %d measurements, lambda=%g from N=%g", len(points), lambda_, first.concurrency)

    z, y = linearize(points, lambda_)
    coefficients, _ = solve_least_squares(z, y, rcond=cfg.rcond)
    c0, c1, c2 = (float(c) for c in coefficients)
    logger.debug("coefficients c0=%g c1=%g c2=%g", c0, c1, c2)

    model = Model.of(abs(c2 - c1), abs(c2), lambda_)
    logger.debug("fitted sigma=%g kappa=%g lambda=%g", model.sigma, model.kappa, model.lambda_)

    return FitResult(
        model=model,
        coefficients=(c0, c1, c2),
        n_obs=len(points),
        r2=_throughput_r2(model, points),
    )


def build(measurements: Iterable[Measurement], *, config: Optional[FitConfig] = None) -> Model:
    """Fit the USL to ``measurements`` and return the model only."""

    return fit(measurements, config=config).model
