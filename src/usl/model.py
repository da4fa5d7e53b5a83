"""usl.model

A parametrized model of the Universal Scalability Law:

    X(N) = λN / (1 + σ(N-1) + κN(N-1))

with contention coefficient σ, crosstalk/coherency coefficient κ and
single-worker throughput λ.

Equation numbers in the docstrings refer to N. J. Gunther, "Practical
Scalability Analysis with the Universal Scalability Law".

Every query is a closed-form evaluation. Inputs may be scalars or numpy
arrays; scalars return plain floats. Nothing here raises on out-of-domain
input: a limitless model (κ = 0) has an infinite ``max_concurrency`` and the
latency-based inverses return inf/NaN. Check :meth:`Model.is_limitless` first.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Optional, Sequence, Union

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from usl.measurement import Measurement
    from usl.utils.config import FitConfig

__all__ = ["Model", "ArrayLike", "FloatOrArray"]

# Scalar in, float out; list or array in, ndarray out.
ArrayLike = Union[float, Sequence[float], np.ndarray]
FloatOrArray = Union[float, np.ndarray]


def _out(value: np.ndarray, like: ArrayLike) -> FloatOrArray:
    if isinstance(like, np.ndarray) or np.ndim(like) > 0:
        return np.asarray(value)
    return float(np.asarray(value).item())


@dataclass(frozen=True)
class Model:
    """Immutable (σ, κ, λ) triple. No validation is done on construction."""

    sigma: float
    kappa: float
    lambda_: float

    @classmethod
    def of(cls, sigma: float, kappa: float, lambda_: float) -> "Model":
        return cls(sigma=float(sigma), kappa=float(kappa), lambda_=float(lambda_))

    @classmethod
    def build(cls, measurements: Iterable["Measurement"], *, config: Optional["FitConfig"] = None) -> "Model":
        """Fit a model to measurements. See :func:`usl.fit.fitter.build`."""

        from usl.fit.fitter import build

        return build(measurements, config=config)

    def _denominator(self, n: np.ndarray) -> np.ndarray:
        return 1.0 + self.sigma * (n - 1.0) + self.kappa * n * (n - 1.0)

    def throughput_at_concurrency(self, n: ArrayLike) -> FloatOrArray:
        """Expected throughput X(N) for N concurrent workers (Equation 3)."""

        n_arr = np.asarray(n, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            x = (self.lambda_ * n_arr) / self._denominator(n_arr)
        return _out(x, n)

    def latency_at_concurrency(self, n: ArrayLike) -> FloatOrArray:
        """Expected mean latency R(N) for N concurrent workers (Equation 6)."""

        n_arr = np.asarray(n, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            r = self._denominator(n_arr) / self.lambda_
        return _out(r, n)

    def max_concurrency(self) -> float:
        """Concurrency at which throughput peaks, N_max (Equation 4).

        Infinite when κ = 0.
        """

        with np.errstate(divide="ignore", invalid="ignore"):
            n = np.floor(np.sqrt((1.0 - np.float64(self.sigma)) / np.float64(self.kappa)))
        return float(n)

    def max_throughput(self) -> float:
        """Throughput at :meth:`max_concurrency`."""

        return float(self.throughput_at_concurrency(self.max_concurrency()))

    def latency_at_throughput(self, x: ArrayLike) -> FloatOrArray:
        """Expected mean latency R(X) at a given throughput (Equation 8)."""

        x_arr = np.asarray(x, dtype=float)
        with np.errstate(divide="ignore", invalid="ignore"):
            r = (self.sigma - 1.0) / (self.sigma * x_arr - self.lambda_)
        return _out(r, x)

    def throughput_at_latency(self, r: ArrayLike) -> FloatOrArray:
        """Expected throughput X(R) at a given mean latency (Equation 9)."""

        r_arr = np.asarray(r, dtype=float)
        s, k, lam = self.sigma, self.kappa, self.lambda_
        with np.errstate(divide="ignore", invalid="ignore"):
            a = 2.0 * k * (2.0 * lam * r_arr + s - 2.0)
            b = np.sqrt(s**2 + k**2 + a)
            x = (b - k + s) / (2.0 * k * r_arr)
        return _out(x, r)

    def concurrency_at_latency(self, r: ArrayLike) -> FloatOrArray:
        """Expected number of concurrent workers N(R) at a given mean latency (Equation 10)."""

        r_arr = np.asarray(r, dtype=float)
        s, k, lam = self.sigma, self.kappa, self.lambda_
        with np.errstate(divide="ignore", invalid="ignore"):
            a = 2.0 * k * (2.0 * lam * r_arr + s - 2.0)
            b = np.sqrt(s**2 + k**2 + a)
            n = (k - s + b) / (2.0 * k)
        return _out(n, r)

    def concurrency_at_throughput(self, x: ArrayLike) -> FloatOrArray:
        """Expected number of concurrent workers N(X) at a given throughput."""

        x_arr = np.asarray(x, dtype=float)
        with np.errstate(invalid="ignore", over="ignore"):
            n = np.asarray(self.latency_at_throughput(x_arr)) * x_arr
        return _out(n, x)

    def is_coherency_constrained(self) -> bool:
        """σ < κ"""
        return self.sigma < self.kappa

    def is_contention_constrained(self) -> bool:
        """σ > κ"""
        return self.sigma > self.kappa

    def is_limitless(self) -> bool:
        """κ = 0, i.e. the system scales linearly."""
        return self.kappa == 0

    def to_dict(self) -> Dict[str, float]:
        d = asdict(self)
        return {"sigma": float(d["sigma"]), "kappa": float(d["kappa"]), "lambda": float(d["lambda_"])}

    @classmethod
    def from_dict(cls, d: Mapping[str, float]) -> "Model":
        lam = d["lambda"] if "lambda" in d else d["lambda_"]
        return cls.of(d["sigma"], d["kappa"], lam)
