"""usl.fit.linearize

Linearization of the USL into a quadratic regression problem.

With λ fixed, the USL

    X(N) = λN / (1 + σ(N-1) + κN(N-1))

rearranges to the division-free form

    N / (X/λ) - 1 = σ(N-1) + κN(N-1)

Substituting z = N - 1 turns the right-hand side into a polynomial in z:

    y = c0 + c1·z + c2·z²,   with c1 = σ + κ and c2 = κ

so σ = |c2 - c1| and κ = |c2| can be read off the least-squares coefficients.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from usl.measurement import Measurement

__all__ = ["DEGREE", "design_matrix", "linearize"]

# Fixed quadratic basis [1, z, z²]
DEGREE = 3


def design_matrix(z: np.ndarray) -> np.ndarray:
    """One row per sample with columns [1, z, z²]."""

    z = np.asarray(z, dtype=float).ravel()
    out = np.empty((z.shape[0], DEGREE), dtype=float)
    ip = np.ones_like(z)
    for j in range(DEGREE):
        out[:, j] = ip
        ip = ip * z
    return out


def linearize(points: Sequence[Measurement], lambda_: float) -> Tuple[np.ndarray, np.ndarray]:
    """Return (Z, y) for measurements sorted by concurrency."""

    n = np.array([p.concurrency for p in points], dtype=float)
    x = np.array([p.throughput for p in points], dtype=float)

    z = n - 1.0
    with np.errstate(divide="ignore", invalid="ignore"):
        y = (n / (x / lambda_)) - 1.0
    return design_matrix(z), y
