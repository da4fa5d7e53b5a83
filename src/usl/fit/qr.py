"""usl.fit.qr

Least-squares solve of an overdetermined linear system via Householder QR.

For an m x n design matrix A (m >= n) the factorization A = Q R is kept as n
Householder reflectors (Q implicit) and an upper-triangular R (n x n). The
least-squares solution of A c ≈ b then follows from back-substitution on

    R c = Qᵗ b

starting at the last coefficient:

    c_i = ((Qᵗb)_i - Σ_{j>i} c_j R[i, j]) / R[i, i]

The design matrices used here always have three columns, so a small bespoke
factorization over numpy arrays is sufficient.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from usl.errors import FittingFailureError

__all__ = [
    "QRFactors",
    "householder_qr",
    "back_substitute",
    "solve_least_squares",
]


@dataclass(frozen=True)
class QRFactors:
    """Householder QR factors of a design matrix.

    Q is kept implicitly as its reflectors, so working memory stays O(m·n)
    however many rows the design matrix has.
    """

    r: np.ndarray
    reflectors: Tuple[Optional[np.ndarray], ...]
    n_rows: int

    def apply_qt(self, b: np.ndarray) -> np.ndarray:
        """Qᵗb (first n entries), applying H_1 ... H_n in order."""

        y = np.array(b, dtype=float).ravel()
        for k, v in enumerate(self.reflectors):
            if v is not None:
                y[k:] -= 2.0 * v * (v @ y[k:])
        return y[: len(self.reflectors)]

    @property
    def q(self) -> np.ndarray:
        """Thin Q (m x n), built by applying the reflectors in reverse to I[:, :n]."""

        n = len(self.reflectors)
        q = np.eye(self.n_rows, n)
        for k in range(n - 1, -1, -1):
            v = self.reflectors[k]
            if v is not None:
                q[k:, :] -= 2.0 * np.outer(v, v @ q[k:, :])
        return q


def householder_qr(a: np.ndarray) -> QRFactors:
    """Factor ``a`` (m x n, m >= n) into Householder reflectors and upper-triangular R."""

    a = np.array(a, dtype=float)
    if a.ndim != 2:
        raise FittingFailureError("design matrix must be 2-dimensional")
    m, n = a.shape
    if m < n:
        raise FittingFailureError(f"design matrix has fewer rows ({m}) than columns ({n})")
    if not np.isfinite(a).all():
        raise FittingFailureError("design matrix contains non-finite values")

    r = a
    reflectors: List[Optional[np.ndarray]] = []
    for k in range(n):
        x = r[k:, k]
        norm_x = float(np.linalg.norm(x))
        if norm_x == 0.0:
            reflectors.append(None)
            continue
        # Reflect x onto -sign(x0)·|x|·e1 to avoid cancellation
        alpha = -np.copysign(norm_x, x[0])
        v = x.copy()
        v[0] -= alpha
        v /= np.linalg.norm(v)
        r[k:, :] -= 2.0 * np.outer(v, v @ r[k:, :])
        reflectors.append(v)

    return QRFactors(r=np.triu(r[:n, :]), reflectors=tuple(reflectors), n_rows=m)


def back_substitute(r: np.ndarray, qty: np.ndarray) -> np.ndarray:
    """Solve the upper-triangular system R c = Qᵗb."""

    n = r.shape[0]
    c = np.zeros(n, dtype=float)
    for i in range(n - 1, -1, -1):
        c[i] = qty[i]
        for j in range(i + 1, n):
            c[i] -= c[j] * r[i, j]
        c[i] /= r[i, i]
    return c


def _check_rank(a: np.ndarray, r: np.ndarray, rcond: float) -> None:
    col_norms = np.linalg.norm(a, axis=0)
    diag = np.abs(np.diag(r))
    deficient = np.flatnonzero((col_norms == 0.0) | (diag <= rcond * col_norms))
    if deficient.size:
        raise FittingFailureError(
            f"design matrix is rank deficient (dependent columns {deficient.tolist()})"
        )


def solve_least_squares(a: np.ndarray, b: np.ndarray, *, rcond: float = 1e-10) -> Tuple[np.ndarray, QRFactors]:
    """Least-squares coefficients of ``a @ c ≈ b``.

    Parameters
    ----------
    a:
        Design matrix, m x n with m >= n.
    b:
        Target vector of length m.
    rcond:
        Relative tolerance below which a diagonal entry of R marks its column
        as linearly dependent on the previous ones.

    Returns
    -------
    (coefficients, factors)

    Raises
    ------
    FittingFailureError
        If ``a`` is rank deficient or contains non-finite values.
    """

    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float).ravel()
    if b.shape[0] != a.shape[0]:
        raise FittingFailureError("target length does not match design matrix rows")
    if not np.isfinite(b).all():
        raise FittingFailureError("target vector contains non-finite values")

    factors = householder_qr(a)
    _check_rank(a, factors.r, rcond)

    qty = factors.apply_qt(b)
    return back_substitute(factors.r, qty), factors
