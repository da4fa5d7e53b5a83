"""Model fitting subpackage.

- usl.fit.linearize: USL -> quadratic regression (design matrix, target)
- usl.fit.qr: Householder QR least-squares solve with back-substitution
- usl.fit.fitter: sort -> linearize -> solve -> (σ, κ, λ)
"""

from .fitter import FitResult, build, fit, sort_measurements
from .linearize import DEGREE, design_matrix, linearize
from .qr import QRFactors, back_substitute, householder_qr, solve_least_squares

__all__ = [
    # fitter
    "FitResult",
    "build",
    "fit",
    "sort_measurements",
    # linearize
    "DEGREE",
    "design_matrix",
    "linearize",
    # qr
    "QRFactors",
    "householder_qr",
    "back_substitute",
    "solve_least_squares",
]
