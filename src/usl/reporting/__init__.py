"""Reporting helpers.

Thin wrappers around a fitted model to build CSV-friendly tables and
(optional) matplotlib figures.
"""

from .tables import concurrency_grid, fit_table, model_summary, prediction_table
from .figures import plot_model_fit

__all__ = [
    "concurrency_grid",
    "prediction_table",
    "fit_table",
    "model_summary",
    "plot_model_fit",
]
