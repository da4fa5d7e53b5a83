"""usl.reporting.tables

Tabular views of a fitted model for CSV/JSON output.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import numpy as np
import pandas as pd

from usl.fit.fitter import FitResult, sort_measurements
from usl.measurement import Measurement, measurements_to_frame
from usl.model import Model

__all__ = [
    "concurrency_grid",
    "prediction_table",
    "fit_table",
    "model_summary",
]


def concurrency_grid(
    model: Model,
    measurements: Optional[Iterable[Measurement]] = None,
    *,
    max_concurrency: Optional[float] = None,
    grid_points: int = 200,
) -> np.ndarray:
    """Evenly spaced concurrency levels from 1 up to a sensible ceiling.

    Without an explicit ``max_concurrency`` the ceiling is twice the larger of
    the highest measured concurrency and the model's finite N_max.
    """

    if grid_points < 2:
        raise ValueError("grid_points must be >= 2")

    if max_concurrency is None:
        upper = 1.0
        if measurements is not None:
            upper = max([upper] + [m.concurrency for m in measurements])
        n_max = model.max_concurrency()
        if np.isfinite(n_max):
            upper = max(upper, n_max)
        max_concurrency = 2.0 * upper

    return np.linspace(1.0, float(max_concurrency), int(grid_points))


def prediction_table(model: Model, concurrency: Iterable[float]) -> pd.DataFrame:
    """Predicted throughput and latency indexed by concurrency."""

    n = np.asarray(list(concurrency), dtype=float)
    df = pd.DataFrame(
        {
            "throughput": model.throughput_at_concurrency(n),
            "latency": model.latency_at_concurrency(n),
        },
        index=pd.Index(n, name="concurrency"),
    )
    return df


def fit_table(result: FitResult, measurements: Iterable[Measurement]) -> pd.DataFrame:
    """Measured vs. predicted values, sorted by concurrency."""

    df = measurements_to_frame(sort_measurements(measurements))
    n = df["concurrency"].to_numpy(dtype=float)
    df["throughput_pred"] = result.model.throughput_at_concurrency(n)
    df["latency_pred"] = result.model.latency_at_concurrency(n)
    df["throughput_resid"] = df["throughput"] - df["throughput_pred"]
    df["latency_resid"] = df["latency"] - df["latency_pred"]
    return df


def _finite_or_none(value: float) -> Optional[float]:
    value = float(value)
    return value if np.isfinite(value) else None


def model_summary(model: Model, result: Optional[FitResult] = None) -> Dict[str, Any]:
    """JSON-friendly summary of a model and, optionally, its fit diagnostics.

    Non-finite numbers (``max_concurrency`` of a limitless model, for one) are
    reported as ``None`` so the summary serializes as standard JSON.
    """

    out: Dict[str, Any] = {k: _finite_or_none(v) for k, v in model.to_dict().items()}
    out.update(
        {
            "max_concurrency": _finite_or_none(model.max_concurrency()),
            "max_throughput": _finite_or_none(model.max_throughput()),
            "coherency_constrained": model.is_coherency_constrained(),
            "contention_constrained": model.is_contention_constrained(),
            "limitless": model.is_limitless(),
        }
    )
    if result is not None:
        out["coefficients"] = [_finite_or_none(c) for c in result.coefficients]
        out["n_obs"] = int(result.n_obs)
        out["r2"] = _finite_or_none(result.r2)
    return out
