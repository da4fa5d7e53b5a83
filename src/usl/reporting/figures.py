"""usl.reporting.figures

Lightweight plotting helpers.

matplotlib is imported lazily; if it is not available, the functions raise a
clear ImportError.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from usl.measurement import Measurement
from usl.model import Model
from usl.reporting.tables import concurrency_grid


def _require_matplotlib():
    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        return plt
    except ImportError as e:  # pragma: no cover
        raise ImportError("matplotlib is required for plotting. Install matplotlib>=3.8") from e


def plot_model_fit(
    model: Model,
    measurements: Iterable[Measurement],
    *,
    out_path: str,
    max_concurrency: Optional[float] = None,
    grid_points: int = 200,
    title: str = "Universal Scalability Law fit",
) -> None:
    """Plot measured throughput against the fitted X(N) curve and save it."""

    points = list(measurements)
    plt = _require_matplotlib()

    n = concurrency_grid(model, points, max_concurrency=max_concurrency, grid_points=grid_points)
    x = np.asarray(model.throughput_at_concurrency(n), dtype=float)

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(n, x, lw=1.5, label=f"σ={model.sigma:.4g}, κ={model.kappa:.4g}, λ={model.lambda_:.4g}")
    ax.scatter(
        [p.concurrency for p in points],
        [p.throughput for p in points],
        color="k",
        s=15,
        zorder=3,
        label="measured",
    )
    n_max = model.max_concurrency()
    if np.isfinite(n_max) and n_max <= n[-1]:
        ax.axvline(n_max, color="tab:red", lw=1.0, alpha=0.5, ls="--")
    ax.set_title(title)
    ax.set_xlabel("Concurrency N")
    ax.set_ylabel("Throughput X(N)")
    ax.legend(loc="best")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


__all__ = ["plot_model_fit"]
