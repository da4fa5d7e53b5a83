"""Configuration utilities.

Fitting and reporting parameters are explicit frozen dataclasses so a run can
be reproduced from its YAML snapshot.

Key conventions:
- A fit needs at least 6 measurements (three regression coefficients plus
  enough residual degrees of freedom); the minimum can be raised, never
  lowered.
- The QR solve treats a column as linearly dependent when the magnitude of
  its R diagonal falls below ``rcond`` times that column's norm.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

MIN_MEASUREMENTS = 6


@dataclass(frozen=True)
class FitConfig:
    """Least-squares fitting parameters."""

    min_measurements: int = MIN_MEASUREMENTS

    # Relative rank tolerance on the diagonal of R
    rcond: float = 1e-10


@dataclass(frozen=True)
class ReportConfig:
    """Prediction grid and figure settings."""

    # Upper end of the concurrency grid; None derives it from data and model
    max_concurrency: Optional[float] = None
    grid_points: int = 200

    figure: bool = True


@dataclass(frozen=True)
class USLConfig:
    """Top-level configuration container."""

    fit: FitConfig = field(default_factory=FitConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    run_name: str = "base"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def deep_update(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively update nested dictionaries."""

    out = dict(base)
    for k, v in updates.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out


def config_from_dict(d: Dict[str, Any]) -> USLConfig:
    """Build a :class:`USLConfig` from a (possibly partial) nested dict."""

    d = d or {}
    unknown = set(d) - {"fit", "report", "run_name"}
    if unknown:
        raise ValueError(f"Unknown config sections: {sorted(unknown)}")
    return USLConfig(
        fit=FitConfig(**d.get("fit", {})),
        report=ReportConfig(**d.get("report", {})),
        run_name=str(d.get("run_name", "base")),
    )


def validate_config(cfg: USLConfig) -> None:
    """Basic sanity checks for fitting and reporting settings."""

    if cfg.fit.min_measurements < MIN_MEASUREMENTS:
        raise ValueError(f"min_measurements must be >= {MIN_MEASUREMENTS}")
    if not (0.0 < cfg.fit.rcond < 1.0):
        raise ValueError("rcond must be in (0,1)")
    if cfg.report.grid_points < 2:
        raise ValueError("grid_points must be >= 2")
    if cfg.report.max_concurrency is not None and cfg.report.max_concurrency <= 0:
        raise ValueError("max_concurrency must be positive")


__all__ = [
    "MIN_MEASUREMENTS",
    "FitConfig",
    "ReportConfig",
    "USLConfig",
    "config_from_dict",
    "deep_update",
    "validate_config",
]
