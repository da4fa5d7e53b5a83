"""usl.utils.io

Minimal IO helpers used by the runner script and reporting.

- YAML for configs and config snapshots
- strict JSON for fit summaries (non-finite floats are rejected)
- CSV for measurement inputs and prediction tables

Functions accept either str or pathlib.Path and create parent directories
when writing.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import numpy as np
import pandas as pd
import yaml

from usl.measurement import Measurement, measurements_from_frame, measurements_to_frame

PathLike = Union[str, Path]


def ensure_dir(path: PathLike) -> Path:
    """Create the directory for ``path`` (its parent when it names a file)."""

    p = Path(path)
    dir_path = p if p.suffix == "" else p.parent
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def load_yaml(path: PathLike) -> Dict[str, Any]:
    """Read a YAML config file. An empty file is an empty config."""

    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        obj = yaml.safe_load(f)
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"config file {p} must contain a mapping, got {type(obj).__name__}")
    return obj


def save_yaml(obj: Any, path: PathLike) -> None:
    """Write a config snapshot; keys keep their section order."""

    p = Path(path)
    ensure_dir(p)
    with p.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False, default_flow_style=False)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def save_json(obj: Any, path: PathLike, *, indent: int = 2) -> None:
    """Write ``obj`` as standard JSON.

    numpy scalars and arrays are converted to Python values. NaN and infinity
    have no JSON encoding and raise ``ValueError``; map them to ``None`` first
    (see :func:`usl.reporting.tables.model_summary`).
    """

    p = Path(path)
    ensure_dir(p)
    text = json.dumps(obj, indent=indent, sort_keys=False, allow_nan=False, default=_json_default)
    p.write_text(text + "\n", encoding="utf-8")


def load_measurements_csv(path: PathLike, **frame_kwargs: Any) -> List[Measurement]:
    """Read measurements from a CSV with any two of concurrency/throughput/latency."""

    df = pd.read_csv(Path(path))
    return measurements_from_frame(df, **frame_kwargs)


def save_measurements_csv(measurements: Iterable[Measurement], path: PathLike) -> None:
    p = Path(path)
    ensure_dir(p)
    measurements_to_frame(measurements).to_csv(p, index=False)


__all__ = [
    "PathLike",
    "ensure_dir",
    "load_yaml",
    "save_yaml",
    "save_json",
    "load_measurements_csv",
    "save_measurements_csv",
]
