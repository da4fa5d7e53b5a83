"""usl.measurement

Measurements of a system's concurrency, throughput and latency.

Given any two of the three properties the third is derived via Little's Law:

    N = X * R

where N is the number of concurrent workers, X the throughput (events per
second) and R the mean latency (seconds).

Derivation uses numpy float semantics: dividing by zero or feeding non-finite
values produces inf/NaN instead of raising. Callers are responsible for
supplying physically sensible numbers.

A "measurement set" is any iterable of :class:`Measurement`; order does not
matter. The pandas helpers at the bottom of this module convert between
measurement lists and DataFrames for CSV-driven workflows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from usl.errors import InvalidArgumentError

__all__ = [
    "Measurement",
    "Point",
    "concurrency_and_throughput",
    "concurrency_and_latency",
    "throughput_and_latency",
    "throughput_and_concurrency",
    "measurements_from_frame",
    "measurements_to_frame",
    "COLUMNS",
]

Point = Union[Sequence[float], np.ndarray]

COLUMNS: Tuple[str, str, str] = ("concurrency", "throughput", "latency")


@dataclass(frozen=True)
class Measurement:
    """A single (concurrency, throughput, latency) observation.

    Prefer the constructor functions (or the matching classmethods) over
    calling the dataclass directly; they keep the three fields consistent
    with Little's Law.
    """

    concurrency: float
    throughput: float
    latency: float

    @property
    def n(self) -> float:
        return self.concurrency

    @property
    def x(self) -> float:
        return self.throughput

    @property
    def r(self) -> float:
        return self.latency

    @classmethod
    def of_concurrency_and_throughput(cls, concurrency, throughput=None) -> "Measurement":
        return concurrency_and_throughput(concurrency, throughput)

    @classmethod
    def of_concurrency_and_latency(cls, concurrency, latency=None) -> "Measurement":
        return concurrency_and_latency(concurrency, latency)

    @classmethod
    def of_throughput_and_latency(cls, throughput, latency=None) -> "Measurement":
        return throughput_and_latency(throughput, latency)

    @classmethod
    def of_throughput_and_concurrency(cls, throughput, concurrency=None) -> "Measurement":
        return throughput_and_concurrency(throughput, concurrency)


def _unpack(first, second) -> Tuple[float, float]:
    """Return two floats from either two scalars or a single 2-element point."""

    if second is not None:
        return float(first), float(second)
    point = np.asarray(first, dtype=float)
    if point.ndim != 1 or point.shape[0] != 2:
        raise InvalidArgumentError("point must have exactly 2 elements")
    return float(point[0]), float(point[1])


def _div(a: float, b: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(a) / np.float64(b))


def _mul(a: float, b: float) -> float:
    with np.errstate(over="ignore", invalid="ignore"):
        return float(np.float64(a) * np.float64(b))


def concurrency_and_throughput(concurrency: Union[float, Point], throughput: Optional[float] = None) -> Measurement:
    """Measurement of throughput at a given number of concurrent workers.

    Parameters
    ----------
    concurrency:
        Number of concurrent workers, or a (concurrency, throughput) point.
    throughput:
        Throughput in events per second. Omit when passing a point.
    """

    n, x = _unpack(concurrency, throughput)
    return Measurement(concurrency=n, throughput=x, latency=_div(n, x))


def concurrency_and_latency(concurrency: Union[float, Point], latency: Optional[float] = None) -> Measurement:
    """Measurement of mean latency at a given number of concurrent workers."""

    n, r = _unpack(concurrency, latency)
    return Measurement(concurrency=n, throughput=_div(n, r), latency=r)


def throughput_and_latency(throughput: Union[float, Point], latency: Optional[float] = None) -> Measurement:
    """Measurement of mean latency at a given throughput."""

    x, r = _unpack(throughput, latency)
    return Measurement(concurrency=_mul(x, r), throughput=x, latency=r)


def throughput_and_concurrency(throughput: Union[float, Point], concurrency: Optional[float] = None) -> Measurement:
    """Same as :func:`concurrency_and_throughput` with the arguments swapped."""

    x, n = _unpack(throughput, concurrency)
    return concurrency_and_throughput(n, x)


def measurements_from_frame(
    df: pd.DataFrame,
    *,
    concurrency_col: str = "concurrency",
    throughput_col: str = "throughput",
    latency_col: str = "latency",
) -> List[Measurement]:
    """Build measurements from a DataFrame with at least two known columns.

    When all three columns are present, latency is re-derived from concurrency
    and throughput so every row satisfies Little's Law exactly.
    """

    if not isinstance(df, pd.DataFrame):
        raise TypeError("df must be a pandas DataFrame")

    has_n = concurrency_col in df.columns
    has_x = throughput_col in df.columns
    has_r = latency_col in df.columns

    if has_n and has_x:
        cols, ctor = (concurrency_col, throughput_col), concurrency_and_throughput
    elif has_n and has_r:
        cols, ctor = (concurrency_col, latency_col), concurrency_and_latency
    elif has_x and has_r:
        cols, ctor = (throughput_col, latency_col), throughput_and_latency
    else:
        raise InvalidArgumentError(
            f"frame needs two of {[concurrency_col, throughput_col, latency_col]}, got {list(df.columns)}"
        )

    values = df.loc[:, list(cols)].to_numpy(dtype=float)
    return [ctor(a, b) for a, b in values]


def measurements_to_frame(measurements: Iterable[Measurement]) -> pd.DataFrame:
    """Tabulate measurements, one row each, in the given order."""

    rows = [(m.concurrency, m.throughput, m.latency) for m in measurements]
    return pd.DataFrame(rows, columns=list(COLUMNS), dtype=float)
