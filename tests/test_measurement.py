import dataclasses

import numpy as np
import pandas as pd
import pytest

from usl.errors import InvalidArgumentError
from usl.measurement import (
    Measurement,
    concurrency_and_latency,
    concurrency_and_throughput,
    measurements_from_frame,
    measurements_to_frame,
    throughput_and_concurrency,
    throughput_and_latency,
)


def test_derived_field_follows_littles_law():
    m = concurrency_and_throughput(4.0, 2.0)
    assert (m.concurrency, m.throughput, m.latency) == (4.0, 2.0, 2.0)

    m = concurrency_and_latency(4.0, 2.0)
    assert (m.concurrency, m.throughput, m.latency) == (4.0, 2.0, 2.0)

    m = throughput_and_latency(3.0, 0.5)
    assert (m.concurrency, m.throughput, m.latency) == (1.5, 3.0, 0.5)


def test_littles_law_holds_for_random_inputs():
    rng = np.random.default_rng(7)
    for _ in range(100):
        n, x, r = rng.uniform(0.1, 500.0, size=3)
        for m in (
            concurrency_and_throughput(n, x),
            concurrency_and_latency(n, r),
            throughput_and_latency(x, r),
        ):
            assert m.concurrency == pytest.approx(m.throughput * m.latency, rel=1e-12)


def test_throughput_first_constructor_matches_concurrency_first():
    assert throughput_and_concurrency(2.0, 4.0) == concurrency_and_throughput(4.0, 2.0)
    assert throughput_and_concurrency((2.0, 4.0)) == concurrency_and_throughput(4.0, 2.0)


@pytest.mark.parametrize("point", [(4.0, 2.0), [4.0, 2.0], np.array([4.0, 2.0])])
def test_point_form_matches_scalar_form(point):
    assert concurrency_and_throughput(point) == concurrency_and_throughput(4.0, 2.0)
    assert concurrency_and_latency(point) == concurrency_and_latency(4.0, 2.0)
    assert throughput_and_latency(point) == throughput_and_latency(4.0, 2.0)


@pytest.mark.parametrize("point", [(1.0,), (1.0, 2.0, 3.0), [], 5.0, np.ones((2, 2))])
def test_point_with_wrong_arity_is_rejected(point):
    with pytest.raises(InvalidArgumentError):
        concurrency_and_throughput(point)
    with pytest.raises(InvalidArgumentError):
        concurrency_and_latency(point)
    with pytest.raises(InvalidArgumentError):
        throughput_and_latency(point)
    # Still a ValueError for callers that only know about builtins.
    with pytest.raises(ValueError):
        throughput_and_concurrency(point)


def test_division_by_zero_propagates_ieee_values():
    m = concurrency_and_throughput(1.0, 0.0)
    assert np.isinf(m.latency)

    m = concurrency_and_latency(0.0, 0.0)
    assert np.isnan(m.throughput)

    m = throughput_and_latency(float("inf"), 2.0)
    assert np.isinf(m.concurrency)


def test_measurement_is_an_immutable_value():
    a = concurrency_and_throughput(8.0, 222.0)
    b = Measurement.of_concurrency_and_throughput(8.0, 222.0)
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert (a.n, a.x, a.r) == (a.concurrency, a.throughput, a.latency)

    with pytest.raises(dataclasses.FrozenInstanceError):
        a.concurrency = 9.0  # type: ignore[misc]


def test_classmethod_constructors_delegate():
    assert Measurement.of_concurrency_and_latency(4.0, 2.0) == concurrency_and_latency(4.0, 2.0)
    assert Measurement.of_throughput_and_latency(4.0, 2.0) == throughput_and_latency(4.0, 2.0)
    assert Measurement.of_throughput_and_concurrency(2.0, 4.0) == concurrency_and_throughput(4.0, 2.0)


def test_measurements_from_frame_picks_available_columns():
    df = pd.DataFrame({"concurrency": [1.0, 2.0], "throughput": [10.0, 16.0]})
    ms = measurements_from_frame(df)
    assert ms == [concurrency_and_throughput(1.0, 10.0), concurrency_and_throughput(2.0, 16.0)]

    df = pd.DataFrame({"throughput": [10.0, 16.0], "latency": [0.1, 0.125]})
    ms = measurements_from_frame(df)
    assert [m.concurrency for m in ms] == pytest.approx([1.0, 2.0])

    df = pd.DataFrame({"n": [1.0, 2.0], "r": [0.1, 0.125]})
    ms = measurements_from_frame(df, concurrency_col="n", latency_col="r")
    assert [m.throughput for m in ms] == pytest.approx([10.0, 16.0])


def test_measurements_from_frame_rejects_single_column():
    df = pd.DataFrame({"concurrency": [1.0, 2.0], "other": [3.0, 4.0]})
    with pytest.raises(InvalidArgumentError):
        measurements_from_frame(df)


def test_measurements_to_frame_keeps_order_and_columns():
    ms = [concurrency_and_throughput(4.0, 2.0), concurrency_and_throughput(1.0, 1.0)]
    df = measurements_to_frame(ms)
    assert list(df.columns) == ["concurrency", "throughput", "latency"]
    assert df["concurrency"].tolist() == [4.0, 1.0]
    assert df["latency"].tolist() == [2.0, 1.0]
