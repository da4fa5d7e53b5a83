import tracemalloc

import numpy as np
import pytest

from usl.errors import FittingFailureError
from usl.fit.linearize import design_matrix
from usl.fit.qr import back_substitute, householder_qr, solve_least_squares


def _mk_system(m: int = 12, seed: int = 0):
    rng = np.random.default_rng(seed)
    a = rng.normal(size=(m, 3))
    b = rng.normal(size=m)
    return a, b


def test_householder_qr_reconstructs_matrix():
    a, _ = _mk_system()
    f = householder_qr(a)

    assert f.q.shape == (12, 3)
    assert f.r.shape == (3, 3)
    np.testing.assert_allclose(f.q @ f.r, a, atol=1e-12)
    np.testing.assert_allclose(f.q.T @ f.q, np.eye(3), atol=1e-12)
    np.testing.assert_array_equal(f.r, np.triu(f.r))


def test_householder_qr_does_not_mutate_input():
    a, _ = _mk_system()
    before = a.copy()
    householder_qr(a)
    np.testing.assert_array_equal(a, before)


def test_back_substitution_small_example():
    r = np.array([[2.0, 1.0], [0.0, 4.0]])
    c = back_substitute(r, np.array([4.0, 8.0]))
    np.testing.assert_allclose(c, [1.0, 2.0])


def test_solve_matches_numpy_lstsq():
    for seed in range(5):
        a, b = _mk_system(m=20, seed=seed)
        c, _ = solve_least_squares(a, b)
        c_ref, *_ = np.linalg.lstsq(a, b, rcond=None)
        np.testing.assert_allclose(c, c_ref, rtol=1e-10, atol=1e-12)


def test_solve_recovers_exact_polynomial():
    z = np.array([0.0, 1.0, 3.0, 7.0, 15.0, 31.0])
    c_true = np.array([0.5, -0.25, 0.125])
    a = design_matrix(z)
    c, _ = solve_least_squares(a, a @ c_true)
    np.testing.assert_allclose(c, c_true, rtol=1e-10, atol=1e-12)


def test_dependent_columns_are_rejected():
    z = np.array([1.0, 1.0, 1.0, 3.0, 3.0, 3.0])
    with pytest.raises(FittingFailureError):
        solve_least_squares(design_matrix(z), np.arange(6.0))

    a, b = _mk_system()
    a[:, 2] = 2.0 * a[:, 0] - a[:, 1]
    with pytest.raises(FittingFailureError):
        solve_least_squares(a, b)


def test_zero_column_is_rejected():
    a, b = _mk_system()
    a[:, 1] = 0.0
    with pytest.raises(FittingFailureError):
        solve_least_squares(a, b)


def test_underdetermined_or_non_finite_systems_are_rejected():
    with pytest.raises(FittingFailureError):
        householder_qr(np.ones((2, 3)))

    a, b = _mk_system()
    a[0, 0] = np.nan
    with pytest.raises(FittingFailureError):
        solve_least_squares(a, b)

    a, b = _mk_system()
    b[3] = np.inf
    with pytest.raises(FittingFailureError):
        solve_least_squares(a, b)

    with pytest.raises(FittingFailureError):
        solve_least_squares(a, b[:-1])


def test_design_matrix_is_fixed_quadratic_basis():
    z = np.array([0.0, 2.0, 5.0])
    np.testing.assert_array_equal(
        design_matrix(z),
        np.array([[1.0, 0.0, 0.0], [1.0, 2.0, 4.0], [1.0, 5.0, 25.0]]),
    )


def test_implicit_q_matches_explicit_transpose_product():
    a, b = _mk_system(m=30, seed=4)
    f = householder_qr(a)
    assert len(f.reflectors) == 3
    np.testing.assert_allclose(f.apply_qt(b), f.q.T @ b, atol=1e-12)


def test_tall_system_solves_in_linear_memory():
    z = np.linspace(0.0, 199.0, 6000)
    rng = np.random.default_rng(11)
    a = design_matrix(z)
    b = a @ np.array([0.1, 0.02, 0.0008]) + rng.normal(0.0, 0.01, size=z.shape[0])

    tracemalloc.start()
    try:
        c, _ = solve_least_squares(a, b)
        _, peak = tracemalloc.get_traced_memory()
    finally:
        tracemalloc.stop()

    c_ref, *_ = np.linalg.lstsq(a, b, rcond=None)
    np.testing.assert_allclose(c, c_ref, rtol=1e-8, atol=1e-10)
    # A dense 6000 x 6000 Q alone would need ~288 MB.
    assert peak < 8 * 1024 * 1024
