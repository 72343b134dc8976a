from __future__ import annotations

import numpy as np
import pytest

from fourier_epicycles.analysis.coefficients import solve_coefficients
from fourier_epicycles.analysis.superposition import epicycle_chain, partial_chain, terms, total
from fourier_epicycles.models.coefficients import CoefficientSet
from fourier_epicycles.models.functions import FunctionKind


def _random_set(order: int, seed: int) -> CoefficientSet:
    rng = np.random.default_rng(seed)
    values = rng.normal(size=2 * order + 1) + 1j * rng.normal(size=2 * order + 1)
    return CoefficientSet(
        function=FunctionKind.STEP,
        indices=np.arange(-order, order + 1),
        values=values,
    )


@pytest.mark.parametrize("order,seed", [(1, 0), (3, 1), (12, 2)])
def test_partial_chain_ends_at_total(order: int, seed: int) -> None:
    coeffs = _random_set(order, seed)
    for t in (0.0, 0.123, 0.5, 0.999):
        chain = partial_chain(coeffs, t)
        assert chain.shape == (2 * order + 1,)
        assert abs(chain[-1] - total(coeffs, t)) < 1e-12


def test_periodicity() -> None:
    coeffs = _random_set(8, 3)
    assert abs(total(coeffs, 0.0) - total(coeffs, 1.0)) < 1e-11


def test_vectorized_total_matches_scalar() -> None:
    coeffs = _random_set(5, 4)
    t = np.linspace(0.0, 1.0, 17)
    z = total(coeffs, t)
    assert z.shape == t.shape
    expected = np.array([total(coeffs, float(ti)) for ti in t])
    np.testing.assert_allclose(z, expected, atol=1e-12)


def test_terms_are_rotated_coefficients() -> None:
    coeffs = _random_set(2, 5)
    v = terms(coeffs, 0.25)
    # exp(2 pi i n / 4) = i^n
    expected = np.asarray(coeffs.values) * (1j ** np.arange(-2, 3))
    np.testing.assert_allclose(v, expected, atol=1e-12)
    np.testing.assert_allclose(np.abs(v), np.abs(coeffs.values), atol=1e-12)


def test_epicycle_chain_starts_at_origin() -> None:
    coeffs = _random_set(4, 6)
    joints = epicycle_chain(coeffs, 0.3)
    assert joints.shape == (10,)
    assert joints[0] == 0j
    np.testing.assert_allclose(joints[1:], partial_chain(coeffs, 0.3))


def test_reconstruction_approaches_tent() -> None:
    coeffs = solve_coefficients(FunctionKind.TENT, 32, parallel="serial")
    t = np.linspace(0.1, 0.9, 17)
    err = np.abs(total(coeffs, t) - FunctionKind.TENT.evaluate(t))
    # x = 2t - 1 jumps at the wrap and converges slowly there
    assert float(np.max(err)) < 0.05
