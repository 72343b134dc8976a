import unittest

import numpy as np
import pytest

from fourier_epicycles.analysis.coefficients import (
    InvalidOrderError,
    fourier_coefficient,
    solve_coefficients,
)
from fourier_epicycles.models.coefficients import CoefficientSet
from fourier_epicycles.models.functions import FunctionKind


class TestSolveCoefficients(unittest.TestCase):
    def test_size_and_indices(self):
        for order in (1, 2, 5):
            coeffs = solve_coefficients(FunctionKind.TENT, order, parallel="serial")
            self.assertEqual(len(coeffs), 2 * order + 1)
            self.assertEqual(coeffs.order, order)
            self.assertTrue(np.array_equal(coeffs.indices, np.arange(-order, order + 1)))
            self.assertIs(coeffs.function, FunctionKind.TENT)

    def test_circle_closed_form(self):
        """f(t) = exp(2 pi i t) has c_1 = 1 and every other coefficient 0."""
        coeffs = solve_coefficients(FunctionKind.CIRCLE, 4, parallel="serial")
        self.assertTrue(abs(coeffs.coefficient(1) - 1.0) < 1e-10)
        for n in range(-4, 5):
            if n == 1:
                continue
            self.assertTrue(abs(coeffs.coefficient(n)) < 1e-10, f"c_{n}={coeffs.coefficient(n)}")
        self.assertEqual(coeffs.warnings, ())

    def test_parallel_matches_serial(self):
        serial = solve_coefficients(FunctionKind.STEP, 6, parallel="serial")
        for mode in ("thread", "process"):
            pooled = solve_coefficients(FunctionKind.STEP, 6, parallel=mode, max_workers=2)
            self.assertTrue(np.array_equal(serial.values, pooled.values), mode)
            self.assertTrue(np.array_equal(serial.indices, pooled.indices), mode)
            self.assertEqual(serial.warnings, pooled.warnings)

    def test_repeated_solve_is_deterministic(self):
        a = solve_coefficients(FunctionKind.SQUARE, 3)
        b = solve_coefficients(FunctionKind.SQUARE, 3)
        self.assertTrue(np.array_equal(a.values, b.values))

    def test_invalid_order(self):
        with self.assertRaises(InvalidOrderError):
            solve_coefficients(FunctionKind.STEP, 0)
        with self.assertRaises(ValueError):
            solve_coefficients(FunctionKind.STEP, -3)

    def test_unknown_parallel_mode(self):
        with self.assertRaises(ValueError):
            solve_coefficients(FunctionKind.STEP, 1, parallel="gpu")


def test_single_coefficient_of_circle() -> None:
    value, warnings = fourier_coefficient(FunctionKind.CIRCLE, 1)
    assert abs(value - 1.0) < 1e-12
    assert warnings == ()


def test_diagonal_matches_analytic_coefficient() -> None:
    """For x = y = 2t - 1: c_0 = 0 and c_n = (i - 1) / (pi n)."""
    coeffs = solve_coefficients(FunctionKind.DIAGONAL, 3, parallel="serial")
    assert abs(coeffs.coefficient(0)) < 1e-10
    for n in (-3, -2, -1, 1, 2, 3):
        assert abs(coeffs.coefficient(n) - (1j - 1.0) / (np.pi * n)) < 1e-9


def test_trapezoid_integrator_is_close_on_smooth_input() -> None:
    coeffs = solve_coefficients(FunctionKind.CIRCLE, 2, method="trapezoid", steps=2000, parallel="serial")
    assert coeffs.method == "trapezoid"
    assert abs(coeffs.coefficient(1) - 1.0) < 1e-8


def test_cap_exhaustion_is_reported_not_raised() -> None:
    coeffs = solve_coefficients(FunctionKind.SINE, 1, tolerance=1e-30, max_intervals=1, parallel="serial")
    assert len(coeffs) == 3
    assert np.all(np.isfinite(coeffs.values))
    assert len(coeffs.warnings) > 0
    assert "tolerance" in coeffs.warnings[0]


def test_coefficient_outside_order_is_zero() -> None:
    coeffs = solve_coefficients(FunctionKind.CIRCLE, 1, parallel="serial")
    assert coeffs.coefficient(7) == 0j


def test_published_arrays_are_read_only() -> None:
    coeffs = solve_coefficients(FunctionKind.TENT, 1, parallel="serial")
    with pytest.raises(ValueError):
        coeffs.values[0] = 0.0


def test_coefficient_set_rejects_asymmetric_indices() -> None:
    with pytest.raises(ValueError):
        CoefficientSet(function=FunctionKind.STEP, indices=np.array([0, 1, 2]), values=np.zeros(3, dtype=complex))
    with pytest.raises(ValueError):
        CoefficientSet(function=FunctionKind.STEP, indices=np.array([-1, 0, 1]), values=np.zeros(2, dtype=complex))


def test_to_frame_columns_and_order() -> None:
    coeffs = solve_coefficients(FunctionKind.CIRCLE, 2, parallel="serial")
    df = coeffs.to_frame()
    assert list(df.columns) == ["n", "re", "im", "magnitude", "phase_rad"]
    assert df["n"].tolist() == [-2, -1, 0, 1, 2]
    assert df.loc[df["n"] == 1, "magnitude"].iloc[0] == pytest.approx(1.0, abs=1e-10)

    items = list(coeffs)
    assert [c.index for c in items] == [-2, -1, 0, 1, 2]
    assert isinstance(items[0].value, complex)


if __name__ == "__main__":
    unittest.main()
