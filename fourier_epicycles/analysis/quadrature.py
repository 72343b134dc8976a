"""Numerical integration of real scalar functions over a finite interval.

Two rules are provided:

integrate_adaptive
    Adaptive Gauss-Kronrod integration via :func:`scipy.integrate.quad`
    (QUADPACK ``qags``, or ``qagp`` when breakpoints are given). The target
    is an absolute tolerance; the number of sub-intervals is capped so that
    integrands with jump discontinuities still terminate. A run stopped by the
    cap (or by round-off) keeps its best estimate and is reported as
    unconverged instead of failing.
integrate_trapezoid
    Composite trapezoid rule with a fixed number of steps. Predictable cost,
    no error control; the error estimate is a Richardson difference against
    the rule with twice the step.

The integrand receives a numpy array of abscissae and must return an array of
the same shape (pass ``vectorized=False`` for a pointwise callable).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np
from scipy import integrate as sp_integrate

from fourier_epicycles.models.profile import DEFAULT_TOLERANCE

DEFAULT_MAX_INTERVALS = 200
DEFAULT_TRAPEZOID_STEPS = 10000


@dataclass(frozen=True)
class QuadratureResult:
    """Outcome of one integration.

    Attributes
    ----------
    value:
        Best estimate of the integral.
    error_estimate:
        QUADPACK absolute error estimate (adaptive) or Richardson difference
        (trapezoid).
    n_evaluations:
        Number of integrand samples.
    n_intervals:
        Number of sub-intervals used.
    converged:
        False if the tolerance was not reached.
    message:
        QUADPACK diagnostic when not converged, else empty.
    """

    value: float
    error_estimate: float
    n_evaluations: int
    n_intervals: int
    converged: bool = True
    message: str = ""


RealFunction = Callable[[np.ndarray], np.ndarray]


def _sample(g: RealFunction, x: np.ndarray, vectorized: bool) -> np.ndarray:
    if vectorized:
        y = np.asarray(g(x), dtype=float)
        if y.shape != x.shape:
            raise ValueError(f"Integrand returned shape {y.shape} for input shape {x.shape}")
        return y
    return np.array([float(g(float(xi))) for xi in x], dtype=float)


def _pointwise(g: RealFunction, vectorized: bool) -> Callable[[float], float]:
    if not vectorized:
        return lambda x: float(g(float(x)))
    return lambda x: float(_sample(g, np.array([x], dtype=float), True)[0])


def integrate_adaptive(
    g: RealFunction,
    a: float = 0.0,
    b: float = 1.0,
    *,
    tolerance: float = DEFAULT_TOLERANCE,
    max_intervals: int = DEFAULT_MAX_INTERVALS,
    points: Optional[Sequence[float]] = None,
    vectorized: bool = True,
) -> QuadratureResult:
    """Integrate ``g`` over ``[a, b]`` to an absolute ``tolerance``.

    Parameters
    ----------
    g:
        Real integrand.
    a, b:
        Integration bounds, ``a < b``.
    tolerance:
        Target absolute error of the whole integral (no relative target).
    max_intervals:
        Upper bound on the number of sub-intervals. Raised to
        ``len(points) + 2`` when breakpoints are given.
    points:
        Known breakpoints (kinks, jumps) of ``g``. Those outside ``(a, b)``
        are ignored.
    vectorized:
        If False, ``g`` is called with a Python float.

    Returns
    -------
    QuadratureResult
        ``converged`` is False when QUADPACK stopped before meeting the
        tolerance. The value is still the best available estimate.
    """
    a = float(a)
    b = float(b)
    if not b > a:
        raise ValueError(f"Integration bounds must satisfy a < b, got a={a}, b={b}")
    if not tolerance > 0.0:
        raise ValueError(f"tolerance must be > 0, got {tolerance}")
    if max_intervals < 1:
        raise ValueError(f"max_intervals must be >= 1, got {max_intervals}")

    inner = sorted({float(p) for p in (points or ()) if a < float(p) < b})
    limit = int(max_intervals)
    if inner:
        limit = max(limit, len(inner) + 2)

    # full_output=1 returns the ier message instead of emitting IntegrationWarning
    out = sp_integrate.quad(
        _pointwise(g, vectorized),
        a,
        b,
        epsabs=float(tolerance),
        epsrel=0.0,
        limit=limit,
        points=inner or None,
        full_output=1,
    )
    value, error, info = out[0], out[1], out[2]
    message = str(out[3]) if len(out) > 3 else ""

    return QuadratureResult(
        value=float(value),
        error_estimate=float(error),
        n_evaluations=int(info["neval"]),
        n_intervals=int(info["last"]),
        converged=not message,
        message=message,
    )


def integrate_trapezoid(
    g: RealFunction,
    a: float = 0.0,
    b: float = 1.0,
    *,
    steps: int = DEFAULT_TRAPEZOID_STEPS,
    vectorized: bool = True,
) -> QuadratureResult:
    """Composite trapezoid rule with ``steps`` equal sub-intervals."""
    a = float(a)
    b = float(b)
    steps = int(steps)
    if not b > a:
        raise ValueError(f"Integration bounds must satisfy a < b, got a={a}, b={b}")
    if steps < 1:
        raise ValueError(f"steps must be >= 1, got {steps}")

    x = np.linspace(a, b, steps + 1)
    y = _sample(g, x, vectorized)
    value = float(sp_integrate.trapezoid(y, x))

    error = 0.0
    if steps % 2 == 0:
        coarse = float(sp_integrate.trapezoid(y[::2], x[::2]))
        error = abs(value - coarse) / 3.0

    return QuadratureResult(
        value=value,
        error_estimate=error,
        n_evaluations=int(x.size),
        n_intervals=steps,
        converged=True,
    )


def integrate(
    g: RealFunction,
    a: float = 0.0,
    b: float = 1.0,
    *,
    method: str = "adaptive",
    tolerance: float = DEFAULT_TOLERANCE,
    max_intervals: int = DEFAULT_MAX_INTERVALS,
    points: Optional[Sequence[float]] = None,
    steps: int = DEFAULT_TRAPEZOID_STEPS,
    vectorized: bool = True,
) -> QuadratureResult:
    """Dispatch to :func:`integrate_adaptive` or :func:`integrate_trapezoid`."""
    if method == "adaptive":
        return integrate_adaptive(
            g, a, b, tolerance=tolerance, max_intervals=max_intervals, points=points, vectorized=vectorized
        )
    if method == "trapezoid":
        return integrate_trapezoid(g, a, b, steps=steps, vectorized=vectorized)
    raise ValueError(f"Unknown integration method '{method}'. Expected 'adaptive' or 'trapezoid'.")
