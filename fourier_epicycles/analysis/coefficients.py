r"""Fourier coefficients of a periodic complex function on ``[0, 1)``.

For ``f(t) = r(t) exp(i phi(t))`` the coefficient of index ``n`` is

.. math::

    c_n = \int_0^1 f(t) e^{-2\pi i n t} dt
        = \int_0^1 r(t) \cos\lambda(t) dt + i \int_0^1 r(t) \sin\lambda(t) dt,

with :math:`\lambda(t) = \phi(t) - 2\pi n t`. Both parts are real integrals
handed to :mod:`fourier_epicycles.analysis.quadrature`.

Indices are independent of each other, so :func:`solve_coefficients` fans
them out over a ``concurrent.futures`` pool and places every result in its
own slot ``n + N`` of a fresh buffer. The published set is therefore the same
whatever the completion order.
"""

from __future__ import annotations

from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Optional, Tuple

import numpy as np

from fourier_epicycles.analysis.quadrature import (
    DEFAULT_MAX_INTERVALS,
    DEFAULT_TRAPEZOID_STEPS,
    integrate,
)
from fourier_epicycles.models.coefficients import CoefficientSet
from fourier_epicycles.models.functions import FunctionKind
from fourier_epicycles.models.profile import DEFAULT_TOLERANCE, PARALLEL_MODES


class InvalidOrderError(ValueError):
    """Requested truncation order is below the accepted minimum."""


def fourier_coefficient(
    function: FunctionKind,
    n: int,
    *,
    method: str = "adaptive",
    tolerance: float = DEFAULT_TOLERANCE,
    max_intervals: int = DEFAULT_MAX_INTERVALS,
    steps: int = DEFAULT_TRAPEZOID_STEPS,
) -> Tuple[complex, Tuple[str, ...]]:
    """Compute ``c_n`` for ``function``.

    Returns
    -------
    (value, warnings)
        ``warnings`` lists the parts whose integration missed the tolerance.
    """
    n = int(n)
    omega = 2.0 * np.pi * n

    def polar(t: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        z = function.evaluate(t)
        return np.abs(z), np.angle(z) - omega * t

    def real_part(t: np.ndarray) -> np.ndarray:
        r, lam = polar(t)
        return r * np.cos(lam)

    def imag_part(t: np.ndarray) -> np.ndarray:
        r, lam = polar(t)
        return r * np.sin(lam)

    opts = dict(method=method, tolerance=tolerance, max_intervals=max_intervals, steps=steps)
    re = integrate(real_part, 0.0, 1.0, points=function.breakpoints, **opts)
    im = integrate(imag_part, 0.0, 1.0, points=function.breakpoints, **opts)

    warnings = []
    for name, res in (("re", re), ("im", im)):
        if not res.converged:
            warnings.append(
                f"{function.value} n={n} {name}: tolerance {tolerance:g} not met "
                f"(error estimate {res.error_estimate:.3g}, {res.n_intervals} intervals): {res.message}"
            )
    return complex(re.value, im.value), tuple(warnings)


def _solve_one(args: Tuple[FunctionKind, int, dict]) -> Tuple[int, complex, Tuple[str, ...]]:
    function, n, opts = args
    value, warnings = fourier_coefficient(function, n, **opts)
    return n, value, warnings


def _make_executor(parallel: str, max_workers: Optional[int]) -> Optional[Executor]:
    if parallel == "thread":
        return ThreadPoolExecutor(max_workers=max_workers)
    if parallel == "process":
        return ProcessPoolExecutor(max_workers=max_workers)
    return None


def solve_coefficients(
    function: FunctionKind,
    order: int,
    *,
    method: str = "adaptive",
    tolerance: float = DEFAULT_TOLERANCE,
    max_intervals: int = DEFAULT_MAX_INTERVALS,
    steps: int = DEFAULT_TRAPEZOID_STEPS,
    parallel: str = "thread",
    max_workers: Optional[int] = None,
    min_order: int = 1,
) -> CoefficientSet:
    """Compute the coefficient set ``c_{-N} .. c_N`` of ``function``.

    Parameters
    ----------
    function:
        Variant to decompose.
    order:
        Truncation order ``N >= min_order``.
    method, tolerance, max_intervals, steps:
        Integrator options, see :func:`~fourier_epicycles.analysis.quadrature.integrate`.
    parallel:
        ``"thread"``, ``"process"`` or ``"serial"``.
    max_workers:
        Pool size for the parallel modes.

    Raises
    ------
    InvalidOrderError
        If ``order < min_order``.
    """
    order = int(order)
    if order < min_order:
        raise InvalidOrderError(f"order must be >= {min_order}, got {order}")
    if parallel not in PARALLEL_MODES:
        raise ValueError(f"parallel must be one of {PARALLEL_MODES}, got '{parallel}'")

    function = FunctionKind.parse(function)
    opts = dict(method=method, tolerance=tolerance, max_intervals=max_intervals, steps=steps)
    indices = np.arange(-order, order + 1, dtype=int)
    jobs = [(function, int(n), opts) for n in indices]

    values = np.empty(indices.size, dtype=complex)
    warnings = []

    executor = _make_executor(parallel, max_workers)
    if executor is None:
        results = [_solve_one(job) for job in jobs]
    else:
        with executor:
            results = list(executor.map(_solve_one, jobs))

    for n, value, w in results:
        values[n + order] = value
        warnings.extend(w)

    values.setflags(write=False)
    indices.setflags(write=False)
    return CoefficientSet(
        function=function,
        indices=indices,
        values=values,
        method=method,
        warnings=tuple(warnings),
    )
