"""Numerical core.

Design principle:
  - Functions here are pure: they take a function variant or a coefficient
    set and return new values, never touching shared state.
  - Anything that keeps state (time, zoom, the current coefficient set)
    lives in :mod:`fourier_epicycles.animation`.
"""

from .coefficients import InvalidOrderError, fourier_coefficient, solve_coefficients
from .quadrature import QuadratureResult, integrate, integrate_adaptive, integrate_trapezoid
from .superposition import epicycle_chain, partial_chain, terms, total

__all__ = [
    "InvalidOrderError",
    "QuadratureResult",
    "epicycle_chain",
    "fourier_coefficient",
    "integrate",
    "integrate_adaptive",
    "integrate_trapezoid",
    "partial_chain",
    "solve_coefficients",
    "terms",
    "total",
]
