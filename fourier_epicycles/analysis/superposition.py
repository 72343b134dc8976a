"""Evaluation of a truncated Fourier series and of its epicycle chain.

Functions
---------
terms
    Individual rotating vectors ``c_n exp(2 pi i n t)`` in index order.
total
    Reconstructed signal, the sum of all terms (scalar or vectorized in ``t``).
partial_chain
    Cumulative sums of the terms in index order; the last element is ``total``.
epicycle_chain
    ``partial_chain`` prefixed with the origin, i.e. the joints of the chain.
"""

from __future__ import annotations

from typing import Union

import numpy as np

from fourier_epicycles.models.coefficients import CoefficientSet


def terms(coeffs: CoefficientSet, t: float) -> np.ndarray:
    """Rotating vectors at time ``t``, shape ``(2N+1,)``."""
    n = np.asarray(coeffs.indices, dtype=float)
    c = np.asarray(coeffs.values, dtype=complex)
    return c * np.exp(2j * np.pi * n * float(t))


def total(coeffs: CoefficientSet, t: Union[float, np.ndarray]) -> Union[complex, np.ndarray]:
    """Reconstructed signal ``sum_n c_n exp(2 pi i n t)``.

    ``t`` may be a scalar (returns ``complex``) or an array of any shape
    (returns a complex array of that shape).
    """
    tt = np.asarray(t, dtype=float)
    n = np.asarray(coeffs.indices, dtype=float)
    c = np.asarray(coeffs.values, dtype=complex)

    phase = np.exp(2j * np.pi * np.multiply.outer(tt, n))
    out = phase @ c
    if tt.ndim == 0:
        return complex(out)
    return out


def partial_chain(coeffs: CoefficientSet, t: float) -> np.ndarray:
    """Cumulative sums of :func:`terms`, shape ``(2N+1,)``."""
    return np.cumsum(terms(coeffs, t))


def epicycle_chain(coeffs: CoefficientSet, t: float) -> np.ndarray:
    """Chain joints starting at the origin, shape ``(2N+2,)``."""
    return np.concatenate([[0j], partial_chain(coeffs, t)])
