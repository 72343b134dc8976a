from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np
import pandas as pd

from fourier_epicycles.models.functions import FunctionKind


@dataclass(frozen=True)
class FourierCoefficient:
    """One term ``value * exp(2 pi i index t)`` of the truncated series."""

    index: int
    value: complex


@dataclass(frozen=True)
class CoefficientSet:
    """Truncated Fourier series of one function at one order.

    Attributes
    ----------
    function:
        Variant the coefficients were computed from.
    indices:
        Signed harmonic indices ``[-N, ..., N]``, shape ``(2N+1,)``, ascending.
    values:
        Complex coefficients aligned with ``indices``.
    method:
        Integrator used (``"adaptive"`` or ``"trapezoid"``).
    warnings:
        Non-fatal diagnostics collected while solving (e.g. integrator
        non-convergence near discontinuities).

    Notes
    -----
    Instances are never mutated. A change of function or order produces a
    new set, so one ``(function, order)`` pair always backs a given set.
    """

    function: FunctionKind
    indices: np.ndarray
    values: np.ndarray
    method: str = "adaptive"
    warnings: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        idx = np.asarray(self.indices)
        val = np.asarray(self.values)
        if idx.ndim != 1 or val.shape != idx.shape:
            raise ValueError(
                f"indices and values must be 1D of equal length, got {idx.shape} and {val.shape}"
            )
        n = idx.size // 2
        if idx.size % 2 != 1 or not np.array_equal(idx, np.arange(-n, n + 1)):
            raise ValueError("indices must be the contiguous symmetric range [-N, N]")

    @property
    def order(self) -> int:
        return int(np.asarray(self.indices).size // 2)

    def __len__(self) -> int:
        return int(np.asarray(self.indices).size)

    def __iter__(self) -> Iterator[FourierCoefficient]:
        for n, c in zip(self.indices, self.values):
            yield FourierCoefficient(index=int(n), value=complex(c))

    def coefficient(self, n: int) -> complex:
        """Return ``c_n``; indices outside ``[-N, N]`` are zero by truncation."""
        n = int(n)
        if abs(n) > self.order:
            return 0j
        return complex(self.values[n + self.order])

    def to_frame(self) -> pd.DataFrame:
        """Tabular view: one row per coefficient, ordered by index."""
        val = np.asarray(self.values, dtype=complex)
        return pd.DataFrame(
            {
                "n": np.asarray(self.indices, dtype=int),
                "re": val.real,
                "im": val.imag,
                "magnitude": np.abs(val),
                "phase_rad": np.angle(val),
            }
        )
