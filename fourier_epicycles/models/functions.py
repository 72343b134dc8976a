"""Closed set of periodic test functions ``f: [0, 1) -> C``.

Every variant maps the unit interval into the square ``[-EXTENT, EXTENT]^2``
so that all of them share one drawing scale. Evaluation accepts either a
scalar time or a numpy array of times and is dispatched through
:meth:`FunctionKind.evaluate`.

Variants
--------
STEP
    ``x = 2t-1``; ``y`` jumps between 0, +1, -1 and 0 on the four quarters.
TENT
    ``x = 2t-1``; ``y`` rises linearly to +1 at ``t = 0.5`` then falls back.
SQUARE
    Perimeter of the square with corners ``(+-1, +-1)``, one side per quarter.
DIAGONAL
    ``x = y = 2t-1`` (a sawtooth along the diagonal).
SINE
    ``x = 2t-1``, ``y = sin(2 pi t)``.
CIRCLE
    ``exp(2 pi i t)``, the only variant with a single non-zero coefficient.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple, Union

import numpy as np

EXTENT: float = 1.0

TimeLike = Union[float, np.ndarray]


class FunctionKind(Enum):
    """Named parametric function variants."""

    STEP = "step"
    TENT = "tent"
    SQUARE = "square"
    DIAGONAL = "diagonal"
    SINE = "sine"
    CIRCLE = "circle"

    @classmethod
    def parse(cls, name: Union[str, "FunctionKind"]) -> "FunctionKind":
        """Resolve a variant from its (case-insensitive) name."""
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for kind in cls:
            if kind.value == key:
                return kind
        valid = ", ".join(k.value for k in cls)
        raise ValueError(f"Unknown function '{name}'. Expected one of: {valid}")

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def breakpoints(self) -> Tuple[float, ...]:
        """Interior times where the variant has a jump or a kink."""
        if self in (FunctionKind.STEP, FunctionKind.SQUARE):
            return (0.25, 0.5, 0.75)
        if self is FunctionKind.TENT:
            return (0.5,)
        return ()

    def next(self) -> "FunctionKind":
        members = list(type(self))
        return members[(members.index(self) + 1) % len(members)]

    def evaluate(self, t: TimeLike) -> Union[complex, np.ndarray]:
        """Evaluate the variant at ``t`` (scalar or array, expected in ``[0, 1)``)."""
        tt = np.asarray(t, dtype=float)
        scalar = tt.ndim == 0
        tt = np.atleast_1d(tt)

        if self is FunctionKind.STEP:
            z = _step(tt)
        elif self is FunctionKind.TENT:
            z = _tent(tt)
        elif self is FunctionKind.SQUARE:
            z = _square(tt)
        elif self is FunctionKind.DIAGONAL:
            x = 2.0 * tt - 1.0
            z = EXTENT * (x + 1j * x)
        elif self is FunctionKind.SINE:
            z = EXTENT * ((2.0 * tt - 1.0) + 1j * np.sin(2.0 * np.pi * tt))
        elif self is FunctionKind.CIRCLE:
            z = EXTENT * np.exp(2j * np.pi * tt)
        else:
            raise AssertionError(f"Unhandled function kind: {self!r}")

        if scalar:
            return complex(z[0])
        return z

    def __call__(self, t: TimeLike) -> Union[complex, np.ndarray]:
        return self.evaluate(t)


def _step(t: np.ndarray) -> np.ndarray:
    x = 2.0 * t - 1.0
    y = np.select([t < 0.25, t < 0.5, t < 0.75], [0.0, 1.0, -1.0], default=0.0)
    return EXTENT * (x + 1j * y)


def _tent(t: np.ndarray) -> np.ndarray:
    x = 2.0 * t - 1.0
    y = np.where(t < 0.5, 4.0 * t - 1.0, 3.0 - 4.0 * t)
    return EXTENT * (x + 1j * y)


def _square(t: np.ndarray) -> np.ndarray:
    # Quarter k runs along one side; s in [0, 1) is the position on that side.
    s = 4.0 * t - np.floor(4.0 * t)
    top = (-1.0 + 2.0 * s) + 1j
    right = 1.0 + 1j * (1.0 - 2.0 * s)
    bottom = (1.0 - 2.0 * s) - 1j
    left = -1.0 + 1j * (-1.0 + 2.0 * s)
    z = np.select([t < 0.25, t < 0.5, t < 0.75], [top, right, bottom], default=left)
    return EXTENT * z
