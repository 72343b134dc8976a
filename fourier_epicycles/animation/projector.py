"""Projection of the engine state onto renderer-agnostic primitives.

A :class:`Frame` holds everything a drawing shell needs for one frame:

- ``trace``: polyline of the reconstructed signal up to the current time,
- ``segments``: one :class:`EpicycleSegment` per coefficient (vector, circle
  and arrow head),
- ``tip``: end of the chain, followed by the camera when zoomed in.

All coordinates are in the native value range of the functions
(``[-EXTENT, EXTENT]`` on both axes before zoom).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

import numpy as np

from fourier_epicycles.analysis.superposition import epicycle_chain, terms, total
from fourier_epicycles.models.coefficients import CoefficientSet
from fourier_epicycles.models.functions import EXTENT
from fourier_epicycles.models.state import AnimationState

if TYPE_CHECKING:
    from fourier_epicycles.animation.engine import EngineSnapshot

DEFAULT_TRACE_SAMPLES = 5000
DEFAULT_MAX_TRACE_SAMPLES = 80000

HEAD_ANGLE_RAD = 0.5
HEAD_LENGTH_FACTOR = 0.1


def _xy(z: complex) -> np.ndarray:
    return np.array([z.real, z.imag], dtype=float)


@dataclass(frozen=True)
class EpicycleSegment:
    """One rotating vector of the chain.

    Attributes
    ----------
    index:
        Harmonic index ``n`` of the term.
    start, end:
        Vector tail and head, shape ``(2,)``.
    radius:
        ``|c_n|``, radius of the circle centered at ``start`` that bounds the
        rotation of this term.
    head:
        Arrow-head triangle ``(3, 2)``: tip, left barb, right barb.
    """

    index: int
    start: np.ndarray
    end: np.ndarray
    radius: float
    head: np.ndarray


@dataclass(frozen=True)
class Frame:
    """Render-ready primitives for one frame."""

    trace: np.ndarray  # (M, 2)
    segments: Tuple[EpicycleSegment, ...]
    tip: np.ndarray  # (2,)
    center: np.ndarray  # (2,)
    zoom: float
    progress: float
    lap_completed: bool

    @property
    def line_scale(self) -> float:
        """Stroke width multiplier that keeps lines thin when zoomed in."""
        return 1.0 / self.zoom

    def segment_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Stack segments as ``(starts (K, 2), ends (K, 2), radii (K,))``."""
        if not self.segments:
            empty = np.zeros((0, 2))
            return empty, empty.copy(), np.zeros(0)
        starts = np.stack([s.start for s in self.segments])
        ends = np.stack([s.end for s in self.segments])
        radii = np.array([s.radius for s in self.segments], dtype=float)
        return starts, ends, radii

    def view_limits(self, margin: float = 1.25) -> Tuple[float, float, float, float]:
        """``(xmin, xmax, ymin, ymax)`` of the visible window."""
        half = EXTENT * margin / self.zoom
        cx, cy = float(self.center[0]), float(self.center[1])
        return cx - half, cx + half, cy - half, cy + half


def trace_sample_count(zoom: float, base: int = DEFAULT_TRACE_SAMPLES, cap: int = DEFAULT_MAX_TRACE_SAMPLES) -> int:
    """Samples per period; grows with zoom so the trace does not facet."""
    return int(min(cap, max(1, math.ceil(base * max(1.0, float(zoom))))))


def trace_points(coeffs: CoefficientSet, state: AnimationState, samples: int) -> np.ndarray:
    """Trace polyline ``(M, 2)`` in ascending time.

    Samples ``total`` on the grid ``k / samples``. While the lap is open the
    grid runs from 0 up to ``progress``. Once it is completed the whole grid
    is used, rotated to start at ``progress`` and continued past 1,
    so the closed loop begins and ends at the tip. Either way the last point
    is the exact sample at ``progress``.
    """
    samples = int(samples)
    if samples < 1:
        raise ValueError(f"samples must be >= 1, got {samples}")

    p = float(state.progress)
    if state.lap_completed:
        grid = np.arange(samples, dtype=float) / samples
        # the series is 1-periodic, so t + 1 lands on the same point
        t = np.concatenate([[p], grid[grid > p], grid[grid < p] + 1.0, [p + 1.0]])
    else:
        k_max = int(math.floor(p * samples))
        t = np.minimum(np.arange(k_max + 1, dtype=float) / samples, p)
        t = np.append(t, p)

    z = total(coeffs, t)
    return np.column_stack([z.real, z.imag])


def _arrow_head(start: complex, end: complex) -> np.ndarray:
    back = start - end
    left = end + HEAD_LENGTH_FACTOR * back * complex(math.cos(HEAD_ANGLE_RAD), -math.sin(HEAD_ANGLE_RAD))
    right = end + HEAD_LENGTH_FACTOR * back * complex(math.cos(HEAD_ANGLE_RAD), math.sin(HEAD_ANGLE_RAD))
    return np.stack([_xy(end), _xy(left), _xy(right)])


def epicycle_segments(coeffs: CoefficientSet, t: float) -> Tuple[EpicycleSegment, ...]:
    """Chain of vectors at time ``t`` in index order."""
    joints = epicycle_chain(coeffs, t)
    vectors = terms(coeffs, t)
    out = []
    for i, n in enumerate(np.asarray(coeffs.indices, dtype=int)):
        start = complex(joints[i])
        end = complex(joints[i + 1])
        out.append(
            EpicycleSegment(
                index=int(n),
                start=_xy(start),
                end=_xy(end),
                radius=float(abs(vectors[i])),
                head=_arrow_head(start, end),
            )
        )
    return tuple(out)


def project_state(
    coeffs: CoefficientSet,
    state: AnimationState,
    *,
    trace_samples: int = DEFAULT_TRACE_SAMPLES,
    max_trace_samples: int = DEFAULT_MAX_TRACE_SAMPLES,
) -> Frame:
    """Build a :class:`Frame` from a coefficient set and an animation state."""
    samples = trace_sample_count(state.zoom, trace_samples, max_trace_samples)
    trace = trace_points(coeffs, state, samples)
    segments = epicycle_segments(coeffs, state.progress)
    tip = segments[-1].end.copy() if segments else np.zeros(2)
    center = tip.copy() if state.zoom > 1.0 else np.zeros(2)
    return Frame(
        trace=trace,
        segments=segments,
        tip=tip,
        center=center,
        zoom=float(state.zoom),
        progress=float(state.progress),
        lap_completed=bool(state.lap_completed),
    )


def project(
    snapshot: "EngineSnapshot",
    *,
    trace_samples: int = DEFAULT_TRACE_SAMPLES,
    max_trace_samples: int = DEFAULT_MAX_TRACE_SAMPLES,
) -> Frame:
    """Project an engine snapshot (coefficients and state read together)."""
    return project_state(
        snapshot.coefficients,
        snapshot.state,
        trace_samples=trace_samples,
        max_trace_samples=max_trace_samples,
    )
