"""
Matplotlib drawing of projected frames.

Design goals:
- Read-only with respect to the engine: only consumes a Frame.
- One call draws one complete frame on a cleared Axes.
- Stroke widths shrink with zoom (Frame.line_scale) so a magnified view keeps
  thin lines.
- Circle colors are jittered around one base color with a fixed seed, so the
  same frame always renders the same way.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from matplotlib.collections import LineCollection, PatchCollection
from matplotlib.colors import to_rgb
from matplotlib.patches import Circle, Polygon

from fourier_epicycles.animation.projector import Frame

BACKGROUND_COLOR = "#595756"
PATH_COLOR = "#BB8254"
VECTOR_COLOR = "#E5D09D"
VECTOR_CIRCLE_COLOR = "#807F6E"
VECTOR_CIRCLE_COLOR_STDDEV = 0.1

PATH_WIDTH = 2.0
VECTOR_WIDTH = 1.0
VECTOR_CIRCLE_WIDTH = 0.75


def circle_colors(n: int, seed: int = 0) -> np.ndarray:
    """RGB colors ``(n, 3)`` normally distributed around the circle color."""
    rng = np.random.default_rng(seed)
    base = np.asarray(to_rgb(VECTOR_CIRCLE_COLOR))
    jitter = rng.normal(0.0, VECTOR_CIRCLE_COLOR_STDDEV, size=(int(n), 3))
    return np.clip(base[None, :] + jitter, 0.0, 1.0)


def draw_frame(ax, frame: Frame, *, show_circles: bool = True, title: Optional[str] = None, seed: int = 0):
    """Draw ``frame`` on ``ax`` (cleared first) and return ``ax``.

    Layers, bottom to top: circles, trace, vectors with arrow heads.
    """
    ax.clear()
    ax.set_facecolor(BACKGROUND_COLOR)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])

    scale = frame.line_scale
    starts, ends, radii = frame.segment_arrays()

    if show_circles and radii.size:
        circles = [Circle((float(s[0]), float(s[1])), float(r)) for s, r in zip(starts, radii)]
        pc = PatchCollection(
            circles,
            facecolor="none",
            edgecolor=circle_colors(len(circles), seed=seed),
            linewidth=VECTOR_CIRCLE_WIDTH * scale,
        )
        ax.add_collection(pc)

    if frame.trace.shape[0] >= 2:
        ax.plot(frame.trace[:, 0], frame.trace[:, 1], color=PATH_COLOR, linewidth=PATH_WIDTH * scale)

    if radii.size:
        lc = LineCollection(np.stack([starts, ends], axis=1), colors=VECTOR_COLOR, linewidths=VECTOR_WIDTH * scale)
        ax.add_collection(lc)
        heads = [Polygon(seg.head, closed=True) for seg in frame.segments]
        ax.add_collection(PatchCollection(heads, facecolor=VECTOR_COLOR, edgecolor="none"))

    xmin, xmax, ymin, ymax = frame.view_limits()
    ax.set_xlim(xmin, xmax)
    ax.set_ylim(ymin, ymax)
    if title:
        ax.set_title(title)
    return ax
