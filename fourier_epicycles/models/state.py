from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class AnimationState:
    """Time and view parameters of the running animation.

    Attributes
    ----------
    progress:
        Normalized time within one period, always in ``[0, 1)``.
    speed:
        Laps per second; negative values run the animation backwards.
    lap_completed:
        True once a full period has been traced since the last reset, i.e.
        once ``|travelled|`` reaches 1. Stays set until the function or
        order changes.
    wrapped:
        True only on the tick whose step crossed an integer boundary. Leaving
        0 backwards wraps to just below 1 without completing a lap.
    zoom:
        View magnification, ``>= 1``. The camera follows the tip when > 1.
    travelled:
        Signed distance in periods covered since the last reset.
    """

    progress: float = 0.0
    speed: float = 0.1
    lap_completed: bool = False
    wrapped: bool = False
    zoom: float = 1.0
    travelled: float = 0.0

    def restarted(self) -> "AnimationState":
        """Same speed and zoom, time rewound to the start of a fresh lap."""
        return replace(self, progress=0.0, lap_completed=False, wrapped=False, travelled=0.0)

    @property
    def trace_limit(self) -> float:
        """Upper time bound of the visible trace."""
        return 1.0 if self.lap_completed else self.progress
