"""Animation state machine.

The engine owns the active function, the truncation order, the coefficient
set and the :class:`~fourier_epicycles.models.state.AnimationState`. All of
it is published as one immutable :class:`EngineSnapshot`, replaced wholesale
by every transition, so a reader that grabs ``engine.snapshot`` always sees
coefficients and state of the same generation without taking a lock.

Transitions
-----------
tick(dt)
    Advance progress by ``speed * dt`` modulo 1. The lap is completed once
    the distance travelled since the last restart reaches one period.
set_order / change_order / set_function / next_function
    Recompute the coefficients, then restart the lap.
set_speed / change_speed / reverse
    Change speed only.
set_zoom / change_zoom / zoom_in / zoom_out
    Change the view magnification only.

Parameter changes are serialized by a re-entrant lock: a command that
arrives while a recompute is running waits for it to publish. ``submit_*``
variants run the recompute on a single background worker so that a
fixed-rate tick loop keeps drawing the previous generation meanwhile.
"""

from __future__ import annotations

import math
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Callable, Optional, Union

from fourier_epicycles.analysis.coefficients import solve_coefficients
from fourier_epicycles.animation.projector import Frame, project
from fourier_epicycles.models.coefficients import CoefficientSet
from fourier_epicycles.models.functions import FunctionKind
from fourier_epicycles.models.profile import EngineProfile
from fourier_epicycles.models.state import AnimationState

LogSink = Callable[[str], None]


@dataclass(frozen=True)
class EngineSnapshot:
    """Everything a frame is drawn from, published atomically."""

    function: FunctionKind
    order: int
    coefficients: CoefficientSet
    state: AnimationState


class AnimationEngine:
    """Owns the running animation and turns commands into new snapshots.

    Parameters
    ----------
    profile:
        Configuration; defaults to :class:`EngineProfile` defaults.
    log:
        Optional sink for user-facing messages (e.g. ``HtmlLog.write`` or
        ``print``). Rejections and solver diagnostics are prefixed with
        ``WARNING:``.
    """

    def __init__(self, profile: Optional[EngineProfile] = None, *, log: Optional[LogSink] = None) -> None:
        profile = profile if profile is not None else EngineProfile()
        problems = profile.validate()
        if problems:
            raise ValueError("Invalid EngineProfile: " + "; ".join(problems))

        self.profile = profile
        self._log = log
        self._command_lock = threading.RLock()
        self._publish_lock = threading.Lock()
        self._background: Optional[ThreadPoolExecutor] = None

        coeffs = self._solve(profile.function, profile.order)
        self._snapshot = EngineSnapshot(
            function=profile.function,
            order=int(profile.order),
            coefficients=coeffs,
            state=AnimationState(speed=float(profile.speed), zoom=float(profile.zoom)),
        )
        self._report(coeffs)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> EngineSnapshot:
        return self._snapshot

    @property
    def state(self) -> AnimationState:
        return self._snapshot.state

    @property
    def coefficients(self) -> CoefficientSet:
        return self._snapshot.coefficients

    @property
    def order(self) -> int:
        return self._snapshot.order

    @property
    def function(self) -> FunctionKind:
        return self._snapshot.function

    def frame(self) -> Frame:
        """Project the current snapshot into drawable primitives."""
        return project(
            self._snapshot,
            trace_samples=self.profile.trace_samples,
            max_trace_samples=self.profile.max_trace_samples,
        )

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def tick(self, dt: Optional[float] = None) -> AnimationState:
        """Advance time by ``dt`` seconds (default: one tick of the profile rate)."""
        dt = self.profile.tick_seconds if dt is None else float(dt)
        if not dt >= 0.0:
            raise ValueError(f"dt must be >= 0, got {dt}")

        with self._publish_lock:
            snap = self._snapshot
            st = snap.state
            raw = st.progress + st.speed * dt
            laps = math.floor(raw)
            progress = raw - laps
            if progress >= 1.0:
                # raw was a tiny negative number; progress must stay in [0, 1)
                progress = 0.0
            travelled = st.travelled + st.speed * dt
            new_state = replace(
                st,
                progress=progress,
                wrapped=laps != 0,
                travelled=travelled,
                lap_completed=st.lap_completed or abs(travelled) >= 1.0,
            )
            self._snapshot = replace(snap, state=new_state)
        return new_state

    def reset(self) -> None:
        """Restart the lap without recomputing."""
        self._update_state(lambda st: st.restarted())

    # ------------------------------------------------------------------
    # Series parameters (recompute + restart)
    # ------------------------------------------------------------------

    def set_order(self, order: int) -> bool:
        """Recompute at truncation order ``order``.

        Returns False (state untouched) when ``order`` is below the minimum.
        """
        order = int(order)
        with self._command_lock:
            previous = self.order
            if order < self.profile.min_order:
                self._emit(f"WARNING: order {order} rejected (minimum is {self.profile.min_order}); keeping n={previous}")
                return False
            self._recompute(self.function, order)

        if order > previous:
            self._emit(f"Increased n to {order}")
        elif order < previous:
            self._emit(f"Decreased n to {order}")
        else:
            self._emit(f"Recomputed n={order}")
        return True

    def change_order(self, delta: int) -> bool:
        """Shift the order by ``delta``; a no-op if it would fall below the minimum."""
        with self._command_lock:
            target = self.order + int(delta)
            if target < self.profile.min_order:
                return False
            return self.set_order(target)

    def increase_order(self) -> bool:
        return self.change_order(self.profile.order_step)

    def decrease_order(self) -> bool:
        return self.change_order(-self.profile.order_step)

    def set_function(self, function: Union[FunctionKind, str]) -> bool:
        """Switch to another function variant."""
        kind = FunctionKind.parse(function)
        with self._command_lock:
            self._recompute(kind, self.order)
        self._emit(f"Function set to {kind.label}")
        return True

    def next_function(self) -> bool:
        with self._command_lock:
            return self.set_function(self.function.next())

    # ------------------------------------------------------------------
    # Speed and zoom (no recompute)
    # ------------------------------------------------------------------

    def set_speed(self, speed: float) -> None:
        speed = float(speed)
        if not math.isfinite(speed):
            raise ValueError(f"speed must be finite, got {speed}")
        self._update_state(lambda st: replace(st, speed=speed))

    def change_speed(self, factor: float) -> None:
        factor = float(factor)
        if not math.isfinite(factor):
            raise ValueError(f"speed factor must be finite, got {factor}")
        self._update_state(lambda st: replace(st, speed=st.speed * factor))

    def reverse(self) -> None:
        self.change_speed(-1.0)

    def set_zoom(self, zoom: float) -> bool:
        zoom = float(zoom)
        if not (math.isfinite(zoom) and zoom >= 1.0):
            self._emit(f"WARNING: zoom {zoom} rejected (must be >= 1)")
            return False
        self._update_state(lambda st: replace(st, zoom=zoom))
        return True

    def change_zoom(self, factor: float) -> None:
        factor = float(factor)
        if not factor > 0.0:
            raise ValueError(f"zoom factor must be > 0, got {factor}")
        self._update_state(lambda st: replace(st, zoom=max(1.0, st.zoom * factor)))

    def zoom_in(self) -> None:
        self.change_zoom(self.profile.zoom_step)

    def zoom_out(self) -> None:
        self.change_zoom(1.0 / self.profile.zoom_step)

    # ------------------------------------------------------------------
    # Background recompute
    # ------------------------------------------------------------------

    def submit_order(self, order: int) -> "Future[bool]":
        """Run :meth:`set_order` on the background worker."""
        return self._executor().submit(self.set_order, order)

    def submit_change_order(self, delta: int) -> "Future[bool]":
        return self._executor().submit(self.change_order, delta)

    def submit_function(self, function: Union[FunctionKind, str]) -> "Future[bool]":
        """Run :meth:`set_function` on the background worker."""
        return self._executor().submit(self.set_function, function)

    def close(self) -> None:
        """Wait for pending background recomputes and release the worker."""
        if self._background is not None:
            self._background.shutdown(wait=True)
            self._background = None

    def __enter__(self) -> "AnimationEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _executor(self) -> ThreadPoolExecutor:
        with self._command_lock:
            if self._background is None:
                self._background = ThreadPoolExecutor(max_workers=1, thread_name_prefix="recompute")
            return self._background

    def _solve(self, function: FunctionKind, order: int) -> CoefficientSet:
        p = self.profile
        return solve_coefficients(
            function,
            order,
            parallel=p.parallel,
            max_workers=p.max_workers,
            min_order=p.min_order,
            **p.quadrature_options(),
        )

    def _recompute(self, function: FunctionKind, order: int) -> None:
        # Caller holds the command lock; the solver runs outside the publish
        # lock so ticks keep advancing the previous generation meanwhile.
        coeffs = self._solve(function, order)
        with self._publish_lock:
            snap = self._snapshot
            self._snapshot = EngineSnapshot(
                function=function,
                order=int(order),
                coefficients=coeffs,
                state=snap.state.restarted(),
            )
        self._report(coeffs)

    def _update_state(self, fn: Callable[[AnimationState], AnimationState]) -> None:
        with self._publish_lock:
            snap = self._snapshot
            self._snapshot = replace(snap, state=fn(snap.state))

    def _report(self, coeffs: CoefficientSet) -> None:
        if coeffs.warnings:
            self._emit(
                f"WARNING: {len(coeffs.warnings)} integral(s) for {coeffs.function.value} n={coeffs.order} "
                f"missed the tolerance; first: {coeffs.warnings[0]}"
            )

    def _emit(self, message: str) -> None:
        if self._log is not None:
            self._log(message)
