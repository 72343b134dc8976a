"""Engine profile -- bundles all configuration that affects the output.

An EngineProfile groups every parameter of the solver, the animation and the
projector into one frozen dataclass. It can be:

- Constructed with defaults (N=16, TENT, a tenth of a lap per second)
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict for provenance
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from fourier_epicycles.models.functions import FunctionKind

INTEGRATORS: Tuple[str, ...] = ("adaptive", "trapezoid")
PARALLEL_MODES: Tuple[str, ...] = ("thread", "process", "serial")

DEFAULT_TOLERANCE: float = 1e-10


@dataclass(frozen=True)
class EngineProfile:
    """Frozen configuration for the solver, engine and projector.

    Series
    ------
    function : FunctionKind
        Variant shown at start-up.
    order : int
        Initial truncation order N (2N+1 coefficients).
    order_step : int
        Increment used by ``increase_order`` / ``decrease_order``.
    min_order : int
        Smallest accepted order.

    Animation
    ---------
    speed : float
        Laps per second (signed).
    zoom : float
        Initial magnification (>= 1).
    zoom_step : float
        Factor used by ``zoom_in`` / ``zoom_out``.
    ticks_per_second : int
        Rate of the fixed tick loop driven by the shell.

    Integrator
    ----------
    integrator : str
        ``"adaptive"`` (QUADPACK Gauss-Kronrod via scipy, to ``tolerance``) or ``"trapezoid"``
        (fixed ``trapezoid_steps``).
    tolerance : float
        Target absolute error of each real integral.
    max_intervals : int
        Cap on adaptive sub-intervals; guarantees termination on discontinuous input.
    parallel : str
        Fan-out strategy over coefficient indices: ``"thread"``,
        ``"process"`` or ``"serial"``.
    max_workers : int or None
        Pool size (None lets ``concurrent.futures`` decide).

    Projector
    ---------
    trace_samples : int
        Trace samples per period at zoom 1. Scaled with zoom.
    max_trace_samples : int
        Upper bound on the zoom-scaled sample count.
    """

    function: FunctionKind = FunctionKind.TENT
    order: int = 16
    order_step: int = 2
    min_order: int = 1

    speed: float = 0.1
    zoom: float = 1.0
    zoom_step: float = 2.0
    ticks_per_second: int = 60

    integrator: str = "adaptive"
    tolerance: float = DEFAULT_TOLERANCE
    max_intervals: int = 200
    trapezoid_steps: int = 10000
    parallel: str = "thread"
    max_workers: Optional[int] = None

    trace_samples: int = 5000
    max_trace_samples: int = 80000

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> Tuple[str, ...]:
        """Return a tuple of human-readable problems (empty when valid)."""
        problems = []
        if self.min_order < 1:
            problems.append(f"min_order must be >= 1, got {self.min_order}")
        if self.order < self.min_order:
            problems.append(f"order must be >= min_order={self.min_order}, got {self.order}")
        if self.order_step < 1:
            problems.append(f"order_step must be >= 1, got {self.order_step}")
        if self.zoom < 1.0:
            problems.append(f"zoom must be >= 1, got {self.zoom}")
        if self.zoom_step <= 1.0:
            problems.append(f"zoom_step must be > 1, got {self.zoom_step}")
        if self.ticks_per_second <= 0:
            problems.append(f"ticks_per_second must be > 0, got {self.ticks_per_second}")
        if self.integrator not in INTEGRATORS:
            problems.append(f"integrator must be one of {INTEGRATORS}, got '{self.integrator}'")
        if not self.tolerance > 0.0:
            problems.append(f"tolerance must be > 0, got {self.tolerance}")
        if self.max_intervals < 1:
            problems.append(f"max_intervals must be >= 1, got {self.max_intervals}")
        if self.trapezoid_steps < 1:
            problems.append(f"trapezoid_steps must be >= 1, got {self.trapezoid_steps}")
        if self.parallel not in PARALLEL_MODES:
            problems.append(f"parallel must be one of {PARALLEL_MODES}, got '{self.parallel}'")
        if self.trace_samples < 1:
            problems.append(f"trace_samples must be >= 1, got {self.trace_samples}")
        if self.max_trace_samples < self.trace_samples:
            problems.append("max_trace_samples must be >= trace_samples")
        return tuple(problems)

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------

    @property
    def tick_seconds(self) -> float:
        return 1.0 / float(self.ticks_per_second)

    def quadrature_options(self) -> Dict[str, Any]:
        """Keyword arguments understood by the coefficient solver."""
        return dict(
            method=self.integrator,
            tolerance=self.tolerance,
            max_intervals=self.max_intervals,
            steps=self.trapezoid_steps,
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (the function is stored by name)."""
        d = asdict(self)
        d["function"] = self.function.value
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> EngineProfile:
        """Reconstruct from a dict (e.g. loaded from JSON)."""
        d = dict(d)  # shallow copy
        if "function" in d:
            d["function"] = FunctionKind.parse(d["function"])
        return cls(**d)
