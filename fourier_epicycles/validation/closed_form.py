"""Closed-form validation of the coefficient solver.

Every function variant is either piecewise linear in ``t`` or a short sum of
complex exponentials, so its Fourier coefficients have an exact expression.
This module computes those references independently of the quadrature path
and compares them with :func:`~fourier_epicycles.analysis.coefficients.solve_coefficients`.

For one linear piece ``f(t) = p + q t`` on ``[a, b)`` and ``c = -2 pi i n``:

- ``n = 0``: ``p (b - a) + q (b^2 - a^2) / 2``
- ``n != 0``: ``p [e^{ct}/c]_a^b + q [e^{ct} (t/c - 1/c^2)]_a^b``

Examples
--------
>>> from fourier_epicycles.models.functions import FunctionKind
>>> rep = validate_function(FunctionKind.CIRCLE, order=2)
>>> rep.ok
True
"""

from __future__ import annotations

import cmath
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from fourier_epicycles.analysis.coefficients import solve_coefficients
from fourier_epicycles.models.functions import EXTENT, FunctionKind

# (a, b, p, q): f(t) = p + q t on [a, b)
Piece = Tuple[float, float, complex, complex]

_PIECES: Dict[FunctionKind, Tuple[Piece, ...]] = {
    FunctionKind.STEP: (
        (0.00, 0.25, -1 + 0j, 2 + 0j),
        (0.25, 0.50, -1 + 1j, 2 + 0j),
        (0.50, 0.75, -1 - 1j, 2 + 0j),
        (0.75, 1.00, -1 + 0j, 2 + 0j),
    ),
    FunctionKind.TENT: (
        (0.0, 0.5, -1 - 1j, 2 + 4j),
        (0.5, 1.0, -1 + 3j, 2 - 4j),
    ),
    FunctionKind.SQUARE: (
        (0.00, 0.25, -1 + 1j, 8 + 0j),
        (0.25, 0.50, 1 + 3j, -8j),
        (0.50, 0.75, 5 - 1j, -8 + 0j),
        (0.75, 1.00, -1 - 7j, 8j),
    ),
    FunctionKind.DIAGONAL: ((0.0, 1.0, -1 - 1j, 2 + 2j),),
    FunctionKind.SINE: ((0.0, 1.0, -1 + 0j, 2 + 0j),),
    FunctionKind.CIRCLE: (),
}

# Extra exponential terms {n: c_n} on top of the linear pieces.
_EXPONENTIALS: Dict[FunctionKind, Dict[int, complex]] = {
    FunctionKind.SINE: {1: 0.5 + 0j, -1: -0.5 + 0j},
    FunctionKind.CIRCLE: {1: 1 + 0j},
}


def _piece_coefficient(piece: Piece, n: int) -> complex:
    a, b, p, q = piece
    if n == 0:
        return p * (b - a) + q * (b * b - a * a) / 2.0
    c = -2j * np.pi * n
    eb = cmath.exp(c * b)
    ea = cmath.exp(c * a)
    constant = (eb - ea) / c
    linear = eb * (b / c - 1.0 / (c * c)) - ea * (a / c - 1.0 / (c * c))
    return p * constant + q * linear


def exact_coefficients(kind: FunctionKind, order: int) -> np.ndarray:
    """Reference coefficients ``c_{-N} .. c_N`` of ``kind``, shape ``(2N+1,)``."""
    kind = FunctionKind.parse(kind)
    if kind not in _PIECES:
        raise KeyError(f"No closed-form reference for {kind!r}")
    order = int(order)
    out = np.zeros(2 * order + 1, dtype=complex)
    extra = _EXPONENTIALS.get(kind, {})
    for i, n in enumerate(range(-order, order + 1)):
        value = sum((_piece_coefficient(piece, n) for piece in _PIECES[kind]), 0j)
        out[i] = EXTENT * (value + extra.get(n, 0j))
    return out


@dataclass(frozen=True)
class ValidationReport:
    """Comparison of solver output with the closed-form reference.

    Attributes
    ----------
    kind, order:
        What was validated.
    max_abs_error:
        ``max_n |c_n(solver) - c_n(exact)|``.
    worst_index:
        Index ``n`` where the maximum occurs.
    atol:
        Acceptance threshold.
    ok:
        ``max_abs_error <= atol``.
    warnings:
        Solver diagnostics (integrator caps), passed through.
    """

    kind: FunctionKind
    order: int
    max_abs_error: float
    worst_index: int
    atol: float
    ok: bool
    warnings: Tuple[str, ...] = ()

    def summary(self) -> str:
        status = "OK  " if self.ok else "FAIL"
        return (
            f"{status} {self.kind.value:<9} N={self.order:<4d} "
            f"max|err|={self.max_abs_error:.3e} at n={self.worst_index} (atol={self.atol:g})"
        )


def validate_function(kind: FunctionKind, order: int = 16, *, atol: float = 1e-8, **solver_options) -> ValidationReport:
    """Solve ``kind`` at ``order`` and compare with the exact coefficients."""
    kind = FunctionKind.parse(kind)
    coeffs = solve_coefficients(kind, order, **solver_options)
    exact = exact_coefficients(kind, order)
    err = np.abs(np.asarray(coeffs.values) - exact)
    i_worst = int(np.argmax(err))
    max_err = float(err[i_worst])
    return ValidationReport(
        kind=kind,
        order=int(order),
        max_abs_error=max_err,
        worst_index=int(coeffs.indices[i_worst]),
        atol=float(atol),
        ok=bool(max_err <= atol),
        warnings=coeffs.warnings,
    )


def validate_all(
    order: int = 16,
    *,
    atol: float = 1e-8,
    kinds: Optional[Sequence[FunctionKind]] = None,
    **solver_options,
) -> List[ValidationReport]:
    """Run :func:`validate_function` for every variant (or the given ones)."""
    selected = list(FunctionKind) if kinds is None else [FunctionKind.parse(k) for k in kinds]
    return [validate_function(k, order, atol=atol, **solver_options) for k in selected]


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse

    p = argparse.ArgumentParser(
        description="Compare solver coefficients with closed-form references.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m fourier_epicycles.validation.closed_form --order 16\n"
            "  python -m fourier_epicycles.validation.closed_form --integrator trapezoid --atol 1e-3\n"
        ),
    )
    p.add_argument("--order", type=int, default=16, help="Truncation order N (default: 16)")
    p.add_argument("--atol", type=float, default=1e-8, help="Acceptance threshold on max |error|")
    p.add_argument("--function", action="append", default=None, help="Variant to check (repeatable; default: all)")
    p.add_argument("--integrator", choices=("adaptive", "trapezoid"), default="adaptive")
    p.add_argument("--tolerance", type=float, default=1e-10, help="Adaptive integrator tolerance")
    p.add_argument("--parallel", choices=("thread", "process", "serial"), default="thread")
    args = p.parse_args(argv)

    reports = validate_all(
        args.order,
        atol=args.atol,
        kinds=args.function,
        method=args.integrator,
        tolerance=args.tolerance,
        parallel=args.parallel,
    )
    for rep in reports:
        print(rep.summary())
        for w in rep.warnings:
            print(f"  WARNING: {w}")

    n_fail = sum(1 for r in reports if not r.ok)
    print(f"{len(reports) - n_fail}/{len(reports)} passed")
    return 1 if n_fail else 0


if __name__ == "__main__":
    raise SystemExit(main())
