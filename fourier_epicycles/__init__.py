"""Fourier Epicycles -- truncated Fourier series drawn as chains of rotating vectors.

This package provides tools for:
- Computing the signed-index Fourier coefficients c_{-N}..c_N of a periodic
  complex function on [0, 1) by adaptive quadrature
- Evaluating the reconstructed signal and its epicycle chain at any time
- Running the animation state machine (progress, speed, order, zoom)
- Projecting each frame into renderer-agnostic primitives (trace polyline,
  vector segments with circles, tip position)
- Validating the solver against closed-form coefficients
- Driving it all from an interactive ipywidgets notebook panel

Key principles:
- Pure numerics: solver and evaluator never keep state
- Atomic publication: a coefficient set is replaced wholesale, never mixed
- Graceful degradation: integrator caps lower precision, they never fail

Main subpackages:
- analysis: Quadrature, coefficient solver, superposition
- animation: AnimationEngine and the frame projector
- gui: Interactive ipywidgets panel with matplotlib drawing
- models: Data models (FunctionKind, CoefficientSet, AnimationState, EngineProfile)
- validation: Closed-form reference checks
"""

__all__ = []
