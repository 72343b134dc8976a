"""Stateful layer: the animation state machine and the frame projector."""

from .engine import AnimationEngine, EngineSnapshot
from .projector import EpicycleSegment, Frame, project, project_state, trace_sample_count

__all__ = [
    "AnimationEngine",
    "EngineSnapshot",
    "EpicycleSegment",
    "Frame",
    "project",
    "project_state",
    "trace_sample_count",
]
