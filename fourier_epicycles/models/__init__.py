from .coefficients import CoefficientSet, FourierCoefficient
from .functions import EXTENT, FunctionKind
from .profile import EngineProfile
from .state import AnimationState

__all__ = [
    "AnimationState",
    "CoefficientSet",
    "EngineProfile",
    "EXTENT",
    "FourierCoefficient",
    "FunctionKind",
]
