from .base import FovAlgorithm, TransparencyMap
from .los import LineOfSightFov
from .shadowcast import ShadowcastFov
from .visibility import VisibilityEngine

__all__ = ["FovAlgorithm", "TransparencyMap", "LineOfSightFov", "ShadowcastFov", "VisibilityEngine"]
