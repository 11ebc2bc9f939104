# worley_noise/__init__.py

# This file makes the 'worley_noise' directory a Python package.
# It also defines the public API of the package.

from .engine import NoiseEngine
from .poller import RedrawPoller
from .geometry import Point3D, Grid
from .scales import ScaleKind, ScaleParams, ScaleState, build_scale_state, map_intensity
from .features import FeatureSet, FeatureHandle
from .distance_field import DistanceField, DistanceFieldCell
from .errors import DegenerateGridError, InvalidScaleConfigurationError

__all__ = [
    "NoiseEngine", "RedrawPoller",
    "Point3D", "Grid",
    "ScaleKind", "ScaleParams", "ScaleState", "build_scale_state", "map_intensity",
    "FeatureSet", "FeatureHandle",
    "DistanceField", "DistanceFieldCell",
    "DegenerateGridError", "InvalidScaleConfigurationError",
]
