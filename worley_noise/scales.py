# worley_noise/scales.py

"""
================================================================================
DISTANCE-TO-INTENSITY SCALES
================================================================================
This module maps a raw nearest-feature distance to a normalized intensity in
[0, 1]. It is a pure, stateless utility: a scale is a tagged value
(ScaleKind + parameters) and a single dispatch function per operation.

Data Contract:
---------------
- Inputs:
    - kind: a ScaleKind (or its name).
    - map_min, normalizer: per-kind tuning parameters from configuration.
    - distances: a scalar or NumPy array of non-negative distances.
- Outputs:
    - intensities in [0, 1]. NaN and inf never escape map_intensity().
- Side Effects: None.
- Invariants: map_min and max_distance are always recomputed together by
  build_scale_state(); max_distance is computed once per grid/scale change,
  never per cell.
================================================================================
"""
import math
from enum import Enum
from typing import NamedTuple

import numpy as np

from .errors import DegenerateGridError, InvalidScaleConfigurationError
from .geometry import Grid, Point3D


class ScaleKind(Enum):
    LINEAR = 'linear'
    LOGARITHMIC = 'logarithmic'
    EXPONENTIAL = 'exponential'

    @classmethod
    def parse(cls, value) -> 'ScaleKind':
        """
        Accepts a ScaleKind or its name/value in any case. Anything else is a
        configuration error.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for kind in cls:
                if key == kind.value:
                    return kind
        raise InvalidScaleConfigurationError(f"Unknown scale kind: {value!r}")


class ScaleParams(NamedTuple):
    """Tuning parameters for one scale kind."""
    map_min: float
    normalizer: float


class ScaleState(NamedTuple):
    """The active scale plus the scalars derived from the current grid."""
    kind: ScaleKind
    map_min: float
    max_distance: float


def build_scale_params(map_min: dict, normalizer: dict) -> dict:
    """
    Combines per-kind map_min and normalizer dictionaries (keyed by kind name
    or ScaleKind) into a {ScaleKind: ScaleParams} table.
    """
    params = {}
    for kind in ScaleKind:
        lookup_min = _lookup(map_min, kind)
        lookup_norm = _lookup(normalizer, kind)
        if lookup_min is None or lookup_norm is None:
            continue
        if lookup_norm <= 0:
            raise InvalidScaleConfigurationError(
                f"Normalizer for '{kind.value}' must be positive, got {lookup_norm}"
            )
        params[kind] = ScaleParams(float(lookup_min), float(lookup_norm))

    # Every key must name a scale kind.
    for key in list(map_min) + list(normalizer):
        ScaleKind.parse(key)
    return params


def _lookup(table: dict, kind: ScaleKind):
    if kind in table:
        return table[kind]
    return table.get(kind.value)


def compute_max_distance(width: int, height: int, depth_z: float, normalizer: float) -> float:
    """
    Distance from the origin to the grid's half-extent corner, divided by the
    scale's normalizer. Half extents use integer division, so a 1x1 grid at
    depth 0 yields exactly 0.
    """
    origin = Point3D()
    half_corner = Point3D(width // 2, height // 2, depth_z / 2)
    return origin.distance_to(half_corner) / normalizer


def build_scale_state(kind, grid: Grid, depth_z: float, scale_params: dict) -> ScaleState:
    """
    Recomputes map_min and max_distance for the given kind and grid.

    Raises:
        InvalidScaleConfigurationError: unknown kind or no parameters for it.
        DegenerateGridError: the grid cannot produce a usable max_distance.
    """
    kind = ScaleKind.parse(kind)
    params = scale_params.get(kind)
    if params is None:
        raise InvalidScaleConfigurationError(f"No parameters configured for scale '{kind.value}'")
    if grid.is_degenerate:
        raise DegenerateGridError(f"Grid {grid.width}x{grid.height} has no cells")

    max_distance = compute_max_distance(grid.width, grid.height, depth_z, params.normalizer)
    if max_distance <= 0:
        raise DegenerateGridError(
            f"Grid {grid.width}x{grid.height} gives a max distance of {max_distance}"
        )
    # log10(max_distance) is the denominator of the logarithmic map.
    if kind is ScaleKind.LOGARITHMIC and math.log10(max_distance) <= 0:
        raise DegenerateGridError(
            f"Grid {grid.width}x{grid.height} is too small for a logarithmic scale "
            f"(max distance {max_distance:.3f} <= 1)"
        )
    return ScaleState(kind, params.map_min, max_distance)


def raw_intensity(state: ScaleState, distances) -> np.ndarray:
    """The un-inverted, un-clamped mapping of distances for the active kind."""
    d = np.asarray(distances, dtype=np.float64)
    map_min = state.map_min
    max_distance = state.max_distance

    if state.kind is ScaleKind.LINEAR:
        return (d - map_min) / max_distance
    elif state.kind is ScaleKind.LOGARITHMIC:
        shifted = d - map_min
        valid = (d > 0) & (shifted > 0)
        # Feed log10 a harmless 1.0 where the argument would be non-positive.
        logs = np.log10(np.where(valid, shifted, 1.0))
        return np.where(valid, logs / math.log10(max_distance), map_min)
    elif state.kind is ScaleKind.EXPONENTIAL:
        # exp(d - m) / exp(max) folded into one exponent so it cannot become inf/inf.
        with np.errstate(over='ignore'):
            return np.exp(d - map_min - max_distance)
    raise InvalidScaleConfigurationError(f"Unknown scale kind: {state.kind!r}")


def map_intensity(state: ScaleState, distances):
    """
    Converts distances to intensities in [0, 1] (1.0 = on a feature).
    Returns a float for scalar input, otherwise an array of the input's shape.
    """
    raw = raw_intensity(state, distances)
    intensity = np.clip(1.0 - raw, 0.0, 1.0)
    # -inf clips to 0 above; NaN can only come from a NaN distance.
    intensity = np.nan_to_num(intensity, nan=0.0)
    if intensity.ndim == 0:
        return float(intensity)
    return intensity
