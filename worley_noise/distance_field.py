# worley_noise/distance_field.py

"""
================================================================================
WORLEY DISTANCE FIELD
================================================================================
This module computes, for every grid cell, the distance to the nearest
feature point and converts it to an intensity through the active scale.

Data Contract:
---------------
- Inputs:
    - grid (Grid): the cell grid.
    - features (FeatureSet): the current feature points.
    - scale_state (ScaleState): the active distance-to-intensity scale.
    - depth_z: the z plane the cells are sampled on.
- Outputs:
    - A dense (height, width) intensity array in [0, 1].
    - A tuple of DistanceFieldCell for every cell with intensity > 0, in
      row-major order.
- Side Effects: None.
- Invariants: Every rebuild is a full re-scan. The published cell tuple is
  replaced wholesale, never edited cell by cell.
================================================================================
"""
from typing import NamedTuple

import numpy as np
from numba import njit

from .features import FeatureSet
from .geometry import Grid
from .scales import ScaleState, map_intensity


class DistanceFieldCell(NamedTuple):
    grid_x: int
    grid_y: int
    intensity: float


@njit
def nearest_feature_distances(feature_coords, width, height, depth_z):
    """
    Brute-force nearest-feature distance for every cell, O(cells x features).
    Cells are sampled at their integer grid coordinates on the depth_z plane.
    This function is JIT-compiled with Numba. No spatial index is used.
    """
    distances = np.full((height, width), np.inf)
    num_features = feature_coords.shape[0]

    for y in range(height):
        for x in range(width):
            best = np.inf
            for j in range(num_features):
                dx = feature_coords[j, 0] - x
                dy = feature_coords[j, 1] - y
                dz = feature_coords[j, 2] - depth_z
                d = np.sqrt(dx * dx + dy * dy + dz * dz)
                if d < best:
                    best = d
            distances[y, x] = best

    return distances


class DistanceField:
    """Holds the most recently published intensity field."""

    def __init__(self):
        self.grid = None
        self.intensities = np.zeros((0, 0))
        self.cells = ()

    def rebuild(self, grid: Grid, features: FeatureSet, scale_state: ScaleState,
                depth_z: float = 0) -> tuple:
        """
        Re-scans the whole grid and publishes the visible cells.
        Calling it twice with unchanged inputs yields an identical cell tuple.
        """
        distances = nearest_feature_distances(
            features.as_array(), grid.width, grid.height, float(depth_z)
        )
        intensities = map_intensity(scale_state, distances)

        # np.nonzero walks the array in row-major (C) order.
        rows, cols = np.nonzero(intensities > 0.0)
        cells = tuple(
            DistanceFieldCell(int(x), int(y), float(intensities[y, x]))
            for y, x in zip(rows, cols)
        )

        self.grid = grid
        self.intensities = intensities
        self.cells = cells
        return cells

    def clear(self, grid: Grid = None):
        """Publishes an empty field, used while the grid is degenerate."""
        self.grid = grid
        self.intensities = np.zeros((0, 0))
        self.cells = ()

    def intensity_at(self, grid_x: int, grid_y: int) -> float:
        """Intensity of a cell; 0.0 for omitted cells or positions off the grid."""
        height, width = self.intensities.shape
        if 0 <= grid_x < width and 0 <= grid_y < height:
            return float(self.intensities[grid_y, grid_x])
        return 0.0

    def coverage(self) -> tuple[int, int]:
        """(visible cells, total cells) of the published field."""
        return len(self.cells), int(self.intensities.size)
