# worley_noise/features.py

"""
================================================================================
FEATURE POINT SET
================================================================================
This module owns the Worley feature (seed) points. Points are scattered
uniformly over a domain slightly larger than the visible grid so cells near
the border still have nearby seeds.

Data Contract:
---------------
- Inputs:
    - Grid dimensions, overflow fraction, depth, seed.
- Outputs:
    - A fixed-length, ordered list of Point3D objects.
    - FeatureHandle values identifying one point within one generation.
- Side Effects: None outside the instance.
- Invariants:
    - len(feature_set) never changes after construction.
    - regenerate() bumps the generation, which invalidates every handle and
      clears the selection.
================================================================================
"""
from typing import NamedTuple

import numpy as np

from .geometry import Point3D


class FeatureHandle(NamedTuple):
    """Identifies a feature by storage index within one generation of the set."""
    index: int
    generation: int


def generate_feature_points(grid_width: int, grid_height: int, count: int,
                            overflow: float, depth_z: float, seed=None) -> list[Point3D]:
    """
    Scatters `count` points over the grid inflated by `overflow`, snapped to
    whole cells. `seed` may be an int, a numpy Generator or None for OS entropy.
    """
    rng = np.random.default_rng(seed)
    margin = overflow / 2.0
    xs = rng.uniform(-margin * grid_width, grid_width * (1.0 + margin), count)
    ys = rng.uniform(-margin * grid_height, grid_height * (1.0 + margin), count)
    xs = np.floor(xs).astype(int)
    ys = np.floor(ys).astype(int)
    return [Point3D(int(x), int(y), depth_z) for x, y in zip(xs, ys)]


class FeatureSet:
    """
    The fixed-capacity collection of feature points plus the current selection.
    """
    def __init__(self, max_features: int):
        if max_features < 0:
            raise ValueError(f"max_features must be >= 0, got {max_features}")
        self.max_features = max_features
        self.generation = 0
        self._points = [Point3D() for _ in range(max_features)]
        self._selected = None

    @classmethod
    def from_points(cls, points: list) -> 'FeatureSet':
        """Builds a set holding exactly the given points (capacity = len(points))."""
        feature_set = cls(len(points))
        feature_set._points = list(points)
        return feature_set

    def __len__(self):
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, index: int) -> Point3D:
        return self._points[index]

    def regenerate(self, grid_width: int, grid_height: int, overflow: float,
                   depth_z: float = 0, seed=None):
        """
        Replaces every point with freshly drawn coordinates.
        The new list is built completely before it replaces the old one.
        """
        points = generate_feature_points(
            grid_width, grid_height, self.max_features, overflow, depth_z, seed
        )
        self._points = points
        self.generation += 1
        self._selected = None

    def set_position(self, index: int, x, y):
        """Moves one point in place. z is untouched and x/y are not bounds-checked."""
        point = self._points[index]
        point.x = x
        point.y = y

    # --- Selection ---
    def handle(self, index: int) -> FeatureHandle:
        if not 0 <= index < len(self._points):
            raise IndexError(f"Feature index {index} out of range")
        return FeatureHandle(index, self.generation)

    def resolve(self, handle: FeatureHandle) -> Point3D | None:
        """Returns the point behind a handle, or None if the handle is stale."""
        if handle is None or handle.generation != self.generation:
            return None
        if not 0 <= handle.index < len(self._points):
            return None
        return self._points[handle.index]

    @property
    def selected(self) -> FeatureHandle | None:
        return self._selected

    @property
    def selected_point(self) -> Point3D | None:
        return self.resolve(self._selected)

    def select(self, handle: FeatureHandle | None) -> bool:
        """Selects a feature. Returns False (and clears) for a stale handle."""
        if handle is not None and self.resolve(handle) is None:
            self._selected = None
            return False
        self._selected = handle
        return True

    def clear_selection(self):
        self._selected = None

    def move_selected(self, x, y) -> bool:
        """Moves the selected point. Returns False when nothing valid is selected."""
        if self.selected_point is None:
            return False
        self.set_position(self._selected.index, x, y)
        return True

    # --- Queries ---
    def point_at(self, physical_x: float, physical_y: float,
                 resolution: int, hit_radius: int) -> FeatureHandle | None:
        """
        Hit-tests a physical position against each feature's square marker.
        The first feature in storage order wins; there is no nearest-hit logic.
        """
        offset = resolution // 2 - hit_radius // 2
        for index, point in enumerate(self._points):
            left = point.x * resolution + offset
            top = point.y * resolution + offset
            if (left <= physical_x <= left + hit_radius and
                    top <= physical_y <= top + hit_radius):
                return FeatureHandle(index, self.generation)
        return None

    def as_array(self) -> np.ndarray:
        """The points as an (n, 3) float64 array."""
        if not self._points:
            return np.empty((0, 3), dtype=np.float64)
        return np.array([p.as_tuple() for p in self._points], dtype=np.float64)
