# worley_noise/geometry.py

"""
================================================================================
GEOMETRY PRIMITIVES
================================================================================
Point3D is the atomic geometric value used for feature points and sample
positions. Grid describes the discretized surface the noise field covers.

Data Contract:
---------------
- Point3D is mutable in place. The feature set and the current selection can
  refer to the same instance, so a drag moves the point rather than replacing
  it.
- Grid is immutable and derived from a physical surface size and a resolution.
- Side Effects: None.
================================================================================
"""
import math
from typing import NamedTuple


class Point3D:
    """A point with x, y, z coordinates (int or float)."""

    def __init__(self, x=0, y=0, z=0):
        self.x = x
        self.y = y
        self.z = z

    def distance_to(self, other: 'Point3D') -> float:
        """Returns the Euclidean distance to another point."""
        return math.sqrt(
            (self.x - other.x) ** 2 +
            (self.y - other.y) ** 2 +
            (self.z - other.z) ** 2
        )

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.z)

    def __repr__(self):
        return f"Point3D({self.x}, {self.y}, {self.z})"


class Grid(NamedTuple):
    """The cell grid laid over a physical surface."""
    width: int
    height: int
    resolution: int

    @classmethod
    def from_surface(cls, surface_width: int, surface_height: int, resolution: int) -> 'Grid':
        """Builds a grid of floor(surface / resolution) cells on each axis."""
        if resolution <= 0:
            raise ValueError(f"Grid resolution must be positive, got {resolution}")
        return cls(int(surface_width) // resolution, int(surface_height) // resolution, resolution)

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def cell_count(self) -> int:
        return max(0, self.width) * max(0, self.height)

    def cell_rect(self, grid_x: int, grid_y: int) -> tuple[int, int, int, int]:
        """The physical (x, y, w, h) rectangle covered by a cell."""
        r = self.resolution
        return (grid_x * r, grid_y * r, r, r)

    def to_grid(self, physical_x: float, physical_y: float) -> tuple[int, int]:
        """Converts a physical position to the cell that contains it."""
        return (int(physical_x // self.resolution), int(physical_y // self.resolution))
