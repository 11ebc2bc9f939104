# worley_noise/engine.py

"""
================================================================================
NOISE ENGINE
================================================================================
This module contains the NoiseEngine class, which owns the feature points,
the published distance field and the dirty flag, and keeps them consistent as
the surface is resized and features are dragged around.

It is backend-only: it knows nothing about windows, events or drawing. A front
end forwards input through the on_* methods and reads renderable_cells() /
feature_markers() when poll_dirty() says something changed.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Parameters which override the internal defaults.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - Lists of ((x, y, w, h), color) tuples in physical surface units.
- Side Effects: Logs messages using the provided logger.
- Invariants:
    - One lock guards features, published cells, selection and the dirty flag
      together. Every mutation holds it for the whole regenerate + rebuild +
      publish sequence, so readers never see a half-built field.
    - The grid and the feature set are always replaced together.
================================================================================
"""
import logging
import threading
import time

import numpy as np

from . import config as DEFAULTS
from .distance_field import DistanceField
from .errors import DegenerateGridError, InvalidScaleConfigurationError
from .features import FeatureHandle, FeatureSet
from .geometry import Grid
from .scales import ScaleKind, build_scale_params, build_scale_state


class NoiseEngine:
    """
    Recomputes the Worley field on resize, drag and scale changes, and tells a
    poller when the published output needs repainting.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None):
        """
        Initializes the engine. No field exists until the first on_resize().

        Args:
            config (dict, optional): User-defined parameters to override defaults.
            logger (logging.Logger, optional): The logger instance for all output.

        Raises:
            InvalidScaleConfigurationError: the configured scale is unknown or
                has unusable parameters.
        """
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.user_config = config or {}
        self.logger.info("NoiseEngine initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'resolution': self.user_config.get('resolution', DEFAULTS.RESOLUTION),
            'max_features': self.user_config.get('max_features', DEFAULTS.MAX_FEATURES),
            'feature_radius': self.user_config.get('feature_radius', DEFAULTS.FEATURE_RADIUS),
            'overflow': self.user_config.get('overflow', DEFAULTS.OVERFLOW),
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'depth_z': self.user_config.get('depth_z', DEFAULTS.DEPTH_Z),
            'feature_depth_z': self.user_config.get('feature_depth_z', DEFAULTS.FEATURE_DEPTH_Z),
            'scale': self.user_config.get('scale', DEFAULTS.DEFAULT_SCALE),
            'scale_map_min': {**DEFAULTS.SCALE_MAP_MIN, **self.user_config.get('scale_map_min', {})},
            'scale_normalizer': {**DEFAULTS.SCALE_NORMALIZER, **self.user_config.get('scale_normalizer', {})},
            'pixel_color': tuple(self.user_config.get('pixel_color', DEFAULTS.PIXEL_COLOR)),
            'feature_color': tuple(self.user_config.get('feature_color', DEFAULTS.FEATURE_COLOR)),
            'selected_feature_color': tuple(self.user_config.get('selected_feature_color', DEFAULTS.SELECTED_FEATURE_COLOR)),
            'draw_features': self.user_config.get('draw_features', DEFAULTS.DRAW_FEATURES),
            'poll_interval_s': self.user_config.get('poll_interval_s', DEFAULTS.POLL_INTERVAL_S),
        }

        if self.settings['resolution'] <= 0:
            raise ValueError(f"resolution must be positive, got {self.settings['resolution']}")

        # --- Scale (fails fast on a bad kind or bad parameters) ---
        self.scale_params = build_scale_params(
            self.settings['scale_map_min'], self.settings['scale_normalizer']
        )
        self.scale_kind = ScaleKind.parse(self.settings['scale'])
        if self.scale_kind not in self.scale_params:
            raise InvalidScaleConfigurationError(
                f"No parameters configured for scale '{self.scale_kind.value}'"
            )
        self.scale_state = None

        # --- Shared State (guarded by self.lock) ---
        self.lock = threading.RLock()
        self._rng = np.random.default_rng(self.settings['seed'])
        self.features = FeatureSet(self.settings['max_features'])
        self.field = DistanceField()
        self.grid = Grid(0, 0, self.settings['resolution'])
        self._dirty = False
        self._dragging = False

        self.logger.info(
            f"NoiseEngine initialized: {self.settings['max_features']} features, "
            f"resolution {self.settings['resolution']}px, scale '{self.scale_kind.value}'"
        )

    # --- Internal rebuild steps (caller holds the lock) ---
    def _update_scale_state(self):
        """Recomputes map_min and max_distance for the current grid and kind."""
        try:
            self.scale_state = build_scale_state(
                self.scale_kind, self.grid, self.settings['depth_z'], self.scale_params
            )
        except DegenerateGridError as e:
            self.logger.warning(f"Degenerate grid, field left empty: {e}")
            self.scale_state = None

    def _rebuild_field(self):
        """Full re-scan of the field, published wholesale."""
        if self.scale_state is None or self.grid.is_degenerate:
            self.field.clear(self.grid)
            self._dirty = True
            return

        start_time = time.perf_counter()
        cells = self.field.rebuild(self.grid, self.features, self.scale_state, self.settings['depth_z'])
        elapsed_ms = (time.perf_counter() - start_time) * 1000.0
        self._dirty = True
        self.logger.debug(
            f"Rebuilt {self.grid.width}x{self.grid.height} field: "
            f"{len(cells)} visible cells in {elapsed_ms:.1f} ms"
        )

    # --- Mutators ---
    def on_resize(self, surface_width: int, surface_height: int):
        """
        Derives the grid from a new surface size, regenerates every feature and
        rebuilds the field. A grid with no cells (e.g. a minimized window)
        publishes an empty field and keeps the old features until it recovers.
        """
        with self.lock:
            self.grid = Grid.from_surface(surface_width, surface_height, self.settings['resolution'])
            self._dragging = False

            if self.grid.is_degenerate:
                self.logger.warning(
                    f"Surface {surface_width}x{surface_height} gives an empty grid; skipping rebuild."
                )
                self.features.clear_selection()
                self.scale_state = None
                self.field.clear(self.grid)
                self._dirty = True
                return

            self.features.regenerate(
                self.grid.width, self.grid.height,
                self.settings['overflow'], self.settings['feature_depth_z'], self._rng
            )
            self.logger.info(
                f"Grid resized to {self.grid.width}x{self.grid.height} cells; "
                f"features regenerated (generation {self.features.generation})."
            )
            self._update_scale_state()
            self._rebuild_field()

    def set_scale(self, kind):
        """Switches the distance-to-intensity scale and rebuilds the field."""
        kind = ScaleKind.parse(kind)
        if kind not in self.scale_params:
            raise InvalidScaleConfigurationError(f"No parameters configured for scale '{kind.value}'")
        with self.lock:
            self.scale_kind = kind
            self.logger.info(f"Scale set to '{kind.value}'.")
            if self.grid.is_degenerate:
                return
            self._update_scale_state()
            self._rebuild_field()

    def rebuild(self):
        """Forces a full rebuild with the current grid, features and scale."""
        with self.lock:
            self._rebuild_field()

    def on_hover(self, physical_x: float, physical_y: float) -> FeatureHandle | None:
        """
        Highlights the feature under the pointer. Marks the output dirty only
        when the highlighted feature changes. Ignored while dragging.
        """
        with self.lock:
            if self._dragging:
                return self.features.selected
            handle = self.hit_test(physical_x, physical_y)
            if handle != self.features.selected:
                self.features.select(handle)
                self._dirty = True
            return handle

    def on_drag_start(self, handle: FeatureHandle = None) -> bool:
        """
        Starts dragging `handle`, or the highlighted feature when omitted.
        Returns False if there is nothing (valid) to drag.
        """
        with self.lock:
            if handle is not None and not self.features.select(handle):
                self.logger.debug(f"Ignoring drag of stale feature handle {handle}.")
                self._dragging = False
                return False
            self._dragging = self.features.selected_point is not None
            return self._dragging

    def on_drag_move(self, physical_x: float, physical_y: float) -> bool:
        """Moves the dragged feature to the cell under the pointer and rebuilds."""
        with self.lock:
            if not self._dragging:
                return False
            grid_x, grid_y = self.grid.to_grid(physical_x, physical_y)
            if not self.features.move_selected(grid_x, grid_y):
                self._dragging = False
                return False
            self._rebuild_field()
            return True

    def on_drag_end(self):
        with self.lock:
            self._dragging = False
            self.features.clear_selection()
            self._dirty = True

    def set_draw_features(self, enabled: bool):
        with self.lock:
            self.settings['draw_features'] = bool(enabled)
            self._dirty = True

    def toggle_features(self) -> bool:
        with self.lock:
            self.set_draw_features(not self.settings['draw_features'])
            return self.settings['draw_features']

    # --- Queries ---
    def hit_test(self, physical_x: float, physical_y: float) -> FeatureHandle | None:
        """Returns the first feature whose marker contains the point, or None."""
        with self.lock:
            if self.grid.is_degenerate:
                return None
            return self.features.point_at(
                physical_x, physical_y,
                self.settings['resolution'], self.settings['feature_radius']
            )

    def poll_dirty(self) -> bool:
        """Atomically reports and clears the dirty flag."""
        with self.lock:
            was_dirty = self._dirty
            self._dirty = False
            return was_dirty

    @property
    def is_dragging(self) -> bool:
        with self.lock:
            return self._dragging

    def renderable_cells(self) -> list:
        """The visible cells as ((x, y, w, h), (r, g, b, a)) with alpha in 0-255."""
        with self.lock:
            r, g, b = self.settings['pixel_color']
            grid = self.grid
            return [
                (grid.cell_rect(cell.grid_x, cell.grid_y), (r, g, b, int(round(cell.intensity * 255))))
                for cell in self.field.cells
            ]

    def feature_markers(self) -> list:
        """Feature markers as ((x, y, d, d), (r, g, b)); empty when hidden."""
        with self.lock:
            if not self.settings['draw_features'] or self.grid.is_degenerate:
                return []

            resolution = self.settings['resolution']
            size = self.settings['feature_radius']
            offset = resolution // 2 - size // 2
            selected = self.features.selected
            markers = []
            for index, point in enumerate(self.features):
                is_selected = selected is not None and selected.index == index
                color = self.settings['selected_feature_color'] if is_selected else self.settings['feature_color']
                rect = (point.x * resolution + offset, point.y * resolution + offset, size, size)
                markers.append((rect, color))
            return markers

    def intensity_at(self, grid_x: int, grid_y: int) -> float:
        with self.lock:
            return self.field.intensity_at(grid_x, grid_y)

    def stats(self) -> tuple[int, int, float]:
        """(visible cells, total cells, visible percentage) of the current field."""
        with self.lock:
            visible, total = self.field.coverage()
        percent = 100.0 * visible / total if total else 0.0
        return visible, total, percent
