"""Tests for the distance-to-intensity scales."""

import math

import numpy as np
import pytest

from worley_noise import config as DEFAULTS
from worley_noise.errors import DegenerateGridError, InvalidScaleConfigurationError
from worley_noise.geometry import Grid
from worley_noise.scales import (
    ScaleKind,
    ScaleParams,
    build_scale_params,
    build_scale_state,
    compute_max_distance,
    map_intensity,
)

DEFAULT_PARAMS = build_scale_params(DEFAULTS.SCALE_MAP_MIN, DEFAULTS.SCALE_NORMALIZER)


class TestScaleKind:

    @pytest.mark.parametrize("value,expected", [
        ("linear", ScaleKind.LINEAR),
        ("Logarithmic", ScaleKind.LOGARITHMIC),
        (" EXPONENTIAL ", ScaleKind.EXPONENTIAL),
        (ScaleKind.LINEAR, ScaleKind.LINEAR),
    ])
    def test_parse(self, value, expected):
        assert ScaleKind.parse(value) is expected

    @pytest.mark.parametrize("value", ["cubic", "", None, 42])
    def test_parse_rejects_unknown_kinds(self, value):
        with pytest.raises(InvalidScaleConfigurationError):
            ScaleKind.parse(value)


class TestScaleParams:

    def test_defaults_cover_every_kind(self):
        assert set(DEFAULT_PARAMS) == set(ScaleKind)
        assert DEFAULT_PARAMS[ScaleKind.LOGARITHMIC] == ScaleParams(-1.0, 2.0)
        assert DEFAULT_PARAMS[ScaleKind.EXPONENTIAL] == ScaleParams(0.0, 4.0)

    def test_non_positive_normalizer_is_rejected(self):
        with pytest.raises(InvalidScaleConfigurationError):
            build_scale_params({'linear': 0.0}, {'linear': 0.0})

    def test_unknown_key_is_rejected(self):
        with pytest.raises(InvalidScaleConfigurationError):
            build_scale_params({'linear': 0.0, 'cubic': 1.0}, {'linear': 2.0})

    def test_missing_parameters_for_kind(self):
        params = build_scale_params({'linear': 0.0}, {'linear': 2.0})
        with pytest.raises(InvalidScaleConfigurationError):
            build_scale_state(ScaleKind.EXPONENTIAL, Grid(10, 10, 1), 0, params)


class TestScaleState:

    def test_max_distance_uses_half_diagonal(self):
        assert compute_max_distance(10, 10, 0, 2.0) == pytest.approx(math.sqrt(50) / 2.0)
        assert compute_max_distance(10, 10, 4, 1.0) == pytest.approx(math.sqrt(54))

    def test_linear_state(self):
        state = build_scale_state('linear', Grid(10, 10, 1), 0, DEFAULT_PARAMS)
        assert state.kind is ScaleKind.LINEAR
        assert state.map_min == 0.0
        assert state.max_distance == pytest.approx(math.sqrt(50) / 2.0)

    def test_one_by_one_grid_is_degenerate(self):
        for kind in ScaleKind:
            with pytest.raises(DegenerateGridError):
                build_scale_state(kind, Grid(1, 1, 1), 0, DEFAULT_PARAMS)

    def test_empty_grid_is_degenerate(self):
        with pytest.raises(DegenerateGridError):
            build_scale_state('linear', Grid(0, 5, 1), 0, DEFAULT_PARAMS)

    def test_logarithmic_needs_max_distance_above_one(self):
        with pytest.raises(DegenerateGridError):
            build_scale_state('logarithmic', Grid(2, 2, 1), 0, DEFAULT_PARAMS)
        state = build_scale_state('logarithmic', Grid(4, 4, 1), 0, DEFAULT_PARAMS)
        assert state.max_distance > 1.0


class TestMapIntensity:

    @pytest.mark.parametrize("kind", list(ScaleKind))
    def test_intensity_stays_in_unit_range(self, kind):
        state = build_scale_state(kind, Grid(40, 30, 1), 0, DEFAULT_PARAMS)
        distances = np.concatenate([np.linspace(0.0, 200.0, 501), [1e6, np.inf]])
        intensities = map_intensity(state, distances)
        assert intensities.shape == distances.shape
        assert np.isfinite(intensities).all()
        assert (intensities >= 0.0).all() and (intensities <= 1.0).all()

    @pytest.mark.parametrize("kind", list(ScaleKind))
    def test_zero_distance_is_brightest(self, kind):
        state = build_scale_state(kind, Grid(40, 30, 1), 0, DEFAULT_PARAMS)
        assert map_intensity(state, 0.0) == pytest.approx(1.0, abs=0.01)

    def test_linear_is_non_increasing(self):
        state = build_scale_state('linear', Grid(20, 20, 1), 0, DEFAULT_PARAMS)
        intensities = map_intensity(state, np.linspace(0.0, 30.0, 300))
        assert (np.diff(intensities) <= 0).all()

    def test_linear_values(self):
        state = build_scale_state('linear', Grid(10, 10, 1), 0, DEFAULT_PARAMS)
        half = state.max_distance / 2.0
        assert map_intensity(state, half) == pytest.approx(0.5)
        assert map_intensity(state, state.max_distance) == 0.0
        assert map_intensity(state, 2 * state.max_distance) == 0.0

    def test_logarithmic_values(self):
        state = build_scale_state('logarithmic', Grid(40, 40, 1), 0, DEFAULT_PARAMS)
        d = 5.0
        expected = 1.0 - math.log10(d + 1.0) / math.log10(state.max_distance)
        assert map_intensity(state, d) == pytest.approx(expected)

    def test_logarithmic_with_zero_map_min_guards_the_origin(self):
        params = build_scale_params({'logarithmic': 0.0}, {'logarithmic': 2.0})
        state = build_scale_state('logarithmic', Grid(40, 40, 1), 0, params)
        # log10(0) would be -inf; the guard maps distance 0 to map_min instead.
        assert map_intensity(state, 0.0) == 1.0

    def test_exponential_does_not_overflow(self):
        state = build_scale_state('exponential', Grid(2000, 2000, 1), 0, DEFAULT_PARAMS)
        assert state.max_distance > 300
        assert map_intensity(state, 0.0) == pytest.approx(1.0)
        assert map_intensity(state, 5000.0) == 0.0

    def test_scalar_in_scalar_out(self):
        state = build_scale_state('linear', Grid(10, 10, 1), 0, DEFAULT_PARAMS)
        assert isinstance(map_intensity(state, 1.0), float)
