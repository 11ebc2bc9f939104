"""Tests for FeatureSet generation, mutation, selection and hit-testing."""

import numpy as np
import pytest

from worley_noise.features import FeatureHandle, FeatureSet, generate_feature_points
from worley_noise.geometry import Point3D

RESOLUTION = 6
HIT_RADIUS = 8


class TestRegenerate:

    def test_exact_count_and_depth(self):
        features = FeatureSet(15)
        features.regenerate(40, 30, overflow=0.2, depth_z=3, seed=1)
        assert len(features) == 15
        assert all(p.z == 3 for p in features)

    def test_deterministic_for_seed(self):
        a = generate_feature_points(50, 50, 20, 0.1, 0, seed=123)
        b = generate_feature_points(50, 50, 20, 0.1, 0, seed=123)
        assert [p.as_tuple() for p in a] == [p.as_tuple() for p in b]

    def test_changes_with_seed(self):
        a = generate_feature_points(500, 500, 20, 0.0, 0, seed=1)
        b = generate_feature_points(500, 500, 20, 0.0, 0, seed=2)
        assert [p.as_tuple() for p in a] != [p.as_tuple() for p in b]

    def test_points_stay_within_overflow_domain(self):
        width, height, overflow = 40, 20, 0.5
        points = generate_feature_points(width, height, 500, overflow, 0, seed=9)
        xs = np.array([p.x for p in points])
        ys = np.array([p.y for p in points])
        assert xs.min() >= -overflow / 2 * width
        assert xs.max() <= width * (1 + overflow / 2)
        assert ys.min() >= -overflow / 2 * height
        assert ys.max() <= height * (1 + overflow / 2)
        # With a margin this wide some points must land off the visible grid.
        assert ((xs < 0) | (xs >= width) | (ys < 0) | (ys >= height)).any()

    def test_zero_overflow_keeps_points_on_grid(self):
        points = generate_feature_points(30, 10, 200, 0.0, 0, seed=4)
        assert all(0 <= p.x < 30 and 0 <= p.y < 10 for p in points)

    def test_regenerate_bumps_generation_and_clears_selection(self):
        features = FeatureSet(5)
        features.regenerate(20, 20, 0.0, seed=1)
        handle = features.handle(2)
        assert features.select(handle)
        old_generation = features.generation

        features.regenerate(20, 20, 0.0, seed=2)
        assert features.generation == old_generation + 1
        assert features.selected is None
        assert features.resolve(handle) is None
        assert not features.select(handle)

    def test_shared_generator_advances(self):
        rng = np.random.default_rng(5)
        features = FeatureSet(10)
        features.regenerate(100, 100, 0.0, seed=rng)
        first = [p.as_tuple() for p in features]
        features.regenerate(100, 100, 0.0, seed=rng)
        assert [p.as_tuple() for p in features] != first


class TestMutation:

    def test_set_position_keeps_identity_and_depth(self):
        features = FeatureSet.from_points([Point3D(1, 1, 4), Point3D(2, 2, 4)])
        point = features[1]
        features.set_position(1, -7, 99)
        assert features[1] is point
        assert point.as_tuple() == (-7, 99, 4)

    def test_set_position_bad_index(self):
        features = FeatureSet(2)
        with pytest.raises(IndexError):
            features.set_position(5, 0, 0)

    def test_move_selected(self):
        features = FeatureSet.from_points([Point3D(1, 1, 0), Point3D(2, 2, 0)])
        assert not features.move_selected(5, 5)

        features.select(features.handle(1))
        selected = features.selected_point
        assert features.move_selected(8, 3)
        assert selected is features[1]
        assert features[1].as_tuple() == (8, 3, 0)
        assert features[0].as_tuple() == (1, 1, 0)

    def test_length_never_changes(self):
        features = FeatureSet(7)
        assert len(features) == 7
        features.regenerate(10, 10, 0.3, seed=0)
        features.set_position(3, 100, 100)
        assert len(features) == 7

    def test_as_array(self):
        features = FeatureSet.from_points([Point3D(1, 2, 3), Point3D(4, 5, 6)])
        coords = features.as_array()
        assert coords.dtype == np.float64
        assert coords.tolist() == [[1, 2, 3], [4, 5, 6]]
        assert FeatureSet(0).as_array().shape == (0, 3)


class TestPointAt:
    """A feature at cell (5, 5) has its hit box at [29, 37] on both axes."""

    def setup_method(self):
        self.features = FeatureSet.from_points([Point3D(5, 5, 0)])

    @pytest.mark.parametrize("x,y", [(29, 29), (37, 37), (33, 33), (29, 37)])
    def test_inside(self, x, y):
        handle = self.features.point_at(x, y, RESOLUTION, HIT_RADIUS)
        assert handle == FeatureHandle(0, self.features.generation)

    @pytest.mark.parametrize("x,y", [(28, 33), (38, 33), (33, 28), (33, 38)])
    def test_one_unit_outside(self, x, y):
        assert self.features.point_at(x, y, RESOLUTION, HIT_RADIUS) is None

    def test_first_match_in_storage_order_wins(self):
        features = FeatureSet.from_points([Point3D(5, 5, 0), Point3D(6, 5, 0)])
        # x = 36 lies in both boxes ([29, 37] and [35, 43]).
        assert features.point_at(36, 33, RESOLUTION, HIT_RADIUS).index == 0
        assert features.point_at(40, 33, RESOLUTION, HIT_RADIUS).index == 1

    def test_features_outside_the_grid_are_still_hit_tested(self):
        features = FeatureSet.from_points([Point3D(-2, -2, 0)])
        # Box starts at -2 * 6 - 1 = -13.
        assert features.point_at(-10, -10, RESOLUTION, HIT_RADIUS) is not None
