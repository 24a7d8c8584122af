"""Tests for the covariance ellipse projector.

Checks the closed-form eigen decomposition, the rotation convention, linear
scaling in level, outline geometry, and per-axis pixel conversion.
"""

import math

import numpy as np
import pytest

from mlzoo.exceptions import InvalidCovariance, InvalidLevel
from mlzoo.geometry import (
    EllipseGeometry,
    PlotMapper,
    ellipse_outline,
    project,
    project_levels
)

# Tolerances
RTOL = 1e-9
ATOL = 1e-9


class TestProject:
    """Test covariance-to-ellipse projection in domain units."""

    def test_identity(self) -> None:
        geometry = project([[1.0, 0.0], [0.0, 1.0]], 1)
        assert geometry == EllipseGeometry(0.0, 1.0, 1.0)

    @pytest.mark.parametrize("a,d,level", [(2.0, 0.5, 2.0), (4.0, 1.0, 1.0), (3.0, 3.0, 3.0)])
    def test_diagonal_wide(self, a: float, d: float, level: float) -> None:
        geometry = project([[a, 0.0], [0.0, d]], level)
        assert geometry.rotation_degrees == 0.0
        assert geometry.semi_axis_x == pytest.approx(math.sqrt(a) * level)
        assert geometry.semi_axis_y == pytest.approx(math.sqrt(d) * level)

    def test_diagonal_tall_rotates_ninety(self) -> None:
        geometry = project([[1.0, 0.0], [0.0, 4.0]], 1)
        assert geometry.rotation_degrees == pytest.approx(90.0)
        assert geometry.semi_axis_x == pytest.approx(2.0)
        assert geometry.semi_axis_y == pytest.approx(1.0)

    @pytest.mark.parametrize("b,expected_angle", [(1.0, 45.0), (-1.0, 135.0)])
    def test_correlated(self, b: float, expected_angle: float) -> None:
        geometry = project([[2.0, b], [b, 2.0]], 1)
        assert geometry.rotation_degrees == pytest.approx(expected_angle)
        assert geometry.semi_axis_x == pytest.approx(math.sqrt(3.0))
        assert geometry.semi_axis_y == pytest.approx(1.0)

    def test_singular_has_zero_minor_axis(self) -> None:
        geometry = project([[1.0, 1.0], [1.0, 1.0]], 2)
        assert geometry.rotation_degrees == pytest.approx(45.0)
        assert geometry.semi_axis_x == pytest.approx(2 * math.sqrt(2.0))
        assert geometry.semi_axis_y == pytest.approx(0.0, abs=ATOL)

    def test_zero_matrix(self) -> None:
        geometry = project([[0.0, 0.0], [0.0, 0.0]], 1)
        assert geometry == EllipseGeometry(0.0, 0.0, 0.0)

    @pytest.mark.parametrize("cov", [
        [[1.2, 0.3], [0.3, 1.0]],
        [[1.0, -0.2], [-0.2, 1.4]],
        [[0.5, 0.0], [0.0, 2.0]],
    ])
    def test_linear_in_level(self, cov) -> None:
        one = project(cov, 1)
        for level in (2, 3, 0.5):
            scaled = project(cov, level)
            assert scaled.rotation_degrees == one.rotation_degrees
            assert scaled.semi_axis_x == pytest.approx(level * one.semi_axis_x, rel=RTOL)
            assert scaled.semi_axis_y == pytest.approx(level * one.semi_axis_y, rel=RTOL)

    def test_major_axis_not_smaller(self) -> None:
        geometry = project([[1.2, 0.3], [0.3, 1.0]], 1)
        assert geometry.semi_axis_x >= geometry.semi_axis_y

    @pytest.mark.parametrize("level", [0, -1, float("nan"), float("inf"), "2"])
    def test_invalid_level(self, level) -> None:
        with pytest.raises(InvalidLevel):
            project([[1.0, 0.0], [0.0, 1.0]], level)

    @pytest.mark.parametrize("cov", [
        [[1.0, 0.0]],
        [[1.0, 0.2], [0.3, 1.0]],
        [[1.0, float("nan")], [float("nan"), 1.0]],
        [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]],
    ])
    def test_invalid_covariance(self, cov) -> None:
        with pytest.raises(InvalidCovariance):
            project(cov, 1)

    def test_levels(self) -> None:
        geometries = project_levels([[1.0, 0.0], [0.0, 1.0]])
        assert [g.semi_axis_x for g in geometries] == pytest.approx([1.0, 2.0, 3.0])


class TestOutline:
    """Test the sampled outline against the Mahalanobis definition."""

    @pytest.mark.parametrize("cov", [
        [[1.2, 0.3], [0.3, 1.0]],
        [[1.0, -0.2], [-0.2, 1.4]],
        [[1.0, 0.0], [0.0, 4.0]],
    ])
    @pytest.mark.parametrize("level", [1.0, 2.0, 3.0])
    def test_mahalanobis_distance(self, cov, level: float) -> None:
        mean = np.array([3.0, 6.5])
        outline = ellipse_outline(mean, cov, level, n_points=32)
        assert outline.shape == (32, 2)
        diff = outline - mean
        precision = np.linalg.inv(np.array(cov))
        distances = np.einsum('ni,ij,nj->n', diff, precision, diff)
        assert np.allclose(distances, level ** 2, rtol=1e-7)


class TestToPixels:
    """Test conversion of ellipse geometry to pixel space."""

    @pytest.fixture
    def mapper(self) -> PlotMapper:
        return PlotMapper.for_canvas()

    def test_axes_scaled_independently(self, mapper: PlotMapper) -> None:
        geometry = EllipseGeometry(0.0, 1.0, 1.0).to_pixels((5.0, 5.0), mapper)
        assert geometry.semi_axis_x == pytest.approx(71.5)
        assert geometry.semi_axis_y == pytest.approx(33.5)
        assert geometry.rotation_degrees == 0.0

    def test_rotation_flips_with_screen_y(self, mapper: PlotMapper) -> None:
        geometry = project([[2.0, 1.0], [1.0, 2.0]], 1).to_pixels((5.0, 5.0), mapper)
        assert geometry.rotation_degrees == pytest.approx(-45.0)

    def test_same_orientation_keeps_rotation(self) -> None:
        x_axis = PlotMapper.for_canvas().x
        mapper = PlotMapper(x_axis, x_axis)
        geometry = EllipseGeometry(30.0, 1.0, 2.0).to_pixels((5.0, 5.0), mapper)
        assert geometry.rotation_degrees == pytest.approx(30.0)
        assert geometry.semi_axis_y == pytest.approx(2 * mapper.x.scale)
