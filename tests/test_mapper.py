"""Tests for the coordinate mapper.

Covers the affine domain-to-pixel map, its inverse, monotonicity, rejection of
degenerate intervals, and per-axis length conversion.
"""

import numpy as np
import pytest

from mlzoo.exceptions import InvalidDomain
from mlzoo.geometry import CoordinateMapper, PlotMapper, to_pixel
from mlzoo.geometry.mapper import Margin

# Tolerances
ATOL = 1e-9


@pytest.fixture
def x_mapper() -> CoordinateMapper:
    """Default 800px canvas x axis."""
    return CoordinateMapper((0.0, 10.0), (55.0, 770.0))


@pytest.fixture
def y_mapper() -> CoordinateMapper:
    """Default 400px canvas y axis (flipped)."""
    return CoordinateMapper((0.0, 10.0), (355.0, 20.0))


class TestCoordinateMapper:
    """Test the single-axis affine map."""

    def test_endpoints_and_midpoint(self, x_mapper: CoordinateMapper) -> None:
        assert x_mapper.to_pixel(0) == pytest.approx(55.0)
        assert x_mapper.to_pixel(10) == pytest.approx(770.0)
        assert x_mapper.to_pixel(5) == pytest.approx(412.5)

    def test_flipped_axis(self, y_mapper: CoordinateMapper) -> None:
        assert y_mapper.to_pixel(0) == pytest.approx(355.0)
        assert y_mapper.to_pixel(10) == pytest.approx(20.0)
        assert y_mapper.scale < 0

    @pytest.mark.parametrize("value", [-3.0, 0.0, 2.5, 7.25, 10.0, 14.0])
    def test_round_trip(self, x_mapper: CoordinateMapper,
                        y_mapper: CoordinateMapper, value: float) -> None:
        assert x_mapper.to_domain(x_mapper.to_pixel(value)) == pytest.approx(value)
        assert y_mapper.to_domain(y_mapper.to_pixel(value)) == pytest.approx(value)

    def test_array_input(self, x_mapper: CoordinateMapper) -> None:
        values = np.linspace(0, 10, 11)
        pixels = x_mapper.to_pixel(values)
        assert isinstance(pixels, np.ndarray)
        assert np.allclose(x_mapper.to_domain(pixels), values, atol=ATOL)

    def test_monotonic(self, x_mapper: CoordinateMapper,
                       y_mapper: CoordinateMapper) -> None:
        values = np.linspace(-5, 15, 50)
        assert np.all(np.diff(x_mapper.to_pixel(values)) > 0)
        assert np.all(np.diff(y_mapper.to_pixel(values)) < 0)

    @pytest.mark.parametrize("domain", [(0.0, 0.0), (3.0, 3.0), (0.0, float("nan"))])
    def test_degenerate_domain(self, domain) -> None:
        with pytest.raises(InvalidDomain):
            CoordinateMapper(domain, (0.0, 100.0))

    def test_degenerate_pixel_range(self) -> None:
        with pytest.raises(InvalidDomain):
            CoordinateMapper((0.0, 10.0), (50.0, 50.0))

    def test_length_uses_axis_scale(self, x_mapper: CoordinateMapper,
                                    y_mapper: CoordinateMapper) -> None:
        assert x_mapper.length_to_pixels(5.0, 1.0) == pytest.approx(71.5)
        assert y_mapper.length_to_pixels(5.0, 1.0) == pytest.approx(33.5)

    def test_one_shot_function(self) -> None:
        assert to_pixel(2.0, (0, 4), (0, 100)) == pytest.approx(50.0)
        assert to_pixel(1.0, [0, 4], [100, 0]) == pytest.approx(75.0)
        with pytest.raises(InvalidDomain):
            to_pixel(1.0, (2, 2), (0, 100))


class TestPlotMapper:
    """Test the canvas-level mapper pair."""

    def test_default_canvas(self) -> None:
        mapper = PlotMapper.for_canvas()
        assert mapper.x.pixel_range == (55.0, 770.0)
        assert mapper.y.pixel_range == (355.0, 20.0)
        assert mapper.plot_width == pytest.approx(715.0)
        assert mapper.plot_height == pytest.approx(335.0)

    def test_custom_margin(self) -> None:
        mapper = PlotMapper.for_canvas((0, 1), (0, 1), 100, 100,
                                       Margin(top=0, right=0, bottom=0, left=0))
        assert mapper.to_pixel(0.5, 0.25) == pytest.approx((50.0, 75.0))

    def test_immutable(self) -> None:
        mapper = PlotMapper.for_canvas()
        with pytest.raises(AttributeError):
            mapper.x = mapper.y
