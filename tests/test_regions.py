"""Tests for the decision-region rasterizer."""

import pytest

from mlzoo.exceptions import InvalidDomain, InvalidResolution
from mlzoo.geometry import (
    CoordinateMapper,
    PlotMapper,
    RegionCell,
    cell_pixel_rect,
    compute_regions,
    regions_to_grid
)


def left_right(x: float, y: float) -> int:
    return 0 if x < 5 else 1


class TestComputeRegions:
    """Test grid layout, ordering and validation."""

    @pytest.mark.parametrize("resolution", [1, 3, 10, 40])
    def test_cell_count(self, resolution: int) -> None:
        cells = compute_regions(left_right, resolution=resolution)
        assert len(cells) == resolution ** 2

    @pytest.mark.parametrize("domain", [((0, 10), (0, 10)), ((-2, 3), (1, 1.5))])
    def test_centers_inside_domain(self, domain) -> None:
        (x0, x1), (y0, y1) = domain
        for cell in compute_regions(left_right, domain, 7):
            assert x0 < cell.center_x < x1
            assert y0 < cell.center_y < y1

    def test_single_cell_at_center(self) -> None:
        (cell,) = compute_regions(left_right, resolution=1)
        assert (cell.center_x, cell.center_y) == pytest.approx((5.0, 5.0))

    def test_order(self) -> None:
        cells = compute_regions(left_right, resolution=4)
        assert [(c.grid_i, c.grid_j) for c in cells[:5]] == \
            [(0, 0), (0, 1), (0, 2), (0, 3), (1, 0)]
        assert cells[1].center_x == pytest.approx(1.25)
        assert cells[1].center_y == pytest.approx(3.75)

    def test_deterministic(self) -> None:
        first = compute_regions(left_right, resolution=12)
        second = compute_regions(left_right, resolution=12)
        assert first == second

    def test_labels_follow_classifier(self) -> None:
        for cell in compute_regions(left_right, resolution=10):
            assert cell.class_label == left_right(cell.center_x, cell.center_y)

    @pytest.mark.parametrize("resolution", [0, -1, 2.5, True, None])
    def test_invalid_resolution(self, resolution) -> None:
        with pytest.raises(InvalidResolution):
            compute_regions(left_right, resolution=resolution)

    @pytest.mark.parametrize("domain", [((0, 0), (0, 10)), ((0, 10), (4, 4))])
    def test_degenerate_domain(self, domain) -> None:
        with pytest.raises(InvalidDomain):
            compute_regions(left_right, domain, 4)


class TestGridAndPixels:
    """Test conversions of the cell list."""

    def test_grid_rows_are_y(self) -> None:
        grid = regions_to_grid(compute_regions(left_right, resolution=4), 4)
        assert grid.shape == (4, 4)
        assert grid[:, :2].sum() == 0
        assert grid[:, 2:].sum() == 8

    def test_grid_count_mismatch(self) -> None:
        cells = compute_regions(left_right, resolution=3)
        with pytest.raises(InvalidResolution):
            regions_to_grid(cells, 4)

    def test_bottom_left_cell_rect(self) -> None:
        mapper = PlotMapper.for_canvas()
        cell = RegionCell(0.125, 0.125, 0, 0, 0)
        left, top, width, height = cell_pixel_rect(cell, mapper, 40)
        assert left == pytest.approx(55.0)
        assert top == pytest.approx(20.0 + 39 * 8.375)
        assert width == pytest.approx(17.875 + 0.5)
        assert height == pytest.approx(8.375 + 0.5)

    def test_top_right_cell_rect(self) -> None:
        mapper = PlotMapper.for_canvas()
        cell = RegionCell(9.875, 9.875, 1, 39, 39)
        left, top, _, _ = cell_pixel_rect(cell, mapper, 40)
        assert left == pytest.approx(55.0 + 39 * 17.875)
        assert top == pytest.approx(20.0)

    @pytest.mark.parametrize("x_pixels", [(0.0, 200.0), (200.0, 0.0)])
    @pytest.mark.parametrize("y_pixels", [(0.0, 100.0), (100.0, 0.0)])
    def test_rect_contains_cell_center(self, x_pixels, y_pixels) -> None:
        mapper = PlotMapper(CoordinateMapper((0.0, 10.0), x_pixels),
                            CoordinateMapper((0.0, 10.0), y_pixels))
        for cell in compute_regions(left_right, resolution=5):
            left, top, width, height = cell_pixel_rect(cell, mapper, 5)
            px, py = mapper.to_pixel(cell.center_x, cell.center_y)
            assert left < px < left + width - 0.5
            assert top < py < top + height - 0.5
