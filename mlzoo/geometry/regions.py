"""
决策区域栅格化 (Decision-Region Rasterizer)
===========================================

把定义域切分成 N×N 个等大小的格子，
在每个格子中心调用一次分类函数，得到带标签的格子列表。

格子中心：
cx = x0 + (i + 0.5) · dx,  dx = (x1 - x0) / N
cy = y0 + (j + 0.5) · dy,  dy = (y1 - y0) / N

遍历顺序：i（x方向）为外层，j（y方向）为内层。
只要分类函数是坐标的纯函数，相同的分类器和分辨率
就得到完全相同的格子列表（包括顺序）。

复杂度 O(N²) 次分类调用；似然计算较贵时这是主要开销，
为保持交互性，N 建议不超过 60。
"""

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

import numpy as np

from ..exceptions import InvalidDomain, InvalidResolution
from .mapper import PlotMapper

ClassifyFn = Callable[[float, float], int]
Domain = Tuple[Tuple[float, float], Tuple[float, float]]

DEFAULT_RESOLUTION = 40
DEFAULT_OPACITY = 0.12


@dataclass(frozen=True)
class RegionCell:
    """一个栅格单元：中心坐标、分类结果和网格索引"""

    center_x: float
    center_y: float
    class_label: int
    grid_i: int
    grid_j: int


@dataclass(frozen=True)
class RegionOptions:
    """栅格化参数"""

    resolution: int = DEFAULT_RESOLUTION
    opacity: float = DEFAULT_OPACITY


def check_resolution(resolution) -> int:
    """校验网格分辨率：必须是正整数（不接受bool）"""
    if isinstance(resolution, bool) or not isinstance(resolution, (int, np.integer)):
        raise InvalidResolution(f"分辨率必须是整数，得到 {resolution!r}")
    if resolution <= 0:
        raise InvalidResolution(f"分辨率必须为正，得到 {resolution}")
    return int(resolution)


def _check_domain(domain: Domain) -> Domain:
    (x0, x1), (y0, y1) = domain
    x0, x1, y0, y1 = float(x0), float(x1), float(y0), float(y1)
    if x0 == x1 or y0 == y1 or not np.all(np.isfinite([x0, x1, y0, y1])):
        raise InvalidDomain(f"退化的定义域: x=[{x0}, {x1}], y=[{y0}, {y1}]")
    return (x0, x1), (y0, y1)


def compute_regions(classify_fn: ClassifyFn,
                    domain: Domain = ((0.0, 10.0), (0.0, 10.0)),
                    resolution: int = DEFAULT_RESOLUTION) -> List[RegionCell]:
    """
    在 N×N 网格的格子中心上查询分类器

    Args:
        classify_fn: 分类函数 (x, y) -> 类别
        domain: ((x0, x1), (y0, y1))
        resolution: 每个方向的格子数 N

    Returns:
        N² 个 RegionCell，按 (i, j) 字典序排列
    """
    n = check_resolution(resolution)
    (x0, x1), (y0, y1) = _check_domain(domain)
    dx = (x1 - x0) / n
    dy = (y1 - y0) / n

    cells = []
    for i in range(n):
        cx = x0 + (i + 0.5) * dx
        for j in range(n):
            cy = y0 + (j + 0.5) * dy
            cells.append(RegionCell(cx, cy, int(classify_fn(cx, cy)), i, j))
    return cells


def regions_to_grid(cells: Sequence[RegionCell], resolution: int) -> np.ndarray:
    """
    把格子列表整理成标签矩阵

    Returns:
        shape (N, N)，按 [j, i] 索引（行对应y，列对应x），
        可以直接交给 imshow/pcolormesh
    """
    n = check_resolution(resolution)
    if len(cells) != n * n:
        raise InvalidResolution(
            f"格子数 {len(cells)} 与分辨率 {n}×{n} 不一致")
    grid = np.zeros((n, n), dtype=int)
    for cell in cells:
        grid[cell.grid_j, cell.grid_i] = cell.class_label
    return grid


def cell_pixel_rect(cell: RegionCell, mapper: PlotMapper,
                    resolution: int) -> Tuple[float, float, float, float]:
    """
    格子在像素空间中的矩形 (left, top, width, height)

    行列位置由各轴映射的方向决定：y轴翻转时（屏幕坐标向下）
    第j行画在从顶部数第 N-1-j 行，x轴翻转时同理。
    宽高各多出0.5像素，避免相邻格子之间出现缝隙。
    """
    n = check_resolution(resolution)
    cell_w = mapper.plot_width / n
    cell_h = mapper.plot_height / n
    col = cell.grid_i if mapper.x.scale > 0 else n - 1 - cell.grid_i
    row = cell.grid_j if mapper.y.scale > 0 else n - 1 - cell.grid_j
    left = min(mapper.x.pixel_range) + col * cell_w
    top = min(mapper.y.pixel_range) + row * cell_h
    return left, top, cell_w + 0.5, cell_h + 0.5
