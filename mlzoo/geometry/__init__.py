"""
图示几何 (Diagram Geometry)
===========================

所有分类图共享的几何计算，不涉及任何绘图：

1. 坐标映射
   - 定义域 ↔ 像素的仿射变换
   - x、y轴独立的比例

2. 协方差椭圆
   - 2×2特征分解的闭式解
   - 旋转角和半轴长度
   - 按轴换算到像素

3. 决策区域栅格化
   - N×N网格
   - 在格子中心查询任意分类器

这些函数都是纯函数：同样的输入永远得到同样的输出，
每次渲染重新计算，不保存任何状态。
"""

from .mapper import (
    CoordinateMapper,
    PlotMapper,
    Margin,
    to_pixel
)

from .ellipse import (
    EllipseGeometry,
    project,
    project_levels,
    ellipse_outline,
    covariance_entries,
    eigenvalues_2x2
)

from .regions import (
    RegionCell,
    RegionOptions,
    compute_regions,
    regions_to_grid,
    cell_pixel_rect,
    DEFAULT_RESOLUTION,
    DEFAULT_OPACITY
)
