"""
坐标映射 (Coordinate Mapper)
============================

把固定的二维定义域（例如 [0,10]×[0,10]）映射到像素空间。

仿射映射（线性插值）：
p = p0 + (v - d0) · (p1 - p0) / (d1 - d0)

逆映射：
v = d0 + (p - p0) · (d1 - d0) / (p1 - p0)

注意：
- 像素区间可以是反向的（SVG的y轴向下，所以y映射为 [底部, 顶部]），
  映射依然单调可逆
- x轴和y轴的像素/单位比例一般不同，
  因此长度换算必须分别在各自的轴上做（见 ellipse.py）
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from ..exceptions import InvalidDomain

Number = Union[float, np.ndarray]


@dataclass(frozen=True)
class CoordinateMapper:
    """
    单轴的仿射映射

    一旦构造就不可变，可以在多个绘图函数之间安全传递。
    """

    domain: Tuple[float, float]
    pixel_range: Tuple[float, float]

    def __post_init__(self):
        d0, d1 = (float(v) for v in self.domain)
        p0, p1 = (float(v) for v in self.pixel_range)
        if not (np.isfinite(d0) and np.isfinite(d1)) or d0 == d1:
            raise InvalidDomain(f"退化的定义域区间: [{d0}, {d1}]")
        if not (np.isfinite(p0) and np.isfinite(p1)) or p0 == p1:
            raise InvalidDomain(f"退化的像素区间: [{p0}, {p1}]，无法求逆")
        object.__setattr__(self, 'domain', (d0, d1))
        object.__setattr__(self, 'pixel_range', (p0, p1))

    @property
    def scale(self) -> float:
        """每个定义域单位对应的像素数（带符号）"""
        (d0, d1), (p0, p1) = self.domain, self.pixel_range
        return (p1 - p0) / (d1 - d0)

    def to_pixel(self, value: Number) -> Number:
        """定义域 → 像素"""
        d0 = self.domain[0]
        p0 = self.pixel_range[0]
        if isinstance(value, np.ndarray):
            return p0 + (value.astype(float) - d0) * self.scale
        return p0 + (float(value) - d0) * self.scale

    def to_domain(self, pixel: Number) -> Number:
        """像素 → 定义域（to_pixel的逆）"""
        d0 = self.domain[0]
        p0 = self.pixel_range[0]
        if isinstance(pixel, np.ndarray):
            return d0 + (pixel.astype(float) - p0) / self.scale
        return d0 + (float(pixel) - p0) / self.scale

    def length_to_pixels(self, origin: float, length: float) -> float:
        """
        把从origin出发的定义域长度换算为像素长度

        |to_pixel(origin + length) - to_pixel(origin)|
        """
        return abs(self.to_pixel(origin + length) - self.to_pixel(origin))


def to_pixel(value: Number, domain_range: Tuple[float, float],
             pixel_range: Tuple[float, float]) -> Number:
    """一次性映射：to_pixel(value, [d0, d1], [p0, p1])"""
    return CoordinateMapper(tuple(domain_range), tuple(pixel_range)).to_pixel(value)


@dataclass(frozen=True)
class Margin:
    """绘图区边距（像素）"""

    top: float = 20
    right: float = 30
    bottom: float = 45
    left: float = 55


@dataclass(frozen=True)
class PlotMapper:
    """
    二维映射：一对独立的x、y轴映射

    取代把比例尺闭包在多个绘图函数里的做法，
    每个需要坐标换算的几何函数都显式接收这个值。
    """

    x: CoordinateMapper
    y: CoordinateMapper

    @classmethod
    def for_canvas(cls, x_domain: Tuple[float, float] = (0.0, 10.0),
                   y_domain: Tuple[float, float] = (0.0, 10.0),
                   width: float = 800, height: float = 400,
                   margin: Margin = Margin()) -> 'PlotMapper':
        """
        按画布尺寸构造映射

        x轴：从左到右 [left, width - right]
        y轴：翻转，[height - bottom, top]
        """
        x = CoordinateMapper(tuple(x_domain),
                             (margin.left, width - margin.right))
        y = CoordinateMapper(tuple(y_domain),
                             (height - margin.bottom, margin.top))
        return cls(x, y)

    def to_pixel(self, x: Number, y: Number) -> Tuple[Number, Number]:
        """把定义域中的点映射到像素坐标"""
        return self.x.to_pixel(x), self.y.to_pixel(y)

    @property
    def plot_width(self) -> float:
        p0, p1 = self.x.pixel_range
        return abs(p1 - p0)

    @property
    def plot_height(self) -> float:
        p0, p1 = self.y.pixel_range
        return abs(p1 - p0)
