"""
协方差椭圆 (Covariance Ellipse Projector)
=========================================

二维高斯的等概率密度轮廓是椭圆：
(x-μ)ᵀ Σ⁻¹ (x-μ) = level²

其中level是"标准差倍数"（通常取1、2、3）。

2×2对称矩阵 Σ = [[a, b], [b, d]] 的特征分解有闭式解：
- trace = a + d,  det = ad - b²
- disc = √max(0, trace²/4 - det)   （浮点误差可能让根号下略小于0）
- λ₁ = trace/2 + disc,  λ₂ = trace/2 - disc   （λ₁ ≥ λ₂）

λ₁对应的特征向量是 (b, λ₁ - a)，所以主轴的旋转角为
θ = atan2(λ₁ - a, b)

半轴长度（定义域单位）：
rx = √λ₁ · level,  ry = √λ₂ · level

换算到像素时，x、y轴的比例可能不同，
所以半轴的像素长度必须在各自的轴上通过映射计算：
|X(μx + rx) - X(μx)| 和 |Y(μy + ry) - Y(μy)|
而不是乘以一个统一的"像素/单位"。
"""

import math
from dataclasses import dataclass
from typing import Sequence, Tuple, List

import numpy as np

from ..exceptions import InvalidCovariance, InvalidLevel
from .mapper import PlotMapper

Covariance = Sequence[Sequence[float]]


def covariance_entries(covariance: Covariance) -> Tuple[float, float, float]:
    """
    校验2×2对称协方差矩阵，返回 (a, b, d)

    形状错误、含非有限值或不对称时抛出 InvalidCovariance。
    """
    try:
        cov = np.asarray(covariance, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidCovariance(f"无法解析协方差矩阵: {covariance!r}") from exc
    if cov.shape != (2, 2):
        raise InvalidCovariance(f"协方差矩阵必须是2×2，得到形状 {cov.shape}")
    if not np.all(np.isfinite(cov)):
        raise InvalidCovariance("协方差矩阵含有非有限值")
    if cov[0, 1] != cov[1, 0]:
        raise InvalidCovariance(
            f"协方差矩阵不对称: {cov[0, 1]} != {cov[1, 0]}")
    return float(cov[0, 0]), float(cov[0, 1]), float(cov[1, 1])


def eigenvalues_2x2(a: float, b: float, d: float) -> Tuple[float, float]:
    """对称2×2矩阵的特征值 (λ₁, λ₂)，λ₁ ≥ λ₂"""
    trace = a + d
    det = a * d - b * b
    disc = math.sqrt(max(0.0, trace * trace / 4 - det))
    return trace / 2 + disc, trace / 2 - disc


@dataclass(frozen=True)
class EllipseGeometry:
    """
    椭圆几何：旋转角（度）和两个半轴长度

    由 (协方差, level) 派生，无状态。
    """

    rotation_degrees: float
    semi_axis_x: float
    semi_axis_y: float

    def to_pixels(self, mean: Sequence[float],
                  mapper: PlotMapper) -> 'EllipseGeometry':
        """
        换算到像素空间

        半轴长度分别在x、y轴上通过映射计算。
        当y轴相对x轴翻转（屏幕坐标向下）时，旋转方向随之取反。
        对各向同性比例或无旋转的椭圆，结果是精确的；
        需要精确轮廓时使用 ellipse_outline 并逐点映射。
        """
        mx, my = float(mean[0]), float(mean[1])
        rx = mapper.x.length_to_pixels(mx, self.semi_axis_x)
        ry = mapper.y.length_to_pixels(my, self.semi_axis_y)
        flipped = (mapper.x.scale > 0) != (mapper.y.scale > 0)
        angle = -self.rotation_degrees if flipped else self.rotation_degrees
        return EllipseGeometry(angle + 0.0, rx, ry)


def project(covariance: Covariance, level: float) -> EllipseGeometry:
    """
    由协方差矩阵和标准差倍数计算椭圆几何

    Args:
        covariance: 2×2对称矩阵 [[a, b], [b, d]]
        level: 标准差倍数，必须为正

    Returns:
        定义域单位下的 EllipseGeometry
    """
    if not isinstance(level, (int, float, np.floating, np.integer)) \
            or not math.isfinite(level) or level <= 0:
        raise InvalidLevel(f"level必须是正的有限数，得到 {level!r}")

    a, b, d = covariance_entries(covariance)
    lambda1, lambda2 = eigenvalues_2x2(a, b, d)

    # 对角且a≥d时主轴就是x轴
    if b == 0 and a >= d:
        angle = 0.0
    else:
        angle = math.degrees(math.atan2(lambda1 - a, b))
    if math.isnan(angle):
        angle = 0.0

    rx = math.sqrt(max(0.0, lambda1)) * level
    ry = math.sqrt(max(0.0, lambda2)) * level
    return EllipseGeometry(angle, rx, ry)


def project_levels(covariance: Covariance,
                   levels: Sequence[float] = (1, 2, 3)) -> List[EllipseGeometry]:
    """对每个level计算一次椭圆（等高线组）"""
    return [project(covariance, level) for level in levels]


def ellipse_outline(mean: Sequence[float], covariance: Covariance,
                    level: float, n_points: int = 64) -> np.ndarray:
    """
    采样椭圆轮廓（定义域单位）

    轮廓上每一点满足 (p-μ)ᵀ Σ⁻¹ (p-μ) = level²（Σ非奇异时）。

    Returns:
        轮廓点，shape (n_points, 2)
    """
    geometry = project(covariance, level)
    phi = math.radians(geometry.rotation_degrees)
    t = np.linspace(0, 2 * np.pi, n_points, endpoint=False)

    # 先在主轴坐标系中取点，再旋转、平移
    local = np.column_stack([geometry.semi_axis_x * np.cos(t),
                             geometry.semi_axis_y * np.sin(t)])
    rotation = np.array([[math.cos(phi), -math.sin(phi)],
                         [math.sin(phi), math.cos(phi)]])
    return local @ rotation.T + np.asarray(mean, dtype=float)
