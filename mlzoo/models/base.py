"""
分类模型的公共部分 (Classifier Model Base)
==========================================

所有分类器都用最大对数后验分类：
k* = argmax_k [log p(C_k) + log p(x|C_k)]

使用对数而不是概率本身，避免连乘下溢。

二维高斯对数密度（解析求逆）：
Σ = [[a, b], [b, d]],  det = ad - b²
Σ⁻¹ = (1/det) [[d, -b], [-b, a]]

log N(x|μ,Σ) = -log(2π) - ½log(det)
               - ½ (dx²·d - 2·dx·dy·b + dy²·a) / det

数值保护：
- det ≤ 0 时截断为 1e-8（奇异协方差仍能渲染，只是近似退化）
- 概率取对数前加 1e-10（避免 log(0) = -∞）
"""

import math
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy.special import logsumexp

from ..exceptions import InvalidCovariance, InvalidMixture, SingularCovarianceWarning
from ..geometry.ellipse import covariance_entries

# 数值保护常数
DET_FLOOR = 1e-8
LOG_EPS = 1e-10

LOG_2PI = math.log(2 * math.pi)


@dataclass(frozen=True)
class Point:
    """二维定义域中的一个带标签样本"""

    x: float
    y: float
    class_label: int
    component_id: Optional[int] = None


@dataclass(frozen=True)
class GaussianParams:
    """
    二维高斯参数

    covariance必须对称；行列式 ≤ 0 时只发出警告，
    计算密度时会截断为 DET_FLOOR。
    """

    mean: Tuple[float, float]
    covariance: Tuple[Tuple[float, float], Tuple[float, float]]

    def __post_init__(self):
        mean = tuple(float(v) for v in self.mean)
        if len(mean) != 2:
            raise InvalidCovariance(f"均值必须是二维向量，得到 {self.mean!r}")
        a, b, d = covariance_entries(self.covariance)
        object.__setattr__(self, 'mean', mean)
        object.__setattr__(self, 'covariance', ((a, b), (b, d)))
        if a * d - b * b <= 0:
            warnings.warn(
                f"协方差 {self.covariance} 奇异，行列式将被截断为 {DET_FLOOR}",
                SingularCovarianceWarning, stacklevel=3)

    @property
    def determinant(self) -> float:
        (a, b), (_, d) = self.covariance
        return a * d - b * b


@dataclass(frozen=True)
class MixtureComponent(GaussianParams):
    """混合分量：高斯参数 + 混合权重 + 所属类别"""

    weight: float = 1.0
    class_label: int = 0

    def __post_init__(self):
        super().__post_init__()
        if not (0 < self.weight <= 1):
            raise InvalidMixture(f"混合权重必须在 (0, 1] 内，得到 {self.weight}")


def log_gaussian_pdf(x: float, y: float, params: GaussianParams) -> float:
    """
    二维高斯对数密度（2×2解析逆）

    Args:
        x, y: 查询点
        params: 高斯参数

    Returns:
        log N((x, y) | μ, Σ)
    """
    dx = x - params.mean[0]
    dy = y - params.mean[1]
    (a, b), (_, d) = params.covariance
    det = a * d - b * b
    if det <= 0:
        det = DET_FLOOR
    exponent = -0.5 * (dx * dx * d / det - 2 * dx * dy * b / det + dy * dy * a / det)
    log_norm = -LOG_2PI - 0.5 * math.log(det)
    return log_norm + exponent


def log_normal_pdf(x: float, mean: float, sigma: float) -> float:
    """
    一维正态对数密度

    log N(x|μ,σ²) = -½log(2πσ²) - (x-μ)²/(2σ²)
    """
    var = sigma * sigma
    diff = x - mean
    return -0.5 * math.log(2 * math.pi * var) - diff * diff / (2 * var)


def pairwise_log_add(log_sum: float, log_term: float) -> float:
    """
    逐项累加的log-sum-exp

    log(e^s + e^t) = s + log(1 + e^(t-s))

    这不是全局稳定的形式（没有先减去所有项的最大值）。
    t比s大约709以上时 exp(t-s) 超出浮点范围，此时结果取 +∞，
    该类在比较中胜出，渲染不会中断。每类只有少数几个
    量级相近的分量时没有问题；分量多时应改用 scipy.special.logsumexp。
    """
    if log_sum == -math.inf:
        return log_term
    try:
        return log_sum + math.log(1 + math.exp(log_term - log_sum))
    except OverflowError:
        return math.inf


def readonly_array(values, dtype=float) -> np.ndarray:
    """复制为只读数组（模型参数构造后不可修改）"""
    arr = np.array(values, dtype=dtype)
    arr.flags.writeable = False
    return arr


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    创建独立的随机数生成器

    合成数据的生成函数都显式接收这个对象，不使用全局的 np.random 状态。
    """
    return np.random.default_rng(seed)


def clip_round(value: float, low: float, high: float) -> float:
    """截断到 [low, high] 并保留两位小数"""
    return round(float(min(max(value, low), high)), 2)


class ClassifierModel(ABC):
    """
    分类器接口

    唯一必需的能力是 classify(x, y) -> 类别。
    参数在构造后只读，分类是参数和查询点的纯函数，
    同一个实例可以被多次渲染同时使用。
    """

    name: str = 'classifier'
    n_classes: int = 2

    @abstractmethod
    def log_posteriors(self, x: float, y: float) -> np.ndarray:
        """每个类的未归一化对数后验 log p(C_k) + log p(x|C_k)"""

    @abstractmethod
    def classify(self, x: float, y: float) -> int:
        """最大对数后验分类"""

    def __call__(self, x: float, y: float) -> int:
        return self.classify(x, y)

    def get_distribution_params(self) -> List[GaussianParams]:
        """用于绘制等高线/混合分量的分布参数（没有则为空）"""
        return []

    def predict_proba(self, x: float, y: float) -> np.ndarray:
        """
        归一化后验概率

        p(C_k|x) = exp(a_k - logsumexp(a))
        """
        log_joint = self.log_posteriors(x, y)
        return np.exp(log_joint - logsumexp(log_joint))

    def predict(self, X: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
        """对一组点逐个分类，X的shape为 (n_samples, 2)"""
        X = np.asarray(X, dtype=float)
        return np.array([self.classify(x, y) for x, y in X], dtype=int)

    def score(self, X, y) -> float:
        """计算分类准确率"""
        return float(np.mean(self.predict(X) == np.asarray(y)))


def points_to_arrays(points: Sequence[Point]) -> Tuple[np.ndarray, np.ndarray]:
    """把点列表拆成特征矩阵和标签向量"""
    X = np.array([[p.x, p.y] for p in points], dtype=float)
    y = np.array([p.class_label for p in points], dtype=int)
    return X, y
