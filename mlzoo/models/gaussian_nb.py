"""
高斯朴素贝叶斯 (Gaussian Naive Bayes)
=====================================

每个类的类条件密度是一个二维高斯：
p(x|C_k) = N(x|μ_k, Σ_k)

对数后验（未归一化）：
a_k = log p(C_k) + log N(x|μ_k, Σ_k)

分类：a_0 ≥ a_1 时判为类0（平局归类0）。

不同类的协方差不同，所以决策边界 a_0 = a_1 是二次曲线
（对应QDA）；协方差相同时退化为直线（LDA）。

本模块的参数是固定的常数，不从数据拟合；
合成数据只用于在图上显示散点、检验分类器。
"""

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from sklearn.metrics import accuracy_score

from ..config import DiagramOptions
from ..exceptions import InvalidCovariance, InvalidProbabilities
from .base import (
    ClassifierModel,
    GaussianParams,
    Point,
    clip_round,
    log_gaussian_pdf,
    make_rng,
    points_to_arrays,
    readonly_array
)

DEFAULT_CLASS_PARAMS = (
    GaussianParams(mean=(3.0, 6.5), covariance=((1.2, 0.3), (0.3, 1.0))),
    GaussianParams(mean=(7.0, 3.5), covariance=((1.0, -0.2), (-0.2, 1.4))),
)
DEFAULT_PRIOR = (0.5, 0.5)
DEFAULT_SEED = 42


def _as_gaussian(params) -> GaussianParams:
    """把 (均值, 协方差) 对转换为 GaussianParams"""
    if isinstance(params, GaussianParams):
        return params
    try:
        mean, covariance = params
    except (TypeError, ValueError) as exc:
        raise InvalidCovariance(f"类参数必须是 (均值, 协方差)，得到 {params!r}") from exc
    return GaussianParams(mean, covariance)


class GaussianNB(ClassifierModel):
    """
    二维高斯类条件密度的贝叶斯分类器

    参数：
    - class_params: 每个类的 (均值, 协方差)
    - prior: 类先验 p(C_k)
    """

    name = 'gaussian_nb'

    def __init__(self, class_params: Sequence[GaussianParams] = DEFAULT_CLASS_PARAMS,
                 prior: Sequence[float] = DEFAULT_PRIOR):
        """
        初始化分类器

        Args:
            class_params: 每个类一个 GaussianParams
            prior: 先验概率，长度与类数相同
        """
        if len(class_params) != 2 or len(prior) != 2:
            raise InvalidProbabilities("GaussianNB只支持二分类")
        prior = readonly_array(prior)
        if np.any(prior <= 0) or not math.isclose(prior.sum(), 1.0, abs_tol=1e-9):
            raise InvalidProbabilities(f"先验必须为正且和为1，得到 {prior.tolist()}")

        self.class_params = tuple(_as_gaussian(p) for p in class_params)
        self.prior = prior
        self.log_prior = readonly_array(np.log(prior))

    def log_posteriors(self, x: float, y: float) -> np.ndarray:
        return np.array([
            self.log_prior[k] + log_gaussian_pdf(x, y, self.class_params[k])
            for k in range(2)
        ])

    def classify(self, x: float, y: float) -> int:
        log_post = self.log_posteriors(x, y)
        return 0 if log_post[0] >= log_post[1] else 1

    def get_distribution_params(self) -> List[GaussianParams]:
        return list(self.class_params)


def cholesky_2x2(covariance) -> Tuple[float, float, float]:
    """
    2×2协方差的Cholesky分解 Σ = L Lᵀ

    L = [[l00, 0], [l10, l11]]

    Returns:
        (l00, l10, l11)
    """
    (a, b), (_, d) = covariance
    l00 = math.sqrt(a)
    l10 = b / l00
    l11 = math.sqrt(d - l10 * l10)
    return l00, l10, l11


def generate_points(rng: Optional[np.random.Generator] = None,
                    class_params: Sequence[GaussianParams] = DEFAULT_CLASS_PARAMS,
                    n_per_class: int = 30) -> List[Point]:
    """
    从每个类的高斯中采样散点

    x = μ + L z,  z ~ N(0, I)

    坐标截断到 [0.1, 9.9] 并保留两位小数。

    Args:
        rng: 随机数生成器（显式传入）
        class_params: 生成参数
        n_per_class: 每类样本数
    """
    rng = rng if rng is not None else make_rng(DEFAULT_SEED)
    points = []
    for cls, params in enumerate(class_params):
        l00, l10, l11 = cholesky_2x2(params.covariance)
        for _ in range(n_per_class):
            z1, z2 = rng.standard_normal(2)
            px = params.mean[0] + l00 * z1
            py = params.mean[1] + l10 * z1 + l11 * z2
            points.append(Point(clip_round(px, 0.1, 9.9),
                                clip_round(py, 0.1, 9.9), cls))
    return points


def demonstrate_gaussian_nb(options=None, seed: int = DEFAULT_SEED,
                            show_plot: bool = True) -> GaussianNB:
    """
    演示高斯朴素贝叶斯

    1. 在合成数据上计算准确率
    2. 绘制散点、决策区域和1/2/3倍标准差椭圆

    Args:
        options: DiagramOptions（分辨率、透明度、等高线层级）
        seed: 合成数据的随机种子
        show_plot: 是否绘图
    """
    options = options or DiagramOptions()

    print("\n高斯朴素贝叶斯")
    print("=" * 60)

    model = GaussianNB()
    points = generate_points(make_rng(seed))
    X, y = points_to_arrays(points)
    acc = accuracy_score(y, model.predict(X))

    print(f"样本数: {len(points)}")
    print(f"先验: {model.prior.tolist()}")
    for k, params in enumerate(model.class_params):
        print(f"  类{k}: 均值={params.mean}, 协方差={params.covariance}")
    print(f"合成数据准确率: {acc:.2%}")

    if show_plot:
        import matplotlib.pyplot as plt
        from ..diagram import DiagramCanvas

        canvas = DiagramCanvas(title='高斯朴素贝叶斯')
        canvas.draw_regions(model.classify, options.region_options())
        canvas.draw_gaussian_contours(model.get_distribution_params(),
                                      levels=options.levels,
                                      labels=['Class 0', 'Class 1'])
        canvas.draw_points(points)
        plt.show()

    return model
