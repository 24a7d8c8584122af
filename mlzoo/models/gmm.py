"""
高斯混合模型分类器 (Gaussian Mixture Model Classifier)
=====================================================

混合模型：
p(x) = Σ_c π_c N(x|μ_c, Σ_c)

每个分量属于一个类别，类条件对数似然是该类所有分量的log-sum-exp：
log p(x, C_k) = log Σ_{c∈k} π_c N(x|μ_c, Σ_c)

逐项累加（不是全局稳定的形式）：
s ← ll_c                        若 s = -∞
s ← s + log(1 + exp(ll_c - s))  否则

已知限制：每类分量少、量级相近时足够稳定；
分量多或似然相差悬殊时 exp 会溢出，溢出的类取 +∞（在比较中胜出）。
需要精确值时应改为先减去全体最大值的 log-sum-exp（scipy.special.logsumexp）。

责任度（后验）：
γ_c(x) = π_c N(x|μ_c, Σ_c) / Σ_j π_j N(x|μ_j, Σ_j)

参数是预先用EM拟合好的常数，这里不做拟合。
"""

import math
from typing import List, Optional, Sequence

import numpy as np
from scipy.special import logsumexp
from sklearn.metrics import accuracy_score

from ..config import DiagramOptions
from ..exceptions import InvalidMixture
from .base import (
    ClassifierModel,
    MixtureComponent,
    Point,
    clip_round,
    log_gaussian_pdf,
    make_rng,
    pairwise_log_add,
    points_to_arrays
)

DEFAULT_COMPONENTS = (
    MixtureComponent(mean=(2.5, 7.0), covariance=((1.0, 0.0), (0.0, 0.64)),
                     weight=0.25, class_label=0),
    MixtureComponent(mean=(3.5, 3.0), covariance=((1.0, 0.0), (0.0, 1.0)),
                     weight=0.25, class_label=0),
    MixtureComponent(mean=(7.0, 5.0), covariance=((1.44, 0.0), (0.0, 2.25)),
                     weight=0.50, class_label=1),
)
DEFAULT_SEED = 55

# 合成数据：(分量, 每分量样本数)
DEFAULT_SAMPLE_COUNTS = (15, 15, 30)


class GMM(ClassifierModel):
    """
    按类条件混合似然分类的GMM

    分类：a_0 ≥ a_1 时判为类0（平局归类0）。
    """

    name = 'gmm'

    def __init__(self, components: Sequence[MixtureComponent] = DEFAULT_COMPONENTS):
        """
        Args:
            components: 混合分量，权重之和必须为1，类别为0或1
        """
        components = tuple(components)
        if not components:
            raise InvalidMixture("至少需要一个混合分量")
        total = sum(c.weight for c in components)
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise InvalidMixture(f"混合权重之和必须为1，得到 {total}")
        if any(c.class_label not in (0, 1) for c in components):
            raise InvalidMixture("分量类别必须是0或1")
        self.components = components

    def component_log_likelihoods(self, x: float, y: float) -> np.ndarray:
        """每个分量的 log π_c + log N(x|μ_c, Σ_c)"""
        return np.array([math.log(c.weight) + log_gaussian_pdf(x, y, c)
                         for c in self.components])

    def log_posteriors(self, x: float, y: float) -> np.ndarray:
        log_lik = [-math.inf, -math.inf]
        for comp, ll in zip(self.components, self.component_log_likelihoods(x, y)):
            log_lik[comp.class_label] = pairwise_log_add(log_lik[comp.class_label], ll)
        return np.array(log_lik)

    def classify(self, x: float, y: float) -> int:
        log_lik = self.log_posteriors(x, y)
        return 0 if log_lik[0] >= log_lik[1] else 1

    def responsibilities(self, x: float, y: float) -> np.ndarray:
        """
        每个分量的责任度 γ_c(x)，和为1

        Returns:
            shape (n_components,)
        """
        ll = self.component_log_likelihoods(x, y)
        return np.exp(ll - logsumexp(ll))

    def get_distribution_params(self) -> List[MixtureComponent]:
        return list(self.components)


def generate_points(rng: Optional[np.random.Generator] = None,
                    components: Sequence[MixtureComponent] = DEFAULT_COMPONENTS,
                    counts: Sequence[int] = DEFAULT_SAMPLE_COUNTS) -> List[Point]:
    """
    从每个分量采样（对角协方差，各维独立）

    坐标截断到 [0.2, 9.8] 并保留两位小数，每个点记录其分量编号。
    """
    rng = rng if rng is not None else make_rng(DEFAULT_SEED)
    points = []
    for comp_id, (comp, n) in enumerate(zip(components, counts)):
        sx = math.sqrt(comp.covariance[0][0])
        sy = math.sqrt(comp.covariance[1][1])
        for _ in range(n):
            px = comp.mean[0] + rng.standard_normal() * sx
            py = comp.mean[1] + rng.standard_normal() * sy
            points.append(Point(clip_round(px, 0.2, 9.8), clip_round(py, 0.2, 9.8),
                                comp.class_label, comp_id))
    return points


def demonstrate_gmm(options=None, seed: int = DEFAULT_SEED,
                    show_plot: bool = True) -> GMM:
    """
    演示GMM分类器

    1. 合成数据上的分类准确率
    2. 分量责任度的平均值
    3. 绘制决策区域、加权分量椭圆和散点
    """
    options = options or DiagramOptions()

    print("\n高斯混合模型分类器")
    print("=" * 60)

    model = GMM()
    points = generate_points(make_rng(seed))
    X, y = points_to_arrays(points)

    print(f"分量数: {len(model.components)}")
    for c, comp in enumerate(model.components):
        print(f"  分量{c}: 类{comp.class_label}, 权重={comp.weight:.2f}, 均值={comp.mean}")
    print(f"合成数据准确率: {accuracy_score(y, model.predict(X)):.2%}")

    resp = np.array([model.responsibilities(p.x, p.y) for p in points])
    print(f"平均责任度: {np.round(resp.mean(axis=0), 3).tolist()}")

    if show_plot:
        import matplotlib.pyplot as plt
        from ..diagram import DiagramCanvas

        canvas = DiagramCanvas(title='高斯混合模型')
        canvas.draw_regions(model.classify, options.region_options())
        canvas.draw_mixture_components(model.get_distribution_params())
        canvas.draw_points(points)
        plt.show()

    return model
