"""
贝叶斯网络分类器 (Bayesian Network Classifier)
==============================================

网络结构（DAG）：
    Class → X1,  Class → X2,  X1 → X2

条件分布（线性高斯）：
- P(Class=0) = prior
- X1 | Class=k      ~ N(μ1[k], σ1²)
- X2 | Class=k, X1  ~ N(μ2[k] + β·X1, σ2²)

联合对数似然：
log p(x1, x2, C_k) = log p(C_k) + log N(x1|μ1[k], σ1²)
                     + log N(x2|μ2[k] + β·x1, σ2²)

与朴素贝叶斯的对比：
朴素贝叶斯去掉 X1 → X2 这条边，X2 在给定类别时与 X1 独立。
线性高斯链的边缘分布有闭式解：
E[X2|C_k]   = μ2[k] + β·μ1[k]
Var[X2|C_k] = σ2² + β²·σ1²

这正是"忽略依赖但保持边缘正确"的朴素模型。
β ≠ 0 时两个模型在某些点上的分类结果不同，说明依赖关系确实有影响。

给定类别时 (X1, X2) 的联合分布是二维高斯：
μ = [μ1, μ2 + β·μ1]
Σ = [[σ1², β·σ1²], [β·σ1², σ2² + β²·σ1²]]
用于在图上画等高线。
"""

import math
from typing import List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np
from sklearn.metrics import accuracy_score

from ..config import DiagramOptions
from ..exceptions import InvalidProbabilities
from ..geometry import compute_regions
from .base import (
    ClassifierModel,
    GaussianParams,
    Point,
    clip_round,
    log_normal_pdf,
    make_rng,
    points_to_arrays,
    readonly_array
)

DEFAULT_PARAMS = {
    'prior': 0.5,
    'mu1': (3.0, 7.0),   # 每个类的X1均值
    'sigma1': 1.2,
    'mu2': (6.5, 3.5),   # 每个类的X2基础均值
    'beta': 0.3,         # X1 → X2 的依赖强度
    'sigma2': 1.0,
}
DEFAULT_SEED = 63

# DAG节点在 [0,1]² 中的布局，用于绘图
NODE_POSITIONS = {
    'Class': (0.5, 0.15),
    'X1': (0.25, 0.8),
    'X2': (0.75, 0.8),
}


class BayesianNetworkNB(ClassifierModel):
    """
    带 X1 → X2 依赖的两特征贝叶斯网络分类器

    分类：a_0 ≥ a_1 时判为类0（平局归类0）。
    """

    name = 'bayesian_network'

    def __init__(self, prior: float = DEFAULT_PARAMS['prior'],
                 mu1: Sequence[float] = DEFAULT_PARAMS['mu1'],
                 sigma1: float = DEFAULT_PARAMS['sigma1'],
                 mu2: Sequence[float] = DEFAULT_PARAMS['mu2'],
                 beta: float = DEFAULT_PARAMS['beta'],
                 sigma2: float = DEFAULT_PARAMS['sigma2']):
        """
        Args:
            prior: P(Class=0)
            mu1: X1的类条件均值
            sigma1: X1的标准差
            mu2: X2的类条件基础均值
            beta: X2对X1的回归系数
            sigma2: X2的条件标准差
        """
        if not (0 < prior < 1):
            raise InvalidProbabilities(f"先验必须在 (0, 1) 内，得到 {prior}")
        if sigma1 <= 0 or sigma2 <= 0:
            raise InvalidProbabilities("标准差必须为正")
        self.prior = float(prior)
        self.mu1 = readonly_array(mu1)
        self.sigma1 = float(sigma1)
        self.mu2 = readonly_array(mu2)
        if self.mu1.shape != (2,) or self.mu2.shape != (2,):
            raise InvalidProbabilities(
                f"mu1、mu2必须各有两个类的值，得到 {self.mu1.tolist()}, {self.mu2.tolist()}")
        self.beta = float(beta)
        self.sigma2 = float(sigma2)

    def log_prior(self, cls: int) -> float:
        return math.log(self.prior) if cls == 0 else math.log(1 - self.prior)

    def log_likelihood(self, x1: float, x2: float, cls: int) -> float:
        """联合对数似然 log p(x1, x2, C=cls)"""
        log_p_x1 = log_normal_pdf(x1, self.mu1[cls], self.sigma1)
        # X2 的条件均值依赖于观测到的 X1
        cond_mean = self.mu2[cls] + self.beta * x1
        log_p_x2 = log_normal_pdf(x2, cond_mean, self.sigma2)
        return self.log_prior(cls) + log_p_x1 + log_p_x2

    def log_posteriors(self, x: float, y: float) -> np.ndarray:
        return np.array([self.log_likelihood(x, y, k) for k in range(2)])

    def classify(self, x: float, y: float) -> int:
        return 0 if self.log_likelihood(x, y, 0) >= self.log_likelihood(x, y, 1) else 1

    def naive(self) -> 'NaiveMarginalNB':
        """去掉 X1 → X2 边、保持X2边缘分布的朴素贝叶斯"""
        return NaiveMarginalNB(self)

    def graph(self) -> nx.DiGraph:
        """网络结构 Class → X1, Class → X2, X1 → X2"""
        graph = nx.DiGraph()
        graph.add_nodes_from(['Class', 'X1', 'X2'])
        graph.add_edges_from([('Class', 'X1'), ('Class', 'X2'), ('X1', 'X2')])
        return graph

    def get_distribution_params(self) -> List[GaussianParams]:
        """每个类 (X1, X2) 的联合高斯"""
        var1 = self.sigma1 ** 2
        cov12 = self.beta * var1
        var2 = self.sigma2 ** 2 + self.beta ** 2 * var1
        return [
            GaussianParams(mean=(self.mu1[k], self.mu2[k] + self.beta * self.mu1[k]),
                           covariance=((var1, cov12), (cov12, var2)))
            for k in range(2)
        ]


class NaiveMarginalNB(ClassifierModel):
    """
    贝叶斯网络的朴素版本

    X2 | C_k ~ N(μ2[k] + β·μ1[k], σ2² + β²·σ1²)，与X1条件独立。
    分类：a_0 ≥ a_1 时判为类0。
    """

    name = 'bayesian_network_naive'

    def __init__(self, network: BayesianNetworkNB):
        self.network = network
        self.naive_mu2 = readonly_array(network.mu2 + network.beta * network.mu1)
        self.naive_var2 = network.sigma2 ** 2 + network.beta ** 2 * network.sigma1 ** 2
        self.naive_sigma2 = math.sqrt(self.naive_var2)

    def log_likelihood(self, x1: float, x2: float, cls: int) -> float:
        net = self.network
        log_p_x1 = log_normal_pdf(x1, net.mu1[cls], net.sigma1)
        log_p_x2 = log_normal_pdf(x2, self.naive_mu2[cls], self.naive_sigma2)
        return net.log_prior(cls) + log_p_x1 + log_p_x2

    def log_posteriors(self, x: float, y: float) -> np.ndarray:
        return np.array([self.log_likelihood(x, y, k) for k in range(2)])

    def classify(self, x: float, y: float) -> int:
        return 0 if self.log_likelihood(x, y, 0) >= self.log_likelihood(x, y, 1) else 1

    def graph(self) -> nx.DiGraph:
        """朴素结构：只有 Class → X1, Class → X2"""
        graph = self.network.graph()
        graph.remove_edge('X1', 'X2')
        return graph

    def get_distribution_params(self) -> List[GaussianParams]:
        net = self.network
        return [
            GaussianParams(mean=(net.mu1[k], self.naive_mu2[k]),
                           covariance=((net.sigma1 ** 2, 0.0), (0.0, self.naive_var2)))
            for k in range(2)
        ]


def find_disagreements(network: BayesianNetworkNB,
                       domain: Tuple[Tuple[float, float], Tuple[float, float]] = ((0, 10), (0, 10)),
                       resolution: int = 40) -> List[Tuple[float, float]]:
    """
    在网格上找出网络与朴素版本分类不同的点

    Returns:
        分类不一致的格子中心列表
    """
    naive = network.naive()
    full_cells = compute_regions(network.classify, domain, resolution)
    naive_cells = compute_regions(naive.classify, domain, resolution)
    return [(a.center_x, a.center_y)
            for a, b in zip(full_cells, naive_cells)
            if a.class_label != b.class_label]


def generate_points(rng: Optional[np.random.Generator] = None,
                    network: Optional[BayesianNetworkNB] = None,
                    n_per_class: int = 30) -> List[Point]:
    """
    按网络的生成过程采样：先采X1，再按X1采X2

    坐标截断到 [0.2, 9.8] 并保留两位小数。
    """
    rng = rng if rng is not None else make_rng(DEFAULT_SEED)
    network = network or BayesianNetworkNB()
    points = []
    for cls in range(2):
        for _ in range(n_per_class):
            x1 = network.mu1[cls] + rng.standard_normal() * network.sigma1
            x2 = network.mu2[cls] + network.beta * x1 + rng.standard_normal() * network.sigma2
            points.append(Point(clip_round(x1, 0.2, 9.8),
                                clip_round(x2, 0.2, 9.8), cls))
    return points


def demonstrate_bayesian_network(options=None, seed: int = DEFAULT_SEED,
                                 show_plot: bool = True) -> BayesianNetworkNB:
    """
    演示贝叶斯网络分类器与朴素贝叶斯的对比

    1. 两个模型在合成数据上的准确率
    2. 决策区域不一致的格子数
    3. 并排绘制DAG和两个模型的决策区域
    """
    options = options or DiagramOptions()

    print("\n贝叶斯网络 vs 朴素贝叶斯")
    print("=" * 60)

    network = BayesianNetworkNB()
    naive = network.naive()
    points = generate_points(make_rng(seed), network)
    X, y = points_to_arrays(points)

    print(f"网络结构: {sorted(network.graph().edges())}")
    print(f"朴素X2均值: {naive.naive_mu2.tolist()}, 标准差: {naive.naive_sigma2:.4f}")
    print(f"贝叶斯网络准确率: {accuracy_score(y, network.predict(X)):.2%}")
    print(f"朴素贝叶斯准确率: {accuracy_score(y, naive.predict(X)):.2%}")

    disagreements = find_disagreements(network, resolution=options.resolution)
    print(f"决策不一致的格子: {len(disagreements)} / {options.resolution ** 2}")

    if show_plot:
        import matplotlib.pyplot as plt
        from ..diagram import DiagramCanvas

        fig, axes = plt.subplots(1, 3, figsize=(18, 5))

        dag_canvas = DiagramCanvas(ax=axes[0], title='网络结构')
        dag_canvas.draw_dag(network.graph(), NODE_POSITIONS,
                            active_edges=[('X1', 'X2')])

        for ax, model, title in ((axes[1], network, '贝叶斯网络'),
                                 (axes[2], naive, '朴素贝叶斯')):
            canvas = DiagramCanvas(ax=ax, title=title)
            canvas.draw_regions(model.classify, options.region_options())
            canvas.draw_gaussian_contours(model.get_distribution_params(),
                                          levels=options.levels)
            canvas.draw_points(points)

        plt.tight_layout()
        plt.show()

    return network
