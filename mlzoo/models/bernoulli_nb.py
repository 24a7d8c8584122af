"""
伯努利朴素贝叶斯 (Bernoulli Naive Bayes)
========================================

文档表示为二值特征向量：x_j ∈ {0, 1} 表示第j个词是否出现。

每个类的每个特征是一个伯努利变量：
p(x_j = 1|C_k) = p_kj

朴素贝叶斯假设特征条件独立：
log p(x|C_k) = Σ_j [x_j log p_kj + (1 - x_j) log(1 - p_kj)]

注意伯努利模型会显式惩罚"没有出现"的词，
这是它和多项式模型的主要区别。

每一项在取对数前加 1e-10，p ∈ {0, 1} 时也不会得到 -∞。
分类：a_0 > a_1 时判为类0（严格大于，平局归类1）。
"""

import math
from typing import Dict, List, Optional, Sequence

import numpy as np
from sklearn.metrics import accuracy_score

from ..config import DiagramOptions
from ..exceptions import InvalidProbabilities
from .base import ClassifierModel, LOG_EPS, make_rng, readonly_array

FEATURE_NAMES = (
    'free', 'offer', 'click', 'buy', 'winner',
    'hello', 'meeting', 'report', 'project', 'team'
)
CLASS_NAMES = ('Spam', 'Ham')

DEFAULT_FEATURE_PROBS = (
    # Spam：推广类词出现概率高
    (0.85, 0.78, 0.72, 0.65, 0.60, 0.15, 0.10, 0.08, 0.05, 0.05),
    # Ham：工作类词出现概率高
    (0.08, 0.10, 0.12, 0.05, 0.03, 0.70, 0.80, 0.75, 0.85, 0.78),
)
DEFAULT_PRIOR = (0.3, 0.7)
DEFAULT_SEED = 77

# 二维平面上特征"出现"的阈值（定义域 [0, 10] 的中点）
PRESENCE_THRESHOLD = 5.0


class BernoulliNB(ClassifierModel):
    """
    伯努利朴素贝叶斯

    除了对文档分类（classify_document），
    也可以在二维平面上分类：把 (x, y) 解释为前两个特征是否出现，
    其余特征视为不出现。这样栅格化器可以为离散模型画出决策区域。
    """

    name = 'bernoulli_nb'

    def __init__(self, feature_probs: Sequence[Sequence[float]] = DEFAULT_FEATURE_PROBS,
                 prior: Sequence[float] = DEFAULT_PRIOR,
                 feature_names: Sequence[str] = FEATURE_NAMES,
                 class_names: Sequence[str] = CLASS_NAMES,
                 presence_threshold: float = PRESENCE_THRESHOLD):
        probs = readonly_array(feature_probs)
        if probs.ndim != 2 or probs.shape[0] != 2:
            raise InvalidProbabilities(f"特征概率表必须是 2×d，得到形状 {probs.shape}")
        if np.any(probs < 0) or np.any(probs > 1):
            raise InvalidProbabilities("伯努利概率必须在 [0, 1] 内")
        if len(feature_names) != probs.shape[1]:
            raise InvalidProbabilities("特征名数量与概率表列数不一致")
        prior = readonly_array(prior)
        if prior.shape != (2,) or np.any(prior <= 0) \
                or not math.isclose(prior.sum(), 1.0, abs_tol=1e-9):
            raise InvalidProbabilities(f"先验必须为正且和为1，得到 {prior.tolist()}")

        self.feature_probs = probs
        self.prior = prior
        self.feature_names = tuple(feature_names)
        self.class_names = tuple(class_names)
        self.presence_threshold = presence_threshold

    @property
    def n_features(self) -> int:
        return self.feature_probs.shape[1]

    def log_document_posteriors(self, features: Sequence[int]) -> np.ndarray:
        """
        二值特征向量的对数后验

        Args:
            features: 长度为d的0/1向量

        Returns:
            [a_0, a_1]
        """
        if len(features) != self.n_features:
            raise InvalidProbabilities(
                f"特征向量长度应为 {self.n_features}，得到 {len(features)}")
        log_post = [math.log(self.prior[0]), math.log(self.prior[1])]
        for k in range(2):
            for j, present in enumerate(features):
                p = self.feature_probs[k, j]
                if present == 1:
                    log_post[k] += math.log(p + LOG_EPS)
                else:
                    log_post[k] += math.log(1 - p + LOG_EPS)
        return np.array(log_post)

    def classify_document(self, features: Sequence[int]) -> int:
        """对一篇文档分类（严格大于，平局归类1）"""
        log_post = self.log_document_posteriors(features)
        return 0 if log_post[0] > log_post[1] else 1

    def point_to_features(self, x: float, y: float) -> List[int]:
        """二维点 → 二值特征：前两个特征由坐标是否超过阈值决定"""
        features = [0] * self.n_features
        features[0] = int(x >= self.presence_threshold)
        if self.n_features > 1:
            features[1] = int(y >= self.presence_threshold)
        return features

    def log_posteriors(self, x: float, y: float) -> np.ndarray:
        return self.log_document_posteriors(self.point_to_features(x, y))

    def classify(self, x: float, y: float) -> int:
        return self.classify_document(self.point_to_features(x, y))

    def feature_importance(self) -> List[Dict]:
        """
        特征重要性：对数似然比 log(p_0j + ε) - log(p_1j + ε)，ε = 1e-10

        正值偏向类0（Spam），负值偏向类1（Ham）。按重要性降序排列。
        """
        importance = [
            {'feature': name,
             'importance': (math.log(self.feature_probs[0, j] + LOG_EPS)
                            - math.log(self.feature_probs[1, j] + LOG_EPS)),
             'index': j}
            for j, name in enumerate(self.feature_names)
        ]
        importance.sort(key=lambda item: item['importance'], reverse=True)
        return importance


def generate_documents(rng: Optional[np.random.Generator] = None,
                       feature_probs: Sequence[Sequence[float]] = DEFAULT_FEATURE_PROBS,
                       n_spam: int = 15, n_ham: int = 25) -> List[Dict]:
    """
    按每个类的伯努利概率生成模拟文档

    Returns:
        文档列表，每篇为 {'cls', 'label', 'features'}
    """
    rng = rng if rng is not None else make_rng(DEFAULT_SEED)
    probs = np.asarray(feature_probs, dtype=float)
    documents = []
    for cls, n_docs in ((0, n_spam), (1, n_ham)):
        for _ in range(n_docs):
            features = (rng.random(probs.shape[1]) < probs[cls]).astype(int)
            documents.append({'cls': cls, 'label': CLASS_NAMES[cls],
                              'features': features.tolist()})
    return documents


def demonstrate_bernoulli_nb(options=None, seed: int = DEFAULT_SEED,
                             show_plot: bool = True) -> BernoulliNB:
    """
    演示伯努利朴素贝叶斯

    1. 对模拟文档分类并计算准确率
    2. 打印特征重要性
    3. 绘制特征概率条形图和前两个特征构成的二维决策区域
    """
    options = options or DiagramOptions()

    print("\n伯努利朴素贝叶斯")
    print("=" * 60)

    model = BernoulliNB()
    documents = generate_documents(make_rng(seed))
    y_true = [doc['cls'] for doc in documents]
    y_pred = [model.classify_document(doc['features']) for doc in documents]

    print(f"文档数: {len(documents)}（Spam {y_true.count(0)}，Ham {y_true.count(1)}）")
    print(f"先验: {model.prior.tolist()}")
    print(f"文档分类准确率: {accuracy_score(y_true, y_pred):.2%}")

    print("\n特征重要性（log p_spam/p_ham）：")
    for item in model.feature_importance():
        print(f"  {item['feature']:<10} {item['importance']:+.3f}")

    if show_plot:
        import matplotlib.pyplot as plt
        from ..diagram import DiagramCanvas, CLASS_COLORS

        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))

        idx = np.arange(model.n_features)
        width = 0.4
        for k in range(2):
            ax1.bar(idx + (k - 0.5) * width, model.feature_probs[k], width,
                    color=CLASS_COLORS[k], label=model.class_names[k])
        ax1.set_xticks(idx)
        ax1.set_xticklabels(model.feature_names, rotation=45)
        ax1.set_ylabel('p(word present | class)')
        ax1.set_title('每类的特征出现概率')
        ax1.legend()
        ax1.grid(True, alpha=0.3)

        canvas = DiagramCanvas(ax=ax2, title='前两个特征的决策区域',
                               x_label=model.feature_names[0],
                               y_label=model.feature_names[1])
        canvas.draw_regions(model.classify, options.region_options())

        plt.tight_layout()
        plt.show()

    return model
