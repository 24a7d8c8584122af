"""
多项式朴素贝叶斯 (Multinomial Naive Bayes)
==========================================

文档表示为词频向量：n_j 是第j个词出现的次数。

每个类有一个词分布 p_k = (p_k1, ..., p_kd)，Σ_j p_kj = 1。
多项分布的对数似然（去掉与类无关的多项式系数）：
log p(n|C_k) = Σ_j n_j log p_kj

和伯努利模型不同，没有出现的词（n_j = 0）对似然没有贡献。

构造时把每行原始概率除以行和，保证每个类的词分布和为1。
每个概率取对数前加 1e-10。
分类：a_0 > a_1 时判为类0（严格大于，平局归类1）。
"""

import math
from typing import Dict, List, Optional, Sequence

import numpy as np
from sklearn.metrics import accuracy_score

from ..config import DiagramOptions
from ..exceptions import InvalidProbabilities
from .base import ClassifierModel, LOG_EPS, make_rng, readonly_array
from .bernoulli_nb import CLASS_NAMES, FEATURE_NAMES

DEFAULT_FEATURE_PROBS = (
    # Spam：推广类词概率高
    (0.18, 0.16, 0.14, 0.12, 0.10, 0.04, 0.03, 0.03, 0.02, 0.02),
    # Ham：工作类词概率高
    (0.02, 0.03, 0.03, 0.02, 0.01, 0.12, 0.15, 0.16, 0.18, 0.14),
)
DEFAULT_PRIOR = (0.3, 0.7)
DEFAULT_SEED = 101

# 二维平面上坐标到词频的截断上限
MAX_POINT_COUNT = 10


def normalize_rows(raw_probs: Sequence[Sequence[float]]) -> np.ndarray:
    """
    逐行归一化：p_kj = raw_kj / Σ_j raw_kj

    Args:
        raw_probs: 正数矩阵，shape (n_classes, n_features)
    """
    raw = np.array(raw_probs, dtype=float)
    if raw.ndim != 2:
        raise InvalidProbabilities(f"概率表必须是二维的，得到形状 {raw.shape}")
    if not np.all(np.isfinite(raw)) or np.any(raw <= 0):
        raise InvalidProbabilities("多项式概率表必须全部为正")
    return raw / raw.sum(axis=1, keepdims=True)


class MultinomialNB(ClassifierModel):
    """
    多项式朴素贝叶斯

    二维平面上的分类：(x, y) 四舍五入为前两个词的词频
    （截断到 [0, MAX_POINT_COUNT]），其余词频为0。
    """

    name = 'multinomial_nb'

    def __init__(self, feature_probs: Sequence[Sequence[float]] = DEFAULT_FEATURE_PROBS,
                 prior: Sequence[float] = DEFAULT_PRIOR,
                 feature_names: Sequence[str] = FEATURE_NAMES,
                 class_names: Sequence[str] = CLASS_NAMES):
        probs = normalize_rows(feature_probs)
        if probs.shape[0] != 2:
            raise InvalidProbabilities(f"只支持二分类，得到 {probs.shape[0]} 个类")
        if len(feature_names) != probs.shape[1]:
            raise InvalidProbabilities("特征名数量与概率表列数不一致")
        prior = readonly_array(prior)
        if prior.shape != (2,) or np.any(prior <= 0) \
                or not math.isclose(prior.sum(), 1.0, abs_tol=1e-9):
            raise InvalidProbabilities(f"先验必须为正且和为1，得到 {prior.tolist()}")

        probs.flags.writeable = False
        self.feature_probs = probs
        self.log_feature_probs = readonly_array(np.log(probs + LOG_EPS))
        self.prior = prior
        self.feature_names = tuple(feature_names)
        self.class_names = tuple(class_names)

    @property
    def n_features(self) -> int:
        return self.feature_probs.shape[1]

    def log_document_posteriors(self, counts: Sequence[int]) -> np.ndarray:
        """
        词频向量的对数后验

        a_k = log p(C_k) + Σ_j n_j log(p_kj + 1e-10)
        """
        if len(counts) != self.n_features:
            raise InvalidProbabilities(
                f"词频向量长度应为 {self.n_features}，得到 {len(counts)}")
        log_post = [math.log(self.prior[0]), math.log(self.prior[1])]
        for k in range(2):
            for j, count in enumerate(counts):
                log_post[k] += count * self.log_feature_probs[k, j]
        return np.array(log_post)

    def classify_document(self, counts: Sequence[int]) -> int:
        """对一篇文档分类（严格大于，平局归类1）"""
        log_post = self.log_document_posteriors(counts)
        return 0 if log_post[0] > log_post[1] else 1

    def point_to_counts(self, x: float, y: float) -> List[int]:
        """二维点 → 词频：前两个词的次数取坐标的四舍五入"""
        counts = [0] * self.n_features
        counts[0] = int(round(min(max(x, 0), MAX_POINT_COUNT)))
        if self.n_features > 1:
            counts[1] = int(round(min(max(y, 0), MAX_POINT_COUNT)))
        return counts

    def log_posteriors(self, x: float, y: float) -> np.ndarray:
        return self.log_document_posteriors(self.point_to_counts(x, y))

    def classify(self, x: float, y: float) -> int:
        return self.classify_document(self.point_to_counts(x, y))

    def feature_importance(self) -> List[Dict]:
        """对数似然比 log(p_0j + ε) - log(p_1j + ε)，按降序排列"""
        importance = [
            {'feature': name,
             'importance': (math.log(self.feature_probs[0, j] + LOG_EPS)
                            - math.log(self.feature_probs[1, j] + LOG_EPS)),
             'index': j}
            for j, name in enumerate(self.feature_names)
        ]
        importance.sort(key=lambda item: item['importance'], reverse=True)
        return importance


def sample_counts(rng: np.random.Generator, probs: Sequence[float],
                  total_words: int) -> List[int]:
    """从多项分布采样一篇文档的词频"""
    return rng.multinomial(total_words, probs).tolist()


def generate_documents(rng: Optional[np.random.Generator] = None,
                       feature_probs: Sequence[Sequence[float]] = DEFAULT_FEATURE_PROBS,
                       n_spam: int = 15, n_ham: int = 25) -> List[Dict]:
    """
    生成模拟文档

    Spam文档长度 20-49 词，Ham文档长度 30-69 词。

    Returns:
        文档列表，每篇为 {'cls', 'label', 'counts', 'total_words'}
    """
    rng = rng if rng is not None else make_rng(DEFAULT_SEED)
    probs = normalize_rows(feature_probs)
    documents = []
    for cls, n_docs, min_words, spread in ((0, n_spam, 20, 30), (1, n_ham, 30, 40)):
        for _ in range(n_docs):
            total = min_words + int(rng.integers(spread))
            documents.append({'cls': cls, 'label': CLASS_NAMES[cls],
                              'counts': sample_counts(rng, probs[cls], total),
                              'total_words': total})
    return documents


def demonstrate_multinomial_nb(options=None, seed: int = DEFAULT_SEED,
                               show_plot: bool = True) -> MultinomialNB:
    """
    演示多项式朴素贝叶斯

    1. 对模拟词频文档分类
    2. 打印归一化后的词分布和特征重要性
    3. 绘制词分布条形图和二维决策区域
    """
    options = options or DiagramOptions()

    print("\n多项式朴素贝叶斯")
    print("=" * 60)

    model = MultinomialNB()
    documents = generate_documents(make_rng(seed))
    y_true = [doc['cls'] for doc in documents]
    y_pred = [model.classify_document(doc['counts']) for doc in documents]

    print(f"文档数: {len(documents)}")
    print(f"词分布行和: {model.feature_probs.sum(axis=1).tolist()}")
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
        ax1.set_ylabel('p(word | class)')
        ax1.set_title('每类的词分布')
        ax1.legend()
        ax1.grid(True, alpha=0.3)

        canvas = DiagramCanvas(ax=ax2, title='前两个词频的决策区域',
                               x_label=f'count({model.feature_names[0]})',
                               y_label=f'count({model.feature_names[1]})')
        canvas.draw_regions(model.classify, options.region_options())

        plt.tight_layout()
        plt.show()

    return model
