"""
概率分类器 (Probabilistic Classifiers)
======================================

五个相互独立的分类模型，参数都是固定常数：

1. 高斯朴素贝叶斯
   - 每类一个二维高斯
   - 二次决策边界

2. 伯努利朴素贝叶斯
   - 二值特征（词是否出现）
   - 显式惩罚未出现的词

3. 多项式朴素贝叶斯
   - 词频特征
   - 每类的词分布归一化

4. 贝叶斯网络
   - X1 → X2 的线性高斯依赖
   - 与解析边缘化后的朴素版本对比

5. 高斯混合模型
   - 每类由若干高斯分量组成
   - 按类条件混合似然分类

核心思想：
所有模型都通过最大对数后验分类，只暴露 classify(x, y)，
所以栅格化器和椭圆投影不需要知道具体是哪种模型。

平局规则按模型族保留：
- 高斯、贝叶斯网络、GMM：a_0 ≥ a_1 判为类0
- 伯努利、多项式：a_0 > a_1 判为类0
"""

from typing import Callable, Dict

from omegaconf import DictConfig

from ..config import DiagramOptions
from .base import (
    ClassifierModel,
    GaussianParams,
    MixtureComponent,
    Point,
    log_gaussian_pdf,
    log_normal_pdf,
    pairwise_log_add,
    make_rng,
    points_to_arrays
)

from .gaussian_nb import (
    GaussianNB,
    demonstrate_gaussian_nb
)

from .bernoulli_nb import (
    BernoulliNB,
    demonstrate_bernoulli_nb
)

from .multinomial_nb import (
    MultinomialNB,
    normalize_rows,
    demonstrate_multinomial_nb
)

from .bayesian_network import (
    BayesianNetworkNB,
    NaiveMarginalNB,
    find_disagreements,
    demonstrate_bayesian_network
)

from .gmm import (
    GMM,
    demonstrate_gmm
)


# 模型信息
MODELS: Dict[str, Dict] = {
    'gaussian_nb': {
        'title': '高斯朴素贝叶斯 (Gaussian Naive Bayes)',
        'topics': ['二维高斯似然', '二次决策边界', '协方差椭圆'],
        'model': GaussianNB,
        'runner': demonstrate_gaussian_nb
    },
    'bernoulli_nb': {
        'title': '伯努利朴素贝叶斯 (Bernoulli Naive Bayes)',
        'topics': ['二值特征', '特征重要性', '垃圾邮件分类'],
        'model': BernoulliNB,
        'runner': demonstrate_bernoulli_nb
    },
    'multinomial_nb': {
        'title': '多项式朴素贝叶斯 (Multinomial Naive Bayes)',
        'topics': ['词频特征', '概率归一化', '垃圾邮件分类'],
        'model': MultinomialNB,
        'runner': demonstrate_multinomial_nb
    },
    'bayesian_network': {
        'title': '贝叶斯网络 (Bayesian Network)',
        'topics': ['DAG结构', '线性高斯依赖', '与朴素贝叶斯对比'],
        'model': BayesianNetworkNB,
        'runner': demonstrate_bayesian_network
    },
    'gmm': {
        'title': '高斯混合模型 (Gaussian Mixture Model)',
        'topics': ['混合分量', 'log-sum-exp', '责任度'],
        'model': GMM,
        'runner': demonstrate_gmm
    },
}


def run_model(name: str, cfg: DictConfig) -> ClassifierModel:
    """
    运行某个模型的演示

    Args:
        name: MODELS中的键
        cfg: Hydra配置对象

    Returns:
        演示中使用的模型
    """
    if name not in MODELS:
        raise KeyError(f"未知模型: {name}，可用模型: {sorted(MODELS)}")

    runner: Callable = MODELS[name]['runner']
    kwargs = {
        'options': DiagramOptions.from_config(cfg),
        'show_plot': cfg.visualization.show_plots,
    }
    seed = cfg.get('general', {}).get('seed')
    if seed is not None:
        kwargs['seed'] = seed
    return runner(**kwargs)
