"""
ML Zoo - 概率分类器的二维图示
=============================

把概率分类器画成交互式二维图：散点、决策区域、
高斯置信椭圆、混合分量和依赖图。

核心是几何与分类曲面引擎：
- 坐标映射（定义域 ↔ 像素）
- 协方差椭圆（2×2特征分解）
- 决策区域栅格化（在网格上查询任意分类器）
- 五种分类模型的对数似然/后验

绘图（mlzoo.diagram）只是核心输出的消费者。

使用方法:
    python main.py model=gaussian_nb
    python run_all_models.py --list
"""

from .exceptions import (
    MLZooError,
    InvalidDomain,
    InvalidResolution,
    InvalidLevel,
    InvalidCovariance,
    InvalidMixture,
    InvalidProbabilities,
    SingularCovarianceWarning
)

from .geometry import (
    CoordinateMapper,
    PlotMapper,
    EllipseGeometry,
    RegionCell,
    to_pixel,
    project,
    compute_regions
)

from .config import DiagramOptions

from .models import (
    ClassifierModel,
    GaussianParams,
    MixtureComponent,
    Point,
    GaussianNB,
    BernoulliNB,
    MultinomialNB,
    BayesianNetworkNB,
    NaiveMarginalNB,
    GMM,
    MODELS,
    run_model
)

__version__ = '0.1.0'
