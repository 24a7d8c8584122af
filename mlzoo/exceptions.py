"""
错误与警告类型 (Error Taxonomy)
================================

几何与分类核心的所有类型化错误。

配置错误（退化的坐标区间、非正的网格分辨率、形状错误的协方差矩阵）
直接抛出，交给调用者处理。

奇异协方差不是错误：行列式 ≤ 0 时被截断为 1e-8，
只在构造参数时发出一次 SingularCovarianceWarning。
截断后的椭圆在视觉上接近退化，但渲染不会中断。
"""


class MLZooError(ValueError):
    """所有核心错误的基类"""


class InvalidDomain(MLZooError):
    """坐标区间退化（d0 == d1）"""


class InvalidResolution(MLZooError):
    """网格分辨率不是正整数"""


class InvalidLevel(MLZooError):
    """椭圆的标准差倍数不是正的有限数"""


class InvalidCovariance(MLZooError):
    """协方差矩阵形状错误或不对称"""


class InvalidMixture(MLZooError):
    """混合权重越界或总和不为1"""


class InvalidProbabilities(MLZooError):
    """特征概率表不合法"""


class SingularCovarianceWarning(UserWarning):
    """协方差行列式 ≤ 0，计算时将被截断为 1e-8"""
