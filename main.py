"""
ML Zoo - 概率分类器图示
主入口文件

使用Hydra进行配置管理，运行某个分类模型的演示。

使用方法:
    python main.py model=gaussian_nb
    python main.py model=gmm diagram.resolution=60
    python main.py model=bayesian_network visualization.show_plots=false
"""

import hydra
from omegaconf import DictConfig
import numpy as np
import matplotlib.pyplot as plt

from mlzoo.models import MODELS, run_model

# 设置matplotlib和numpy的配置
plt.rcParams['font.sans-serif'] = ['DejaVu Sans']
plt.rcParams['axes.unicode_minus'] = False
np.set_printoptions(precision=4, suppress=True)


@hydra.main(version_base=None, config_path="configs", config_name="config")
def main(cfg: DictConfig) -> None:
    """
    主函数：根据配置运行相应模型的演示

    Args:
        cfg: Hydra配置对象，model组决定运行哪个模型
    """
    if cfg.visualization.style:
        plt.style.use(cfg.visualization.style)

    print("=" * 80)
    print("ML Zoo - 概率分类器的二维图示")
    print("=" * 80)

    model_name = cfg.model.name
    if model_name not in MODELS:
        print(f"模型 {model_name} 尚未实现")
        print(f"可用模型: {', '.join(sorted(MODELS))}")
        return

    print(f"\n正在运行: {MODELS[model_name]['title']}")
    print("-" * 80)

    run_model(model_name, cfg)

    print("\n" + "=" * 80)
    print("运行完成！")
    print("=" * 80)


if __name__ == "__main__":
    main()
