#!/usr/bin/env python3
"""
ML Zoo 完整演示
===============

依次运行所有概率分类器的演示。

每个模型都包含：
1. 固定参数的分类器
2. 合成数据上的准确率
3. 决策区域、等高线椭圆等图示

使用方法：
python run_all_models.py                        # 运行所有模型
python run_all_models.py --model gmm            # 运行特定模型
python run_all_models.py --list                 # 列出所有模型
python run_all_models.py --no-plots --resolution 60

依赖：
- numpy, scipy, matplotlib, networkx
- scikit-learn
- hydra-core, omegaconf
"""

import sys
import argparse
from pathlib import Path

# 添加项目路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from omegaconf import DictConfig
import matplotlib.pyplot as plt

from mlzoo.config import create_default_config
from mlzoo.models import MODELS, run_model

plt.rcParams['font.sans-serif'] = ['DejaVu Sans']
plt.rcParams['axes.unicode_minus'] = False


def print_header():
    """打印项目头部信息"""
    print("\n" + "=" * 80)
    print(" " * 20 + "ML Zoo - Probabilistic Classifier Diagrams")
    print("=" * 80 + "\n")


def list_models():
    """列出所有可用模型"""
    print("\n可用模型：")
    print("-" * 60)
    for name, info in MODELS.items():
        print(f"\n{name}：{info['title']}")
        print("  主要内容：")
        for topic in info['topics']:
            print(f"    • {topic}")
    print("\n" + "-" * 60)
    print(f"共{len(MODELS)}个模型")


def run_one(name: str, cfg: DictConfig) -> bool:
    """运行指定模型，返回是否成功"""
    if name not in MODELS:
        print(f"错误：模型{name}未实现")
        print(f"可用模型：{sorted(MODELS)}")
        return False

    print("\n" + "=" * 80)
    print(f"{MODELS[name]['title']}")
    print("=" * 80)
    print("主要内容：" + ", ".join(MODELS[name]['topics']))
    print("=" * 80)

    run_model(name, cfg)
    print(f"\n{name} 运行完成！")
    return True


def run_all_models(cfg: DictConfig) -> None:
    """运行所有模型"""
    print_header()

    for name in MODELS:
        run_one(name, cfg)

    print("\n" + "=" * 80)
    print(f"全部{len(MODELS)}个模型运行完成")
    print("=" * 80)


def main(argv=None):
    """主函数"""
    parser = argparse.ArgumentParser(
        description='ML Zoo概率分类器演示',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--model', '-m', type=str, help='运行指定模型')
    parser.add_argument('--list', '-l', action='store_true', help='列出所有可用模型')
    parser.add_argument('--no-plots', action='store_true', help='不显示图形')
    parser.add_argument('--resolution', type=int, help='决策区域网格分辨率')
    parser.add_argument('--seed', type=int, help='合成数据的随机种子')

    args = parser.parse_args(argv)

    if args.list:
        print_header()
        list_models()
        return 0

    cfg = create_default_config()
    if args.no_plots:
        cfg.visualization.show_plots = False
    if args.resolution is not None:
        cfg.diagram.resolution = args.resolution
    if args.seed is not None:
        cfg.general.seed = args.seed

    if args.model:
        print_header()
        return 0 if run_one(args.model, cfg) else 1

    run_all_models(cfg)
    return 0


if __name__ == '__main__':
    sys.exit(main())
