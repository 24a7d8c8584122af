"""
二维分类图的渲染 (Diagram Renderer)
===================================

几何核心的matplotlib消费者：只负责把已经算好的几何画出来。

画布使用像素坐标（与SVG一致：原点在左上角，y轴向下），
定义域坐标一律通过 PlotMapper 换算，坐标轴刻度再标回定义域的值。

可以绘制：
- 散点（按类别着色）
- 决策区域（栅格化结果）
- 高斯等高线椭圆（1/2/3倍标准差）
- 混合分量（按权重填充的2倍标准差椭圆）
- 有向无环图（贝叶斯网络结构）
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np
from matplotlib.collections import PatchCollection
from matplotlib.colors import to_rgba
from matplotlib.patches import Ellipse, Rectangle

from .geometry import (
    PlotMapper,
    RegionOptions,
    cell_pixel_rect,
    compute_regions,
    project
)
from .geometry.mapper import Margin
from .models.base import GaussianParams, MixtureComponent, Point

CLASS_COLORS = ('#58a6ff', '#f85149', '#3fb950', '#d29922')
AXIS_COLOR = '#6e7681'
ACTIVE_COLOR = '#d2a8ff'


class DiagramCanvas:
    """
    一张二维分类图

    每类图元都记录下来，可以单独重画（先移除旧的再画新的）。
    """

    def __init__(self, ax=None, x_domain: Tuple[float, float] = (0.0, 10.0),
                 y_domain: Tuple[float, float] = (0.0, 10.0),
                 width: float = 800, height: float = 400,
                 margin: Margin = Margin(),
                 x_label: Optional[str] = 'Feature x₁',
                 y_label: Optional[str] = 'Feature x₂',
                 title: Optional[str] = None):
        """
        初始化画布

        Args:
            ax: 目标坐标轴，None时新建一个figure
            x_domain, y_domain: 定义域
            width, height: 画布像素尺寸
            margin: 绘图区边距
            x_label, y_label, title: 文字
        """
        if ax is None:
            _, ax = plt.subplots(figsize=(width / 100, height / 100))
        self.ax = ax
        self.width = width
        self.height = height
        self.mapper = PlotMapper.for_canvas(x_domain, y_domain, width, height, margin)
        self._layers: Dict[str, List] = {}

        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_aspect('equal')

        # 刻度放在像素位置上，标签显示定义域的值
        x_ticks = np.linspace(x_domain[0], x_domain[1], 9)
        y_ticks = np.linspace(y_domain[0], y_domain[1], 7)
        ax.set_xticks(self.mapper.x.to_pixel(x_ticks))
        ax.set_xticklabels([f'{t:g}' for t in x_ticks])
        ax.set_yticks(self.mapper.y.to_pixel(y_ticks))
        ax.set_yticklabels([f'{t:g}' for t in y_ticks])
        ax.tick_params(colors=AXIS_COLOR, labelsize=9)
        ax.grid(True, alpha=0.08)

        if x_label:
            ax.set_xlabel(x_label, color=AXIS_COLOR)
        if y_label:
            ax.set_ylabel(y_label, color=AXIS_COLOR)
        if title:
            ax.set_title(title)

    # ------------------------------------------------------------------
    # 图层管理
    # ------------------------------------------------------------------

    def _reset_layer(self, name: str) -> List:
        for artist in self._layers.pop(name, []):
            artist.remove()
        layer = []
        self._layers[name] = layer
        return layer

    def layer(self, name: str) -> List:
        """某一图层当前的所有图元"""
        return list(self._layers.get(name, []))

    def clear(self) -> None:
        """移除所有图层"""
        for name in list(self._layers):
            self._reset_layer(name)
        self._layers.clear()

    # ------------------------------------------------------------------
    # 图元
    # ------------------------------------------------------------------

    def draw_points(self, points: Sequence[Point], radius: float = 5) -> None:
        """按类别着色的散点"""
        layer = self._reset_layer('points')
        if not points:
            return
        xs, ys = self.mapper.to_pixel(np.array([p.x for p in points]),
                                      np.array([p.y for p in points]))
        colors = [CLASS_COLORS[p.class_label % len(CLASS_COLORS)] for p in points]
        layer.append(self.ax.scatter(xs, ys, s=(2 * radius) ** 2, c=colors,
                                     alpha=0.8, edgecolors='white',
                                     linewidths=1, zorder=4))

    def draw_regions(self, classify_fn, options: RegionOptions = RegionOptions(),
                     domain: Optional[Tuple[Tuple[float, float], Tuple[float, float]]] = None) -> None:
        """
        决策区域：每个格子一个矩形，颜色为分类结果

        Args:
            classify_fn: 分类函数 (x, y) -> 类别
            options: 分辨率和透明度
            domain: 默认使用画布的定义域
        """
        layer = self._reset_layer('regions')
        domain = domain or (self.mapper.x.domain, self.mapper.y.domain)
        cells = compute_regions(classify_fn, domain, options.resolution)

        rects = []
        colors = []
        for cell in cells:
            left, top, w, h = cell_pixel_rect(cell, self.mapper, options.resolution)
            rects.append(Rectangle((left, top), w, h))
            colors.append(CLASS_COLORS[cell.class_label % len(CLASS_COLORS)])

        collection = PatchCollection(rects, facecolors=colors, edgecolors='none',
                                     alpha=options.opacity, zorder=1)
        self.ax.add_collection(collection)
        layer.append(collection)

    def _add_ellipse(self, layer: List, params: GaussianParams, level: float,
                     **style) -> Ellipse:
        geometry = project(params.covariance, level).to_pixels(params.mean, self.mapper)
        cx, cy = self.mapper.to_pixel(*params.mean)
        patch = Ellipse((cx, cy), 2 * geometry.semi_axis_x, 2 * geometry.semi_axis_y,
                        angle=geometry.rotation_degrees, **style)
        self.ax.add_patch(patch)
        layer.append(patch)
        return patch

    def draw_gaussian_contours(self, gaussians: Sequence[GaussianParams],
                               levels: Iterable[float] = (1, 2, 3),
                               labels: Optional[Sequence[str]] = None,
                               colors: Optional[Sequence[str]] = None) -> None:
        """
        高斯等高线：每个分布在每个level上画一个椭圆

        1倍标准差为实线，更外层为虚线。
        """
        layer = self._reset_layer('contours')
        levels = list(levels)
        for g_idx, gauss in enumerate(gaussians):
            color = colors[g_idx] if colors else CLASS_COLORS[g_idx % len(CLASS_COLORS)]
            for level in levels:
                self._add_ellipse(layer, gauss, level, fill=False, edgecolor=color,
                                  linewidth=2 if level == 1 else 1,
                                  linestyle='-' if level <= 1 else (0, (4, 3)),
                                  alpha=0.6, zorder=3)
            if labels:
                cx, cy = self.mapper.to_pixel(*gauss.mean)
                layer.append(self.ax.text(cx, cy - 6, labels[g_idx], ha='center',
                                          color=AXIS_COLOR, fontsize=8, zorder=5))

    def draw_mixture_components(self, components: Sequence[MixtureComponent]) -> None:
        """
        混合分量：2倍标准差的填充椭圆，填充透明度为 权重×0.3，
        中心画十字，下方标注权重
        """
        layer = self._reset_layer('mixture')
        cross = 6
        for comp in components:
            color = CLASS_COLORS[comp.class_label % len(CLASS_COLORS)]
            self._add_ellipse(layer, comp, 2, facecolor=to_rgba(color, comp.weight * 0.3),
                              edgecolor=color, linewidth=1.5, zorder=3)

            cx, cy = self.mapper.to_pixel(*comp.mean)
            layer.extend(self.ax.plot([cx - cross, cx + cross], [cy, cy],
                                      color=color, linewidth=2, zorder=4))
            layer.extend(self.ax.plot([cx, cx], [cy - cross, cy + cross],
                                      color=color, linewidth=2, zorder=4))
            layer.append(self.ax.text(cx, cy + 18, f'w={comp.weight:.2f}',
                                      ha='center', color=AXIS_COLOR,
                                      fontsize=8, zorder=5))

    def draw_dag(self, graph: nx.DiGraph, positions: Dict[str, Tuple[float, float]],
                 active_nodes: Iterable[str] = (),
                 active_edges: Iterable[Tuple[str, str]] = (),
                 node_size: float = 1500) -> None:
        """
        有向无环图

        Args:
            graph: networkx有向图
            positions: 节点在 [0,1]² 中的坐标，映射到绘图区
            active_nodes, active_edges: 高亮的节点和边
        """
        layer = self._reset_layer('dag')
        if not nx.is_directed_acyclic_graph(graph):
            raise ValueError("图包含环，不是DAG")

        left = min(self.mapper.x.pixel_range)
        top = min(self.mapper.y.pixel_range)
        pos = {node: (left + x * self.mapper.plot_width, top + y * self.mapper.plot_height)
               for node, (x, y) in positions.items()}
        active_nodes = set(active_nodes)
        active_edges = set(active_edges)

        node_colors = [ACTIVE_COLOR if n in active_nodes else '#21262d' for n in graph.nodes()]
        edge_colors = [ACTIVE_COLOR if e in active_edges else AXIS_COLOR for e in graph.edges()]
        edge_widths = [2.5 if e in active_edges else 1.5 for e in graph.edges()]

        layer.append(nx.draw_networkx_nodes(graph, pos, ax=self.ax, node_size=node_size,
                                            node_color=node_colors,
                                            edgecolors=AXIS_COLOR, linewidths=1.5))
        edges = nx.draw_networkx_edges(graph, pos, ax=self.ax, edge_color=edge_colors,
                                       width=edge_widths, arrows=True, arrowsize=18,
                                       arrowstyle='-|>', node_size=node_size)
        layer.extend(edges if isinstance(edges, list) else [edges])
        labels = nx.draw_networkx_labels(graph, pos, ax=self.ax, font_size=11,
                                         font_color='#e6edf3')
        layer.extend(labels.values())

