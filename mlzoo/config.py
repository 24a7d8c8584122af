"""
图示参数 (Diagram Options)
==========================

每次渲染调用的参数记录：
- resolution: 决策区域的网格分辨率（默认40）
- opacity: 决策区域的透明度（默认0.12）
- levels: 等高线的标准差倍数（默认 1, 2, 3）

可以直接构造，也可以从Hydra配置的 diagram 节点读取。
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from omegaconf import DictConfig, OmegaConf

from .exceptions import InvalidLevel
from .geometry.regions import (
    DEFAULT_OPACITY,
    DEFAULT_RESOLUTION,
    RegionOptions,
    check_resolution
)


@dataclass(frozen=True)
class DiagramOptions:
    """单次渲染的参数"""

    resolution: int = DEFAULT_RESOLUTION
    opacity: float = DEFAULT_OPACITY
    levels: Tuple[float, ...] = field(default=(1.0, 2.0, 3.0))

    def __post_init__(self):
        check_resolution(self.resolution)
        levels = tuple(float(level) for level in self.levels)
        if not levels or any(level <= 0 for level in levels):
            raise InvalidLevel(f"等高线层级必须为正，得到 {self.levels!r}")
        object.__setattr__(self, 'levels', levels)

    def region_options(self) -> RegionOptions:
        return RegionOptions(resolution=self.resolution, opacity=self.opacity)

    @classmethod
    def from_config(cls, cfg: Optional[DictConfig]) -> 'DiagramOptions':
        """
        从配置读取参数，缺省项使用默认值

        Args:
            cfg: 根配置或其 diagram 节点
        """
        if cfg is None:
            return cls()
        node = cfg.get('diagram', cfg)
        values = OmegaConf.to_container(node, resolve=True) if isinstance(node, DictConfig) \
            else dict(node)
        kwargs = {}
        if values.get('resolution') is not None:
            kwargs['resolution'] = values['resolution']
        if values.get('opacity') is not None:
            kwargs['opacity'] = float(values['opacity'])
        if values.get('levels') is not None:
            kwargs['levels'] = tuple(values['levels'])
        return cls(**kwargs)


def create_default_config() -> DictConfig:
    """创建默认配置（与 configs/config.yaml 一致）"""
    return OmegaConf.create({
        'general': {'seed': None},
        'diagram': {
            'resolution': DEFAULT_RESOLUTION,
            'opacity': DEFAULT_OPACITY,
            'levels': [1, 2, 3],
        },
        'visualization': {'show_plots': True, 'style': None},
        'model': {'name': 'gaussian_nb'},
    })
