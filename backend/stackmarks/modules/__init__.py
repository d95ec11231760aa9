"""领域模块（纯逻辑，不依赖数据库）"""
from . import ordering
from . import netscape

__all__ = [
    "ordering",
    "netscape",
]
