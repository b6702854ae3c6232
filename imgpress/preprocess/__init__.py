"""
Preprocess 模块 - 图像预处理

职责：
- 最长边限制与重采样
- 手动裁剪区域换算
"""

from .resizer import Resizer, compute_target_size, resize
from .crop import crop_region

__all__ = ["Resizer", "compute_target_size", "resize", "crop_region"]
