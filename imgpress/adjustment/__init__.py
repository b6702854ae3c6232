"""
Adjustment 模块 - 色彩调整

职责：
- 亮度、对比度、饱和度的原地调整
"""

from .color import ColorAdjuster, clamp, contrast_factor, neutral_contrast

__all__ = ["ColorAdjuster", "clamp", "contrast_factor", "neutral_contrast"]
