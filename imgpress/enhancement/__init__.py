"""
Enhancement 模块 - 自动增强

职责：
- 根据图像统计自适应调整亮度/对比度/饱和度
- 纹理增强与锐化
"""

from .enhancer import Enhancer, enhance

__all__ = ["Enhancer", "enhance"]
