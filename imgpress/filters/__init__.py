"""
Filters 模块 - 空间滤波

职责：
- 零填充、不归一化的方形核卷积
- 内置纹理增强核与锐化核
"""

from .convolution import ConvolutionFilter, convolve, TEXTURE_KERNEL, SHARPEN_KERNEL

__all__ = ["ConvolutionFilter", "convolve", "TEXTURE_KERNEL", "SHARPEN_KERNEL"]
