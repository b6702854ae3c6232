"""
StatisticsAnalyzer - 全局亮度/对比度估计

忽略 alpha 通道。对比度使用每个像素自身的亮度，而非全局均值。
"""

import numpy as np

from ..context import RasterBuffer, ImageStatistics


class StatisticsAnalyzer:
    """图像统计分析器"""

    def analyze(self, buffer: RasterBuffer) -> ImageStatistics:
        """
        计算全局亮度与对比度

        brightness_i = (R+G+B)/3
        contrast_i   = |R-brightness_i| + |G-brightness_i| + |B-brightness_i|

        Args:
            buffer: 输入缓冲区

        Returns:
            ImageStatistics（两项均为逐像素值的均值）
        """
        rgb = buffer.rgb().astype(np.float64)

        pixel_brightness = rgb.sum(axis=2) / 3.0
        pixel_contrast = np.abs(rgb - pixel_brightness[:, :, None]).sum(axis=2)

        return ImageStatistics(
            brightness=float(pixel_brightness.mean()),
            contrast=float(pixel_contrast.mean())
        )


def analyze(buffer: RasterBuffer) -> ImageStatistics:
    """便捷函数：计算图像统计"""
    return StatisticsAnalyzer().analyze(buffer)
