"""
ColorAdjuster - 亮度/对比度/饱和度调整

三个可组合的原地变换，只处理 RGB，alpha 保持不变。
每步先在浮点上计算并截断到 [0, 255]，再写回 uint8（四舍六入五成双）。

注意：
- 对比度曲线以 100 为支点（不是 128）
- 饱和度的灰度权重为 0.3/0.1/0.3（和为 0.7，不是标准亮度公式）
两者都会改变可见输出，保持原样。
"""

import numpy as np

from ..context import RasterBuffer

CONTRAST_PIVOT = 100.0
SATURATION_WEIGHTS = (0.3, 0.1, 0.3)


def clamp(values: np.ndarray) -> np.ndarray:
    """截断到 [0, 255]"""
    return np.minimum(255.0, np.maximum(0.0, values))


def _store(buffer: RasterBuffer, rgb: np.ndarray) -> None:
    """截断并写回 RGB 通道"""
    buffer.pixels[:, :, :3] = np.rint(clamp(rgb)).astype(np.uint8)


def contrast_factor(contrast: float) -> float:
    """对比度统计量 -> 缩放系数"""
    return (170.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def neutral_contrast() -> float:
    """使 contrast_factor == 1 的统计量"""
    # 170 * (c + 255) == 255 * (259 - c)
    return (255.0 * 259.0 - 170.0 * 255.0) / (170.0 + 255.0)


class ColorAdjuster:
    """色彩调整器"""

    @staticmethod
    def adjust_brightness(buffer: RasterBuffer, delta: float) -> RasterBuffer:
        """
        亮度平移：channel' = clamp(channel + delta)

        Args:
            buffer: 被原地修改的缓冲区
            delta: 平移量

        Returns:
            同一个缓冲区
        """
        if delta == 0:
            return buffer
        rgb = buffer.rgb().astype(np.float64)
        _store(buffer, rgb + delta)
        return buffer

    @staticmethod
    def adjust_contrast(buffer: RasterBuffer, contrast: float) -> RasterBuffer:
        """
        以 100 为支点的对比度曲线

        factor    = 170 * (contrast + 255) / (255 * (259 - contrast))
        channel'  = clamp(factor * (channel - 100) + 100)

        Args:
            buffer: 被原地修改的缓冲区
            contrast: 对比度统计量（通常来自 StatisticsAnalyzer）

        Returns:
            同一个缓冲区
        """
        factor = contrast_factor(contrast)
        rgb = buffer.rgb().astype(np.float64)
        _store(buffer, factor * (rgb - CONTRAST_PIVOT) + CONTRAST_PIVOT)
        return buffer

    @staticmethod
    def adjust_saturation(buffer: RasterBuffer, saturation: float) -> RasterBuffer:
        """
        饱和度：channel' = clamp(gray + saturation * (channel - gray))

        gray = 0.3*R + 0.1*G + 0.3*B

        Args:
            buffer: 被原地修改的缓冲区
            saturation: 饱和度系数

        Returns:
            同一个缓冲区
        """
        rgb = buffer.rgb().astype(np.float64)
        wr, wg, wb = SATURATION_WEIGHTS
        gray = wr * rgb[:, :, 0] + wg * rgb[:, :, 1] + wb * rgb[:, :, 2]
        gray = gray[:, :, None]
        _store(buffer, gray + saturation * (rgb - gray))
        return buffer
