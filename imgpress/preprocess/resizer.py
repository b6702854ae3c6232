"""
Resizer - 尺寸限制与重采样

核心功能：
- compute_target_size: 最长边限制为 max_dimension，保持长宽比
- resize: 超限时使用 INTER_AREA 重采样，否则原样返回
"""

import cv2
import numpy as np
from omegaconf import DictConfig

from ..context import RasterBuffer
from ..errors import InvalidDimensions


def compute_target_size(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """
    计算目标尺寸

    最长边直接取 max_dimension，短边按比例缩放后向下取整（至少 1 像素）。
    使用整数运算，避免 300 * (600 / 900) = 199.99... 这类浮点误差。

    Args:
        width: 原始宽度
        height: 原始高度
        max_dimension: 最长边上限

    Returns:
        (new_w, new_h)
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"图像宽高必须为正数，当前: {width}x{height}")
    if max_dimension < 1:
        raise ValueError(f"max_dimension 必须是正整数，当前: {max_dimension}")

    if width <= max_dimension and height <= max_dimension:
        # 不需要缩放
        return width, height

    if width > height:
        new_h = max(1, height * max_dimension // width)
        return max_dimension, new_h

    new_w = max(1, width * max_dimension // height)
    return new_w, max_dimension


class Resizer:
    """尺寸限制阶段"""

    def __init__(self, cfg: DictConfig | None = None):
        """
        初始化

        Args:
            cfg: 配置对象，可选 global.max_dimension 作为默认上限
        """
        global_cfg = cfg.get("global", None) if cfg is not None else None
        self.default_max_dimension = (
            global_cfg.get("max_dimension", 1920) if global_cfg is not None else 1920
        )

    def resize(self, buffer: RasterBuffer, max_dimension: int | None = None) -> RasterBuffer:
        """
        按最长边缩放

        Args:
            buffer: 输入缓冲区
            max_dimension: 最长边上限，默认使用配置值

        Returns:
            新的缓冲区；无需缩放时返回输入本身
        """
        if max_dimension is None:
            max_dimension = self.default_max_dimension

        w, h = buffer.width, buffer.height
        new_w, new_h = compute_target_size(w, h, max_dimension)
        if (new_w, new_h) == (w, h):
            return buffer

        resized = cv2.resize(
            buffer.pixels,
            (new_w, new_h),  # cv2.resize 使用 (width, height)
            interpolation=cv2.INTER_AREA  # 缩小时使用 INTER_AREA 效果更好
        )
        return RasterBuffer(np.ascontiguousarray(resized, dtype=np.uint8))


def resize(buffer: RasterBuffer, max_dimension: int) -> RasterBuffer:
    """便捷函数：按最长边缩放"""
    return Resizer().resize(buffer, max_dimension)
