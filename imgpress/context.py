"""
Context - 核心数据结构

贯穿整个 Pipeline 的像素缓冲区、卷积核与参数/结果对象。
"""

from dataclasses import dataclass, field
from typing import Any, Sequence
import math

import numpy as np
from omegaconf import DictConfig

from .errors import InvalidDimensions, InvalidKernel


@dataclass(eq=False)
class RasterBuffer:
    """
    RGBA 像素缓冲区

    pixels 为 uint8 (H,W,4)，按行主序存储，展平后即 width*height*4 个采样。
    缓冲区不共享：需要保留旧版本的调用方应先 copy() 再修改。
    """

    pixels: np.ndarray  # uint8 (H,W,4) RGBA

    def __post_init__(self):
        if self.pixels is None:
            raise InvalidDimensions("像素数据不能为空")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise InvalidDimensions(f"像素数据必须是 (H,W,4) 格式，当前: {self.pixels.shape}")
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise InvalidDimensions(
                f"图像宽高必须为正数，当前: {self.pixels.shape[1]}x{self.pixels.shape[0]}"
            )
        if self.pixels.dtype != np.uint8:
            self.pixels = np.clip(self.pixels, 0, 255).astype(np.uint8)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> int:
        """采样总数 width * height * 4"""
        return int(self.pixels.size)

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes | bytearray | Sequence[int]) -> "RasterBuffer":
        """
        从行主序 RGBA 字节序列创建缓冲区

        Args:
            width: 宽度
            height: 高度
            data: 长度为 width*height*4 的采样序列

        Returns:
            RasterBuffer
        """
        if width <= 0 or height <= 0:
            raise InvalidDimensions(f"图像宽高必须为正数，当前: {width}x{height}")

        if isinstance(data, (bytes, bytearray)):
            flat = np.frombuffer(data, dtype=np.uint8)
        else:
            flat = np.asarray(data, dtype=np.uint8)
        expected = width * height * 4
        if flat.size != expected:
            raise InvalidDimensions(f"采样数量应为 {expected}，当前: {flat.size}")

        return cls(flat.reshape(height, width, 4).copy())

    @classmethod
    def from_rgb(cls, image_u8: np.ndarray) -> "RasterBuffer":
        """从 uint8 (H,W,3) RGB 图像创建缓冲区（alpha 置 255）"""
        if image_u8.ndim != 3 or image_u8.shape[2] != 3:
            raise InvalidDimensions(f"输入图像必须是 (H,W,3) 格式，当前: {image_u8.shape}")
        h, w = image_u8.shape[:2]
        rgba = np.full((h, w, 4), 255, dtype=np.uint8)
        rgba[:, :, :3] = image_u8
        return cls(rgba)

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "RasterBuffer":
        """创建纯色缓冲区"""
        if width <= 0 or height <= 0:
            raise InvalidDimensions(f"图像宽高必须为正数，当前: {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:, :] = rgba
        return cls(pixels)

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    def rgb(self) -> np.ndarray:
        """RGB 通道视图 (H,W,3)"""
        return self.pixels[:, :, :3]

    def copy(self) -> "RasterBuffer":
        return RasterBuffer(self.pixels.copy())


@dataclass(frozen=True)
class Kernel:
    """
    奇数边长的方形卷积核（不可变）

    weights 按行主序排列，例如 3x3 为 9 个权重。
    """

    weights: tuple[float, ...]
    side: int = field(init=False)

    def __post_init__(self):
        weights = tuple(float(w) for w in self.weights)
        count = len(weights)
        side = math.isqrt(count)
        if count == 0 or side * side != count:
            raise InvalidKernel(f"卷积核权重数量必须是完全平方数，当前: {count}")
        if side % 2 == 0:
            raise InvalidKernel(f"卷积核边长必须是奇数，当前: {side}")

        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "side", side)

    @classmethod
    def of(cls, weights: Sequence[float]) -> "Kernel":
        return cls(tuple(weights))

    @property
    def half(self) -> int:
        """半宽 h = (side - 1) / 2"""
        return (self.side - 1) // 2

    @property
    def weight_sum(self) -> float:
        return sum(self.weights)

    @property
    def matrix(self) -> np.ndarray:
        """只读的 (side, side) float64 矩阵"""
        m = np.array(self.weights, dtype=np.float64).reshape(self.side, self.side)
        m.setflags(write=False)
        return m


@dataclass
class ImageStatistics:
    """全局亮度/对比度统计（每次调用重新计算，不缓存）"""

    brightness: float
    contrast: float


@dataclass
class ProcessingParameters:
    """单张图像的处理参数"""

    quality: float = 0.8        # 编码质量 (0, 1]
    max_dimension: int = 1920   # 最长边上限（像素）
    enhance: bool = False       # 是否执行增强流水线

    def __post_init__(self):
        if not 0.0 < self.quality <= 1.0:
            raise ValueError(f"quality 必须在 (0, 1] 范围内，当前: {self.quality}")
        if int(self.max_dimension) != self.max_dimension or self.max_dimension < 1:
            raise ValueError(f"max_dimension 必须是正整数，当前: {self.max_dimension}")
        self.max_dimension = int(self.max_dimension)
        self.enhance = bool(self.enhance)

    @classmethod
    def from_config(cls, cfg: DictConfig, **overrides: Any) -> "ProcessingParameters":
        """
        从配置创建参数，overrides 中非 None 的值优先

        Args:
            cfg: 配置对象，需包含 global 段
            overrides: quality / max_dimension / enhance 覆盖值
        """
        global_cfg = cfg.get("global", {})
        values = {
            "quality": global_cfg.get("quality", 0.8),
            "max_dimension": global_cfg.get("max_dimension", 1920),
            "enhance": global_cfg.get("enhance", False),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class ProcessingResult:
    """单张图像的最终产物，所有权交给调用方"""

    buffer: RasterBuffer
    original_size: int         # 原始字节数
    processed_size: int        # 编码后字节数
    width: int
    height: int
    data: bytes = b""          # 编码后的字节流
    name: str | None = None    # 源文件名（可选）

    def metadata(self) -> dict[str, Any]:
        """用于展示的元信息"""
        return {
            "name": self.name,
            "original_size": self.original_size,
            "processed_size": self.processed_size,
            "width": self.width,
            "height": self.height,
        }
