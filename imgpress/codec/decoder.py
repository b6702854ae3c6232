"""
Decoder - 字节流解码

使用 Pillow 解码，HEIC/HEIF 通过 pillow-heif 注册的 opener 支持。
解码时按 EXIF Orientation 摆正图像，16 位灰度缩放到 8 位。
"""

from dataclasses import dataclass
import io

import numpy as np
import pillow_heif
from PIL import Image, ImageOps, UnidentifiedImageError

from ..context import RasterBuffer
from ..errors import DecodingFailed

# 注册 HEIF opener，Image.open 即可读取 HEIC/HEIF
pillow_heif.register_heif_opener()

# 整数模式（16 位 PNG 等），convert 会直接截断到 255
WIDE_INT_MODES = ("I", "I;16", "I;16L", "I;16B", "I;16N")


def to_8bit(img: Image.Image) -> Image.Image:
    """将 16 位灰度图缩放为 8 位 L 图，其他模式原样返回"""
    if img.mode not in WIDE_INT_MODES:
        return img
    wide = np.array(img).astype(np.uint32)
    return Image.fromarray(np.clip(wide >> 8, 0, 255).astype(np.uint8))


@dataclass
class DecodedImage:
    """解码结果"""

    buffer: RasterBuffer
    original_size: int   # 原始字节数
    mime_type: str = ""


class Decoder:
    """Pillow 解码器"""

    def decode(self, data: bytes, mime_type: str = "") -> DecodedImage:
        """
        解码为 RGBA 缓冲区

        Args:
            data: 编码后的字节
            mime_type: 已确定的 MIME 类型

        Returns:
            DecodedImage
        """
        if mime_type == "image/svg+xml":
            raise DecodingFailed("SVG 需要矢量光栅化器，当前解码器不支持")

        try:
            with Image.open(io.BytesIO(data)) as img:
                upright = ImageOps.exif_transpose(img)
                rgba = to_8bit(upright).convert("RGBA")
                pixels = np.array(rgba, dtype=np.uint8)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise DecodingFailed(f"无法解码图像 ({mime_type or 'unknown'}): {e}") from e

        return DecodedImage(
            buffer=RasterBuffer(pixels),
            original_size=len(data),
            mime_type=mime_type
        )
