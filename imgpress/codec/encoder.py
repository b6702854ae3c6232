"""
Encoder - 编码输出

quality (0, 1] 映射到 Pillow 的 1~100。JPEG 没有 alpha，编码前丢弃。
"""

import io

from PIL import Image
from omegaconf import DictConfig

from ..context import RasterBuffer
from ..errors import EncodingFailed

OUTPUT_FORMATS = ("JPEG", "WEBP", "PNG")


def to_pillow_quality(quality: float) -> int:
    """(0, 1] -> [1, 100]"""
    return max(1, min(100, int(round(quality * 100))))


class Encoder:
    """Pillow 编码器"""

    def __init__(self, cfg: DictConfig | None = None):
        codec_cfg = cfg.get("codec", None) if cfg is not None else None
        output_format = codec_cfg.get("output_format", "JPEG") if codec_cfg is not None else "JPEG"
        self.output_format = str(output_format).upper()
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"不支持的输出格式: {output_format}，可选: {OUTPUT_FORMATS}")

    @property
    def extension(self) -> str:
        return {"JPEG": ".jpg", "WEBP": ".webp", "PNG": ".png"}[self.output_format]

    def encode(self, buffer: RasterBuffer, quality: float) -> bytes:
        """
        编码缓冲区

        Args:
            buffer: RGBA 缓冲区
            quality: 编码质量 (0, 1]

        Returns:
            编码后的字节
        """
        if not 0.0 < quality <= 1.0:
            raise EncodingFailed(f"quality 必须在 (0, 1] 范围内，当前: {quality}")

        try:
            if self.output_format == "JPEG":
                pil_image = Image.fromarray(buffer.rgb().copy())
            else:
                pil_image = Image.fromarray(buffer.pixels)

            save_kwargs = {"format": self.output_format}
            if self.output_format in ("JPEG", "WEBP"):
                save_kwargs["quality"] = to_pillow_quality(quality)
            if self.output_format == "JPEG":
                save_kwargs["optimize"] = True

            out = io.BytesIO()
            pil_image.save(out, **save_kwargs)
        except (OSError, ValueError) as e:
            raise EncodingFailed(f"编码失败 ({self.output_format}): {e}") from e

        return out.getvalue()
