"""
Formats - 格式识别与校验

未声明 MIME 类型时按扩展名推断为 image/<ext>。
"""

from pathlib import Path

from omegaconf import DictConfig

from ..errors import FileTooLarge, UnsupportedFormat

SUPPORTED_FORMATS = (
    "image/jpeg", "image/png", "image/jpg", "image/svg+xml",
    "image/heic", "image/heif", "image/jfif", "image/bmp", "image/webp"
)

MAX_FILE_SIZE = 50 * 1024 * 1024


def guess_mime_type(name: str | Path | None, declared: str | None = None) -> str:
    """
    确定 MIME 类型

    Args:
        name: 文件名（用于扩展名推断）
        declared: 调用方声明的类型，非空时直接使用

    Returns:
        MIME 类型字符串（可能为空）
    """
    if declared:
        return declared.lower()
    if not name:
        return ""
    suffix = Path(str(name)).suffix.lower().lstrip(".")
    return f"image/{suffix}" if suffix else ""


class FormatValidator:
    """格式与大小校验"""

    def __init__(self, cfg: DictConfig | None = None):
        codec_cfg = cfg.get("codec", None) if cfg is not None else None
        if codec_cfg is not None:
            self.supported_formats = tuple(codec_cfg.get("supported_formats", SUPPORTED_FORMATS))
            self.max_file_size = codec_cfg.get("max_file_size", MAX_FILE_SIZE)
        else:
            self.supported_formats = SUPPORTED_FORMATS
            self.max_file_size = MAX_FILE_SIZE

    def is_supported(self, mime_type: str) -> bool:
        return mime_type in self.supported_formats

    def validate(self, name: str | Path | None, size: int, declared: str | None = None) -> str:
        """
        校验格式与大小

        Args:
            name: 文件名
            size: 字节数
            declared: 声明的 MIME 类型

        Returns:
            确定的 MIME 类型
        """
        mime_type = guess_mime_type(name, declared)
        if not mime_type.startswith("image/") or not self.is_supported(mime_type):
            raise UnsupportedFormat(f"不支持的图像格式: {mime_type or '<unknown>'} ({name})")
        if size > self.max_file_size:
            raise FileTooLarge(
                f"文件过大: {size} bytes，上限 {self.max_file_size} bytes ({name})"
            )
        return mime_type
