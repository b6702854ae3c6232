"""
Codec 模块 - 编解码边界

职责：
- 格式识别、大小校验
- 字节流 <-> RasterBuffer
"""

from .formats import FormatValidator, guess_mime_type, SUPPORTED_FORMATS, MAX_FILE_SIZE
from .decoder import Decoder, DecodedImage
from .encoder import Encoder, to_pillow_quality

__all__ = [
    "FormatValidator",
    "guess_mime_type",
    "SUPPORTED_FORMATS",
    "MAX_FILE_SIZE",
    "Decoder",
    "DecodedImage",
    "Encoder",
    "to_pillow_quality"
]
