"""
imgpress - 批量图像压缩与自动增强

流程：解码 -> 最长边限制 -> （可选）自动增强 -> 编码 -> 元信息
"""

from .context import (
    RasterBuffer,
    Kernel,
    ImageStatistics,
    ProcessingParameters,
    ProcessingResult
)
from .errors import (
    ProcessingError,
    InvalidDimensions,
    InvalidKernel,
    EncodingFailed,
    DecodingFailed,
    UnsupportedFormat,
    FileTooLarge,
    BatchCancelled
)
from .pipeline import ImagePipeline, load_pipeline
from .batch import BatchItem, BatchItemResult, BatchProcessor

__all__ = [
    "RasterBuffer",
    "Kernel",
    "ImageStatistics",
    "ProcessingParameters",
    "ProcessingResult",
    "ProcessingError",
    "InvalidDimensions",
    "InvalidKernel",
    "EncodingFailed",
    "DecodingFailed",
    "UnsupportedFormat",
    "FileTooLarge",
    "BatchCancelled",
    "ImagePipeline",
    "load_pipeline",
    "BatchItem",
    "BatchItemResult",
    "BatchProcessor"
]
