"""
Errors - 处理错误类型

单张图像的失败只影响该图像本身，批处理中不会波及其他图像。
"""


class ProcessingError(Exception):
    """图像处理失败的基类"""


class InvalidDimensions(ProcessingError, ValueError):
    """图像宽或高为 0（或裁剪区域为空）"""


class InvalidKernel(ProcessingError, ValueError):
    """卷积核权重数量不是完全平方数，或边长不是奇数"""


class EncodingFailed(ProcessingError, RuntimeError):
    """编码器无法为给定图像/质量生成输出"""


class DecodingFailed(ProcessingError, RuntimeError):
    """解码器无法读取输入字节"""


class UnsupportedFormat(ProcessingError, ValueError):
    """不支持的图像格式"""


class FileTooLarge(ProcessingError, ValueError):
    """输入文件超过大小上限"""


class BatchCancelled(ProcessingError):
    """批处理被取消，任务未开始执行"""
