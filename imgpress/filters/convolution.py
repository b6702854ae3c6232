"""
ConvolutionFilter - 空间卷积

按核逐个抽头累加（相关运算，不翻转卷积核）：
    out[y,x,c] = clamp(sum src[y+cy-h, x+cx-h, c] * k[cy,cx])

边界策略：越界抽头按 0 处理，且不重新归一化，
因此权重和为正时边缘像素会比内部暗。
输出总是新缓冲区，alpha 统一置 255。
"""

from typing import Sequence

import numpy as np

from ..context import Kernel, RasterBuffer


# 纹理增强核：中心 20，八邻域 -1（权重和 12）
TEXTURE_KERNEL = Kernel.of([
    -1, -1, -1,
    -1, 20, -1,
    -1, -1, -1
])

# 锐化核：注意第 5 位为 0（非对称，权重和 -1）
SHARPEN_KERNEL = Kernel.of([
    -1, -1, -1,
    -1, 9, 0,
    -1, -1, -1
])


class ConvolutionFilter:
    """卷积滤波器"""

    def __init__(self, kernel: Kernel | Sequence[float]):
        """
        初始化

        Args:
            kernel: Kernel 或按行主序排列的权重序列
        """
        if not isinstance(kernel, Kernel):
            kernel = Kernel.of(kernel)
        self.kernel = kernel

    def apply(self, buffer: RasterBuffer) -> RasterBuffer:
        """
        对 RGB 通道做卷积

        Args:
            buffer: 输入缓冲区（只读）

        Returns:
            同尺寸的新缓冲区
        """
        return convolve(buffer, self.kernel)


def convolve(buffer: RasterBuffer, kernel: Kernel) -> RasterBuffer:
    """
    零填充卷积

    Args:
        buffer: 输入缓冲区（只读）
        kernel: 卷积核

    Returns:
        同尺寸的新缓冲区
    """
    h, w = buffer.height, buffer.width
    side, half = kernel.side, kernel.half
    weights = kernel.matrix

    # 零填充，越界抽头贡献为 0
    src = np.zeros((h + 2 * half, w + 2 * half, 3), dtype=np.float64)
    src[half:half + h, half:half + w] = buffer.rgb()

    acc = np.zeros((h, w, 3), dtype=np.float64)
    for cy in range(side):
        for cx in range(side):
            wt = weights[cy, cx]
            if wt == 0:
                continue
            acc += wt * src[cy:cy + h, cx:cx + w]

    out = np.empty((h, w, 4), dtype=np.uint8)
    out[:, :, :3] = np.rint(np.clip(acc, 0, 255)).astype(np.uint8)
    out[:, :, 3] = 255
    return RasterBuffer(out)
