"""
Filters 模块测试（卷积与卷积核）
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest

from imgpress.context import Kernel, RasterBuffer
from imgpress.errors import InvalidKernel
from imgpress.filters import ConvolutionFilter, convolve, TEXTURE_KERNEL, SHARPEN_KERNEL

IDENTITY = [0, 0, 0, 0, 1, 0, 0, 0, 0]
BOX = [1] * 9


@pytest.fixture
def random_buffer():
    """随机 RGBA 测试图像（含随机 alpha）"""
    return RasterBuffer(np.random.randint(0, 256, (32, 40, 4), dtype=np.uint8))


class TestKernel:
    """Kernel 测试"""

    def test_side_and_half(self):
        k = Kernel.of(range(25))
        assert k.side == 5
        assert k.half == 2
        assert k.matrix.shape == (5, 5)

    def test_single_weight(self):
        k = Kernel.of([3])
        assert k.side == 1
        assert k.half == 0

    @pytest.mark.parametrize("count", [0, 2, 8, 10])
    def test_not_perfect_square(self, count):
        with pytest.raises(InvalidKernel, match="完全平方数"):
            Kernel.of([1] * count)

    @pytest.mark.parametrize("count", [4, 16])
    def test_even_side(self, count):
        with pytest.raises(InvalidKernel, match="奇数"):
            Kernel.of([1] * count)

    def test_immutable(self):
        k = Kernel.of(IDENTITY)
        with pytest.raises(AttributeError):
            k.side = 5
        with pytest.raises(ValueError):
            k.matrix[0, 0] = 1.0

    def test_builtin_kernels(self):
        """测试内置核的权重和"""
        assert TEXTURE_KERNEL.weight_sum == 12
        assert SHARPEN_KERNEL.weight_sum == -1
        # 锐化核第 5 位为 0，非对称
        assert SHARPEN_KERNEL.weights[5] == 0
        assert SHARPEN_KERNEL.weights[3] == -1


class TestConvolution:
    """ConvolutionFilter 测试"""

    def test_output_shape(self, random_buffer):
        out = convolve(random_buffer, TEXTURE_KERNEL)
        assert out.pixels.shape == random_buffer.pixels.shape
        assert out.pixels.dtype == np.uint8

    def test_returns_new_buffer(self, random_buffer):
        """测试不原地修改输入"""
        before = random_buffer.pixels.copy()
        out = ConvolutionFilter(SHARPEN_KERNEL).apply(random_buffer)

        assert out is not random_buffer
        assert not np.shares_memory(out.pixels, random_buffer.pixels)
        assert np.array_equal(random_buffer.pixels, before)

    def test_identity_kernel(self, random_buffer):
        """测试单位核保持 RGB"""
        out = ConvolutionFilter(IDENTITY).apply(random_buffer)
        assert np.array_equal(out.pixels[:, :, :3], random_buffer.pixels[:, :, :3])

    def test_alpha_forced_opaque(self, random_buffer):
        """测试输出 alpha 总是 255"""
        for kernel in (IDENTITY, TEXTURE_KERNEL, SHARPEN_KERNEL):
            out = ConvolutionFilter(kernel).apply(random_buffer)
            assert np.all(out.pixels[:, :, 3] == 255)

    def test_output_range(self, random_buffer):
        """测试输出在 [0, 255]"""
        for kernel in (TEXTURE_KERNEL, SHARPEN_KERNEL, [-5] * 9, [7] * 25):
            out = ConvolutionFilter(kernel).apply(random_buffer)
            assert out.pixels.min() >= 0 and out.pixels.max() <= 255

    def test_correlation_orientation(self):
        """测试抽头方向：k[cy,cx] 读取 src[y+cy-h, x+cx-h]"""
        pixels = np.zeros((5, 5, 4), dtype=np.uint8)
        pixels[2, 2, :3] = 10
        # 权重在 (1, 2)：out[y, x] = src[y, x+1]
        out = convolve(RasterBuffer(pixels), Kernel.of([0, 0, 0, 0, 0, 1, 0, 0, 0]))

        assert out.pixels[2, 1, :3].tolist() == [10, 10, 10]
        assert out.pixels[2, 2, :3].tolist() == [0, 0, 0]
        assert out.pixels[2, 3, :3].tolist() == [0, 0, 0]

    def test_channels_independent(self):
        """测试各通道独立卷积"""
        buffer = RasterBuffer.filled(6, 6, (10, 0, 20, 255))
        out = convolve(buffer, Kernel.of([2]))
        assert out.pixels[3, 3].tolist() == [20, 0, 40, 255]

    def test_uniform_interior_scales_by_weight_sum(self):
        """测试均匀区域内部按权重和缩放"""
        buffer = RasterBuffer.filled(8, 8, (10, 10, 10, 255))
        out = convolve(buffer, TEXTURE_KERNEL)
        assert np.all(out.pixels[1:-1, 1:-1, :3] == 120)

    def test_zero_padding_values(self):
        """测试越界抽头按 0 处理，不重新归一化"""
        buffer = RasterBuffer.filled(8, 8, (10, 10, 10, 255))
        out = convolve(buffer, TEXTURE_KERNEL)

        # 边：中心 + 5 个邻域；角：中心 + 3 个邻域
        assert out.pixels[0, 4, 0] == 20 * 10 - 5 * 10
        assert out.pixels[0, 0, 0] == 20 * 10 - 3 * 10

    def test_border_darker_for_positive_kernel(self):
        """测试非负核下零填充使边缘比内部暗"""
        buffer = RasterBuffer.filled(20, 16, (20, 20, 20, 255))
        out = convolve(buffer, Kernel.of(BOX)).pixels[:, :, :3].astype(float)

        interior = out[1:-1, 1:-1].mean()
        border = np.concatenate([
            out[0].reshape(-1), out[-1].reshape(-1),
            out[1:-1, 0].reshape(-1), out[1:-1, -1].reshape(-1)
        ]).mean()

        assert interior == 180
        assert border < interior
        assert out[0, 0, 0] == 80   # 角：4 个抽头
        assert out[0, 5, 0] == 120  # 边：6 个抽头

    def test_two_passes_read_unmodified_source(self):
        """测试每次卷积都从未修改的源读取（非原地单缓冲）"""
        pixels = np.zeros((3, 3, 4), dtype=np.uint8)
        pixels[:, :, :3] = 50
        buffer = RasterBuffer(pixels)

        # 向右平移核：out[y,x] = src[y, x-1]
        shift = Kernel.of([0, 0, 0, 1, 0, 0, 0, 0, 0])
        out = convolve(buffer, shift)

        # 原地实现会把第一列的 0 一路传播到整行
        assert out.pixels[1, :, 0].tolist() == [0, 50, 50]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
