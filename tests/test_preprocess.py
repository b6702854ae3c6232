"""
Preprocess 模块单元测试
"""

import sys
from pathlib import Path

# 添加项目根目录到路径
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np
import pytest
from omegaconf import OmegaConf

from imgpress.context import RasterBuffer
from imgpress.errors import InvalidDimensions
from imgpress.preprocess import Resizer, compute_target_size, resize, crop_region


@pytest.fixture
def config():
    """测试配置"""
    return OmegaConf.create({
        "global": {
            "max_dimension": 512
        }
    })


@pytest.fixture
def resizer(config):
    """创建尺寸限制器"""
    return Resizer(config)


def random_buffer(width: int, height: int) -> RasterBuffer:
    return RasterBuffer(np.random.randint(0, 256, (height, width, 4), dtype=np.uint8))


class TestComputeTargetSize:
    """目标尺寸计算测试"""

    def test_no_resize_when_fits(self):
        """测试两边都不超限时不缩放"""
        assert compute_target_size(300, 200, 512) == (300, 200)

    def test_exact_max_size(self):
        """测试刚好等于上限"""
        assert compute_target_size(512, 512, 512) == (512, 512)

    def test_landscape(self):
        """测试横图：宽取上限"""
        assert compute_target_size(4000, 2000, 800) == (800, 400)

    def test_portrait(self):
        """测试竖图：高取上限"""
        assert compute_target_size(300, 900, 600) == (200, 600)

    def test_square(self):
        """测试方图"""
        assert compute_target_size(1000, 1000, 500) == (500, 500)

    def test_truncates_fraction(self):
        """测试短边向下取整"""
        # 1000 * 333 / 1001 = 332.67
        assert compute_target_size(1001, 1000, 333) == (333, 332)

    def test_short_side_at_least_one(self):
        """测试极窄图像的短边至少 1 像素"""
        assert compute_target_size(10000, 1, 100) == (100, 1)

    def test_zero_dimension(self):
        """测试宽或高为 0"""
        with pytest.raises(InvalidDimensions):
            compute_target_size(0, 100, 512)
        with pytest.raises(InvalidDimensions):
            compute_target_size(100, 0, 512)

    def test_invalid_max_dimension(self):
        """测试非法上限"""
        with pytest.raises(ValueError):
            compute_target_size(100, 100, 0)


class TestResizer:
    """Resizer 测试类"""

    def test_init(self, resizer):
        """测试初始化"""
        assert resizer.default_max_dimension == 512

    def test_init_without_config(self):
        """测试无配置时的默认值"""
        assert Resizer().default_max_dimension == 1920

    def test_resize_large_image(self, resizer):
        """测试大图像被正确缩放"""
        buffer = random_buffer(2000, 1500)
        out = resizer.resize(buffer)

        assert max(out.width, out.height) <= 512
        assert (out.width, out.height) == (512, 384)
        assert out.pixels.dtype == np.uint8
        assert out.pixels.shape == (384, 512, 4)

    def test_resize_returns_same_buffer_when_fits(self, resizer):
        """测试小图像原样返回"""
        buffer = random_buffer(300, 200)
        out = resizer.resize(buffer)

        assert out is buffer

    def test_explicit_max_dimension(self, resizer):
        """测试显式上限覆盖配置"""
        out = resizer.resize(random_buffer(4000, 2000), 800)
        assert (out.width, out.height) == (800, 400)

    @pytest.mark.parametrize("size", [(1000, 500), (513, 100), (50, 3000), (2048, 2048)])
    def test_never_exceeds_max(self, resizer, size):
        """测试输出任意一边都不超过上限"""
        out = resizer.resize(random_buffer(*size))
        assert out.width <= 512
        assert out.height <= 512

    def test_aspect_ratio_preserved(self, resizer):
        """测试长宽比保持"""
        out = resizer.resize(random_buffer(1000, 500))
        assert out.width / out.height == pytest.approx(2.0, rel=0.01)

    def test_uniform_color_preserved(self):
        """测试重采样不改变纯色"""
        buffer = RasterBuffer.filled(1000, 600, (40, 80, 120, 255))
        out = resize(buffer, 100)

        assert (out.width, out.height) == (100, 60)
        assert np.all(out.pixels == np.array([40, 80, 120, 255], dtype=np.uint8))

    def test_second_pass_is_noop(self, resizer):
        """测试对已缩放结果再次缩放不再改变尺寸"""
        once = resizer.resize(random_buffer(1800, 1000))
        twice = resizer.resize(once)
        assert twice is once


class TestCropRegion:
    """手动裁剪测试"""

    @pytest.fixture
    def buffer(self):
        pixels = np.arange(10 * 10 * 4, dtype=np.uint32).reshape(10, 10, 4) % 256
        return RasterBuffer(pixels.astype(np.uint8))

    def test_crop_forward_drag(self, buffer):
        """测试正向拖拽"""
        out = crop_region(buffer, (2, 3), (6, 8))

        assert (out.width, out.height) == (4, 5)
        assert np.array_equal(out.pixels, buffer.pixels[3:8, 2:6])

    def test_crop_is_copy(self, buffer):
        """测试裁剪结果不与原图共享内存"""
        out = crop_region(buffer, (0, 0), (5, 5))
        out.pixels[:] = 0
        assert buffer.pixels[1, 1, 0] != 0

    def test_crop_reverse_drag_anchors_at_start(self, buffer):
        """测试反向拖拽：矩形以起点为左上角，越界部分被截掉"""
        out = crop_region(buffer, (6, 8), (2, 3))

        assert (out.width, out.height) == (4, 2)
        assert np.array_equal(out.pixels, buffer.pixels[8:10, 6:10])

    def test_empty_region(self, buffer):
        """测试空选区"""
        with pytest.raises(InvalidDimensions, match="裁剪区域为空"):
            crop_region(buffer, (4, 4), (4, 9))

    def test_region_outside_image(self, buffer):
        """测试完全在图像外的选区"""
        with pytest.raises(InvalidDimensions):
            crop_region(buffer, (20, 20), (30, 30))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
