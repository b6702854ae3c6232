"""
Enhancer - 自动增强流水线

固定顺序：
1. 统计亮度/对比度
2. 亮度偏移（暗图 +10，否则 -70）
3. 对比度（使用统计得到的 contrast）
4. 饱和度 x1.1
5. 纹理增强卷积
6. 锐化卷积
两次卷积各自生成新缓冲区，不合并为一次。
"""

from omegaconf import DictConfig, OmegaConf

from ..context import Kernel, RasterBuffer
from ..analysis import StatisticsAnalyzer
from ..adjustment import ColorAdjuster
from ..filters import convolve, TEXTURE_KERNEL, SHARPEN_KERNEL


class Enhancer:
    """增强流水线"""

    def __init__(self, cfg: DictConfig | None = None):
        """
        初始化增强流水线

        Args:
            cfg: 配置对象，可选 enhancement 段覆盖默认常量
        """
        enh_cfg = cfg.get("enhancement", None) if cfg is not None else None
        if enh_cfg is None:
            enh_cfg = OmegaConf.create({})

        self.brightness_threshold = enh_cfg.get("brightness_threshold", 100)
        self.dark_adjustment = enh_cfg.get("dark_adjustment", 10)
        self.bright_adjustment = enh_cfg.get("bright_adjustment", -70)
        self.saturation = enh_cfg.get("saturation", 1.1)

        texture = enh_cfg.get("texture_kernel", None)
        sharpen = enh_cfg.get("sharpen_kernel", None)
        self.texture_kernel = Kernel.of(texture) if texture is not None else TEXTURE_KERNEL
        self.sharpen_kernel = Kernel.of(sharpen) if sharpen is not None else SHARPEN_KERNEL

        self.analyzer = StatisticsAnalyzer()
        self.adjuster = ColorAdjuster()

    def brightness_adjustment(self, brightness: float) -> float:
        """两档亮度偏移"""
        if brightness < self.brightness_threshold:
            return self.dark_adjustment
        return self.bright_adjustment

    def enhance(self, buffer: RasterBuffer) -> RasterBuffer:
        """
        执行增强

        Args:
            buffer: 输入缓冲区（颜色调整阶段会被原地修改）

        Returns:
            锐化后的新缓冲区
        """
        stats = self.analyzer.analyze(buffer)

        self.adjuster.adjust_brightness(buffer, self.brightness_adjustment(stats.brightness))
        self.adjuster.adjust_contrast(buffer, stats.contrast)
        self.adjuster.adjust_saturation(buffer, self.saturation)

        textured = convolve(buffer, self.texture_kernel)
        return convolve(textured, self.sharpen_kernel)


def enhance(buffer: RasterBuffer) -> RasterBuffer:
    """便捷函数：使用默认常量增强"""
    return Enhancer().enhance(buffer)
