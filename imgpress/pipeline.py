"""
ImagePipeline - 主处理流水线

单张图像：尺寸限制 -> （可选）自动增强 -> 编码 -> 元信息。
"""

from pathlib import Path

from omegaconf import OmegaConf, DictConfig

from .context import RasterBuffer, ProcessingParameters, ProcessingResult


class ImagePipeline:
    """图像压缩/增强主 Pipeline"""

    def __init__(self, config_path: str | Path | None = None, cfg: DictConfig | None = None):
        """
        初始化 Pipeline

        Args:
            config_path: 配置文件路径，默认使用 imgpress/config/default.yaml
            cfg: 已加载的配置对象（优先于 config_path）
        """
        if cfg is None:
            if config_path is None:
                config_path = Path(__file__).parent / "config" / "default.yaml"
            cfg = OmegaConf.load(config_path)
        self.cfg: DictConfig = cfg

        # 初始化各模块（延迟加载）
        self._resizer = None
        self._enhancer = None
        self._validator = None
        self._decoder = None
        self._encoder = None

    # ==================== 模块懒加载 ====================

    @property
    def resizer(self):
        """尺寸限制模块（懒加载）"""
        if self._resizer is None:
            from .preprocess import Resizer
            self._resizer = Resizer(self.cfg)
        return self._resizer

    @property
    def enhancer(self):
        """自动增强模块（懒加载）"""
        if self._enhancer is None:
            from .enhancement import Enhancer
            self._enhancer = Enhancer(self.cfg)
        return self._enhancer

    @property
    def validator(self):
        """格式校验（懒加载）"""
        if self._validator is None:
            from .codec import FormatValidator
            self._validator = FormatValidator(self.cfg)
        return self._validator

    @property
    def decoder(self):
        """解码器（懒加载）"""
        if self._decoder is None:
            from .codec import Decoder
            self._decoder = Decoder()
        return self._decoder

    @property
    def encoder(self):
        """编码器（懒加载）"""
        if self._encoder is None:
            from .codec import Encoder
            self._encoder = Encoder(self.cfg)
        return self._encoder

    def default_parameters(self, **overrides) -> ProcessingParameters:
        """从配置生成处理参数"""
        return ProcessingParameters.from_config(self.cfg, **overrides)

    # ==================== 主处理流程 ====================

    def transform(self, buffer: RasterBuffer, params: ProcessingParameters) -> RasterBuffer:
        """
        像素处理（不编码）

        Args:
            buffer: 解码后的缓冲区（所有权转移给 Pipeline）
            params: 处理参数

        Returns:
            处理后的缓冲区
        """
        resized = self.resizer.resize(buffer, params.max_dimension)
        if params.enhance:
            resized = self.enhancer.enhance(resized)
        return resized

    def process(
        self,
        buffer: RasterBuffer,
        params: ProcessingParameters | None = None,
        original_size: int | None = None,
        name: str | None = None
    ) -> ProcessingResult:
        """
        处理单张图像

        Args:
            buffer: 解码后的缓冲区
            params: 处理参数，默认取配置
            original_size: 原始字节数，默认取像素字节数
            name: 源文件名

        Returns:
            ProcessingResult
        """
        if params is None:
            params = self.default_parameters()
        if original_size is None:
            original_size = buffer.size

        result_buffer = self.transform(buffer, params)
        data = self.encoder.encode(result_buffer, params.quality)

        return ProcessingResult(
            buffer=result_buffer,
            original_size=original_size,
            processed_size=len(data),
            width=result_buffer.width,
            height=result_buffer.height,
            data=data,
            name=name
        )

    def process_bytes(
        self,
        data: bytes,
        params: ProcessingParameters | None = None,
        mime_type: str | None = None,
        name: str | None = None
    ) -> ProcessingResult:
        """
        解码并处理

        Args:
            data: 编码后的图像字节
            params: 处理参数
            mime_type: 声明的 MIME 类型，为空时按 name 的扩展名推断
            name: 源文件名

        Returns:
            ProcessingResult（original_size 为输入字节数）
        """
        mime_type = self.validator.validate(name, len(data), mime_type)
        decoded = self.decoder.decode(data, mime_type)
        return self.process(decoded.buffer, params, decoded.original_size, name)

    def process_file(
        self,
        path: str | Path,
        params: ProcessingParameters | None = None
    ) -> ProcessingResult:
        """读取文件并处理"""
        path = Path(path)
        return self.process_bytes(path.read_bytes(), params, name=path.name)


def load_pipeline(config_path: str | Path | None = None) -> ImagePipeline:
    """
    便捷函数：加载 Pipeline

    Args:
        config_path: 配置文件路径

    Returns:
        ImagePipeline 实例
    """
    return ImagePipeline(config_path)
