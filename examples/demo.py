#!/usr/bin/env python
"""
imgpress Demo - 命令行演示脚本

使用方法:
    python examples/demo.py [input_image] [output_image] [--enhance]

示例:
    python examples/demo.py examples/input.jpg examples/output.jpg --enhance
"""

import sys
from pathlib import Path

# 添加项目根目录到路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import argparse
import numpy as np
from PIL import Image

from imgpress import RasterBuffer
from imgpress.pipeline import load_pipeline


def create_sample_image(width: int = 2400, height: int = 1600) -> np.ndarray:
    """
    创建一个示例图像（天空渐变 + 草地 + 道路）

    Returns:
        uint8 RGB 图像
    """
    img = np.zeros((height, width, 3), dtype=np.uint8)

    # 天空（上部 40%）- 蓝色渐变
    sky_height = int(height * 0.4)
    ratio = np.linspace(0, 1, sky_height)[:, None]
    img[:sky_height, :, 0] = (135 + 50 * ratio).astype(np.uint8)
    img[:sky_height, :, 1] = (206 - 30 * ratio).astype(np.uint8)
    img[:sky_height, :, 2] = (235 - 20 * ratio).astype(np.uint8)

    # 草地 - 绿色
    road_top = int(height * 0.75)
    img[sky_height:road_top] = (34, 139, 34)

    # 道路（底部）- 深灰色
    img[road_top:] = (80, 80, 80)

    # 添加随机噪声使图像更自然
    noise = np.random.randint(-10, 10, img.shape, dtype=np.int16)
    img = np.clip(img.astype(np.int16) + noise, 0, 255).astype(np.uint8)

    return img


def main():
    parser = argparse.ArgumentParser(description="imgpress Demo")
    parser.add_argument("input", nargs="?", help="输入图像路径")
    parser.add_argument("output", nargs="?", default="output.jpg", help="输出图像路径")
    parser.add_argument("--enhance", action="store_true", help="启用自动增强")
    parser.add_argument("--quality", type=float, default=0.8, help="编码质量 (0, 1]")
    parser.add_argument("--max-dimension", type=int, default=1280, help="最长边上限")

    args = parser.parse_args()

    pipe = load_pipeline()
    params = pipe.default_parameters(
        quality=args.quality,
        max_dimension=args.max_dimension,
        enhance=args.enhance
    )

    if args.input is None:
        print("创建示例图像...")
        buffer = RasterBuffer.from_rgb(create_sample_image())
        result = pipe.process(buffer, params, name="sample")
    else:
        print(f"加载图像: {args.input}")
        result = pipe.process_file(args.input, params)

    for key, value in result.metadata().items():
        print(f"  {key}: {value}")

    output_path = Path(args.output)
    if not output_path.is_absolute():
        output_path = project_root / "examples" / output_path
    output_path.write_bytes(result.data)
    print(f"输出已保存到: {output_path}")

    print("完成!")


if __name__ == "__main__":
    main()
