"""
imgpress 命令行入口

使用方法:
    imgpress photo1.jpg photo2.heic -o out/ --quality 0.7 --max-dimension 1280 --enhance
"""

import argparse
import sys
from pathlib import Path

from .batch import BatchItem, BatchItemResult, BatchProcessor
from .pipeline import ImagePipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imgpress",
        description="批量压缩图像：限制尺寸、可选自动增强、重新编码"
    )
    parser.add_argument("inputs", nargs="+", help="输入图像文件")
    parser.add_argument("-o", "--output-dir", default="processed", help="输出目录")
    parser.add_argument("--quality", type=float, default=None, help="编码质量 (0, 1]")
    parser.add_argument("--max-dimension", type=int, default=None, help="最长边上限（像素）")
    parser.add_argument(
        "--enhance",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="启用/关闭自动增强（默认取配置）"
    )
    parser.add_argument("--workers", type=int, default=None, help="并发处理数")
    parser.add_argument("--config", default=None, help="配置文件路径")
    return parser


def format_metadata(item: BatchItemResult) -> str:
    """单张图像的元信息块"""
    result = item.result
    return "\n".join([
        f"File Name: {item.name}",
        f"Original Size: {result.original_size} bytes",
        f"Processed Size: {result.processed_size} bytes",
        f"Width: {result.width} px",
        f"Height: {result.height} px",
    ])


def output_name(source_name: str, extension: str, taken: set[str]) -> str:
    """
    输出文件名 processed_<源文件名>

    源文件后缀与输出后缀不同时保留源后缀（a.png -> processed_a.png.jpg），
    仍然重名时追加序号。

    Args:
        source_name: 源文件名
        extension: 输出后缀，如 ".jpg"
        taken: 已使用的输出文件名（会被更新）
    """
    name = source_name
    if Path(name).suffix.lower() != extension:
        name += extension
    candidate = f"processed_{name}"
    counter = 1
    while candidate.lower() in taken:
        stem, suffix = Path(name).stem, Path(name).suffix
        candidate = f"processed_{stem}_{counter}{suffix}"
        counter += 1
    taken.add(candidate.lower())
    return candidate


def main(argv: list[str] | None = None) -> int:
    """主入口"""
    args = build_parser().parse_args(argv)

    pipeline = ImagePipeline(args.config)
    try:
        params = pipeline.default_parameters(
            quality=args.quality,
            max_dimension=args.max_dimension,
            enhance=args.enhance
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    items = []
    for path in map(Path, args.inputs):
        if not path.is_file():
            print(f"Error: {path} 不存在")
            continue
        items.append(BatchItem.from_path(path))
    if not items:
        print("Please select at least one image file.")
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    extension = pipeline.encoder.extension

    print("Processing images...")
    processor = BatchProcessor(pipeline, max_workers=args.workers)
    results = processor.process_batch(items, params)

    failures = 0
    taken: set[str] = set()
    for item in results:
        if not item.ok:
            failures += 1
            print(f"Error: Failed to process image {item.name}: {item.error}")
            continue
        out_path = output_dir / output_name(item.name, extension, taken)
        out_path.write_bytes(item.result.data)
        print(format_metadata(item))
        print(f"Saved: {out_path}\n")

    print("Processing complete.")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
