"""
Crop - 手动区域裁剪

交互层（拖拽选区）完成后，把两个拖拽点换算为矩形并裁剪，
裁剪结果再交给 Pipeline 处理。
"""

from ..context import RasterBuffer
from ..errors import InvalidDimensions


def crop_region(
    buffer: RasterBuffer,
    start: tuple[int, int],
    end: tuple[int, int]
) -> RasterBuffer:
    """
    按拖拽起止点裁剪

    矩形左上角为起点，宽高取 |end - start|，与拖拽方向无关；
    超出图像的部分被截掉。

    Args:
        buffer: 输入缓冲区
        start: 起点 (x, y)
        end: 终点 (x, y)

    Returns:
        裁剪后的新缓冲区
    """
    x0, y0 = int(start[0]), int(start[1])
    crop_w = abs(int(end[0]) - x0)
    crop_h = abs(int(end[1]) - y0)

    left = max(0, x0)
    top = max(0, y0)
    right = min(buffer.width, x0 + crop_w)
    bottom = min(buffer.height, y0 + crop_h)

    if right <= left or bottom <= top:
        raise InvalidDimensions(
            f"裁剪区域为空: start={start}, end={end}, image={buffer.width}x{buffer.height}"
        )

    return RasterBuffer(buffer.pixels[top:bottom, left:right].copy())
