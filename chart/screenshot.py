"""
chart.screenshot
视口截图（PNG，非整页），并用 Pillow 读出实际像素尺寸。
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image

from .errors import CaptureError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Screenshot:
    data: bytes
    width: int
    height: int


def inspect_png(data: bytes) -> Tuple[int, int]:
    """返回 PNG 的 (宽, 高)；不是可解码的 PNG 时抛 ValueError。"""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            size = img.size
    except Exception as e:
        raise ValueError(f"screenshot is not a readable image: {e}") from e
    if fmt != "PNG":
        raise ValueError(f"screenshot format is {fmt}, expected PNG")
    return size


def capture_viewport(page, *, expected: Optional[Tuple[int, int]] = None) -> Screenshot:
    """Capture the visible viewport as PNG; any failure is fatal (SCREENSHOT_ERROR)."""
    logger.info("capturing screenshot...")
    try:
        data = page.screenshot(type="png", full_page=False)
        width, height = inspect_png(data)
    except Exception as e:
        raise CaptureError(
            code="SCREENSHOT_ERROR",
            stage="capture",
            message=f"screenshot failed: {e}",
            original=e,
        ) from e
    if expected and (width, height) != tuple(expected):
        # 高 DPR 或页面缩放会导致尺寸不一致，不影响结果
        logger.warning("screenshot size %dx%d differs from viewport %dx%d", width, height, expected[0], expected[1])
    logger.info("screenshot captured: %dx%d, %d bytes", width, height, len(data))
    return Screenshot(data=data, width=width, height=height)
