"""证件文字字体与测量.

渲染器与命中测试共用同一套字体解析和文字宽度测量，保证命中框与绘制的
文字一致。
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional, Union

from PIL import ImageFont

from src.utils.constants import CARD_FONT_CANDIDATES, FONT_SEARCH_PATHS
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

CardFont = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# 用户通过配置指定的字体文件，优先于内置候选列表
_font_override: Optional[str] = None


def set_font_override(path: Optional[str]) -> None:
    """设置证件文字字体文件路径，None 表示使用候选列表.

    Args:
        path: TrueType/OpenType 字体文件路径
    """
    global _font_override
    _font_override = path or None
    _find_font_path.cache_clear()
    get_card_font.cache_clear()


@lru_cache(maxsize=1)
def _find_font_path() -> Optional[str]:
    """查找第一个可用的等宽粗体字体文件."""
    if _font_override:
        if os.path.exists(_font_override):
            return _font_override
        logger.warning(f"配置的字体文件不存在: {_font_override}，使用内置候选字体")

    for search_path in FONT_SEARCH_PATHS:
        expanded = os.path.expanduser(search_path)
        if not os.path.isdir(expanded):
            continue
        for name in CARD_FONT_CANDIDATES:
            font_path = os.path.join(expanded, name)
            if os.path.exists(font_path):
                logger.debug(f"使用证件字体: {font_path}")
                return font_path

    logger.warning("未找到等宽粗体字体，使用 Pillow 默认字体")
    return None


@lru_cache(maxsize=64)
def get_card_font(pixel_size: int) -> CardFont:
    """获取指定像素字号的证件字体.

    Args:
        pixel_size: 像素字号（整数，至少为 1）

    Returns:
        Pillow 字体对象
    """
    size = max(1, pixel_size)
    font_path = _find_font_path()
    if font_path:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError as e:
            logger.warning(f"加载字体失败: {font_path}, {e}")
    return ImageFont.load_default(size)


def font_for_size(size: float) -> CardFont:
    """按浮点像素字号取字体（四舍五入到整数像素）."""
    return get_card_font(max(1, round(size)))


def measure_text_width(text: str, size: float) -> float:
    """测量文字在给定像素字号下的绘制宽度.

    Args:
        text: 文字内容
        size: 像素字号

    Returns:
        像素宽度，空文字为 0
    """
    if not text:
        return 0.0
    return float(font_for_size(size).getlength(text))
