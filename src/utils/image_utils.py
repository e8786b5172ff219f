"""图片工具函数模块.

底图/肖像的读取与解码、编码输出，以及无底图时使用的占位卡片。
"""

from __future__ import annotations

import base64
import io
import re
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from src.utils.constants import (
    DEFAULT_EXPORT_QUALITY,
    MAX_IMAGE_FILE_SIZE,
    PLACEHOLDER_SIZE,
    SUPPORTED_IMAGE_FORMATS,
)
from src.utils.exceptions import (
    ImageCorruptedError,
    ImageNotFoundError,
    ImageTooLargeError,
    UnsupportedImageFormatError,
)
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

_DATA_URI_PREFIX = re.compile(r"^data:image/(png|jpeg|jpg|webp);base64,")

_JPEG_FORMATS = {"JPEG", "JPG"}


def validate_image_file(path: Path | str) -> None:
    """验证图片文件.

    Args:
        path: 图片文件路径

    Raises:
        ImageNotFoundError: 文件不存在
        UnsupportedImageFormatError: 不支持的格式
        ImageTooLargeError: 文件过大
    """
    path = Path(path)

    if not path.is_file():
        raise ImageNotFoundError(str(path))

    ext = path.suffix.lower()
    if ext not in SUPPORTED_IMAGE_FORMATS:
        raise UnsupportedImageFormatError(ext or path.name)

    size = path.stat().st_size
    if size > MAX_IMAGE_FILE_SIZE:
        raise ImageTooLargeError(size, MAX_IMAGE_FILE_SIZE)


def load_image(path: Path | str) -> Image.Image:
    """加载并解码图片文件.

    Args:
        path: 图片文件路径

    Returns:
        已完全载入内存的 PIL Image

    Raises:
        ImageNotFoundError: 文件不存在
        UnsupportedImageFormatError: 不支持的格式
        ImageTooLargeError: 文件过大
        ImageCorruptedError: 无法解码
    """
    validate_image_file(path)
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error(f"加载图片失败: {path}, {e}")
        raise ImageCorruptedError(str(path)) from e


def bytes_to_image(data: bytes, source: str = "<bytes>") -> Image.Image:
    """解码图片字节数据.

    Args:
        data: 已编码的图片数据
        source: 用于错误消息的来源描述

    Returns:
        PIL Image

    Raises:
        ImageCorruptedError: 数据为空或无法解码
    """
    if not data:
        raise ImageCorruptedError(source)
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        return img
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageCorruptedError(source) from e


def decode_base64_image(payload: str) -> bytes:
    """去掉可能存在的 data URI 前缀并解码 Base64."""
    return base64.b64decode(_DATA_URI_PREFIX.sub("", payload.strip()))


def image_to_bytes(
    image: Image.Image,
    format: str = "PNG",
    quality: int = DEFAULT_EXPORT_QUALITY,
) -> bytes:
    """编码图片为字节数据.

    JPEG 不支持透明通道，编码前转换为 RGB。

    Args:
        image: PIL Image
        format: 图片格式
        quality: JPEG 质量 (1-100)

    Returns:
        编码后的字节数据
    """
    fmt = format.upper()
    buffer = io.BytesIO()
    if fmt in _JPEG_FORMATS:
        if image.mode != "RGB":
            image = image.convert("RGB")
        image.save(buffer, format="JPEG", quality=quality)
    else:
        image.save(buffer, format=fmt)
    return buffer.getvalue()


def save_image(
    image: Image.Image,
    path: Path | str,
    quality: int = DEFAULT_EXPORT_QUALITY,
) -> Path:
    """按扩展名保存图片.

    Args:
        image: PIL Image
        path: 保存路径（.png / .jpg / .jpeg / .webp）
        quality: JPEG/WebP 质量

    Returns:
        保存的文件路径
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    save_kwargs = {}
    if path.suffix.lower() in {".jpg", ".jpeg"}:
        image = ensure_rgb(image)
        save_kwargs["quality"] = quality
    elif path.suffix.lower() == ".webp":
        save_kwargs["quality"] = quality

    image.save(path, **save_kwargs)
    logger.debug(f"图片已保存: {path}")
    return path


def ensure_rgb(image: Image.Image) -> Image.Image:
    """确保图片为 RGB 模式."""
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def ensure_rgba(image: Image.Image) -> Image.Image:
    """确保图片为 RGBA 模式."""
    if image.mode != "RGBA":
        return image.convert("RGBA")
    return image


def _placeholder_font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype("DejaVuSans-Bold.ttf", size)
    except OSError:
        return ImageFont.load_default(size)


def create_placeholder_card(
    size: tuple[int, int] = PLACEHOLDER_SIZE,
) -> Image.Image:
    """生成占位用的证件底图.

    底图加载失败或未配置时使用：顶部色带与标题、姓名/证件号标签、照片框。

    Args:
        size: 画布尺寸，坐标按 800x500 设计并等比缩放

    Returns:
        RGB 模式的占位底图
    """
    width, height = size
    sx, sy = width / 800, height / 500

    def box(x1: float, y1: float, x2: float, y2: float) -> tuple[int, int, int, int]:
        return (round(x1 * sx), round(y1 * sy), round(x2 * sx), round(y2 * sy))

    image = Image.new("RGB", size, "#f1f5f9")
    draw = ImageDraw.Draw(image)

    draw.rectangle(box(0, 0, 800, 80), fill="#0f766e")
    draw.text(
        (round(40 * sx), round(22 * sy)),
        "RÉPUBLIQUE IMAGINAIRE",
        font=_placeholder_font(max(1, round(30 * sx))),
        fill="white",
    )

    label_font = _placeholder_font(max(1, round(20 * sx)))
    draw.text((round(300 * sx), round(182 * sy)), "Nom :", font=label_font, fill="#334155")
    draw.text((round(300 * sx), round(262 * sy)), "ID Number :", font=label_font, fill="#334155")

    draw.rectangle(box(50, 150, 250, 400), fill="#e2e8f0", outline="#cbd5e1", width=2)
    draw.text(
        (round(110 * sx), round(265 * sy)),
        "PHOTO",
        font=_placeholder_font(max(1, round(20 * sx))),
        fill="#94a3b8",
    )
    return image
