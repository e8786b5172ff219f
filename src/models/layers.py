"""证件卡片图层数据模型.

坐标一律为相对画布的归一化值（0-1），不做钳制：图层可以被拖出可见区域。

Features:
    - 封闭的图层标识枚举（姓名、证件号、肖像）
    - 文字图层与肖像图层
    - 两个文字图层共用的视觉参数
    - 画布帧（当前底图的像素尺寸）
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from PIL import Image, ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.constants import (
    DEFAULT_FONT_SIZE,
    DEFAULT_PORTRAIT_POSITION,
    DEFAULT_PORTRAIT_ROTATION,
    DEFAULT_PORTRAIT_SCALE,
    DEFAULT_TEXT_COLOR,
    DEFAULT_TEXT_ROTATION,
)

# ===================
# 类型别名
# ===================

Point = tuple[float, float]
RGBColor = tuple[int, int, int]


# ===================
# 枚举定义
# ===================


class LayerId(str, Enum):
    """图层标识.

    图层集合固定：两个文字图层和一个肖像图层。
    """

    NAME = "name"
    ID = "id"
    PORTRAIT = "portrait"

    @property
    def is_text(self) -> bool:
        """是否为文字图层."""
        return self in TEXT_LAYER_ORDER


# 文字图层的绘制顺序与命中优先级
TEXT_LAYER_ORDER: tuple[LayerId, ...] = (LayerId.NAME, LayerId.ID)

# 命中测试优先级：文字优先于肖像，与绘制叠放顺序无关
HIT_TEST_ORDER: tuple[LayerId, ...] = (LayerId.NAME, LayerId.ID, LayerId.PORTRAIT)


# ===================
# 画布帧
# ===================


class CanvasFrame(BaseModel):
    """画布帧.

    渲染表面的像素尺寸，由已加载底图的原始尺寸决定。

    Attributes:
        width: 宽度（像素）
        height: 高度（像素）
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(gt=0, description="画布宽度")
    height: int = Field(gt=0, description="画布高度")

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) 元组."""
        return (self.width, self.height)

    @classmethod
    def from_image(cls, image: Image.Image) -> "CanvasFrame":
        """以图片原始尺寸创建画布帧."""
        return cls(width=image.width, height=image.height)


# ===================
# 图层
# ===================


class TextLayer(BaseModel):
    """文字图层.

    Attributes:
        id: 图层标识（NAME 或 ID）
        text: 当前文字内容
        x: 文字左上锚点 X（归一化）
        y: 文字左上锚点 Y（归一化）
        is_selected: 是否为当前拖拽目标（仅影响渲染）
    """

    model_config = ConfigDict(validate_assignment=True)

    id: LayerId
    text: str = ""
    x: float = 0.0
    y: float = 0.0
    is_selected: bool = False

    @field_validator("id")
    @classmethod
    def validate_text_id(cls, v: LayerId) -> LayerId:
        """文字图层只能是姓名或证件号."""
        if not v.is_text:
            raise ValueError(f"文字图层标识无效: {v.value}")
        return v

    @property
    def position(self) -> Point:
        return (self.x, self.y)


class PortraitLayer(BaseModel):
    """肖像图层.

    没有图片时图层既不绘制也不可交互。高度不单独存储，每次按宽度、
    图片原始宽高比和画布帧推导。

    Attributes:
        image: 已解码的肖像图片，可为空
        x: 包围盒左上角 X（归一化）
        y: 包围盒左上角 Y（归一化）
        width: 宽度（相对画布宽度的归一化值）
        rotation: 绕自身中心的旋转角度（度，顺时针）
        is_selected: 是否为当前拖拽目标
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    image: Optional[Image.Image] = None
    x: float = DEFAULT_PORTRAIT_POSITION[0]
    y: float = DEFAULT_PORTRAIT_POSITION[1]
    width: float = DEFAULT_PORTRAIT_SCALE / 100
    rotation: float = DEFAULT_PORTRAIT_ROTATION
    is_selected: bool = False

    @property
    def has_image(self) -> bool:
        """是否已设置肖像图片."""
        return self.image is not None

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    def pixel_size(self, frame: CanvasFrame) -> Optional[tuple[float, float]]:
        """计算肖像在画布上的像素尺寸.

        高度 = 像素宽度 / 图片原始宽度 * 图片原始高度，始终保持原始宽高比。

        Args:
            frame: 画布帧

        Returns:
            (宽, 高) 像素值；没有图片时返回 None
        """
        if self.image is None:
            return None
        pw = self.width * frame.width
        ph = pw / self.image.width * self.image.height
        return (pw, ph)

    def normalized_height(self, frame: CanvasFrame) -> Optional[float]:
        """推导出的归一化高度，没有图片时返回 None."""
        size = self.pixel_size(frame)
        if size is None:
            return None
        return size[1] / frame.height


# ===================
# 共享视觉参数
# ===================


class SharedParams(BaseModel):
    """两个文字图层与肖像图层共用的视觉参数.

    Attributes:
        text_color: 文字颜色（CSS 颜色字符串，如 "#000000"）
        font_size: 逻辑字号，渲染时按画布宽度缩放
        text_rotation: 文字旋转角度（度），同时作用于两个文字图层
        portrait_scale: 肖像宽度百分比
        portrait_rotation: 肖像旋转角度（度）
    """

    model_config = ConfigDict(validate_assignment=True)

    text_color: str = DEFAULT_TEXT_COLOR
    font_size: float = DEFAULT_FONT_SIZE
    text_rotation: float = DEFAULT_TEXT_ROTATION
    portrait_scale: float = DEFAULT_PORTRAIT_SCALE
    portrait_rotation: float = DEFAULT_PORTRAIT_ROTATION

    @property
    def text_rgb(self) -> RGBColor:
        """文字颜色的 RGB 元组，无法解析时回退为默认颜色."""
        try:
            return ImageColor.getrgb(self.text_color)[:3]
        except ValueError:
            return ImageColor.getrgb(DEFAULT_TEXT_COLOR)[:3]


# ===================
# 拖拽会话
# ===================


class DragSession(BaseModel):
    """拖拽会话.

    只存在于命中的按下事件与对应的释放事件之间。

    Attributes:
        layer_id: 正在拖拽的图层
        last_pointer: 上一次指针位置（画布像素坐标）
    """

    layer_id: LayerId
    last_pointer: Point
