"""图层数据模型单元测试."""

import pytest
from PIL import Image
from pydantic import ValidationError

from src.models.layers import (
    CanvasFrame,
    HIT_TEST_ORDER,
    LayerId,
    PortraitLayer,
    SharedParams,
    TextLayer,
)


class TestLayerId:
    """图层标识测试."""

    def test_values(self):
        """测试标识值."""
        assert [layer_id.value for layer_id in LayerId] == ["name", "id", "portrait"]

    def test_is_text(self):
        """测试文字图层判断."""
        assert LayerId.NAME.is_text
        assert LayerId.ID.is_text
        assert not LayerId.PORTRAIT.is_text

    def test_hit_test_order(self):
        """测试命中优先级."""
        assert HIT_TEST_ORDER == (LayerId.NAME, LayerId.ID, LayerId.PORTRAIT)


class TestCanvasFrame:
    """画布帧测试."""

    def test_from_image(self):
        """测试取图片原始尺寸."""
        frame = CanvasFrame.from_image(Image.new("RGB", (1024, 640)))
        assert frame.size == (1024, 640)

    def test_positive_dimensions(self):
        """测试尺寸必须为正."""
        with pytest.raises(ValidationError):
            CanvasFrame(width=0, height=100)

    def test_frozen(self, frame):
        """测试画布帧不可修改."""
        with pytest.raises(ValidationError):
            frame.width = 10


class TestTextLayer:
    """文字图层测试."""

    def test_portrait_id_rejected(self):
        """测试文字图层不能使用肖像标识."""
        with pytest.raises(ValidationError):
            TextLayer(id=LayerId.PORTRAIT)

    def test_position(self):
        """测试位置属性."""
        layer = TextLayer(id=LayerId.NAME, text="A", x=0.2, y=0.3)
        assert layer.position == (0.2, 0.3)


class TestPortraitLayer:
    """肖像图层测试."""

    def test_defaults(self):
        """测试默认值."""
        layer = PortraitLayer()
        assert layer.position == (0.1, 0.35)
        assert layer.width == pytest.approx(0.25)
        assert layer.rotation == 0
        assert not layer.has_image

    def test_pixel_size_without_image(self, frame):
        """测试没有图片时没有尺寸."""
        assert PortraitLayer().pixel_size(frame) is None
        assert PortraitLayer().normalized_height(frame) is None

    def test_aspect_preservation(self, frame, portrait_image):
        """测试 300x400 图片在 800 宽画布上宽 0.25 时高 266.67 像素."""
        layer = PortraitLayer(image=portrait_image, width=0.25)
        pw, ph = layer.pixel_size(frame)
        assert pw == pytest.approx(200.0)
        assert ph == pytest.approx(266.67, abs=0.01)
        assert layer.normalized_height(frame) == pytest.approx(266.6667 / 500, abs=1e-4)

    def test_height_follows_width(self, frame, portrait_image):
        """测试修改宽度时高度按比例变化."""
        layer = PortraitLayer(image=portrait_image, width=0.5)
        assert layer.pixel_size(frame) == pytest.approx((400.0, 533.333), abs=1e-3)


class TestSharedParams:
    """共享参数测试."""

    def test_text_rgb(self):
        """测试颜色解析."""
        assert SharedParams(text_color="#ff8000").text_rgb == (255, 128, 0)
        assert SharedParams(text_color="red").text_rgb == (255, 0, 0)

    def test_text_rgb_fallback(self):
        """测试无法解析的颜色回退为黑色."""
        assert SharedParams(text_color="#zzzzzz").text_rgb == (0, 0, 0)
        assert SharedParams(text_color="").text_rgb == (0, 0, 0)
