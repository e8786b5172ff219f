"""命中测试单元测试."""

import pytest

from src.core.hit_tester import (
    find_hit_layer,
    hit_test_portrait,
    hit_test_text,
    text_bounds,
)
from src.core.text_metrics import measure_text_width
from src.models.layers import LayerId


@pytest.fixture
def store_with_portrait(store, portrait_image):
    """带 300x400 肖像的图层存储."""
    store.set_portrait_image(portrait_image)
    return store


class TestTextHit:
    """文字图层命中测试."""

    def test_bounds(self, store, frame):
        """测试包围盒由位置、测量宽度和像素字号组成."""
        left, top, right, bottom = text_bounds(store.name_layer, store.shared, frame)
        assert (left, top) == pytest.approx((408.0, 220.0))
        assert right - left == pytest.approx(measure_text_width("JEAN DUPONT", 15))
        assert bottom - top == pytest.approx(15.0)

    def test_inside(self, store, frame):
        """测试包围盒内命中."""
        assert hit_test_text(store.name_layer, store.shared, (410, 222), frame)

    def test_outside(self, store, frame):
        """测试包围盒外不命中."""
        assert not hit_test_text(store.name_layer, store.shared, (400, 222), frame)
        assert not hit_test_text(store.name_layer, store.shared, (410, 240), frame)

    def test_empty_text_never_hits(self, store, frame):
        """测试空文字不命中."""
        store.set_text(LayerId.NAME, "")
        assert not hit_test_text(store.name_layer, store.shared, (408, 220), frame)

    def test_font_size_scales_box(self, store, frame):
        """测试字号变大时包围盒变高."""
        assert not hit_test_text(store.name_layer, store.shared, (410, 245), frame)
        store.set_shared_font_size(30)
        assert hit_test_text(store.name_layer, store.shared, (410, 245), frame)


class TestPortraitHit:
    """肖像图层命中测试."""

    def test_no_image_never_hits(self, store, frame):
        """测试没有肖像图片时不命中."""
        assert not hit_test_portrait(store.portrait, (180, 308), frame)

    def test_center_hits(self, store_with_portrait, frame):
        """测试中心点命中."""
        assert hit_test_portrait(store_with_portrait.portrait, (180, 308), frame)

    def test_bounds_follow_aspect(self, store_with_portrait, frame):
        """测试包围盒高度由宽高比推导."""
        portrait = store_with_portrait.portrait
        # 左上角 (80, 175)，尺寸 200 x 266.67
        assert hit_test_portrait(portrait, (81, 176), frame)
        assert hit_test_portrait(portrait, (279, 441), frame)
        assert not hit_test_portrait(portrait, (281, 300), frame)
        assert not hit_test_portrait(portrait, (180, 443), frame)


class TestRotationAsymmetry:
    """文字与肖像对旋转的处理不同."""

    def test_text_ignores_rotation(self, store, frame):
        """测试文字旋转 45° 后仍按未旋转的包围盒命中."""
        store.set_shared_text_rotation(45)
        left, top, right, bottom = text_bounds(store.name_layer, store.shared, frame)
        # 右下角附近在视觉上已转到别处
        assert hit_test_text(store.name_layer, store.shared, (right - 1, bottom - 1), frame)

    def test_portrait_uses_rotated_box(self, store_with_portrait, frame):
        """测试肖像旋转 45° 后按旋转后的包围盒命中."""
        store_with_portrait.set_portrait_rotation(45)
        portrait = store_with_portrait.portrait

        # 局部坐标 (90, -100) 旋转 45° 后落在未旋转包围盒右侧之外
        inside_rotated_only = (180 + 134.35, 308.33 - 7.07)
        assert inside_rotated_only[0] > 280
        assert hit_test_portrait(portrait, inside_rotated_only, frame)

        # 未旋转包围盒的左上角附近，旋转后在盒外
        assert not hit_test_portrait(portrait, (85, 180), frame)

    def test_behaviors_differ(self, store_with_portrait, frame):
        """测试两种命中方式的差异不会被"修正"掉."""
        store = store_with_portrait
        store.set_shared_text_rotation(45)
        store.set_portrait_rotation(45)

        left, top, right, bottom = text_bounds(store.name_layer, store.shared, frame)
        assert hit_test_text(store.name_layer, store.shared, (right - 1, bottom - 1), frame)
        assert not hit_test_portrait(store.portrait, (85, 180), frame)


class TestFindHitLayer:
    """命中优先级测试."""

    def test_name_layer(self, store, frame):
        """测试命中姓名图层."""
        assert find_hit_layer(store, (410, 222), frame) is LayerId.NAME

    def test_id_layer(self, store, frame):
        """测试命中证件号图层."""
        assert find_hit_layer(store, (434, 247), frame) is LayerId.ID

    def test_miss(self, store, frame):
        """测试空白处不命中."""
        assert find_hit_layer(store, (5, 5), frame) is None

    def test_text_has_priority_over_portrait(self, store_with_portrait, frame):
        """测试文字与肖像重叠时文字优先."""
        store = store_with_portrait
        store.set_text_position(LayerId.NAME, 0.15, 0.5)
        pointer = (122, 252)
        assert hit_test_portrait(store.portrait, pointer, frame)
        assert find_hit_layer(store, pointer, frame) is LayerId.NAME

    def test_portrait_hit(self, store_with_portrait, frame):
        """测试命中肖像."""
        assert find_hit_layer(store_with_portrait, (180, 308), frame) is LayerId.PORTRAIT
