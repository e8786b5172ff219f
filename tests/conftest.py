"""Pytest 配置和共享 fixtures."""

import os

# Qt 组件测试在无显示环境下运行
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PIL import Image

from src.core.composer import CardComposer
from src.core.config_manager import ConfigManager
from src.core.layer_store import LayerStore
from src.models.layers import CanvasFrame


@pytest.fixture
def frame() -> CanvasFrame:
    """800x500 画布帧（参考宽度）."""
    return CanvasFrame(width=800, height=500)


@pytest.fixture
def base_image() -> Image.Image:
    """800x500 白色底图."""
    return Image.new("RGB", (800, 500), (255, 255, 255))


@pytest.fixture
def portrait_image() -> Image.Image:
    """300x400 红色肖像."""
    return Image.new("RGB", (300, 400), (255, 0, 0))


@pytest.fixture
def store() -> LayerStore:
    """默认文字的图层存储."""
    return LayerStore()


@pytest.fixture
def composer(base_image: Image.Image) -> CardComposer:
    """已载入白色底图的合成器."""
    instance = CardComposer()
    instance.load_base_image(base_image)
    return instance


@pytest.fixture
def config_manager(tmp_path):
    """使用临时用户配置文件的配置管理器."""
    ConfigManager._instance = None
    manager = ConfigManager(user_config_file=tmp_path / "config.json")
    yield manager
    ConfigManager._instance = None
