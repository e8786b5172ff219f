"""应用常量定义."""

from pathlib import Path

# ===================
# 应用信息
# ===================
APP_NAME = "证件卡片合成编辑器"
APP_VERSION = "0.3.0"
APP_ORGANIZATION = "IDCard Studio"

# ===================
# 路径常量
# ===================
# 应用数据目录
APP_DATA_DIR = Path.home() / ".idcard-composer"

# 日志目录
LOG_DIR = APP_DATA_DIR / "logs"

# ===================
# 画布与坐标
# ===================
# 字号参考宽度：字号按 画布宽度 / 参考宽度 缩放
REFERENCE_WIDTH = 800

# 占位底图尺寸
PLACEHOLDER_SIZE = (800, 500)

# ===================
# 图层默认值
# ===================
DEFAULT_NAME_TEXT = "JEAN DUPONT"
DEFAULT_ID_TEXT = "12345678-A"

# 载入底图时文字图层重置到的归一化位置
DEFAULT_NAME_POSITION = (0.51, 0.44)
DEFAULT_ID_POSITION = (0.54, 0.49)

DEFAULT_PORTRAIT_POSITION = (0.1, 0.35)

# 共享视觉参数
DEFAULT_TEXT_COLOR = "#000000"
DEFAULT_FONT_SIZE = 15
DEFAULT_TEXT_ROTATION = 6.0
DEFAULT_PORTRAIT_SCALE = 25  # 百分比，对应归一化宽度 0.25
DEFAULT_PORTRAIT_ROTATION = 0.0

# ===================
# 选中框样式
# ===================
SELECTION_COLOR = "#10b981"
TEXT_SELECTION_WIDTH = 2
TEXT_SELECTION_PADDING = 5
# 选中框高度 = 缩放后字号 * 该倍数
TEXT_SELECTION_HEIGHT_RATIO = 1.2
PORTRAIT_SELECTION_WIDTH = 4
PORTRAIT_HANDLE_SIZE = 10

# ===================
# 字体
# ===================
# 依次尝试的等宽粗体字体
CARD_FONT_CANDIDATES = [
    "CourierPrime-Bold.ttf",
    "Courier Prime Bold.ttf",
    "courbd.ttf",
    "Courier New Bold.ttf",
    "DejaVuSansMono-Bold.ttf",
    "LiberationMono-Bold.ttf",
]

FONT_SEARCH_PATHS = [
    "/System/Library/Fonts/",
    "/System/Library/Fonts/Supplemental/",
    "/Library/Fonts/",
    "~/Library/Fonts/",
    "C:/Windows/Fonts/",
    "/usr/share/fonts/truetype/dejavu/",
    "/usr/share/fonts/truetype/liberation/",
    "/usr/share/fonts/truetype/",
    "/usr/share/fonts/",
]

# ===================
# 图片文件
# ===================
SUPPORTED_IMAGE_FORMATS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif"}

# 最大图片文件大小 (50MB)
MAX_IMAGE_FILE_SIZE = 50 * 1024 * 1024

# 发送给布局分析的快照质量
ANALYSIS_SNAPSHOT_QUALITY = 80

# 导出 JPEG 质量
DEFAULT_EXPORT_QUALITY = 95

# ===================
# AI 设置
# ===================
DEFAULT_LAYOUT_MODEL = "gemini-2.5-flash"
DEFAULT_PORTRAIT_MODEL = "imagen-4.0-generate-001"
DEFAULT_OPENAI_LAYOUT_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_PORTRAIT_MODEL = "gpt-image-1"
DEFAULT_API_BASE = "https://api.openai.com/v1"
API_TIMEOUT = 60  # 秒
API_MAX_RETRIES = 3
API_RETRY_DELAY = 1  # 秒

# ===================
# UI 设置
# ===================
WINDOW_MIN_WIDTH = 1100
WINDOW_MIN_HEIGHT = 700

# 控制面板取值范围
FONT_SIZE_RANGE = (8, 60)
TEXT_ROTATION_RANGE = (-45, 45)
PORTRAIT_SCALE_RANGE = (5, 80)
PORTRAIT_ROTATION_RANGE = (-180, 180)
