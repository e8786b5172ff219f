"""应用设置与 AI 配置单元测试."""

import pytest
from pydantic import SecretStr, ValidationError

from src.models.api_config import AIConfig
from src.models.app_settings import Settings

_ENV_VARS = (
    "LOG_LEVEL",
    "AI_PROVIDER",
    "GEMINI_API_KEY",
    "API_KEY",
    "OPENAI_API_KEY",
    "OPENAI_API_BASE",
    "LAYOUT_MODEL",
    "PORTRAIT_MODEL",
    "API_TIMEOUT",
    "EXPORT_QUALITY",
    "DEBUG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """清除可能影响设置的环境变量."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """应用设置测试."""

    def test_defaults(self):
        """测试默认值."""
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.ai_provider == "gemini"
        assert settings.gemini_api_key is None
        assert settings.export_quality == 95
        assert settings.card_font_path is None
        assert not settings.debug

    def test_log_level_normalized(self, monkeypatch):
        """测试日志级别转为大写."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        """测试无效日志级别."""
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_api_key_alias(self, monkeypatch):
        """测试从 API_KEY 读取 Gemini 密钥."""
        monkeypatch.setenv("API_KEY", "from-api-key")
        settings = Settings(_env_file=None)
        assert settings.gemini_api_key.get_secret_value() == "from-api-key"

    def test_gemini_key_preferred(self, monkeypatch):
        """测试同时设置时优先使用 GEMINI_API_KEY."""
        monkeypatch.setenv("API_KEY", "generic")
        monkeypatch.setenv("GEMINI_API_KEY", "specific")
        settings = Settings(_env_file=None)
        assert settings.gemini_api_key.get_secret_value() == "specific"

    def test_invalid_provider(self, monkeypatch):
        """测试不支持的服务商."""
        monkeypatch.setenv("AI_PROVIDER", "dashscope")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_debug_forces_debug_level(self, monkeypatch):
        """测试调试模式强制 DEBUG 日志级别."""
        monkeypatch.setenv("DEBUG", "true")
        assert Settings(_env_file=None).effective_log_level == "DEBUG"

    def test_env_file(self, tmp_path):
        """测试从 .env 文件加载."""
        env_file = tmp_path / ".env"
        env_file.write_text("AI_PROVIDER=openai\nOPENAI_API_KEY=sk-test\n", encoding="utf-8")
        settings = Settings(_env_file=env_file)
        assert settings.ai_provider == "openai"
        assert settings.openai_api_key.get_secret_value() == "sk-test"


class TestAIConfig:
    """AI 配置测试."""

    def test_defaults(self):
        """测试默认配置没有密钥."""
        config = AIConfig()
        assert config.provider == "gemini"
        assert not config.has_api_key
        assert config.get_api_key_value() is None

    def test_base_url_normalized(self):
        """测试 URL 去除末尾斜杠."""
        config = AIConfig(base_url="https://api.example.com/v1/")
        assert config.base_url == "https://api.example.com/v1"

    def test_invalid_base_url(self):
        """测试 URL 必须带协议."""
        with pytest.raises(ValidationError):
            AIConfig(base_url="api.example.com")

    def test_empty_key_is_missing(self):
        """测试空字符串密钥视为未配置."""
        assert not AIConfig(api_key=SecretStr("")).has_api_key

    def test_safe_dict_hides_key(self):
        """测试安全字典不包含密钥."""
        config = AIConfig(api_key=SecretStr("super-secret"))
        safe = config.to_safe_dict()
        assert safe["has_api_key"] is True
        assert "super-secret" not in str(safe)

    def test_from_settings_gemini(self, monkeypatch):
        """测试 Gemini 服务商使用 Gemini 密钥."""
        monkeypatch.setenv("GEMINI_API_KEY", "g-key")
        monkeypatch.setenv("OPENAI_API_KEY", "o-key")
        monkeypatch.setenv("LAYOUT_MODEL", "gemini-custom")
        config = AIConfig.from_settings(Settings(_env_file=None))
        assert config.provider == "gemini"
        assert config.get_api_key_value() == "g-key"
        assert config.layout_model == "gemini-custom"

    def test_from_settings_openai(self, monkeypatch):
        """测试 OpenAI 服务商使用 OpenAI 密钥与 URL."""
        monkeypatch.setenv("AI_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "o-key")
        monkeypatch.setenv("OPENAI_API_BASE", "https://proxy.example.com/v1")
        config = AIConfig.from_settings(Settings(_env_file=None))
        assert config.provider == "openai"
        assert config.get_api_key_value() == "o-key"
        assert config.base_url == "https://proxy.example.com/v1"
