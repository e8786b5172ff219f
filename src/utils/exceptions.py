"""自定义异常类.

合成引擎本身的操作都是全函数，不会抛出异常；这里的异常只来自外部协作方
（图片解码、AI 服务、文件导出）。
"""

from __future__ import annotations


class AppException(Exception):
    """应用基础异常类.

    Attributes:
        message: 错误消息
        code: 错误代码
    """

    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


# ===================
# 配置相关异常
# ===================
class ConfigError(AppException):
    """配置错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONFIG_ERROR")


# ===================
# AI 服务相关异常
# ===================
class AIServiceError(AppException):
    """AI 服务错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "AI_SERVICE_ERROR")


class APIKeyNotFoundError(AIServiceError):
    """API 密钥未配置."""

    def __init__(self, provider: str = "") -> None:
        label = f" ({provider})" if provider else ""
        super().__init__(f"API 密钥未配置{label}，请设置环境变量或 .env 文件")


class APIRequestError(AIServiceError):
    """API 请求失败."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        msg = message
        if status_code:
            msg = f"API 请求失败 (HTTP {status_code}): {message}"
        super().__init__(msg)


class APITimeoutError(AIServiceError):
    """API 请求超时."""

    def __init__(self, timeout: int) -> None:
        self.timeout = timeout
        super().__init__(f"API 请求超时 ({timeout}秒)")


class EmptyAIResultError(AIServiceError):
    """AI 服务没有返回可用结果."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"AI 返回空结果: {operation}")


# ===================
# 图片处理相关异常
# ===================
class ImageProcessError(AppException):
    """图片处理错误异常."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "IMAGE_PROCESS_ERROR")


class ImageNotFoundError(ImageProcessError):
    """图片文件未找到."""

    def __init__(self, path: str) -> None:
        super().__init__(f"图片文件未找到: {path}")


class UnsupportedImageFormatError(ImageProcessError):
    """不支持的图片格式."""

    def __init__(self, format: str) -> None:
        super().__init__(f"不支持的图片格式: {format}")


class ImageTooLargeError(ImageProcessError):
    """图片文件过大."""

    def __init__(self, size: int, max_size: int) -> None:
        size_mb = size / (1024 * 1024)
        max_mb = max_size / (1024 * 1024)
        super().__init__(f"图片文件过大 ({size_mb:.1f}MB)，最大允许 {max_mb:.1f}MB")


class ImageCorruptedError(ImageProcessError):
    """图片数据损坏或无法解码."""

    def __init__(self, source: str) -> None:
        super().__init__(f"图片损坏或无法读取: {source}")


class ExportError(ImageProcessError):
    """导出合成图失败."""

    def __init__(self, message: str) -> None:
        super().__init__(f"导出失败: {message}")
