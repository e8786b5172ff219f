"""异步重试装饰器.

AI 提供者用它包装网络调用，仅对指定的瞬时异常（连接失败、限流）重试，
其余异常直接向上抛出。
"""

from __future__ import annotations

import asyncio
import functools
from typing import Any, Callable, Optional, Tuple, Type, TypeVar

from src.utils.logger import setup_logger

logger = setup_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def async_retry(
    max_retries: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    max_delay: float = 30.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    on_retry: Optional[Callable[[int, BaseException], None]] = None,
) -> Callable[[F], F]:
    """异步重试装饰器.

    Args:
        max_retries: 最大重试次数（不含首次调用）
        delay: 初始延迟（秒）
        backoff: 退避乘数
        max_delay: 最大延迟（秒）
        exceptions: 需要重试的异常类型
        on_retry: 每次重试前的回调 (attempt, exception)

    Returns:
        装饰器函数

    Example:
        >>> @async_retry(max_retries=2, exceptions=(ConnectionError,))
        ... async def fetch():
        ...     ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            current_delay = delay
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_retries:
                        logger.error(
                            f"{func.__name__} 重试 {max_retries} 次后仍然失败: {e}"
                        )
                        raise
                    attempt += 1
                    logger.warning(
                        f"{func.__name__} 执行失败 (尝试 {attempt}/{max_retries + 1}): {e}"
                    )
                    if on_retry:
                        on_retry(attempt, e)
                    await asyncio.sleep(current_delay)
                    current_delay = min(current_delay * backoff, max_delay)

        return wrapper  # type: ignore

    return decorator
