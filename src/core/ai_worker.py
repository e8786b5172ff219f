"""AI 任务工作线程.

在 Qt 后台线程的独立事件循环中运行 AI 协程，避免阻塞界面。
结果通过信号回到界面线程，由界面线程修改合成状态。
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from src.services.ai_service import AIService
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

TaskFactory = Callable[[], Awaitable[Any]]


class AIWorker(QThread):
    """AI 任务线程.

    每个线程执行一个任务，结束后关闭 AI 服务的连接，
    避免客户端跨事件循环复用。

    Signals:
        succeeded: 任务成功信号，参数为协程返回值
        failed: 任务失败信号，参数为异常对象
    """

    succeeded = pyqtSignal(object)  # 协程返回值
    failed = pyqtSignal(object)  # Exception

    def __init__(
        self,
        operation: str,
        task_factory: TaskFactory,
        service: Optional[AIService] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        """初始化工作线程.

        Args:
            operation: 任务名称，用于日志
            task_factory: 无参函数，返回要执行的协程
            service: 任务结束后需要关闭的 AI 服务
            parent: 父对象
        """
        super().__init__(parent)
        self._operation = operation
        self._task_factory = task_factory
        self._service = service

    @property
    def operation(self) -> str:
        return self._operation

    def run(self) -> None:
        """在新的事件循环中执行任务."""
        logger.debug(f"AI 任务开始: {self._operation}")
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            result = loop.run_until_complete(self._run_task())
        except Exception as e:
            logger.error(f"AI 任务失败: {self._operation}, {e}")
            self.failed.emit(e)
        else:
            logger.debug(f"AI 任务完成: {self._operation}")
            self.succeeded.emit(result)
        finally:
            asyncio.set_event_loop(None)
            loop.close()

    async def _run_task(self) -> Any:
        try:
            return await self._task_factory()
        finally:
            if self._service is not None:
                await self._service.close()
