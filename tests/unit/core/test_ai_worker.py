"""AI 工作线程单元测试."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from PyQt6.QtWidgets import QApplication

from src.core.ai_worker import AIWorker
from src.utils.exceptions import APIRequestError


@pytest.fixture(scope="module")
def app():
    """创建 QApplication 实例."""
    instance = QApplication.instance()
    if instance is None:
        instance = QApplication([])
    yield instance


@pytest.fixture
def service():
    """模拟 AI 服务."""
    mock = MagicMock()
    mock.close = AsyncMock()
    return mock


class TestAIWorker:
    """AI 工作线程测试."""

    def test_success(self, app, service):
        """测试协程结果通过 succeeded 信号发出."""
        results, errors = [], []

        async def task():
            return {"ok": True}

        worker = AIWorker("analyze", task, service)
        worker.succeeded.connect(results.append)
        worker.failed.connect(errors.append)
        worker.run()

        assert results == [{"ok": True}]
        assert errors == []
        service.close.assert_awaited_once()

    def test_failure(self, app, service):
        """测试异常通过 failed 信号发出，服务仍被关闭."""
        results, errors = [], []

        async def task():
            raise APIRequestError("boom", 500)

        worker = AIWorker("portrait", task, service)
        worker.succeeded.connect(results.append)
        worker.failed.connect(errors.append)
        worker.run()

        assert results == []
        assert len(errors) == 1
        assert isinstance(errors[0], APIRequestError)
        service.close.assert_awaited_once()

    def test_without_service(self, app):
        """测试不传服务时正常运行."""
        results = []

        async def task():
            return 42

        worker = AIWorker("analyze", task)
        worker.succeeded.connect(results.append)
        worker.run()
        assert results == [42]
        assert worker.operation == "analyze"
