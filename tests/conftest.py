from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from labassist.config import Settings
from labassist.core.context import create_context
from labassist.main import app
from labassist.routers.deps import get_context


class FakeGateway:
    """Scripted stand-in for GeminiClient."""

    def __init__(self) -> None:
        self.is_available = True
        self.replies: list = []
        self.converse_calls: list = []
        self.extract_result: dict = {}
        self.extract_error: Exception | None = None
        self.extract_calls: list = []

    async def converse(self, history, user_text, system_prompt):
        self.converse_calls.append((list(history), user_text, system_prompt))
        reply = self.replies.pop(0) if self.replies else None
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def extract_metrics(self, document, file_name):
        self.extract_calls.append(file_name)
        if self.extract_error is not None:
            raise self.extract_error
        return dict(self.extract_result)


class ManualScheduler:
    """Collects timers; ``run_all`` fires them in order."""

    def __init__(self) -> None:
        self.pending: list = []

    def __call__(self, delay, callback) -> None:
        self.pending.append((delay, callback))

    def run_all(self) -> None:
        pending, self.pending = self.pending, []
        for _, callback in pending:
            callback()


def immediate(delay, callback) -> None:
    callback()


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(GEMINI_API_KEY="", GOOGLE_CLOUD_PROJECT="", _env_file=None)


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def ctx(test_settings, gateway):
    context = create_context(test_settings, gateway=gateway, scheduler=immediate)
    yield context
    context.close()


@pytest.fixture()
def client(ctx) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_context] = lambda: ctx
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
