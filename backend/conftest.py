import httpx
import pytest
from fastapi.testclient import TestClient

from main import app, get_settings, get_summarizer, get_transport
from settings import Settings

CONFIGURED = Settings(kanoon_api_token="test-token", kanoon_base_url="https://kanoon.test")
UNCONFIGURED = Settings(kanoon_api_token=None, kanoon_base_url="https://kanoon.test")


class UpstreamStub:
    """Fake api.indiankanoon.org: records requests, replays one canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.kwargs = {"json": {}}
        self.error = None

    def respond(self, status_code=200, **kwargs):
        self.status_code = status_code
        self.kwargs = kwargs

    def fail(self, error: Exception):
        self.error = error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, **self.kwargs)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def client(upstream):
    app.dependency_overrides[get_settings] = lambda: CONFIGURED
    app.dependency_overrides[get_transport] = upstream.transport
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client(upstream):
    app.dependency_overrides[get_settings] = lambda: UNCONFIGURED
    app.dependency_overrides[get_transport] = upstream.transport
    yield TestClient(app)
    app.dependency_overrides.clear()


class FakeSummarizer:
    def __init__(self):
        self.sections: list[str] = []
        self.judgments: list[tuple[str, str]] = []
        self.questions: list[str] = []

    async def summarize_section(self, text: str) -> str:
        self.sections.append(text)
        return "section summary"

    async def summarize_judgment(self, title: str, html: str) -> str:
        self.judgments.append((title, html))
        return "judgment summary"

    async def answer_question(self, question: str) -> str:
        self.questions.append(question)
        return "legal answer"


@pytest.fixture
def fake_summarizer():
    fake = FakeSummarizer()
    app.dependency_overrides[get_summarizer] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_summarizer, None)
