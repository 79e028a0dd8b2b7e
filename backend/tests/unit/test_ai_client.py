"""OpenAI client lifetime: one client per application, closed on shutdown."""

from types import SimpleNamespace

from fastapi.testclient import TestClient
import pytest

from directory import main as main_module
from directory.api.dependencies.services import get_ai_client
from directory.services.ai_client import OpenAICompletionClient


class _ClosableStub:
    def __init__(self) -> None:
        self.close_calls = 0

    async def close(self) -> None:
        self.close_calls += 1


def _request_for(state: SimpleNamespace) -> SimpleNamespace:
    return SimpleNamespace(app=SimpleNamespace(state=state))


def test_every_request_shares_the_application_client(fake_ai):
    request = _request_for(SimpleNamespace(ai_client=fake_ai))

    assert get_ai_client(request) is fake_ai
    assert get_ai_client(request) is get_ai_client(request)


def test_missing_client_means_ai_is_not_configured():
    assert get_ai_client(_request_for(SimpleNamespace())) is None


@pytest.mark.asyncio
async def test_close_releases_the_openai_connection_pool():
    stub = _ClosableStub()
    client = OpenAICompletionClient(stub, timeout_s=1.0)

    await client.close()

    assert stub.close_calls == 1


def test_lifespan_builds_one_client_and_closes_it(monkeypatch, fake_ai):
    builds = []

    def build():
        builds.append(fake_ai)
        return fake_ai

    monkeypatch.setattr(main_module, "build_openai_client", build)

    with TestClient(main_module.app) as test_client:
        assert test_client.app.state.ai_client is fake_ai
        assert not fake_ai.closed

    assert len(builds) == 1
    assert fake_ai.closed
