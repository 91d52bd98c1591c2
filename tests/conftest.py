"""Shared pytest fixtures."""

import json

import httpx
import pytest
from openai import AsyncOpenAI

from src.models.llm_config import LLMConfig
from src.storage.json_store import LocalStore


class FakeProvider:
    """Stands in for an OpenAI-compatible endpoint.

    Every outbound request is recorded; the response is whatever the test
    configured via ``reply``/``fail``/``refuse_connections``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status = 200
        self.body: dict = {}
        self.refuse = False
        self.reply("Hi there")

    def reply(self, content: str, role: str = "assistant") -> None:
        self.status = 200
        self.body = {
            "id": "chatcmpl-123",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "gpt-3.5-turbo",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": role, "content": content, "refusal": None},
                    "finish_reason": "stop",
                }
            ],
            "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
        }

    def fail(self, status: int, message: str = "error", code: str | None = None) -> None:
        self.status = status
        self.body = {"error": {"message": message, "type": "api_error", "code": code}}

    def refuse_connections(self) -> None:
        self.refuse = True

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.refuse:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)
        return httpx.Response(self.status, json=self.body)

    def client_factory(self, base_url: str, api_key: str) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self._handle)),
        )


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def openai_config() -> LLMConfig:
    return LLMConfig(
        provider_id="openai",
        model="gpt-4o",
        api_key="sk-test",
        temperature=0.5,
        max_tokens=256,
    )


@pytest.fixture
def ollama_config() -> LLMConfig:
    return LLMConfig(provider_id="ollama", model="mistral", api_key="")


@pytest.fixture
def local_store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path)


@pytest.fixture
def hello_messages() -> list[dict]:
    return [{"role": "user", "content": "Hello"}]
