"""Ways for the chat client to reach the request translator."""

import logging
from abc import ABC, abstractmethod

import httpx
import openai

from ..models.llm_config import LLMConfig
from ..providers import AssistantMessage
from ..translator.core import RequestTranslator, TranslationResult
from ..translator.errors import (
    FALLBACK_MESSAGE,
    ErrorKind,
    TranslationError,
    error_from_route_response,
)

logger = logging.getLogger(__name__)


class TranslatorClient(ABC):
    """Uniform access to ``RequestTranslator.complete``."""

    @abstractmethod
    async def complete(self, messages: list, config: LLMConfig) -> TranslationResult:
        """Request one completion for *messages* using *config*."""


class LocalTranslatorClient(TranslatorClient):
    """Calls a RequestTranslator living in the same process."""

    def __init__(self, translator: RequestTranslator | None = None) -> None:
        self._translator = translator or RequestTranslator()

    async def complete(self, messages: list, config: LLMConfig) -> TranslationResult:
        return await self._translator.complete(list(messages), config)


class HttpTranslatorClient(TranslatorClient):
    """Posts to the inbound ``/api/chat`` route.

    Args:
        base_url: Root URL of the API server, e.g. ``http://localhost:8000``.
        http_client: Optional pre-configured ``httpx.AsyncClient``; when given,
            its ``base_url`` is used and the caller owns its lifetime.
    """

    def __init__(self, base_url: str = "", http_client: httpx.AsyncClient | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client

    async def complete(self, messages: list, config: LLMConfig) -> TranslationResult:
        payload = {
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "config": config.to_dict(),
        }
        url = f"{self._base_url}/api/chat"
        if self._http_client is not None:
            response = await self._http_client.post(url, json=payload)
        else:
            # Same limits as the provider call the route is waiting on.
            async with httpx.AsyncClient(timeout=openai.DEFAULT_TIMEOUT) as client:
                response = await client.post(url, json=payload)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.status_code != 200:
            message = data.get("error") or FALLBACK_MESSAGE
            logger.warning("Chat route returned %d: %s", response.status_code, message)
            return TranslationResult(
                error=error_from_route_response(response.status_code, message)
            )

        reply = data.get("message")
        if not isinstance(reply, dict):
            return TranslationResult(
                error=TranslationError(kind=ErrorKind.UNKNOWN, message=FALLBACK_MESSAGE)
            )
        return TranslationResult(
            message=AssistantMessage(
                role=reply.get("role") or "assistant",
                content=reply.get("content") or "",
            )
        )
