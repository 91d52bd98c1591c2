"""RequestTranslator — one provider-agnostic chat completion per call."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Optional

from openai import AsyncOpenAI

from ..models.llm_config import LLMConfig
from ..providers import AssistantMessage, create_wire_format, get_provider
from .errors import (
    API_KEY_REQUIRED_MESSAGE,
    CONFIG_MISSING_MESSAGE,
    EMPTY_RESPONSE_MESSAGE,
    MESSAGES_INVALID_MESSAGE,
    UNKNOWN_PROVIDER_MESSAGE,
    ErrorKind,
    TranslationError,
    error_from_signal,
    signal_from_exception,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str], AsyncOpenAI]


def default_client_factory(base_url: str, api_key: str) -> AsyncOpenAI:
    # Exactly one attempt per call; retrying is left to the user.
    return AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)


@dataclass(frozen=True)
class TranslationResult:
    message: Optional[AssistantMessage] = None
    error: Optional[TranslationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _failure(kind: ErrorKind, message: str) -> TranslationResult:
    return TranslationResult(error=TranslationError(kind=kind, message=message))


def _as_wire_message(item) -> dict | None:
    if isinstance(item, Mapping):
        return dict(item)
    if hasattr(item, "role") and hasattr(item, "content"):
        return {"role": item.role, "content": item.content}
    return None


class RequestTranslator:
    """Validates a request, sends it to the configured provider, and
    normalizes the outcome.

    ``complete`` never raises: every failure comes back as a
    ``TranslationResult`` carrying a ``TranslationError``.
    """

    def __init__(self, client_factory: ClientFactory | None = None) -> None:
        self._client_factory = client_factory or default_client_factory

    async def complete(self, messages, config) -> TranslationResult:
        """Run one chat completion.

        Args:
            messages: Ordered list of ``{role, content}`` mappings (or objects
                with ``role`` and ``content`` attributes).
            config: ``LLMConfig`` or its serialized dict form.

        Returns:
            TranslationResult with either the assistant message or an error.
        """
        # --- Preconditions, checked in order, before any network I/O ---
        if isinstance(config, Mapping) and config:
            config = LLMConfig.from_dict(config)
        if not isinstance(config, LLMConfig):
            return _failure(ErrorKind.CONFIG_MISSING, CONFIG_MISSING_MESSAGE)

        if not isinstance(messages, (list, tuple)):
            return _failure(ErrorKind.MESSAGES_INVALID, MESSAGES_INVALID_MESSAGE)
        wire_messages = [_as_wire_message(m) for m in messages]
        if any(m is None for m in wire_messages):
            return _failure(ErrorKind.MESSAGES_INVALID, MESSAGES_INVALID_MESSAGE)

        provider = get_provider(config.provider_id)
        if provider is None:
            return _failure(ErrorKind.UNKNOWN_PROVIDER, UNKNOWN_PROVIDER_MESSAGE)

        if provider.requires_api_key and not config.api_key:
            return _failure(
                ErrorKind.API_KEY_REQUIRED,
                API_KEY_REQUIRED_MESSAGE.format(provider=provider.name),
            )

        # --- Outbound call ---
        wire_format = create_wire_format(provider)
        request = wire_format.build_request(config, provider, wire_messages)
        logger.info(
            "Requesting completion from %s (model=%s, %d messages)",
            provider.id,
            request.body["model"],
            len(wire_messages),
        )

        try:
            async with self._client_factory(request.base_url, request.api_key) as client:
                raw = await client.chat.completions.with_raw_response.create(**request.body)
                body = raw.http_response.json()
        except Exception as exc:
            signal = signal_from_exception(exc)
            error = error_from_signal(signal)
            logger.warning(
                "Completion from %s failed (%s): %s",
                provider.id,
                error.kind.value,
                signal.message,
            )
            return TranslationResult(error=error)

        reply = wire_format.parse_response(body)
        if reply is None:
            logger.warning("Empty completion body from %s", provider.id)
            return _failure(
                ErrorKind.EMPTY_RESPONSE,
                EMPTY_RESPONSE_MESSAGE.format(provider=provider.name),
            )
        return TranslationResult(message=reply)
