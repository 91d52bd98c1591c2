"""OpenAI-compatible chat-completions wire format."""

from ..models.llm_config import LLMConfig
from .base import AssistantMessage, ProviderDescriptor, WireFormat, WireRequest

# Sent when no key is configured; local servers such as Ollama ignore it but
# the client library insists on a value.
NO_KEY_PLACEHOLDER = "no-key-required"

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


class OpenAICompatibleFormat(WireFormat):
    def build_request(
        self, config: LLMConfig, provider: ProviderDescriptor, messages: list
    ) -> WireRequest:
        if config.max_tokens is not None:
            max_tokens = config.max_tokens
        elif provider.max_tokens is not None:
            max_tokens = provider.max_tokens
        else:
            max_tokens = DEFAULT_MAX_TOKENS

        body = {
            "model": config.model or provider.default_model,
            # Only role/content reach the backend; ids and timestamps stay local.
            "messages": [
                {"role": m.get("role"), "content": m.get("content")} for m in messages
            ],
            "temperature": (
                config.temperature if config.temperature is not None else DEFAULT_TEMPERATURE
            ),
            "max_tokens": max_tokens,
        }
        return WireRequest(
            base_url=config.custom_base_url or provider.base_url,
            api_key=config.api_key or NO_KEY_PLACEHOLDER,
            body=body,
        )

    def parse_response(self, body: dict) -> AssistantMessage | None:
        choices = body.get("choices") if isinstance(body, dict) else None
        if not isinstance(choices, list) or not choices:
            return None
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict) or not message:
            return None
        content = message.get("content")
        if content is not None and not isinstance(content, str):
            return None
        role = message.get("role")
        return AssistantMessage(
            role=role if isinstance(role, str) and role else "assistant",
            content=content or "",
        )
