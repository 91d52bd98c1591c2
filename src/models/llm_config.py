"""User-editable LLM configuration, persisted between sessions."""

import json
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_PROVIDER_ID = "openai"
DEFAULT_MODEL = "gpt-3.5-turbo"


@dataclass(frozen=True)
class LLMConfig:
    provider_id: str = DEFAULT_PROVIDER_ID
    model: str = DEFAULT_MODEL          # not checked against the provider's model list
    api_key: Optional[str] = None
    custom_base_url: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None

    @classmethod
    def default(cls) -> "LLMConfig":
        """Settings used before the user has configured anything."""
        return cls(api_key="", temperature=0.7, max_tokens=1000)

    @classmethod
    def from_legacy_api_key(cls, api_key: str) -> "LLMConfig":
        """Wrap a bare OpenAI key saved by the single-provider client."""
        return cls(
            provider_id=DEFAULT_PROVIDER_ID,
            model=DEFAULT_MODEL,
            api_key=api_key,
            temperature=0.7,
            max_tokens=1000,
        )

    def with_provider(self, provider) -> "LLMConfig":
        """Switch to *provider*, resetting model and token limit to its defaults."""
        return replace(
            self,
            provider_id=provider.id,
            model=provider.default_model,
            max_tokens=provider.max_tokens or 1000,
        )

    def to_dict(self) -> dict:
        data = {"providerId": self.provider_id, "model": self.model}
        if self.api_key is not None:
            data["apiKey"] = self.api_key
        if self.custom_base_url is not None:
            data["customBaseURL"] = self.custom_base_url
        if self.temperature is not None:
            data["temperature"] = self.temperature
        if self.max_tokens is not None:
            data["maxTokens"] = self.max_tokens
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LLMConfig":
        return cls(
            provider_id=data.get("providerId", ""),
            model=data.get("model", "") or "",
            api_key=data.get("apiKey"),
            custom_base_url=data.get("customBaseURL"),
            temperature=data.get("temperature"),
            max_tokens=data.get("maxTokens"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "LLMConfig":
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("LLM config must be a JSON object")
        return cls.from_dict(data)
