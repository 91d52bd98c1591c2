"""Provider descriptors and the wire-format interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ..models.llm_config import LLMConfig


@dataclass(frozen=True)
class ProviderDescriptor:
    id: str
    name: str
    base_url: str
    default_model: str
    available_models: tuple = ()
    api_key_format: str = ""       # display hint only, never validated
    requires_api_key: bool = True
    max_tokens: Optional[int] = None
    supports_streaming: Optional[bool] = None
    description: str = ""
    key_url: str = ""
    wire_format: str = "openai"


@dataclass(frozen=True)
class AssistantMessage:
    role: str
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}


@dataclass
class WireRequest:
    """One outbound call: where to send it, with which key, and the body."""

    base_url: str
    api_key: str
    body: dict = field(default_factory=dict)


class WireFormat(ABC):
    """Builds provider requests and reads provider responses.

    Every call site goes through this interface, so a provider family with a
    different envelope only needs its own implementation.
    """

    @abstractmethod
    def build_request(
        self, config: LLMConfig, provider: ProviderDescriptor, messages: list
    ) -> WireRequest:
        """Resolve effective settings and build the outbound request.

        Args:
            config: The caller's LLM configuration.
            provider: Descriptor that ``config.provider_id`` resolved to.
            messages: Mappings with at least ``role`` and ``content`` keys.

        Returns:
            WireRequest ready to be sent.
        """

    @abstractmethod
    def parse_response(self, body: dict) -> AssistantMessage | None:
        """Extract the assistant reply, or None when the body carries none."""
