"""LLM provider registry."""

from .base import AssistantMessage, ProviderDescriptor, WireFormat, WireRequest
from .catalog import PROVIDERS
from .openai_provider import OpenAICompatibleFormat

__all__ = [
    "AssistantMessage",
    "ProviderDescriptor",
    "WireFormat",
    "WireRequest",
    "OpenAICompatibleFormat",
    "PROVIDERS",
    "get_provider",
    "list_providers",
    "create_wire_format",
]

_BY_ID = {p.id: p for p in PROVIDERS}


def get_provider(provider_id: str) -> ProviderDescriptor | None:
    """Return the descriptor registered under *provider_id*, or None."""
    if not isinstance(provider_id, str):
        return None
    return _BY_ID.get(provider_id)


def list_providers() -> list[ProviderDescriptor]:
    """Return every known provider in registration order."""
    return list(PROVIDERS)


def create_wire_format(provider: ProviderDescriptor) -> WireFormat:
    """Instantiate the wire format a provider speaks.

    Anthropic is listed with the OpenAI-compatible format as well: reaching its
    native endpoint needs an OpenAI-compatible proxy in front of it.
    """
    if provider.wire_format == "openai":
        return OpenAICompatibleFormat()
    raise ValueError(
        f"Unknown wire format '{provider.wire_format}' for provider '{provider.id}'."
    )
