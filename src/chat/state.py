"""Client chat state and its transitions.

``ChatState`` is an immutable snapshot of everything the chat client owns:
the conversation list, the active conversation, the LLM configuration and the
turn/error status shown by the UI. Each operation is a pure function returning
a ``Transition``: the next state plus the side effects the caller must run
(persisting settings, requesting a completion). Nothing here does I/O.

Turn lifecycle::

    IDLE --begin_send--> SENDING --finish_send--> SUCCEEDED --settle--> IDLE
                                 --fail_send----> FAILED    --settle--> IDLE
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from ..models.conversation import Conversation, Message
from ..models.llm_config import LLMConfig
from ..providers import AssistantMessage, get_provider
from ..translator.errors import ErrorKind, TranslationError


class TurnPhase(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Side effects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PersistConfig:
    config: LLMConfig


@dataclass(frozen=True)
class PersistLegacyApiKey:
    api_key: str


@dataclass(frozen=True)
class RequestCompletion:
    conversation_id: str
    messages: tuple          # tuple[dict], role/content only
    config: LLMConfig


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChatState:
    conversations: tuple = ()                 # tuple[Conversation], newest first
    active_id: Optional[str] = None
    config: LLMConfig = field(default_factory=LLMConfig.default)
    phase: TurnPhase = TurnPhase.IDLE
    error: str = ""
    error_kind: Optional[ErrorKind] = None
    config_prompt_open: bool = False          # UI should show the settings form

    @property
    def active_conversation(self) -> Conversation | None:
        return self.find(self.active_id)

    @property
    def is_sending(self) -> bool:
        return self.phase == TurnPhase.SENDING

    def find(self, conversation_id: str | None) -> Conversation | None:
        for conv in self.conversations:
            if conv.id == conversation_id:
                return conv
        return None

    def has_valid_config(self) -> bool:
        provider = get_provider(self.config.provider_id)
        return provider is not None and (
            not provider.requires_api_key or bool(self.config.api_key)
        )


@dataclass(frozen=True)
class Transition:
    state: ChatState
    effects: tuple = ()


def _replace_conversation(state: ChatState, updated: Conversation) -> tuple:
    return tuple(updated if c.id == updated.id else c for c in state.conversations)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def restore(saved_config: LLMConfig | None, legacy_api_key: str | None) -> Transition:
    """Build the startup state from whatever settings were persisted.

    A bare legacy API key is migrated into a full config and persisted right
    away, so the migration only ever runs once. With no settings at all, or
    with saved settings that cannot be used as they are, the configuration
    prompt is opened.
    """
    if saved_config is not None:
        state = ChatState(config=saved_config)
        state = replace(state, config_prompt_open=not state.has_valid_config())
        effects: tuple = ()
    elif legacy_api_key:
        migrated = LLMConfig.from_legacy_api_key(legacy_api_key)
        state = ChatState(config=migrated)
        effects = (PersistConfig(migrated),)
    else:
        state = ChatState(config_prompt_open=True)
        effects = ()
    created = create_conversation(state)
    return Transition(created.state, effects + created.effects)


def create_conversation(state: ChatState) -> Transition:
    conversation = Conversation()
    return Transition(
        replace(
            state,
            conversations=(conversation,) + state.conversations,
            active_id=conversation.id,
            error="",
            error_kind=None,
        )
    )


def select_conversation(state: ChatState, conversation_id: str) -> Transition:
    if state.find(conversation_id) is None:
        return Transition(state)
    return Transition(replace(state, active_id=conversation_id))


def begin_send(state: ChatState, text: str) -> Transition:
    """Append the user's message and request a completion.

    No-op for blank text, when there is no active conversation, or while
    another send is in flight.
    """
    content = (text or "").strip()
    conversation = state.active_conversation
    if not content or conversation is None or state.is_sending:
        return Transition(state)

    updated = conversation.append(Message(role="user", content=content))
    next_state = replace(
        state,
        conversations=_replace_conversation(state, updated),
        phase=TurnPhase.SENDING,
        error="",
        error_kind=None,
    )
    request = RequestCompletion(
        conversation_id=updated.id,
        messages=tuple(updated.wire_messages()),
        config=state.config,
    )
    return Transition(next_state, (request,))


def finish_send(state: ChatState, conversation_id: str, reply: AssistantMessage) -> Transition:
    conversation = state.find(conversation_id)
    if conversation is None:
        return Transition(replace(state, phase=TurnPhase.SUCCEEDED))
    updated = conversation.append(Message(role="assistant", content=reply.content))
    return Transition(
        replace(
            state,
            conversations=_replace_conversation(state, updated),
            phase=TurnPhase.SUCCEEDED,
        )
    )


def fail_send(state: ChatState, error: TranslationError) -> Transition:
    """Record a failed turn. The user's message stays in the conversation."""
    return Transition(
        replace(
            state,
            phase=TurnPhase.FAILED,
            error=error.message,
            error_kind=error.kind,
            config_prompt_open=state.config_prompt_open or error.needs_reconfiguration,
        )
    )


def settle(state: ChatState) -> Transition:
    return Transition(replace(state, phase=TurnPhase.IDLE))


def update_config(state: ChatState, config: LLMConfig) -> Transition:
    return Transition(
        replace(
            state,
            config=config,
            error="",
            error_kind=None,
            config_prompt_open=False,
        ),
        (PersistConfig(config),),
    )


def set_api_key(state: ChatState, api_key: str) -> Transition:
    """Change only the API key, keeping the legacy key record in sync."""
    config = replace(state.config, api_key=api_key)
    return Transition(
        replace(state, config=config, error="", error_kind=None),
        (PersistLegacyApiKey(api_key), PersistConfig(config)),
    )


def close_config_prompt(state: ChatState) -> Transition:
    return Transition(replace(state, config_prompt_open=False))
