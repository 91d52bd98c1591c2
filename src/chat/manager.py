"""ConversationManager — owns the client chat state and runs its side effects."""

import logging
from collections.abc import Callable

from ..models.conversation import Conversation, Message
from ..models.llm_config import LLMConfig
from ..storage.json_store import LocalStore
from ..translator.errors import FALLBACK_MESSAGE, ErrorKind, TranslationError
from . import state as transitions
from .client import TranslatorClient
from .state import (
    ChatState,
    PersistConfig,
    PersistLegacyApiKey,
    RequestCompletion,
    Transition,
)

logger = logging.getLogger(__name__)

Listener = Callable[[ChatState], None]


class ConversationManager:
    """Single owner of the conversation list, active conversation and config.

    The UI reads ``state`` and calls the operations below; it never mutates
    anything directly. At most one send is in flight at any time: a send
    attempted meanwhile is ignored, not queued.
    """

    def __init__(
        self,
        client: TranslatorClient,
        store: LocalStore,
        on_change: Listener | None = None,
    ) -> None:
        self._client = client
        self._store = store
        self._on_change = on_change
        self._state = ChatState()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def active_conversation(self) -> Conversation | None:
        return self._state.active_conversation

    def initialize(self) -> ChatState:
        """Load persisted settings (migrating a legacy key) and open a chat."""
        saved = self._store.load_config()
        legacy_key = None if saved is not None else self._store.load_legacy_api_key()
        if saved is None and legacy_key:
            logger.info("Migrating legacy API key to LLM config")
        self._apply(transitions.restore(saved, legacy_key))
        return self._state

    def create_conversation(self) -> Conversation:
        self._apply(transitions.create_conversation(self._state))
        return self._state.active_conversation

    def select_conversation(self, conversation_id: str) -> None:
        self._apply(transitions.select_conversation(self._state, conversation_id))

    async def send_message(self, text: str) -> Message | None:
        """Send *text* in the active conversation and wait for the reply.

        Returns:
            The assistant message on success, otherwise None (including the
            no-op cases). Failures are recorded in ``state.error``.
        """
        transition = transitions.begin_send(self._state, text)
        requests = [e for e in transition.effects if isinstance(e, RequestCompletion)]
        if not requests:
            return None
        self._apply(transition)
        request = requests[0]

        try:
            result = await self._client.complete(list(request.messages), request.config)
        except Exception as exc:
            logger.exception("Error calling LLM")
            self._fail(
                TranslationError(kind=ErrorKind.UNKNOWN, message=str(exc) or FALLBACK_MESSAGE)
            )
            return None

        if result.error is not None:
            self._fail(result.error)
            return None

        self._apply(transitions.finish_send(self._state, request.conversation_id, result.message))
        self._apply(transitions.settle(self._state))
        conversation = self._state.find(request.conversation_id)
        return conversation.messages[-1] if conversation else None

    def update_config(self, config: LLMConfig) -> None:
        self._apply(transitions.update_config(self._state, config))

    def set_api_key(self, api_key: str) -> None:
        self._apply(transitions.set_api_key(self._state, api_key))

    def close_config_prompt(self) -> None:
        self._apply(transitions.close_config_prompt(self._state))

    def has_valid_config(self) -> bool:
        return self._state.has_valid_config()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fail(self, error: TranslationError) -> None:
        logger.warning("Chat turn failed (%s): %s", error.kind.value, error.message)
        self._apply(transitions.fail_send(self._state, error))
        self._apply(transitions.settle(self._state))

    def _apply(self, transition: Transition) -> None:
        self._state = transition.state
        for effect in transition.effects:
            if isinstance(effect, PersistConfig):
                self._store.save_config(effect.config)
            elif isinstance(effect, PersistLegacyApiKey):
                self._store.save_legacy_api_key(effect.api_key)
            # RequestCompletion is awaited by send_message itself.
        if self._on_change is not None:
            self._on_change(self._state)
