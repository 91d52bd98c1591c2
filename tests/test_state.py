"""Tests for the pure chat-state transitions in src/chat/state.py."""

from dataclasses import replace

import pytest

from src.chat import state as chat
from src.chat.state import (
    ChatState,
    PersistConfig,
    PersistLegacyApiKey,
    RequestCompletion,
    TurnPhase,
)
from src.models.llm_config import LLMConfig
from src.providers import AssistantMessage
from src.translator.errors import ErrorKind, TranslationError


@pytest.fixture
def ready(openai_config) -> ChatState:
    """A state with one empty active conversation and a usable config."""
    return chat.create_conversation(ChatState(config=openai_config)).state


# ---------------------------------------------------------------------------
# restore
# ---------------------------------------------------------------------------


class TestRestore:
    def test_saved_config_is_used_as_is(self, openai_config):
        transition = chat.restore(openai_config, "sk-legacy")

        assert transition.state.config == openai_config
        assert transition.effects == ()
        assert transition.state.config_prompt_open is False

    def test_legacy_key_is_migrated_and_persisted(self):
        transition = chat.restore(None, "sk-legacy")

        expected = LLMConfig.from_legacy_api_key("sk-legacy")
        assert transition.state.config == expected
        assert transition.effects == (PersistConfig(expected),)

    @pytest.mark.parametrize(
        "config",
        [
            LLMConfig(provider_id="acme", model="x", api_key="k"),
            LLMConfig(provider_id="", model="gpt-4o", api_key="k"),
            LLMConfig(provider_id="openai", model="gpt-4o", api_key=""),
        ],
    )
    def test_unusable_saved_config_opens_config_prompt(self, config):
        transition = chat.restore(config, None)

        assert transition.state.config == config
        assert transition.state.config_prompt_open is True

    def test_saved_keyless_provider_needs_no_prompt(self, ollama_config):
        assert chat.restore(ollama_config, None).state.config_prompt_open is False

    def test_nothing_saved_opens_config_prompt(self):
        transition = chat.restore(None, None)

        assert transition.state.config_prompt_open is True
        assert transition.effects == ()

    def test_starts_with_one_active_conversation(self):
        state = chat.restore(None, None).state

        assert len(state.conversations) == 1
        assert state.active_id == state.conversations[0].id
        assert state.phase == TurnPhase.IDLE


# ---------------------------------------------------------------------------
# Conversations
# ---------------------------------------------------------------------------


class TestConversations:
    def test_create_prepends_and_activates(self, ready):
        first_id = ready.active_id

        state = chat.create_conversation(ready).state

        assert len(state.conversations) == 2
        assert state.conversations[1].id == first_id
        assert state.active_id == state.conversations[0].id
        assert state.active_conversation.title == "New Chat"

    def test_create_clears_error(self, ready):
        failed = replace(ready, error="boom", error_kind=ErrorKind.UNKNOWN)

        state = chat.create_conversation(failed).state

        assert state.error == ""
        assert state.error_kind is None

    def test_select_existing(self, ready):
        first_id = ready.active_id
        state = chat.create_conversation(ready).state

        state = chat.select_conversation(state, first_id).state

        assert state.active_id == first_id

    def test_select_unknown_is_ignored(self, ready):
        assert chat.select_conversation(ready, "nope").state is ready


# ---------------------------------------------------------------------------
# Sending
# ---------------------------------------------------------------------------


class TestBeginSend:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_text_is_noop(self, ready, text):
        transition = chat.begin_send(ready, text)

        assert transition.state is ready
        assert transition.effects == ()

    def test_no_active_conversation_is_noop(self, openai_config):
        state = ChatState(config=openai_config)

        transition = chat.begin_send(state, "Hello")

        assert transition.state is state
        assert transition.effects == ()

    def test_in_flight_send_blocks_another(self, ready):
        sending = chat.begin_send(ready, "Hello").state

        transition = chat.begin_send(sending, "Again")

        assert transition.state is sending
        assert transition.effects == ()

    def test_appends_user_message_before_request(self, ready):
        transition = chat.begin_send(ready, "  Hello  ")

        conv = transition.state.active_conversation
        assert [(m.role, m.content) for m in conv.messages] == [("user", "Hello")]
        assert transition.state.phase == TurnPhase.SENDING

    def test_requests_completion_with_full_history(self, ready, openai_config):
        state = chat.begin_send(ready, "Hello").state
        state = chat.finish_send(state, state.active_id, AssistantMessage("assistant", "Hi")).state
        state = chat.settle(state).state

        transition = chat.begin_send(state, "How are you?")

        (request,) = transition.effects
        assert isinstance(request, RequestCompletion)
        assert request.conversation_id == ready.active_id
        assert request.config == openai_config
        assert request.messages == (
            {"role": "user", "content": "Hello"},
            {"role": "assistant", "content": "Hi"},
            {"role": "user", "content": "How are you?"},
        )

    def test_first_message_names_conversation(self, ready):
        state = chat.begin_send(ready, "Explain quantum tunneling in under 30 words please").state
        assert state.active_conversation.title == "Explain quantum tunneling in u..."

    def test_short_first_message_is_title(self, ready):
        assert chat.begin_send(ready, "Hi").state.active_conversation.title == "Hi"


class TestFinishAndFail:
    def test_finish_appends_assistant_reply(self, ready):
        state = chat.begin_send(ready, "Hello").state

        state = chat.finish_send(state, ready.active_id, AssistantMessage("assistant", "Hi there")).state

        messages = state.active_conversation.messages
        assert len(messages) == 2
        assert (messages[-1].role, messages[-1].content) == ("assistant", "Hi there")
        assert state.phase == TurnPhase.SUCCEEDED
        assert chat.settle(state).state.phase == TurnPhase.IDLE

    def test_reply_goes_to_originating_conversation(self, ready):
        state = chat.begin_send(ready, "Hello").state
        state = chat.create_conversation(state).state

        state = chat.finish_send(state, ready.active_id, AssistantMessage("assistant", "Hi")).state

        assert state.active_conversation.messages == ()
        assert len(state.find(ready.active_id).messages) == 2

    def test_fail_keeps_user_message(self, ready):
        state = chat.begin_send(ready, "Hello").state
        error = TranslationError(ErrorKind.RATE_LIMITED, "Rate limit exceeded or insufficient quota.")

        state = chat.fail_send(state, error).state

        assert [m.role for m in state.active_conversation.messages] == ["user"]
        assert state.phase == TurnPhase.FAILED
        assert state.error == "Rate limit exceeded or insufficient quota."
        assert state.error_kind == ErrorKind.RATE_LIMITED
        assert state.config_prompt_open is False

    @pytest.mark.parametrize(
        "kind",
        [ErrorKind.UNKNOWN_PROVIDER, ErrorKind.API_KEY_REQUIRED, ErrorKind.INVALID_CREDENTIALS],
    )
    def test_config_failures_reopen_config(self, ready, kind):
        state = chat.begin_send(ready, "Hello").state

        state = chat.fail_send(state, TranslationError(kind, "bad key")).state

        assert state.config_prompt_open is True

    def test_send_allowed_again_after_failure(self, ready):
        state = chat.begin_send(ready, "Hello").state
        state = chat.fail_send(state, TranslationError(ErrorKind.UNKNOWN, "x")).state
        state = chat.settle(state).state

        transition = chat.begin_send(state, "Retry")

        assert len(transition.effects) == 1
        assert transition.state.error == ""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfigTransitions:
    def test_update_config_replaces_and_persists(self, ready, ollama_config):
        failed = replace(ready, error="bad", error_kind=ErrorKind.INVALID_CREDENTIALS, config_prompt_open=True)

        transition = chat.update_config(failed, ollama_config)

        assert transition.state.config == ollama_config
        assert transition.state.error == ""
        assert transition.state.error_kind is None
        assert transition.state.config_prompt_open is False
        assert transition.effects == (PersistConfig(ollama_config),)

    def test_set_api_key_writes_both_records(self, ready):
        transition = chat.set_api_key(ready, "sk-new")

        assert transition.state.config.api_key == "sk-new"
        assert transition.state.config.model == ready.config.model
        assert transition.effects == (
            PersistLegacyApiKey("sk-new"),
            PersistConfig(transition.state.config),
        )

    def test_close_config_prompt(self, ready):
        state = replace(ready, config_prompt_open=True)
        assert chat.close_config_prompt(state).state.config_prompt_open is False

    def test_has_valid_config(self, ready, ollama_config):
        assert ready.has_valid_config()
        assert replace(ready, config=ollama_config).has_valid_config()
        assert not replace(ready, config=replace(ready.config, api_key="")).has_valid_config()
        assert not replace(ready, config=replace(ready.config, provider_id="acme")).has_valid_config()
