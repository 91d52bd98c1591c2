#!/usr/bin/env python3
"""LLM Chat — Web Chat Interface.

Usage
-----
Copy `.env.example` to `.env` if you want to change the defaults, then run:

    chainlit run chat_app.py

The app serves a web chat interface at http://localhost:8000. The settings
panel selects the provider, model, API key and sampling options; they are
saved locally and reused on the next visit.

With Chainlit authentication enabled every signed-in user gets their own
settings store under DATA_DIR/users/. Without it the app is a single-user
tool: all browser sessions share one store.

Environment variables (see .env.example):
  DATA_DIR       Directory of the local settings store  (default: data/)
  CHAT_API_URL   Call a running `python main.py` server instead of
                 talking to the provider from this process
"""

import logging
from dataclasses import replace

import chainlit as cl
from chainlit.input_widget import NumberInput, Select, Slider, TextInput

from src.chat.client import HttpTranslatorClient, LocalTranslatorClient
from src.chat.manager import ConversationManager
from src.config import Config
from src.models.llm_config import LLMConfig
from src.providers import get_provider, list_providers
from src.storage.json_store import LocalStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared components, initialised once when the server starts.
# ---------------------------------------------------------------------------
_config = Config.from_env()
_shared_store = LocalStore(_config.data_dir)

_NEW_CHAT_ACTION = "new_chat"


def _build_client():
    if _config.chat_api_url:
        return HttpTranslatorClient(_config.chat_api_url)
    return LocalTranslatorClient()


def _store_for_session() -> LocalStore:
    user = cl.user_session.get("user")
    if user is None:
        return _shared_store
    return LocalStore.for_user(_config.data_dir, user.identifier)


def _manager() -> ConversationManager:
    return cl.user_session.get("manager")


def _config_from_settings(current: LLMConfig, settings: dict) -> LLMConfig:
    """Turn the settings panel values into an LLMConfig.

    Choosing another provider resets model and token limit to that
    provider's defaults unless the model was changed to one it offers. The
    saved API key is never sent to the browser, so a blank key field keeps it.
    """
    config = current
    provider = get_provider(settings.get("provider_id", current.provider_id))
    model = (settings.get("model") or "").strip()
    if provider is not None and provider.id != current.provider_id:
        config = current.with_provider(provider)
        if model not in provider.available_models:
            model = config.model
    max_tokens = settings.get("max_tokens")
    return replace(
        config,
        model=model or config.model,
        api_key=(settings.get("api_key") or "").strip() or config.api_key,
        custom_base_url=(settings.get("custom_base_url") or "").strip() or None,
        temperature=settings.get("temperature", config.temperature),
        max_tokens=int(max_tokens) if max_tokens else config.max_tokens,
    )


async def _send_settings(config: LLMConfig) -> None:
    provider = get_provider(config.provider_id)
    await cl.ChatSettings(
        [
            Select(
                id="provider_id",
                label="AI Provider",
                items={p.name: p.id for p in list_providers()},
                initial_value=config.provider_id,
            ),
            TextInput(
                id="model",
                label="Model",
                initial=config.model,
                description=(
                    ", ".join(provider.available_models) if provider else None
                ),
            ),
            TextInput(
                id="api_key",
                label="API Key",
                initial="",
                placeholder=(
                    "Saved key in use; type to replace"
                    if config.api_key
                    else (provider.api_key_format if provider else "")
                ),
                description=(
                    f"{provider.description} ({provider.key_url})" if provider else None
                ),
            ),
            TextInput(
                id="custom_base_url",
                label="Custom Base URL (optional)",
                initial=config.custom_base_url or "",
                placeholder=provider.base_url if provider else "",
            ),
            Slider(
                id="temperature",
                label="Temperature",
                initial=config.temperature if config.temperature is not None else 0.7,
                min=0,
                max=2,
                step=0.1,
            ),
            NumberInput(
                id="max_tokens",
                label="Max Tokens",
                initial=config.max_tokens or (provider.max_tokens if provider else 1000),
            ),
        ]
    ).send()


async def _prompt_for_settings(manager: ConversationManager) -> None:
    provider = get_provider(manager.state.config.provider_id)
    name = provider.name if provider else "your provider"
    await cl.Message(
        content=(
            f"Please configure {name} in the settings panel "
            "(API key, model) before sending a message."
        )
    ).send()
    manager.close_config_prompt()


def _new_chat_actions() -> list:
    return [cl.Action(name=_NEW_CHAT_ACTION, payload={}, label="New chat")]


# ---------------------------------------------------------------------------
# Chainlit lifecycle handlers
# ---------------------------------------------------------------------------

@cl.on_chat_start
async def on_chat_start() -> None:
    """Restore saved settings and open a first conversation."""
    manager = ConversationManager(client=_build_client(), store=_store_for_session())
    state = manager.initialize()
    cl.user_session.set("manager", manager)
    logger.info(
        "Chat session started (provider=%s, model=%s)",
        state.config.provider_id,
        state.config.model,
    )

    await _send_settings(state.config)
    if state.config_prompt_open:
        await _prompt_for_settings(manager)


@cl.on_settings_update
async def on_settings_update(settings: dict) -> None:
    manager = _manager()
    previous = manager.state.config
    config = _config_from_settings(previous, settings)
    if config != previous and replace(previous, api_key=config.api_key) == config:
        # Only the key changed: also keep the legacy key record in sync.
        manager.set_api_key(config.api_key)
    else:
        manager.update_config(config)
    logger.info("LLM config updated (provider=%s, model=%s)", config.provider_id, config.model)
    if config.provider_id != previous.provider_id:
        # Refresh the panel so model and token defaults follow the provider.
        await _send_settings(config)


@cl.on_message
async def on_message(message: cl.Message) -> None:
    """Send one user message and show the reply or the error banner."""
    manager = _manager()
    if manager.state.is_sending:
        await cl.Message(content="Please wait for the current response.").send()
        return

    reply = await manager.send_message(message.content)

    state = manager.state
    if reply is not None:
        await cl.Message(content=reply.content, actions=_new_chat_actions()).send()
        return
    if state.error:
        await cl.ErrorMessage(content=state.error).send()
    if state.config_prompt_open:
        await _prompt_for_settings(manager)


@cl.action_callback(_NEW_CHAT_ACTION)
async def on_new_chat(action: cl.Action) -> None:
    manager = _manager()
    conversation = manager.create_conversation()
    logger.info(
        "New conversation %s (%d total)", conversation.id, len(manager.state.conversations)
    )
    await cl.Message(content="Started a new chat.").send()


@cl.on_chat_end
async def on_chat_end() -> None:
    manager = cl.user_session.get("manager")
    if manager:
        logger.info("Chat session ended (%d conversations)", len(manager.state.conversations))
