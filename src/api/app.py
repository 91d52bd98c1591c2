"""FastAPI application exposing the chat completion route."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..translator.core import RequestTranslator
from ..translator.errors import FALLBACK_MESSAGE

logger = logging.getLogger(__name__)

app = FastAPI(
    title="LLM Chat API",
    description="Relays chat conversations to OpenAI-compatible providers",
    version="1.0.0",
)

# Lazily created so tests can swap it out with reset_services()
_translator = None


def get_translator() -> RequestTranslator:
    global _translator
    if _translator is None:
        _translator = RequestTranslator()
    return _translator


def reset_services(translator: RequestTranslator | None = None) -> None:
    """Drop (or replace) the shared translator. Useful for testing."""
    global _translator
    _translator = translator


@app.post("/api/chat")
async def chat(request: Request) -> JSONResponse:
    """Run one completion for ``{messages, config}``.

    Returns ``{"message": {role, content}}`` on success and
    ``{"error": str}`` with the taxonomy's status code otherwise.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        payload = {}

    try:
        result = await get_translator().complete(
            payload.get("messages"), payload.get("config")
        )
    except Exception as e:
        logger.exception("LLM API error")
        return JSONResponse({"error": str(e) or FALLBACK_MESSAGE}, status_code=500)

    if result.error is not None:
        return JSONResponse({"error": result.error.message}, status_code=result.error.status)
    return JSONResponse({"message": result.message.to_dict()})
