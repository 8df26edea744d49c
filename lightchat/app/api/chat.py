from __future__ import annotations

import asyncio
import json
import logging
from typing import AsyncGenerator, TypeVar

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, ValidationError

from lightchat.app.config.settings import settings
from lightchat.app.core.errors import ConfigurationError, classify_error, error_message
from lightchat.app.domain.messages import first_text, to_model_messages
from lightchat.app.domain.schemas import ChatRequestPayload, ConnectionTestPayload
from lightchat.app.domain.tools.web_search import build_tools
from lightchat.app.providers.catalogue import lookup
from lightchat.app.providers.resolver import provider_options, resolve
from lightchat.app.services.cancellation import (
    CancellationToken,
    GenerationCancelled,
    watch_disconnect,
)
from lightchat.app.services.chat_service import ChatGeneration
from lightchat.app.services.ui_stream import DONE_FRAME, UI_STREAM_HEADERS, sse_data

logger = logging.getLogger("lightchat")

CONNECTION_TEST_PROMPT = 'Say "ok"'

PayloadT = TypeVar("PayloadT", bound=BaseModel)

router = APIRouter()


class PayloadError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _declared_length(request: Request) -> int | None:
    try:
        return int(request.headers["content-length"])
    except (KeyError, ValueError):
        return None


async def _read_payload(request: Request, model: type[PayloadT]) -> PayloadT:
    declared = _declared_length(request)
    if declared is not None and declared > settings.max_request_bytes:
        raise PayloadError(413, "Request body too large.")
    # Chunked bodies carry no length; check again once read.
    body = await request.body()
    if len(body) > settings.max_request_bytes:
        raise PayloadError(413, "Request body too large.")
    try:
        data = json.loads(body)
    except ValueError:
        raise PayloadError(400, "Invalid JSON body.") from None
    if not isinstance(data, dict):
        raise PayloadError(400, "Invalid JSON body.")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(loc) for loc in first.get("loc", ())) or "body"
        raise PayloadError(400, f"Invalid request field {field}: {first.get('msg')}") from None


def _requires_api_key(provider_id: str) -> bool:
    descriptor = lookup(provider_id)
    return not (descriptor and descriptor.allows_ambient_credentials)


def _chat_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _test_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _relay(
    generation: ChatGeneration, request: Request, token: CancellationToken
) -> AsyncGenerator[str, None]:
    watcher = asyncio.create_task(
        watch_disconnect(request, token, settings.disconnect_poll_seconds)
    )
    try:
        async for event in generation.events():
            yield sse_data(event)
        yield DONE_FRAME
    except GenerationCancelled as exc:
        logger.info("Chat generation cancelled", extra={"reason": str(exc)})
    except Exception as exc:
        logger.warning(
            "Chat generation failed mid-stream",
            extra={"status_code": classify_error(exc)},
            exc_info=True,
        )
        yield sse_data({"type": "error", "errorText": error_message(exc)})
        yield DONE_FRAME
    finally:
        watcher.cancel()
        await generation.aclose()


@router.post("/chat")
async def chat(request: Request):
    """Stream a completion for the posted conversation."""
    try:
        payload = await _read_payload(request, ChatRequestPayload)
    except PayloadError as exc:
        return _chat_error(exc.status_code, exc.message)

    provider_id = payload.provider or settings.default_provider
    if not payload.api_key and _requires_api_key(provider_id):
        return _chat_error(400, "No API key provided. Please configure a provider in Settings.")
    if not payload.effective_model:
        return _chat_error(400, "No model specified.")

    try:
        handle = resolve(provider_id, payload.api_key, payload.effective_model, payload.extra_config)
    except ConfigurationError as exc:
        return _chat_error(400, exc.message)

    descriptor = lookup(provider_id)
    tools = build_tools(payload.enable_web_search, bool(descriptor and descriptor.supports_tools))
    token = CancellationToken()

    last_user = next((m for m in reversed(payload.messages) if m.role == "user"), None)
    logger.info(
        "Chat request",
        extra={
            "provider_id": provider_id,
            "model": handle.model,
            "message_count": len(payload.messages),
            "last_user_chars": len(first_text(last_user)) if last_user else 0,
            "tools": [tool.name for tool in tools.list_tools()],
        },
    )

    try:
        generation = ChatGeneration(
            handle,
            to_model_messages(payload.messages),
            tools,
            provider_options(provider_id, handle.model, payload.reasoning_effort),
            token,
            max_steps=settings.max_tool_steps,
        )
        await generation.start()
    except Exception as exc:
        status_code = classify_error(exc)
        logger.warning(
            "Chat generation failed",
            extra={"provider_id": provider_id, "status_code": status_code},
            exc_info=status_code == 500,
        )
        return _chat_error(status_code, error_message(exc))

    return StreamingResponse(
        _relay(generation, request, token),
        media_type="text/event-stream",
        headers=UI_STREAM_HEADERS,
    )


@router.post("/chat/test")
async def test_connection(request: Request):
    """Check that the supplied credentials can run a tiny generation."""
    try:
        payload = await _read_payload(request, ConnectionTestPayload)
    except PayloadError as exc:
        return _test_error(exc.status_code, exc.message)

    provider_id = payload.provider or settings.default_provider
    if not payload.api_key and _requires_api_key(provider_id):
        return _test_error(400, "API key is required.")
    if not payload.effective_model:
        return _test_error(400, "Model is required.")

    try:
        handle = resolve(provider_id, payload.api_key, payload.effective_model, payload.extra_config)
    except ConfigurationError as exc:
        return _test_error(400, exc.message)

    try:
        await handle.generate(
            [{"role": "user", "content": CONNECTION_TEST_PROMPT}],
            max_tokens=settings.connection_test_max_tokens,
        )
    except Exception as exc:
        logger.info(
            "Connection test failed",
            extra={"provider_id": provider_id, "model": handle.model, "error_type": type(exc).__name__},
        )
        return {"success": False, "error": error_message(exc)}

    logger.info("Connection test succeeded", extra={"provider_id": provider_id, "model": handle.model})
    return {"success": True}
