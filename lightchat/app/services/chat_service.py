"""Streaming chat generation with optional tool steps.

``ChatGeneration`` opens the vendor stream up front (so setup failures can
still be reported with an HTTP status) and then turns vendor chunks into UI
message stream events. When the model calls a tool, the call and its result
are emitted, appended to the history and the model is called again, up to
``max_steps`` model calls.
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

from lightchat.app.domain.tools.registry import ToolInputError, ToolRegistry
from lightchat.app.providers.handle import ModelHandle
from lightchat.app.services.cancellation import CancellationToken, GenerationCancelled

logger = logging.getLogger("lightchat")


async def _anext(iterator) -> tuple[bool, Any]:
    try:
        return True, await iterator.__anext__()
    except StopAsyncIteration:
        return False, None


@dataclass
class _PendingCall:
    call_id: str = ""
    name: str = ""
    arguments: str = ""


@dataclass
class _StepState:
    text: list[str] = field(default_factory=list)
    calls: dict[int, _PendingCall] = field(default_factory=dict)
    open_part: tuple[str, str] | None = None
    finish_reason: str | None = None
    usage: dict[str, int] | None = None

    def assistant_message(self) -> dict[str, Any]:
        return {
            "role": "assistant",
            "content": "".join(self.text) or None,
            "tool_calls": [
                {
                    "id": call.call_id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.arguments or "{}"},
                }
                for call in self.ordered_calls()
            ],
        }

    def ordered_calls(self) -> list[_PendingCall]:
        return [self.calls[idx] for idx in sorted(self.calls)]


def _part_id() -> str:
    return uuid.uuid4().hex[:16]


class ChatGeneration:
    def __init__(
        self,
        handle: ModelHandle,
        messages: list[dict[str, Any]],
        tools: ToolRegistry,
        options: dict[str, Any],
        token: CancellationToken,
        max_steps: int = 5,
    ):
        self.handle = handle
        self.messages = list(messages)
        self.tools = tools
        self.options = options
        self.token = token
        self.max_steps = max_steps
        self.message_id = f"msg-{uuid.uuid4().hex}"
        self._response = None
        self._started_at = time.time()

    async def start(self) -> None:
        """Open the first vendor stream; errors propagate to the caller."""
        self._response = await self._open()

    async def _open(self):
        return await self.handle.stream(
            self.messages,
            tools=self.tools.schemas() or None,
            **self.options,
        )

    async def aclose(self) -> None:
        """Close the upstream stream if one is still open."""
        response, self._response = self._response, None
        if response is None:
            return
        close = getattr(response, "aclose", None)
        if close is None:
            close = getattr(getattr(response, "completion_stream", None), "aclose", None)
        if close is None:
            return
        try:
            await close()
        except Exception:
            logger.debug("Closing upstream stream failed", exc_info=True)

    async def events(self) -> AsyncIterator[dict[str, Any]]:
        if self._response is None:
            await self.start()

        yield {"type": "start", "messageId": self.message_id}
        step = 1
        usage: dict[str, int] = {}
        while True:
            yield {"type": "start-step"}
            state = _StepState()
            async for event in self._relay_step(state):
                yield event
            if state.usage:
                for key, value in state.usage.items():
                    usage[key] = usage.get(key, 0) + value

            if not state.calls or not self.tools:
                yield {"type": "finish-step"}
                break

            self.messages.append(state.assistant_message())
            for call in state.ordered_calls():
                self.token.raise_if_cancelled()
                async for event in self._run_tool(call):
                    yield event
            yield {"type": "finish-step"}

            if step >= self.max_steps:
                logger.info("Tool step limit reached", extra={"max_steps": self.max_steps})
                break
            step += 1
            await self.aclose()
            self._response = await self._open()

        logger.info(
            "Chat generation finished",
            extra={
                "provider_id": self.handle.provider_id,
                "model": self.handle.model,
                "steps": step,
                "usage": usage or None,
                "elapsed_ms": int((time.time() - self._started_at) * 1000),
            },
        )
        yield {"type": "finish"}

    async def _next_chunk(self, iterator) -> tuple[bool, Any]:
        """Wait for the next vendor chunk unless the token fires first."""
        self.token.raise_if_cancelled()
        next_task = asyncio.ensure_future(_anext(iterator))
        cancel_task = asyncio.ensure_future(self.token.wait())
        try:
            done, _ = await asyncio.wait(
                {next_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for task in (next_task, cancel_task):
                if not task.done():
                    task.cancel()
        if next_task in done:
            return next_task.result()
        raise GenerationCancelled(self.token.reason or "generation cancelled")

    def _switch_part(self, state: _StepState, kind: str | None) -> list[dict[str, Any]]:
        events: list[dict[str, Any]] = []
        if state.open_part and state.open_part[0] != kind:
            open_kind, open_id = state.open_part
            events.append({"type": f"{open_kind}-end", "id": open_id})
            state.open_part = None
        if kind and state.open_part is None:
            part_id = _part_id()
            events.append({"type": f"{kind}-start", "id": part_id})
            state.open_part = (kind, part_id)
        return events

    async def _relay_step(self, state: _StepState) -> AsyncIterator[dict[str, Any]]:
        iterator = self._response.__aiter__()
        while True:
            has_chunk, chunk = await self._next_chunk(iterator)
            if not has_chunk:
                break

            chunk_usage = getattr(chunk, "usage", None)
            if chunk_usage:
                state.usage = {
                    "input_tokens": getattr(chunk_usage, "prompt_tokens", 0) or 0,
                    "output_tokens": getattr(chunk_usage, "completion_tokens", 0) or 0,
                }

            choices = getattr(chunk, "choices", None) or []
            if not choices:
                continue
            choice = choices[0]
            delta = getattr(choice, "delta", None)

            reasoning = getattr(delta, "reasoning_content", None)
            if reasoning:
                for event in self._switch_part(state, "reasoning"):
                    yield event
                yield {"type": "reasoning-delta", "id": state.open_part[1], "delta": reasoning}

            content = getattr(delta, "content", None)
            if content:
                for event in self._switch_part(state, "text"):
                    yield event
                state.text.append(content)
                yield {"type": "text-delta", "id": state.open_part[1], "delta": content}

            for tool_call in getattr(delta, "tool_calls", None) or []:
                index = getattr(tool_call, "index", None)
                if index is None:
                    index = len(state.calls)
                pending = state.calls.setdefault(index, _PendingCall())
                if getattr(tool_call, "id", None):
                    pending.call_id = tool_call.id
                function = getattr(tool_call, "function", None)
                if function is not None:
                    if getattr(function, "name", None):
                        pending.name = function.name
                    if getattr(function, "arguments", None):
                        pending.arguments += function.arguments

            if getattr(choice, "finish_reason", None):
                state.finish_reason = choice.finish_reason

        for event in self._switch_part(state, None):
            yield event
        for idx, call in state.calls.items():
            if not call.call_id:
                call.call_id = f"call_{idx}_{_part_id()}"

    async def _run_tool(self, call: _PendingCall) -> AsyncIterator[dict[str, Any]]:
        try:
            tool, tool_input = self.tools.prepare(call.name, call.arguments)
        except ToolInputError as exc:
            logger.info("Tool input rejected", extra={"tool": call.name, "error": str(exc)})
            yield {
                "type": "tool-input-error",
                "toolCallId": call.call_id,
                "toolName": call.name,
                "input": call.arguments,
                "errorText": str(exc),
            }
            self._append_tool_result(call, {"error": str(exc)})
            return

        yield {
            "type": "tool-input-available",
            "toolCallId": call.call_id,
            "toolName": call.name,
            "input": tool_input,
        }
        # Handler failures (e.g. search transport errors) end the generation.
        output = await tool.handler(**tool_input)
        yield {"type": "tool-output-available", "toolCallId": call.call_id, "output": output}
        self._append_tool_result(call, output)

    def _append_tool_result(self, call: _PendingCall, output: Any) -> None:
        self.messages.append(
            {
                "role": "tool",
                "tool_call_id": call.call_id,
                "content": output if isinstance(output, str) else json.dumps(output, ensure_ascii=False),
            }
        )
