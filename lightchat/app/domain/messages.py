"""Convert UI conversation messages into the role-based vendor format.

UI messages carry an ordered list of parts (text, reasoning, step markers,
files and tool invocations). Vendor calls expect OpenAI-style messages:
text content, assistant ``tool_calls`` and ``tool`` result messages.
"""
from __future__ import annotations

import json
from typing import Any, Iterable

from lightchat.app.domain.schemas import ConversationMessage

_COMPLETED_TOOL_STATES = {"output-available", "output-error"}


def first_text(message: ConversationMessage) -> str:
    """Return the first text part of a message (or its legacy content)."""
    for part in message.parts:
        if part.get("type") == "text":
            return part.get("text") or ""
    return message.content or ""


def _tool_name(part: dict[str, Any]) -> str | None:
    part_type = part.get("type") or ""
    if part_type == "dynamic-tool":
        return part.get("toolName")
    if part_type.startswith("tool-"):
        return part_type[len("tool-"):]
    return None


def _dump(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)


def _user_content(message: ConversationMessage) -> str | list[dict[str, Any]]:
    if not message.parts:
        return message.content or ""

    blocks: list[dict[str, Any]] = []
    for part in message.parts:
        part_type = part.get("type")
        if part_type == "text":
            blocks.append({"type": "text", "text": part.get("text") or ""})
        elif part_type == "file" and str(part.get("mediaType", "")).startswith("image/"):
            blocks.append({"type": "image_url", "image_url": {"url": part.get("url", "")}})

    if all(block["type"] == "text" for block in blocks):
        return "".join(block["text"] for block in blocks)
    return blocks


def _assistant_messages(message: ConversationMessage) -> list[dict[str, Any]]:
    if not message.parts:
        return [{"role": "assistant", "content": message.content or ""}]

    out: list[dict[str, Any]] = []
    text: list[str] = []
    calls: list[dict[str, Any]] = []
    results: list[dict[str, Any]] = []

    def flush() -> None:
        if calls:
            out.append({"role": "assistant", "content": "".join(text) or None, "tool_calls": list(calls)})
            out.extend(results)
        elif text:
            out.append({"role": "assistant", "content": "".join(text)})
        text.clear()
        calls.clear()
        results.clear()

    for part in message.parts:
        part_type = part.get("type")
        if part_type == "step-start":
            flush()
        elif part_type == "text":
            if calls:
                flush()
            text.append(part.get("text") or "")
        else:
            name = _tool_name(part)
            # Calls without a result cannot be replayed to the vendor.
            if name is None or part.get("state") not in _COMPLETED_TOOL_STATES:
                continue
            call_id = part.get("toolCallId", "")
            calls.append(
                {
                    "id": call_id,
                    "type": "function",
                    "function": {"name": name, "arguments": _dump(part.get("input") or {})},
                }
            )
            if part.get("state") == "output-error":
                output: Any = {"error": part.get("errorText") or "Tool execution failed."}
            else:
                output = part.get("output")
            results.append({"role": "tool", "tool_call_id": call_id, "content": _dump(output)})

    flush()
    return out


def to_model_messages(messages: Iterable[ConversationMessage]) -> list[dict[str, Any]]:
    """Convert the full UI history, preserving order."""
    converted: list[dict[str, Any]] = []
    for message in messages:
        if message.role == "assistant":
            converted.extend(_assistant_messages(message))
        elif message.role == "user":
            converted.append({"role": "user", "content": _user_content(message)})
        else:
            converted.append({"role": "system", "content": first_text(message)})
    return converted
