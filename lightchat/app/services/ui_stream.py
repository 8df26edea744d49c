"""Server-Sent-Events framing for the chat UI message stream."""
from __future__ import annotations

import json

UI_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Content-Type": "text/event-stream",
    "X-Accel-Buffering": "no",
    "x-vercel-ai-ui-message-stream": "v1",
}

DONE_FRAME = "data: [DONE]\n\n"


def sse_data(event: dict) -> str:
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


def parse_sse_events(body: str) -> list[dict]:
    """Decode a complete UI message stream body (used by tests)."""
    events = []
    for frame in body.split("\n\n"):
        frame = frame.strip()
        if not frame.startswith("data: "):
            continue
        data = frame[len("data: "):]
        if data == "[DONE]":
            break
        events.append(json.loads(data))
    return events
