#!/usr/bin/env python3
"""Smoke test for end-to-end chat streaming against a real provider.

Usage:
  python scripts/smoke_stream.py --provider openai --model gpt-4o-mini --api-key sk-...

Environment fallbacks:
  LIGHTCHAT_BASE_URL, LIGHTCHAT_PROVIDER, LIGHTCHAT_MODEL, LIGHTCHAT_API_KEY
"""
from __future__ import annotations

import argparse
import json
import os
import sys
import uuid
from typing import Any

import httpx


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="LightChat UI message stream smoke test")
    parser.add_argument("--base-url", default=os.getenv("LIGHTCHAT_BASE_URL", "http://127.0.0.1:8787"))
    parser.add_argument("--provider", default=os.getenv("LIGHTCHAT_PROVIDER", "google"))
    parser.add_argument("--model", default=os.getenv("LIGHTCHAT_MODEL"))
    parser.add_argument("--api-key", default=os.getenv("LIGHTCHAT_API_KEY", ""))
    parser.add_argument(
        "--extra",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="extraConfig entry, may be repeated",
    )
    parser.add_argument("--message", default="Smoke test: reply with one short sentence.")
    parser.add_argument("--web-search", action="store_true")
    parser.add_argument("--skip-test", action="store_true", help="skip the /chat/test credential check")
    parser.add_argument("--stream-timeout", type=float, default=120.0)
    parser.add_argument("--quiet", action="store_true")
    return parser.parse_args()


def exit_with(message: str, code: int = 1) -> None:
    print(message, file=sys.stderr)
    raise SystemExit(code)


def safe_json(response: httpx.Response) -> dict[str, Any]:
    try:
        return response.json()
    except ValueError:
        return {}


def parse_extra(pairs: list[str]) -> dict[str, str]:
    extra = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            exit_with(f"Invalid --extra value (expected KEY=VALUE): {pair}")
        extra[key.strip()] = value.strip()
    return extra


def main() -> None:
    args = parse_args()
    base_url = args.base_url.rstrip("/")
    client = httpx.Client(base_url=base_url, timeout=10.0)

    try:
        health = client.get("/health")
    except httpx.HTTPError as exc:
        exit_with(f"Health check failed: {exc}")

    if health.status_code != 200:
        exit_with(f"Health check failed: HTTP {health.status_code} {health.text}")

    provider = client.get(f"/providers/{args.provider}")
    if provider.status_code != 200:
        exit_with(f"Unknown provider {args.provider}: HTTP {provider.status_code} {provider.text}")

    model = args.model
    if not model:
        models = safe_json(provider).get("models") or []
        if not models:
            exit_with(f"Provider {args.provider} lists no models; pass --model")
        model = models[0]["id"]

    credentials = {
        "provider": args.provider,
        "apiKey": args.api_key,
        "model": model,
        "extraConfig": parse_extra(args.extra),
    }

    if not args.skip_test:
        check = client.post("/chat/test", json=credentials, timeout=60.0)
        result = safe_json(check)
        if check.status_code != 200 or not result.get("success"):
            exit_with(f"Connection test failed: HTTP {check.status_code} {result.get('error') or check.text}")
        if not args.quiet:
            print("Connection test passed")

    if not args.quiet:
        print(f"Using provider={args.provider} model={model}")

    payload = {
        **credentials,
        "enableWebSearch": args.web_search,
        "messages": [
            {
                "id": uuid.uuid4().hex,
                "role": "user",
                "parts": [{"type": "text", "text": args.message}],
            }
        ],
    }

    stream_timeout = httpx.Timeout(connect=10.0, read=args.stream_timeout, write=10.0, pool=10.0)

    assistant_text = ""
    event_types: list[str] = []
    saw_done = False
    stream_error = None

    with client.stream("POST", "/chat", json=payload, timeout=stream_timeout) as response:
        if response.status_code != 200:
            response.read()
            exit_with(f"Stream request failed: HTTP {response.status_code} {response.text}")
        content_type = response.headers.get("content-type", "")
        if "text/event-stream" not in content_type:
            exit_with(f"Unexpected content-type: {content_type}")
        if response.headers.get("x-vercel-ai-ui-message-stream") != "v1":
            exit_with("Missing UI message stream header")

        for line in response.iter_lines():
            if not line.startswith("data:"):
                continue
            data_str = line.split(":", 1)[1].strip()
            if data_str == "[DONE]":
                saw_done = True
                break
            try:
                event = json.loads(data_str)
            except json.JSONDecodeError:
                continue

            event_types.append(event.get("type", ""))
            if event.get("type") == "text-delta":
                assistant_text += event.get("delta", "")
                if not args.quiet:
                    sys.stdout.write(event.get("delta", ""))
                    sys.stdout.flush()
            elif event.get("type") == "error":
                stream_error = event.get("errorText")

    if not args.quiet:
        print("")

    if stream_error:
        exit_with(f"Stream reported an error: {stream_error}")
    if not event_types or event_types[0] != "start":
        exit_with("Stream did not begin with a start event")
    if "finish" not in event_types:
        exit_with("Stream ended without finish event")
    if not saw_done:
        exit_with("Stream ended without [DONE] terminator")
    if not assistant_text.strip():
        exit_with("No text-delta events received")

    if not args.quiet:
        print("Smoke test passed")
        print(f"events={len(event_types)} assistant_chars={len(assistant_text)}")


if __name__ == "__main__":
    main()
