"""Per-request model handle backed by LiteLLM.

A handle carries the LiteLLM route (``<prefix>/<model>``) and the connection
parameters for one provider/credential combination. It performs no I/O until
``stream`` or ``generate`` is awaited.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import litellm
from litellm import acompletion

logger = logging.getLogger("lightchat")

# Disable LiteLLM's telemetry
litellm.telemetry = False


@dataclass
class ModelHandle:
    provider_id: str
    model: str
    route: str
    params: dict[str, Any] = field(default_factory=dict, repr=False)

    def _call_kwargs(self, messages: list[dict[str, Any]], **options: Any) -> dict[str, Any]:
        call_kwargs: dict[str, Any] = {
            "model": self.route,
            "messages": messages,
            "drop_params": True,
        }
        call_kwargs.update(self.params)
        call_kwargs.update({k: v for k, v in options.items() if v is not None})
        return call_kwargs

    async def stream(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        **options: Any,
    ):
        """Open a streaming completion and return the async chunk iterator."""
        call_kwargs = self._call_kwargs(messages, tools=tools or None, **options)
        call_kwargs["stream"] = True
        logger.debug(
            "Opening completion stream",
            extra={"provider_id": self.provider_id, "model": self.model, "tools": bool(tools)},
        )
        return await acompletion(**call_kwargs)

    async def generate(
        self,
        messages: list[dict[str, Any]],
        max_tokens: int | None = None,
        **options: Any,
    ) -> str:
        """Run one non-streaming completion and return its text."""
        call_kwargs = self._call_kwargs(messages, max_tokens=max_tokens, **options)
        response = await acompletion(**call_kwargs)
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""
