"""Cooperative cancellation for in-flight generations."""
from __future__ import annotations

import asyncio
import logging

from starlette.requests import Request

logger = logging.getLogger("lightchat")


class GenerationCancelled(Exception):
    """Raised inside a generation once its token has been cancelled."""


class CancellationToken:
    """Per-request cancellation flag; never shared between requests."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelled(self._reason or "generation cancelled")

    async def wait(self) -> None:
        await self._event.wait()


async def watch_disconnect(request: Request, token: CancellationToken, interval: float) -> None:
    """Cancel ``token`` when the client behind ``request`` goes away."""
    while not token.cancelled:
        if await request.is_disconnected():
            logger.info("Client disconnected; cancelling generation")
            token.cancel("client disconnected")
            return
        await asyncio.sleep(interval)
