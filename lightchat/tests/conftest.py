import os
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app/settings
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["TAVILY_API_KEY"] = ""

from lightchat.app.main import app
from lightchat.app.config.settings import settings


def text_chunk(content=None, reasoning=None, finish_reason=None, usage=None):
    """Build one streaming chunk shaped like LiteLLM's ModelResponseStream."""
    delta = SimpleNamespace(content=content, reasoning_content=reasoning, tool_calls=None)
    return SimpleNamespace(
        choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)],
        usage=usage,
    )


def tool_call_chunk(index, call_id=None, name=None, arguments=None, finish_reason=None):
    function = SimpleNamespace(name=name, arguments=arguments)
    tool_call = SimpleNamespace(index=index, id=call_id, function=function)
    delta = SimpleNamespace(content=None, reasoning_content=None, tool_calls=[tool_call])
    return SimpleNamespace(
        choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)],
        usage=None,
    )


class FakeStream:
    """Async iterator over prepared chunks that records whether it was closed."""

    def __init__(self, chunks, error=None):
        self._chunks = list(chunks)
        self._error = error
        self.closed = False

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._chunks:
            return self._chunks.pop(0)
        if self._error is not None:
            error, self._error = self._error, None
            raise error
        raise StopAsyncIteration

    async def aclose(self):
        self.closed = True


class FakeCompletion:
    """Stand-in for ``litellm.acompletion`` that records every call.

    ``responses`` is consumed in order: a list of chunks becomes a stream, an
    exception is raised, and a string is returned as a non-streaming reply.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.streams = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0) if self.responses else []
        if isinstance(response, BaseException):
            raise response
        if isinstance(response, str):
            message = SimpleNamespace(content=response)
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])
        stream = response if hasattr(response, "__anext__") else FakeStream(response)
        self.streams.append(stream)
        return stream


class VendorError(Exception):
    """Vendor-style exception with an optional HTTP status."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


@pytest.fixture
def fake_completion(monkeypatch):
    def install(*responses):
        fake = FakeCompletion(*responses)
        monkeypatch.setattr("lightchat.app.providers.handle.acompletion", fake)
        return fake

    return install


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def no_search_key(monkeypatch):
    monkeypatch.setattr(settings, "tavily_api_key", "")


def user_message(text, message_id="u1"):
    return {"id": message_id, "role": "user", "parts": [{"type": "text", "text": text}]}


def chat_body(**overrides):
    body = {
        "provider": "openai",
        "apiKey": "sk-test",
        "model": "gpt-4o",
        "extraConfig": {},
        "messages": [user_message("Hello")],
    }
    body.update(overrides)
    return body
