"""Web search tool backed by the Tavily search API."""
from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from lightchat.app.config.settings import settings
from lightchat.app.domain.tools.registry import ToolRegistry, ToolSpec

logger = logging.getLogger("lightchat")

WEB_SEARCH_TOOL_NAME = "web_search"
UNAVAILABLE_MESSAGE = (
    "Web search is unavailable because TAVILY_API_KEY is not configured on the server."
)


class WebSearchError(Exception):
    """The search service answered with a non-success status."""

    def __init__(self, status_code: int):
        super().__init__(f"Web search failed ({status_code}).")
        self.message = str(self)
        self.search_status = status_code


class WebSearchInput(BaseModel):
    query: str = Field(min_length=2, description="What to search the web for.")


async def search_web(query: str, client: httpx.AsyncClient | None = None) -> dict[str, Any]:
    """Run one Tavily search.

    A missing server key is reported to the model as a result instead of an
    exception, so it can tell the user why no search happened.
    """
    api_key = settings.tavily_api_key
    if not api_key:
        logger.warning("Web search requested without TAVILY_API_KEY")
        return {"error": UNAVAILABLE_MESSAGE}

    payload = {
        "api_key": api_key,
        "query": query,
        "search_depth": settings.web_search_depth,
        "max_results": settings.web_search_max_results,
    }
    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=settings.web_search_timeout_seconds)
    try:
        response = await http.post(settings.tavily_search_url, json=payload)
    finally:
        if owns_client:
            await http.aclose()

    if not response.is_success:
        raise WebSearchError(response.status_code)

    data = response.json()
    if not isinstance(data, dict):
        data = {}
    return {
        "answer": data.get("answer") or "",
        "results": [
            {
                "title": item.get("title") or "",
                "url": item.get("url") or "",
                "content": item.get("content") or "",
            }
            for item in data.get("results") or []
            if isinstance(item, dict)
        ],
    }


def web_search_tool(client: httpx.AsyncClient | None = None) -> ToolSpec:
    async def handler(query: str) -> dict[str, Any]:
        return await search_web(query, client=client)

    return ToolSpec(
        name=WEB_SEARCH_TOOL_NAME,
        description="Search the web for up-to-date information.",
        input_model=WebSearchInput,
        handler=handler,
    )


def build_tools(
    enable_web_search: bool,
    supports_tools: bool,
    client: httpx.AsyncClient | None = None,
) -> ToolRegistry:
    """Tools for one chat request; empty unless search is requested and supported."""
    tools = ToolRegistry()
    if enable_web_search and supports_tools:
        tools.register(web_search_tool(client))
    return tools
