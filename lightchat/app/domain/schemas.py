"""Wire-level request payloads."""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConversationMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    role: Literal["system", "user", "assistant"]
    parts: list[dict[str, Any]] = Field(default_factory=list)
    content: str | None = None


class ConnectionTestPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    provider: str | None = None
    api_key: str = Field(default="", alias="apiKey")
    model: str = ""
    extra_config: dict[str, str] = Field(default_factory=dict, alias="extraConfig")

    @field_validator("api_key", "model", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("extra_config", mode="before")
    @classmethod
    def clean_extra_config(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, dict):
            # Blank form fields arrive as empty strings or nulls.
            return {str(k): str(val) for k, val in v.items() if val not in (None, "")}
        return v

    @property
    def effective_model(self) -> str:
        return self.model or self.extra_config.get("modelId", "")


class ChatRequestPayload(ConnectionTestPayload):
    messages: list[ConversationMessage]
    enable_web_search: bool = Field(default=False, alias="enableWebSearch")
    reasoning_effort: Literal["low", "medium", "high", "xhigh"] | None = Field(
        default=None, alias="reasoningEffort"
    )
