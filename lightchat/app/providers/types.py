from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ReasoningEffort = Literal["low", "medium", "high", "xhigh"]


@dataclass(frozen=True)
class ModelDescriptor:
    id: str
    display_name: str
    reasoning_effort_options: tuple[ReasoningEffort, ...] = ()

    def to_dict(self) -> dict:
        data: dict = {"id": self.id, "name": self.display_name}
        if self.reasoning_effort_options:
            data["reasoningEffortOptions"] = list(self.reasoning_effort_options)
        return data


@dataclass(frozen=True)
class ExtraConfigField:
    key: str
    label: str
    placeholder: str
    required: bool
    sensitivity: Literal["text", "secret"] = "text"

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "placeholder": self.placeholder,
            "required": self.required,
            "type": "password" if self.sensitivity == "secret" else "text",
        }


@dataclass(frozen=True)
class ProviderDescriptor:
    id: str
    display_name: str
    badge: str
    models: tuple[ModelDescriptor, ...]
    credential_label: str
    credential_placeholder: str
    docs_url: str
    extra_config_fields: tuple[ExtraConfigField, ...] = ()
    requires_cloud_credentials: bool = False
    allows_ambient_credentials: bool = False
    supports_tools: bool = False
    _model_index: dict[str, ModelDescriptor] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_model_index", {m.id: m for m in self.models})

    @property
    def allows_free_form_model(self) -> bool:
        return any(f.key == "modelId" for f in self.extra_config_fields)

    def find_model(self, model_id: str) -> ModelDescriptor | None:
        return self._model_index.get(model_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.display_name,
            "badge": self.badge,
            "models": [m.to_dict() for m in self.models],
            "apiKeyLabel": self.credential_label,
            "apiKeyPlaceholder": self.credential_placeholder,
            "docsUrl": self.docs_url,
            "extraConfigFields": [f.to_dict() for f in self.extra_config_fields],
            "requiresCloudCredentials": self.requires_cloud_credentials,
            "allowsAmbientCredentials": self.allows_ambient_credentials,
            "supportsTools": self.supports_tools,
        }
