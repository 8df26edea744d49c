"""Resolve a provider selection into a ready-to-use model handle.

``resolve`` is a flat dispatch keyed by provider id. Every rule validates its
own extra configuration and returns a fresh ``ModelHandle``; nothing is cached
because each request may carry different credentials.
"""
from __future__ import annotations

from typing import Any, Callable, Mapping

from lightchat.app.config.settings import settings
from lightchat.app.core.errors import ConfigurationError
from lightchat.app.providers.catalogue import lookup
from lightchat.app.providers.handle import ModelHandle

Rule = Callable[[str, str, Mapping[str, str]], ModelHandle]

DEFAULT_BEDROCK_REGION = "us-east-1"
DEFAULT_VERTEX_LOCATION = "us-central1"


def _api_key_rule(provider_id: str, prefix: str) -> Rule:
    def build(api_key: str, model: str, extra: Mapping[str, str]) -> ModelHandle:
        return ModelHandle(
            provider_id=provider_id,
            model=model,
            route=f"{prefix}/{model}",
            params={"api_key": api_key},
        )

    return build


def _azure(api_key: str, model: str, extra: Mapping[str, str]) -> ModelHandle:
    resource_name = extra.get("resourceName")
    if not resource_name:
        raise ConfigurationError("Azure requires a resource name in extra config.")
    return ModelHandle(
        provider_id="azure",
        model=model,
        route=f"azure/{model}",
        params={
            "api_key": api_key,
            "api_base": f"https://{resource_name}.openai.azure.com",
            "api_version": extra.get("apiVersion") or settings.azure_api_version,
        },
    )


def _openai_compatible(api_key: str, model: str, extra: Mapping[str, str]) -> ModelHandle:
    base_url = extra.get("baseURL")
    if not base_url:
        raise ConfigurationError("OpenAI-compatible provider requires a base URL.")
    effective_model = model or extra.get("modelId")
    if not effective_model:
        raise ConfigurationError(
            "openai-compatible provider requires a model or extraConfig.modelId"
        )
    return ModelHandle(
        provider_id="openai-compatible",
        model=effective_model,
        route=f"openai/{effective_model}",
        params={"api_key": api_key, "api_base": base_url.rstrip("/")},
    )


def _amazon_bedrock(api_key: str, model: str, extra: Mapping[str, str]) -> ModelHandle:
    secret_access_key = extra.get("secretAccessKey")
    if not api_key:
        raise ConfigurationError("Amazon Bedrock requires an AWS Access Key ID.")
    if not secret_access_key:
        raise ConfigurationError("Amazon Bedrock requires an AWS Secret Access Key.")
    return ModelHandle(
        provider_id="amazon-bedrock",
        model=model,
        route=f"bedrock/{model}",
        params={
            "aws_access_key_id": api_key,
            "aws_secret_access_key": secret_access_key,
            "aws_region_name": extra.get("region") or DEFAULT_BEDROCK_REGION,
        },
    )


def _google_vertex(api_key: str, model: str, extra: Mapping[str, str]) -> ModelHandle:
    project = extra.get("project")
    if not project:
        raise ConfigurationError("Google Vertex AI requires a GCP Project ID.")
    if extra.get("apiKey"):
        raise ConfigurationError(
            "google-vertex does not support an API key. Vertex AI authenticates with "
            "Application Default Credentials (ADC) or service-account credentials. "
            "Remove the API key and configure ADC instead."
        )
    # Credentials come from the server environment (ADC).
    return ModelHandle(
        provider_id="google-vertex",
        model=model,
        route=f"vertex_ai/{model}",
        params={
            "vertex_project": project,
            "vertex_location": extra.get("location") or DEFAULT_VERTEX_LOCATION,
        },
    )


_RULES: dict[str, Rule] = {
    "openai": _api_key_rule("openai", "openai"),
    "anthropic": _api_key_rule("anthropic", "anthropic"),
    "google": _api_key_rule("google", "gemini"),
    "xai": _api_key_rule("xai", "xai"),
    "mistral": _api_key_rule("mistral", "mistral"),
    "groq": _api_key_rule("groq", "groq"),
    "cohere": _api_key_rule("cohere", "cohere_chat"),
    "deepseek": _api_key_rule("deepseek", "deepseek"),
    "perplexity": _api_key_rule("perplexity", "perplexity"),
    "cerebras": _api_key_rule("cerebras", "cerebras"),
    "fireworks": _api_key_rule("fireworks", "fireworks_ai"),
    "deepinfra": _api_key_rule("deepinfra", "deepinfra"),
    "togetherai": _api_key_rule("togetherai", "together_ai"),
    "azure": _azure,
    "openai-compatible": _openai_compatible,
    "amazon-bedrock": _amazon_bedrock,
    "google-vertex": _google_vertex,
}


def resolve(
    provider: str,
    api_key: str,
    model: str,
    extra_config: Mapping[str, str] | None = None,
) -> ModelHandle:
    """Build a model handle or raise ``ConfigurationError``."""
    rule = _RULES.get(provider) if lookup(provider) else None
    if rule is None:
        raise ConfigurationError(f'Unsupported provider: "{provider}". Check your settings.')
    return rule(api_key, model, dict(extra_config or {}))


def provider_options(
    provider: str, model: str, reasoning_effort: str | None = None
) -> dict[str, Any]:
    """Provider-specific call options for the selected model.

    The reasoning-effort hint is only forwarded when the catalogue lists that
    value for the model; anything else is dropped.
    """
    if not reasoning_effort:
        return {}
    descriptor = lookup(provider)
    model_info = descriptor.find_model(model) if descriptor else None
    if model_info is None or reasoning_effort not in model_info.reasoning_effort_options:
        return {}
    return {"reasoning_effort": reasoning_effort}


def supported_provider_ids() -> list[str]:
    return list(_RULES)
