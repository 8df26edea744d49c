import pytest

from lightchat.app.core.errors import ConfigurationError
from lightchat.app.providers.catalogue import PROVIDERS
from lightchat.app.providers.resolver import provider_options, resolve, supported_provider_ids

REQUIRED_EXTRA = {
    "azure": {"resourceName": "my-resource"},
    "openai-compatible": {"baseURL": "https://llm.example.com/v1", "modelId": "custom"},
    "amazon-bedrock": {"secretAccessKey": "secret", "region": "eu-west-1"},
    "google-vertex": {"project": "my-project"},
}


def _model_for(provider):
    return provider.models[0].id if provider.models else ""


def test_every_catalogue_provider_has_a_rule():
    assert sorted(supported_provider_ids()) == sorted(p.id for p in PROVIDERS)


@pytest.mark.parametrize("provider", PROVIDERS, ids=lambda p: p.id)
def test_every_provider_resolves_with_required_fields(provider):
    handle = resolve(provider.id, "key-123", _model_for(provider), REQUIRED_EXTRA.get(provider.id))

    assert handle.provider_id == provider.id
    assert handle.route.endswith("/" + handle.model)
    assert handle.model


def test_unknown_provider_fails():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve("openrouter", "key", "some-model")
    assert exc_info.value.message == 'Unsupported provider: "openrouter". Check your settings.'


def test_azure_requires_resource_name():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve("azure", "key", "gpt-4o", {})
    assert "resource name" in exc_info.value.message


def test_azure_builds_endpoint_and_api_version():
    handle = resolve("azure", "key", "gpt-4o", {"resourceName": "acme"})
    assert handle.route == "azure/gpt-4o"
    assert handle.params["api_base"] == "https://acme.openai.azure.com"
    assert handle.params["api_version"] == "2024-10-21"

    pinned = resolve("azure", "key", "gpt-4o", {"resourceName": "acme", "apiVersion": "2025-01-01-preview"})
    assert pinned.params["api_version"] == "2025-01-01-preview"


def test_openai_compatible_requires_base_url():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve("openai-compatible", "key", "m", {"modelId": "m"})
    assert exc_info.value.message == "OpenAI-compatible provider requires a base URL."


def test_openai_compatible_requires_some_model():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve("openai-compatible", "key", "", {"baseURL": "http://localhost:8080/v1"})
    assert "modelId" in exc_info.value.message


def test_openai_compatible_model_precedence():
    extra = {"baseURL": "http://localhost:8080/v1/", "modelId": "from-extra"}

    assert resolve("openai-compatible", "key", "", extra).model == "from-extra"
    explicit = resolve("openai-compatible", "key", "explicit", extra)
    assert explicit.model == "explicit"
    assert explicit.params["api_base"] == "http://localhost:8080/v1"


def test_bedrock_requires_secret_access_key():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve("amazon-bedrock", "AKIA", "us.amazon.nova-pro-v1:0", {"region": "us-west-2"})
    assert "Secret Access Key" in exc_info.value.message


def test_bedrock_defaults_region():
    handle = resolve("amazon-bedrock", "AKIA", "us.amazon.nova-pro-v1:0", {"secretAccessKey": "s"})
    assert handle.params == {
        "aws_access_key_id": "AKIA",
        "aws_secret_access_key": "s",
        "aws_region_name": "us-east-1",
    }


def test_vertex_requires_project():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve("google-vertex", "", "gemini-2.5-pro", {"location": "europe-west4"})
    assert "Project ID" in exc_info.value.message


def test_vertex_rejects_api_key_in_extra_config():
    with pytest.raises(ConfigurationError) as exc_info:
        resolve(
            "google-vertex",
            "",
            "gemini-2.5-pro",
            {"project": "p", "location": "us-central1", "apiKey": "AIza-nope"},
        )
    assert "Remove the API key" in exc_info.value.message


def test_resolutions_are_independent():
    first = resolve("openai", "sk-a", "gpt-4o")
    second = resolve("openai", "sk-a", "gpt-4o")

    assert first == second
    assert first is not second
    assert first.params is not second.params

    first.params["api_key"] = "changed"
    assert second.params["api_key"] == "sk-a"


def test_provider_options_only_for_declared_efforts():
    assert provider_options("openai", "gpt-5.2", "xhigh") == {"reasoning_effort": "xhigh"}
    assert provider_options("openai", "o3", "xhigh") == {}
    assert provider_options("xai", "grok-3-mini-beta", "low") == {"reasoning_effort": "low"}
    assert provider_options("openai", "gpt-4o", "low") == {}
    assert provider_options("openai", "o3", None) == {}
    assert provider_options("nope", "o3", "low") == {}
