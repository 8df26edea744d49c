"""Static catalogue of supported providers.

Each entry drives both the settings UI (served from ``GET /providers``) and
the model resolver. Adding a provider means appending a descriptor here and
a construction rule in ``resolver.py``.
"""
from __future__ import annotations

from lightchat.app.providers.types import ExtraConfigField, ModelDescriptor, ProviderDescriptor

DEFAULT_PROVIDER_ID = "google"

_EFFORT_LMH = ("low", "medium", "high")
_EFFORT_ALL = ("low", "medium", "high", "xhigh")


def _models(*entries) -> tuple[ModelDescriptor, ...]:
    return tuple(ModelDescriptor(*entry) for entry in entries)


PROVIDERS: tuple[ProviderDescriptor, ...] = (
    # Simple API-key providers
    ProviderDescriptor(
        id="openai",
        display_name="OpenAI",
        badge="OpenAI",
        models=_models(
            ("gpt-5.2", "GPT-5.2", _EFFORT_ALL),
            ("gpt-4.1", "GPT-4.1"),
            ("gpt-4.1-mini", "GPT-4.1 Mini"),
            ("gpt-4.1-nano", "GPT-4.1 Nano"),
            ("o4-mini", "o4-mini", _EFFORT_LMH),
            ("o3", "o3", _EFFORT_LMH),
            ("o3-mini", "o3-mini", _EFFORT_LMH),
            ("o1", "o1", _EFFORT_LMH),
            ("o1-pro", "o1-pro", _EFFORT_LMH),
            ("gpt-4o", "GPT-4o"),
            ("gpt-4o-mini", "GPT-4o Mini"),
        ),
        credential_label="OpenAI API Key",
        credential_placeholder="sk-…",
        docs_url="https://platform.openai.com/api-keys",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="anthropic",
        display_name="Anthropic",
        badge="Anthropic",
        models=_models(
            ("claude-opus-4-6", "Claude Opus 4.6"),
            ("claude-sonnet-4-6", "Claude Sonnet 4.6"),
            ("claude-haiku-4-5-20251001", "Claude Haiku 4.5"),
            ("claude-opus-4-5-20251101", "Claude Opus 4.5"),
            ("claude-3-5-sonnet-20241022", "Claude 3.5 Sonnet"),
            ("claude-3-5-haiku-20241022", "Claude 3.5 Haiku"),
        ),
        credential_label="Anthropic API Key",
        credential_placeholder="sk-ant-…",
        docs_url="https://console.anthropic.com/settings/keys",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="google",
        display_name="Google Generative AI",
        badge="Google",
        models=_models(
            ("gemini-2.5-pro", "Gemini 2.5 Pro"),
            ("gemini-2.5-flash", "Gemini 2.5 Flash"),
            ("gemini-2.5-flash-lite", "Gemini 2.5 Flash-Lite"),
            ("gemini-2.0-flash", "Gemini 2.0 Flash"),
            ("gemini-2.0-flash-lite", "Gemini 2.0 Flash-Lite"),
        ),
        credential_label="Google AI API Key",
        credential_placeholder="AIza…",
        docs_url="https://aistudio.google.com/app/apikey",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="xai",
        display_name="xAI Grok",
        badge="xAI",
        models=_models(
            ("grok-3", "Grok 3"),
            ("grok-3-latest", "Grok 3 (latest)"),
            ("grok-3-mini-beta", "Grok 3 Mini", ("low", "high")),
            ("grok-2-1212", "Grok 2"),
            ("grok-2-vision-1212", "Grok 2 Vision"),
        ),
        credential_label="xAI API Key",
        credential_placeholder="xai-…",
        docs_url="https://console.x.ai/",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="mistral",
        display_name="Mistral",
        badge="Mistral",
        models=_models(
            ("mistral-large-latest", "Mistral Large"),
            ("pixtral-large-latest", "Pixtral Large (Vision)"),
            ("mistral-small-latest", "Mistral Small"),
            ("codestral-latest", "Codestral"),
            ("mistral-nemo", "Mistral Nemo 12B"),
            ("open-mixtral-8x22b", "Mixtral 8×22B"),
        ),
        credential_label="Mistral API Key",
        credential_placeholder="…",
        docs_url="https://console.mistral.ai/api-keys/",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="groq",
        display_name="Groq",
        badge="Groq",
        models=_models(
            ("meta-llama/llama-4-maverick-17b-128e-instruct", "Llama 4 Maverick 17B"),
            ("llama-3.3-70b-versatile", "LLaMA 3.3 70B"),
            ("qwen-qwq-32b", "Qwen QwQ 32B"),
            ("deepseek-r1-distill-llama-70b", "DeepSeek R1 Distill 70B"),
            ("deepseek-r1-distill-qwen-32b", "DeepSeek R1 Distill Qwen 32B"),
            ("llama-3.1-8b-instant", "LLaMA 3.1 8B Instant"),
            ("gemma2-9b-it", "Gemma 2 9B"),
        ),
        credential_label="Groq API Key",
        credential_placeholder="gsk_…",
        docs_url="https://console.groq.com/keys",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="cohere",
        display_name="Cohere",
        badge="Cohere",
        models=_models(
            ("command-r-plus", "Command R+"),
            ("command-r7b-12-2024", "Command R7B"),
            ("command-r-08-2024", "Command R (Aug 2024)"),
        ),
        credential_label="Cohere API Key",
        credential_placeholder="…",
        docs_url="https://dashboard.cohere.com/api-keys",
    ),
    ProviderDescriptor(
        id="deepseek",
        display_name="DeepSeek",
        badge="DeepSeek",
        models=_models(
            ("deepseek-chat", "DeepSeek Chat (V3)"),
            ("deepseek-reasoner", "DeepSeek Reasoner (R1)"),
        ),
        credential_label="DeepSeek API Key",
        credential_placeholder="sk-…",
        docs_url="https://platform.deepseek.com/api_keys",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="perplexity",
        display_name="Perplexity",
        badge="Perplexity",
        models=_models(
            ("sonar-pro", "Sonar Pro"),
            ("sonar-reasoning-pro", "Sonar Reasoning Pro"),
            ("sonar-deep-research", "Sonar Deep Research"),
            ("sonar", "Sonar"),
            ("sonar-reasoning", "Sonar Reasoning"),
        ),
        credential_label="Perplexity API Key",
        credential_placeholder="pplx-…",
        docs_url="https://www.perplexity.ai/settings/api",
    ),
    ProviderDescriptor(
        id="cerebras",
        display_name="Cerebras",
        badge="Cerebras",
        models=_models(
            ("llama-4-maverick-400b", "Llama 4 Maverick 400B"),
            ("qwen-3-235b-a22b-instruct-2507", "Qwen 3 235B"),
            ("llama-3.3-70b", "LLaMA 3.3 70B"),
            ("llama3.1-8b", "LLaMA 3.1 8B"),
        ),
        credential_label="Cerebras API Key",
        credential_placeholder="…",
        docs_url="https://cloud.cerebras.ai/",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="fireworks",
        display_name="Fireworks AI",
        badge="Fireworks",
        models=_models(
            ("accounts/fireworks/models/qwen3-coder-480b-a35b-instruct", "Qwen 3 Coder 480B"),
            ("accounts/fireworks/models/deepseek-v3p1-terminus", "DeepSeek V3.1"),
            ("accounts/fireworks/models/deepseek-r1-0528", "DeepSeek R1"),
            ("accounts/fireworks/models/kimi-k2-instruct-0905", "Kimi K2"),
            ("accounts/fireworks/models/llama-v3p3-70b-instruct", "LLaMA 3.3 70B"),
        ),
        credential_label="Fireworks API Key",
        credential_placeholder="fw_…",
        docs_url="https://fireworks.ai/account/api-keys",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="deepinfra",
        display_name="DeepInfra",
        badge="DeepInfra",
        models=_models(
            ("deepseek-ai/DeepSeek-V3.2", "DeepSeek V3.2"),
            ("deepseek-ai/DeepSeek-V3", "DeepSeek V3"),
            ("meta-llama/Llama-3.3-70B-Instruct-Turbo", "LLaMA 3.3 70B Turbo"),
            ("meta-llama/Meta-Llama-3.1-70B-Instruct", "LLaMA 3.1 70B"),
            ("microsoft/phi-4", "Phi-4"),
        ),
        credential_label="DeepInfra API Key",
        credential_placeholder="…",
        docs_url="https://deepinfra.com/dash/api_keys",
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="togetherai",
        display_name="Together AI",
        badge="Together",
        models=_models(
            ("Qwen/Qwen3-235B-Instruct", "Qwen 3 235B"),
            ("Qwen/Qwen3-235B-Thinking", "Qwen 3 235B Thinking"),
            ("meta-llama/Llama-3.3-70B-Instruct-Turbo", "LLaMA 3.3 70B Turbo"),
            ("meta-llama/Llama-3.3-70B-Instruct-Turbo-Free", "LLaMA 3.3 70B Turbo (Free)"),
            ("meta-llama/Meta-Llama-3.1-8B-Instruct-Turbo", "LLaMA 3.1 8B Turbo"),
            ("Qwen/Qwen2.5-7B-Turbo", "Qwen 2.5 7B Turbo"),
        ),
        credential_label="Together AI API Key",
        credential_placeholder="…",
        docs_url="https://api.together.xyz/settings/api-keys",
        supports_tools=True,
    ),
    # Providers with extra configuration fields
    ProviderDescriptor(
        id="azure",
        display_name="Azure OpenAI",
        badge="Azure",
        models=_models(
            ("gpt-4.1", "GPT-4.1"),
            ("gpt-4o", "GPT-4o"),
            ("gpt-4o-mini", "GPT-4o Mini"),
            ("o3-mini", "o3-mini", _EFFORT_LMH),
            ("o1", "o1", _EFFORT_LMH),
        ),
        credential_label="Azure OpenAI API Key",
        credential_placeholder="…",
        docs_url="https://portal.azure.com/",
        extra_config_fields=(
            ExtraConfigField(
                key="resourceName",
                label="Azure Resource Name",
                placeholder="my-azure-openai-resource",
                required=True,
            ),
            ExtraConfigField(
                key="apiVersion",
                label="API Version",
                placeholder="2024-10-21",
                required=False,
            ),
        ),
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="openai-compatible",
        display_name="OpenAI-compatible",
        badge="Custom",
        models=(),
        credential_label="API Key",
        credential_placeholder="…",
        docs_url="",
        extra_config_fields=(
            ExtraConfigField(
                key="baseURL",
                label="Base URL",
                placeholder="https://api.my-provider.com/v1",
                required=True,
            ),
            ExtraConfigField(
                key="modelId",
                label="Model ID",
                placeholder="my-model",
                required=True,
            ),
        ),
    ),
    # Cloud-credential providers
    ProviderDescriptor(
        id="amazon-bedrock",
        display_name="Amazon Bedrock",
        badge="Bedrock",
        models=_models(
            ("anthropic.claude-opus-4-6-v1:0", "Claude Opus 4.6"),
            ("anthropic.claude-3-5-sonnet-20241022-v2:0", "Claude 3.5 Sonnet"),
            ("anthropic.claude-3-5-haiku-20241022-v1:0", "Claude 3.5 Haiku"),
            ("us.amazon.nova-pro-v1:0", "Amazon Nova Pro"),
            ("us.amazon.nova-lite-v1:0", "Amazon Nova Lite"),
            ("us.amazon.nova-micro-v1:0", "Amazon Nova Micro"),
            ("meta.llama3-3-70b-instruct-v1:0", "LLaMA 3.3 70B"),
        ),
        credential_label="AWS Access Key ID",
        credential_placeholder="AKIA…",
        docs_url="https://console.aws.amazon.com/iam/",
        extra_config_fields=(
            ExtraConfigField(
                key="secretAccessKey",
                label="AWS Secret Access Key",
                placeholder="…",
                required=True,
                sensitivity="secret",
            ),
            ExtraConfigField(
                key="region",
                label="AWS Region",
                placeholder="us-east-1",
                required=True,
            ),
        ),
        requires_cloud_credentials=True,
        supports_tools=True,
    ),
    ProviderDescriptor(
        id="google-vertex",
        display_name="Google Vertex AI",
        badge="Vertex",
        models=_models(
            ("gemini-2.5-pro", "Gemini 2.5 Pro"),
            ("gemini-2.5-flash", "Gemini 2.5 Flash"),
            ("gemini-2.0-flash", "Gemini 2.0 Flash"),
            ("gemini-2.0-flash-lite", "Gemini 2.0 Flash-Lite"),
        ),
        credential_label="Google Cloud API Key (or leave blank for ADC)",
        credential_placeholder="AIza… (optional)",
        docs_url="https://cloud.google.com/vertex-ai/docs/authentication",
        extra_config_fields=(
            ExtraConfigField(
                key="project",
                label="GCP Project ID",
                placeholder="my-gcp-project",
                required=True,
            ),
            ExtraConfigField(
                key="location",
                label="Region / Location",
                placeholder="us-central1",
                required=False,
            ),
        ),
        requires_cloud_credentials=True,
        allows_ambient_credentials=True,
        supports_tools=True,
    ),
)

PROVIDER_MAP: dict[str, ProviderDescriptor] = {p.id: p for p in PROVIDERS}

if len(PROVIDER_MAP) != len(PROVIDERS):
    raise RuntimeError("Provider ids must be unique")


def lookup(provider_id: str | None) -> ProviderDescriptor | None:
    if not provider_id:
        return None
    return PROVIDER_MAP.get(provider_id)


def list_providers() -> list[ProviderDescriptor]:
    return list(PROVIDERS)
