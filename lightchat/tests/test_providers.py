from lightchat.app.providers.catalogue import DEFAULT_PROVIDER_ID, PROVIDER_MAP, PROVIDERS, lookup


def test_catalogue_ids_are_unique_and_non_empty():
    ids = [p.id for p in PROVIDERS]
    assert len(ids) == len(set(ids)) == 17
    assert DEFAULT_PROVIDER_ID in PROVIDER_MAP


def test_model_ids_unique_within_provider():
    for provider in PROVIDERS:
        model_ids = [m.id for m in provider.models]
        assert len(model_ids) == len(set(model_ids)), provider.id


def test_free_form_provider_has_no_models():
    provider = lookup("openai-compatible")
    assert provider.models == ()
    assert provider.allows_free_form_model
    assert not lookup("openai").allows_free_form_model


def test_lookup_unknown_and_empty():
    assert lookup("nope") is None
    assert lookup("") is None
    assert lookup(None) is None


def test_only_vertex_allows_ambient_credentials():
    ambient = [p.id for p in PROVIDERS if p.allows_ambient_credentials]
    assert ambient == ["google-vertex"]


def test_list_providers_endpoint(client):
    response = client.get("/providers")

    assert response.status_code == 200
    data = response.json()
    assert data["defaultProvider"] == "google"
    assert [p["id"] for p in data["providers"]] == [p.id for p in PROVIDERS]

    bedrock = next(p for p in data["providers"] if p["id"] == "amazon-bedrock")
    secret = next(f for f in bedrock["extraConfigFields"] if f["key"] == "secretAccessKey")
    assert secret["type"] == "password"
    assert bedrock["requiresCloudCredentials"] is True


def test_get_provider_endpoint(client):
    response = client.get("/providers/openai")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "OpenAI"
    assert data["supportsTools"] is True
    gpt5 = next(m for m in data["models"] if m["id"] == "gpt-5.2")
    assert gpt5["reasoningEffortOptions"] == ["low", "medium", "high", "xhigh"]


def test_get_unknown_provider_is_404(client):
    response = client.get("/providers/nope")

    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "PROVIDER_NOT_FOUND"
    assert "request_id" in data
