from concurrent.futures import ThreadPoolExecutor

import pytest

from nutrisnack_dashboard import assistant, config
from nutrisnack_dashboard.errors import ConfigurationError
from nutrisnack_dashboard.loaders import client as client_module


@pytest.fixture(autouse=True)
def _fresh_client():
    client_module.reset_supabase_client()
    yield
    client_module.reset_supabase_client()


def test_missing_credentials_raise(monkeypatch):
    monkeypatch.setattr(config, "SUPABASE_URL", None)
    monkeypatch.setattr(config, "SUPABASE_KEY", None)

    with pytest.raises(ConfigurationError):
        client_module.get_supabase_client()


def test_client_is_created_once_under_concurrency(monkeypatch):
    created = []

    def fake_create_client(url, key):
        created.append((url, key))
        return object()

    monkeypatch.setattr(config, "SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setattr(config, "SUPABASE_KEY", "anon-key")
    monkeypatch.setattr(client_module, "create_client", fake_create_client)

    with ThreadPoolExecutor(max_workers=8) as pool:
        clients = list(pool.map(lambda _: client_module.get_supabase_client(), range(32)))

    assert len(created) == 1
    assert all(c is clients[0] for c in clients)


def test_anthropic_client_requires_key(monkeypatch):
    monkeypatch.setattr(config, "ANTHROPIC_API_KEY", None)
    monkeypatch.setattr(assistant, "_client", None)

    with pytest.raises(ConfigurationError):
        assistant.get_anthropic_client()
