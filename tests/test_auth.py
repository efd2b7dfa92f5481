import json

import pytest

from cloudlink.core.auth import _sanitize_url, get_adapter, load_config
from cloudlink.core.errors import AuthError


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for var in ("CLOUDLINK_URL", "CLOUDLINK_TOKEN", "CLOUDLINK_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("CLOUDLINK_CONFIG_DIR", str(tmp_path))


def _write(tmp_path, name: str, payload) -> None:
    (tmp_path / f"{name}.json").write_text(json.dumps(payload))


def test_sanitize_url_strips_query_and_trailing_slash():
    assert _sanitize_url("https://cloud.example.com/?x=1") == "https://cloud.example.com"


def test_load_config_reads_saved_login(tmp_path):
    _write(tmp_path, "config", {"url": "https://cloud.example.com/", "token_info": {"token": "t0k"}})

    cfg = load_config()

    assert cfg.url == "https://cloud.example.com"
    assert cfg.token == "t0k"
    assert cfg.timeout == 30.0


def test_load_config_named_environment_and_env_overrides(tmp_path, monkeypatch):
    _write(tmp_path, "staging", {"url": "https://staging.example.com", "token_info": {"token": "a"}})
    monkeypatch.setenv("CLOUDLINK_TOKEN", "override")
    monkeypatch.setenv("CLOUDLINK_TIMEOUT", "not-a-number")

    cfg = load_config("staging")

    assert cfg.url == "https://staging.example.com"
    assert cfg.token == "override"
    assert cfg.timeout == 30.0


def test_load_config_without_login_raises_auth_error():
    with pytest.raises(AuthError, match="--environment-name staging"):
        load_config("staging")


def test_load_config_invalid_json_raises_auth_error(tmp_path):
    (tmp_path / "config.json").write_text("{not json")

    with pytest.raises(AuthError, match="Could not read"):
        load_config()


def test_get_adapter_sets_base_url_and_token(monkeypatch):
    monkeypatch.setenv("CLOUDLINK_URL", "https://cloud.example.com")
    monkeypatch.setenv("CLOUDLINK_TOKEN", "secret")

    adapter = get_adapter()
    try:
        assert str(adapter.client.base_url).rstrip("/") == "https://cloud.example.com"
        assert adapter.client.headers["Authorization"] == "Bearer secret"
    finally:
        adapter.close()
