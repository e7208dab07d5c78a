"""
Tests for ClientConfig loading and applying it to a client.
"""

import pytest

from jsonwire.config import ClientConfig, HttpConfig, get_default_config, set_default_config
from jsonwire.http import ApiClient, DebugSink, MockTransport, create_client
from jsonwire.schemas import ApiResponse, ConfigException


class Thing(ApiResponse):
    id: int = 0


_ENV_VARS = [
    "JSONWIRE_TIMEOUT",
    "JSONWIRE_BASE_URL",
    "JSONWIRE_USER_AGENT",
    "JSONWIRE_AUTH_SCHEME",
    "JSONWIRE_AUTH_TOKEN",
    "JSONWIRE_DEBUG",
    "JSONWIRE_HTTP_PROXY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ClientConfig()

    assert config.http.timeout == 30.0
    assert config.http.base_url is None
    assert config.debug is False
    assert config.proxy is None


def test_from_dict_partial():
    config = ClientConfig.from_dict({
        "http": {"timeout": 5, "default_headers": {"Accept": "application/json", "X-Num": 3}},
        "debug": True,
    })

    assert config.http.timeout == 5
    assert config.http.default_headers == {"Accept": "application/json", "X-Num": "3"}
    assert config.http.user_agent == HttpConfig().user_agent
    assert config.debug is True


@pytest.mark.parametrize("raw, expected", [
    ("false", False),
    ("no", False),
    ("true", True),
    ("On", True),
    (False, False),
    (1, True),
])
def test_from_dict_debug_flag(raw, expected):
    assert ClientConfig.from_dict({"debug": raw}).debug is expected


def test_from_yaml(tmp_path):
    path = tmp_path / "client.yaml"
    path.write_text(
        "http:\n"
        "  timeout: 12.5\n"
        "  base_url: https://api.example.com/v2\n"
        "  auth_scheme: Bearer\n"
        "  auth_token: secret\n"
        "debug: false\n"
    )

    config = ClientConfig.from_yaml(path)

    assert config.http.timeout == 12.5
    assert config.http.base_url == "https://api.example.com/v2"
    assert config.http.auth_scheme == "Bearer"


def test_from_yaml_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        ClientConfig.from_yaml(tmp_path / "nope.yaml")


def test_from_yaml_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")

    assert ClientConfig.from_yaml(path) == ClientConfig()


def test_from_env(monkeypatch):
    monkeypatch.setenv("JSONWIRE_TIMEOUT", "7")
    monkeypatch.setenv("JSONWIRE_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("JSONWIRE_AUTH_SCHEME", "Token")
    monkeypatch.setenv("JSONWIRE_AUTH_TOKEN", "xyz")
    monkeypatch.setenv("JSONWIRE_DEBUG", "true")

    config = ClientConfig.from_env()

    assert config.http.timeout == 7.0
    assert config.http.base_url == "https://env.example.com"
    assert config.http.auth_scheme == "Token"
    assert config.http.auth_token == "xyz"
    assert config.debug is True


def test_bad_env_timeout(monkeypatch):
    monkeypatch.setenv("JSONWIRE_TIMEOUT", "soon")

    with pytest.raises(ConfigException):
        ClientConfig.from_env()


def test_with_env_overrides(monkeypatch):
    base = ClientConfig.from_dict({"http": {"timeout": 3, "user_agent": "svc/1"}})
    assert base.with_env_overrides() is base

    monkeypatch.setenv("JSONWIRE_TIMEOUT", "9")
    monkeypatch.setenv("JSONWIRE_HTTP_PROXY", "http://proxy:3128")
    merged = base.with_env_overrides()

    assert merged is not base
    assert merged.http.timeout == 9.0
    assert merged.http.user_agent == "svc/1"
    assert merged.proxy == "http://proxy:3128"
    assert base.http.timeout == 3


def test_to_dict_never_includes_token():
    config = ClientConfig(http=HttpConfig(auth_scheme="Bearer", auth_token="secret"))

    data = config.to_dict()

    assert data["http"]["auth_scheme"] == "Bearer"
    assert "auth_token" not in data["http"]
    assert "secret" not in repr(data)


def test_default_config_is_cached(monkeypatch):
    monkeypatch.setenv("JSONWIRE_TIMEOUT", "4")
    first = get_default_config()
    monkeypatch.setenv("JSONWIRE_TIMEOUT", "8")

    assert get_default_config() is first
    assert first.http.timeout == 4.0

    custom = ClientConfig(debug=True)
    set_default_config(custom)
    assert get_default_config() is custom


class TestFromConfig:

    def test_applies_settings_to_handle(self):
        config = ClientConfig(
            http=HttpConfig(
                timeout=4,
                base_url="https://api.example.com/v1",
                user_agent="svc/2",
                default_headers={"Accept": "application/json"},
                auth_scheme="Bearer",
                auth_token="tok",
            ),
            debug=True,
        )
        transport = MockTransport().add("GET", "https://api.example.com/v1/ok", body='{"id": 3}')

        client = ApiClient.from_config(config, transport=transport)
        thing = client.get("/ok", Thing)

        call = transport.calls[0]
        assert thing.id == 3
        assert call["timeout"] == 4.0
        assert call["headers"] == {
            "User-Agent": "svc/2",
            "Accept": "application/json",
            "Authorization": "Bearer tok",
        }
        assert client.debug_sink.is_debug_enabled()

    def test_invalid_timeout_rejected(self):
        config = ClientConfig(http=HttpConfig(timeout=0))

        with pytest.raises(ConfigException):
            ApiClient.from_config(config, transport=MockTransport())

    def test_create_client_uses_default_config(self):
        set_default_config(ClientConfig(http=HttpConfig(timeout=2, user_agent="")))
        transport = MockTransport().add("GET", "/ok", body="{}")

        client = create_client(transport=transport)
        client.get("/ok", Thing)

        assert transport.calls[0]["timeout"] == 2.0
        assert transport.calls[0]["headers"] == {}
        assert isinstance(client.debug_sink, DebugSink)
        assert not client.debug_sink.is_debug_enabled()

    def test_client_rejects_transport_and_handle(self):
        from jsonwire.http import TransportHandle

        with pytest.raises(ValueError):
            ApiClient(MockTransport(), handle=TransportHandle(MockTransport()))
