import pytest

from cordrest.domain.models.credential import TokenType
from cordrest.infrastructure.config import settings


def test_test_config_has_highest_priority(monkeypatch):
    monkeypatch.setenv("API_BASE", "https://env.example/api/")
    settings.set_config_for_testing({"api.base": "https://test.example/api"})
    assert settings.get_api_base() == "https://test.example/api/"


def test_environment_variable_lookup_and_coercion(monkeypatch):
    monkeypatch.setenv("API_RETRY_COUNT", "3")
    monkeypatch.setenv("API_VERIFY_TLS", "false")
    assert settings.get_retry_count() == 3
    assert settings.get_config("api.verify_tls") is False


def test_defaults(monkeypatch):
    for name in ("API_BASE", "API_CONNECTION_TIMEOUT", "API_RETRY_COUNT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings, "_config", {})
    assert settings.get_api_base() == settings.DEFAULT_API_BASE
    assert settings.get_connection_timeout() == 5000
    assert settings.get_retry_count() == 5


@pytest.mark.parametrize(
    "raw, expected",
    [("bot", TokenType.BOT), ("Bearer", TokenType.BEARER), ("none", TokenType.NONE), ("weird", TokenType.BOT)]
)
def test_token_type_mapping(raw, expected):
    settings.set_config_for_testing({"CORDREST_TOKEN_TYPE": raw})
    assert settings.get_token_type() is expected


def test_yaml_file_is_flattened(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("api:\n  base: https://yaml.example/api/v10\n  retry_count: 2\nauth:\n  token: from-yaml\n")
    monkeypatch.delenv("API_BASE", raising=False)
    monkeypatch.delenv("API_RETRY_COUNT", raising=False)
    monkeypatch.delenv("CORDREST_TOKEN", raising=False)
    monkeypatch.setattr(settings, "find_dotenv_path", lambda: None)

    settings.load_configuration(config_file=config_file, reload=True)
    try:
        assert settings.get_api_base() == "https://yaml.example/api/v10/"
        assert settings.get_retry_count() == 2
        assert settings.get_token() == "from-yaml"
    finally:
        settings.load_configuration(config_file=tmp_path / "missing.yaml", reload=True)
