import os

import pytest

from merakidash.domain.exceptions import ValidationError
from merakidash.infrastructure.config import settings


@pytest.fixture
def yaml_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "meraki:\n"
        "  api_key: yaml-key\n"
        "engine:\n"
        "  max_attempts: 3\n"
        "  retryable_statuses: [502, 503]\n"
        "rate_limit:\n"
        "  max_requests: 4\n"
        "http:\n"
        "  timeout: 15\n"
        "  verify_ssl: false\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def loaded(yaml_file, tmp_path):
    settings.load_configuration(config_file=yaml_file, env_file=tmp_path / "absent.env", force=True)
    yield
    settings.load_configuration(config_file=tmp_path / "absent.yaml", force=True)


def test_yaml_values_are_flattened(loaded):
    assert settings.get_config("engine.max_attempts") == 3
    assert settings.get_config("missing.key", "fallback") == "fallback"


def test_env_overrides_yaml(loaded, monkeypatch):
    monkeypatch.setenv("MERAKIDASH_ENGINE_MAX_ATTEMPTS", "9")
    assert settings.get_config("engine.max_attempts") == 9


def test_env_values_are_coerced(monkeypatch):
    monkeypatch.setenv("MERAKIDASH_HTTP_VERIFY_SSL", "false")
    monkeypatch.setenv("MERAKIDASH_HTTP_TIMEOUT", "2.5")
    assert settings.get_config("http.verify_ssl") is False
    assert settings.get_config("http.timeout") == 2.5


def test_test_config_has_highest_priority(loaded, monkeypatch):
    monkeypatch.setenv("MERAKIDASH_ENGINE_MAX_ATTEMPTS", "9")
    settings.set_config("engine.max_attempts", 8)
    settings.set_config_for_testing({"engine.max_attempts": 1})
    assert settings.get_config("engine.max_attempts") == 1
    settings.clear_test_config()
    assert settings.get_config("engine.max_attempts") == 9


def test_set_config_survives_reload(tmp_path):
    settings.set_config("logging.level", "DEBUG")
    settings.load_configuration(config_file=tmp_path / "absent.yaml", force=True)
    assert settings.get_config("logging.level") == "DEBUG"


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("MERAKI_DASHBOARD_API_KEY=dotenv-key\n", encoding="utf-8")
    monkeypatch.delenv("MERAKI_DASHBOARD_API_KEY", raising=False)
    settings.load_configuration(config_file=tmp_path / "absent.yaml", env_file=env_file, force=True)
    try:
        assert settings.get_api_key() == "dotenv-key"
    finally:
        os.environ.pop("MERAKI_DASHBOARD_API_KEY", None)


def test_api_key_sources(loaded, monkeypatch):
    assert settings.get_api_key() == "yaml-key"
    monkeypatch.setenv(settings.API_KEY_ENV_VAR, "env-key")
    assert settings.get_api_key() == "env-key"
    settings.set_config_for_testing({"meraki.api_key": "test-key"})
    assert settings.get_api_key() == "test-key"


def test_typed_accessors(loaded):
    policy = settings.get_retry_policy()
    assert policy.max_attempts == 3
    assert policy.retryable_statuses == frozenset({502, 503})

    limits = settings.get_rate_limit_settings()
    assert limits.max_requests == 4

    transport = settings.get_transport_settings()
    assert transport.read_timeout == 15.0
    assert transport.verify_ssl is False
    assert transport.base_url == "https://api.meraki.com/api/v1"


def test_retryable_statuses_from_env_string(monkeypatch):
    monkeypatch.setenv("MERAKIDASH_ENGINE_RETRYABLE_STATUSES", "500,503")
    assert settings.get_retry_policy().retryable_statuses == frozenset({500, 503})


def test_invalid_policy_rejected():
    settings.set_config_for_testing({"engine.max_attempts": 0})
    with pytest.raises(ValidationError):
        settings.get_retry_policy()


def test_env_var_name():
    assert settings.env_var_name("engine.max_attempts") == "MERAKIDASH_ENGINE_MAX_ATTEMPTS"
