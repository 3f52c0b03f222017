import pytest

from truesign_auth import (
    AesTokenDecryptor,
    ConfigurationError,
    SchemaVersion,
    VerificationConfig,
    default_extractor,
    policies,
    settings_from_env,
)

from conftest import FakeRequest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "TRUESIGN_ENCRYPTION_KEY",
        "TRUESIGN_BYPASS",
        "TRUESIGN_INJECT_KEY",
        "TRUESIGN_QUERY_PARAM",
        "TRUESIGN_HEADER",
        "TRUESIGN_SCHEMA",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = VerificationConfig(encryption_key="k")
    assert config.bypass is False
    assert config.inject_key == "ts_token"
    assert config.extract_token is default_extractor
    assert config.accept_policy is policies.accept_all
    assert isinstance(config.decryptor, AesTokenDecryptor)
    assert config.uses_builtin_decryptor


def test_config_is_read_only():
    config = VerificationConfig(encryption_key="k")
    with pytest.raises(AttributeError):
        config.bypass = True  # type: ignore[misc]


def test_custom_decrypt_fn_is_used():
    def decrypt(key, raw):
        return None

    config = VerificationConfig(encryption_key="k", decrypt_fn=decrypt)
    assert config.decryptor is decrypt
    assert not config.uses_builtin_decryptor


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("TRUESIGN_ENCRYPTION_KEY", "0123456789abcdef0123456789abcdef")
    monkeypatch.setenv("TRUESIGN_INJECT_KEY", "risk")
    monkeypatch.setenv("TRUESIGN_SCHEMA", "Boolean")

    config = settings_from_env(extra={"max_age": 60})

    assert config.encryption_key == "0123456789abcdef0123456789abcdef"
    assert config.bypass is False
    assert config.inject_key == "risk"
    assert config.schema is SchemaVersion.BOOLEAN
    assert config.decryptor.schema is SchemaVersion.BOOLEAN
    assert config.extra == {"max_age": 60}


def test_settings_from_env_custom_names(monkeypatch):
    monkeypatch.setenv("TRUESIGN_ENCRYPTION_KEY", "k")
    monkeypatch.setenv("TRUESIGN_QUERY_PARAM", "token")
    monkeypatch.setenv("TRUESIGN_HEADER", "X-Risk-Token")

    extract = settings_from_env().extract_token

    assert extract(FakeRequest(query={"token": "Q"}, headers={"x-risk-token": "H"})) == "Q"
    assert extract(FakeRequest(headers={"x-risk-token": "H"})) == "H"
    assert extract(FakeRequest(query={"ts-token": "Q"})) is None


def test_settings_from_env_requires_key():
    with pytest.raises(ConfigurationError, match="TRUESIGN_ENCRYPTION_KEY"):
        settings_from_env()


@pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
def test_settings_from_env_bypass(monkeypatch, value):
    monkeypatch.setenv("TRUESIGN_BYPASS", value)
    config = settings_from_env()
    assert config.bypass is True
    assert config.encryption_key is None


def test_settings_from_env_bad_schema(monkeypatch):
    monkeypatch.setenv("TRUESIGN_ENCRYPTION_KEY", "k")
    monkeypatch.setenv("TRUESIGN_SCHEMA", "v7")
    with pytest.raises(ConfigurationError, match="TRUESIGN_SCHEMA"):
        settings_from_env()
