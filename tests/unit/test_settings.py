import pydantic
import pytest

from tatum_portfolio.config.settings import AppSettings, get_settings
from tatum_portfolio.core import errors


def test_settings_default_values() -> None:
    settings = AppSettings(TATUM_API_KEY="dummy-key")
    assert settings.tatum_api_key == "dummy-key"
    assert settings.base_url == "https://api.tatum.io"
    assert settings.tatum_timeout == 30.0
    assert settings.query_timeout is None
    assert settings.ipfs_gateway == "https://ipfs.io/ipfs/"
    assert settings.log_level == "INFO"


def test_settings_missing_api_key_is_not_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TATUM_API_KEY", raising=False)
    settings = AppSettings(_env_file=None)
    assert settings.tatum_api_key == ""


def test_settings_empty_query_timeout_means_none() -> None:
    settings = AppSettings(QUERY_TIMEOUT="", LOG_LEVEL="debug")
    assert settings.query_timeout is None
    assert settings.log_level == "DEBUG"


def test_settings_reject_invalid_values() -> None:
    with pytest.raises(pydantic.ValidationError):
        AppSettings(TATUM_TIMEOUT="0")
    with pytest.raises(pydantic.ValidationError):
        AppSettings(LOG_LEVEL="chatty")


def test_get_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TATUM_API_KEY", "env-key")
    monkeypatch.setenv("QUERY_TIMEOUT", "5")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.tatum_api_key == "env-key"
        assert settings.query_timeout == 5.0
    finally:
        get_settings.cache_clear()


def test_get_settings_surfaces_invalid_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TATUM_TIMEOUT", "-1")
    get_settings.cache_clear()
    try:
        with pytest.raises(pydantic.ValidationError) as excinfo:
            get_settings()
        assert "TATUM_TIMEOUT" in str(excinfo.value)
    finally:
        get_settings.cache_clear()
    assert not hasattr(errors, "ConfigurationError")
