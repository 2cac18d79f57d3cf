"""Tests for RequestConfig validation and the INI ConfigManager."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from icon_request.exceptions import ConfigurationError
from icon_request.models.config import DEFAULT_EMAIL_SUBJECT, RequestConfig
from icon_request.storage.config_manager import ConfigManager


# ── RequestConfig ──────────────────────────────────────────────────────────────


class TestRequestConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        config = RequestConfig(email_recipient="a@b.c", cache_folder=tmp_path)
        assert config.email_subject == DEFAULT_EMAIL_SUBJECT
        assert config.include_device_info is True
        assert config.json_manifest is True
        assert not config.is_remote
        assert config.has_delivery_target

    def test_api_key_selects_remote(self, remote_config: RequestConfig) -> None:
        assert remote_config.is_remote

    def test_blank_values_are_unset(self, tmp_path: Path) -> None:
        config = RequestConfig(email_recipient="  ", api_key="", cache_folder=tmp_path)
        assert config.email_recipient is None
        assert config.api_key is None
        assert not config.has_delivery_target

    def test_identifiers_are_stripped(self, tmp_path: Path) -> None:
        config = RequestConfig(email_recipient=" designer@example.com\n", email_subject=" Icons ", cache_folder=tmp_path)
        assert config.email_recipient == "designer@example.com"
        assert config.email_subject == "Icons"

    def test_email_text_keeps_surrounding_newlines(self, tmp_path: Path) -> None:
        config = RequestConfig(
            email_recipient="a@b.c", email_header="\nHi!\n", email_footer="  Thanks\n\n", cache_folder=tmp_path
        )
        assert config.email_header == "\nHi!\n"
        assert config.email_footer == "  Thanks\n\n"

    def test_api_key_requires_host(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="api_host"):
            RequestConfig(api_key="k", cache_folder=tmp_path)

    def test_host_must_be_http_url(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="http"):
            RequestConfig(api_key="k", api_host="ftp://example.com", cache_folder=tmp_path)

    def test_cache_folder_required(self) -> None:
        with pytest.raises(ValidationError):
            RequestConfig(email_recipient="a@b.c", cache_folder="  ")

    def test_is_frozen(self, share_config: RequestConfig) -> None:
        with pytest.raises(ValidationError):
            share_config.api_key = "k"


# ── ConfigManager ──────────────────────────────────────────────────────────────


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    return tmp_path / "icon-request" / "config.ini"


class TestConfigManager:
    def test_missing_file(self, config_file: Path) -> None:
        with pytest.raises(ConfigurationError, match="init"):
            ConfigManager(config_file).load_config()

    def test_save_then_load(self, config_file: Path, tmp_path: Path) -> None:
        manager = ConfigManager(config_file)
        manager.save_new_config(
            {
                "email_recipient": "designer@example.com",
                "cache_folder": str(tmp_path / "cache"),
                "email_header": "Hello\nthere",
                "include_device_info": False,
            }
        )

        config = ConfigManager(config_file).load_config()

        assert config.email_recipient == "designer@example.com"
        assert config.cache_folder == tmp_path / "cache"
        assert config.email_header == "Hello\nthere"
        assert config.include_device_info is False
        assert config.api_key is None

    def test_default_cache_folder(self, config_file: Path) -> None:
        ConfigManager(config_file).save_new_config({"email_recipient": "a@b.c"})
        config = ConfigManager(config_file).load_config()
        assert config.cache_folder == config_file.parent / "cache"

    def test_cli_overrides(self, config_file: Path) -> None:
        ConfigManager(config_file).save_new_config({"email_recipient": "a@b.c"})
        config = ConfigManager(config_file).load_config(
            {"api_key": "k", "api_host": "https://example.com/v1/request", "email_subject": None}
        )
        assert config.is_remote
        assert config.email_subject == DEFAULT_EMAIL_SUBJECT

    def test_invalid_values(self, config_file: Path) -> None:
        ConfigManager(config_file).save_new_config({"api_key": "k"})
        with pytest.raises(ConfigurationError, match="validation failed"):
            ConfigManager(config_file).load_config()

    def test_invalid_boolean(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text("[DEFAULT]\nemail_recipient = a@b.c\ninclude_device_info = maybe\n")
        with pytest.raises(ConfigurationError, match="boolean"):
            ConfigManager(config_file).load_config()

    def test_migrates_missing_keys(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text("[DEFAULT]\nemail_recipient = a@b.c\n")

        ConfigManager(config_file).load_config()

        text = config_file.read_text()
        for key in RequestConfig.get_ini_keys():
            assert f"{key} =" in text
