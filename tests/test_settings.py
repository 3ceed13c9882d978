"""
Unit tests for startup configuration.
"""
import logging

import pytest

from config import settings as settings_module
from config.settings import load_settings
from conftest import make_settings


class TestLoadSettings:

    def test_missing_secret_logs_and_exits(self, monkeypatch, caplog):
        monkeypatch.setattr(settings_module, "Settings", lambda: make_settings(refresh_token_secret=""))

        with caplog.at_level(logging.CRITICAL, logger="parushop.app"):
            with pytest.raises(SystemExit) as exc:
                load_settings()

        assert exc.value.code == 1
        assert "Security keys missing" in caplog.text

    def test_identical_secrets_warn(self, monkeypatch, caplog):
        monkeypatch.setattr(
            settings_module, "Settings",
            lambda: make_settings(access_token_secret="same", refresh_token_secret="same"),
        )

        with caplog.at_level(logging.WARNING, logger="parushop.app"):
            settings = load_settings()

        assert settings.access_token_secret == "same"
        assert "identical" in caplog.text

    def test_configured_secrets_load(self, monkeypatch):
        monkeypatch.setattr(settings_module, "Settings", lambda: make_settings())

        assert load_settings().refresh_token_secret
