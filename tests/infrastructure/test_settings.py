"""Tests for environment-driven settings and logging setup."""

import logging
from pathlib import Path

import pytest

from backoffice.domain.exceptions import ValidationError
from backoffice.infrastructure.logging_config import configure_logging
from backoffice.infrastructure.settings import DEFAULT_DATA_DIR, Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.data_dir == DEFAULT_DATA_DIR
        assert settings.lock_timeout == 5.0
        assert settings.transaction_timeout is None
        assert settings.default_payment_method == "cash"
        assert settings.log_level == "WARNING"

    def test_from_env(self, tmp_path):
        settings = Settings.from_env({
            "BACKOFFICE_DATA_DIR": str(tmp_path),
            "BACKOFFICE_LOCK_TIMEOUT": "0.5",
            "BACKOFFICE_TRANSACTION_TIMEOUT": "2",
            "BACKOFFICE_PAYMENT_METHOD": "card",
            "BACKOFFICE_LOG_LEVEL": "info",
        })
        assert settings.store_path == tmp_path / "store.json"
        assert settings.audit_log_path == tmp_path / "audit.jsonl"
        assert settings.lock_timeout == 0.5
        assert settings.transaction_timeout == 2.0
        assert settings.default_payment_method == "card"
        assert settings.log_level == "INFO"

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_bad_timeout_rejected(self, raw):
        with pytest.raises(ValidationError, match="BACKOFFICE_LOCK_TIMEOUT"):
            Settings.from_env({"BACKOFFICE_LOCK_TIMEOUT": raw})

    def test_with_data_dir(self):
        settings = Settings()
        assert settings.with_data_dir(None) is settings
        assert settings.with_data_dir(Path("/tmp/x")).data_dir == Path("/tmp/x")


class TestConfigureLogging:

    def test_verbose_means_debug(self):
        configure_logging("WARNING", verbose=True)
        assert logging.getLogger("backoffice").level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self):
        configure_logging("CHATTY")
        assert logging.getLogger("backoffice").level == logging.WARNING
