"""Tests for settings loading, status and logging setup."""

from __future__ import annotations

import logging
import os

import pytest

from facepay.config import Settings
from facepay.logging_config import ROOT_LOGGER, get_logger, setup_logging
from facepay.status import ServiceStatusRegistry


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Process environment without FACEPAY_* variables and no .env file."""
    clean = {k: v for k, v in os.environ.items() if not k.startswith("FACEPAY_")}
    monkeypatch.setattr(os, "environ", clean)
    monkeypatch.chdir(tmp_path)
    return clean


class TestSettings:
    def test_defaults(self, env, tmp_path):
        settings = Settings.from_env(str(tmp_path / "missing.env"))

        assert settings.ledger_network == "devnet"
        assert settings.admin_credential is None
        assert settings.reward_contract is None
        assert settings.face_api_url == "https://api.luxand.cloud"
        assert settings.face_timeout == 15.0
        assert settings.ledger_timeout == 30.0
        assert settings.log_level == "INFO"

    def test_reads_environment(self, env, monkeypatch, tmp_path):
        monkeypatch.setenv("FACEPAY_LEDGER_NETWORK", "Testnet")
        monkeypatch.setenv("FACEPAY_ADMIN_CREDENTIAL", "0xadmin")
        monkeypatch.setenv("FACEPAY_REWARD_CONTRACT", "0xfeed")
        monkeypatch.setenv("FACEPAY_FACE_API_TOKEN", "tok")
        monkeypatch.setenv("FACEPAY_FACE_TIMEOUT", "2.5")
        monkeypatch.setenv("FACEPAY_FACE_MIN_CONFIDENCE", "75")
        monkeypatch.setenv("FACEPAY_LOG_LEVEL", "debug")

        settings = Settings.from_env(str(tmp_path / "missing.env"))

        assert settings.ledger_network == "testnet"
        assert settings.admin_credential == "0xadmin"
        assert settings.reward_contract == "0xfeed"
        assert settings.face_api_token == "tok"
        assert settings.face_timeout == 2.5
        assert settings.face_min_confidence == 75.0
        assert settings.log_level == "DEBUG"

    def test_reads_env_file(self, env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("FACEPAY_LEDGER_NETWORK=mainnet\nFACEPAY_LEDGER_TIMEOUT=45\n")

        settings = Settings.from_env(str(env_file))

        assert settings.ledger_network == "mainnet"
        assert settings.ledger_timeout == 45.0

    @pytest.mark.parametrize(
        "name, value",
        [
            ("FACEPAY_LEDGER_NETWORK", "localnet"),
            ("FACEPAY_LOG_LEVEL", "LOUD"),
            ("FACEPAY_FACE_TIMEOUT", "0"),
            ("FACEPAY_LEDGER_TIMEOUT", "soon"),
            ("FACEPAY_FACE_MIN_CONFIDENCE", "101"),
        ],
    )
    def test_invalid_values(self, env, monkeypatch, tmp_path, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ValueError, match=name):
            Settings.from_env(str(tmp_path / "missing.env"))

    def test_secrets_not_in_repr(self):
        settings = Settings(admin_credential="0xadmin-secret", face_api_token="tok-secret")

        assert "0xadmin-secret" not in repr(settings)
        assert "tok-secret" not in repr(settings)


class TestServiceStatus:
    def test_ready_when_fully_configured(self):
        settings = Settings(ledger_network="testnet", admin_credential="0xadmin", reward_contract="0xfeed")

        registry = ServiceStatusRegistry.from_settings(settings, ledger_client_ready=True)

        assert registry.is_ready()
        assert registry.get_status().to_dict() == {
            "network": "testnet",
            "reward_contract_configured": True,
            "admin_credential_configured": True,
            "ledger_client_ready": True,
            "ready": True,
        }

    @pytest.mark.parametrize(
        "settings, client_ready",
        [
            (Settings(admin_credential="0xadmin"), True),
            (Settings(reward_contract="0xfeed"), True),
            (Settings(admin_credential="0xadmin", reward_contract="0xfeed"), False),
        ],
    )
    def test_not_ready(self, settings, client_ready):
        registry = ServiceStatusRegistry.from_settings(settings, ledger_client_ready=client_ready)

        assert not registry.is_ready()

    def test_status_is_stable(self):
        registry = ServiceStatusRegistry.from_settings(Settings(), ledger_client_ready=True)

        assert registry.get_status() == registry.get_status()


class TestLogging:
    def test_setup_configures_root(self):
        logger = setup_logging("DEBUG")

        assert logger.name == ROOT_LOGGER
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_repeated_setup_does_not_stack_handlers(self, tmp_path):
        setup_logging("INFO")
        logger = setup_logging("INFO", log_file=str(tmp_path / "facepay.log"))

        assert len(logger.handlers) == 2
        for handler in logger.handlers:
            handler.close()

    def test_module_loggers_live_under_root(self):
        assert get_logger("tests.module").name == "facepay.tests.module"
        assert get_logger("facepay.payment").name == "facepay.payment"
