"""Tests for environment-driven settings."""

import logging

import pytest

from credgraph import ConfigError, CredGraphError, Preparator
from credgraph.config import LOGGER_NAME, Settings, configure_logging


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.log_level == "WARNING"
        assert settings.freeze_on_prepare is False

    def test_from_env(self):
        settings = Settings.from_env({
            "CREDGRAPH_LOG_LEVEL": "debug",
            "CREDGRAPH_FREEZE_ON_PREPARE": "true",
        })
        assert settings.log_level == "DEBUG"
        assert settings.freeze_on_prepare is True

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("CREDGRAPH_FREEZE_ON_PREPARE", "1")
        assert Settings.from_env().freeze_on_prepare is True

    def test_bad_flag(self):
        with pytest.raises(ConfigError, match="CREDGRAPH_FREEZE_ON_PREPARE"):
            Settings.from_env({"CREDGRAPH_FREEZE_ON_PREPARE": "maybe"})

    def test_bad_log_level(self):
        with pytest.raises(ConfigError, match="Unknown log level") as exc_info:
            Settings(log_level="LOUD")
        assert isinstance(exc_info.value, CredGraphError)
        assert exc_info.value.code == "CG_CONFIG"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Settings().log_level = "INFO"  # type: ignore[misc]


class TestConfigureLogging:
    def test_sets_package_logger_level(self):
        logger = logging.getLogger(LOGGER_NAME)
        previous = logger.level
        try:
            configure_logging(Settings(log_level="DEBUG"))
            assert logger.level == logging.DEBUG
            assert logging.getLogger("credgraph.graph").getEffectiveLevel() == logging.DEBUG
        finally:
            logger.setLevel(previous)


class TestPreparatorIgnoresEnvironment:
    @pytest.mark.parametrize("variable,value", [
        ("CREDGRAPH_LOG_LEVEL", "verbose"),
        ("CREDGRAPH_FREEZE_ON_PREPARE", "maybe"),
    ])
    def test_malformed_variable_does_not_break_constructor(self, monkeypatch, variable, value):
        monkeypatch.setenv(variable, value)
        assert Preparator().graph.frozen is False

    def test_freeze_flag_in_environment_not_applied(self, monkeypatch, credential, schema):
        monkeypatch.setenv("CREDGRAPH_FREEZE_ON_PREPARE", "true")
        preparator = Preparator()
        preparator.prepare(credential, schema)
        assert preparator.graph.frozen is False

    def test_explicit_from_env_is_honoured(self, monkeypatch, credential, schema):
        monkeypatch.setenv("CREDGRAPH_FREEZE_ON_PREPARE", "true")
        preparator = Preparator(settings=Settings.from_env())
        preparator.prepare(credential, schema)
        assert preparator.graph.frozen is True
