"""Tests for engine configuration."""

import logging
import os
from pathlib import Path

from ruleforge.config import EngineConfig


class TestEngineConfig:
    def test_defaults(self, monkeypatch):
        for name in ("RULEFORGE_LOCALE", "RULEFORGE_TRANSLATIONS_PATH", "RULEFORGE_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = EngineConfig.from_env()

        assert config.locale == "en"
        assert config.translations_paths == []
        assert config.logging_level == logging.WARNING

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("RULEFORGE_LOCALE", "fr")
        monkeypatch.setenv("RULEFORGE_TRANSLATIONS_PATH", os.pathsep.join(["/a", "/b"]))
        monkeypatch.setenv("RULEFORGE_LOG_LEVEL", "debug")

        config = EngineConfig.from_env()

        assert config.locale == "fr"
        assert config.translations_paths == [Path("/a"), Path("/b")]
        assert config.log_level == "DEBUG"
        assert config.logging_level == logging.DEBUG

    def test_unknown_log_level(self):
        assert EngineConfig(log_level="LOUD").logging_level == logging.WARNING
