"""Engine configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class EngineConfig:
    """Configuration for a validator and the CLI.

    Attributes:
        locale: Message catalog locale (e.g., "en", "fr")
        translations_paths: Extra directories holding <locale>.yaml catalogs
        log_level: Logging level name for the CLI
    """

    locale: str = "en"
    translations_paths: list[Path] = field(default_factory=list)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Create config from environment variables.

        - RULEFORGE_LOCALE: catalog locale (default: en)
        - RULEFORGE_TRANSLATIONS_PATH: extra catalog directories, separated by os.pathsep
        - RULEFORGE_LOG_LEVEL: logging level name (default: WARNING)
        """
        paths = os.environ.get("RULEFORGE_TRANSLATIONS_PATH", "")
        return cls(
            locale=os.environ.get("RULEFORGE_LOCALE", "en") or "en",
            translations_paths=[Path(p) for p in paths.split(os.pathsep) if p],
            log_level=os.environ.get("RULEFORGE_LOG_LEVEL", "WARNING").upper(),
        )

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.WARNING
