"""
Loading and persisting the project configuration file.

All writes of mo.config.json go through ConfigStore.persist.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from mo_agent.utils.config import ConfigError, ProjectConfig

logger = logging.getLogger(__name__)


class ConfigStore:
    """Owns the project configuration and the file it lives in."""

    def __init__(self, path: Path, config: ProjectConfig) -> None:
        self.path = path
        self.config = config

    @classmethod
    def load_or_create(cls, path: Path) -> "ConfigStore":
        """
        Reads the configuration file, writing the default template first if it
        does not exist.

        Raises:
            ConfigError: If the file cannot be read, is not valid JSON, or
                fails validation.
        """
        if not path.exists():
            store = cls(path, ProjectConfig.default())
            store.persist()
            logger.info("Created %s with default template", path.name)
            return store

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Error reading {path}: {e}") from e

        try:
            config = ProjectConfig.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {path}: {e}") from e

        logger.info("Loaded configuration from %s", path)
        return cls(path, config)

    def persist(self) -> None:
        """Writes the current configuration back to disk. OSError propagates."""
        text = json.dumps(self.config.to_file_dict(), indent=2, ensure_ascii=False)
        self.path.write_text(text, encoding="utf-8")
        logger.debug("Persisted configuration to %s", self.path)

    def mark_initialized(self) -> None:
        self.config.is_initialized = True
        self.persist()

    def register_app(self, app_id: str | None) -> None:
        self.config.app_id = app_id
        self.mark_initialized()
