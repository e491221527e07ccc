"""
Configuration and dependency management for the mo-agent server.
"""

import logging
from functools import lru_cache

from mo_agent.dispatcher import ActionDispatcher
from mo_agent.tools.bash_tool import BashTool
from mo_agent.tools.git_tool import GitTool
from mo_agent.utils.config import ServiceConfig
from mo_agent.utils.config_store import ConfigStore

logger = logging.getLogger(__name__)


@lru_cache
def get_base_config() -> ServiceConfig:
    """
    Retrieves the process settings from environment variables.

    Returns:
        A cached instance of the ServiceConfig.
    """
    return ServiceConfig()


@lru_cache
def get_config_store() -> ConfigStore:
    """
    Loads mo.config.json once per process, creating it when missing.

    Raises:
        ConfigError: If the file exists but is unreadable or invalid.
    """
    config = get_base_config()
    return ConfigStore.load_or_create(config.config_path)


# --- Tool Providers ---


@lru_cache
def get_bash_tool_provider() -> BashTool:
    """Returns a cached instance of the BashTool."""
    config = get_base_config()
    logger.info("Initializing BashTool singleton.")
    return BashTool(config.root_dir, timeout=config.MO_COMMAND_TIMEOUT)


@lru_cache
def get_git_tool_provider() -> GitTool:
    """Returns a cached instance of the GitTool."""
    config = get_base_config()
    logger.info("Initializing GitTool singleton.")
    return GitTool(config.root_dir, timeout=config.MO_COMMAND_TIMEOUT)


@lru_cache
def get_dispatcher() -> ActionDispatcher:
    """Returns the process-wide ActionDispatcher. Session state lives per connection, not here."""
    return ActionDispatcher(
        root=get_base_config().root_dir,
        config_store=get_config_store(),
        bash_tool=get_bash_tool_provider(),
        git_tool=get_git_tool_provider(),
    )
