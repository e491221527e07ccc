"""
The main entry point for the mo-agent server.

This script handles environment loading, logging configuration, config file
loading, port selection, and server execution.
"""

import logging
import os
import socket
import sys

from dotenv import load_dotenv

MAX_PORT = 65535


def setup_environment() -> bool:
    """
    Loads environment variables and configures application-wide logging.
    """
    load_dotenv()  # Load environment variables from .env file.

    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.info("Environment and logging configured.")
    return True


def find_available_port(start_port: int, host: str = "127.0.0.1") -> int:
    """
    Returns the first port at or above start_port that can be bound on host.

    Raises:
        RuntimeError: If every port up to 65535 is taken.
    """
    for port in range(start_port, MAX_PORT + 1):
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            s.bind((host, port))
            return port
        except OSError:
            continue
        finally:
            s.close()
    raise RuntimeError(f"No available port at or above {start_port}")


def run_server() -> None:
    """
    Sets up the environment, loads mo.config.json and runs the WebSocket server.
    """
    if not setup_environment():
        logging.critical("Initial environment setup failed. Exiting.")
        sys.exit(1)

    import uvicorn

    # Import server components after setup to ensure environment is loaded first.
    from .server import app
    from .utils.config import ConfigError
    from .utils.dependencies import get_base_config, get_config_store

    logger = logging.getLogger(__name__)
    server_config = get_base_config()

    try:
        store = get_config_store()
    except ConfigError as e:
        logger.critical("%s", e)
        sys.exit(1)

    start_port = server_config.MO_PORT or store.config.port
    try:
        port = find_available_port(start_port, server_config.MO_HOST)
    except RuntimeError as e:
        logger.critical("Unable to find available port: %s", e)
        sys.exit(1)

    logger.info("--- Mo-2 Agent ---")
    logger.info("Project root: %s", server_config.root_dir)
    logger.info("Mo-2 Agent Server running at http://localhost:%s", port)

    uvicorn.run(app, host=server_config.MO_HOST, port=port, log_level=server_config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run_server()
