# utils.py
"""
Logging setup and config loading for the flow field application.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Reads config["logging"]: "level", "format", "log_file".
#   - Side Effects: Replaces the root logger's handlers with a console
#     handler plus, when "log_file" is set, a rotating file handler.
#     A null "log_file" logs to the console only.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed JSON, with "simulation_parameters",
#     "run_control" and "logging" always present.
#   - Raises: FileNotFoundError, json.JSONDecodeError (both logged).

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/flowfield.log'
DEFAULT_SECTIONS = ('simulation_parameters', 'run_control', 'logging')

# Rotate at 1MB, keep 5 backups.
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 5


def _rotating_file_handler(path: str) -> logging.Handler:
    log_dir = os.path.dirname(path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
    )


def setup_logging(config: Dict[str, Any]) -> None:
    """Configures the root logger from the "logging" config section."""
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)
    formatter = logging.Formatter(log_config.get('format', DEFAULT_LOG_FORMAT))

    handlers = [logging.StreamHandler()]
    if log_file_path:
        handlers.append(_rotating_file_handler(log_file_path))

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level {log_level}, log file {log_file_path or 'disabled'}.")


def load_config(path: str) -> Dict[str, Any]:
    """Loads the JSON config, filling in missing sections."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    for section in DEFAULT_SECTIONS:
        config.setdefault(section, {})
    logging.info("Configuration loaded successfully.")
    return config
