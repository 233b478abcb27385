# logger_setup.py

import logging
from typing import Any, Dict, Optional

LOGGER_NAME = "playground"


def setup_logging(log_config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Sets up logging for the application.

    Configures a dedicated application logger (not the root logger) so that
    pygame and Dear PyGui output is left alone. Logs always go to the console,
    and additionally to a file when one is configured.

    Data Contract:
    - Inputs: log_config (dict) - the 'logging' section of the config, with
      optional 'level', 'format' and 'file' keys.
    - Outputs: the configured "playground" logger.
    - Side Effects: replaces any handlers previously attached to that logger.
    """
    log_config = log_config or {}

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config.get('level', 'INFO'))

    # --- Prevent logs from propagating to the root logger ---
    logger.propagate = False

    formatter = logging.Formatter(log_config.get('format') or '%(asctime)s - %(levelname)s - %(message)s')

    # Clear existing handlers to avoid duplication if this function is called again
    if logger.hasHandlers():
        logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    log_file = log_config.get('file')
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized. Level: {logging.getLevelName(logger.level)}. Log file: {log_file}")
    return logger
