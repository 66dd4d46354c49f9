# utils.py
"""
Utility functions for the animation framework.

This module provides helper functions, such as logging setup and the
random range draws, that are used across different parts of the
application but do not belong to a specific domain like motion or rendering.
"""
import logging
import logging.handlers
import json
import os
import numpy as np
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Outputs: None
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#   - Invariants: After this function runs, the logging system is
#     initialized and ready for use throughout the application.
#
# uniform(low: float, high: float, rng: Optional[np.random.Generator]) -> float:
#   - Inputs: the bounds of a numeric interval and an optional generator.
#   - Outputs: a float in [low, high). Exactly `low` when low == high.
#   - Side Effects: Advances the generator's state only.
#   - Invariants: Callers guarantee low <= high. A reversed interval is
#     tolerated and yields a value in (high, low].

# Shared generator for callers that do not supply their own. Unseeded, so
# runs are not reproducible unless a seed is configured.
_default_rng = np.random.default_rng()


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Creates a generator; a None seed gives a non-reproducible stream."""
    return np.random.default_rng(seed)


def uniform(low: float, high: float, rng: Optional[np.random.Generator] = None) -> float:
    """Draws a value uniformly from [low, high)."""
    rng = rng if rng is not None else _default_rng
    return low + (high - low) * float(rng.random())


def random_sign(rng: Optional[np.random.Generator] = None) -> int:
    """Returns +1 or -1 with equal probability."""
    rng = rng if rng is not None else _default_rng
    return 1 if rng.random() > 0.5 else -1


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/animation.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    # Get the root logger
    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise
