# logger_setup.py

import logging
import os
import json

LOGGER_NAME = "particle_choreography"

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(module)s - %(message)s"


def setup_logging(config_path='config.json', runs_dir='runs'):
    """
    Configures the "particle_choreography" logger for one run.

    The run log goes to <runs_dir>/<run_id>/simulation.log. A console handler
    is added unless logging.console is false. The logger does not propagate,
    so Numba and pygame output stays out of the run log.

    Data Contract:
    - Inputs:
        - config_path (str) - Path to the configuration file.
        - runs_dir (str) - Parent directory of the per-run directories.
    - Outputs: str - Path of the log file. main() writes its profile stats
      beside it.
    - Side Effects:
        - Replaces any handlers already on the logger.
        - Creates the run directory.
    - Invariants: Every key is optional. 'run_id' defaults to "default",
      and 'logging' may set 'level', 'format' and 'console'.
    """
    with open(config_path, 'r') as f:
        config = json.load(f)

    run_id = config.get('run_id', 'default')
    log_config = config.get('logging', {})
    level = log_config.get('level', DEFAULT_LEVEL)
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    log_dir = os.path.join(runs_dir, run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'simulation.log')

    formatter = logging.Formatter(log_config.get('format', DEFAULT_FORMAT))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if log_config.get('console', True):
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    logger.info(f"Logging initialized at {logging.getLevelName(logger.level)}. Run ID: {run_id}. Log file: {log_file}")
    return log_file
