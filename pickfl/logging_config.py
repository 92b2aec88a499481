"""Logging setup for PICKFL admin runs.

Every module logs through a child of the 'pickfl' logger. A run attaches
two handlers to that parent: a console handler for the operator and a
daily log file under <data_dir>/logs, so a week's scoring history stays
next to the documents it changed.
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from .config import get_data_dir, get_log_level
from .constants import NOISY_LOGGERS

FILE_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def log_file_path(data_dir: Path, run_name: str = 'admin', today: Optional[date] = None) -> Path:
    """Daily log file for a run, e.g. data/logs/pickfl_admin_2025-09-07.log."""
    today = today or date.today()
    return data_dir / 'logs' / f'pickfl_{run_name}_{today.isoformat()}.log'


def setup_logging(
    data_dir: Optional[Path] = None,
    verbose: bool = False,
    log_to_file: bool = True,
    log_to_console: bool = True,
    run_name: str = 'admin',
) -> logging.Logger:
    """
    Attach handlers to the 'pickfl' logger for one run.

    Safe to call again: handlers from an earlier call are closed and replaced.

    Args:
        data_dir: League data directory; logs go to <data_dir>/logs
            (default: the configured data directory)
        verbose: Log at DEBUG and let HTTP client chatter through
            (default: level from league_config.json)
        log_to_file: Append to the run's daily log file
        log_to_console: Echo to stdout
        run_name: Log file name component

    Returns:
        The 'pickfl' logger
    """
    level = logging.DEBUG if verbose else get_log_level()

    logger = logging.getLogger('pickfl')
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_to_file:
        path = log_file_path(data_dir or get_data_dir(), run_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    return logger
