# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2025 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Logging setup utilities for the PALoSA pseudonymization services."""

from __future__ import annotations

import logging
import os
import warnings
from pathlib import Path

LOGGER_NAME = 'pseudonymize'


def _get_log_level(arg_log_level: str | None = None) -> int:
    """Get log level from argument or environment variable."""
    if arg_log_level:
        return logging.getLevelName(arg_log_level.upper())

    log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
    return logging.getLevelName(log_level)


def setup_logging(log_level: str | None = None) -> logging.Logger:
    """Set up the pipeline logger with a console handler and an optional log file.

    The console handler is skipped when the root logger already has handlers.
    The log file is only written when ``LOG_DIR`` is set, so importing the
    core never creates directories as a side effect.
    """
    log_level = _get_log_level(log_level)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = True

    # Clear existing handlers to prevent duplicates
    if logger.hasHandlers():
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    # Django configures a root console handler, records propagate to it
    if not logging.getLogger().hasHandlers():
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler.setLevel(log_level)
        logger.addHandler(console_handler)

    log_dir = os.environ.get('LOG_DIR')

    if log_dir:
        log_path = Path(log_dir)
        log_file_path = log_path / 'pseudonymize.log'

        try:
            log_path.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_file_path), encoding='utf-8')
            file_handler.setFormatter(formatter)
            file_handler.setLevel(log_level)
            logger.addHandler(file_handler)
        except OSError as error:
            warnings.warn(f'Cannot create log file "{log_file_path}": {error}', stacklevel=2)

    return logger
