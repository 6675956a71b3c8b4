"""
ENCRYPTION LOGGING
==================
Logger for field encryption events.
"""

# FLOW:
# - get_logger() returns "encryption.converter", adding a rotating file
#   handler when ENCRYPTION_LOG_FILE is set.
# WHY:
# - Failures and key bypass must be traceable without leaking values.
# HOW:
# - stdlib logging; never pass keys or plaintext to the logger.

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from Encryption.encryption_config import ENCRYPTION_SETTINGS

LOGGER_NAME = "encryption.converter"


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    log_file = ENCRYPTION_SETTINGS["LOG_FILE"]
    if not log_file or any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return logger

    directory = os.path.dirname(log_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=3)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    return logger
