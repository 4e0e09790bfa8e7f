# -*- coding: utf-8 -*-
import os
from enum import Enum
from pathlib import Path

DIR_NAME = ".gameasure"


def get_user_dir() -> Path:
    """
    Get the user directory for the gameasure configuration.

    Returns:
        Path: The user directory path.
    """
    path = Path("~", DIR_NAME).expanduser()
    return path


USER_CONFIG_DIR = get_user_dir()

CONFIG_FILE_NAME = "config.ini"
CONFIG = Path(os.getenv("GAMEASURE_CONFIG_PATH", USER_CONFIG_DIR / CONFIG_FILE_NAME))

DEFAULT_DOMAIN = "www.google-analytics.com"


class URLSettings(Enum):
    BATCH_URL = f"https://{DEFAULT_DOMAIN}/batch"
    COLLECT_URL = f"https://{DEFAULT_DOMAIN}/collect"


BATCH_URL = URLSettings.BATCH_URL.value
COLLECT_URL = URLSettings.COLLECT_URL.value

# Delay between the first hit entering an empty queue and its flush
FLUSH_DELAY = 0.5

REQUEST_TIMEOUT = 20.0

HIT_SEPARATOR = "\n"

# Exit codes
EXIT_CODE_OK = 0
EXIT_CODE_FAILURE = 1
EXIT_CODE_DELIVERY_FAILED = 64
EXIT_CODE_INVALID_HIT = 65
