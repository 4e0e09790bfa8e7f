# -*- coding: utf-8 -*-

import os

ROOT = os.path.dirname(os.path.abspath(__file__))

with open(os.path.join(ROOT, 'VERSION')) as version_file:
    VERSION = version_file.read().strip()

from gameasure.engine import GAMeasurement  # noqa: E402
from gameasure.config import EngineConfig, get_engine_config  # noqa: E402

__all__ = ["GAMeasurement", "EngineConfig", "get_engine_config", "VERSION"]
