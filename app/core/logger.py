# app/core/logger.py

import logging
import sys

from app.core.config import settings

logger = logging.getLogger("exams")
logger.setLevel(settings.LOG_LEVEL.upper())
logger.propagate = False  # Prevent log duplication

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter("[%(asctime)s] %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
