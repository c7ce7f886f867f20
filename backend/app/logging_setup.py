# backend/app/logging_setup.py
import logging
from logging.handlers import RotatingFileHandler
import os

from .settings import LOG_DIR, LOG_LEVEL

os.makedirs(LOG_DIR, exist_ok=True)

def setup_logger():
    logger = logging.getLogger("risqmap")
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - [%(levelname)s] - %(name)s - %(message)s"
    )

    handler = RotatingFileHandler(
        os.path.join(LOG_DIR, "backend.log"),
        maxBytes=5_000_000,
        backupCount=3,
        encoding="utf-8"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)
    return logger

logger = setup_logger()
