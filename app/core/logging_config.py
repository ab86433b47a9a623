"""Logging configuration for the application."""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from app.core.config import LOG_DIR, LOG_LEVEL

LOG_PATH = Path(LOG_DIR)
LOG_PATH.mkdir(parents=True, exist_ok=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
level = getattr(logging, LOG_LEVEL, logging.INFO)

# Single application logger shared by routes, services and the record store
logger = logging.getLogger("app")
logger.setLevel(level)

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(level)
console_handler.setFormatter(formatter)

# Everything the service logs, rotated
file_handler = RotatingFileHandler(
    LOG_PATH / "app.log",
    maxBytes=MAX_LOG_BYTES,
    backupCount=BACKUP_COUNT
)
file_handler.setLevel(level)
file_handler.setFormatter(formatter)

# Store failures and other server faults only
error_handler = RotatingFileHandler(
    LOG_PATH / "errors.log",
    maxBytes=MAX_LOG_BYTES,
    backupCount=BACKUP_COUNT
)
error_handler.setLevel(logging.ERROR)
error_handler.setFormatter(formatter)

logger.addHandler(console_handler)
logger.addHandler(file_handler)
logger.addHandler(error_handler)

logging.getLogger("uvicorn").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
