import logging
import os
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

logs_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'logs')

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# HTTP and SDK loggers used by the inference gateway
NOISY_LOGGERS = ("groq", "httpx", "httpcore", "urllib3")

def log_file_path(directory: str, day: Optional[datetime] = None) -> str:
    day = day or datetime.now()
    return os.path.join(directory, f'app_{day.strftime("%Y%m%d")}.log')

def setup_logging(level: int = logging.INFO, log_to_file: bool = True,
                  logs_path: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for the interview pipeline.

    Replaces existing handlers with a daily rotating file under logs/ (optional)
    and a console handler. Module loggers ('project_extractor', 'inference_gateway',
    ...) propagate here.
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    if log_to_file:
        directory = logs_path or logs_dir
        os.makedirs(directory, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file_path(directory),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding='utf-8'
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
