import logging
import os
from typing import Optional

from config import settings


def setup_logging(log_to_file: Optional[bool] = None, log_dir: Optional[str] = None) -> None:
    """Setup logging with separate levels for console and file.

    The library never calls this itself; applications embedding the engine
    call it once at startup.
    """
    log_to_file = settings.LOG_TO_FILE if log_to_file is None else log_to_file

    # Clear any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    root_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    file_log_level = getattr(logging, getattr(settings, 'FILE_LOG_LEVEL', 'DEBUG').upper(), logging.DEBUG)
    console_log_level = getattr(logging, getattr(settings, 'CONSOLE_LOG_LEVEL', 'INFO').upper(), logging.INFO)

    detailed_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    simple_formatter = logging.Formatter('%(levelname)s - %(name)s - %(message)s')

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_log_level)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    if log_to_file:
        log_dir = log_dir or os.path.join(os.getcwd(), settings.LOG_DIR)
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(log_dir, settings.LOG_FILE_NAME))
        file_handler.setLevel(file_log_level)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)
        # Handlers filter; the root passes everything the file handler may want
        root_level = min(root_level, file_log_level)

    root_logger.setLevel(root_level)
