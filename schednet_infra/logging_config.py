# schednet_infra/logging_config.py
from __future__ import annotations
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from schednet_infra.path import user_data_dir


def setup_logging(level: Optional[str] = None, log_dir: Optional[Path] = None) -> Path:
    """
    Configure the root logger with a rotating file under the per-user data dir
    and a console handler. Returns the log file path.
    """
    log_dir = log_dir or (user_data_dir() / "logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "schednet.log"

    level_name = (level or os.getenv("SCHEDNET_LOG_LEVEL", "INFO")).strip().upper()

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    # repeated calls must not stack handlers
    logger.handlers.clear()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1_000_000,  # 1 MB per file
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    )
    logger.addHandler(file_handler)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(console)

    logger.info("Logging initialized at level %s. Log file at %s", level_name, log_file)
    return log_file
