import logging
import logging.handlers
import os
from pathlib import Path


def _get_log_dir() -> Path:
    if env_dir := os.environ.get("WEEKTRACKER_LOG_DIR"):
        return Path(env_dir)
    return Path(__file__).parent / "data" / "logs"


def setup_logging(app_name: str = "weektracker", console: bool = False) -> None:
    """Configure application logging

    The terminal belongs to the UI while the app runs, so log records go
    to rotating files unless ``console`` is set.

    Args:
        app_name: Name to use for log files
        console: Also log to stderr

    """
    log_dir = _get_log_dir()
    os.makedirs(log_dir, exist_ok=True)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # File handler with rotation
    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / f"{app_name}.log",
        maxBytes=1_000_000,  # 1MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # Add error file handler for ERROR and above
    error_handler = logging.handlers.RotatingFileHandler(
        filename=log_dir / f"{app_name}-error.log",
        maxBytes=1_000_000,  # 1MB
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)
