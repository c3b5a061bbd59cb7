"""
Logging configuration for the capital map quiz.
"""
import logging
import sys
from typing import Iterable, Optional

# Top-level module names whose loggers make up the app
APP_LOGGERS = (
    "quiz_dataset",
    "quiz_translations",
    "quiz_answers",
    "quiz_hints",
    "quiz_scheduler",
    "quiz_session",
    "quiz_map",
    "map_quiz_game",
    "curate_quiz_data",
    "quiz_logging",
)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    names: Iterable[str] = APP_LOGGERS,
) -> None:
    """
    Configures console (and optionally file) output for the app's loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        names: Logger names to configure.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    file_handler = None
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)

    for name in names:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Streamlit reruns the script; avoid stacking duplicate handlers
        if logger.hasHandlers():
            logger.handlers.clear()
        logger.addHandler(console_handler)
        if file_handler is not None:
            logger.addHandler(file_handler)
        logger.propagate = False

    logging.getLogger(__name__).info("Logging initialized.")


def level_from_name(name: str) -> int:
    """Map a level name such as "DEBUG" to its numeric value, INFO when unknown."""
    value = logging.getLevelName((name or "").upper())
    return value if isinstance(value, int) else logging.INFO
