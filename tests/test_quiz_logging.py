import logging

from quiz_logging import level_from_name, setup_logging


def test_repeated_setup_does_not_stack_handlers(tmp_path):
    log_file = tmp_path / "quiz.log"
    for _ in range(3):
        setup_logging(logging.DEBUG, str(log_file), names=("quiz_test_logger",))
    logger = logging.getLogger("quiz_test_logger")
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
    assert not logger.propagate

    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "quiz_test_logger - INFO - hello" in log_file.read_text(encoding="utf-8")
    for handler in logger.handlers:
        handler.close()


def test_level_names():
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("WARNING") == logging.WARNING
    assert level_from_name("chatty") == logging.INFO
    assert level_from_name(None) == logging.INFO
