import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler

import pytest

from interview_ai.logging_config import log_file_path, setup_logging

@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)

class TestSetupLogging:
    def test_file_and_console(self, root_logger, tmp_path):
        logger = setup_logging(logging.DEBUG, logs_path=str(tmp_path / 'logs'))

        assert logger is root_logger
        assert root_logger.level == logging.DEBUG
        assert any(isinstance(h, RotatingFileHandler) for h in root_logger.handlers)
        logging.getLogger('project_extractor').info("regex extraction produced 1 projects")
        for handler in root_logger.handlers:
            handler.flush()

        log_files = list((tmp_path / 'logs').glob('app_*.log'))
        assert len(log_files) == 1
        assert "project_extractor - INFO - regex extraction produced 1 projects" in log_files[0].read_text()

    def test_console_only(self, root_logger):
        setup_logging(log_to_file=False)
        assert len(root_logger.handlers) == 1
        assert not isinstance(root_logger.handlers[0], RotatingFileHandler)

    def test_quiets_http_loggers(self, root_logger):
        setup_logging(log_to_file=False)
        assert logging.getLogger('urllib3').level == logging.WARNING

    def test_quiets_groq(self, root_logger):
        setup_logging(log_to_file=False)
        assert logging.getLogger('groq').level == logging.WARNING

    def test_log_file_path(self):
        assert log_file_path('/tmp/logs', datetime(2024, 3, 9)) == '/tmp/logs/app_20240309.log'
