"""
Unit Tests for Logging Setup

Author: Keep Keeping Project
License: MIT
"""

import json
import logging

import pytest

from keep_keeping.utils.logger import ColoredFormatter, get_logger, setup_logging


class TestSetupLogging:
    """Test suite for setup_logging."""
    
    def test_json_lines_in_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "sync.log"
        root = setup_logging(
            log_level="DEBUG",
            log_to_file=True,
            log_file_path=str(log_file),
            json_format=True
        )
        
        get_logger("orchestrator").info("hello")
        for handler in root.handlers:
            handler.close()
        
        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["message"] == "hello"
        assert record["name"] == "keep_keeping.orchestrator"
        assert record["levelname"] == "INFO"
    
    def test_file_logging_requires_path(self):
        with pytest.raises(ValueError, match="log_file_path"):
            setup_logging(log_to_file=True)
    
    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        root = setup_logging(log_level="warning")
        
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert root.propagate is False


class TestGetLogger:
    """Test suite for namespaced loggers."""
    
    def test_prefixes_bare_names(self):
        assert get_logger("walker").name == "keep_keeping.walker"
    
    def test_keeps_package_names(self):
        assert get_logger("keep_keeping.core").name == "keep_keeping.core"


class TestColoredFormatter:
    """Test suite for console colouring."""
    
    def test_original_record_is_untouched(self):
        formatter = ColoredFormatter('%(levelname)s %(message)s')
        record = logging.LogRecord("keep_keeping", logging.ERROR, __file__, 1, "boom", None, None)
        
        output = formatter.format(record)
        
        assert "\033[31mERROR\033[0m boom" == output
        assert record.levelname == "ERROR"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
