import logging
import logging.handlers

import pytest
from unittest.mock import patch

from cloud_code_client.logging_config import LOG_LEVEL_MAPPING, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestSetupLogging:

    @pytest.mark.parametrize("configured,expected", [
        ("Information", "INFO"),
        ("Trace", "DEBUG"),
        ("Warning", "WARNING"),
        ("None", "CRITICAL"),
        ("error", "ERROR"),
        ("Verbose", "INFO"),
    ])
    def test_level_mapping(self, mock_configuration_service, configured, expected):
        mock_configuration_service.get_log_level.return_value = configured
        mock_configuration_service.get_log_file.return_value = None

        with patch("logging.config.dictConfig") as mock_dict_config:
            setup_logging(mock_configuration_service)

        config = mock_dict_config.call_args[0][0]
        assert config["root"]["level"] == expected
        assert config["handlers"]["console"]["level"] == expected
        assert list(config["handlers"]) == ["console"]

    def test_quiets_transport_loggers(self, mock_configuration_service):
        mock_configuration_service.get_log_level.return_value = "Debug"
        mock_configuration_service.get_log_file.return_value = None

        with patch("logging.config.dictConfig") as mock_dict_config:
            setup_logging(mock_configuration_service)

        loggers = mock_dict_config.call_args[0][0]["loggers"]
        assert loggers["httpx"]["level"] == "WARNING"
        assert loggers["httpcore"]["level"] == "WARNING"

    def test_file_handler_from_configuration(self, mock_configuration_service, tmp_path, restore_root_logger):
        log_file = tmp_path / "client.log"
        mock_configuration_service.get_log_level.return_value = "Information"
        mock_configuration_service.get_log_file.return_value = str(log_file)

        logger = setup_logging(mock_configuration_service)

        assert logger.name == "cloud_code_client.logging_config"
        file_handlers = [
            handler for handler in logging.getLogger().handlers
            if isinstance(handler, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        file_handlers[0].flush()
        assert "Logging initialized" in log_file.read_text(encoding="utf-8")

    def test_explicit_log_file_wins(self, mock_configuration_service, tmp_path):
        mock_configuration_service.get_log_level.return_value = "Information"
        mock_configuration_service.get_log_file.return_value = str(tmp_path / "configured.log")

        with patch("logging.config.dictConfig") as mock_dict_config:
            setup_logging(mock_configuration_service, log_file=str(tmp_path / "explicit.log"))

        handlers = mock_dict_config.call_args[0][0]["handlers"]
        assert handlers["file"]["filename"] == str(tmp_path / "explicit.log")

    def test_mapping_covers_configuration_names(self):
        assert set(LOG_LEVEL_MAPPING) == {"Trace", "Debug", "Information", "Warning", "Error", "Critical", "None"}
