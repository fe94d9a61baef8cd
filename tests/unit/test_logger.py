"""Unit tests for session logger setup and the fitting context logger."""

import pytest
from loguru import logger

from cvfit.contexts.fitting.logger import setup_fitting_logger
from cvfit.utils.logger import setup_logger


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()


def _read_log(log_file):
    # Closing the sinks flushes the file
    logger.remove()
    return log_file.read_text()


@pytest.mark.unit
def test_setup_logger_writes_provenance_header(tmp_path):
    log_file = setup_logger("fit", tmp_path / "session", {"Theme": "classic"})

    assert log_file == tmp_path / "session" / "fit.log"
    text = _read_log(log_file)
    assert "Working directory:" in text
    assert "Theme: classic" in text


@pytest.mark.unit
def test_file_sink_keeps_debug_messages(tmp_path):
    log_file = setup_logger("fit", tmp_path)
    logger.debug("zone detail")

    assert "DEBUG   | zone detail" in _read_log(log_file)


@pytest.mark.unit
def test_fitting_logger_records_default_theme(tmp_path):
    log_file = setup_fitting_logger(tmp_path)

    assert "Theme: (default)" in _read_log(log_file)
