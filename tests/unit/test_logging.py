# tests/unit/test_logging.py

import logging

import pytest

from geostar.logging_config import setup_logging

@pytest.fixture(autouse=True)
def reset_geostar_logger():
    yield
    logger = logging.getLogger("geostar")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)

def test_setup_logging_level_names():
    logger = setup_logging("debug")
    assert logger.name == "geostar"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1

def test_setup_logging_does_not_duplicate_handlers():
    setup_logging(logging.INFO)
    logger = setup_logging(logging.WARNING)
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING

def test_setup_logging_file(tmp_path):
    log_file = tmp_path / "logs" / "run.log"
    logger = setup_logging("INFO", log_file=log_file)

    logging.getLogger("geostar.raster.layer").info("created a raster")
    for handler in logger.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "Logging initialized" in content
    assert "geostar.raster.layer - INFO - created a raster" in content

def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        setup_logging("LOUD")
