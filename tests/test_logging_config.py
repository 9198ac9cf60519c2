import logging

import pytest

from physicsexplorer import config
from physicsexplorer.logging_config import PACKAGE_LOGGER, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    yield logger
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


def test_setup_does_not_stack_handlers(package_logger):
    setup_logging(logging.DEBUG)
    logger = setup_logging(logging.DEBUG)
    assert logger is package_logger
    assert len(logger.handlers) == 1
    assert logger.level == logging.DEBUG


def test_log_file(package_logger, tmp_path):
    path = tmp_path / "explorer.log"
    logger = setup_logging(logging.INFO, str(path))
    logging.getLogger("physicsexplorer.controller.animation").info("tick test")
    for handler in logger.handlers:
        handler.flush()
    text = path.read_text(encoding="utf-8")
    assert "Logging initialized at level INFO." in text
    assert "tick test" in text


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("PHYSICSEXPLORER_TICK_MS", "20")
    assert config._env_int("PHYSICSEXPLORER_TICK_MS", 50) == 20
    monkeypatch.setenv("PHYSICSEXPLORER_TICK_MS", "fast")
    assert config._env_int("PHYSICSEXPLORER_TICK_MS", 50) == 50
    monkeypatch.setenv("PHYSICSEXPLORER_TICK_MS", "-5")
    assert config._env_int("PHYSICSEXPLORER_TICK_MS", 50) == 50
    monkeypatch.setenv("PHYSICSEXPLORER_LOG_LEVEL", "debug")
    assert config._env_log_level("PHYSICSEXPLORER_LOG_LEVEL", logging.INFO) == logging.DEBUG
    monkeypatch.setenv("PHYSICSEXPLORER_LOG_LEVEL", "chatty")
    assert config._env_log_level("PHYSICSEXPLORER_LOG_LEVEL", logging.INFO) == logging.INFO
