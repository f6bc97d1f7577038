import logging

import pytest

from texia.logging_conf import configure_logging


@pytest.fixture()
def root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_configure_logging_sets_level_and_single_handler(root_logger):
    configure_logging("debug")
    configure_logging("DEBUG")

    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_invalid_level_falls_back_to_info_and_is_logged(root_logger, capsys):
    configure_logging("ruidoso")

    assert root_logger.level == logging.INFO
    out = capsys.readouterr().out
    assert "Nivel de log inválido 'ruidoso'" in out
    assert "[WARNING] texia.logging_conf" in out
