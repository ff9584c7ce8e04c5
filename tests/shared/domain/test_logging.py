import logging

import pytest
import structlog
from storefront.utils.logging import _renderer, get_log_level, setup_stdlib_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_level_follows_environment(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("ENV", raising=False)
    monkeypatch.setenv("ENVIRONMENT", "production")
    assert get_log_level() == "INFO"

    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert get_log_level() == "DEBUG"


def test_handlers_write_under_log_dir(root_logger, tmp_path):
    setup_stdlib_logging("INFO", str(tmp_path / "logs"), "checkout")

    files = sorted(h.baseFilename for h in root_logger.handlers if isinstance(h, logging.FileHandler))
    assert files == [str(tmp_path / "logs" / "checkout.log"), str(tmp_path / "logs" / "checkout_error.log")]
    assert [h.level for h in root_logger.handlers] == [logging.INFO, logging.INFO, logging.ERROR]
    assert logging.getLogger("stripe").level == logging.WARNING


@pytest.mark.parametrize(
    "env, renderer",
    [("production", structlog.processors.JSONRenderer), ("development", structlog.dev.ConsoleRenderer)],
)
def test_renderer_by_environment(env, renderer):
    assert isinstance(_renderer(env), renderer)
