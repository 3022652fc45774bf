"""Tests for settings, logging setup and the concurrency limiter."""

import asyncio
import logging

import pytest
from pydantic import ValidationError

from depsize.config import Settings
from depsize.logging_config import get_logger, setup_logging
from depsize.utils.concurrency import ConcurrencyLimiter


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.fs_concurrency == 64
        assert settings.process_concurrency >= 1
        assert "{input}" in settings.bundler_command
        assert "{config}" in settings.bundler_config_command

    def test_threadpool_size_env(self, monkeypatch):
        monkeypatch.setenv("UV_THREADPOOL_SIZE", "8")
        assert Settings().fs_concurrency == 8

    def test_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("DEPSIZE_PROCESS_CONCURRENCY", "3")
        monkeypatch.setenv("DEPSIZE_LOG_LEVEL", "debug")
        settings = Settings()
        assert settings.process_concurrency == 3
        assert settings.log_level == "DEBUG"

    def test_rejects_invalid_values(self):
        with pytest.raises(ValidationError):
            Settings(fs_concurrency=0)
        with pytest.raises(ValidationError):
            Settings(log_level="loud")

    def test_is_testing(self):
        assert Settings().is_testing is True


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level
    yield
    for name in ("depsize", "asyncio"):
        configured = logging.getLogger(name)
        for handler in list(configured.handlers):
            configured.removeHandler(handler)
        configured.setLevel(logging.NOTSET)
        configured.propagate = True
    for handler in list(root.handlers):
        if handler not in root_handlers:
            root.removeHandler(handler)
    for handler in root_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(root_level)


def test_setup_logging_verbose(restore_logging):
    setup_logging(verbose=True)
    logger = logging.getLogger("depsize")
    assert logger.level == logging.DEBUG
    assert logger.handlers


def test_get_logger_namespacing():
    assert get_logger("depsize.services.x").name == "depsize.services.x"
    assert get_logger("measurer").name == "depsize.measurer"


class TestConcurrencyLimiter:
    """Tests for the bounded-concurrency helper."""

    def test_rejects_zero(self):
        with pytest.raises(ValueError):
            ConcurrencyLimiter(0)

    @pytest.mark.asyncio
    async def test_caps_simultaneous_work(self):
        limiter = ConcurrencyLimiter(2)
        peak = 0

        async def work(value):
            nonlocal peak
            peak = max(peak, limiter.active)
            await asyncio.sleep(0.01)
            return value * 2

        results = await asyncio.gather(*(limiter.run(work, i) for i in range(6)))

        assert results == [0, 2, 4, 6, 8, 10]
        assert peak == 2
        assert limiter.active == 0
