"""Tests for Settings configuration model."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from onqueue.config import Settings


class TestDefaults:
    def test_default_queue_file(self):
        s = Settings()
        assert s.queue_file == Path("queue.yml")

    def test_default_http_port(self):
        s = Settings()
        assert s.http_port == 8080

    def test_default_runner_timing(self):
        s = Settings()
        assert s.tick_interval_seconds == 10.0
        assert s.retry_delay_seconds == 5.0
        assert s.max_retries == 3

    def test_default_pop_order(self):
        s = Settings()
        assert s.pop_order == "fifo"


class TestGetShell:
    def test_empty_means_platform_default(self):
        s = Settings(shell="")
        assert s.get_shell() is None

    def test_whitespace_means_platform_default(self):
        s = Settings(shell="   ")
        assert s.get_shell() is None

    def test_explicit_shell(self):
        s = Settings(shell=" /bin/bash ")
        assert s.get_shell() == "/bin/bash"


class TestValidation:
    def test_rejects_unknown_pop_order(self):
        with pytest.raises(ValidationError):
            Settings(pop_order="random")

    def test_accepts_legacy_pop_order(self):
        s = Settings(pop_order="legacy")
        assert s.pop_order == "legacy"

    def test_rejects_zero_retries(self):
        with pytest.raises(ValidationError):
            Settings(max_retries=0)

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValidationError):
            Settings(tick_interval_seconds=0)
