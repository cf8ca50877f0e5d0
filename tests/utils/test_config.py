"""Unit tests for the configuration loader and logger factory."""

import logging
import tempfile
from pathlib import Path

import pytest

from src.utils.config import DEFAULT_CONFIG, load_config
from src.utils.logging import get_logger


class TestLoadConfig:
    """Test suite for load_config."""

    def test_default_config(self):
        cfg = load_config(str(DEFAULT_CONFIG))
        assert cfg["min_overlap"] == 12
        assert cfg["strict_matching"] is False

    def test_missing_file(self):
        assert load_config("/nonexistent/alignment.yaml") == {}

    def test_empty_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "empty.yaml"
            path.write_text("", encoding="utf-8")
            assert load_config(str(path)) == {}

    def test_non_mapping(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "list.yaml"
            path.write_text("- 1\n- 2\n", encoding="utf-8")
            with pytest.raises(ValueError):
                load_config(str(path))


class TestGetLogger:
    """Test suite for get_logger."""

    def test_single_handler(self):
        first = get_logger("src.tests.logger")
        second = get_logger("src.tests.logger")

        assert first is second
        assert len(first.handlers) == 1
        assert first.level == logging.INFO
