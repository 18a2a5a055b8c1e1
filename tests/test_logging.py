# Copyright 2025 Ant Group Co., Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for opdispatch logging functionality."""

import io
import logging

import pytest

import opdispatch
from opdispatch.dispatch_key import DispatchKey
from opdispatch.dispatch_table import DispatchTable
from opdispatch.logging_config import get_logger


def test_logging_disabled_by_default():
    """Test that logging is disabled by default (library mode)."""
    logger = logging.getLogger("opdispatch")
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)


def test_setup_logging_basic():
    log_stream = io.StringIO()
    opdispatch.setup_logging(level="INFO", stream=log_stream, force=True)
    try:
        logging.getLogger("opdispatch.test").info("Test message")
        log_output = log_stream.getvalue()
        assert "Test message" in log_output
        assert "INFO" in log_output
    finally:
        opdispatch.disable_logging()


def test_setup_logging_levels():
    """Only records at or above the configured level are written."""
    log_stream = io.StringIO()
    opdispatch.setup_logging(level="WARNING", stream=log_stream, force=True)
    try:
        logger = logging.getLogger("opdispatch.test")
        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")

        log_output = log_stream.getvalue()
        assert "Debug message" not in log_output
        assert "Info message" not in log_output
        assert "Warning message" in log_output
    finally:
        opdispatch.disable_logging()


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("OPDISPATCH_LOG_LEVEL", "debug")
    log_stream = io.StringIO()
    opdispatch.setup_logging(stream=log_stream, force=True)
    try:
        assert logging.getLogger("opdispatch").level == logging.DEBUG
    finally:
        opdispatch.disable_logging()


def test_unknown_level_rejected(monkeypatch):
    monkeypatch.setenv("OPDISPATCH_LOG_LEVEL", "chatty")
    with pytest.raises(ValueError, match="unknown log level"):
        opdispatch.setup_logging(stream=io.StringIO(), force=True)


def test_disable_logging():
    log_stream = io.StringIO()
    opdispatch.setup_logging(level="DEBUG", stream=log_stream, force=True)
    opdispatch.disable_logging()

    logging.getLogger("opdispatch.test").error("This should not appear")
    assert "This should not appear" not in log_stream.getvalue()


def test_get_logger_prefix():
    assert get_logger("foo").name == "opdispatch.foo"
    assert get_logger("opdispatch.dispatch_table").name == "opdispatch.dispatch_table"
    assert get_logger("opdispatch").name == "opdispatch"


def test_registration_logged_at_debug(add_schema, kernel_factory, sink):
    log_stream = io.StringIO()
    opdispatch.setup_logging(level="DEBUG", stream=log_stream, force=True)
    try:
        table = DispatchTable(add_schema, sink=sink)
        table.set_kernel(DispatchKey.CPU, kernel_factory("cpu"))
        table.remove_kernel_if_exists(DispatchKey.CPU)
        log_output = log_stream.getvalue()
        assert "set kernel CPU for add: ADDED_NEW_KERNEL" in log_output
        assert "remove kernel CPU for add: REMOVED_KERNEL" in log_output
    finally:
        opdispatch.disable_logging()
