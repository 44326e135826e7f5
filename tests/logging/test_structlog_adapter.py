# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for StructlogAdapter: default LoggingPort implementation."""

import logging

from structlog.testing import capture_logs

from crumbguard.core.config import Config
from crumbguard.logging.port import LoggingPort
from crumbguard.logging.structlog_adapter import REDACTED, StructlogAdapter, redact_secrets


class TestStructlogAdapterConformance:
    def test_implements_logging_port(self):
        assert isinstance(StructlogAdapter(), LoggingPort)


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level_and_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"crumbguard": {"logging": {"level": {"root": "debug"}, "format": "JSON"}}}))
        assert adapter._root_level == "DEBUG"
        assert adapter._format == "json"

    def test_configure_reads_per_module_levels(self):
        adapter = StructlogAdapter()
        config = Config({"crumbguard": {"logging": {"level": {"root": "INFO", "crumbguard.security.forgery": "WARNING"}}}})
        adapter.configure(config)
        assert adapter._module_levels == {"crumbguard.security.forgery": "WARNING"}
        assert logging.getLogger("crumbguard.security.forgery").level == logging.WARNING


class TestStructlogAdapterLoggers:
    def test_get_logger_returns_bound_logger(self):
        adapter = StructlogAdapter()
        logger = adapter.get_logger("crumbguard.test")
        assert callable(getattr(logger, "warning", None))
        assert callable(getattr(logger, "debug", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("crumbguard.session", "DEBUG")
        assert logging.getLogger("crumbguard.session").level == logging.DEBUG


class TestRedactSecrets:
    def test_masks_secret_keys(self):
        event = redact_secrets(None, "warning", {"event": "x", "session_secret": "abc123", "scope": "Orders"})
        assert event["session_secret"] == REDACTED
        assert event["scope"] == "Orders"

    def test_events_without_secrets_pass_through(self):
        with capture_logs() as logs:
            StructlogAdapter().get_logger("crumbguard.test").info("hello", scope="Orders")
        assert logs == [{"event": "hello", "scope": "Orders", "log_level": "info"}]
