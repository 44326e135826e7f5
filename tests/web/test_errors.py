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
"""Tests for the global exception handler."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from crumbguard.kernel.exceptions import (
    ConfigurationException,
    CrumbGuardException,
    DigestMismatchException,
    InvalidAuthenticityTokenException,
    SecurityException,
)
from crumbguard.web.errors import get_status_code, global_exception_handler


def _request(**state):
    return SimpleNamespace(state=SimpleNamespace(**state), url=SimpleNamespace(path="/orders"))


class TestStatusCodes:
    @pytest.mark.parametrize(
        "exc, status",
        [
            (InvalidAuthenticityTokenException("x"), 404),
            (DigestMismatchException("x"), 403),
            (SecurityException("x"), 401),
            (ConfigurationException("x"), 502),
            (CrumbGuardException("x"), 500),
            (RuntimeError("x"), 500),
        ],
    )
    def test_mapping(self, exc, status):
        assert get_status_code(exc) == status


class TestGlobalExceptionHandler:
    @pytest.mark.asyncio
    async def test_routing_failure_body(self):
        exc = InvalidAuthenticityTokenException(
            "Invalid authenticity token", code="CSRF_MISSING", context={"session_id": "S1"}
        )
        response = await global_exception_handler(_request(transaction_id="tx-1"), exc)
        assert response.status_code == 404
        body = response.body.decode()
        assert '"code":"CSRF_MISSING"' in body
        assert '"transaction_id":"tx-1"' in body
        assert "S1" not in body

    @pytest.mark.asyncio
    async def test_unexpected_error_is_masked(self):
        response = await global_exception_handler(_request(), RuntimeError("db password is hunter2"))
        assert response.status_code == 500
        assert "hunter2" not in response.body.decode()
