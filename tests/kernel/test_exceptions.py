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
"""Tests for the crumbguard exception hierarchy."""

from __future__ import annotations

import pytest

from crumbguard.kernel.exceptions import (
    BusinessException,
    CrumbGuardException,
    DigestMismatchException,
    ForgeryProtectionException,
    InvalidAuthenticityTokenException,
    MissingTokenFieldsException,
    ResourceNotFoundException,
    SecurityException,
    SessionSecretUnavailableException,
    TimestampExpiredException,
)


class TestCrumbGuardException:
    def test_basic_creation(self):
        exc = CrumbGuardException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = CrumbGuardException("bad token", code="CSRF_INVALID", context={"scope": "Orders"})
        assert exc.code == "CSRF_INVALID"
        assert exc.context["scope"] == "Orders"

    def test_context_not_shared_between_instances(self):
        exc = CrumbGuardException("a")
        exc.context["key"] = "value"
        assert CrumbGuardException("b").context == {}


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [
            MissingTokenFieldsException,
            TimestampExpiredException,
            DigestMismatchException,
            SessionSecretUnavailableException,
        ],
    )
    def test_forgery_errors_are_security_errors(self, exc_type):
        assert issubclass(exc_type, ForgeryProtectionException)
        assert issubclass(exc_type, SecurityException)

    def test_invalid_authenticity_token_is_routing_class(self):
        assert issubclass(InvalidAuthenticityTokenException, ResourceNotFoundException)
        assert issubclass(InvalidAuthenticityTokenException, BusinessException)
        assert not issubclass(InvalidAuthenticityTokenException, SecurityException)
