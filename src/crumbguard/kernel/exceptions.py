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
"""Unified exception hierarchy for crumbguard.

All exceptions inherit from CrumbGuardException, enabling unified
error handling across modules.

Categories:
- BusinessException: Request-level rule violations (e.g. routing failures)
- SecurityException: Request forgery protection errors
- InfrastructureException: Session store and configuration failures
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class CrumbGuardException(Exception):
    """Base exception for all crumbguard errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CSRF_MISSING").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(CrumbGuardException):
    """Request rule violations."""


class ResourceNotFoundException(BusinessException):
    """Requested resource does not exist or cannot be routed."""


class InvalidAuthenticityTokenException(ResourceNotFoundException):
    """A state-changing request was refused and the session was reset.

    Surfaces as a routing-class (404) failure rather than a server error page.
    """


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(CrumbGuardException):
    """Request origin and integrity errors."""


class ForgeryProtectionException(SecurityException):
    """Base class for authenticity token verification failures."""


class MissingTokenFieldsException(ForgeryProtectionException):
    """The token (or its paired timestamp) is absent from the request."""


class TimestampExpiredException(ForgeryProtectionException):
    """The token is authentic but was issued outside the verification window."""


class DigestMismatchException(ForgeryProtectionException):
    """The token digest does not match: tampering, or a wrong secret, IP or scope."""


class SessionSecretUnavailableException(ForgeryProtectionException):
    """No session secret exists to sign or verify a token."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(CrumbGuardException):
    """Infrastructure failures: session store, configuration."""


class ConfigurationException(InfrastructureException):
    """Configuration values are missing or invalid."""
