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
"""Forgery protection datatypes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from crumbguard.kernel.exceptions import (
    DigestMismatchException,
    MissingTokenFieldsException,
    TimestampExpiredException,
)


@dataclass(frozen=True)
class VerificationContext:
    """Everything a token digest is bound to, for one request."""

    remote_address: str
    session_id: str
    session_secret: str | None
    scope: str = ""

    def describe(self) -> dict[str, str]:
        """Diagnostic fields safe to log (the secret is left out)."""
        return {
            "remote_address": self.remote_address,
            "session_id": self.session_id,
            "scope": self.scope,
        }


@dataclass(frozen=True)
class IssuedToken:
    """A rendered token: fixed-width timestamp plus hexadecimal digest."""

    timestamp: str
    digest: str

    @property
    def token(self) -> str:
        """Composite form, ``timestamp + digest``, for single-field carriers."""
        return f"{self.timestamp}{self.digest}"

    @property
    def issued_at(self) -> int:
        return int(self.timestamp)


class VerificationOutcome(str, Enum):
    VALID = "valid"
    EXPIRED_BUT_AUTHENTIC = "expired_but_authentic"
    TAMPERED_OR_MISMATCHED = "tampered_or_mismatched"
    MISSING = "missing"


class TokenSource(str, Enum):
    """Where a verified (or rejected) token was read from."""

    PARAMS = "params"
    HEADER = "header"


@dataclass(frozen=True)
class VerificationResult:
    outcome: VerificationOutcome
    reason: str
    source: TokenSource | None = None
    timestamp: str | None = None
    received_digest: str | None = None
    expected_digest: str | None = None

    @property
    def valid(self) -> bool:
        return self.outcome is VerificationOutcome.VALID

    def raise_for_outcome(self) -> None:
        """Raise the matching :class:`ForgeryProtectionException` unless valid."""
        context = {"reason": self.reason, "source": self.source.value if self.source else None}
        if self.outcome is VerificationOutcome.MISSING:
            raise MissingTokenFieldsException("Authenticity token missing", code="CSRF_MISSING", context=context)
        if self.outcome is VerificationOutcome.EXPIRED_BUT_AUTHENTIC:
            raise TimestampExpiredException("Authenticity token expired", code="CSRF_EXPIRED", context=context)
        if self.outcome is VerificationOutcome.TAMPERED_OR_MISMATCHED:
            raise DigestMismatchException("Authenticity token invalid", code="CSRF_INVALID", context=context)


class RecoveryKind(str, Enum):
    PROCEED = "proceed"
    REDIRECT = "redirect"
    RESET_AND_FAIL = "reset_and_fail"


@dataclass(frozen=True)
class RecoveryAction:
    """What the request filter should do with a verification outcome."""

    kind: RecoveryKind
    redirect_url: str | None = None
    flash_message: str | None = None
    error_message: str | None = None
    outcome: VerificationOutcome = field(default=VerificationOutcome.VALID)

    @classmethod
    def proceed(cls) -> RecoveryAction:
        return cls(RecoveryKind.PROCEED)

    @classmethod
    def redirect(cls, url: str, message: str, outcome: VerificationOutcome) -> RecoveryAction:
        return cls(RecoveryKind.REDIRECT, redirect_url=url, flash_message=message, outcome=outcome)

    @classmethod
    def reset_and_fail(cls, message: str, outcome: VerificationOutcome) -> RecoveryAction:
        return cls(RecoveryKind.RESET_AND_FAIL, error_message=message, outcome=outcome)
