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
"""TokenVerifier: the per-request verification state machine.

Outcomes, in the order they are decided:

* safe method (GET, HEAD, OPTIONS, TRACE)      -> ``VALID``
* no token in the params nor in the header     -> ``MISSING``
* digest mismatch in params, then in header    -> ``TAMPERED_OR_MISMATCHED``
* digest match, ``timestamp + window > now``   -> ``VALID``
* digest match, outside the window             -> ``EXPIRED_BUT_AUTHENTIC``

A bad digest is reported as tampering whatever its timestamp says. Only
the final failure is logged.
"""

from __future__ import annotations

import hmac
from typing import NamedTuple

import structlog

from crumbguard.security.forgery.issuer import TokenIssuer
from crumbguard.security.forgery.properties import TIMESTAMP_WIDTH
from crumbguard.security.forgery.types import (
    TokenSource,
    VerificationContext,
    VerificationOutcome,
    VerificationResult,
)
from crumbguard.web.request import RequestAccessor

logger = structlog.get_logger("crumbguard.security.forgery")

SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})
"""HTTP methods that do not require token verification."""


class _Candidate(NamedTuple):
    source: TokenSource
    raw: str
    timestamp: str | None
    digest: str | None


def is_timestamp(value: str) -> bool:
    """``True`` for at most ``TIMESTAMP_WIDTH`` ASCII digits.

    ``str.isdigit`` alone accepts characters such as ``"²"`` that ``int``
    rejects.
    """
    return 0 < len(value) <= TIMESTAMP_WIDTH and value.isascii() and value.isdigit()


def split_token(token: str) -> tuple[str | None, str | None]:
    """Split a composite token at the fixed timestamp width.

    Returns ``(None, None)`` when the token is too short or its prefix is not
    a decimal timestamp.
    """
    stamped_at, digest = token[:TIMESTAMP_WIDTH], token[TIMESTAMP_WIDTH:]
    if len(stamped_at) != TIMESTAMP_WIDTH or not is_timestamp(stamped_at) or not digest:
        return None, None
    return stamped_at, digest


class TokenVerifier:
    """Decide whether a request carries a fresh, authentic token."""

    def __init__(self, issuer: TokenIssuer) -> None:
        self._issuer = issuer
        self.properties = issuer.properties

    def verify(self, request: RequestAccessor, context: VerificationContext) -> VerificationResult:
        if request.method in SAFE_METHODS:
            return VerificationResult(VerificationOutcome.VALID, "safe_method")

        candidates = [c for c in (self._from_params(request), self._from_header(request)) if c is not None]
        if not candidates:
            result = VerificationResult(VerificationOutcome.MISSING, "token_missing")
            self._log_failure(result, None, context)
            return result

        # The header is only consulted once the params have failed.
        for candidate in candidates:
            result = self._check(candidate, context)
            if result.outcome is not VerificationOutcome.TAMPERED_OR_MISMATCHED:
                if result.outcome is VerificationOutcome.EXPIRED_BUT_AUTHENTIC:
                    self._log_failure(result, candidate, context)
                return result

        self._log_failure(result, candidate, context)
        return result

    def is_fresh(self, timestamp: int) -> bool:
        """``True`` while *timestamp* lies inside the verification window."""
        window = self.properties.window or 0
        return timestamp + window > self._issuer.now()

    def _check(self, candidate: _Candidate, context: VerificationContext) -> VerificationResult:
        if candidate.timestamp is None or candidate.digest is None:
            return VerificationResult(
                VerificationOutcome.TAMPERED_OR_MISMATCHED,
                "malformed_token",
                source=candidate.source,
                received_digest=candidate.digest,
            )

        timestamp = int(candidate.timestamp)
        expected = self._issuer.issue(timestamp, context)
        if not hmac.compare_digest(candidate.digest.encode("utf-8"), expected.encode("utf-8")):
            return VerificationResult(
                VerificationOutcome.TAMPERED_OR_MISMATCHED,
                "digest_mismatch",
                source=candidate.source,
                timestamp=candidate.timestamp,
                received_digest=candidate.digest,
                expected_digest=expected,
            )

        outcome, reason = (
            (VerificationOutcome.VALID, "ok")
            if self.is_fresh(timestamp)
            else (VerificationOutcome.EXPIRED_BUT_AUTHENTIC, "outside_window")
        )
        return VerificationResult(
            outcome,
            reason,
            source=candidate.source,
            timestamp=candidate.timestamp,
            received_digest=candidate.digest,
            expected_digest=expected,
        )

    def _from_params(self, request: RequestAccessor) -> _Candidate | None:
        props = self.properties
        if props.split:
            crumb = request.param(props.crumb_param)
            stamped_at = request.param(props.timestamp_param)
            if crumb is None or stamped_at is None:
                return None
            if not is_timestamp(stamped_at):
                stamped_at = None
            return _Candidate(TokenSource.PARAMS, crumb, stamped_at, crumb)

        token = request.param(props.token_param)
        if token is None:
            return None
        return _Candidate(TokenSource.PARAMS, token, *split_token(token))

    def _from_header(self, request: RequestAccessor) -> _Candidate | None:
        token = request.header(self.properties.header_name)
        if token is None:
            return None
        return _Candidate(TokenSource.HEADER, token, *split_token(token))

    def _log_failure(
        self,
        result: VerificationResult,
        candidate: _Candidate | None,
        context: VerificationContext,
    ) -> None:
        logger.warning(
            "authenticity_token_rejected",
            outcome=result.outcome.value,
            reason=result.reason,
            source=candidate.source.value if candidate else None,
            token=candidate.raw if candidate else None,
            timestamp=result.timestamp,
            received_digest=result.received_digest,
            expected_digest=result.expected_digest,
            **context.describe(),
        )
