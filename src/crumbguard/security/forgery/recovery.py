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
"""RecoveryPolicy: map a verification outcome to a recovery action.

The policy is asymmetric on purpose:

* ``MISSING`` always resets the session and fails the request.
* ``TAMPERED_OR_MISMATCHED`` and ``EXPIRED_BUT_AUTHENTIC`` redirect back to
  the referring page with a flash warning; re-rendering that page issues a
  fresh token. Without a referrer they reset and fail like ``MISSING``.
"""

from __future__ import annotations

import structlog

from crumbguard.security.forgery.properties import ForgeryProtectionProperties
from crumbguard.security.forgery.types import RecoveryAction, VerificationOutcome, VerificationResult

logger = structlog.get_logger("crumbguard.security.forgery")

FAILURE_MESSAGE = "Invalid authenticity token"


class RecoveryPolicy:
    def __init__(self, properties: ForgeryProtectionProperties) -> None:
        self.properties = properties

    def recover(self, result: VerificationResult, referer: str | None) -> RecoveryAction:
        outcome = result.outcome
        if outcome is VerificationOutcome.VALID:
            return RecoveryAction.proceed()

        if outcome is VerificationOutcome.MISSING or not referer:
            logger.debug("forgery_recovery", action="reset_and_fail", outcome=outcome.value)
            return RecoveryAction.reset_and_fail(FAILURE_MESSAGE, outcome)

        message = (
            self.properties.timed_out_message
            if outcome is VerificationOutcome.EXPIRED_BUT_AUTHENTIC
            else self.properties.invalid_message
        )
        logger.debug("forgery_recovery", action="redirect", outcome=outcome.value, redirect_url=referer)
        return RecoveryAction.redirect(referer, message, outcome)
