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
"""Tests for RecoveryPolicy: outcome to recovery action mapping."""

from __future__ import annotations

import pytest

from crumbguard.security.forgery.properties import ForgeryProtectionProperties
from crumbguard.security.forgery.recovery import FAILURE_MESSAGE, RecoveryPolicy
from crumbguard.security.forgery.types import RecoveryKind, VerificationOutcome, VerificationResult

REFERER = "https://shop.example.com/orders/new"


def _result(outcome: VerificationOutcome) -> VerificationResult:
    return VerificationResult(outcome, outcome.value)


@pytest.fixture
def policy() -> RecoveryPolicy:
    return RecoveryPolicy(ForgeryProtectionProperties(timed_out_message="Slow poke!", invalid_message="Invalid"))


class TestRecoveryPolicy:
    def test_valid_proceeds(self, policy):
        action = policy.recover(_result(VerificationOutcome.VALID), REFERER)
        assert action.kind is RecoveryKind.PROCEED

    @pytest.mark.parametrize("referer", [None, "", REFERER])
    def test_missing_always_resets_and_fails(self, policy, referer):
        action = policy.recover(_result(VerificationOutcome.MISSING), referer)
        assert action.kind is RecoveryKind.RESET_AND_FAIL
        assert action.error_message == FAILURE_MESSAGE
        assert action.redirect_url is None

    def test_tampered_with_referer_redirects_with_invalid_message(self, policy):
        action = policy.recover(_result(VerificationOutcome.TAMPERED_OR_MISMATCHED), REFERER)
        assert action.kind is RecoveryKind.REDIRECT
        assert action.redirect_url == REFERER
        assert action.flash_message == "Invalid"

    def test_expired_with_referer_redirects_with_timed_out_message(self, policy):
        action = policy.recover(_result(VerificationOutcome.EXPIRED_BUT_AUTHENTIC), REFERER)
        assert action.kind is RecoveryKind.REDIRECT
        assert action.flash_message == "Slow poke!"
        assert action.outcome is VerificationOutcome.EXPIRED_BUT_AUTHENTIC

    def test_off_site_referer_is_still_followed(self, policy):
        action = policy.recover(_result(VerificationOutcome.TAMPERED_OR_MISMATCHED), "https://elsewhere.example.org/")
        assert action.redirect_url == "https://elsewhere.example.org/"

    @pytest.mark.parametrize(
        "outcome", [VerificationOutcome.TAMPERED_OR_MISMATCHED, VerificationOutcome.EXPIRED_BUT_AUTHENTIC]
    )
    def test_no_referer_resets_and_fails(self, policy, outcome):
        action = policy.recover(_result(outcome), None)
        assert action.kind is RecoveryKind.RESET_AND_FAIL
        assert action.flash_message is None
