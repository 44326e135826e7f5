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
"""Timestamped request forgery protection: token issuance, verification and recovery."""

from crumbguard.security.forgery.helpers import hidden_fields, meta_tags, token_params
from crumbguard.security.forgery.issuer import TokenIssuer, format_timestamp
from crumbguard.security.forgery.properties import COMPOSITE, SPLIT, ForgeryProtectionProperties
from crumbguard.security.forgery.recovery import RecoveryPolicy
from crumbguard.security.forgery.types import (
    IssuedToken,
    RecoveryAction,
    RecoveryKind,
    TokenSource,
    VerificationContext,
    VerificationOutcome,
    VerificationResult,
)
from crumbguard.security.forgery.verifier import SAFE_METHODS, TokenVerifier, split_token

__all__ = [
    "COMPOSITE",
    "SAFE_METHODS",
    "SPLIT",
    "ForgeryProtectionProperties",
    "IssuedToken",
    "RecoveryAction",
    "RecoveryKind",
    "RecoveryPolicy",
    "TokenIssuer",
    "TokenSource",
    "TokenVerifier",
    "VerificationContext",
    "VerificationOutcome",
    "VerificationResult",
    "format_timestamp",
    "hidden_fields",
    "meta_tags",
    "split_token",
    "token_params",
]
