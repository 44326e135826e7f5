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
"""TokenIssuer: digest computation and timestamped token rendering.

The digest is a one-way hash over, in this fixed order::

    remote_address + timestamp + session_id + scope + session_secret

``include_scope = False`` drops the scope for deployments that do not need
per-endpoint isolation. Issuance and verification must share one
:class:`ForgeryProtectionProperties`, otherwise tokens never match.
"""

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Callable, MutableMapping
from typing import Any

import structlog

from crumbguard.kernel.exceptions import SessionSecretUnavailableException
from crumbguard.security.forgery.properties import TIMESTAMP_WIDTH, ForgeryProtectionProperties
from crumbguard.security.forgery.types import IssuedToken, VerificationContext
from crumbguard.session.ports.outbound import SessionStore
from crumbguard.session.session import HttpSession

logger = structlog.get_logger("crumbguard.security.forgery")


def format_timestamp(timestamp: int) -> str:
    """Zero-pad *timestamp* to the fixed positional width."""
    return f"{timestamp:0{TIMESTAMP_WIDTH}d}"


class TokenIssuer:
    """Issue digests and stamped tokens bound to a :class:`VerificationContext`."""

    def __init__(
        self,
        properties: ForgeryProtectionProperties,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.properties = properties
        self._clock = clock

    def now(self) -> int:
        return int(self._clock())

    def issue(self, timestamp: int, context: VerificationContext) -> str:
        """Return the hexadecimal digest for *timestamp* under *context*."""
        if not context.session_secret:
            raise SessionSecretUnavailableException(
                "No session secret available to sign the authenticity token",
                code="CSRF_NO_SECRET",
                context=context.describe(),
            )
        scope = context.scope if self.properties.include_scope else ""
        signature = f"{context.remote_address}{format_timestamp(timestamp)}{context.session_id}{scope}{context.session_secret}"
        return hashlib.new(self.properties.algorithm, signature.encode("utf-8")).hexdigest()

    def render_token(
        self,
        context: VerificationContext,
        memo: MutableMapping[str, Any] | None = None,
    ) -> IssuedToken:
        """Stamp a token with the current time.

        With a per-request *memo*, the first token rendered for the context's
        scope is returned on every later call, so a page that embeds the token
        twice stays consistent.
        """
        key = f"forgery_token:{context.scope}"
        if memo is not None and key in memo:
            return memo[key]

        timestamp = self.now()
        issued = IssuedToken(timestamp=format_timestamp(timestamp), digest=self.issue(timestamp, context))
        if memo is not None:
            memo[key] = issued
        return issued

    def generate_secret(self) -> str:
        return secrets.token_urlsafe(self.properties.secret_bytes)

    async def session_secret(
        self,
        session: HttpSession,
        store: SessionStore | None = None,
        ttl: int = 1800,
    ) -> str:
        """Return the session's secret, creating it once if absent.

        When a *store* is given its compare-and-set picks the winner, so two
        requests racing on a fresh session end up sharing one secret.
        """
        key = self.properties.secret_key
        existing = session.get_attribute(key)
        if existing:
            return str(existing)

        secret = self.generate_secret()
        if store is not None:
            secret = await store.set_attribute_if_absent(session.id, key, secret, ttl)
        secret = session.set_attribute_if_absent(key, secret)
        logger.debug("session_secret_created", session_id=session.id)
        return str(secret)
