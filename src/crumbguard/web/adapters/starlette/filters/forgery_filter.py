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
"""ForgeryProtectionFilter: timestamped authenticity tokens for Starlette apps.

Register one filter per endpoint group, after the ``SessionFilter``::

    store = InMemorySessionStore()
    orders = ForgeryProtectionFilter(
        ForgeryProtectionProperties(),
        consumer=OrdersController,
        session_store=store,
        url_patterns=["/orders*"],
    )
    app = Starlette(
        routes=routes,
        middleware=[Middleware(WebFilterChainMiddleware, filters=[SessionFilter(store), orders])],
    )

On every request the filter exposes :class:`RequestForgeryTokens` as
``request.state.forgery`` so views can embed the token:

* **Safe methods** (GET, HEAD, OPTIONS, TRACE) pass straight through.
* **Unsafe methods** are verified. A failure either redirects to the
  referrer with a flash warning, or resets the session and answers with a
  404 error body.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import structlog
from markupsafe import Markup
from starlette.responses import RedirectResponse

from crumbguard.core.config import Config
from crumbguard.kernel.exceptions import ConfigurationException, InvalidAuthenticityTokenException
from crumbguard.security.forgery.helpers import hidden_fields, meta_tags, token_params
from crumbguard.security.forgery.issuer import TokenIssuer
from crumbguard.security.forgery.properties import ForgeryProtectionProperties
from crumbguard.security.forgery.recovery import RecoveryPolicy
from crumbguard.security.forgery.types import (
    IssuedToken,
    RecoveryAction,
    RecoveryKind,
    VerificationContext,
    VerificationResult,
)
from crumbguard.security.forgery.verifier import TokenVerifier
from crumbguard.session.filter import DEFAULT_TTL
from crumbguard.session.flash import Flash
from crumbguard.session.ports.outbound import SessionStore
from crumbguard.session.session import HttpSession
from crumbguard.web.adapters.starlette.request import build_request_view
from crumbguard.web.errors import global_exception_handler
from crumbguard.web.filters import OncePerRequestFilter
from crumbguard.web.ports.filter import CallNext

logger = structlog.get_logger("crumbguard.web.forgery")


class RequestForgeryTokens:
    """Per-request token accessor for views (``request.state.forgery``).

    The first rendered token is memoized, so every call within one request
    returns the same value.
    """

    def __init__(self, issuer: TokenIssuer, context: VerificationContext) -> None:
        self._issuer = issuer
        self._context = context
        self._memo: dict[str, IssuedToken] = {}

    @property
    def properties(self) -> ForgeryProtectionProperties:
        return self._issuer.properties

    def issued(self) -> IssuedToken:
        return self._issuer.render_token(self._context, self._memo)

    def token(self) -> str:
        """Composite token, for headers and single hidden fields."""
        return self.issued().token

    def params(self) -> dict[str, str]:
        return token_params(self.issued(), self.properties)

    def hidden_fields(self) -> Markup:
        return hidden_fields(self.issued(), self.properties)

    def meta_tags(self) -> Markup:
        return meta_tags(self.issued(), self.properties)


class ForgeryProtectionFilter(OncePerRequestFilter):
    """Verifies authenticity tokens on state-changing requests.

    Ordering: runs after the SessionFilter (``HIGHEST_PRECEDENCE + 150``)
    whose ``request.state.session`` it relies on.

    An unset scope defaults to *consumer*'s qualified name. A filter that
    binds tokens to a scope but has neither raises ``ConfigurationException``,
    so two endpoint groups never share tokens by accident.
    """

    __crumbguard_order__ = -50

    def __init__(
        self,
        properties: ForgeryProtectionProperties,
        *,
        consumer: Any = None,
        session_store: SessionStore | None = None,
        session_ttl: int = DEFAULT_TTL,
        url_patterns: list[str] | None = None,
        exclude_patterns: list[str] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if consumer is not None:
            properties = properties.scoped_to(consumer)
        if properties.enabled and properties.include_scope and not properties.scope:
            raise ConfigurationException(
                "ForgeryProtectionFilter needs a scope: set crumbguard.forgery.scope or pass consumer=",
                code="FORGERY_CONFIG",
            )
        self.properties = properties
        self.issuer = TokenIssuer(properties, clock=clock)
        self.verifier = TokenVerifier(self.issuer)
        self.recovery = RecoveryPolicy(properties)
        self._session_store = session_store
        self._session_ttl = session_ttl
        if url_patterns is not None:
            self.url_patterns = list(url_patterns)
        if exclude_patterns is not None:
            self.exclude_patterns = list(exclude_patterns)

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        consumer: Any = None,
        **kwargs: Any,
    ) -> ForgeryProtectionFilter:
        """Bind ``crumbguard.forgery.*`` and default the scope to *consumer*'s name."""
        properties = config.bind(ForgeryProtectionProperties)
        kwargs.setdefault("session_ttl", int(config.get("crumbguard.session.ttl", DEFAULT_TTL)))
        return cls(properties, consumer=consumer, **kwargs)

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        if not self.properties.enabled:
            return await call_next(request)

        session: HttpSession = request.state.session
        view = await build_request_view(request, trust_forwarded_for=self.properties.trust_forwarded_for)
        secret = await self.issuer.session_secret(session, self._session_store, self._session_ttl)
        context = VerificationContext(
            remote_address=view.remote_address,
            session_id=session.id,
            session_secret=secret,
            scope=self.properties.scope or "",
        )
        request.state.forgery = RequestForgeryTokens(self.issuer, context)

        result = self.verifier.verify(view, context)
        action = self.recovery.recover(result, view.referer)

        if action.kind is RecoveryKind.PROCEED:
            return await call_next(request)
        if action.kind is RecoveryKind.REDIRECT:
            return self._redirect(session, action)
        return await self._reset_and_fail(request, session, action, result)

    def _redirect(self, session: HttpSession, action: RecoveryAction) -> Any:
        if action.flash_message:
            Flash(session).set_warning(action.flash_message)
        return RedirectResponse(url=action.redirect_url or "/", status_code=302)

    async def _reset_and_fail(
        self,
        request: Any,
        session: HttpSession,
        action: RecoveryAction,
        result: VerificationResult,
    ) -> Any:
        session.reset()
        exc = InvalidAuthenticityTokenException(
            action.error_message or "Invalid authenticity token",
            code=f"CSRF_{result.outcome.name}",
        )
        logger.debug("session_reset", session_id=session.id, outcome=result.outcome.value, path=request.url.path)
        return await global_exception_handler(request, exc)
