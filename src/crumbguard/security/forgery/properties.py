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
"""Forgery protection configuration properties.

One instance describes one endpoint group: the scope whose tokens are
mutually valid, the verification window and the user-facing messages.
Defaults are resolved once, when the instance is constructed.

YAML structure::

    crumbguard:
      forgery:
        enabled: true
        scope: OrdersController
        window: 3600
        token_form: composite        # or "split" (_crumb + _timestamp)
        include_scope: true
        algorithm: sha1
        secret_bytes: 32
        secret_key: _csrf_token
        token_param: _token
        crumb_param: _crumb
        timestamp_param: _timestamp
        header_name: X-CSRF-Token
        timed_out_message: Form submission timed out. Please resubmit.
        invalid_message: Possible form data tampering. Please resubmit.
        trust_forwarded_for: false
"""

from __future__ import annotations

import dataclasses
import hashlib
from dataclasses import dataclass
from typing import Any

from crumbguard.core.config import config_properties
from crumbguard.kernel.exceptions import ConfigurationException

COMPOSITE = "composite"
SPLIT = "split"

TIMESTAMP_WIDTH = 10
"""Digits in a stamped token's timestamp prefix; parsing is positional."""

MIN_SECRET_BYTES = 6

DEFAULT_WINDOWS: dict[str, int] = {
    SPLIT: 15 * 60,
    COMPOSITE: 60 * 60,
}

DEFAULT_TIMED_OUT_MESSAGE = "Form submission timed out. Please resubmit."
DEFAULT_INVALID_MESSAGE = "Possible form data tampering. Please resubmit."


@config_properties(prefix="crumbguard.forgery")
@dataclass(frozen=True)
class ForgeryProtectionProperties:
    """Configuration for one forgery-protected endpoint group (crumbguard.forgery.*)."""

    enabled: bool = True
    scope: str | None = None
    window: int | None = None
    token_form: str = COMPOSITE
    include_scope: bool = True
    algorithm: str = "sha1"
    secret_bytes: int = 32
    secret_key: str = "_csrf_token"
    token_param: str = "_token"
    crumb_param: str = "_crumb"
    timestamp_param: str = "_timestamp"
    header_name: str = "X-CSRF-Token"
    timed_out_message: str = DEFAULT_TIMED_OUT_MESSAGE
    invalid_message: str = DEFAULT_INVALID_MESSAGE
    trust_forwarded_for: bool = False

    def __post_init__(self) -> None:
        if self.token_form not in DEFAULT_WINDOWS:
            raise ConfigurationException(
                f"Unknown token_form '{self.token_form}'; expected one of {sorted(DEFAULT_WINDOWS)}",
                code="FORGERY_CONFIG",
            )
        if self.algorithm not in hashlib.algorithms_available:
            raise ConfigurationException(f"Unsupported digest algorithm '{self.algorithm}'", code="FORGERY_CONFIG")
        if self.secret_bytes < MIN_SECRET_BYTES:
            raise ConfigurationException(
                f"secret_bytes must be at least {MIN_SECRET_BYTES}, got {self.secret_bytes}",
                code="FORGERY_CONFIG",
            )
        if self.window is None:
            object.__setattr__(self, "window", DEFAULT_WINDOWS[self.token_form])
        if self.scope is None:
            object.__setattr__(self, "scope", "")

    @property
    def split(self) -> bool:
        """``True`` when tokens travel as separate crumb and timestamp fields."""
        return self.token_form == SPLIT

    def scoped_to(self, consumer: Any) -> ForgeryProtectionProperties:
        """Return a copy whose empty scope defaults to *consumer*'s qualified name.

        An explicitly configured scope is kept, which is how two endpoint
        groups are made to accept each other's tokens.
        """
        if self.scope:
            return self
        cls = consumer if isinstance(consumer, type) else type(consumer)
        return self.with_overrides(scope=cls.__qualname__)

    def with_overrides(self, **changes: Any) -> ForgeryProtectionProperties:
        """Return a copy with *changes* applied and defaults re-resolved."""
        if "token_form" in changes and "window" not in changes:
            changes["window"] = None
        return dataclasses.replace(self, **changes)
