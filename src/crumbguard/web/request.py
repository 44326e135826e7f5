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
"""RequestView: an immutable, framework-agnostic snapshot of a request.

The forgery protection core reads requests only through this view, so it
never touches Starlette types and can be exercised with plain dicts.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RequestAccessor(Protocol):
    """What the verifier needs to know about an incoming request."""

    @property
    def method(self) -> str: ...

    @property
    def remote_address(self) -> str: ...

    @property
    def referer(self) -> str | None: ...

    def param(self, name: str) -> str | None: ...

    def header(self, name: str) -> str | None: ...


@dataclass(frozen=True)
class RequestView:
    """Concrete :class:`RequestAccessor` built from already-parsed request data.

    Header lookups are case-insensitive; blank parameter and header values
    are reported as absent.
    """

    method: str
    remote_address: str
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", {k.lower(): v for k, v in self.headers.items()})

    @property
    def referer(self) -> str | None:
        return self.header("referer")

    def param(self, name: str) -> str | None:
        value = self.params.get(name)
        if value is None:
            return None
        value = str(value)
        return value or None

    def header(self, name: str) -> str | None:
        return self.headers.get(name.lower()) or None
