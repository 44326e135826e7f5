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
"""WebFilter port: the contract WebFilterChainMiddleware drives.

Requests and responses are typed ``Any`` here; only the Starlette adapter
knows their concrete classes.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any, Protocol, runtime_checkable

# (request) -> awaitable response, i.e. the rest of the chain
CallNext = Callable[..., Coroutine[Any, Any, Any]]


@runtime_checkable
class WebFilter(Protocol):
    """One link of the filter chain, such as the session or forgery filter.

    The chain sorts filters by ``@order``: the session filter wraps the
    forgery filter, which wraps the route handler. A filter may answer on its
    own (a redirect or an error body) instead of calling ``call_next``.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...

    def should_not_filter(self, request: Any) -> bool:
        """``True`` when *request* lies outside the filter's endpoint group."""
        ...
