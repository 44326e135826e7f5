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
"""OncePerRequestFilter: path-scoped base class for crumbguard web filters.

A forgery filter guards one endpoint group, so the group is described by
glob patterns over ``request.url.path``. Only that attribute is read, which
keeps this module free of Starlette imports.
"""

from __future__ import annotations

import abc
from collections.abc import Iterable
from fnmatch import fnmatch
from typing import Any

from crumbguard.web.ports.filter import CallNext


def _matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch(path, pattern) for pattern in patterns)


class OncePerRequestFilter(abc.ABC):
    """Base for filters that run at most once per request on selected paths.

    Attributes:
        url_patterns: Paths the filter guards, e.g. ``["/orders*"]``. Empty
            means every path.
        exclude_patterns: Paths carved out of ``url_patterns``, e.g. a
            webhook that authenticates by signature instead of a form token.
    """

    url_patterns: list[str] = []
    exclude_patterns: list[str] = []

    def applies_to(self, path: str) -> bool:
        if self.url_patterns and not _matches_any(path, self.url_patterns):
            return False
        return not _matches_any(path, self.exclude_patterns)

    def should_not_filter(self, request: Any) -> bool:
        return not self.applies_to(request.url.path)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Handle *request*; return ``await call_next(request)`` to let it through."""
