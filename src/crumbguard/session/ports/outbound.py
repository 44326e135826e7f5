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
"""SessionStore port: where SessionFilter keeps session data between requests."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Persistence for session attribute dicts, keyed by session id.

    ``ttl`` is in seconds and restarts on every ``save``. ``delete`` is how
    a forgery failure's session reset becomes permanent.
    ``set_attribute_if_absent`` stores *value* under *name* only when the
    session has none yet and returns whichever value is now live; the
    forgery secret relies on it so racing first requests agree on one secret.
    """

    async def get(self, session_id: str) -> dict[str, Any] | None: ...

    async def save(self, session_id: str, data: dict[str, Any], ttl: int) -> None: ...

    async def delete(self, session_id: str) -> None: ...

    async def exists(self, session_id: str) -> bool: ...

    async def set_attribute_if_absent(self, session_id: str, name: str, value: Any, ttl: int) -> Any: ...
