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
"""Flash: one-shot user-facing notices carried in the session."""

from __future__ import annotations

from crumbguard.session.session import HttpSession

FLASH_KEY = "flash"


class Flash:
    """Reads and writes flash messages stored under ``session["flash"]``.

    Messages are keyed by level (``warning``, ``notice`` ...) and removed
    when consumed, so they survive exactly one redirect.
    """

    def __init__(self, session: HttpSession) -> None:
        self._session = session

    def set(self, level: str, message: str) -> None:
        messages = dict(self._session.get_attribute(FLASH_KEY) or {})
        messages[level] = message
        self._session.set_attribute(FLASH_KEY, messages)

    def set_warning(self, message: str) -> None:
        self.set("warning", message)

    def peek(self, level: str) -> str | None:
        """Return the message for *level* without consuming it."""
        messages = self._session.get_attribute(FLASH_KEY) or {}
        return messages.get(level)

    def consume(self) -> dict[str, str]:
        """Return all pending messages and clear them."""
        return dict(self._session.pop_attribute(FLASH_KEY) or {})
