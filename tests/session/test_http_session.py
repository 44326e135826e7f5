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
"""Tests for HttpSession and Flash."""

from __future__ import annotations

from crumbguard.session.flash import FLASH_KEY, Flash
from crumbguard.session.session import HttpSession


class TestHttpSession:
    def test_new_session_is_modified(self):
        session = HttpSession("s1", is_new=True)
        assert session.is_new
        assert session.modified

    def test_loaded_session_is_not_modified(self):
        session = HttpSession("s1", {"user": "alice"})
        assert not session.modified
        assert session.get_attribute("user") == "alice"

    def test_set_attribute_if_absent_keeps_existing_value(self):
        session = HttpSession("s1", {"secret": "first"})
        assert session.set_attribute_if_absent("secret", "second") == "first"
        assert session.get_attribute("secret") == "first"
        assert not session.modified

    def test_set_attribute_if_absent_stores_new_value(self):
        session = HttpSession("s1", {})
        assert session.set_attribute_if_absent("secret", "fresh") == "fresh"
        assert session.modified

    def test_attribute_names_exclude_metadata(self):
        session = HttpSession("s1", {"user": "alice"})
        assert session.get_attribute_names() == ["user"]

    def test_reset_clears_attributes_and_invalidates(self):
        session = HttpSession("s1", {"user": "alice", "_csrf_token": "abc123"})
        session.reset()
        assert session.invalidated
        assert session.get_attribute("_csrf_token") is None
        assert session.get_attribute_names() == []

    def test_pop_attribute(self):
        session = HttpSession("s1", {"user": "alice"})
        assert session.pop_attribute("user") == "alice"
        assert session.pop_attribute("user") is None


class TestFlash:
    def test_set_warning_and_consume(self):
        session = HttpSession("s1", {})
        Flash(session).set_warning("Form submission timed out. Please resubmit.")
        assert Flash(session).peek("warning") == "Form submission timed out. Please resubmit."
        assert Flash(session).consume() == {"warning": "Form submission timed out. Please resubmit."}
        assert session.get_attribute(FLASH_KEY) is None

    def test_multiple_levels(self):
        session = HttpSession("s1", {})
        flash = Flash(session)
        flash.set("notice", "Saved")
        flash.set_warning("Careful")
        assert flash.consume() == {"notice": "Saved", "warning": "Careful"}

    def test_consume_without_messages(self):
        assert Flash(HttpSession("s1", {})).consume() == {}
