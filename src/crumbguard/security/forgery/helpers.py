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
"""View helpers that embed an issued token in HTML forms, links and pages.

All HTML helpers return :class:`markupsafe.Markup` so Jinja templates emit
them without double escaping.
"""

from __future__ import annotations

from markupsafe import Markup

from crumbguard.security.forgery.properties import ForgeryProtectionProperties
from crumbguard.security.forgery.types import IssuedToken


def token_params(token: IssuedToken, properties: ForgeryProtectionProperties) -> dict[str, str]:
    """Query parameters carrying *token*, for forms that cannot use POST bodies."""
    if properties.split:
        return {properties.crumb_param: token.digest, properties.timestamp_param: token.timestamp}
    return {properties.token_param: token.token}


def hidden_fields(token: IssuedToken, properties: ForgeryProtectionProperties) -> Markup:
    """Hidden ``<input>`` tags for *token* (two in split form, one otherwise)."""
    tags = [
        Markup('<input type="hidden" name="{}" value="{}"/>').format(name, value)
        for name, value in token_params(token, properties).items()
    ]
    return Markup("\n").join(tags)


def meta_tags(token: IssuedToken, properties: ForgeryProtectionProperties) -> Markup:
    """``csrf-param`` / ``csrf-token`` meta tags for scripts that submit via the header."""
    return Markup('<meta name="csrf-param" content="{}"/>\n<meta name="csrf-token" content="{}"/>').format(
        properties.token_param, token.token
    )
